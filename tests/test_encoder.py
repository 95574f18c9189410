import pytest

from bdecode.encoder import encode, encode_dict, encode_int
from bdecode.structure import BencodeDict, BencodeInt, BencodeList, BencodeString


def test_plain_python_values():
    assert encode(0) == b"i0e"
    assert encode(-42) == b"i-42e"
    assert encode("spam") == b"4:spam"
    assert encode("é") == b"2:\xc3\xa9"
    assert encode(b"") == b"0:"
    assert encode([1, "x"]) == b"li1e1:xe"
    assert encode((1,)) == b"li1ee"


def test_dict_keys_written_in_byte_order():
    assert encode({"b": 1, "a": [1, "x"]}) == b"d1:ali1e1:xe1:bi1ee"
    assert encode_dict({b"\xff": 1, "B": 2, b"a": 3}) == b"d1:Bi2e1:ai3e1:\xffi1ee"


def test_bencode_types():
    value = BencodeDict({
        b"list": BencodeList([BencodeInt(3), BencodeString(b"\x00")]),
        b"int": BencodeInt(7),
    })
    assert encode(value) == b"d3:inti7e4:listli3e1:\x00ee"


def test_big_int():
    assert encode_int(2 ** 70) == b"i1180591620717411303424e"


@pytest.mark.parametrize("obj", [True, 1.5, None, {1: 2}, object()])
def test_rejects_unsupported_types(obj):
    with pytest.raises(TypeError):
        encode(obj)


def test_rejects_keys_that_collide_as_bytes():
    with pytest.raises(ValueError):
        encode({"a": 1, b"a": 2})
