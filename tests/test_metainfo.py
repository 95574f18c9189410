import hashlib

import pytest

from bdecode import MalformedInput, encode
from torrent.metainfo import MetainfoError, TorrentMeta, extract_info_bytes

ANNOUNCE = "http://tracker.example/announce"
PIECES = b"\x01" * 20 + b"\x02" * 20 + b"\x03" * 20


def single_file_info(**overrides):
    info = {
        "name": "sample.txt",
        "length": 92063,
        "piece length": 32768,
        "pieces": PIECES,
    }
    info.update(overrides)
    return info


def test_metainfo_load():
    info = single_file_info()
    raw = encode({"announce": ANNOUNCE, "info": info})

    meta = TorrentMeta(raw)
    print("Parsed TorrentMeta:", meta)

    assert meta.announce == ANNOUNCE
    assert meta.name == "sample.txt"
    assert meta.length == 92063
    assert meta.piece_length == 32768
    assert meta.pieces == [b"\x01" * 20, b"\x02" * 20, b"\x03" * 20]
    assert meta.files == [{"length": 92063, "path": "sample.txt"}]
    assert not meta.is_multi
    assert meta.info_hash == hashlib.sha1(encode(info)).digest()


def test_metainfo_from_path(tmp_path):
    path = tmp_path / "sample.torrent"
    path.write_bytes(encode({"announce": ANNOUNCE, "info": single_file_info()}))

    meta = TorrentMeta.from_path(path)
    assert meta.length == 92063


def test_multi_file_length_is_summed():
    info = {
        "name": "dir",
        "piece length": 4,
        "pieces": b"\x00" * 40,
        "files": [
            {"length": 3, "path": ["a", "b.txt"]},
            {"length": 4, "path": ["c.txt"]},
        ],
    }
    meta = TorrentMeta(encode({
        "announce": ANNOUNCE,
        "announce-list": [[ANNOUNCE], ["udp://backup.example:80"]],
        "info": info,
    }))

    assert meta.is_multi
    assert meta.length == 7
    assert [f["path"] for f in meta.files] == ["a/b.txt", "c.txt"]
    assert meta.announce_list == [[ANNOUNCE], ["udp://backup.example:80"]]


def test_info_hash_uses_wire_bytes():
    # keys deliberately out of order
    info_raw = b"d4:name1:a6:lengthi5e6:pieces20:" + b"x" * 20 + b"12:piece lengthi4ee"
    raw = b"d4:info" + info_raw + b"8:announce" + encode(ANNOUNCE) + b"e"

    assert extract_info_bytes(raw) == info_raw

    meta = TorrentMeta(raw)
    assert meta.info_hash == hashlib.sha1(info_raw).digest()
    assert meta.info_hash != hashlib.sha1(encode(meta.info)).digest()


def test_summary_lines():
    meta = TorrentMeta(encode({"announce": ANNOUNCE, "info": single_file_info()}))
    lines = list(meta.summary_lines())

    assert lines[0] == f"Tracker URL: {ANNOUNCE}"
    assert lines[1] == "Length: 92063"
    assert lines[2] == f"Info Hash: {meta.info_hash.hex()}"
    assert lines[3] == "Piece Length: 32768"
    assert lines[4] == "Piece Hashes:"
    assert lines[5:] == ["01" * 20, "02" * 20, "03" * 20]


@pytest.mark.parametrize("doc", [
    {"info": single_file_info()},
    {"announce": ANNOUNCE},
    {"announce": 5, "info": single_file_info()},
    {"announce": ANNOUNCE, "info": "not a dict"},
    {"announce": ANNOUNCE, "info": {"name": "x", "piece length": 4, "pieces": PIECES}},
    {"announce": ANNOUNCE, "info": single_file_info(pieces=b"\x00" * 19)},
    {"announce": ANNOUNCE, "info": single_file_info(**{"piece length": 0})},
    [ANNOUNCE],
])
def test_missing_or_mistyped_fields(doc):
    with pytest.raises(MetainfoError):
        TorrentMeta(encode(doc))


def test_malformed_file_is_a_decode_error():
    with pytest.raises(MalformedInput):
        TorrentMeta(b"d8:announce3:url4:infod")


def test_file_path_components_must_be_strings():
    info = {
        "name": "dir",
        "piece length": 4,
        "pieces": b"\x00" * 20,
        "files": [{"length": 3, "path": ["a", 5, "b.txt"]}],
    }
    with pytest.raises(MetainfoError):
        TorrentMeta(encode({"announce": ANNOUNCE, "info": info}))
