"""
Bencode encoder, the inverse of the decoder.

Output is canonical: dictionary keys are written in ascending byte order.
"""
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString

__all__ = [
    "encode",
    "encode_int",
    "encode_bytes",
    "encode_str",
    "encode_list",
    "encode_dict",
]


def encode(obj) -> bytes:
    """Encodes a Python object or BencodeType into bencoded bytes."""

    if isinstance(obj, bool):
        raise TypeError("Cannot bencode a bool")

    if isinstance(obj, (int, BencodeInt)):
        return encode_int(obj if isinstance(obj, int) else obj.value)

    if isinstance(obj, str):
        return encode_str(obj)

    if isinstance(obj, (bytes, bytearray, BencodeString)):
        return encode_bytes(obj.value if isinstance(obj, BencodeString) else bytes(obj))

    if isinstance(obj, (list, tuple, BencodeList)):
        return encode_list(obj.value if isinstance(obj, BencodeList) else obj)

    if isinstance(obj, (dict, BencodeDict)):
        return encode_dict(obj.value if isinstance(obj, BencodeDict) else obj)

    raise TypeError(f"Cannot bencode object of type {type(obj)}")


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    return b"i%de" % n


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return b"%d:" % len(b) + b


def encode_str(s: str) -> bytes:
    """Encodes a string as UTF-8 bencoded bytes."""
    return encode_bytes(s.encode("utf-8"))


def encode_list(items) -> bytes:
    """Encodes a list to bencoded bytes (e.g., l4:spami3ee)."""
    return b"l" + b"".join(encode(x) for x in items) + b"e"


def _key_to_bytes(key) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    if isinstance(key, BencodeString):
        return key.value
    raise TypeError(f"Dictionary keys must be strings, got {type(key)}")


def encode_dict(d) -> bytes:
    """Encodes a mapping to bencoded bytes (e.g., d3:cow3:moo4:spam4:eggse)."""
    pairs = {}
    for key, value in d.items():
        key_bytes = _key_to_bytes(key)
        if key_bytes in pairs:
            raise ValueError(f"Duplicate dictionary key {key_bytes!r}")
        pairs[key_bytes] = value

    parts = [b"d"]
    for key_bytes in sorted(pairs):
        parts.append(encode_bytes(key_bytes))
        parts.append(encode(pairs[key_bytes]))
    parts.append(b"e")
    return b"".join(parts)
