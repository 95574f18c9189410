"""
Structured-text (JSON) rendering of decoded values.
"""
import json

from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString

__all__ = ["BINARY_MODES", "RenderError", "to_jsonable", "dumps"]

# How byte strings that are not valid UTF-8 are written out.
BINARY_MODES = ("hex", "latin1")


class RenderError(ValueError):
    """The value has no faithful JSON form, e.g. two keys render the same."""
    pass


def _render_bytes(raw: bytes, binary: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        if binary == "latin1":
            return raw.decode("latin-1")
        return raw.hex()


def to_jsonable(obj, *, binary="hex"):
    """Converts a Bencode tree into objects the json module can serialize."""
    if binary not in BINARY_MODES:
        raise ValueError(f"Unknown binary mode {binary!r}")

    if isinstance(obj, BencodeInt):
        return obj.value
    if isinstance(obj, BencodeString):
        return _render_bytes(obj.value, binary)
    if isinstance(obj, BencodeList):
        return [to_jsonable(item, binary=binary) for item in obj.value]
    if isinstance(obj, BencodeDict):
        rendered = {}
        for k, v in obj.value.items():
            name = _render_bytes(k, binary)
            if name in rendered:
                raise RenderError(f"Dictionary key {k!r} renders as {name!r}, which another key already uses")
            rendered[name] = to_jsonable(v, binary=binary)
        return rendered
    raise TypeError(f"Not a Bencode type: {type(obj)}")


def dumps(obj, *, indent=None, binary="hex") -> str:
    """Renders a Bencode tree as JSON, keeping dictionary key order."""
    separators = (",", ":") if indent is None else None
    return json.dumps(
        to_jsonable(obj, binary=binary),
        indent=indent,
        separators=separators,
        ensure_ascii=False,
    )
