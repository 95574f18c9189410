"""
Bencode decoder for BitTorrent metainfo and tracker responses.

Every parser takes the input and the position it starts at and returns a
DecodeOutcome: the value plus the number of bytes its syntax spans. Nothing
is shared between calls, so containers advance by exactly what each child
reports.
"""
import enum
import re

from .structure import (
    BencodeDict,
    BencodeInt,
    BencodeList,
    BencodeString,
    DecodeOutcome,
)

__all__ = [
    "BencodeDecodeError",
    "MalformedInput",
    "DEFAULT_MAX_DEPTH",
    "MAX_INT_DIGITS",
    "MAX_LENGTH_DIGITS",
    "decode",
    "decode_prefix",
    "decode_value",
    "decode_string",
    "decode_int",
    "decode_list",
    "decode_dict",
]

# Containers nested deeper than this are rejected instead of growing the stack.
DEFAULT_MAX_DEPTH = 256

# Longest accepted integer payload, in digits. Stays under the interpreter's
# int/str conversion limit so huge integers fail as malformed input.
MAX_INT_DIGITS = 4000

# No string longer than 10**20 bytes can ever be satisfied by real input.
MAX_LENGTH_DIGITS = 20

_LENGTH_RE = re.compile(rb"[0-9]+")
_INT_RE = re.compile(rb"-?[1-9][0-9]*|0")


class BencodeDecodeError(ValueError):
    """Custom exception for Bencode decoding errors."""
    pass


class MalformedInput(BencodeDecodeError):
    """The input breaks the bencode grammar at `position`."""

    def __init__(self, reason: str, position: int):
        super().__init__(f"{reason} at position {position}")
        self.reason = reason
        self.position = position


class _DictState(enum.Enum):
    AWAITING_KEY = enum.auto()
    AWAITING_VALUE = enum.auto()


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if not isinstance(data, bytes):
        raise TypeError(f"Cannot decode object of type {type(data)}")
    return data


def _lead(data: bytes, pos: int) -> bytes:
    return data[pos:pos + 1]


# --------------------------
# Primitive parsers
# --------------------------

def decode_string(data: bytes, start: int) -> DecodeOutcome:
    """Parses `<len>:<bytes>` starting at the first length digit."""
    colon = data.find(b":", start)
    if colon == -1:
        raise MalformedInput("missing ':' after string length", start)

    length_bytes = data[start:colon]
    if not _LENGTH_RE.fullmatch(length_bytes):
        raise MalformedInput(f"invalid string length {length_bytes!r}", start)

    if len(length_bytes) > MAX_LENGTH_DIGITS:
        raise MalformedInput(f"string length has more than {MAX_LENGTH_DIGITS} digits", start)

    try:
        length = int(length_bytes)
    except ValueError as exc:
        raise MalformedInput(f"invalid string length {length_bytes!r}", start) from exc

    begin = colon + 1
    end = begin + length
    if end > len(data):
        raise MalformedInput(
            f"string declares {length} bytes but only {len(data) - begin} remain",
            begin,
        )

    return DecodeOutcome(BencodeString(data[begin:end]), end - start)


def decode_int(data: bytes, start: int) -> DecodeOutcome:
    """Parses `i<digits>e` starting at the `i`."""
    if _lead(data, start) != b"i":
        raise MalformedInput("expected 'i'", start)

    end = data.find(b"e", start + 1)
    if end == -1:
        raise MalformedInput("unterminated integer", start)

    number_bytes = data[start + 1:end]
    if number_bytes.startswith(b"-0"):
        raise MalformedInput("negative zero is not allowed", start + 1)
    if number_bytes.startswith(b"0") and number_bytes != b"0":
        raise MalformedInput("integer has leading zeroes", start + 1)
    if not _INT_RE.fullmatch(number_bytes):
        raise MalformedInput(f"invalid integer {number_bytes!r}", start + 1)

    if len(number_bytes.lstrip(b"-")) > MAX_INT_DIGITS:
        raise MalformedInput(f"integer has more than {MAX_INT_DIGITS} digits", start + 1)

    try:
        num = int(number_bytes)
    except ValueError as exc:
        raise MalformedInput("invalid integer format", start + 1) from exc

    return DecodeOutcome(BencodeInt(num), end - start + 1)


# --------------------------
# Container parsers
# --------------------------

def decode_list(data: bytes, start: int, *, depth=0,
                max_depth=DEFAULT_MAX_DEPTH,
                allow_duplicate_keys=True) -> DecodeOutcome:
    """Parses `l<value>*e` starting at the `l`."""
    if _lead(data, start) != b"l":
        raise MalformedInput("expected 'l'", start)
    if depth >= max_depth:
        raise MalformedInput(f"nesting deeper than {max_depth} levels", start)

    items = []
    pos = start + 1
    while True:
        lead = _lead(data, pos)
        if not lead:
            raise MalformedInput("unterminated list", pos)
        if lead == b"e":
            return DecodeOutcome(BencodeList(items), pos + 1 - start)

        outcome = decode_value(
            data, pos,
            depth=depth + 1,
            max_depth=max_depth,
            allow_duplicate_keys=allow_duplicate_keys,
        )
        items.append(outcome.value)
        pos += outcome.consumed


def decode_dict(data: bytes, start: int, *, depth=0,
                max_depth=DEFAULT_MAX_DEPTH,
                allow_duplicate_keys=True) -> DecodeOutcome:
    """
    Parses `d(<string><value>)*e` starting at the `d`.

    Keys come back sorted by raw bytes no matter how they were ordered in
    the input. A repeated key keeps the later value unless
    `allow_duplicate_keys` is false, in which case it is an error.
    """
    if _lead(data, start) != b"d":
        raise MalformedInput("expected 'd'", start)
    if depth >= max_depth:
        raise MalformedInput(f"nesting deeper than {max_depth} levels", start)

    entries = {}
    state = _DictState.AWAITING_KEY
    key = None
    key_pos = start
    pos = start + 1

    while True:
        lead = _lead(data, pos)

        if state is _DictState.AWAITING_KEY:
            if not lead:
                raise MalformedInput("unterminated dictionary", pos)
            if lead == b"e":
                break
            # keys MUST be strings
            if not lead.isdigit():
                raise MalformedInput("dictionary key must be a byte string", pos)

            outcome = decode_string(data, pos)
            key = outcome.value.value
            key_pos = pos
            pos += outcome.consumed
            state = _DictState.AWAITING_VALUE
            continue

        if not lead:
            raise MalformedInput("unterminated dictionary", pos)
        if lead == b"e":
            raise MalformedInput(f"dictionary key {key!r} has no value", pos)

        outcome = decode_value(
            data, pos,
            depth=depth + 1,
            max_depth=max_depth,
            allow_duplicate_keys=allow_duplicate_keys,
        )
        if key in entries and not allow_duplicate_keys:
            raise MalformedInput(f"duplicate dictionary key {key!r}", key_pos)

        entries[key] = outcome.value
        pos += outcome.consumed
        state = _DictState.AWAITING_KEY

    return DecodeOutcome(BencodeDict(entries), pos + 1 - start)


# --------------------------
# Dispatch
# --------------------------

def decode_value(data: bytes, start: int = 0, *, depth=0,
                 max_depth=DEFAULT_MAX_DEPTH,
                 allow_duplicate_keys=True) -> DecodeOutcome:
    """Picks the production from the byte at `start` and parses it."""
    lead = _lead(data, start)

    if not lead:
        raise MalformedInput("unexpected end of input", start)

    if lead == b"i":
        return decode_int(data, start)

    if lead.isdigit():  # Bencode strings start with length, which is a digit
        return decode_string(data, start)

    if lead == b"l":
        return decode_list(data, start, depth=depth, max_depth=max_depth,
                           allow_duplicate_keys=allow_duplicate_keys)

    if lead == b"d":
        return decode_dict(data, start, depth=depth, max_depth=max_depth,
                           allow_duplicate_keys=allow_duplicate_keys)

    raise MalformedInput(f"invalid token {lead!r}", start)


def decode_prefix(data, *, max_depth=DEFAULT_MAX_DEPTH,
                  allow_duplicate_keys=True) -> DecodeOutcome:
    """Decodes the value at the start of `data` and reports how much it spans."""
    return decode_value(
        _as_bytes(data), 0,
        max_depth=max_depth,
        allow_duplicate_keys=allow_duplicate_keys,
    )


def decode(data, *, strict=False, max_depth=DEFAULT_MAX_DEPTH,
           allow_duplicate_keys=True):
    """
    Convenience function to decode Bencoded data.

    Bytes after the first complete value are ignored unless `strict` is set.
    """
    data = _as_bytes(data)
    outcome = decode_prefix(
        data,
        max_depth=max_depth,
        allow_duplicate_keys=allow_duplicate_keys,
    )
    if strict and outcome.consumed != len(data):
        raise MalformedInput("trailing data after value", outcome.consumed)
    return outcome.value
