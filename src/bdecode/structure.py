"""
Data structures for representing Bencoded types.
"""
from types import MappingProxyType
from typing import NamedTuple

__all__ = [
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "DecodeOutcome",
    "to_python",
]


class BencodeType:
    """Base class for all Bencode data types."""
    __slots__ = ("value",)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.value == other.value

    def __setattr__(self, name, value):
        if hasattr(self, "value"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    __hash__ = None


class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    __slots__ = ()

    def __init__(self, value: int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        self.value = value

    def __hash__(self):
        return hash((BencodeInt, self.value))

    def __repr__(self):
        return f"BencodeInt({self.value})"


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    __slots__ = ()

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("BencodeString requires bytes.")
        self.value = bytes(value)

    @property
    def text(self):
        """The payload as text, or None when it is not valid UTF-8."""
        try:
            return self.value.decode("utf-8")
        except UnicodeDecodeError:
            return None

    def __hash__(self):
        return hash((BencodeString, self.value))

    def __repr__(self):
        return f"BencodeString({self.value!r})"


class BencodeList(BencodeType):
    """Represents a Bencoded list. Items are frozen into a tuple."""
    __slots__ = ()

    def __init__(self, value):
        if not isinstance(value, (list, tuple)):
            raise TypeError("BencodeList requires a list.")
        for item in value:
            if not isinstance(item, BencodeType):
                raise TypeError("BencodeList items must be Bencode types.")
        self.value = tuple(value)

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def __getitem__(self, index):
        return self.value[index]

    def __repr__(self):
        return f"BencodeList({list(self.value)!r})"


class BencodeDict(BencodeType):
    """
    Represents a Bencoded dictionary.

    Keys are raw bytes and are always iterated in ascending byte order,
    whatever order they were given in.
    """
    __slots__ = ()

    def __init__(self, value: dict):
        if not isinstance(value, dict):
            raise TypeError("BencodeDict requires a dict.")
        # keys must be bytes (bencode requirement)
        for k, v in value.items():
            if not isinstance(k, (bytes, bytearray)):
                raise TypeError("BencodeDict keys must be bytes.")
            if not isinstance(v, BencodeType):
                raise TypeError("BencodeDict values must be Bencode types.")
        ordered = {bytes(k): value[k] for k in sorted(value, key=bytes)}
        self.value = MappingProxyType(ordered)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return dict(self.value) == dict(other.value)

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def __contains__(self, key):
        return key in self.value

    def __getitem__(self, key):
        return self.value[key]

    def get(self, key, default=None):
        return self.value.get(key, default)

    def keys(self):
        return self.value.keys()

    def items(self):
        return self.value.items()

    def __repr__(self):
        return f"BencodeDict({dict(self.value)!r})"


class DecodeOutcome(NamedTuple):
    """A decoded value and the number of input bytes its syntax spans."""
    value: BencodeType
    consumed: int


def to_python(obj):
    """Unwraps a Bencode tree into plain bytes, int, list and dict objects."""
    if isinstance(obj, (BencodeInt, BencodeString)):
        return obj.value
    if isinstance(obj, BencodeList):
        return [to_python(item) for item in obj.value]
    if isinstance(obj, BencodeDict):
        return {k: to_python(v) for k, v in obj.value.items()}
    raise TypeError(f"Not a Bencode type: {type(obj)}")
