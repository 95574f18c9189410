"""
Bencode package for decoding (and re-encoding) BitTorrent data.
"""
from .decoder import (
    DEFAULT_MAX_DEPTH,
    BencodeDecodeError,
    MalformedInput,
    decode,
    decode_prefix,
)
from .encoder import encode
from .render import dumps
from .structure import (
    BencodeDict,
    BencodeInt,
    BencodeList,
    BencodeString,
    BencodeType,
    DecodeOutcome,
    to_python,
)

__all__ = [
    'decode', 'decode_prefix', 'encode', 'dumps', 'to_python',
    'BencodeDecodeError', 'MalformedInput', 'DEFAULT_MAX_DEPTH',
    'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
    'DecodeOutcome',
]
