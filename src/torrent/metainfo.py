import hashlib
from pathlib import Path

from bdecode import BencodeDict, BencodeInt, BencodeList, BencodeString, decode
from bdecode.decoder import MalformedInput, decode_string, decode_value

PIECE_HASH_LEN = 20


class MetainfoError(ValueError):
    """The decoded data does not have the shape of a torrent metainfo file."""
    pass


def extract_info_bytes(raw: bytes) -> bytes:
    """
    Extract the exact bencoded 'info' dictionary byte slice.

    Walks the top-level dictionary with the decoder's consumed lengths, so the
    slice is the wire form even when the file's keys are not sorted.
    """
    if raw[:1] != b"d":
        raise MetainfoError("Invalid torrent: root must be a dictionary")

    info = None
    pos = 1
    while raw[pos:pos + 1] != b"e":
        if not raw[pos:pos + 1]:
            raise MalformedInput("unterminated dictionary", pos)
        key = decode_string(raw, pos)
        pos += key.consumed
        value = decode_value(raw, pos, depth=1)
        # a repeated key keeps its last value, same as decode()
        if key.value.value == b"info":
            info = raw[pos:pos + value.consumed]
        pos += value.consumed

    if info is None:
        raise MetainfoError("Torrent missing 'info' dictionary")
    return info


def _field(mapping: BencodeDict, key: bytes, kind, where: str):
    value = mapping.get(key)
    if value is None:
        raise MetainfoError(f"Torrent missing '{where}'")
    if not isinstance(value, kind):
        raise MetainfoError(f"Torrent field '{where}' has the wrong type")
    return value


def _text(value: BencodeString, where: str) -> str:
    text = value.text
    if text is None:
        raise MetainfoError(f"Torrent field '{where}' is not valid UTF-8")
    return text


class TorrentMeta:
    def __init__(self, raw: bytes):
        root = decode(raw)
        if not isinstance(root, BencodeDict):
            raise MetainfoError("Invalid torrent: root must be a dictionary")

        self.data = root

        # ----------- exact info bytes for the info hash -----------
        self.info_bytes = extract_info_bytes(raw)
        self.info_hash = hashlib.sha1(self.info_bytes).digest()

        # ------------------ INFO ------------------
        self.info = _field(root, b"info", BencodeDict, "info")

        # ------------------ NAME ------------------
        name_b = self.info.get(b"name")
        self.name = name_b.text if isinstance(name_b, BencodeString) else None

        # ------------------ ANNOUNCE URL ------------------
        self.announce = _text(_field(root, b"announce", BencodeString, "announce"), "announce")

        # ------------------ ANNOUNCE-LIST ------------------
        self.announce_list = None
        ann_list_b = root.get(b"announce-list")

        if isinstance(ann_list_b, BencodeList):
            tiers = []
            for tier in ann_list_b:
                if not isinstance(tier, BencodeList):
                    continue
                urls = [u.text for u in tier if isinstance(u, BencodeString) and u.text is not None]
                if urls:
                    tiers.append(urls)
            if tiers:
                self.announce_list = tiers

        # ------------------ PIECE LENGTH ------------------
        self.piece_length = _field(self.info, b"piece length", BencodeInt, "info.piece length").value
        if self.piece_length <= 0:
            raise MetainfoError("Torrent field 'info.piece length' must be positive")

        # ------------------ PIECES ------------------
        raw_pieces = _field(self.info, b"pieces", BencodeString, "info.pieces").value
        if len(raw_pieces) % PIECE_HASH_LEN:
            raise MetainfoError(f"Torrent field 'info.pieces' is not a multiple of {PIECE_HASH_LEN} bytes")
        self.pieces = [raw_pieces[i:i + PIECE_HASH_LEN] for i in range(0, len(raw_pieces), PIECE_HASH_LEN)]

        # ------------------ FILES ------------------
        self.is_multi = b"files" in self.info
        if self.is_multi:
            self.files = []
            for f_entry in _field(self.info, b"files", BencodeList, "info.files"):
                if not isinstance(f_entry, BencodeDict):
                    raise MetainfoError("Torrent field 'info.files' must hold dictionaries")
                length = _field(f_entry, b"length", BencodeInt, "info.files.length").value
                parts = []
                for p in _field(f_entry, b"path", BencodeList, "info.files.path"):
                    if not isinstance(p, BencodeString):
                        raise MetainfoError("Torrent field 'info.files.path' must hold strings")
                    parts.append(_text(p, "info.files.path"))
                self.files.append({"length": length, "path": "/".join(parts)})
        else:
            length = _field(self.info, b"length", BencodeInt, "info.length").value
            self.files = [{"length": length, "path": self.name}]

        self.length = sum(f["length"] for f in self.files)
        self.num_pieces = len(self.pieces)

    @classmethod
    def from_path(cls, path) -> "TorrentMeta":
        return cls(Path(path).read_bytes())

    def summary_lines(self):
        """Lines printed by the `info` command."""
        yield f"Tracker URL: {self.announce}"
        yield f"Length: {self.length}"
        yield f"Info Hash: {self.info_hash.hex()}"
        yield f"Piece Length: {self.piece_length}"
        yield "Piece Hashes:"
        for piece in self.pieces:
            yield piece.hex()

    def __repr__(self):
        return (
            f"TorrentMeta(name={self.name!r}, files={len(self.files)}, pieces={self.num_pieces}, "
            f"multi={self.is_multi}, announce={self.announce!r})"
        )
