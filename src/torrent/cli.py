"""
Command line surface: `decode <value>` and `info <path-or-url>`.
"""
import argparse
import asyncio
import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from bdecode import BencodeDecodeError, decode, dumps
from bdecode.render import BINARY_MODES, RenderError

from .metainfo import MetainfoError, TorrentMeta
from .source import MAX_INPUT_BYTES, SourceError, load_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    name: str
    argument: str
    max_size: int = MAX_INPUT_BYTES
    indent: Optional[int] = None
    binary: str = "hex"
    strict: bool = False
    verbose: bool = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bdecode",
        description="Decode bencoded values and inspect torrent metainfo files.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")
    parser.add_argument("--max-size", type=int, default=MAX_INPUT_BYTES,
                        help="refuse inputs larger than this many bytes")

    sub = parser.add_subparsers(dest="name", required=True)

    dec = sub.add_parser("decode", help="decode one bencoded value and print it as JSON")
    dec.add_argument("argument", metavar="VALUE")
    dec.add_argument("--indent", type=int, default=None)
    dec.add_argument("--binary", choices=BINARY_MODES, default="hex",
                     help="how to print byte strings that are not UTF-8")
    dec.add_argument("--strict", action="store_true", help="reject trailing data after the value")

    info = sub.add_parser("info", help="print the tracker URL and length of a torrent file")
    info.add_argument("argument", metavar="TORRENT", help="path or http(s) URL")

    return parser


def parse_args(argv) -> Command:
    args = build_parser().parse_args(argv)
    return Command(
        name=args.name,
        argument=args.argument,
        max_size=args.max_size,
        indent=getattr(args, "indent", None),
        binary=getattr(args, "binary", "hex"),
        strict=getattr(args, "strict", False),
        verbose=args.verbose,
    )


def run_decode(command: Command, out) -> int:
    raw = os.fsencode(command.argument)
    if len(raw) > command.max_size:
        raise SourceError(f"Value is {len(raw)} bytes, larger than the {command.max_size} byte limit")

    value = decode(raw, strict=command.strict)
    print(dumps(value, indent=command.indent, binary=command.binary), file=out)
    return 0


def run_info(command: Command, out) -> int:
    raw = asyncio.run(load_source(command.argument, max_size=command.max_size))
    meta = TorrentMeta(raw)
    logger.debug("Parsed %r", meta)
    for line in meta.summary_lines():
        print(line, file=out)
    return 0


def run(command: Command, out=None) -> int:
    """Executes a parsed command and returns the process exit status."""
    out = out if out is not None else sys.stdout
    if command.name == "decode":
        return run_decode(command, out)
    if command.name == "info":
        return run_info(command, out)
    raise ValueError(f"Unknown command {command.name!r}")


def main(argv=None) -> int:
    command = parse_args(sys.argv[1:] if argv is None else argv)

    logging.basicConfig(
        level=logging.DEBUG if command.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
    )

    try:
        return run(command)
    except (BencodeDecodeError, RenderError, MetainfoError, SourceError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
