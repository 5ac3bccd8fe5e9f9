#!/usr/bin/env python3
"""Extract every marked region of a source file into JSON buffers.

Each ``#region name`` / ``#endregion`` pair (``# region`` comments in Python
files) becomes one buffer with id ``{documentName, regionLabel}``. Buffers
are listed in end-marker order, so nested regions precede their parents.

Usage::

    python3 scripts/extract_regions.py src/Program.cs
    python3 scripts/extract_regions.py src/Program.cs --name Program.cs --output buffers.json
    python3 scripts/extract_regions.py demo.py --config regionkit.json --verbose
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from regionkit.config import RegionKitConfig
from regionkit.errors import RegionKitError
from regionkit.filesystem import LocalFileSystem
from regionkit.formatting import SnippetFormatter
from regionkit.io_utils import buffer_to_dict, dump_json_bytes, save_json
from regionkit.region_finder import extract_buffers
from regionkit.trivia import parser_for

log = logging.getLogger("extract_regions")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract marked regions of a source file into JSON buffers."
    )
    parser.add_argument("file", type=Path, help="Source file to scan")
    parser.add_argument(
        "--name",
        default=None,
        help="Document name used in buffer ids (default: the file path as given)",
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="Path to a regionkit JSON config"
    )
    parser.add_argument(
        "--output", type=Path, default=None, help="Write JSON here instead of stdout"
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def run(args: argparse.Namespace) -> dict[str, object]:
    config = RegionKitConfig.from_json(args.config) if args.config else RegionKitConfig()
    name = args.name or str(args.file)
    text = LocalFileSystem(encoding=config.encoding).read_all_text(str(args.file))
    buffers = extract_buffers(
        text,
        name,
        parser=parser_for(name, config.parser_overrides),
        formatter=SnippetFormatter(tab_width=config.tab_width),
    )
    log.info("Extracted %d buffer(s) from %s", len(buffers), args.file)
    return {"buffers": [buffer_to_dict(b) for b in buffers]}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        payload = run(args)
    except RegionKitError as exc:
        log.error("%s", exc)
        return 1

    if args.output:
        save_json(payload, args.output)
    else:
        sys.stdout.buffer.write(dump_json_bytes(payload))
        sys.stdout.buffer.write(b"\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
