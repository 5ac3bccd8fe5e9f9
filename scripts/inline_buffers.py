#!/usr/bin/env python3
"""Inline edited buffers from a workspace JSON file into their documents.

Input and output use the workspace wire shape::

    {"documents": [{"name", "text"}],
     "buffers": [{"id": {"documentName", "regionLabel"}, "content",
                  "position", "absolutePosition"}]}

Documents with ``"text": null`` are read from the path in ``name``.

Usage::

    python3 scripts/inline_buffers.py workspace.json
    python3 scripts/inline_buffers.py workspace.json --output processed.json
    python3 scripts/inline_buffers.py workspace.json --config regionkit.json -v
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from regionkit.config import RegionKitConfig
from regionkit.errors import RegionKitError
from regionkit.inliner import BufferInliningTransformer
from regionkit.io_utils import (
    dump_json_bytes,
    load_workspace,
    save_workspace,
    workspace_to_dict,
)
from regionkit.workspace_types import Workspace

log = logging.getLogger("inline_buffers")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inline edited buffers into workspace documents."
    )
    parser.add_argument("workspace", type=Path, help="Workspace JSON file")
    parser.add_argument(
        "--config", type=Path, default=None, help="Path to a regionkit JSON config"
    )
    parser.add_argument(
        "--output", type=Path, default=None, help="Write JSON here instead of stdout"
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def run(args: argparse.Namespace) -> Workspace:
    config = RegionKitConfig.from_json(args.config) if args.config else RegionKitConfig()
    workspace = load_workspace(args.workspace)
    log.info(
        "Loaded %d document(s) and %d buffer(s) from %s",
        len(workspace.documents), len(workspace.buffers), args.workspace,
    )
    return BufferInliningTransformer.from_config(config).transform(workspace)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        processed = run(args)
    except (RegionKitError, ValueError) as exc:
        log.error("%s", exc)
        return 1

    if args.output:
        save_workspace(processed, args.output)
    else:
        sys.stdout.buffer.write(dump_json_bytes(workspace_to_dict(processed)))
        sys.stdout.buffer.write(b"\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
