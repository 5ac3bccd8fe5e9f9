"""Blocking point-in-time file reads for documents with no inline text."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from regionkit.errors import DocumentNotFoundError

log = logging.getLogger("regionkit.filesystem")


@dataclass(frozen=True, slots=True)
class LocalFileSystem:
    encoding: str = "utf-8"

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def read_all_text(self, path: str) -> str:
        """Read a whole file, raising DocumentNotFoundError when it is missing."""
        file_path = Path(path)
        if not file_path.is_file():
            raise DocumentNotFoundError(path)
        log.debug("Reading document from disk: %s", file_path)
        # newline="" keeps CRLF intact so offsets match the bytes on disk
        with file_path.open(encoding=self.encoding, newline="") as fh:
            return fh.read()
