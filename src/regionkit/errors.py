"""Exception taxonomy for region extraction and buffer inlining.

Every failure surfaced by regionkit derives from ``RegionKitError`` and also
from the closest builtin, so callers can catch either.  Nothing in the core
retries or swallows these; they propagate to the caller verbatim.
"""
from __future__ import annotations


class RegionKitError(Exception):
    """Base class for all regionkit failures."""


class WorkspaceArgumentError(RegionKitError, ValueError):
    """The transformer was invoked without a workspace."""


class UnbalancedRegionError(RegionKitError):
    """A document holds a region marker with no matching partner."""

    def __init__(self, document_name: str, offset: int, reason: str) -> None:
        self.document_name = document_name
        self.offset = offset
        self.reason = reason
        super().__init__(
            f"Unbalanced region markers in {document_name!r} at offset "
            f"{offset}: {reason}"
        )


class BufferResolutionError(RegionKitError, LookupError):
    """A buffer id matches no document or no region inside its document."""

    def __init__(self, buffer_id: object, message: str) -> None:
        self.buffer_id = buffer_id
        super().__init__(message)


class AmbiguousRegionError(BufferResolutionError):
    """A buffer label matches more than one region in its document."""


class DocumentNotFoundError(RegionKitError, FileNotFoundError):
    """A document with no inline text points at a path that does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Document not found on disk: {path}")


class DocumentParseError(RegionKitError):
    """The tokenizer could not scan a document for region markers."""


class ConfigError(RegionKitError, ValueError):
    """A configuration file holds an invalid value."""
