"""Core types shared by the region finder and the buffer inliner.

All offsets are global char offsets into a document's full text, never
region-relative, except ``Buffer.position`` which is relative to the
buffer's own content.  All dataclasses are frozen: a transformation always
builds new instances instead of mutating inputs.

Type hierarchy:
  Ok[T] / Err[E]   : Strict algebraic Result type
  SourceSpan       : Half-open char span in a document
  InlineSource     : Document text carried in memory
  OnDiskSource     : Document text read lazily from a path
  Document         : Named source text
  BufferId         : (document_name, region_label) address of a buffer
  Buffer           : Addressable text unit with caller cursor position
  Workspace        : Documents plus buffers exchanged with callers
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")

# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success case of Result[T, E].

    Usage::

        match match_regions(trivia):
            case Ok(value=regions): ...
            case Err(error=problem): ...
    """
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure case of Result[T, E]. Keeps the typed failure reason."""
    error: E


Result: TypeAlias = "Ok[T] | Err[E]"


# ---------------------------------------------------------------------------
# Spans
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Half-open char span ``[start, end)`` in a document's text.

    Zero-length spans are allowed (an empty region body).
    """
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"SourceSpan.start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(
                f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            )

    @property
    def length(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InlineSource:
    """Document text supplied directly by the caller."""
    text: str


@dataclass(frozen=True, slots=True)
class OnDiskSource:
    """Document text to be read from ``path`` when first needed."""
    path: str


DocumentSource: TypeAlias = "InlineSource | OnDiskSource"


@dataclass(frozen=True, slots=True)
class Document:
    """A named source document.

    ``name`` is often a file path. Documents built with ``text=None`` via
    ``Document.create`` resolve their text from the path the name denotes.
    """
    name: str
    source: DocumentSource

    @classmethod
    def create(cls, name: str, text: str | None = None) -> Document:
        if text is None:
            return cls(name=name, source=OnDiskSource(path=name))
        return cls(name=name, source=InlineSource(text=text))

    @property
    def text(self) -> str | None:
        """Inline text, or None when the text still lives on disk."""
        if isinstance(self.source, InlineSource):
            return self.source.text
        return None


# ---------------------------------------------------------------------------
# Buffers
# ---------------------------------------------------------------------------

REGION_SEPARATOR = "@"


@dataclass(frozen=True, slots=True)
class BufferId:
    """Composite buffer address.

    An empty ``region_label`` addresses the whole document. Comparison is
    literal on both components: no case folding or path normalization.
    """
    document_name: str
    region_label: str = ""

    @classmethod
    def parse(cls, raw: str) -> BufferId:
        """Parse ``"file@label"`` (split on the last ``@``) or ``"file"``."""
        name, sep, label = raw.rpartition(REGION_SEPARATOR)
        if not sep:
            return cls(document_name=raw, region_label="")
        return cls(document_name=name, region_label=label)

    @property
    def is_whole_document(self) -> bool:
        return self.region_label == ""

    @property
    def is_anonymous(self) -> bool:
        return self.document_name == "" and self.region_label == ""

    def __str__(self) -> str:
        if self.is_whole_document:
            return self.document_name
        return f"{self.document_name}{REGION_SEPARATOR}{self.region_label}"


@dataclass(frozen=True, slots=True)
class Buffer:
    """Addressable text unit: an entire document or one region within it.

    ``absolute_position`` is derived by the inliner and is None until the
    buffer has been through an inlining pass.
    """
    id: BufferId
    content: str
    position: int = 0
    absolute_position: int | None = None

    def __post_init__(self) -> None:
        if self.position < 0:
            raise ValueError(f"Buffer.position must be >= 0, got {self.position}")

    def with_absolute_position(self, absolute_position: int | None) -> Buffer:
        return replace(self, absolute_position=absolute_position)


@dataclass(frozen=True, slots=True)
class Workspace:
    """Documents and buffers exchanged between authoring and execution."""
    documents: tuple[Document, ...] = field(default_factory=tuple[Document, ...])
    buffers: tuple[Buffer, ...] = field(default_factory=tuple[Buffer, ...])
