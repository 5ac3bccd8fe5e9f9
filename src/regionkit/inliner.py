"""Buffer inlining: splice edited buffers back into their documents.

Per document, labeled buffers are applied one at a time in the order their
regions appear in the original text. Region offsets are re-discovered
against the current text before every splice, never cached across splices,
so length changes from earlier edits are always accounted for. Absolute
buffer positions are computed from one last discovery pass over the final
text.

Whole-document buffers (empty region label) replace the text outright and
end processing for that document. A workspace with no documents and a
single whole-document buffer gets a synthesized program around that buffer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TypeAlias

from regionkit.config import RegionKitConfig
from regionkit.errors import (
    AmbiguousRegionError,
    BufferResolutionError,
    WorkspaceArgumentError,
)
from regionkit.filesystem import LocalFileSystem
from regionkit.region_finder import Region, find_regions
from regionkit.templates import language_for, synthesize_program
from regionkit.trivia import TriviaParser, parser_for
from regionkit.workspace_types import (
    Buffer,
    Document,
    InlineSource,
    OnDiskSource,
    Workspace,
)

log = logging.getLogger("regionkit.inliner")

# Inlined content sits on its own lines between the markers, using the
# newline that follows the start marker
INLINE_PADDING = "\n"
CRLF = "\r\n"

IndexedBuffer: TypeAlias = "tuple[int, Buffer]"


def locate_region(regions: tuple[Region, ...], buffer: Buffer) -> Region:
    """The single region addressed by ``buffer``'s label."""
    label = buffer.id.region_label
    matches = [r for r in regions if r.name == label]
    if not matches:
        raise BufferResolutionError(
            buffer.id,
            f"No region {label!r} in document {buffer.id.document_name!r}",
        )
    if len(matches) > 1:
        offsets = ", ".join(str(r.start_marker.span.start) for r in matches)
        raise AmbiguousRegionError(
            buffer.id,
            f"Region {label!r} occurs {len(matches)} times in document "
            f"{buffer.id.document_name!r} (at offsets {offsets})",
        )
    return matches[0]


def padding_at(text: str, offset: int) -> str:
    """The line break found at ``offset``: ``\\r\\n`` in CRLF documents, else ``\\n``."""
    return CRLF if text.startswith(CRLF, offset) else INLINE_PADDING


def splice(text: str, region: Region, content: str) -> str:
    """Replace the region's body with ``content``, markers untouched.

    Line breaks in ``content`` are rewritten to the document's own newline so
    CRLF documents stay CRLF throughout.
    """
    span = region.content_span
    newline = padding_at(text, span.start)
    if newline != INLINE_PADDING:
        content = content.replace(CRLF, INLINE_PADDING).replace(INLINE_PADDING, newline)
    return text[:span.start] + newline + content + newline + text[span.end:]


@dataclass(frozen=True, slots=True)
class BufferInliningTransformer:
    file_system: LocalFileSystem = field(default_factory=LocalFileSystem)
    default_language: str = "csharp"
    parser_overrides: dict[str, str] = field(default_factory=dict[str, str])

    @classmethod
    def from_config(cls, config: RegionKitConfig) -> BufferInliningTransformer:
        return cls(
            file_system=LocalFileSystem(encoding=config.encoding),
            default_language=config.default_language,
            parser_overrides=dict(config.parser_overrides),
        )

    def transform(self, workspace: Workspace | None) -> Workspace:
        """Return a new workspace with every buffer inlined.

        Documents come back in input order, followed by documents created
        for buffers whose document was not in the workspace. Buffers come
        back in input order with ``absolute_position`` filled in.
        """
        if workspace is None:
            raise WorkspaceArgumentError("workspace is required")

        if self._needs_synthesis(workspace):
            return self._synthesize(workspace.buffers[0])

        grouped: dict[str, list[IndexedBuffer]] = {}
        for index, buffer in enumerate(workspace.buffers):
            if buffer.id.is_anonymous:
                raise BufferResolutionError(
                    buffer.id,
                    "Anonymous buffer can only be inlined alone into an empty workspace",
                )
            grouped.setdefault(buffer.id.document_name, []).append((index, buffer))

        known = {doc.name for doc in workspace.documents}
        targets: list[tuple[str, Document | None]] = [
            (doc.name, doc) for doc in workspace.documents
        ]
        targets.extend((name, None) for name in grouped if name not in known)

        documents: list[Document] = []
        placed: dict[int, Buffer] = {}
        for name, document in targets:
            text, positioned = self._inline_document(name, document, grouped.get(name, []))
            documents.append(Document(name=name, source=InlineSource(text)))
            placed.update(positioned)

        buffers = tuple(
            placed.get(index, buffer) for index, buffer in enumerate(workspace.buffers)
        )
        return Workspace(documents=tuple(documents), buffers=buffers)

    # -- per document ---------------------------------------------------

    def _inline_document(
        self,
        name: str,
        document: Document | None,
        buffers: list[IndexedBuffer],
    ) -> tuple[str, dict[int, Buffer]]:
        for index, buffer in buffers:
            if buffer.id.is_whole_document:
                log.debug("Replacing whole document %s", name)
                return buffer.content, {index: buffer.with_absolute_position(buffer.position)}

        text = self._resolve_text(name, document, buffers)
        if not buffers:
            return text, {}

        parser = self._parser(name)
        regions = find_regions(text, name, parser)
        ordered = sorted(
            buffers,
            key=lambda item: locate_region(regions, item[1]).content_span.start,
        )
        for _, buffer in ordered:
            region = locate_region(find_regions(text, name, parser), buffer)
            before = len(text)
            text = splice(text, region, buffer.content)
            log.debug(
                "Inlined %s into %s (length delta %+d)",
                buffer.id, name, len(text) - before,
            )

        final_regions = find_regions(text, name, parser)
        positioned: dict[int, Buffer] = {}
        for index, buffer in buffers:
            region = locate_region(final_regions, buffer)
            start = region.content_span.start
            content_start = start + len(padding_at(text, start))
            positioned[index] = buffer.with_absolute_position(content_start + buffer.position)
        return text, positioned

    def _resolve_text(
        self,
        name: str,
        document: Document | None,
        buffers: list[IndexedBuffer],
    ) -> str:
        if document is None:
            if not self.file_system.exists(name):
                buffer_id = buffers[0][1].id
                raise BufferResolutionError(
                    buffer_id,
                    f"Buffer {buffer_id} matches no document in the workspace or on disk",
                )
            return self.file_system.read_all_text(name)
        match document.source:
            case InlineSource(text=text):
                return text
            case OnDiskSource(path=path):
                return self.file_system.read_all_text(path)
        raise AssertionError("unreachable")

    def _parser(self, name: str) -> TriviaParser:
        return parser_for(name, self.parser_overrides)

    # -- synthesis ------------------------------------------------------

    @staticmethod
    def _needs_synthesis(workspace: Workspace) -> bool:
        return (
            not workspace.documents
            and len(workspace.buffers) == 1
            and workspace.buffers[0].id.is_whole_document
        )

    def _synthesize(self, buffer: Buffer) -> Workspace:
        name = buffer.id.document_name
        program = synthesize_program(buffer.content, language_for(name, self.default_language))
        name = name or program.name
        log.debug("Synthesized %s around buffer %s", name, buffer.id)
        positioned = buffer.with_absolute_position(program.content_offset + buffer.position)
        return Workspace(
            documents=(Document(name=name, source=InlineSource(program.text)),),
            buffers=(positioned,),
        )
