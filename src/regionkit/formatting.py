"""Whitespace normalization for extracted snippets.

Snippets are free-floating: they need not be complete compilable units, so
formatting is purely textual.
"""
from __future__ import annotations

import textwrap
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SnippetFormatter:
    """Normalize a code fragment for display.

    Line endings become ``\\n``, tabs expand to ``tab_width`` columns,
    trailing whitespace is dropped, and the common indent is removed.
    """

    tab_width: int = 4

    def format(self, snippet: str) -> str:
        text = snippet.replace("\r\n", "\n").replace("\r", "\n")
        lines = [line.expandtabs(self.tab_width).rstrip() for line in text.split("\n")]
        # Leading/trailing blank lines carry no indentation information
        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        return textwrap.dedent("\n".join(lines)).strip()
