"""Minimal runnable program skeletons for buffers that have no document.

The content is embedded verbatim inside a ``main`` region so the
synthesized program can itself be re-extracted and re-inlined.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

from regionkit.errors import ConfigError

CONTENT_PLACEHOLDER = "$CONTENT$"

_CSHARP_PROGRAM = """using System;
using System.Collections.Generic;
using System.Linq;
using System.Text;
using System.Threading.Tasks;

namespace Snippet
{
    public class Program
    {
        public static void Main(string[] args)
        {
            #region main
$CONTENT$
            #endregion
        }
    }
}
"""

_PYTHON_PROGRAM = """if __name__ == "__main__":
    # region main
$CONTENT$
    # endregion
"""


@dataclass(frozen=True, slots=True)
class ProgramTemplate:
    language: str
    file_name: str
    skeleton: str
    body_indent: str = ""


@dataclass(frozen=True, slots=True)
class SynthesizedProgram:
    """A generated document plus where the buffer content starts in it."""

    name: str
    text: str
    content_offset: int


TEMPLATES: dict[str, ProgramTemplate] = {
    "csharp": ProgramTemplate("csharp", "Program.cs", _CSHARP_PROGRAM),
    "python": ProgramTemplate("python", "program.py", _PYTHON_PROGRAM, body_indent="    "),
}


_EXTENSION_LANGUAGES: dict[str, str] = {
    ".cs": "csharp",
    ".csx": "csharp",
    ".py": "python",
}


def language_for(document_name: str, default: str) -> str:
    """Template language implied by the document's extension, else ``default``."""
    return _EXTENSION_LANGUAGES.get(PurePath(document_name).suffix.lower(), default)


def template_for(language: str) -> ProgramTemplate:
    try:
        return TEMPLATES[language]
    except KeyError:
        known = ", ".join(sorted(TEMPLATES))
        raise ConfigError(f"No program template for {language!r} (known: {known})") from None


def synthesize_program(content: str, language: str = "csharp") -> SynthesizedProgram:
    """Wrap ``content`` in the language's program skeleton.

    Python bodies are indented one level so the module stays valid; the
    reported ``content_offset`` points at the first char of the (possibly
    indented) content.
    """
    template = template_for(language)
    body = content
    if template.body_indent:
        body = "\n".join(
            template.body_indent + line if line else line
            for line in content.split("\n")
        )
    head, _, tail = template.skeleton.partition(CONTENT_PLACEHOLDER)
    first_line_indented = bool(template.body_indent and content.split("\n", 1)[0])
    content_offset = len(head) + (len(template.body_indent) if first_line_indented else 0)
    return SynthesizedProgram(
        name=template.file_name,
        text=head + body + tail,
        content_offset=content_offset,
    )
