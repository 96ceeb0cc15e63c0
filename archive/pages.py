"""archive/pages.py — Turn the Pages/NNNN.txt files of a chapter into HTML-ish text.

Runeberg txt pages lack reliable paragraph markers. The convention is that a
page starting a new paragraph begins with a blank line, and that blank lines
separate paragraphs within a page. Some books are known to break the first
half of that convention; those are listed in PARAGRAPH_HEURISTICS.
"""

import logging
from dataclasses import dataclass

from archive.base import Archive, decode_text
from archive.index import ChapterSource
from errors import EmptyContent, StructuralViolation

log = logging.getLogger(__name__)

BLANK_FIRST_LINE = "blank-first-line"
MISSING_BLANK_FIRST_LINE = "missing-blank-first-line"

# Title keys of books whose pages never start with a blank line, even when
# they begin a new paragraph.
PARAGRAPH_HEURISTICS = {
    "korkarlen": MISSING_BLANK_FIRST_LINE,
}


@dataclass
class BlankLineEvidence:
    """What the pages of one book told us about the blank-first-line convention."""
    known_missing: bool = False   # an override heuristic was applied
    seen: bool = False            # some page started with a blank line

    @property
    def unconfirmed(self) -> bool:
        return not self.known_missing and not self.seen


def heuristic_for(title_key: str, heuristics: dict[str, str] | None = None) -> str:
    table = PARAGRAPH_HEURISTICS if heuristics is None else heuristics
    return table.get(title_key, BLANK_FIRST_LINE)


def _is_lowercase(ch: str) -> bool:
    return ch.isalpha() and ch.islower()


def collect_pages(
    archive: Archive,
    source: ChapterSource,
    heuristic: str,
    evidence: BlankLineEvidence,
) -> str:
    """Concatenate the chapter's pages in order, adding blank lines where a new paragraph starts."""
    parts = []
    for page in source.pages:
        name = f"Pages/{page}.txt"
        data = archive.read(name)
        if not data:
            raise EmptyContent(f"Page file {page} is empty")

        text = decode_text(data).replace("\r", "")
        first = text[:1]

        if heuristic == MISSING_BLANK_FIRST_LINE:
            # Guess that a page not starting mid-sentence starts a paragraph.
            if first and first != "\n" and not _is_lowercase(first):
                parts.append("\n")
            evidence.known_missing = True
        else:
            if first == "\n":
                evidence.seen = True
            # A table still must not end up inside the previous paragraph.
            if text.startswith("<table"):
                parts.append("\n")

        parts.append(text)

    log.debug("Chapter %r: %d pages", source.title, len(source.pages))
    return "".join(parts)


def reconstruct_paragraphs(body: str) -> str:
    """Insert (unclosed) <p> tags and the chapter heading into concatenated page text.

    Relies on chapter and table tags sitting at the beginning of a line.
    """
    lines = body.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    out = []
    between_paragraphs = False
    saw_chapter_tag = False
    heading_next = False

    for line in lines:
        if line.startswith("<chapter"):
            if saw_chapter_tag:
                raise StructuralViolation("Chapter already has chapter tag")
            saw_chapter_tag = True
            heading_next = True
            continue

        if heading_next:
            # The title may already be wrapped in some hX tag
            if not line.startswith("<h"):
                line = f"<h1>{line}</h1>"
            heading_next = False
            between_paragraphs = False

        if line.startswith("</chapter"):
            continue

        if line == "":
            between_paragraphs = True
            continue

        is_table = line.startswith("<table")

        if between_paragraphs and not is_table:
            out.append("\n<p>")

        if is_table:
            # Close the paragraph so the parser does not put the table inside it.
            if between_paragraphs:
                out.append("</p>\n")
            out.append("\n")

        between_paragraphs = False
        out.append(line + "\n")

    return "".join(out)
