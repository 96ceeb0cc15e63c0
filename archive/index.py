"""archive/index.py — Detect the archive layout and parse Articles.lst into chapters.

Two layouts exist:
  - paginated: Pages.lst plus Pages/NNNN.txt, Articles.lst lines like `|titeln|0005-0013`
  - pre-rendered: one <name>.html per article, Articles.lst lines like `name|Titel|`
"""

import logging
import re
from dataclasses import dataclass, field

from archive.base import Archive, split_lines
from errors import EmptyContent, MalformedRecord, StructuralViolation, UnsupportedSequence

log = logging.getLogger(__name__)

ARTICLES_FILE = "Articles.lst"
PAGES_FILE = "Pages.lst"

SEQ_SINGLE_RE = re.compile(r"[0-9]{4}")
SEQ_RANGE_RE = re.compile(r"([0-9]{4})-([0-9]{4})")
H1_TITLE_RE = re.compile(r"<h1>([^<]+)</h1>")


@dataclass
class ChapterSource:
    """One Articles.lst entry, before its body has been built."""
    title: str
    pages: list[str] = field(default_factory=list)   # paginated layout
    filename: str = ""                                # pre-rendered layout
    html: str = ""


def has_pages(archive: Archive) -> bool:
    return archive.has(PAGES_FILE)


def expand_page_sequence(seq: str) -> list[str]:
    """'0005' -> ['0005'], '0005-0007' -> ['0005', '0006', '0007']."""
    if SEQ_SINGLE_RE.fullmatch(seq):
        return [seq]
    m = SEQ_RANGE_RE.fullmatch(seq)
    if m:
        start, end = int(m.group(1)), int(m.group(2))
        if end > start:
            return [f"{i:04d}" for i in range(start, end + 1)]
    raise UnsupportedSequence(f"Not handling sequence: {seq!r}")


def _checked(sources: list[ChapterSource]) -> list[ChapterSource]:
    if not sources:
        raise EmptyContent(f"Got no chapters from {ARTICLES_FILE}")
    return sources


def parse_paginated_index(text: str) -> list[ChapterSource]:
    """Parse the three-field Articles.lst of the paginated layout."""
    sources = []
    for line in split_lines(text):
        if line.startswith("index|") or line.startswith("#"):
            continue
        parts = line.split("|")
        if len(parts) != 3:
            raise MalformedRecord(f"Line does not have 3 fields: {line!r}")
        sources.append(ChapterSource(title=parts[1], pages=expand_page_sequence(parts[2])))
    return _checked(sources)


def parse_prerendered_index(text: str, archive: Archive) -> list[ChapterSource]:
    """Parse Articles.lst of the pre-rendered layout, reading each <name>.html."""
    sources = []
    for line in split_lines(text):
        fname, sep, _ = line.partition("|")
        if not sep or fname == "index" or fname.startswith("#"):
            continue
        html = archive.read_text(f"{fname}.html")
        m = H1_TITLE_RE.search(html)
        if m is None:
            raise StructuralViolation(f"No title found in {fname}.html")
        sources.append(ChapterSource(title=m.group(1), filename=fname, html=html))
    return _checked(sources)


def read_index(archive: Archive) -> list[ChapterSource]:
    """Pick the layout variant and return the chapters in index order."""
    text = archive.read_text(ARTICLES_FILE)
    if has_pages(archive):
        log.debug("Found %s, using paginated layout", PAGES_FILE)
        sources = parse_paginated_index(text)
    else:
        log.debug("No %s, using pre-rendered html layout", PAGES_FILE)
        sources = parse_prerendered_index(text, archive)
    log.debug("Articles.lst lists %d chapters", len(sources))
    return sources
