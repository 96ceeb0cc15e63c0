"""archive/lookup.py — Author and title reference tables bundled with runepub.

Both lists come from runeberg.org in the same pipe-delimited ISO-8859-1 format
as the site uses. They are parsed once per process and handed to every
conversion as read-only mappings.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from archive.base import decode_latin1, split_lines
from errors import MalformedRecord
from models import AuthorRecord, TitleRecord

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
AUTHORS_FILE = DATA_DIR / "a.lst"
TITLES_FILE = DATA_DIR / "t.lst"

AUTHOR_FIELDS = 7
TITLE_FIELDS = 9


@dataclass(frozen=True)
class LookupTables:
    authors: Mapping[str, AuthorRecord]
    titles: Mapping[str, TitleRecord]


def _records(text: str, n_fields: int, what: str):
    """Yield the split fields of every non-comment, non-blank line."""
    for line in split_lines(text):
        if not line or line.startswith("#"):
            continue
        parts = line.split("|")
        if len(parts) != n_fields:
            raise MalformedRecord(f"Bad line in {what} data: {line!r}")
        yield parts


def parse_authors(text: str) -> dict[str, AuthorRecord]:
    """birth|death|surname|given name|country|kind|key"""
    authors = {}
    for parts in _records(text, AUTHOR_FIELDS, "authors"):
        key = parts[6]
        authors[key] = AuthorRecord(key=key, full_name=f"{parts[3]} {parts[2]}")
    return authors


def parse_titles(text: str) -> dict[str, TitleRecord]:
    """title|key|authorkey|language|year|... (9 fields)"""
    titles = {}
    for parts in _records(text, TITLE_FIELDS, "titles"):
        key = parts[1]
        titles[key] = TitleRecord(key=key, title=parts[0], year=parts[4])
    return titles


def build_lookup_tables(authors_data: bytes, titles_data: bytes) -> LookupTables:
    authors = parse_authors(decode_latin1(authors_data))
    titles = parse_titles(decode_latin1(titles_data))
    log.debug("Loaded %d authors and %d titles", len(authors), len(titles))
    return LookupTables(
        authors=MappingProxyType(authors),
        titles=MappingProxyType(titles),
    )


@lru_cache(maxsize=None)
def default_lookup_tables() -> LookupTables:
    """The bundled tables, parsed on first use and shared afterwards."""
    return build_lookup_tables(AUTHORS_FILE.read_bytes(), TITLES_FILE.read_bytes())
