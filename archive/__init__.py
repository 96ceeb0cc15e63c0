"""archive/ — Convert a Projekt Runeberg book archive into a Book of HTML chapters."""

import logging
from pathlib import Path

from archive.base import Archive
from archive.index import has_pages, read_index
from archive.lookup import LookupTables, default_lookup_tables
from archive.markup import normalize_markup
from archive.metadata import parse_metadata
from archive.pages import BlankLineEvidence, collect_pages, heuristic_for, reconstruct_paragraphs
from models import Book, BookMetadata, Chapter

log = logging.getLogger(__name__)

METADATA_FILE = "Metadata"
FRONTMATTER_FILE = "index.html"
FRONTMATTER_TITLE = "Titelsida"
PROVENANCE = (
    '<hr/><p>Denna bok i EPUB-format har skapats från källfiler från '
    'Projekt Runeberg: <a href="{url}">{url}</a>.'
)


def build_frontmatter(archive: Archive, meta: BookMetadata) -> Chapter:
    """The archive's cover page plus a note on where the book came from."""
    body = archive.read_text(FRONTMATTER_FILE) + PROVENANCE.format(url=meta.url)
    return Chapter(title=FRONTMATTER_TITLE, body=normalize_markup(body))


def convert_archive(
    source: bytes | str | Path,
    tables: LookupTables | None = None,
    heuristics: dict[str, str] | None = None,
) -> Book:
    """
    Main entry point. `source` is zip bytes, a zip path or an unpacked directory.
    Raises a ConversionError subclass on the first problem found.
    """
    tables = tables or default_lookup_tables()
    archive = Archive.open(source)

    meta = parse_metadata(archive.read(METADATA_FILE), tables)
    log.debug("Converting %s (%s)", meta.title_key, meta.url)

    chapters = [build_frontmatter(archive, meta)]
    sources = read_index(archive)

    evidence = BlankLineEvidence()
    paginated = has_pages(archive)
    heuristic = heuristic_for(meta.title_key, heuristics)

    for src in sources:
        if paginated:
            text = collect_pages(archive, src, heuristic, evidence)
            text = reconstruct_paragraphs(text)
        else:
            text = src.html
        chapters.append(Chapter(title=src.title, body=normalize_markup(text)))

    maybe_missing = paginated and evidence.unconfirmed
    if maybe_missing:
        log.debug("No page starts with a blank line, paragraph breaks may be missing")

    return Book(
        title=meta.title,
        title_key=meta.title_key,
        author=meta.author,
        language=meta.language,
        url=meta.url,
        year=meta.year,
        chapters=tuple(chapters),
        maybe_missing_blank_first_line=maybe_missing,
    )
