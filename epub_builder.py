"""epub_builder.py — Package a converted Book into an EPUB file."""

import html
from pathlib import Path

from ebooklib import epub
from tqdm import tqdm

from errors import PackagingError
from models import Book

STYLESHEET = """
p {
  text-indent: 0;
  margin-top: 0;
}

p + p {
  margin-top: 1.5ex;
}

h1, h2, h3,
p.center, div.center {
  text-align: center;
}

hr {
  border: 1px solid black;
}

span.spaced {
  letter-spacing: 0.1rem;
}

span.smallcaps {
  font-variant: small-caps;
}

span.big {
  font-size: 130%;
}

span.footnote {
  font-size: 80%;
}

td._c {
  text-align: center;
}
td._r {
  text-align: right;
}
"""

CSS_FILE = "style/style.css"


def section_document(title: str, body: str) -> str:
    """Wrap a chapter body fragment in a minimal XHTML document."""
    return (
        '<html xmlns="http://www.w3.org/1999/xhtml">'
        f"<head><title>{html.escape(title)}</title></head>"
        f"<body>{body}</body></html>"
    )


def build_epub(book: Book, progress: bool = False) -> epub.EpubBook:
    """Create the in-memory EPUB: metadata, stylesheet, one section per chapter."""
    ebook = epub.EpubBook()
    ebook.set_identifier(book.url)
    ebook.set_title(book.title)
    ebook.set_language(book.language)
    ebook.add_author(book.author)

    css = epub.EpubItem(
        uid="style",
        file_name=CSS_FILE,
        media_type="text/css",
        content=STYLESHEET.encode("utf-8"),
    )
    ebook.add_item(css)

    sections = []
    for i, chapter in enumerate(
        tqdm(book.chapters, desc="  Sections", unit="section", disable=not progress),
        start=1,
    ):
        section = epub.EpubHtml(
            title=chapter.title,
            file_name=f"section{i:04d}.xhtml",
            lang=book.language,
        )
        section.content = section_document(chapter.title, chapter.body).encode("utf-8")
        section.add_item(css)
        ebook.add_item(section)
        sections.append(section)

    ebook.toc = sections
    ebook.add_item(epub.EpubNcx())
    ebook.add_item(epub.EpubNav())
    ebook.spine = ["nav", *sections]
    return ebook


def write_epub(book: Book, output_path: Path, progress: bool = False) -> Path:
    """Write the book to output_path, raising PackagingError on failure."""
    output_path = Path(output_path)
    ebook = build_epub(book, progress=progress)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        epub.write_epub(str(output_path), ebook, {})
    except Exception as e:
        raise PackagingError(f"Writing {output_path} failed: {e}") from e
    return output_path
