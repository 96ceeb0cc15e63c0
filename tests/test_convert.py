"""End-to-end tests for convert_archive (archive/__init__.py)."""

import dataclasses

import pytest

from archive import FRONTMATTER_TITLE, convert_archive
from archive.pages import MISSING_BLANK_FIRST_LINE
from builders import make_zip, paginated_members, prerendered_members, write_tree
from errors import (
    EmptyContent,
    MissingResource,
    StructuralViolation,
    UnknownReference,
    UnsupportedSequence,
)

PAGES = {
    "0001": '<chapter name="1">\nI.\n\nDet var en gång.\n',
    "0002": "\nEn ny sida börjar.\n",
    "0003": '<chapter name="2">\nII.\n\nSlutet.\n',
}
ARTICLES = "index|Titelsida|\n|Första kapitlet|0001-0002\n|Andra kapitlet|0003\n"


def paginated_book(pages=PAGES, articles=ARTICLES, **kwargs):
    return convert_archive(make_zip(paginated_members(pages, articles)), **kwargs)


class TestPaginated:
    def test_metadata(self):
        book = paginated_book()
        assert book.title == "Körkarlen"
        assert book.title_key == "korkarlen"
        assert book.author == "Selma Lagerlöf"
        assert book.language == "sv"
        assert book.url == "https://runeberg.org/korkarlen/"
        assert book.year == "1912"

    def test_frontmatter_first(self):
        book = paginated_book()
        assert book.titles() == [FRONTMATTER_TITLE, "Första kapitlet", "Andra kapitlet"]

    def test_frontmatter_body(self):
        front = paginated_book().chapters[0].body
        assert "<h1>Körkarlen</h1>" in front
        assert '<p class="center">av Selma Lagerlöf</p>' in front
        assert '<a href="https://runeberg.org/korkarlen/">https://runeberg.org/korkarlen/</a>' in front
        assert "<hr/>" in front

    def test_chapter_body(self):
        body = paginated_book(heuristics={}).chapters[1].body
        assert "<h1>I.</h1>" in body
        assert "<p>Det var en gång.</p>\n\n<p>En ny sida börjar.</p>" in body
        assert "chapter" not in body

    def test_blank_first_line_seen(self):
        assert not paginated_book(heuristics={}).maybe_missing_blank_first_line

    def test_blank_first_line_never_seen(self):
        pages = {"0001": "<chapter>\nI.\n\nEtt.\n", "0002": "Två.\n"}
        book = paginated_book(pages, "|Ett|0001-0002\n", heuristics={})
        assert book.maybe_missing_blank_first_line

    def test_known_missing_blank_first_line(self):
        pages = {"0001": "<chapter>\nI.\n\nEtt.\n", "0002": "Två.\n"}
        book = paginated_book(pages, "|Ett|0001-0002\n",
                              heuristics={"korkarlen": MISSING_BLANK_FIRST_LINE})
        assert not book.maybe_missing_blank_first_line
        assert "<p>Ett.</p>\n\n<p>Två.</p>" in book.chapters[1].body

    def test_default_heuristics_table(self):
        # korkarlen is listed in the built-in table
        pages = {"0001": "<chapter>\nI.\n\nEtt.\n", "0002": "Två.\n"}
        book = paginated_book(pages, "|Ett|0001-0002\n")
        assert not book.maybe_missing_blank_first_line

    def test_book_is_frozen(self):
        book = paginated_book()
        with pytest.raises(dataclasses.FrozenInstanceError):
            book.title = "Annan"

    def test_bad_sequence(self):
        with pytest.raises(UnsupportedSequence):
            paginated_book(articles="|Ett|0002-0001\n")

    def test_empty_page(self):
        with pytest.raises(EmptyContent):
            paginated_book(pages={**PAGES, "0002": ""})

    def test_unhandled_tag(self):
        pages = {"0001": "<chapter>\nI.\n\nEtt <sp x>ord</sp>.\n"}
        with pytest.raises(StructuralViolation):
            paginated_book(pages, "|Ett|0001\n")

    def test_duplicate_chapter_tag(self):
        pages = {"0001": "<chapter>\n<chapter>\nI.\n"}
        with pytest.raises(StructuralViolation, match="already has chapter tag"):
            paginated_book(pages, "|Ett|0001\n")

    def test_unknown_author(self):
        members = paginated_members(PAGES, ARTICLES, author_key="okand")
        with pytest.raises(UnknownReference):
            convert_archive(make_zip(members))

    def test_missing_metadata(self):
        members = paginated_members(PAGES, ARTICLES)
        del members["Metadata"]
        with pytest.raises(MissingResource):
            convert_archive(make_zip(members))

    def test_missing_frontmatter(self):
        members = paginated_members(PAGES, ARTICLES)
        del members["index.html"]
        with pytest.raises(MissingResource, match="index.html"):
            convert_archive(make_zip(members))

    def test_unpacked_directory(self, tmp_path):
        root = write_tree(tmp_path / "korkarlen", paginated_members(PAGES, ARTICLES))
        book = convert_archive(root)
        assert len(book.chapters) == 3

    def test_zip_path(self, tmp_path):
        path = tmp_path / "korkarlen-txt.zip"
        path.write_bytes(make_zip(paginated_members(PAGES, ARTICLES)))
        assert convert_archive(path).title_key == "korkarlen"

    def test_not_a_zip(self):
        with pytest.raises(MissingResource):
            convert_archive(b"not a zip file")

    def test_no_body_has_empty_attribute(self):
        for chapter in paginated_book().chapters:
            assert '=""' not in chapter.body


class TestPrerendered:
    HTML = {
        "glas01": (
            "<html><head><title>Doktor Glas</title></head><body>\n"
            "<h1>12 juni.</h1>\n"
            "<p>Aldrig har jag sett<footnote>not</footnote> en sådan sommar.\n"
            "<p align=\"center\">* * *\n"
            "</body></html>\n"
        ),
        "glas02": "<h1>14 juni.</h1>\n<p>Regn.\n",
    }
    ARTICLES = "index|Titelsida|\nglas01|12 juni|\nglas02|14 juni|\n"

    def _book(self, html=None):
        members = prerendered_members(
            self.ARTICLES, self.HTML if html is None else html,
            title="Doktor Glas", title_key="drglas", author_key="soderberg",
        )
        return convert_archive(make_zip(members))

    def test_chapters(self):
        book = self._book()
        assert book.titles() == [FRONTMATTER_TITLE, "12 juni.", "14 juni."]
        assert book.author == "Hjalmar Söderberg"
        assert book.year == "1905"

    def test_body_normalized(self):
        body = self._book().chapters[1].body
        assert '<span class="footnote"> [fotnot: not]</span>' in body
        assert '<p class="center">* * *</p>' in body
        assert "<title>" not in body

    def test_heuristic_flag_not_set(self):
        assert not self._book().maybe_missing_blank_first_line

    def test_missing_heading(self):
        html = {**self.HTML, "glas02": "<p>Ingen rubrik.\n"}
        with pytest.raises(StructuralViolation):
            self._book(html)

    def test_no_chapters(self):
        members = prerendered_members("index|Titelsida|\n", {},
                                      title_key="drglas", author_key="soderberg")
        with pytest.raises(EmptyContent):
            convert_archive(make_zip(members))
