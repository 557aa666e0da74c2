"""
Unit tests for RegistryPageParser.
"""

from datetime import datetime

import pytest

from registry_sync.models.occurrence import LessonKind
from registry_sync.registry.html_parser import (
    RegistryPageError,
    RegistryPageParser,
    resolve_link,
)


BASE_URL = "http://crd.usm.md/studregistry/"


def lessons_page(rows: str) -> str:
    """Registry course page with the lessons table in the third block."""
    return f"""
    <html><body>
      <main>
        <div><h1>Algebra</h1></div>
        <div><a href="course/12/add">Adaugă lecție</a></div>
        <div>
          <table>
            <tbody>
              <tr><th>Data</th><th>Prezenți</th><th></th></tr>
              {rows}
            </tbody>
          </table>
        </div>
      </main>
    </body></html>
    """


def row(date_text: str, kind_text: str, lesson_id: int) -> str:
    return (
        f'<tr><td><a href="lesson/{lesson_id}">{date_text}</a> {kind_text}</td>'
        f'<td>24</td>'
        f'<td><a href="lesson/{lesson_id}/edit">Editează</a></td></tr>'
    )


class TestRegistryPageParser:
    """Test cases for RegistryPageParser."""

    def test_parse_lessons(self):
        html = lessons_page(
            row("02.09.2024 08.00", "laborator", 101)
            + row("02.09.2024 09.45", "curs", 102)
            + row("03.09.2024 11.30", "", 103)
        )

        lessons = RegistryPageParser(html, base_url=BASE_URL).parse_lessons()

        assert [(lesson.date_time, lesson.kind) for lesson in lessons] == [
            (datetime(2024, 9, 2, 8, 0), LessonKind.LAB),
            (datetime(2024, 9, 2, 9, 45), LessonKind.CURS),
            (datetime(2024, 9, 3, 11, 30), LessonKind.UNSPECIFIED),
        ]
        assert lessons[0].view_ref == BASE_URL + "lesson/101"
        assert lessons[0].edit_ref == BASE_URL + "lesson/101/edit"

    def test_links_kept_without_base_url(self):
        html = lessons_page(row("02.09.2024 08.00", "seminar", 7))

        lesson = RegistryPageParser(html).parse_lessons()[0]

        assert lesson.kind is LessonKind.SEMINAR
        assert lesson.edit_ref == "lesson/7/edit"

    def test_custom_kind(self):
        html = lessons_page(row("02.09.2024 08.00", "practica", 7))

        assert RegistryPageParser(html).parse_lessons()[0].kind is LessonKind.CUSTOM

    def test_header_only_table(self):
        assert RegistryPageParser(lessons_page("")).parse_lessons() == []

    def test_missing_table(self):
        html = "<html><body><main><div></div></main></body></html>"

        assert RegistryPageParser(html).parse_lessons() == []

    def test_html_parser_backend(self):
        html = lessons_page(row("02.09.2024 08.00", "curs", 7))

        lessons = RegistryPageParser(html, parser="html.parser").parse_lessons()

        assert lessons[0].kind is LessonKind.CURS

    def test_bad_date_raises(self):
        html = lessons_page(row("2024-09-02 08:00", "curs", 7))

        with pytest.raises(RegistryPageError, match="Row 1"):
            RegistryPageParser(html).parse_lessons()

    def test_missing_edit_link_raises(self):
        html = lessons_page(
            '<tr><td><a href="lesson/7">02.09.2024 08.00</a> curs</td>'
            '<td>24</td><td></td></tr>'
        )

        with pytest.raises(RegistryPageError, match="edit link"):
            RegistryPageParser(html).parse_lessons()

    def test_short_row_raises(self):
        html = lessons_page('<tr><td><a href="lesson/7">02.09.2024 08.00</a></td></tr>')

        with pytest.raises(RegistryPageError, match="3 cells"):
            RegistryPageParser(html).parse_lessons()

    def test_kind_with_spaces_raises(self):
        html = lessons_page(row("02.09.2024 08.00", "curs extra", 7))

        with pytest.raises(RegistryPageError):
            RegistryPageParser(html).parse_lessons()


class TestResolveLink:
    """Test cases for resolve_link."""

    def test_relative_link(self):
        assert resolve_link("lesson/1", BASE_URL) == BASE_URL + "lesson/1"

    def test_absolute_link(self):
        assert resolve_link("http://other/lesson/1", BASE_URL) == "http://other/lesson/1"

    def test_no_base(self):
        assert resolve_link("lesson/1") == "lesson/1"
