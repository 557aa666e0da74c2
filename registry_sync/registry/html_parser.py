"""
Registry lessons page parsing.

Reads the lesson list of a registry course page (as saved from the
browser or fetched by a session) with BeautifulSoup.

Row layout of the lessons table:
- cell 0: <a href="view link">dd.MM.yyyy HH.mm</a> followed by the kind text
- cell 2: <a href="edit link">...</a>
"""

import logging
from datetime import datetime
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from ..models.occurrence import ExistingOccurrence, LessonKind


logger = logging.getLogger(__name__)


LESSON_ROWS_SELECTOR = "main > div:nth-of-type(3) > table tr"
DATE_TIME_FORMAT = "%d.%m.%Y %H.%M"


class RegistryPageError(Exception):
    """Raised when the lessons page does not have the expected layout."""
    pass


def resolve_link(href: str, base_url: Optional[str] = None) -> str:
    """Resolve a registry link against base_url; without one it is kept as-is."""
    if base_url:
        return urljoin(base_url, href)
    return href


class RegistryPageParser:
    """
    Parser for the registry lessons page.

    Examples:
        >>> parser = RegistryPageParser(html, base_url="http://crd.usm.md/studregistry/")
        >>> existing = parser.parse_lessons()
        >>> existing[0].kind
        <LessonKind.LAB: 'lab'>
    """

    def __init__(
        self,
        html: str,
        base_url: Optional[str] = None,
        parser: str = "lxml"
    ):
        """
        Initialize parser with HTML content.

        Args:
            html: Page HTML
            base_url: Base for resolving relative links (links kept as-is if None)
            parser: BeautifulSoup parser (default: "lxml")
        """
        self.base_url = base_url
        self.soup = BeautifulSoup(html, parser)

        logger.debug(f"Registry page parser initialized with {len(html)} bytes of HTML")

    def _resolve(self, href: str) -> str:
        return resolve_link(href, self.base_url)

    def parse_lessons(self) -> List[ExistingOccurrence]:
        """
        Extract every lesson record listed on the page.

        Returns:
            Existing occurrences in page order (empty if the table has only
            its header row or is absent)

        Raises:
            RegistryPageError: If a row does not have the expected layout
        """
        rows = self.soup.select(LESSON_ROWS_SELECTOR)
        if not rows:
            logger.warning("Lessons table not found on registry page")
            return []

        lessons = []
        # First row holds the column headers.
        for number, row in enumerate(rows[1:], start=1):
            lessons.append(self._parse_row(row, number))

        logger.debug(f"Parsed {len(lessons)} lesson records")
        return lessons

    def _parse_row(self, row: Tag, number: int) -> ExistingOccurrence:
        cells = row.find_all(["td", "th"], recursive=False)
        if len(cells) < 3:
            raise RegistryPageError(
                f"Row {number}: expected at least 3 cells, got {len(cells)}"
            )

        view_anchor = cells[0].find("a")
        if view_anchor is None or not view_anchor.get("href"):
            raise RegistryPageError(f"Row {number}: no lesson link in first cell")

        date_text = view_anchor.get_text(strip=True)
        try:
            date_time = datetime.strptime(date_text, DATE_TIME_FORMAT)
        except ValueError as e:
            raise RegistryPageError(
                f"Row {number}: date time {date_text!r} does not match "
                f"{DATE_TIME_FORMAT}"
            ) from e

        try:
            kind = LessonKind.from_registry_name(self._kind_text(view_anchor))
        except ValueError as e:
            raise RegistryPageError(f"Row {number}: {e}") from e

        edit_anchor = cells[2].find("a")
        if edit_anchor is None or not edit_anchor.get("href"):
            raise RegistryPageError(f"Row {number}: no edit link in third cell")

        return ExistingOccurrence(
            date_time=date_time,
            kind=kind,
            view_ref=self._resolve(view_anchor["href"]),
            edit_ref=self._resolve(edit_anchor["href"]),
        )

    @staticmethod
    def _kind_text(anchor: Tag) -> str:
        parts = []
        for sibling in anchor.next_siblings:
            if isinstance(sibling, NavigableString):
                parts.append(str(sibling))
            else:
                parts.append(sibling.get_text())
        return "".join(parts).strip()
