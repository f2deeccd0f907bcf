"""Sheet and column inclusion filters."""

from fnmatch import fnmatchcase
from typing import List, Optional, Tuple

from .cells import Sheet


class SheetPathFilter:
    """
    Accept sheets and columns by path.

    Paths are ``"Sheet"`` (the whole sheet) or ``"Sheet/Column"`` (only the
    listed columns of that sheet). Both parts accept shell-style wildcards.
    With no paths, everything is accepted.

    Any object with ``accept_sheet(sheet)`` and ``accept_column(sheet, name)``
    can replace this filter.
    """

    def __init__(self, *paths: str):
        self.paths: List[Tuple[str, Optional[str]]] = []
        for path in paths:
            sheet, sep, column = path.partition("/")
            self.paths.append((sheet, column if sep else None))

    def _matching(self, sheet: Sheet) -> List[Optional[str]]:
        return [column for pattern, column in self.paths if fnmatchcase(sheet.name, pattern)]

    def accept_sheet(self, sheet: Sheet) -> bool:
        """Whether the sheet is imported at all."""
        if not self.paths:
            return True
        return bool(self._matching(sheet))

    def accept_column(self, sheet: Sheet, column_name: str) -> bool:
        """Whether a (normalized) column of an accepted sheet is imported."""
        if not self.paths:
            return True
        for pattern in self._matching(sheet):
            if pattern is None or fnmatchcase(column_name, pattern):
                return True
        return False
