"""Row sources: where the rows of a sheet come from.

A row source hands out full snapshots of a sheet. Queries never write back
to it.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from sheetdb.commons.sheetdb_logger import SheetDBLogger
from sheetdb.data.conversion import HEADER_ROW_COUNT, rows_from_values

DEFAULT_SHEET_METADATA = {"public_read": True}


class SheetNotFound(LookupError):
    """No sheet matches the requested id or name."""

    def __init__(self, sheet_id: str):
        self.sheet_id = sheet_id
        super().__init__(f"Sheet not found: {sheet_id}")


@dataclass
class Sheet:
    """A sheet as stored: its value grid plus access metadata."""

    name: str
    values: List[List[Any]] = field(default_factory=list)
    sheet_id: int | None = None
    metadata: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_SHEET_METADATA))

    @classmethod
    def from_dict(cls, doc: Dict[str, Any]) -> "Sheet":
        """Build a sheet from a stored document.

        Raises
        ------
        ValueError
            If the document has no name or its values are not a grid.
        """
        name = doc.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Sheet document must have a non-empty 'name'.")
        values = doc.get("values", [])
        if not isinstance(values, list) or not all(isinstance(r, list) for r in values):
            raise ValueError(f"Sheet '{name}' values must be a list of rows.")
        metadata = doc.get("metadata")
        if not isinstance(metadata, dict):
            metadata = dict(DEFAULT_SHEET_METADATA)
        return cls(name=name, values=values, sheet_id=doc.get("sheet_id"), metadata=metadata)

    def matches(self, sheet_id: str) -> bool:
        """True if ``sheet_id`` is this sheet's numeric id or its name."""
        if self.sheet_id is not None and str(self.sheet_id) == sheet_id:
            return True
        return self.name == sheet_id


class RowSource(ABC):
    """Read access to the sheets of a spreadsheet."""

    def __init__(self):
        self.logger = SheetDBLogger()

    @abstractmethod
    def list_sheets(self) -> List[Sheet]:
        """Return every available sheet."""
        raise NotImplementedError

    def get_sheet(self, sheet_id: str) -> Sheet | None:
        """Find a sheet by numeric id or by name."""
        for sheet in self.list_sheets():
            if sheet.matches(sheet_id):
                return sheet
        return None

    def _require_sheet(self, sheet_id: str) -> Sheet:
        sheet = self.get_sheet(sheet_id)
        if sheet is None:
            raise SheetNotFound(sheet_id)
        return sheet

    def fetch_rows(self, sheet_id: str) -> List[Dict[str, Any]]:
        """Materialize all data rows of a sheet."""
        sheet = self._require_sheet(sheet_id)
        rows = rows_from_values(sheet.values)
        self.logger.debug(f"Fetched {len(rows)} rows from sheet '{sheet.name}'.")
        return rows

    def fetch_header_rows(self, sheet_id: str) -> Tuple[List[Any], List[Any]]:
        """Return the column names row and the column descriptors row."""
        sheet = self._require_sheet(sheet_id)
        header_rows = list(sheet.values[:HEADER_ROW_COUNT])
        header_rows.extend([[]] * (HEADER_ROW_COUNT - len(header_rows)))
        return list(header_rows[0]), list(header_rows[1])


class InMemoryRowSource(RowSource):
    """Row source over sheets held in memory."""

    def __init__(self, sheets: Iterable[Sheet] = ()):
        super().__init__()
        self._sheets = list(sheets)

    def add_sheet(self, sheet: Sheet) -> None:
        self._sheets.append(sheet)

    def list_sheets(self) -> List[Sheet]:
        return list(self._sheets)


class SheetFileRowSource(RowSource):
    """Row source over a directory of ``<sheet>.json`` documents.

    Each document looks like ``{"sheet_id": 0, "name": "Scores",
    "metadata": {"public_read": true}, "values": [[...], [...], ...]}``.
    Unreadable documents are logged and skipped.
    """

    def __init__(self, data_dir: str | Path):
        super().__init__()
        self.data_dir = Path(data_dir)

    def list_sheets(self) -> List[Sheet]:
        if not self.data_dir.is_dir():
            self.logger.warning(f"Sheet data directory does not exist: {self.data_dir}")
            return []
        sheets = []
        for path in sorted(self.data_dir.glob("*.json")):
            try:
                with path.open("r", encoding="utf-8") as handle:
                    doc = json.load(handle)
                if not isinstance(doc, dict):
                    raise ValueError("top-level JSON value must be an object")
                sheets.append(Sheet.from_dict(doc))
            except (OSError, ValueError) as exc:
                self.logger.error(f"Could not load sheet file {path}: {exc}")
        return sheets
