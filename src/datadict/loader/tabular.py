"""Read headers and column samples from CSV/TSV/Excel files as raw strings.

Every cell comes back as a string (or None for an empty spreadsheet cell).
pandas' own NA detection is switched off so the profiling cleaner alone decides
what counts as missing.
"""
import logging
import math
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

logger = logging.getLogger(__name__)

DELIMITED_TYPES = {'.csv': ',', '.tsv': '\t', '.txt': ','}
EXCEL_TYPES = {'.xlsx', '.xlsm'}


class FileReadError(Exception):
    """A data file could not be opened or parsed."""

    def __init__(self, file_id: str, reason: str):
        super().__init__(f"Could not read {file_id}: {reason}")
        self.file_id = file_id
        self.reason = reason


def _to_cell(value) -> Optional[str]:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    return str(value)


class TabularFile:
    """
    File handle the dictionary builder reads from.

    Frames are cached per row limit, so asking for many columns of the same
    file parses it once per pass.
    """

    def __init__(
        self,
        path: Union[str, Path],
        file_id: Optional[str] = None,
        sheet_name: Optional[Union[str, int]] = None,
    ):
        self.path = Path(path)
        self.file_id = file_id or str(path)
        self.sheet_name = sheet_name
        self._frames: Dict[Optional[int], pd.DataFrame] = {}

    def __repr__(self) -> str:
        return f"TabularFile({self.file_id!r})"

    @property
    def suffix(self) -> str:
        return self.path.suffix.lower()

    def _read(self, nrows: Optional[int]) -> pd.DataFrame:
        ext = self.suffix
        try:
            if ext in DELIMITED_TYPES:
                return pd.read_csv(
                    self.path,
                    sep=DELIMITED_TYPES[ext],
                    dtype=str,
                    keep_default_na=False,
                    na_filter=False,
                    index_col=False,
                    nrows=nrows,
                )
            if ext in EXCEL_TYPES:
                return pd.read_excel(
                    self.path,
                    sheet_name=self.sheet_name if self.sheet_name is not None else 0,
                    dtype=object,
                    keep_default_na=False,
                    na_filter=False,
                    nrows=nrows,
                    engine='openpyxl',
                )
        except (OSError, ValueError, pd.errors.ParserError, InvalidFileException, zipfile.BadZipFile) as e:
            raise FileReadError(self.file_id, str(e)) from e
        raise FileReadError(self.file_id, f"Unsupported file type: {ext or '(none)'}")

    def _frame(self, nrows: Optional[int]) -> pd.DataFrame:
        if nrows not in self._frames:
            logger.debug(f"Reading {self.file_id} (nrows={nrows})")
            self._frames[nrows] = self._read(nrows)
        return self._frames[nrows]

    def read_header(self) -> List[str]:
        """Column names in file order."""
        if self._frames:
            frame = next(iter(self._frames.values()))
        else:
            frame = self._frame(0)
        return [str(c) for c in frame.columns]

    def read_column_sample(self, column_name: str, max_rows: Optional[int] = None) -> List[Optional[str]]:
        """
        Raw cells of one column, up to max_rows data rows.

        Returns an empty list when the column isn't in the file.
        """
        frame = self._frame(max_rows)
        if column_name not in frame.columns:
            return []
        return [_to_cell(v) for v in frame[column_name].tolist()]

    def clear_cache(self, nrows: Optional[int] = None) -> None:
        """Drop cached frames (only the one for nrows if given). Call at end of batch processing."""
        if nrows is None:
            self._frames.clear()
        else:
            self._frames.pop(nrows, None)
