"""In-memory file handle for callers that already hold the rows"""
from typing import Dict, List, Optional, Sequence


class InMemoryFile:
    """Header plus rows of string cells, read like a TabularFile."""

    def __init__(self, file_id: str, header: Sequence[str], rows: Sequence[Sequence[Optional[str]]]):
        self.file_id = file_id
        self.header = list(header)
        self.rows = [list(r) for r in rows]

    @classmethod
    def from_columns(cls, file_id: str, columns: Dict[str, Sequence[Optional[str]]]) -> 'InMemoryFile':
        """Build from {column: cells}; shorter columns are padded with None."""
        header = list(columns)
        n_rows = max((len(v) for v in columns.values()), default=0)
        rows = []
        for i in range(n_rows):
            rows.append([columns[c][i] if i < len(columns[c]) else None for c in header])
        return cls(file_id, header, rows)

    def __repr__(self) -> str:
        return f"InMemoryFile({self.file_id!r})"

    def read_header(self) -> List[str]:
        return list(self.header)

    def read_column_sample(self, column_name: str, max_rows: Optional[int] = None) -> List[Optional[str]]:
        if column_name not in self.header:
            return []
        idx = self.header.index(column_name)
        rows = self.rows if max_rows is None else self.rows[:max_rows]
        return [row[idx] if idx < len(row) else None for row in rows]
