"""Pytest configuration for the datadict test suite."""

import pytest

from datadict.loader import InMemoryFile, TabularFile


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "excel: marks tests that write and read .xlsx files through openpyxl"
    )


@pytest.fixture
def write_csv(tmp_path):
    """Write rows to a CSV file under tmp_path and return a TabularFile for it."""
    def _write(filename, header, rows, sep=','):
        path = tmp_path / filename
        lines = [sep.join(header)] + [sep.join(row) for row in rows]
        path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
        return TabularFile(path, file_id=filename)
    return _write


@pytest.fixture
def memory_file():
    """Build an InMemoryFile from {column: cells}."""
    def _make(file_id, **columns):
        return InMemoryFile.from_columns(file_id, columns)
    return _make
