"""File handles supplying headers and raw column samples"""
from .tabular import TabularFile, FileReadError, DELIMITED_TYPES, EXCEL_TYPES
from .memory import InMemoryFile

__all__ = [
    'TabularFile',
    'FileReadError',
    'InMemoryFile',
    'DELIMITED_TYPES',
    'EXCEL_TYPES',
]
