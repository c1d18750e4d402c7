"""Test file handles reading raw string cells."""
import pytest

from datadict.loader import FileReadError, InMemoryFile, TabularFile
from datadict.profiling import build_dictionary


class TestTabularCsv:
    """CSV/TSV files are read as untouched strings."""

    def test_header(self, write_csv):
        handle = write_csv('a.csv', ['id', 'rt'], [['1', '300']])
        assert handle.read_header() == ['id', 'rt']

    def test_cells_not_converted(self, write_csv):
        handle = write_csv('a.csv', ['code', 'note'], [['007', 'NA'], ['1.50', ''], ['-999', 'None']])
        assert handle.read_column_sample('code') == ['007', '1.50', '-999']
        assert handle.read_column_sample('note') == ['NA', '', 'None']

    def test_row_limit(self, write_csv):
        handle = write_csv('a.csv', ['x'], [[str(i)] for i in range(10)])
        assert handle.read_column_sample('x', 3) == ['0', '1', '2']
        assert len(handle.read_column_sample('x')) == 10

    def test_unknown_column(self, write_csv):
        handle = write_csv('a.csv', ['x'], [['1']])
        assert handle.read_column_sample('y', 10) == []

    def test_tsv(self, write_csv):
        handle = write_csv('a.tsv', ['a', 'b'], [['1,5', 'x']], sep='\t')
        assert handle.read_column_sample('a') == ['1,5']

    def test_header_only_file(self, write_csv):
        handle = write_csv('a.csv', ['x', 'y'], [])
        assert handle.read_header() == ['x', 'y']
        assert handle.read_column_sample('x', 100) == []

    def test_trailing_delimiter_keeps_columns_aligned(self, tmp_path):
        path = tmp_path / 'export.csv'
        path.write_text('a,b\n1,x,\n2,y,\n', encoding='utf-8')
        handle = TabularFile(path)
        assert handle.read_header() == ['a', 'b']
        assert handle.read_column_sample('a') == ['1', '2']
        assert handle.read_column_sample('b') == ['x', 'y']

    def test_clear_one_row_limit(self, write_csv):
        handle = write_csv('a.csv', ['x'], [['1']])
        handle.read_column_sample('x', 5)
        handle.read_column_sample('x', 10)
        handle.clear_cache(10)
        assert list(handle._frames) == [5]

    def test_frames_cached(self, write_csv):
        handle = write_csv('a.csv', ['x'], [['1']])
        handle.read_column_sample('x', 5)
        handle.path.unlink()
        assert handle.read_column_sample('x', 5) == ['1']
        handle.clear_cache()
        with pytest.raises(FileReadError):
            handle.read_column_sample('x', 5)


class TestTabularErrors:
    """Read problems surface as FileReadError."""

    def test_missing_file(self, tmp_path):
        handle = TabularFile(tmp_path / 'gone.csv')
        with pytest.raises(FileReadError) as exc:
            handle.read_header()
        assert exc.value.file_id == str(tmp_path / 'gone.csv')

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'empty.csv'
        path.write_text('')
        with pytest.raises(FileReadError):
            TabularFile(path).read_header()

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / 'data.parquet'
        path.write_bytes(b'PAR1')
        with pytest.raises(FileReadError, match='Unsupported'):
            TabularFile(path).read_header()

    def test_corrupt_excel(self, tmp_path):
        path = tmp_path / 'broken.xlsx'
        path.write_bytes(b'not a zip archive')
        with pytest.raises(FileReadError):
            TabularFile(path).read_header()

    def test_bad_file_skipped_in_dictionary(self, tmp_path, write_csv):
        good = write_csv('good.csv', ['condition'], [['a'], ['b']])
        bad = TabularFile(tmp_path / 'missing.csv', file_id='missing.csv')
        dictionary = build_dictionary([bad, good])
        assert dictionary.names() == ['condition']
        assert dictionary.skipped_files[0][0] == 'missing.csv'


@pytest.mark.excel
class TestTabularExcel:
    """xlsx sheets read through openpyxl."""

    @pytest.fixture
    def workbook(self, tmp_path):
        openpyxl = pytest.importorskip('openpyxl')
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = 'trials'
        ws.append(['trial', 'rt', 'hand'])
        ws.append([1, 512.5, 'left'])
        ws.append([2, 430, None])
        other = wb.create_sheet('demographics')
        other.append(['age'])
        other.append([30])
        path = tmp_path / 'study.xlsx'
        wb.save(path)
        return path

    def test_first_sheet_by_default(self, workbook):
        handle = TabularFile(workbook)
        assert handle.read_header() == ['trial', 'rt', 'hand']
        cells = handle.read_column_sample('hand')
        assert cells[0] == 'left'
        assert cells[1] in (None, '')

    def test_named_sheet(self, workbook):
        handle = TabularFile(workbook, sheet_name='demographics')
        assert handle.read_header() == ['age']

    def test_profiles_numeric_cells(self, workbook):
        dictionary = build_dictionary([TabularFile(workbook, file_id='study.xlsx')])
        assert dictionary['rt'].type == 'number'
        assert dictionary['rt'].unit == 'milliseconds'

    def test_missing_sheet(self, workbook):
        with pytest.raises(FileReadError):
            TabularFile(workbook, sheet_name='nope').read_header()


class TestInMemoryFile:

    def test_from_columns_pads(self):
        handle = InMemoryFile.from_columns('m', {'a': ['1', '2'], 'b': ['x']})
        assert handle.read_header() == ['a', 'b']
        assert handle.read_column_sample('b') == ['x', None]
        assert handle.read_column_sample('a', 1) == ['1']

    def test_unknown_column(self):
        handle = InMemoryFile('m', ['a'], [['1']])
        assert handle.read_column_sample('z') == []
