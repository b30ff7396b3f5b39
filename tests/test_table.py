"""
Tests for LTR Table Storage
===========================
Binary layout, header validation and the file helpers in ltrkit/table.py.
"""

import pytest
import struct
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ltrkit.builder import build_table
from ltrkit.errors import FormatError, LtrError, TruncatedDataError
from ltrkit.table import (
    HEADER,
    MAGIC,
    LtrTable,
    load_table,
    read_table,
    serialize_table,
    table_size,
    write_table,
)

NAMES = ["Aribeth", "Fenthick", "Desther", "Aarin", "Bevil", "Sedos", "Haedraline",
         "Nasher", "Oleff", "Tomi", "Linu", "Daelan", "Sharwyn", "Grimgnaw"]

RECORD_SIZE = 9 + (1 + 28 + 28 * 28) * 3 * 28 * 4


@pytest.fixture
def table():
    return build_table(NAMES)


class TestLayout:
    """Tests for the flat binary layout."""

    def test_header_size(self):
        assert HEADER.size == 9

    def test_record_size(self):
        data = serialize_table(LtrTable.empty())
        assert len(data) == RECORD_SIZE
        assert table_size(28) == RECORD_SIZE - 9

    def test_header_contents(self):
        data = serialize_table(LtrTable.empty())
        assert data[:8] == b"LTR V1.0"
        assert data[8] == 28

    def test_triple_offset(self):
        """triples[i][j] follow singles and doubles, outer index first."""
        t = LtrTable.empty()
        t.triple(1, 2).end[3] = 0.5
        data = serialize_table(t)

        cdf_index = 1 + 28 + 1 * 28 + 2
        offset = 9 + cdf_index * 3 * 28 * 4 + 2 * 28 * 4 + 3 * 4
        assert struct.unpack_from('=f', data, offset)[0] == 0.5
        assert sum(1 for b in data[9:] if b) == sum(1 for b in struct.pack('=f', 0.5) if b)

    def test_singles_first(self):
        t = LtrTable.empty()
        t.singles.middle[0] = 0.25
        data = serialize_table(t)
        assert struct.unpack_from('=f', data, 9 + 28 * 4)[0] == 0.25


class TestRoundTrip:
    """Tests for load(serialize(t))."""

    def test_built_table_round_trips(self, table):
        data = serialize_table(table)
        loaded = load_table(data)
        assert loaded == table
        assert serialize_table(loaded) == data

    def test_loaded_table_round_trips(self, table):
        data = serialize_table(table)
        assert serialize_table(load_table(data)) == data

    def test_accepts_bytearray(self, table):
        data = bytearray(serialize_table(table))
        assert load_table(data) == table

    def test_trailing_bytes_ignored(self, table):
        data = serialize_table(table)
        assert load_table(data + b"\x00" * 16) == table


class TestLoadErrors:
    """Tests for rejected records."""

    def test_bad_magic(self, table):
        data = b"BAD V1.0" + serialize_table(table)[8:]
        with pytest.raises(FormatError):
            load_table(data)

    def test_short_header(self):
        with pytest.raises(FormatError):
            load_table(b"LTR V")

    def test_empty(self):
        with pytest.raises(FormatError):
            load_table(b"")

    def test_alphabet_size_mismatch(self, table):
        data = bytearray(serialize_table(table))
        data[8] = 26
        with pytest.raises(FormatError, match="26 letters"):
            load_table(bytes(data))

    def test_truncated(self, table):
        data = serialize_table(table)[:-1]
        with pytest.raises(TruncatedDataError) as exc:
            load_table(data)
        assert exc.value.expected == RECORD_SIZE - 9
        assert exc.value.actual == RECORD_SIZE - 10

    def test_header_only_is_truncated(self):
        with pytest.raises(TruncatedDataError):
            load_table(MAGIC + bytes([28]))

    def test_errors_share_base(self):
        assert issubclass(FormatError, LtrError)
        assert issubclass(TruncatedDataError, LtrError)
        assert issubclass(FormatError, ValueError)


class TestContextAccess:
    """Tests for bounds-checked context lookup."""

    def test_context_depths(self, table):
        assert table.context() is table.singles
        assert table.context(3) is table.doubles[3]
        assert table.context(3, 4) is table.triples[3][4]

    @pytest.mark.parametrize("index", [-1, 28])
    def test_double_out_of_range(self, table, index):
        with pytest.raises(IndexError):
            table.double(index)

    def test_triple_out_of_range(self, table):
        with pytest.raises(IndexError):
            table.triple(0, -1)

    def test_too_much_context(self, table):
        with pytest.raises(ValueError):
            table.context(1, 2, 3)

    def test_cdfs_in_file_order(self, table):
        cdfs = list(table.cdfs())
        assert len(cdfs) == 1 + 28 + 28 * 28
        assert cdfs[0] is table.singles
        assert cdfs[1] is table.doubles[0]
        assert cdfs[29] is table.triples[0][0]
        assert cdfs[-1] is table.triples[27][27]

    def test_count_tables_cannot_be_serialized(self):
        with pytest.raises(ValueError):
            serialize_table(LtrTable.empty(typecode='L'))


class TestFiles:
    """Tests for read_table / write_table."""

    def test_write_then_read(self, table, tmp_path):
        path = tmp_path / "names.ltr"
        write_table(table, path)
        assert path.stat().st_size == RECORD_SIZE
        assert read_table(path) == table

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            read_table(tmp_path / "missing.ltr")
