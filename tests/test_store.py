"""
Tests for history persistence.
"""
import re
import pytest

from calculator.config import HISTORY_HEADER
from calculator.store import (
    HistoryStore, HistoryStoreError, HistoryNotFoundError, ResourceUnavailableError,
)

LINE_FORMAT = re.compile(r"^[a-z_]+\((-?[\w.]+)(, -?[\w.]+)*\) = .+$")


class TestHistoryStoreSave:
    """Tests for HistoryStore.save."""

    def test_save_empty_log(self, history, history_file):
        """Test saving an empty log writes only the header."""
        store = HistoryStore(history_file)

        assert store.save(history) == 0
        assert history_file.read_text(encoding="utf-8") == HISTORY_HEADER + "\n"

    def test_save_entries(self, calc, history, history_file):
        """Test each entry is written on its own line after the header."""
        calc.add(2, 3)
        calc.divide(1, 0)
        calc.circle_area(1)

        HistoryStore(history_file).save(history)

        lines = history_file.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "History of calculations:"
        assert lines[1] == "add(2, 3) = 5"
        assert lines[2] == "divide(1, 0) = Error: Division by zero"
        assert lines[3].startswith("circle_area(1) = 3.14159")

    def test_save_overwrites(self, calc, history, history_file):
        """Test a second save replaces the previous contents."""
        store = HistoryStore(history_file)
        calc.add(1, 1)
        store.save(history)
        history.clear()
        store.save(history)

        assert store.load() == [HISTORY_HEADER]

    def test_save_does_not_modify_log(self, calc, history, history_file):
        """Test saving leaves the log untouched."""
        calc.add(1, 2)
        before = history.entries()

        HistoryStore(history_file).save(history)

        assert history.entries() == before

    def test_save_without_path(self, history):
        """Test saving with no configured file fails."""
        with pytest.raises(ResourceUnavailableError):
            HistoryStore().save(history)

    def test_save_unwritable_path(self, history, tmp_path):
        """Test saving into a missing directory fails with ResourceUnavailableError."""
        store = HistoryStore(tmp_path / "missing" / "history.txt")

        with pytest.raises(ResourceUnavailableError) as exc_info:
            store.save(history)
        assert isinstance(exc_info.value.__cause__, OSError)


class TestHistoryStoreLoad:
    """Tests for HistoryStore.load."""

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_round_trip_line_count(self, calc, history, history_file, count):
        """Test N saved entries load back as N + 1 lines."""
        for i in range(count):
            calc.multiply(i, 2.5)
        store = HistoryStore(history_file)
        store.save(history)

        lines = store.load()

        assert len(lines) == count + 1
        assert lines[0] == HISTORY_HEADER
        assert lines[1:] == history.render()
        assert all(LINE_FORMAT.match(line) for line in lines[1:])

    def test_load_returns_lines_verbatim(self, history_file):
        """Test loading does not parse or validate the lines."""
        history_file.write_text("first\n  second  \nthird", encoding="utf-8")

        assert HistoryStore(history_file).load() == ["first", "  second  ", "third"]

    def test_load_missing_file(self, history_file):
        """Test loading a missing file raises HistoryNotFoundError."""
        with pytest.raises(HistoryNotFoundError):
            HistoryStore(history_file).load()

    def test_load_without_path(self):
        """Test loading with no configured file fails."""
        with pytest.raises(ResourceUnavailableError):
            HistoryStore().load()

    def test_load_directory(self, tmp_path):
        """Test loading a path that is a directory fails with ResourceUnavailableError."""
        with pytest.raises(ResourceUnavailableError):
            HistoryStore(tmp_path).load()

    def test_load_invalid_utf8(self, history_file):
        """Test a file that is not valid UTF-8 fails with ResourceUnavailableError."""
        history_file.write_bytes(b"History of calculations:\n\xff\xfe\n")

        with pytest.raises(ResourceUnavailableError) as exc_info:
            HistoryStore(history_file).load()
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_load_splits_only_on_newline(self, history_file):
        """Test form feeds and other separators stay inside their line."""
        history_file.write_text("a\x0cb\nc\x1ed e\nf\x85g\n", encoding="utf-8")

        assert HistoryStore(history_file).load() == ["a\x0cb", "c\x1ed e", "f\x85g"]

    def test_load_empty_lines_kept(self, history_file):
        """Test blank lines are returned as empty strings."""
        history_file.write_text("header\n\nlast\n", encoding="utf-8")

        assert HistoryStore(history_file).load() == ["header", "", "last"]

    def test_load_empty_file(self, history_file):
        """Test an empty file loads as no lines."""
        history_file.write_text("", encoding="utf-8")

        assert HistoryStore(history_file).load() == []


class TestHistoryStorePath:
    """Tests for configuring the target file."""

    def test_set_path(self, history, history_file):
        """Test setting the path after construction."""
        store = HistoryStore()
        assert store.path is None

        store.set_path(str(history_file))
        store.save(history)

        assert store.path == history_file
        assert history_file.exists()

    def test_unset_path(self, history, history_file):
        """Test clearing the path makes the store unusable again."""
        store = HistoryStore(history_file)
        store.set_path(None)

        with pytest.raises(ResourceUnavailableError):
            store.save(history)

    def test_error_hierarchy(self):
        """Test both store errors share a base class."""
        assert issubclass(ResourceUnavailableError, HistoryStoreError)
        assert issubclass(HistoryNotFoundError, HistoryStoreError)
        assert not issubclass(HistoryNotFoundError, ResourceUnavailableError)
