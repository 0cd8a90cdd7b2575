"""
Pytest configuration and fixtures.
"""
import pytest
import sys
import os

# Add the parent directory to path so we can import the package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from calculator.calculator import Calculator
from calculator.history import HistoryLog


@pytest.fixture
def history():
    """An empty history log."""
    return HistoryLog()


@pytest.fixture
def calc(history):
    """A calculator sharing the history fixture."""
    return Calculator(history=history)


@pytest.fixture
def history_file(tmp_path):
    """Path for a history file that does not exist yet."""
    return tmp_path / "history.txt"
