"""
Structured, append-only history of calculator operations.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    """Operations a calculator can record."""
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    POWER = "power"
    CIRCLE_AREA = "circle_area"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ErrorMarker:
    """Result of an operation that failed and was recovered."""
    message: str

    def __str__(self) -> str:
        return f"Error: {self.message}"


Result = Union[float, ErrorMarker]


def is_error(value) -> bool:
    """True if value is an error marker rather than a numeric result."""
    return isinstance(value, ErrorMarker)


def format_value(value) -> str:
    """Render a number or error marker for display (5.0 renders as 5)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class OperationRecord:
    """One timestamped history entry."""
    operation: Operation
    operands: Tuple[float, ...]
    result: Result
    timestamp: datetime

    @property
    def is_error(self) -> bool:
        return is_error(self.result)

    def render(self) -> str:
        """Render as '<operation>(<operands>) = <result>'."""
        operands = ", ".join(format_value(o) for o in self.operands)
        return f"{self.operation.value}({operands}) = {format_value(self.result)}"

    def __str__(self) -> str:
        return self.render()


class HistoryLog:
    """Ordered log of OperationRecord, cleared only as a whole."""

    def __init__(self):
        self._entries: List[OperationRecord] = []

    def add_entry(
        self,
        operation: Union[Operation, str],
        *operands: float,
        result: Result
    ) -> None:
        """
        Append a record with the current UTC time.

        Args:
            operation: Operation or its name
            *operands: Operands in the order they were supplied
            result: Computed value or error marker

        Raises:
            ValueError: If operation is not a known operation name
        """
        record = OperationRecord(
            operation=Operation(operation),
            operands=tuple(operands),
            result=result,
            timestamp=datetime.now(timezone.utc)
        )
        self._entries.append(record)
        logger.debug(f"Recorded {record.render()}")

    def clear(self) -> None:
        """Remove every entry."""
        count = len(self._entries)
        self._entries = []
        logger.info(f"Cleared {count} history entries")

    def entries(self) -> Tuple[OperationRecord, ...]:
        """Snapshot of the entries in insertion order."""
        return tuple(self._entries)

    def last(self) -> Optional[OperationRecord]:
        """Most recent entry, or None if the log is empty."""
        if self._entries:
            return self._entries[-1]
        return None

    def render(self) -> List[str]:
        return [record.render() for record in self._entries]

    def __len__(self) -> int:
        return len(self._entries)
