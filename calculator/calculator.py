"""
Calculator façade: computes results and records them in a history log.
"""
import logging
from typing import Callable, Dict, Optional, Union

from . import engine
from .engine import DivisionByZeroError, PowFn
from .history import ErrorMarker, HistoryLog, Operation, Result

logger = logging.getLogger(__name__)

DIVISION_BY_ZERO_MESSAGE = "Division by zero"
OUT_OF_RANGE_MESSAGE = "Result out of range"
DOMAIN_ERROR_MESSAGE = "Math domain error"


class Calculator:
    """Performs operations and logs each one to a HistoryLog."""

    def __init__(
        self,
        history: Optional[HistoryLog] = None,
        pow_fn: Optional[PowFn] = None,
        pi_value: Optional[float] = None
    ):
        """
        Initialize calculator.

        Args:
            history: Log to append to. Shared with the caller when given,
                otherwise a new one is created
            pow_fn: Exponentiation override for power()
            pi_value: Pi override for circle_area()
        """
        self._history = history if history is not None else HistoryLog()
        self._pow_fn = pow_fn
        self._pi_value = pi_value
        self._last_result: Optional[Result] = None

    @property
    def history(self) -> HistoryLog:
        return self._history

    @property
    def last_result(self) -> Optional[Result]:
        """Result of the most recent operation, None before the first one."""
        return self._last_result

    def add(self, x: float, y: float) -> Result:
        return self._run(Operation.ADD, engine.add, x, y)

    def subtract(self, x: float, y: float) -> Result:
        return self._run(Operation.SUBTRACT, engine.subtract, x, y)

    def multiply(self, x: float, y: float) -> Result:
        return self._run(Operation.MULTIPLY, engine.multiply, x, y)

    def divide(self, x: float, y: float) -> Result:
        """Divide x by y. Returns an ErrorMarker when y is zero."""
        return self._run(Operation.DIVIDE, engine.divide, x, y)

    def power(self, x: float, y: float) -> Result:
        return self._run(
            Operation.POWER,
            lambda a, b: engine.power(a, b, pow_fn=self._pow_fn),
            x, y
        )

    def circle_area(self, radius: float) -> Result:
        return self._run(
            Operation.CIRCLE_AREA,
            lambda r: engine.circle_area(r, pi_value=self._pi_value),
            radius
        )

    def calculate(self, operation: Union[Operation, str], *operands: float) -> Result:
        """
        Dispatch an operation by name.

        Raises:
            ValueError: If the operation name is unknown
            TypeError: If the operand count does not match the operation
        """
        method = self._dispatch()[Operation(operation)]
        return method(*operands)

    def _dispatch(self) -> Dict[Operation, Callable[..., Result]]:
        return {
            Operation.ADD: self.add,
            Operation.SUBTRACT: self.subtract,
            Operation.MULTIPLY: self.multiply,
            Operation.DIVIDE: self.divide,
            Operation.POWER: self.power,
            Operation.CIRCLE_AREA: self.circle_area,
        }

    def _run(self, operation: Operation, compute: Callable[..., float], *operands: float) -> Result:
        """Compute, remember and record one operation."""
        try:
            result: Result = compute(*operands)
        except DivisionByZeroError as e:
            logger.debug(f"{operation.value} failed: {e}")
            result = ErrorMarker(DIVISION_BY_ZERO_MESSAGE)
        except OverflowError as e:
            logger.debug(f"{operation.value} failed: {e}")
            result = ErrorMarker(OUT_OF_RANGE_MESSAGE)
        except (ArithmeticError, ValueError) as e:
            logger.debug(f"{operation.value} failed: {e}")
            result = ErrorMarker(DOMAIN_ERROR_MESSAGE)

        self._last_result = result
        self._history.add_entry(operation, *operands, result=result)
        return result
