"""
FastAPI entrypoint for the calculator service.
"""
import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import List, Optional
from pydantic import BaseModel, Field
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from .config import (
    HISTORY_FILE, LOG_FILE, LOG_LEVEL, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
    MAX_OPERANDS, CALCULATE_RATE_LIMIT,
)
from .calculator import Calculator
from .history import Operation, OperationRecord, format_value, is_error
from .store import HistoryStore, HistoryNotFoundError, ResourceUnavailableError

# Attributes present on every LogRecord, excluded from the JSON extras dict
_LOG_RECORD_BUILTIN_ATTRS = {
    'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno', 'message', 'module',
    'msecs', 'msg', 'name', 'pathname', 'process', 'processName',
    'relativeCreated', 'stack_info', 'thread', 'threadName', 'taskName',
}


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON for machine-readable file output."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        for key, val in record.__dict__.items():
            if key not in _LOG_RECORD_BUILTIN_ATTRS and key not in entry:
                entry[key] = val
        return json.dumps(entry, default=str)


_console_handler = logging.StreamHandler()
_console_handler.setFormatter(
    logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
)

_file_handler = RotatingFileHandler(
    LOG_FILE, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding='utf-8'
)
_file_handler.setFormatter(JSONFormatter())

logging.basicConfig(level=LOG_LEVEL, handlers=[_console_handler, _file_handler])
logger = logging.getLogger(__name__)


# Process-wide calculator and store
_calculator: Optional[Calculator] = None
_history_store: Optional[HistoryStore] = None


def get_calculator() -> Calculator:
    """Get or create the global calculator instance."""
    global _calculator
    if _calculator is None:
        _calculator = Calculator()
    return _calculator


def get_history_store() -> HistoryStore:
    """Get or create the global history store, pointed at HISTORY_FILE."""
    global _history_store
    if _history_store is None:
        _history_store = HistoryStore(HISTORY_FILE)
    return _history_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    logger.info("Starting calculator service")
    if get_history_store().path is None:
        logger.warning("HISTORY_FILE is not set; saving history will fail until it is configured")
    else:
        logger.info(f"History file: {get_history_store().path}")
    yield


limiter = Limiter(key_func=get_remote_address)

app = FastAPI(
    title="Calculator",
    description="Calculator with operation history and file export",
    version="1.0.0",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every HTTP request with method, path, status code, and duration."""
    start_time = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start_time) * 1000, 2)
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class CalculateRequest(BaseModel):
    """Request model for calculate endpoint."""
    operation: Operation = Field(..., description="Operation name")
    operands: List[float] = Field(
        ..., min_length=1, max_length=MAX_OPERANDS, description="Operands in order"
    )


class CalculateResponse(BaseModel):
    """Response model for calculate endpoint."""
    operation: Operation
    operands: List[float]
    result: Optional[float]
    error: Optional[str]
    rendered: str


class HistoryEntry(BaseModel):
    """One history entry."""
    operation: Operation
    operands: List[float]
    result: Optional[float]
    error: Optional[str]
    timestamp: datetime
    rendered: str


class HistoryFileResponse(BaseModel):
    """Response model for saved history file contents."""
    path: str
    lines: List[str]


class SaveResponse(BaseModel):
    """Response model for save endpoint."""
    path: str
    entries_saved: int


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str
    history_entries: int
    history_file: Optional[str]


def _to_history_entry(record: OperationRecord) -> HistoryEntry:
    return HistoryEntry(
        operation=record.operation,
        operands=list(record.operands),
        result=None if record.is_error else record.result,
        error=str(record.result) if record.is_error else None,
        timestamp=record.timestamp,
        rendered=record.render(),
    )


# Endpoints
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Report service status and history configuration."""
    path = get_history_store().path
    return HealthResponse(
        status="healthy",
        history_entries=len(get_calculator().history),
        history_file=str(path) if path else None,
    )


@app.post("/calculate", response_model=CalculateResponse)
@limiter.limit(CALCULATE_RATE_LIMIT)
async def calculate_endpoint(request: Request, body: CalculateRequest):
    """
    Run one operation and record it in the history.

    Recovered arithmetic failures such as division by zero are not request
    failures: they return 200 with result null and the error message set.
    """
    request_id = uuid.uuid4().hex[:8]
    calculator = get_calculator()

    try:
        result = calculator.calculate(body.operation, *body.operands)
    except TypeError:
        logger.error(
            f"[{request_id}] Wrong operand count for {body.operation.value}: {len(body.operands)}",
            extra={"request_id": request_id, "operation": body.operation.value},
        )
        raise HTTPException(
            status_code=422,
            detail=f"Wrong number of operands for {body.operation.value}: {len(body.operands)}"
        )

    record = calculator.history.last()
    logger.info(
        f"[{request_id}] {record.render()}",
        extra={
            "request_id": request_id,
            "operation": body.operation.value,
            "error": is_error(result),
        },
    )

    return CalculateResponse(
        operation=body.operation,
        operands=body.operands,
        result=None if is_error(result) else result,
        error=format_value(result) if is_error(result) else None,
        rendered=record.render(),
    )


@app.get("/history", response_model=List[HistoryEntry])
async def history_endpoint():
    """List recorded operations, oldest first."""
    return [_to_history_entry(r) for r in get_calculator().history.entries()]


@app.delete("/history")
async def clear_history_endpoint():
    """Clear all recorded operations."""
    get_calculator().history.clear()
    return {"message": "History cleared"}


@app.post("/history/save", response_model=SaveResponse)
async def save_history_endpoint():
    """Write the current history to the configured file."""
    store = get_history_store()
    try:
        saved = store.save(get_calculator().history)
    except ResourceUnavailableError as e:
        logger.error(f"History save failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    return SaveResponse(path=str(store.path), entries_saved=saved)


@app.get("/history/file", response_model=HistoryFileResponse)
async def load_history_endpoint():
    """Return the lines of the saved history file."""
    store = get_history_store()
    try:
        lines = store.load()
    except HistoryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ResourceUnavailableError as e:
        logger.error(f"History load failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    return HistoryFileResponse(path=str(store.path), lines=lines)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
