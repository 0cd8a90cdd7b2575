"""
Configuration constants for the calculator service.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# History persistence. No default file: saving without one configured fails.
HISTORY_FILE = os.getenv("HISTORY_FILE") or None
HISTORY_HEADER = "History of calculations:"

# Logging
LOG_FILE = os.getenv("LOG_FILE", "calculator.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))  # 10MB
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "3"))

# Guardrails
MAX_OPERANDS = int(os.getenv("MAX_OPERANDS", "2"))
CALCULATE_RATE_LIMIT = os.getenv("CALCULATE_RATE_LIMIT", "120/minute")
