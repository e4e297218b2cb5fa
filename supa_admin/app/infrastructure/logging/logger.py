import json
import logging
import os
from datetime import datetime, timezone


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(os.getenv("SUPA_ADMIN_LOG_LEVEL", "INFO").upper())
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    *,
    actor: str | None = None,
    trace_id: str | None = None,
    count: int | None = None,
    level: int = logging.INFO,
) -> None:
    record = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": logging.getLevelName(level),
        "module": module,
        "action": action,
        "actor": actor,
        "trace_id": trace_id,
        "outcome": outcome,
    }
    if count is not None:
        record["count"] = count
    logger.log(level, json.dumps(record))
