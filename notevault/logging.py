# notevault/logging.py
import logging
import os
import re
from typing import Any, Dict, Optional

PII_RE = re.compile(r"([\w\.-]+)@([\w\.-]+)")  # naive email redaction
MAX_LOGGED_CHARS = 200


def configure_logging(level: Optional[str] = None):
    # Handlers write to stderr; stdout carries the stdio JSON-RPC stream.
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def redact_str(s: str) -> str:
    s = PII_RE.sub("[redacted-email]", s)
    if len(s) > MAX_LOGGED_CHARS:
        s = f"{s[:MAX_LOGGED_CHARS]}... ({len(s)} chars)"
    return s


def redact_args(args: Dict[str, Any]) -> Dict[str, Any]:
    safe: Dict[str, Any] = {}
    for k, v in args.items():
        if isinstance(v, str):
            safe[k] = redact_str(v)
        elif isinstance(v, list):
            safe[k] = [redact_str(x) if isinstance(x, str) else x for x in v]
        else:
            safe[k] = v
    return safe


def log_tool_call(logger: logging.Logger, name: str, args: Dict[str, Any]):
    logger.info("tool_call %s %s", name, redact_args(args))
