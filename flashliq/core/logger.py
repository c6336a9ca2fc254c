# /flashliq/core/logger.py
# Structured JSON logging for the pipeline. Every event is also HMAC-signed and
# appended to <SESSION_DIR>/audit.log.
import hashlib
import hmac
import json
import logging
import os

import sentry_sdk
import structlog
from prometheus_client import Counter

from flashliq.core.config import settings

QUOTES_REQUESTED = Counter("flashliq_quotes_requested_total", "findBestQuoteStatic simulations requested")
LIQUIDATIONS_SUBMITTED = Counter("flashliq_liquidations_submitted_total", "flashLiquidate transactions broadcast")
NOT_PROFITABLE = Counter("flashliq_not_profitable_total", "Quotes rejected by the profitability evaluator", ["reason"])
ERRORS_LOGGED = Counter("flashliq_errors_logged_total", "Quote or submission failures", ["kind"])

AUDIT_FILENAME = "audit.log"


def audit_path() -> str:
    return os.path.join(settings.SESSION_DIR, AUDIT_FILENAME)


def audit_key() -> bytes:
    if settings.LOG_SIGNING_KEY:
        return settings.LOG_SIGNING_KEY.get_secret_value().encode()
    return b"insecure"


def sign_line(payload: str) -> str:
    return hmac.new(audit_key(), payload.encode(), hashlib.sha256).hexdigest()


def verify_audit_line(line: str) -> bool:
    """True if an audit line ``<json>|<hex signature>`` was signed with the current key."""
    payload, _, sig = line.rstrip("\n").rpartition("|")
    return bool(payload) and hmac.compare_digest(sign_line(payload), sig)


def sign_and_append(logger, method_name: str, event_dict: dict) -> dict:
    """Structlog processor: records the event in the audit log before rendering.

    The file lives under the session directory configured at the time of the
    call, so quotes seen and transactions sent can be attested afterwards.
    """
    payload = json.dumps(event_dict, sort_keys=True, default=str)
    signature = sign_line(payload)

    path = audit_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{payload}|{signature}\n")

    event_dict["signature"] = signature
    return event_dict


def configure_logging():
    if settings.SENTRY_DSN:
        sentry_sdk.init(dsn=settings.SENTRY_DSN.get_secret_value(), traces_sample_rate=1.0)

    level = logging.getLevelName(settings.LOG_LEVEL)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            sign_and_append,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)


def bind_position(position_ref: str):
    """Tags every event of the current invocation with the position being liquidated."""
    structlog.contextvars.bind_contextvars(position_ref=position_ref)


configure_logging()
log = get_logger("FlashLiq.System")
