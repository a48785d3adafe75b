import logging
import sys
from typing import Any

import structlog

# Secret-bearing keys of the account config. Never rendered.
SENSITIVE_KEYS = {
    "external_id",
    "key",
    "credentials_json",
    "private_key",
    "private_key_id",
    "password",
    "token",
    "secret",
}


def secret_redactor(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace the values of sensitive keys, at any depth, before rendering."""

    def redact(data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: ("[REDACTED]" if str(k).lower() in SENSITIVE_KEYS else redact(v))
                for k, v in data.items()
            }
        if isinstance(data, list):
            return [redact(item) for item in data]
        return data

    return redact(event_dict)


def setup_logging(debug: bool = False) -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        secret_redactor,
    ]

    if debug:
        processors.append(structlog.dev.ConsoleRenderer())
        min_level = logging.DEBUG
    else:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        min_level = logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Route stdlib logging (uvicorn, httpx) to the same stream.
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=min_level)
