import logging

DEFAULT_LOG_LEVEL = "WARNING"


def resolve_log_level(name: str | None, default: str = DEFAULT_LOG_LEVEL) -> int:
    level_name = (name or default).upper()
    return logging._nameToLevel.get(level_name, logging.WARNING)


def configure_logging(level: str | None = None) -> int:
    """Configure root logging with bare messages; unknown names fall back to WARNING."""
    resolved = resolve_log_level(level)
    logging.basicConfig(level=resolved, format="%(message)s")
    return resolved
