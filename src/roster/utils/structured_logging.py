"""
Structured Logging
==================
structlog integration for run-level events (solve started/finished,
validation outcome). Per-step tracing stays on the standard ``logging``
tree configured in :mod:`roster.utils.logging_setup`.

Usage:
    from roster.utils.structured_logging import get_structured_logger

    log = get_structured_logger("roster.solver.engine")
    log.info("solve_started", days=20, people=8)
"""
import logging
import sys

import structlog


def configure_structlog(json_output: bool = False, level: int = logging.INFO) -> None:
    """
    Configure structlog for the application.

    Args:
        json_output: JSON lines (for machines) instead of colored console output.
        level: Minimum level for structured events.
    """
    if json_output:
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        # stderr keeps stdout free for report output
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_structured_logger(name: str):
    """Get a lazy structlog logger carrying ``logger_name=name``; configuration is resolved on use."""
    return structlog.get_logger(name, logger_name=name)


def bind_context(**kwargs) -> None:
    """Bind context variables (e.g. ``run_id``) for all subsequent structured events."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
