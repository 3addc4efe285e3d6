"""
Observability module: structured logging with request and plan IDs.

Usage:
    from teamplan.observability import configure_logging, RequestContext

    configure_logging("INFO", json_format=True)

    with RequestContext() as ctx:
        logger.info("Applying event")  # carries ctx.request_id
"""

from .context import PlanScope, RequestContext, generate_request_id, get_plan_id, get_request_id
from .logging import (
    CorrelationIdMiddleware,
    HumanFormatter,
    JSONFormatter,
    configure_logging,
)

__all__ = [
    "CorrelationIdMiddleware",
    "HumanFormatter",
    "JSONFormatter",
    "PlanScope",
    "RequestContext",
    "configure_logging",
    "generate_request_id",
    "get_plan_id",
    "get_request_id",
]
