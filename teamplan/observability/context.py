"""
Log context: the current request id and the plan being worked on.

The API middleware opens a RequestContext per HTTP request and the CLI
opens one per command. PlanService.apply opens a PlanScope around each
lifecycle event, so reducer and store logs name the plan they touched.
"""

import contextvars
import uuid

_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_plan_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "plan_id", default=None
)


def get_request_id() -> str | None:
    return _request_id_var.get()


def get_plan_id() -> str | None:
    return _plan_id_var.get()


def generate_request_id() -> str:
    return f"req-{uuid.uuid4().hex[:16]}"


class _ContextVarScope:
    """Set one contextvar for the duration of a ``with`` block."""

    _var: contextvars.ContextVar

    def __init__(self, value: str):
        self._value = value
        self._token: contextvars.Token | None = None

    def __enter__(self):
        self._token = self._var.set(self._value)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            self._var.reset(self._token)
            self._token = None


class RequestContext(_ContextVarScope):
    """
    Request id for one API call or CLI command.

    Usage (see CorrelationIdMiddleware and cli.main.main):
        with RequestContext(request_id=header_value) as ctx:
            await app(scope, receive, send)  # logs carry ctx.request_id
    """

    _var = _request_id_var

    def __init__(self, request_id: str | None = None):
        self.request_id = request_id or generate_request_id()
        super().__init__(self.request_id)


class PlanScope(_ContextVarScope):
    """Plan id for the events applied inside the block."""

    _var = _plan_id_var

    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__(plan_id)
