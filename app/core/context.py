"""
Per-request context carried through contextvars.

The middleware opens a context for every request; authentication and the
portal session add the caller and the resolved tenant as they learn them.
The log processors read it back so every line names its request.
"""

import contextvars
from dataclasses import asdict, dataclass, replace
from typing import Any


@dataclass(frozen=True)
class RequestContext:
    request_id: str | None = None
    trace_id: str | None = None
    origin: str | None = None
    user_id: str | None = None
    tenant_id: str | None = None


_EMPTY = RequestContext()

_request_context: contextvars.ContextVar[RequestContext] = contextvars.ContextVar(
    "request_context", default=_EMPTY
)


def set_request_context(**fields: str | None) -> None:
    """Merge the given fields into the current context; None leaves a field as is."""
    updates = {key: value for key, value in fields.items() if value is not None}
    if updates:
        _request_context.set(replace(_request_context.get(), **updates))


def get_request_context() -> dict[str, Any]:
    return asdict(_request_context.get())


def clear_request_context() -> None:
    _request_context.set(_EMPTY)
