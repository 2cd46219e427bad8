"""
Route guard for the MSP administration surface.

The guard is a pure decision over (loading, principal). Denial is a
rendered answer, not a redirect, so a signed-in user without the admin
flag is never bounced around between login and the admin tree.
"""

from enum import Enum
from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, status

from app.config import settings
from app.core.exceptions import forbidden
from app.core.metrics import guard_decisions_total
from app.features.portal.dependencies import Session
from app.schemas.user import Principal

logger = structlog.get_logger(__name__)


class GuardDecision(str, Enum):
    LOADING = "loading"
    REDIRECT_TO_LOGIN = "redirect_to_login"
    ACCESS_DENIED = "access_denied"
    RENDER = "render"


def evaluate_guard(
    loading: bool,
    principal: Principal | None,
    require_msp_admin: bool = True,
) -> GuardDecision:
    """Exactly one decision for every (loading, principal) combination."""
    if loading:
        return GuardDecision.LOADING
    if principal is None:
        return GuardDecision.REDIRECT_TO_LOGIN
    if require_msp_admin and not principal.is_msp_admin:
        return GuardDecision.ACCESS_DENIED
    return GuardDecision.RENDER


def guard_exception(decision: GuardDecision) -> HTTPException:
    """
    HTTP rendering of every decision except RENDER.

    LOADING only comes up for callers that hold a session across a refresh,
    such as a websocket or a background consumer. The request dependency
    awaits the refresh before the guard runs, so HTTP routes never see it.
    """
    if decision == GuardDecision.LOADING:
        return HTTPException(
            status_code=status.HTTP_202_ACCEPTED,
            detail={"status": "loading", "message": "Portal is still loading"},
        )
    if decision == GuardDecision.REDIRECT_TO_LOGIN:
        return HTTPException(
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
            detail="Authentication required",
            headers={"Location": settings.login_url},
        )
    if decision == GuardDecision.ACCESS_DENIED:
        return forbidden({
            "message": "MSP administrator access is required for this area. "
                       "Sign in with an administrator account to continue.",
            "reauthenticate_url": settings.reauthenticate_url,
        })
    raise ValueError(f"{decision} has no error rendering")


async def require_msp_admin(session: Session) -> Principal:
    """Let MSP admins through; render every other decision as a response."""
    decision = evaluate_guard(session.loading, session.principal, require_msp_admin=True)
    guard_decisions_total.labels(decision=decision.value).inc()

    if decision != GuardDecision.RENDER:
        logger.info(
            "guard_blocked",
            decision=decision.value,
            user_id=session.principal.id if session.principal else None,
        )
        raise guard_exception(decision)

    return session.principal


MSPAdmin = Annotated[Principal, Depends(require_msp_admin)]
