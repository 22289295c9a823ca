"""Caller identity dependencies.

Authentication happens at the gateway, which forwards the user id in
``X-User-Id``; ``IdentityMiddleware`` copies it to ``request.state.user_id``.
Recruiter endpoints use the same id as the recruiter id.

Usage:
    @router.get("/job-posting/recruiter")
    async def list_own_postings(user_id: CurrentUserDep):
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from jobboard_service.core.exceptions import UnauthorizedException


def get_current_user_id(request: Request) -> str:
    """Return the authenticated user id.

    Raises:
        UnauthorizedException: If the request carries no user id.
    """
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise UnauthorizedException(
            detail="Authentication required",
            extra={"header": "X-User-Id"},
        )
    return user_id


CurrentUserDep = Annotated[str, Depends(get_current_user_id)]
