"""Session cookie — every visitor gets an opaque session id on first touch."""
from __future__ import annotations
import uuid

from fastapi import Request

from benchshare.core import config


async def session_cookie_middleware(request: Request, call_next):
    session_id = request.cookies.get(config.SESSION_COOKIE_NAME)
    issued = not session_id
    if issued:
        session_id = uuid.uuid4().hex
    request.state.session_id = session_id

    response = await call_next(request)

    if issued:
        response.set_cookie(config.SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")
    return response


def get_session_id(request: Request) -> str:
    return request.state.session_id
