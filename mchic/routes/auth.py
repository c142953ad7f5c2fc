"""
Mchic Setlist — Login Route
=============================

What:  POST /api/login checks a {user, pass} pair from the login form.
Why:   Lets the front-end validate credentials once, then send them as
       HTTP Basic on every later request.
How:   Same comparison as the auth gate, but the 401 carries no
       WWW-Authenticate header so browsers don't show their own dialog.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from mchic.config import Settings
from mchic.dependencies import get_settings
from mchic.exceptions import AuthenticationError
from mchic.schemas.song import ErrorResponse, LoginResponse
from mchic.security import credentials_match

logger = logging.getLogger(__name__)

LOGIN_FAILED_MESSAGE = "Credenziali errate."

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"description": "Wrong credentials", "model": ErrorResponse}},
    summary="Check the shared credentials",
)
async def login(
    body: Any = Body(default=None),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    fields = body if isinstance(body, dict) else {}
    if not credentials_match(settings, fields.get("user"), fields.get("pass")):
        logger.info("Login rejected")
        raise AuthenticationError(message=LOGIN_FAILED_MESSAGE, challenge=False)
    return LoginResponse(ok=True)
