"""
Mchic Setlist — HTTP Basic Authentication Gate
================================================

What:  Checks the shared credential pair on every gated /api route.
Why:   The duo share one login; there are no user accounts.
How:   FastAPI's HTTPBasic scheme parses the Authorization header; the
       decoded pair is compared against settings in constant time.
Who:   Mounted as a router-level dependency on songs, reset and the /api
       fallback; login uses credentials_match() directly.

Failure behavior:
    Missing header, wrong scheme or wrong pair → AuthenticationError →
    401 with `WWW-Authenticate: Basic realm="Mchic"`. A header that is not
    valid Basic encoding is rejected by HTTPBasic itself with the same
    status and challenge.
"""

import logging
import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from mchic.config import Settings
from mchic.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

AUTH_REALM = "Mchic"

basic_scheme = HTTPBasic(realm=AUTH_REALM, auto_error=False)


def credentials_match(settings: Settings, user: object, password: object) -> bool:
    """
    Compare a user/password pair with the configured one.

    Non-string inputs never match. Both comparisons always run so the
    response time does not reveal which half was wrong.
    """
    if not isinstance(user, str) or not isinstance(password, str):
        return False
    user_ok = secrets.compare_digest(user.encode("utf-8"), settings.mchic_user.encode("utf-8"))
    pass_ok = secrets.compare_digest(password.encode("utf-8"), settings.mchic_pass.encode("utf-8"))
    return user_ok and pass_ok


async def require_credentials(
    request: Request,
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme),
) -> str:
    """
    FastAPI dependency guarding a route with HTTP Basic auth.

    Returns:
        The authenticated username.

    Raises:
        AuthenticationError: No or wrong credentials (→ 401 with challenge).
    """
    settings: Settings = request.app.state.settings
    if credentials is None:
        raise AuthenticationError()
    if not credentials_match(settings, credentials.username, credentials.password):
        # Never log the attempted password
        logger.warning("Rejected credentials for user '%s' on %s", credentials.username, request.url.path)
        raise AuthenticationError()
    return credentials.username
