"""
zkLogin-based authentication for the API.

Protected endpoints include `Depends(authenticate)`. The Authorization
header value (with or without a "Bearer " prefix) is handed to the zkLogin
verifier; whatever goes wrong (no header, bad token, verifier unreachable)
the client only sees 401 {"error": "Unauthorized"}. The cause is logged.
"""

from typing import Optional

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from .models import Principal
from .zklogin import TokenVerifier

logger = structlog.get_logger()

authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def get_verifier(request: Request) -> TokenVerifier:
    """Token verifier created at startup."""
    return request.app.state.verifier


def extract_credential(header_value: Optional[str]) -> Optional[str]:
    """Return the credential carried by an Authorization header value."""
    if not header_value:
        return None
    value = header_value.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer":
        value = rest.strip()
    return value or None


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
    )


async def authenticate(
    request: Request,
    authorization: Optional[str] = Depends(authorization_header),
    verifier: TokenVerifier = Depends(get_verifier),
) -> Principal:
    """
    Verify the request's credential and attach the player to the request.

    Returns:
        The verified Principal (also stored on request.state.principal)

    Raises:
        HTTPException: 401 on any authentication failure
    """
    credential = extract_credential(authorization)
    if credential is None:
        logger.warning("authentication_failed", reason="missing credential", path=request.url.path)
        raise _unauthorized()

    try:
        principal = await verifier.verify_token(credential)
    except Exception as e:
        logger.warning("authentication_failed", reason=str(e), path=request.url.path)
        raise _unauthorized() from e

    request.state.principal = principal
    return principal
