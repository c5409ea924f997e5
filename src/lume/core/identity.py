"""Owner identity verification.

When ``auth_secret`` is configured, callers must present a signed bearer
token whose ``sub`` claim names the owner.  Owner identifiers found in paths
or request bodies are then only accepted when they match that claim, and
items addressed by identifier must belong to it.

Without a secret the backend keeps its open behaviour: the owner identifier
supplied by the caller is used as-is.

The browser client sends whatever token is entered next to the owner id as
an ``Authorization: Bearer`` header; tokens are minted out of band with
:func:`issue_token` and the same secret.
"""

from __future__ import annotations

import logging

from jose import JWTError, jwt

from lume.core.config import LumeConfig
from lume.core.errors import AuthenticationError, OwnerMismatchError

logger = logging.getLogger(__name__)


def issue_token(owner_id: str, config: LumeConfig, **claims) -> str:
    """Sign a bearer token for *owner_id* that :func:`verify_token` accepts.

    Raises:
        RuntimeError: If no ``auth_secret`` is configured.
    """
    if not config.auth_secret:
        raise RuntimeError("auth_secret is not configured")
    payload = {"sub": owner_id, **claims}
    return jwt.encode(payload, config.auth_secret, algorithm=config.auth_algorithm)


def verify_token(token: str, config: LumeConfig) -> str:
    """Verify *token* and return the owner identifier it carries.

    Raises:
        AuthenticationError: If the token is malformed, badly signed,
            expired, or has no ``sub`` claim.
    """
    try:
        claims = jwt.decode(token, config.auth_secret, algorithms=[config.auth_algorithm])
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise AuthenticationError("Invalid or expired token") from e

    owner_id = claims.get("sub")
    if not owner_id:
        raise AuthenticationError("Token has no subject")
    return str(owner_id)


def parse_authorization(header: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: If the header is missing or not a bearer token.
    """
    if not header:
        raise AuthenticationError("Missing bearer token")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Missing bearer token")
    return token.strip()


def resolve_owner(claimed: str | None, verified: str | None) -> str | None:
    """Decide which owner identifier a request acts for.

    Args:
        claimed: Identifier from the path or body, if any.
        verified: Identifier from a verified token, or ``None`` when
            verification is disabled.

    Returns:
        The verified identifier when present, otherwise the claimed one.

    Raises:
        OwnerMismatchError: If both are present and differ.
    """
    if verified is None:
        return claimed
    if claimed and claimed != verified:
        raise OwnerMismatchError()
    return verified


def check_item_owner(item_owner: str, verified: str | None) -> None:
    """Ensure a verified caller owns the item it addresses.

    Raises:
        OwnerMismatchError: If verification is on and the owners differ.
    """
    if verified is not None and item_owner != verified:
        raise OwnerMismatchError("Not allowed to access this item")
