"""Access and refresh token helpers built on PyJWT."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import jwt
from flask import current_app

from escout.services.exceptions import InvalidToken

if TYPE_CHECKING:
    from escout.models import Account

ALGORITHM = 'HS256'
ACCESS = 'access'
REFRESH = 'refresh'


def _secret(token_type: str) -> str:
    if token_type == REFRESH:
        return current_app.config['JWT_REFRESH_SECRET']
    return current_app.config['JWT_ACCESS_SECRET']


def _lifetime(token_type: str) -> timedelta:
    if token_type == REFRESH:
        return timedelta(days=current_app.config['JWT_REFRESH_EXPIRES_DAYS'])
    return timedelta(minutes=current_app.config['JWT_ACCESS_EXPIRES_MINUTES'])


def _claims(account: Account, token_type: str) -> dict[str, Any]:
    now = datetime.now(timezone.utc)
    claims = {
        'sub': account.id,
        'role': account.role.value if hasattr(account.role, 'value') else str(account.role),
        'type': token_type,
        'iat': now,
        'exp': now + _lifetime(token_type),
    }
    if token_type == REFRESH:
        claims['jti'] = uuid.uuid4().hex
    return claims


def create_access_token(account: Account) -> str:
    return jwt.encode(_claims(account, ACCESS), _secret(ACCESS), algorithm=ALGORITHM)


def create_refresh_token(account: Account) -> str:
    return jwt.encode(_claims(account, REFRESH), _secret(REFRESH), algorithm=ALGORITHM)


def decode_token(token: str, token_type: str = ACCESS) -> dict[str, Any]:
    """
    Verify a token's signature, expiry and purpose.

    Raises:
        InvalidToken: if any of the checks fail
    """
    if not token:
        raise InvalidToken("No token provided")
    try:
        data = jwt.decode(
            token,
            _secret(token_type),
            algorithms=[ALGORITHM],
            options={'require': ['sub', 'exp', 'type']},
        )
    except jwt.InvalidTokenError as e:
        raise InvalidToken() from e

    if data.get('type') != token_type:
        raise InvalidToken()
    return data


__all__ = [
    "ACCESS",
    "REFRESH",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
