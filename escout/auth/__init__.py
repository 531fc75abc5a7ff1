"""Bearer-token authentication helpers shared across blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Iterable, TypeVar, cast

from flask import g, request

from escout.extensions import db
from escout.models import Account, AccountRole
from escout.services.exceptions import Forbidden, InvalidToken
from escout.services.tokens import ACCESS, decode_token

F = TypeVar('F', bound=Callable[..., object])


def _normalize_roles(roles: Iterable[AccountRole | str]) -> set[str]:
    normalized: set[str] = set()
    for role in roles:
        if isinstance(role, AccountRole):
            normalized.add(role.value)
        else:
            normalized.add(str(role))
    return normalized


def bearer_token() -> str | None:
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def current_account() -> Account | None:
    return getattr(g, 'current_account', None)


def token_required(func: F) -> F:
    """Decorator requiring a valid access token; loads ``g.current_account``."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        token = bearer_token()
        if token is None:
            raise InvalidToken("No token provided")

        claims = decode_token(token, ACCESS)
        account = db.session.get(Account, claims['sub'])
        if account is None:
            raise InvalidToken()

        g.current_account = account
        g.token_claims = claims
        return func(*args, **kwargs)
    return cast(F, wrapper)


def roles_required(*roles: AccountRole | str):
    """Decorator factory requiring an authenticated account with one of the roles."""

    required = _normalize_roles(roles)

    def decorator(func: F) -> F:
        @token_required
        @wraps(func)
        def wrapper(*args, **kwargs):
            account = current_account()
            if required and not account.has_role(*required):
                raise Forbidden()
            return func(*args, **kwargs)
        return cast(F, wrapper)

    return decorator


__all__ = [
    'bearer_token',
    'current_account',
    'token_required',
    'roles_required',
]
