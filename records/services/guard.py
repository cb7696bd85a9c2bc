"""
Request-scoped access checks.

``AccessGuard.authenticate`` turns an ``Authorization: Bearer`` header
into the acting user; the role checks then run against that freshly
loaded user.  The role embedded in the token is only a hint and never
decides access.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from records.exceptions import (
    Forbidden,
    InvalidToken,
    MalformedHeader,
    MissingHeader,
    NotFoundError,
)
from records.models import Role, User
from records.services.tokens import ParsedToken, TokenConfig, TokenService
from records.stores import UserStore

logger = logging.getLogger(__name__)

BEARER_PREFIX = 'Bearer '


@dataclass(frozen=True)
class AuthenticatedUser:
    user: User
    token: ParsedToken


class AccessGuard:

    def __init__(self, tokens: TokenService, users: UserStore):
        self.tokens = tokens
        self.users = users

    @classmethod
    def from_settings(cls) -> 'AccessGuard':
        return cls(TokenService(TokenConfig.from_settings()), UserStore())

    def authenticate(self, headers: Mapping[str, str]) -> AuthenticatedUser:
        auth_header = headers.get('Authorization') or ''
        if not auth_header:
            raise MissingHeader()
        if not auth_header.startswith(BEARER_PREFIX):
            raise MalformedHeader()

        token = auth_header[len(BEARER_PREFIX):].strip()
        try:
            parsed = self.tokens.validate(token)
        except InvalidToken as exc:
            logger.debug('token rejected: %s', type(exc).__name__)
            raise InvalidToken() from exc
        try:
            user = self.tokens.resolve_user(parsed, self.users)
        except NotFoundError as exc:
            raise InvalidToken() from exc

        if not user.is_active:
            raise InvalidToken()
        if user.role != parsed.role:
            logger.info('token for user %s carries role %s, stored role is %s', user.pk, parsed.role, user.role)
        return AuthenticatedUser(user=user, token=parsed)

    @staticmethod
    def require_role(user: User, role: Role) -> None:
        if Role.parse(user.role) != role:
            raise Forbidden()

    @staticmethod
    def require_any_role(user: User, roles: Iterable[Role]) -> None:
        if Role.parse(user.role) not in set(roles):
            raise Forbidden()
