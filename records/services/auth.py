"""
Login and registration.

Both flows end with a freshly issued bearer token and a sanitized view
of the account.  Login failures are deliberately undifferentiated: an
unknown username and a wrong password raise the same error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from records.exceptions import InvalidCredentials, InvalidInput, InvalidRole, UsernameTaken
from records.models import Role, User
from records.serializers.user import UserSerializer
from records.services.passwords import PasswordHasher
from records.services.tokens import TokenConfig, TokenService
from records.stores import UserStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AuthResult:
    token: str
    user: User

    @property
    def user_view(self) -> dict:
        return UserSerializer(self.user).data


class AuthService:

    def __init__(self, users: UserStore, hasher: PasswordHasher, tokens: TokenService):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    @classmethod
    def from_settings(cls) -> 'AuthService':
        return cls(UserStore(), PasswordHasher(), TokenService(TokenConfig.from_settings()))

    def login(self, username: str, password: str) -> AuthResult:
        user = self.users.find_by_username(username) if username else None
        if user is None:
            # Spend the hashing cost anyway so response time does not reveal unknown usernames
            self.hasher.hash(password or '')
            verified = False
        else:
            verified = user.is_active and self.hasher.verify(user.password, password or '')
        if not verified:
            logger.info('login failed for username %r', username)
            raise InvalidCredentials()

        token = self.tokens.issue(user.pk, user.role)
        logger.info('user %s logged in', user.pk)
        return AuthResult(token=token, user=user)

    def register(self, username: str, password: str, role) -> AuthResult:
        parsed_role = check_new_account(username, password, role)
        user = create_account(self.users, self.hasher, username, password, parsed_role)
        token = self.tokens.issue(user.pk, user.role)
        logger.info('registered user %s as %s', user.pk, user.role)
        return AuthResult(token=token, user=user)


def check_new_account(username: str, password: str, role) -> Role:
    parsed_role = Role.parse(role)
    if parsed_role is None:
        raise InvalidRole()
    if not (username or '').strip() or not password:
        raise InvalidInput()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f'password must be at least {MIN_PASSWORD_LENGTH} characters')
    return parsed_role


def create_account(users: UserStore, hasher: PasswordHasher, username: str, password: str, role: Role) -> User:
    # The store's unique index still catches a concurrent insert
    if users.exists_by_username(username):
        raise UsernameTaken()
    return users.create(username=username, password_hash=hasher.hash(password), role=role)
