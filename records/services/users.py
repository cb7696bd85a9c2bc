"""Staff account administration beyond login and registration."""
from __future__ import annotations

import logging
from typing import Optional

from records.exceptions import InvalidRole, UserNotFound, ValidationError
from records.models import Role, User
from records.services.auth import MIN_PASSWORD_LENGTH, check_new_account, create_account
from records.services.passwords import PasswordHasher
from records.stores import UserStore

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, users: UserStore, hasher: PasswordHasher):
        self.users = users
        self.hasher = hasher

    def create(self, username: str, password: str, role) -> User:
        parsed_role = check_new_account(username, password, role)
        user = create_account(self.users, self.hasher, username, password, parsed_role)
        logger.info('created user %s as %s', user.pk, user.role)
        return user

    def get_by_id(self, user_id: int) -> User:
        user = self.users.find_by_id(user_id) if user_id and user_id > 0 else None
        if user is None:
            raise UserNotFound()
        return user

    def get_by_username(self, username: str) -> User:
        user = self.users.find_by_username(username) if username else None
        if user is None:
            raise UserNotFound()
        return user

    def update(self, user_id: int, *, role=None, password: Optional[str] = None) -> User:
        """Change a user's role and/or password.  The username never changes."""
        user = self.get_by_id(user_id)
        fields = []
        if role is not None:
            parsed_role = Role.parse(role)
            if parsed_role is None:
                raise InvalidRole()
            user.role = parsed_role
            fields.append('role')
        if password is not None:
            if len(password) < MIN_PASSWORD_LENGTH:
                raise ValidationError(f'password must be at least {MIN_PASSWORD_LENGTH} characters')
            user.password = self.hasher.hash(password)
            fields.append('password')
        if not fields:
            return user
        logger.info('updated user %s: %s', user.pk, ', '.join(fields))
        return self.users.update(user, fields)

    def delete(self, user_id: int) -> None:
        if not user_id or user_id <= 0:
            raise ValidationError('invalid user ID')
        if not self.users.delete(user_id):
            raise UserNotFound()
        logger.info('deleted user %s', user_id)

    def list(self) -> list[User]:
        return self.users.list()
