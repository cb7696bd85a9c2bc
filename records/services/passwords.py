"""One-way salted password hashing on top of Django's hasher framework."""
from django.contrib.auth.hashers import check_password, make_password

from records.exceptions import HashingError


class PasswordHasher:
    """Hash and verify staff passwords.

    The algorithm is the first entry of ``settings.PASSWORD_HASHERS``;
    older hashes keep verifying after the setting changes.
    """

    def hash(self, password: str) -> str:
        try:
            return make_password(password)
        except (TypeError, ValueError) as exc:
            raise HashingError() from exc

    def verify(self, encoded: str, password: str) -> bool:
        # check_password compares digests in constant time
        if not encoded:
            return False
        return check_password(password, encoded)
