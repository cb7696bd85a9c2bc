"""
Bearer token authentication for Django REST framework.

The header parsing and token checks live in
:class:`records.services.guard.AccessGuard`; this class only adapts
them to DRF.  Requests without an ``Authorization`` header stay
anonymous so that public endpoints (login, register) work, and
``IsAuthenticated`` rejects them everywhere else.
"""
from __future__ import annotations

from rest_framework import authentication, exceptions

from records.exceptions import AuthError
from records.services.guard import AccessGuard


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """Authenticate ``Authorization: Bearer <jwt>`` headers.

    On success ``request.user`` is the freshly loaded user and
    ``request.auth`` the parsed token.
    """

    keyword = 'Bearer'

    def get_guard(self) -> AccessGuard:
        return AccessGuard.from_settings()

    def authenticate(self, request):
        if not request.headers.get('Authorization'):
            return None
        try:
            authenticated = self.get_guard().authenticate(request.headers)
        except AuthError as exc:
            raise exceptions.AuthenticationFailed(exc.detail) from exc
        return authenticated.user, authenticated.token

    def authenticate_header(self, request):
        return self.keyword
