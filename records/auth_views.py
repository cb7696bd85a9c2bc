"""
Authentication views.

Login and registration both answer with a bearer token and the
sanitized account.  Browser-like clients additionally receive the token
as an HTTP-only cookie so that pages can call the API without handling
the token themselves.
"""
from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from records.serializers.auth import LoginSerializer, RegisterSerializer
from records.services.auth import AuthResult, AuthService

TOKEN_COOKIE_MAX_AGE = 24 * 3600
BROWSER_AGENT_MARKERS = ('PostmanRuntime', 'Mozilla', 'Chrome', 'Safari', 'Firefox', 'Edge')


def is_browser_client(user_agent: str | None) -> bool:
    return bool(user_agent) and any(marker in user_agent for marker in BROWSER_AGENT_MARKERS)


def _auth_response(request, result: AuthResult, status_code: int) -> Response:
    resp = Response({'ok': True, 'token': result.token, 'user': result.user_view}, status=status_code)
    if is_browser_client(request.headers.get('User-Agent')):
        resp.set_cookie(
            settings.JWT_COOKIE_NAME,
            result.token,
            max_age=TOKEN_COOKIE_MAX_AGE,
            path='/',
            secure=settings.JWT_COOKIE_SECURE,
            httponly=True,
            samesite='Lax',
        )
    return resp


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    """
    Username/password login.
    Body: {"username": "...", "password": "..."}
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    result = AuthService.from_settings().login(vd['username'], vd['password'])
    return _auth_response(request, result, status.HTTP_200_OK)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def register_view(request):
    """
    Create a doctor or receptionist account and log it in.
    Body: {"username": "...", "password": "...", "role": "doctor" | "receptionist"}
    """
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    result = AuthService.from_settings().register(vd['username'], vd['password'], vd['role'])
    return _auth_response(request, result, status.HTTP_201_CREATED)
