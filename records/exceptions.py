"""
Error taxonomy and the unified API exception handler.

Services raise these directly; DRF turns them into responses through
:func:`api_exception_handler`.  Authentication failures are kept
coarse so that a caller cannot tell which check rejected them.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = 'internal server error'


class DomainError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'request failed'
    default_code = 'api_error'


class ValidationError(DomainError):
    default_detail = 'invalid input'
    default_code = 'invalid'


class InvalidRole(ValidationError):
    default_detail = 'role must be either doctor or receptionist'
    default_code = 'invalid_role'


class InvalidInput(ValidationError):
    default_detail = 'username and password are required'
    default_code = 'invalid_input'


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'not found'
    default_code = 'not_found'


class UserNotFound(NotFoundError):
    default_detail = 'user not found'


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'conflict'
    default_code = 'conflict'


class UsernameTaken(ConflictError):
    default_detail = 'username already exists'


class DuplicatePatient(ConflictError):
    default_detail = 'patient with this name or contact info already exists'


class AuthError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'unauthorized'
    default_code = 'not_authenticated'


class InvalidCredentials(AuthError):
    default_detail = 'invalid credentials'


class MissingHeader(AuthError):
    default_detail = 'authorization header is required'


class MalformedHeader(AuthError):
    default_detail = 'invalid authorization header format'


class InvalidToken(AuthError):
    default_detail = 'invalid token'


class InvalidSignature(InvalidToken):
    default_detail = 'token signature is invalid'


class TokenExpired(InvalidToken):
    default_detail = 'token has expired'


class MalformedToken(InvalidToken):
    default_detail = 'token is malformed'


class Forbidden(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'forbidden'
    default_code = 'permission_denied'


class InternalError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_SERVER_ERROR
    default_code = 'server_error'


class HashingError(InternalError):
    default_detail = 'failed to hash password'


def api_exception_handler(exc, context):
    # rest_framework.views loads the authentication classes, which import this module
    from rest_framework.views import exception_handler as drf_exception_handler

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.error('unhandled error in %s', _view_name(context), exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': GENERIC_SERVER_ERROR}}, status=500)
    if resp.status_code >= 500:
        # Internal details stay in the log
        logger.error('server error in %s: %s', _view_name(context), exc, exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': GENERIC_SERVER_ERROR}},
                        status=resp.status_code)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    code = getattr(exc, 'default_code', 'api_error')
    return Response({'ok': False, 'error': {'code': code, 'message': detail}},
                    status=resp.status_code, headers=_auth_headers(resp))


def _auth_headers(resp):
    if 'WWW-Authenticate' in resp:
        return {'WWW-Authenticate': resp['WWW-Authenticate']}
    return None


def _view_name(context):
    view = (context or {}).get('view')
    return type(view).__name__ if view is not None else 'unknown view'
