"""
Signed, time-limited bearer tokens.

Tokens are compact HS256 JWTs carrying the user id and role.  Nothing
is stored server side: a token is valid when its signature verifies
against the configured key and the clock has not reached its expiry.
The clock is injectable so expiry can be exercised without waiting.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Callable

import jwt
from django.conf import settings
from django.utils import timezone

from records.exceptions import InternalError, InvalidSignature, MalformedToken, TokenExpired, UserNotFound
from records.models import Role, User

# Tokens signed with any HMAC variant are accepted; everything else is
# treated as a signature failure.
HMAC_ALGORITHMS = ['HS256', 'HS384', 'HS512']
REQUIRED_CLAIMS = ['sub', 'user_id', 'role', 'iat', 'exp']


@dataclass(frozen=True)
class TokenConfig:
    secret: str
    algorithm: str = 'HS256'
    lifetime: timedelta = timedelta(hours=24)

    @classmethod
    def from_settings(cls) -> 'TokenConfig':
        return cls(
            secret=settings.JWT_SECRET_KEY,
            algorithm=getattr(settings, 'JWT_ALGORITHM', 'HS256'),
            lifetime=timedelta(hours=getattr(settings, 'JWT_LIFETIME_HOURS', 24)),
        )


@dataclass(frozen=True)
class ParsedToken:
    user_id: int
    role: Role
    issued_at: datetime
    expires_at: datetime


class TokenService:

    def __init__(self, config: TokenConfig, clock: Callable[[], datetime] = timezone.now):
        if config.algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f'unsupported signing algorithm {config.algorithm!r}')
        self.config = config
        self.clock = clock

    def issue(self, user_id: int, role: Role | str) -> str:
        now = self.clock()
        issued_at = int(now.timestamp())
        payload = {
            'sub': str(user_id),
            'user_id': user_id,
            'role': Role(role).value,
            'iat': issued_at,
            'exp': int((now + self.config.lifetime).timestamp()),
        }
        try:
            return jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)
        except jwt.PyJWTError as exc:
            raise InternalError('failed to sign token') from exc

    def validate(self, token: str) -> ParsedToken:
        try:
            claims = jwt.decode(
                token,
                self.config.secret,
                algorithms=HMAC_ALGORITHMS,
                # expiry is checked against the injected clock below
                options={
                    'verify_exp': False,
                    'verify_iat': False,
                    'verify_nbf': False,
                    'require': REQUIRED_CLAIMS,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise InvalidSignature() from exc
        except jwt.PyJWTError as exc:
            raise MalformedToken() from exc

        parsed = self._parse_claims(claims)
        if self.clock() >= parsed.expires_at:
            raise TokenExpired()
        return parsed

    def resolve_user(self, parsed: ParsedToken, users) -> User:
        user = users.find_by_id(parsed.user_id)
        if user is None:
            raise UserNotFound()
        return user

    def _parse_claims(self, claims: dict) -> ParsedToken:
        user_id = claims.get('user_id')
        if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
            raise MalformedToken()
        if claims.get('sub') != str(user_id):
            raise MalformedToken()
        role = Role.parse(claims.get('role'))
        if role is None:
            raise MalformedToken()
        iat, exp = claims.get('iat'), claims.get('exp')
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (iat, exp)):
            raise MalformedToken()
        return ParsedToken(
            user_id=user_id,
            role=role,
            issued_at=datetime.fromtimestamp(iat, tz=dt_timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=dt_timezone.utc),
        )
