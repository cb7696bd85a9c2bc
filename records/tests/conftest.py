from datetime import datetime, timedelta, timezone as dt_timezone

import pytest

from records.models import Gender, Patient, Role, User
from records.services.passwords import PasswordHasher
from records.services.tokens import TokenConfig, TokenService

TEST_SECRET = 'test-signing-key-0123456789abcdef0123456789'


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.JWT_SECRET_KEY = TEST_SECRET


class FakeClock:
    """Settable clock for token expiry tests."""

    def __init__(self, now=None):
        self.now = now or datetime(2030, 1, 1, 12, 0, tzinfo=dt_timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tokens(clock):
    return TokenService(TokenConfig(secret=TEST_SECRET), clock=clock)


@pytest.fixture
def make_user(db):
    hasher = PasswordHasher()

    def _make(username, password='secret123', role=Role.RECEPTIONIST):
        return User.objects.create(username=username, password=hasher.hash(password), role=role)
    return _make


@pytest.fixture
def doctor(make_user):
    return make_user('dr.house', role=Role.DOCTOR)


@pytest.fixture
def receptionist(make_user):
    return make_user('front.desk', role=Role.RECEPTIONIST)


@pytest.fixture
def make_patient(receptionist):
    def _make(name, contact_info, age=30, gender=Gender.FEMALE, medical_notes=''):
        return Patient.objects.create(
            name=name, age=age, gender=gender, contact_info=contact_info,
            medical_notes=medical_notes, created_by=receptionist,
        )
    return _make
