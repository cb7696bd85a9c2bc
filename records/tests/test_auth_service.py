import pytest

from records.exceptions import InvalidCredentials, InvalidInput, InvalidRole, UsernameTaken
from records.models import Role, User
from records.services.auth import AuthService
from records.services.passwords import PasswordHasher
from records.stores import UserStore

pytestmark = pytest.mark.django_db


@pytest.fixture
def auth(tokens):
    return AuthService(UserStore(), PasswordHasher(), tokens)


def test_login_returns_token_for_valid_credentials(auth, tokens, make_user):
    user = make_user('u', password='correct', role=Role.DOCTOR)
    result = auth.login('u', 'correct')
    parsed = tokens.validate(result.token)
    assert parsed.user_id == user.pk
    assert parsed.role == Role.DOCTOR
    assert result.user == user


def test_login_failures_are_indistinguishable(auth, make_user):
    make_user('u', password='correct')
    with pytest.raises(InvalidCredentials) as wrong_password:
        auth.login('u', 'wrong')
    with pytest.raises(InvalidCredentials) as unknown_user:
        auth.login('nouser', 'x')
    assert str(wrong_password.value.detail) == str(unknown_user.value.detail) == 'invalid credentials'


def test_login_rejects_inactive_user(auth, make_user):
    user = make_user('u', password='correct')
    user.is_active = False
    user.save()
    with pytest.raises(InvalidCredentials):
        auth.login('u', 'correct')


def test_login_usernames_are_case_sensitive(auth, make_user):
    make_user('Alice', password='correct')
    with pytest.raises(InvalidCredentials):
        auth.login('alice', 'correct')


def test_register_creates_user_and_issues_token(auth, tokens):
    result = auth.register('newdoc', 'secret1', 'doctor')
    user = User.objects.get(username='newdoc')
    assert user.role == Role.DOCTOR
    assert user.password != 'secret1'
    assert PasswordHasher().verify(user.password, 'secret1')
    assert tokens.validate(result.token).user_id == user.pk


def test_register_view_is_sanitized(auth):
    view = auth.register('newdoc', 'secret1', 'doctor').user_view
    assert set(view) == {'id', 'username', 'role', 'created_at', 'updated_at'}
    assert view['role'] == 'doctor'


@pytest.mark.parametrize('role', ['admin', 'Doctor', '', None, 'nurse'])
def test_register_rejects_unknown_roles(auth, role):
    with pytest.raises(InvalidRole):
        auth.register('someone', 'secret1', role)
    assert not User.objects.filter(username='someone').exists()


@pytest.mark.parametrize('username,password', [('', 'secret1'), ('   ', 'secret1'), ('someone', ''), ('someone', '12345')])
def test_register_rejects_bad_input(auth, username, password):
    with pytest.raises(InvalidInput):
        auth.register(username, password, 'receptionist')


def test_register_accepts_six_character_password(auth):
    auth.register('someone', '123456', 'receptionist')
    assert User.objects.filter(username='someone').exists()


def test_register_rejects_taken_username(auth, make_user):
    make_user('taken')
    with pytest.raises(UsernameTaken):
        auth.register('taken', 'secret1', 'doctor')


def test_store_unique_index_backs_up_username_check(make_user):
    make_user('taken')
    with pytest.raises(UsernameTaken):
        UserStore().create(username='taken', password_hash='x', role=Role.DOCTOR)
