import pytest

from records.services.passwords import PasswordHasher


@pytest.mark.parametrize('password', ['secret123', 'p@ss wörd', 'x' * 200])
def test_hash_then_verify(password):
    hasher = PasswordHasher()
    encoded = hasher.hash(password)
    assert encoded != password
    assert hasher.verify(encoded, password)
    assert not hasher.verify(encoded, password + '!')
    assert not hasher.verify(encoded, password[:-1])


def test_hashes_are_salted():
    hasher = PasswordHasher()
    assert hasher.hash('secret123') != hasher.hash('secret123')


def test_empty_or_unusable_hash_never_verifies():
    hasher = PasswordHasher()
    assert not hasher.verify('', 'secret123')
    assert not hasher.verify('!unusable', 'secret123')
