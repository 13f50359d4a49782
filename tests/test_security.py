"""
Password hashing and token tests
"""
from datetime import timedelta

from jose import jwt

from pdc_pro.core.config import settings
from pdc_pro.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = get_password_hash('secret123')

    assert hashed != 'secret123'
    assert hashed.startswith('$2')
    assert verify_password('secret123', hashed)
    assert not verify_password('secret124', hashed)


def test_verify_password_rejects_non_bcrypt_value():
    assert verify_password('secret123', 'secret123') is False


def test_access_token_carries_subject():
    token = create_access_token({'sub': 'abc123'})
    payload = decode_access_token(token)

    assert payload['sub'] == 'abc123'
    assert 'exp' in payload


def test_expired_token_is_rejected():
    token = create_access_token({'sub': 'abc123'}, expires_delta=timedelta(seconds=-10))
    assert decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({'sub': 'abc123'}, 'another-key', algorithm=settings.ALGORITHM)
    assert decode_access_token(token) is None


def test_garbage_token_is_rejected():
    assert decode_access_token('not-a-token') is None
