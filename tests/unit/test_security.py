from datetime import timedelta

import jwt

from vagasrmc.config import Settings
from vagasrmc.core.security import (
    DELETED_PASSWORD_SENTINEL,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)

SETTINGS = Settings(app_env="test", secret_key="unit-secret", password_hash_rounds=4)


def test_password_hash_round_trip() -> None:
    hashed = get_password_hash("secret123", rounds=4)
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_hashes_are_salted() -> None:
    assert get_password_hash("secret123", rounds=4) != get_password_hash("secret123", rounds=4)


def test_deleted_sentinel_never_verifies() -> None:
    assert not verify_password("DELETED", DELETED_PASSWORD_SENTINEL)
    assert not verify_password("anything", "")
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_access_token_carries_subject_and_role() -> None:
    token = create_access_token(user_id=42, role="COMPANY", settings=SETTINGS)
    payload = decode_access_token(token, SETTINGS)
    assert payload is not None
    assert payload["sub"] == "42"
    assert payload["role"] == "COMPANY"


def test_expired_token_is_rejected() -> None:
    token = create_access_token(
        user_id=1,
        role="CANDIDATE",
        settings=SETTINGS,
        expires_delta=timedelta(seconds=-5),
    )
    assert decode_access_token(token, SETTINGS) is None


def test_token_signed_with_another_key_is_rejected() -> None:
    other = Settings(app_env="test", secret_key="other-secret")
    token = create_access_token(user_id=1, role="ADMIN", settings=other)
    assert decode_access_token(token, SETTINGS) is None


def test_token_without_role_is_rejected() -> None:
    token = jwt.encode({"sub": "1"}, SETTINGS.secret_key, algorithm=SETTINGS.jwt_algorithm)
    assert decode_access_token(token, SETTINGS) is None
