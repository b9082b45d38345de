from datetime import timedelta

import jwt
import pytest

from authcore.core.security import (
    ACCESS_TOKEN,
    PASSWORD_RESET_TOKEN,
    PasswordHasher,
    TokenIssuer,
)
from authcore.errors import InvalidTokenError


# ============================================================================
# PASSWORD HASHER TESTS
# ============================================================================


def test_hash_verifies_original_password(hasher: PasswordHasher):
    password_hash = hasher.hash("Sekret123!")
    assert password_hash != "Sekret123!"
    assert hasher.verify("Sekret123!", password_hash)


def test_hash_rejects_other_password(hasher: PasswordHasher):
    password_hash = hasher.hash("Sekret123!")
    assert not hasher.verify("Sekret124!", password_hash)


def test_hash_is_salted(hasher: PasswordHasher):
    """Two hashes of the same password differ but both verify."""
    first = hasher.hash("same-password")
    second = hasher.hash("same-password")
    assert first != second
    assert hasher.verify("same-password", first)
    assert hasher.verify("same-password", second)


def test_hash_uses_configured_cost_factor(hasher: PasswordHasher):
    assert hasher.hash("x").startswith("$2b$10$")


def test_verify_handles_missing_or_corrupt_hash(hasher: PasswordHasher):
    assert not hasher.verify("anything", "not-a-bcrypt-hash")
    assert not hasher.verify("anything", None)
    assert not hasher.verify(None, hasher.hash("anything"))


# ============================================================================
# TOKEN ISSUER TESTS
# ============================================================================


def test_token_round_trip(tokens: TokenIssuer):
    token = tokens.issue(42, timedelta(hours=1))
    assert tokens.verify(token) == 42


def test_reset_token_round_trip(tokens: TokenIssuer):
    token = tokens.issue(7, timedelta(minutes=15), PASSWORD_RESET_TOKEN)
    assert tokens.verify(token, PASSWORD_RESET_TOKEN) == 7


def test_tokens_issued_together_differ(tokens: TokenIssuer):
    ttl = timedelta(minutes=15)
    assert tokens.issue(1, ttl, PASSWORD_RESET_TOKEN) != tokens.issue(1, ttl, PASSWORD_RESET_TOKEN)


def test_expired_token_fails(tokens: TokenIssuer):
    token = tokens.issue(42, timedelta(seconds=-1))
    with pytest.raises(InvalidTokenError, match="Invalid or expired token"):
        tokens.verify(token)


def test_tampered_token_fails_with_same_message(tokens: TokenIssuer):
    token = tokens.issue(42, timedelta(hours=1))
    replacement = "BBBB" if token.endswith("AAAA") else "AAAA"
    tampered = token[:-4] + replacement
    with pytest.raises(InvalidTokenError, match="Invalid or expired token"):
        tokens.verify(tampered)


def test_token_signed_with_other_key_fails(tokens: TokenIssuer):
    other = TokenIssuer("another-secret-key-of-sufficient-length-000", tokens.algorithm)
    with pytest.raises(InvalidTokenError):
        tokens.verify(other.issue(42, timedelta(hours=1)))


@pytest.mark.parametrize("token", ["", None, "invalid.token.here", "garbage"])
def test_malformed_token_fails(tokens: TokenIssuer, token):
    with pytest.raises(InvalidTokenError):
        tokens.verify(token)


def test_token_purpose_is_enforced(tokens: TokenIssuer):
    session_token = tokens.issue(42, timedelta(hours=1), ACCESS_TOKEN)
    reset_token = tokens.issue(42, timedelta(minutes=15), PASSWORD_RESET_TOKEN)
    with pytest.raises(InvalidTokenError):
        tokens.verify(session_token, PASSWORD_RESET_TOKEN)
    with pytest.raises(InvalidTokenError):
        tokens.verify(reset_token, ACCESS_TOKEN)


def test_token_with_non_numeric_subject_fails(tokens: TokenIssuer):
    token = jwt.encode(
        {"sub": "not-a-number", "type": ACCESS_TOKEN, "exp": 4102444800},
        tokens.secret_key,
        algorithm=tokens.algorithm,
    )
    with pytest.raises(InvalidTokenError):
        tokens.verify(token)
