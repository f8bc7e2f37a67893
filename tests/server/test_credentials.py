"""Tests for the credential store and token issuer."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from taskpad.models import PublicUser
from taskpad.server.credentials import CredentialStore, TokenIssuer
from taskpad.server.exceptions import (
    DuplicateUserError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
)

SECRET = "unit-test-secret-with-enough-length-1234"


@pytest.fixture()
def issuer() -> TokenIssuer:
    return TokenIssuer(SECRET)


@pytest.fixture()
def store(issuer) -> CredentialStore:
    return CredentialStore(issuer, bcrypt_rounds=4)


# ---------------------------------------------------------------------------
# TokenIssuer
# ---------------------------------------------------------------------------


class TestTokenIssuer:
    def test_round_trip_yields_identity(self, issuer):
        token = issuer.issue(PublicUser(id=7, email="a@b.c", name="A"))
        claims = issuer.verify(token)
        assert claims.user_id == 7
        assert claims.email == "a@b.c"

    def test_token_expires_after_ttl(self, issuer):
        payload = jwt.decode(
            issuer.issue(PublicUser(id=1, email="a@b.c", name="A")),
            SECRET,
            algorithms=["HS256"],
        )
        assert payload["exp"] - payload["iat"] == 24 * 3600

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, issuer, token):
        with pytest.raises(MissingTokenError):
            issuer.verify(token)

    def test_expired_token(self, issuer):
        issued = datetime.now(UTC) - timedelta(hours=25)
        token = issuer.issue(PublicUser(id=1, email="a@b.c", name="A"), now=issued)
        with pytest.raises(ExpiredTokenError):
            issuer.verify(token)

    def test_expired_is_an_invalid_token(self):
        assert issubclass(ExpiredTokenError, InvalidTokenError)

    def test_tampered_token(self, issuer):
        token = issuer.issue(PublicUser(id=1, email="a@b.c", name="A"))
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")])
        with pytest.raises(InvalidTokenError):
            issuer.verify(tampered)

    def test_token_signed_with_other_secret(self, issuer):
        other = TokenIssuer("another-secret-that-is-also-long-enough")
        token = other.issue(PublicUser(id=1, email="a@b.c", name="A"))
        with pytest.raises(InvalidTokenError):
            issuer.verify(token)

    def test_garbage_token(self, issuer):
        with pytest.raises(InvalidTokenError):
            issuer.verify("not-a-jwt")

    def test_token_without_user_claims(self, issuer):
        now = datetime.now(UTC)
        token = jwt.encode(
            {"iat": now, "exp": now + timedelta(hours=1)}, SECRET, algorithm="HS256"
        )
        with pytest.raises(InvalidTokenError):
            issuer.verify(token)


# ---------------------------------------------------------------------------
# CredentialStore
# ---------------------------------------------------------------------------


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_verifiable_token(self, store):
        result = await store.register("alice@example.com", "pw123456", "Alice")

        assert result.user == PublicUser(id=1, email="alice@example.com", name="Alice")
        assert store.verify(result.token).user_id == 1

    @pytest.mark.asyncio
    async def test_ids_are_sequential(self, store):
        first = await store.register("a@example.com", "pw", "A")
        second = await store.register("b@example.com", "pw", "B")
        assert (first.user.id, second.user.id) == (1, 2)
        assert store.verify(second.token).user_id == 2

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_regardless_of_password(self, store):
        await store.register("alice@example.com", "pw123456", "Alice")
        with pytest.raises(DuplicateUserError):
            await store.register("alice@example.com", "different", "Other")
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_email_match_is_case_sensitive(self, store):
        await store.register("alice@example.com", "pw", "Alice")
        result = await store.register("Alice@example.com", "pw", "Alice 2")
        assert result.user.id == 2

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_signups_only_one_wins(self, store):
        results = await asyncio.gather(
            store.register("race@example.com", "pw1", "One"),
            store.register("race@example.com", "pw2", "Two"),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, DuplicateUserError)]
        assert len(errors) == 1
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, store):
        await store.register("alice@example.com", "pw123456", "Alice")
        record = store._users[1]
        assert record.password_hash != b"pw123456"
        assert record.password_hash.startswith(b"$2")

    @pytest.mark.asyncio
    async def test_password_longer_than_bcrypt_accepts_is_refused(self, store):
        with pytest.raises(ValueError):
            await store.register("alice@example.com", "\u00e9" * 37, "Alice")
        assert len(store) == 0
        # Exactly at the limit is fine
        await store.register("alice@example.com", "p" * 72, "Alice")

    @pytest.mark.asyncio
    async def test_get_returns_public_view(self, store):
        await store.register("alice@example.com", "pw123456", "Alice")
        assert store.get(1) == PublicUser(id=1, email="alice@example.com", name="Alice")
        assert store.get(99) is None


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_correct_password(self, store):
        await store.register("alice@example.com", "pw123456", "Alice")
        result = await store.authenticate("alice@example.com", "pw123456")
        assert result.user.name == "Alice"
        assert store.verify(result.token).email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_are_indistinguishable(self, store):
        await store.register("alice@example.com", "pw123456", "Alice")

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await store.authenticate("alice@example.com", "nope")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await store.authenticate("bob@example.com", "pw123456")

        assert str(wrong_password.value) == str(unknown_email.value)

    @pytest.mark.asyncio
    async def test_overlong_password_never_matches(self, store):
        await store.register("alice@example.com", "pw123456", "Alice")
        with pytest.raises(InvalidCredentialsError):
            await store.authenticate("alice@example.com", "p" * 80)
        with pytest.raises(InvalidCredentialsError):
            await store.authenticate("bob@example.com", "p" * 80)
