"""Unit tests for cms.auth — Authenticator against a plain-dict session."""

import pytest

from cms.auth import Authenticator, require_signed_in
from cms.context import SessionContext
from cms.credentials import CredentialStore
from cms.errors import InvalidCredentials, Unauthorized, UsernameTaken


@pytest.fixture
def authenticator(tmp_path):
    return Authenticator(CredentialStore(str(tmp_path / "users.yml")), iterations=1_000)


@pytest.fixture
def ctx():
    return SessionContext({})


class TestSignUp:
    def test_sign_up_stores_hash(self, authenticator):
        authenticator.sign_up("bill", "pw123")
        stored = authenticator.credentials.get("bill")
        assert stored is not None
        assert "pw123" not in stored

    def test_taken_username(self, authenticator):
        authenticator.sign_up("bill", "pw123")
        with pytest.raises(UsernameTaken) as exc:
            authenticator.sign_up("bill", "other")
        assert exc.value.message == "username already taken"

    def test_blank_fields(self, authenticator):
        with pytest.raises(InvalidCredentials):
            authenticator.sign_up("", "pw")
        with pytest.raises(InvalidCredentials):
            authenticator.sign_up("bill", "")
        assert authenticator.credentials.load() == {}


class TestSignIn:
    def test_sign_in_sets_identity(self, authenticator, ctx):
        authenticator.sign_up("bill", "pw123")
        authenticator.sign_in(ctx, "bill", "pw123")
        assert ctx.user == "bill"
        assert ctx.signed_in

    def test_wrong_password_after_sign_out(self, authenticator, ctx):
        authenticator.sign_up("bill", "pw123")
        authenticator.sign_in(ctx, "bill", "pw123")
        authenticator.sign_out(ctx)
        with pytest.raises(InvalidCredentials) as exc:
            authenticator.sign_in(ctx, "bill", "wrong")
        assert exc.value.message == "invalid credentials"
        assert ctx.user is None

    def test_unknown_user(self, authenticator, ctx):
        with pytest.raises(InvalidCredentials):
            authenticator.sign_in(ctx, "guest", "shhh")
        assert not ctx.signed_in

    def test_sign_out_is_idempotent(self, authenticator, ctx):
        authenticator.sign_out(ctx)
        authenticator.sign_out(ctx)
        assert ctx.user is None


class TestSessionContext:
    def test_flash_is_read_once(self, ctx):
        ctx.flash("hello")
        assert ctx.pop_flash() == "hello"
        assert ctx.pop_flash() is None

    def test_flash_keeps_only_latest(self, ctx):
        ctx.flash("first")
        ctx.flash("second")
        assert ctx.pop_flash() == "second"

    def test_require_signed_in(self, ctx):
        with pytest.raises(Unauthorized):
            require_signed_in(ctx)
        ctx.sign_in("admin")
        require_signed_in(ctx)

    def test_username_is_stripped(self, authenticator, ctx):
        authenticator.sign_up("  bob ", "pw123")
        assert authenticator.credentials.get("bob") is not None
        authenticator.sign_in(ctx, " bob", "pw123")
        assert ctx.user == "bob"
