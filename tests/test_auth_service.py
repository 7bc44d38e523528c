"""Tests for AuthService."""

from pydantic import SecretStr

from teamboard.services import AuthService


class TestAuthService:
    """Tests for the password gate."""

    def test_starts_locked(self):
        assert not AuthService("secret").is_authenticated

    def test_correct_password(self):
        auth = AuthService(SecretStr("secret"))
        assert auth.authenticate("secret") is True
        assert auth.is_authenticated

    def test_wrong_password(self):
        auth = AuthService("secret")
        assert auth.authenticate("Secret") is False
        assert auth.authenticate("secret ") is False
        assert not auth.is_authenticated

    def test_logout(self):
        auth = AuthService("secret")
        auth.authenticate("secret")
        auth.logout()
        assert not auth.is_authenticated
