"""
Tests for Slack sign-in and the session accessor.
"""
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from conftest import FakeIdentityProvider
from snaphood.exceptions import AuthenticationError, NotSignedInError
from snaphood.models.identity import Identity
from snaphood.services.identity_service import SlackIdentityProvider
from snaphood.services.session_service import SessionAccessor


def json_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    return response


@pytest.fixture
def http_session():
    return MagicMock()


@pytest.fixture
def provider(http_session):
    return SlackIdentityProvider(
        http_session, client_id="cid", client_secret="secret", redirect_uri="http://localhost:8080/auth/callback"
    )


class TestSlackIdentityProvider:
    """Tests for the redirect sign-in flow."""

    def test_authorization_url(self, provider):
        url = provider.authorization_url("state123")

        parsed = urlparse(url)
        params = parse_qs(parsed.query)
        assert parsed.netloc == "slack.com"
        assert params["client_id"] == ["cid"]
        assert params["state"] == ["state123"]
        assert params["scope"] == ["openid profile email"]
        assert params["redirect_uri"] == ["http://localhost:8080/auth/callback"]

    def test_complete_sign_in(self, provider, http_session):
        http_session.post.return_value = json_response({"ok": True, "access_token": "xoxp-1"})
        http_session.get.return_value = json_response({
            "ok": True, "sub": "U1", "name": "Ana", "picture": "https://example.com/a.png"
        })

        identity = provider.complete_sign_in("code1")

        assert identity.id == "U1"
        assert provider.get_user() == identity
        assert http_session.post.call_args[1]["data"]["code"] == "code1"
        assert http_session.get.call_args[1]["headers"]["Authorization"] == "Bearer xoxp-1"

    def test_token_exchange_rejected(self, provider, http_session):
        http_session.post.return_value = json_response({"ok": False, "error": "invalid_code"})

        with pytest.raises(AuthenticationError) as exc_info:
            provider.complete_sign_in("bad")

        assert "invalid_code" in str(exc_info.value)
        assert provider.get_user() is None
        http_session.get.assert_not_called()

    def test_network_failure(self, provider, http_session):
        http_session.post.side_effect = requests.ConnectionError("offline")
        with pytest.raises(AuthenticationError):
            provider.complete_sign_in("code1")

    def test_sign_out(self, provider, http_session):
        http_session.post.return_value = json_response({"ok": True, "access_token": "t"})
        http_session.get.return_value = json_response({"ok": True, "sub": "U1", "name": "Ana"})
        provider.complete_sign_in("code1")

        provider.sign_out()

        assert provider.get_user() is None


class TestSessionAccessor:
    """Tests for resolving the signed-in user."""

    def test_current_user(self, identity):
        assert SessionAccessor(FakeIdentityProvider(identity)).current_user() == identity

    def test_provider_failure_means_signed_out(self):
        accessor = SessionAccessor(FakeIdentityProvider(error=RuntimeError("session store down")))
        assert accessor.current_user() is None

    def test_identity_without_id_means_signed_out(self):
        accessor = SessionAccessor(FakeIdentityProvider(Identity(id="", name="nobody")))
        assert accessor.current_user() is None

    def test_require_user(self):
        with pytest.raises(NotSignedInError):
            SessionAccessor(FakeIdentityProvider(None)).require_user()
