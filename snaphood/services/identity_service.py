"""
Slack OpenID Connect sign-in.
"""
import logging
import threading
from typing import Optional
from urllib.parse import urlencode

import requests

from ..exceptions import AuthenticationError
from ..models.identity import Identity
from .. import gcp_clients

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://slack.com/openid/connect/authorize"
TOKEN_URL = "https://slack.com/api/openid.connect.token"
USERINFO_URL = "https://slack.com/api/openid.connect.userInfo"
SCOPES = "openid profile email"


class SlackIdentityProvider:
    """Redirect-based sign-in; holds the signed-in identity for this process."""

    def __init__(self, http_session=None, client_id: str = "", client_secret: str = "",
                 redirect_uri: str = ""):
        self.http = http_session or gcp_clients.http_session or requests.Session()
        self.client_id = client_id or gcp_clients.SLACK_CLIENT_ID
        self.client_secret = client_secret or gcp_clients.SLACK_CLIENT_SECRET
        self.redirect_uri = redirect_uri or gcp_clients.SLACK_REDIRECT_URI
        self._identity: Optional[Identity] = None
        self._lock = threading.Lock()

    def authorization_url(self, state: str) -> str:
        """
        Build the URL the user is redirected to for sign-in.

        Args:
            state: Anti-forgery token echoed back to the callback

        Returns:
            str: Slack authorization URL
        """
        params = {
            "response_type": "code",
            "scope": SCOPES,
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "state": state
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    def complete_sign_in(self, code: str) -> Identity:
        """
        Exchange the callback code for the signed-in identity.

        Args:
            code: Authorization code from the redirect callback

        Returns:
            Identity: The signed-in user

        Raises:
            AuthenticationError: If the exchange or the profile lookup fails
        """
        try:
            token_response = self.http.post(TOKEN_URL, data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "redirect_uri": self.redirect_uri
            })
            token_data = token_response.json()
            if not token_data.get("ok"):
                raise AuthenticationError(f"Authentication failed: {token_data.get('error', 'unknown error')}")

            userinfo_response = self.http.get(
                USERINFO_URL,
                headers={"Authorization": f"Bearer {token_data['access_token']}"}
            )
            userinfo = userinfo_response.json()
            if not userinfo.get("ok"):
                raise AuthenticationError(f"Authentication failed: {userinfo.get('error', 'unknown error')}")

            identity = Identity.from_userinfo(userinfo)
        except AuthenticationError:
            raise
        except (requests.RequestException, ValueError, KeyError) as e:
            logger.error(f"Slack sign-in failed: {e}")
            raise AuthenticationError("Authentication failed")

        with self._lock:
            self._identity = identity
        logger.info(f"Signed in as {identity.id}")
        return identity

    def get_user(self) -> Optional[Identity]:
        with self._lock:
            return self._identity

    def sign_out(self):
        with self._lock:
            self._identity = None
        logger.info("Signed out")
