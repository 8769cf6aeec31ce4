"""
Session accessor for resolving the signed-in identity.
"""
import logging
from typing import Optional

from ..exceptions import NotSignedInError
from ..models.identity import Identity

logger = logging.getLogger(__name__)


class SessionAccessor:
    """Stateless wrapper over the identity provider."""

    def __init__(self, identity_provider):
        """
        Initialize session accessor.

        Args:
            identity_provider: Object exposing get_user() -> Identity | None
        """
        self.identity_provider = identity_provider

    def current_user(self) -> Optional[Identity]:
        """
        Resolve the currently signed-in identity.

        Never raises: a provider failure is treated as not signed in.

        Returns:
            Identity: The signed-in user, or None
        """
        try:
            user = self.identity_provider.get_user()
        except Exception as e:
            logger.warning(f"Could not resolve current user: {e}")
            return None

        if not user or not user.id:
            return None
        return user

    def require_user(self) -> Identity:
        """
        Resolve the signed-in identity as a write precondition.

        Raises:
            NotSignedInError: If nobody is signed in
        """
        user = self.current_user()
        if user is None:
            raise NotSignedInError()
        return user
