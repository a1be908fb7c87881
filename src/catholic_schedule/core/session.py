"""
Explicit admin identity context.

Components that need to know who is signed in receive an AuthSession instead
of subscribing to global auth state. Lifecycle:
UNAUTHENTICATED -> AUTHENTICATED (sign_in) -> UNAUTHENTICATED (sign_out).
"""

from enum import Enum
from typing import Callable, Optional

from supabase import Client

from catholic_schedule.core.db import create_authenticated_client
from catholic_schedule.core.errors import NotAuthenticatedError, RemoteFailureError, remote_error_message
from catholic_schedule.core.logger import get_logger

logger = get_logger(__name__)


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class AuthSession:
    """Signed-in identity plus the backend client bound to it."""

    def __init__(self, supabase: Client, client_factory: Callable[[str], Client] = create_authenticated_client):
        self._supabase = supabase
        self._client_factory = client_factory
        self._client: Optional[Client] = None
        self.state = AuthState.UNAUTHENTICATED
        self.email: Optional[str] = None
        self.access_token: Optional[str] = None
        self.message = ""
        self._signed_in_here = False

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def sign_in(self, email: str, password: str) -> bool:
        """Password sign-in. On failure the backend's message is kept in self.message."""
        self.message = ""
        try:
            response = self._supabase.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            self.message = remote_error_message(e)
            logger.warning(f"🔒 Sign-in failed for {email}: {self.message}")
            return False

        if response.session is None:
            self.message = "Sign-in did not return a session."
            return False

        self._authenticate(response.session.access_token, response.user.email if response.user else email)
        self._signed_in_here = True
        return True

    def restore(self, access_token: str) -> bool:
        """Resume a session from a bearer token (one per API request)."""
        try:
            response = self._supabase.auth.get_user(access_token)
        except Exception as e:
            self.message = remote_error_message(e)
            logger.debug(f"Token rejected: {self.message}")
            return False
        if response is None or response.user is None:
            self.message = "Session expired. Please sign in again."
            return False

        self._authenticate(access_token, response.user.email)
        return True

    def _authenticate(self, access_token: str, email: Optional[str]) -> None:
        self.access_token = access_token
        self.email = email
        self._client = None
        self.state = AuthState.AUTHENTICATED
        logger.info(f"🔓 Signed in as {email}")

    def sign_out(self) -> None:
        if self._signed_in_here:
            try:
                self._supabase.auth.sign_out()
            except Exception as e:
                # Local state is cleared regardless
                logger.warning(f"Sign-out call failed: {remote_error_message(e)}")
        if self.is_authenticated:
            logger.info(f"👋 Signed out {self.email}")
        self._signed_in_here = False
        self.state = AuthState.UNAUTHENTICATED
        self.email = None
        self.access_token = None
        self._client = None

    def require(self) -> None:
        if not self.is_authenticated:
            raise NotAuthenticatedError()

    @property
    def client(self) -> Client:
        """Backend client carrying this session's JWT."""
        self.require()
        if self._client is None:
            try:
                self._client = self._client_factory(self.access_token)
            except Exception as e:
                raise RemoteFailureError(remote_error_message(e)) from e
        return self._client
