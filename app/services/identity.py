"""
External identity verification for Google Sign-In.
Verifies Google-issued ID tokens against Google's public keys and the configured client id.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from fastapi.concurrency import run_in_threadpool
from google.oauth2 import id_token as google_id_token
from google.auth.transport import requests as google_auth_requests
from google.auth import exceptions as google_auth_exceptions
from app.utils.exceptions import InvalidTokenError
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExternalIdentity:
    """Identity attested by the provider."""

    email: str
    name: str
    picture: Optional[str] = None


class GoogleIdentityVerifier:
    """
    Verifies Google ID tokens.

    Fails closed: anything other than a well-formed, correctly signed,
    unexpired token issued for our client id is rejected.
    """

    def __init__(self, client_id: str):
        self.client_id = client_id

    async def verify(self, token: str) -> ExternalIdentity:
        """
        Verify an ID token and extract the identity it carries.

        Args:
            token: Raw ID token from the client

        Returns:
            ExternalIdentity with email, name and optional picture

        Raises:
            InvalidTokenError: If the token is rejected for any reason
        """
        if not self.client_id:
            logger.error("Google login attempted but GOOGLE_CLIENT_ID is not configured")
            raise InvalidTokenError()

        if not token or not token.strip():
            raise InvalidTokenError()

        # google-auth fetches certificates with a blocking HTTP client
        claims = await run_in_threadpool(self._verify_claims, token.strip())
        return self._identity_from_claims(claims)

    def _verify_claims(self, token: str) -> Dict[str, Any]:
        try:
            return google_id_token.verify_oauth2_token(
                token,
                google_auth_requests.Request(),
                audience=self.client_id,
            )
        except google_auth_exceptions.TransportError:
            # Could not reach the key endpoint; not the caller's fault
            raise
        except (ValueError, google_auth_exceptions.GoogleAuthError) as e:
            logger.warning(f"Rejected Google ID token: {e}")
            raise InvalidTokenError()

    @staticmethod
    def _identity_from_claims(claims: Dict[str, Any]) -> ExternalIdentity:
        email = str(claims.get("email") or "").strip().lower()
        name = str(claims.get("name") or "").strip()

        if not email or not name:
            raise InvalidTokenError("Identity token is missing email or name")

        if claims.get("email_verified") is False:
            raise InvalidTokenError("Identity provider email is not verified")

        return ExternalIdentity(
            email=email,
            name=name,
            picture=claims.get("picture") or None,
        )
