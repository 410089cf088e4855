"""
campbook/services/identity_provider.py

Purpose: Identity provider integration (Firebase Identity Toolkit REST API)

- Creates accounts and signs users in with email/password
- Verifies bearer (ID) tokens by looking up the account they belong to
- Sends password reset emails
- Credentials never touch our database; only the provider's uid is kept
"""

import httpx
from dataclasses import dataclass
from typing import Optional, Dict, Any, Protocol

from campbook.core.config import settings
from campbook.core.exceptions import ExternalServiceError
from campbook.core.logging import get_logger

logger = get_logger(__name__)


class IdentityProviderError(Exception):
    """
    Error reported by the identity provider.

    `code` is the provider's machine-readable reason (e.g. EMAIL_EXISTS),
    `message` the full text it returned.
    """

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = code
        self.message = message or code
        super().__init__(self.message)


@dataclass
class IdentityProfile:
    """Account data held by the identity provider."""

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    phone_number: Optional[str] = None


@dataclass
class SignInResult:
    uid: str
    id_token: str
    email: Optional[str] = None


class IdentityProvider(Protocol):
    async def create_account(
        self,
        email: str,
        password: str,
        display_name: str,
        phone_number: Optional[str] = None
    ) -> IdentityProfile:
        ...

    async def verify_token(self, token: str) -> IdentityProfile:
        ...

    async def sign_in(self, email: str, password: str) -> SignInResult:
        ...

    async def send_password_reset(self, email: str) -> None:
        ...


class FirebaseIdentityProvider:
    """
    Talks to the Identity Toolkit `accounts:*` endpoints with the project's
    web API key.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key if api_key is not None else settings.FIREBASE_API_KEY
        self.base_url = (base_url or settings.IDENTITY_TOOLKIT_URL).rstrip("/")
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.IDENTITY_PROVIDER_TIMEOUT
        )

    async def _call(self, action: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/accounts:{action}"

        try:
            response = await self._client.post(url, params={"key": self.api_key}, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Identity provider request failed ({action}): {e}")
            raise ExternalServiceError("Identity provider is unavailable") from e

        if response.status_code == 200:
            return response.json()

        try:
            error = response.json().get("error", {})
            message = error.get("message") or f"HTTP {response.status_code}"
        except ValueError:
            message = f"HTTP {response.status_code}"

        # Messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
        code = message.split(" : ", 1)[0].strip()
        logger.warning(f"Identity provider rejected {action}: {code}")

        if response.status_code >= 500:
            raise ExternalServiceError("Identity provider error", details={"code": code})
        raise IdentityProviderError(code, message)

    async def create_account(
        self,
        email: str,
        password: str,
        display_name: str,
        phone_number: Optional[str] = None
    ) -> IdentityProfile:
        """
        Creates an email/password account.

        The phone number is kept in our own user record; the signUp
        endpoint has no field for it.

        Raises:
            IdentityProviderError: e.g. EMAIL_EXISTS, INVALID_EMAIL, WEAK_PASSWORD
        """
        data = await self._call("signUp", {
            "email": email,
            "password": password,
            "displayName": display_name,
            "returnSecureToken": True,
        })
        logger.info(f"Identity account created: {data.get('localId')}")
        return IdentityProfile(
            uid=data["localId"],
            email=data.get("email", email),
            display_name=data.get("displayName", display_name),
            phone_number=phone_number,
        )

    async def verify_token(self, token: str) -> IdentityProfile:
        """
        Resolves an ID token to the account it was issued for.

        Raises:
            IdentityProviderError: INVALID_ID_TOKEN, TOKEN_EXPIRED, USER_NOT_FOUND
        """
        data = await self._call("lookup", {"idToken": token})
        users = data.get("users") or []
        if not users:
            raise IdentityProviderError("USER_NOT_FOUND")

        account = users[0]
        return IdentityProfile(
            uid=account["localId"],
            email=account.get("email"),
            display_name=account.get("displayName"),
            phone_number=account.get("phoneNumber"),
        )

    async def sign_in(self, email: str, password: str) -> SignInResult:
        """
        Exchanges email/password for an ID token.

        Raises:
            IdentityProviderError: INVALID_LOGIN_CREDENTIALS, USER_DISABLED, ...
        """
        data = await self._call("signInWithPassword", {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })
        return SignInResult(
            uid=data["localId"],
            id_token=data["idToken"],
            email=data.get("email"),
        )

    async def send_password_reset(self, email: str) -> None:
        await self._call("sendOobCode", {
            "requestType": "PASSWORD_RESET",
            "email": email,
        })
        logger.info("Password reset email requested")

    async def close(self):
        await self._client.aclose()


# Global identity provider instance
_identity_provider: Optional[FirebaseIdentityProvider] = None


def get_identity_provider() -> FirebaseIdentityProvider:
    """Get or create the global identity provider instance."""
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = FirebaseIdentityProvider()
    return _identity_provider


async def close_identity_provider():
    """Close the identity provider's HTTP client."""
    global _identity_provider
    if _identity_provider:
        await _identity_provider.close()
        _identity_provider = None
