"""Supabase Auth Verifier — resolves a bearer token to a user id.

Invariants:
    - 200 with a UUID "id" -> UserId; any other status or payload -> UnauthenticatedError
    - Network failure -> AuthServiceUnavailableError (503), never a 401
    - The raw token is never logged

Design Decisions:
    - Calls GET /auth/v1/user with the anon key, same check the Supabase JS client does
    - httpx.AsyncClient injected so tests can use MockTransport
"""

import logging
from uuid import UUID

import httpx

from punchline.core.domain_types import UserId
from punchline.core.errors import AuthServiceUnavailableError, UnauthenticatedError

logger = logging.getLogger(__name__)


class SupabaseAuthVerifier:
    """Verify Supabase-issued JWTs against the Supabase Auth server."""

    def __init__(
        self,
        supabase_url: str,
        anon_key: str,
        http_client: httpx.AsyncClient,
    ):
        self._user_url = f"{supabase_url.rstrip('/')}/auth/v1/user"
        self._anon_key = anon_key
        self._http = http_client

    async def verify(self, token: str) -> UserId:
        if not token or not token.strip():
            raise UnauthenticatedError()
        try:
            response = await self._http.get(
                self._user_url,
                headers={
                    "apikey": self._anon_key,
                    "Authorization": f"Bearer {token.strip()}",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Supabase auth request failed: {e}")
            raise AuthServiceUnavailableError()

        if response.status_code != 200:
            logger.info(
                "Token rejected by Supabase",
                extra={"status_code": response.status_code},
            )
            raise UnauthenticatedError("Invalid token")

        try:
            return UserId(UUID(str(response.json()["id"])))
        except (ValueError, KeyError, TypeError):
            logger.warning("Supabase user payload missing a valid id")
            raise UnauthenticatedError("Invalid token")
