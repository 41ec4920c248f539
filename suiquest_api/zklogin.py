"""
zkLogin token verification client.

The API does not verify zero-knowledge proofs itself; it forwards the
player's credential to a zkLogin verification service and trusts the
address that service returns.
"""

from typing import Optional, Protocol

import httpx

from .models import Principal


class TokenVerificationError(Exception):
    """The credential could not be verified."""


class TokenVerifier(Protocol):
    async def verify_token(self, credential: str) -> Principal:
        ...


class ZkLoginVerifier:
    """
    Async client for a zkLogin verification service.

    POST {base_url}/verify {"token": "<credential>"} -> {"address": "0x...", ...}
    """

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def verify_token(self, credential: str) -> Principal:
        """
        Verify a credential and return the player it belongs to.

        Raises:
            TokenVerificationError: on any transport, HTTP or payload problem
        """
        client = await self._get_client()
        try:
            response = await client.post("/verify", json={"token": credential})
            response.raise_for_status()
            return Principal.model_validate(response.json())
        except httpx.HTTPError as e:
            raise TokenVerificationError(f"verifier request failed: {e}") from e
        except ValueError as e:
            raise TokenVerificationError(f"invalid verifier response: {e}") from e
