"""
Cross-chain NFT bridging.

Thin wrapper over a Wormhole transfer service. NFTs always leave from Sui;
the destination chain is passed through as given. Nothing is retried and
the call returns as soon as the service answers (no finality wait).
"""

from typing import Any, Optional, Protocol

import httpx
import structlog

from .models import TransferRequest

logger = structlog.get_logger()

SOURCE_CHAIN = "sui"


class TransferService(Protocol):
    async def transfer_nft(self, token_id: Any, from_chain: str, to_chain: Any) -> Any:
        ...


class WormholeClient:
    """
    Async client for the cross-chain transfer service.

    POST {base_url}/transfer {"tokenId", "fromChain", "toChain"} -> JSON result
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

    async def transfer_nft(self, token_id: Any, from_chain: str, to_chain: Any) -> Any:
        """Request a transfer. HTTP errors propagate as httpx exceptions."""
        payload = TransferRequest(token_id=token_id, from_chain=from_chain, to_chain=to_chain)
        client = await self._get_client()
        response = await client.post("/transfer", json=payload.model_dump(by_alias=True))
        response.raise_for_status()
        return response.json()


async def bridge_nft(transfer: TransferService, nft_id: Any, destination_chain: Any) -> Any:
    """Bridge an NFT from Sui to `destination_chain`, returning the service result."""
    logger.info("nft_bridge_requested", nft_id=nft_id, from_chain=SOURCE_CHAIN, to_chain=destination_chain)
    return await transfer.transfer_nft(
        token_id=nft_id,
        from_chain=SOURCE_CHAIN,
        to_chain=destination_chain,
    )
