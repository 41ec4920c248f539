"""
Pydantic models for API requests and responses.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Identity
# ============================================================================

class Principal(BaseModel):
    """Authenticated player, as returned by the zkLogin verifier."""

    model_config = ConfigDict(extra="allow")

    address: str = Field(..., description="Sui account address (0x...)")


# ============================================================================
# NFTs
# ============================================================================

class StakeRequest(BaseModel):
    """Request to stake an NFT. The id is forwarded without validation."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"nftId": "0x5f1c...a9"}]},
    )

    nft_id: Optional[Any] = Field(None, alias="nftId", description="NFT object id")


# ============================================================================
# Bridge
# ============================================================================

class TransferRequest(BaseModel):
    """Body sent to the cross-chain transfer service."""

    model_config = ConfigDict(populate_by_name=True)

    token_id: Any = Field(..., alias="tokenId")
    from_chain: str = Field(..., alias="fromChain")
    to_chain: Any = Field(..., alias="toChain")


# ============================================================================
# Generic responses
# ============================================================================

class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    """Service status."""

    status: str = Field(..., description="ok or degraded")
    version: str = Field(..., description="API version")
    database: bool = Field(..., description="Whether MongoDB answered a ping")
