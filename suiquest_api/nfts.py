"""
Player NFT endpoints.

The game logic behind listing and staking lives outside this service. It is
supplied as an object implementing `NFTService`, either passed to
`create_app` or named by the NFT_SERVICE setting ("package.module:attr").
"""

import importlib
from typing import Any, Protocol

import structlog
from fastapi import APIRouter, Depends, Request

from .auth import authenticate
from .models import Principal, StakeRequest

logger = structlog.get_logger()

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class NFTService(Protocol):
    async def get_nfts(self, owner: str) -> list[Any]:
        ...

    async def stake_nft(self, owner: str, nft_id: Any) -> Any:
        ...


class NFTServiceNotConfigured(RuntimeError):
    """No NFT service was supplied to the app."""


def load_nft_service(path: str) -> NFTService:
    """Resolve a 'module:attribute' path to the NFT service object."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"NFT_SERVICE must look like 'module:attribute', got {path!r}")
    module = importlib.import_module(module_name)
    return getattr(module, attr)


def get_nft_service(request: Request) -> NFTService:
    service = getattr(request.app.state, "nft_service", None)
    if service is None:
        raise NFTServiceNotConfigured("NFT service not configured (set NFT_SERVICE)")
    return service


def is_json_content_type(content_type: str) -> bool:
    """application/json or any application/*+json media type."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or (
        media_type.startswith("application/") and media_type.endswith("+json")
    )


async def read_stake_request(request: Request) -> StakeRequest:
    """
    Parse the stake body from JSON or a url-encoded form.

    Other content types are not parsed; the body counts as empty.
    """
    content_type = request.headers.get("content-type", "")
    data: Any = {}
    if content_type.startswith(FORM_CONTENT_TYPES):
        data = dict(await request.form())
    elif is_json_content_type(content_type):
        body = await request.body()
        if body:
            data = await request.json()
    if not isinstance(data, dict):
        data = {}
    return StakeRequest.model_validate(data)


router = APIRouter()


@router.get("/")
async def list_nfts(
    principal: Principal = Depends(authenticate),
    service: NFTService = Depends(get_nft_service),
) -> Any:
    """Fetch the NFTs owned by the authenticated player."""
    return await service.get_nfts(principal.address)


@router.post("/stake")
async def stake_nft(
    principal: Principal = Depends(authenticate),
    stake: StakeRequest = Depends(read_stake_request),
    service: NFTService = Depends(get_nft_service),
) -> Any:
    """Stake one of the authenticated player's NFTs."""
    result = await service.stake_nft(principal.address, stake.nft_id)
    logger.info("nft_staked", owner=principal.address, nft_id=stake.nft_id)
    return result
