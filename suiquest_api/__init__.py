"""
SuiQuest API - backend for the SuiQuest NFT game.

Provides REST endpoints for:
- Listing a player's NFTs
- Staking NFTs
- Health checks
"""

__version__ = "0.1.0"
