"""Agent orchestration - per-turn decisions and the host-facing client."""

from .client import BOT_NAME, MapperClient
from .engine import DecisionEngine

__all__ = [
    # Engine
    "DecisionEngine",
    # Client
    "BOT_NAME",
    "MapperClient",
]
