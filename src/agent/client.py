"""
Host-facing client.

The host creates one client per process, hands it the game parameters
once, then calls decide() every turn. Whatever happens inside, the host
gets an action back.
"""

import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

from src.api.models import (
    Action,
    BotMetadata,
    InitialParameters,
    TurnInput,
    make_bot_name,
    parse_bot_version,
)
from src.config import AgentConfig

from .engine import DecisionEngine

logger = logging.getLogger(__name__)

BOT_NAME = "Mapper"


def package_version() -> str:
    """Installed version of the package, or an unparseable marker."""
    try:
        return version("gridmapper")
    except PackageNotFoundError:
        return "unknown"


class MapperClient:
    """
    Capability interface the host runtime drives.

    Example usage:
        client = MapperClient()
        client.initialize(InitialParameters(diagonal_movement=True))
        action = client.decide(TurnInput(1, tiles, MoveOutcome.NONE))
    """

    def __init__(self, config: Optional[AgentConfig] = None):
        self.engine = DecisionEngine(config)
        self.params: Optional[InitialParameters] = None

    def initialize(self, params: InitialParameters) -> bool:
        """Accept the game parameters. Always succeeds."""
        self.params = params
        logger.info(f"Initialized {self.get_metadata().to_dict()}")
        if params.diagonal_movement:
            logger.info("Host allows diagonal movement; using cardinal moves only")
        if params.extras:
            logger.debug(f"Ignoring extra host parameters: {sorted(params.extras)}")
        return True

    def get_metadata(self) -> BotMetadata:
        """Identity record: name, version, no diagonal support."""
        return BotMetadata(
            name=make_bot_name(BOT_NAME),
            version=parse_bot_version(package_version()),
            supports_diagonal=False,
        )

    def decide(self, turn: TurnInput) -> Action:
        """Produce this turn's action."""
        return self.engine.decide_raw(
            turn.surroundings_radius,
            turn.surroundings,
            turn.last_move_result,
        )
