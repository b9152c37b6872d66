"""Configuration management for the mapper agent."""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from src.memory.tile_store import MergePolicy

logger = logging.getLogger(__name__)


@dataclass
class AgentConfig:
    """Decision engine settings."""

    # How new observations merge into the map
    # Options: "keep_first", "skip_void", "replace_void"
    merge_policy: str = "keep_first"
    # Plan paths through closed doors (opened once adjacent)
    plan_through_closed_doors: bool = True
    # Frontier search node limit, 0 = unbounded
    max_search_nodes: int = 0
    log_decisions: bool = True

    def get_merge_policy(self) -> MergePolicy:
        """Get merge policy as enum, falling back to keep_first."""
        try:
            return MergePolicy(self.merge_policy.lower())
        except ValueError:
            logger.warning(f"Invalid merge_policy value '{self.merge_policy}', defaulting to keep_first")
            return MergePolicy.KEEP_FIRST


@dataclass
class SimulationConfig:
    """Local maze simulator settings."""

    radius: int = 2
    max_turns: int = 500
    stop_when_exhausted: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""

    agent: AgentConfig = field(default_factory=AgentConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Section name in the YAML file -> dataclass holding it
_SECTIONS = {
    "agent": AgentConfig,
    "simulation": SimulationConfig,
    "logging": LoggingConfig,
}

# Environment variable -> (section, field, converter)
_ENV_OVERRIDES = {
    "GRIDMAPPER_MERGE_POLICY": ("agent", "merge_policy", str),
    "GRIDMAPPER_LOG_LEVEL": ("logging", "level", str),
    "GRIDMAPPER_RADIUS": ("simulation", "radius", int),
    "GRIDMAPPER_MAX_TURNS": ("simulation", "max_turns", int),
}

DEFAULT_CONFIG_PATHS = (
    Path("config/default.yaml"),
    Path(__file__).parent.parent / "config" / "default.yaml",
)


def _find_config() -> Optional[Path]:
    return next((p for p in DEFAULT_CONFIG_PATHS if p.exists()), None)


def _build_section(name: str, values: dict[str, Any]) -> Any:
    """Instantiate a config section, dropping keys it does not define."""
    section_cls = _SECTIONS[name]
    known = {f.name for f in fields(section_cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        logger.warning(f"Ignoring unknown {name} settings: {', '.join(unknown)}")
    return section_cls(**{k: v for k, v in values.items() if k in known})


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML, then apply GRIDMAPPER_* overrides.

    Args:
        config_path: Path to config file. Defaults to config/default.yaml

    Returns:
        Populated Config dataclass
    """
    path = Path(config_path) if config_path else _find_config()
    config = Config()

    data = None
    if path is not None and path.exists():
        with open(path) as f:
            data = yaml.safe_load(f)

    for name, values in (data or {}).items():
        if name not in _SECTIONS:
            logger.warning(f"Ignoring unknown config section '{name}'")
            continue
        setattr(config, name, _build_section(name, values or {}))

    for var, (section, attr, convert) in _ENV_OVERRIDES.items():
        raw = os.environ.get(var)
        if not raw:
            continue
        try:
            setattr(getattr(config, section), attr, convert(raw))
        except ValueError:
            logger.warning(f"Ignoring {var}={raw!r}: expected {convert.__name__}")

    return config


def setup_logging(config: LoggingConfig) -> None:
    """Send log records to stderr and, if configured, to a file."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        format=config.format,
        handlers=handlers,
    )
    logger.debug(f"Logging at {config.level}, file={config.file}")
