"""Configuration loading: a typed schema with optional YAML file and CLI-style overrides on top."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from chess_trainer.core.exceptions import ConfigError
from chess_trainer.core.shared_types import PieceType

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
PROMOTION_CHOICES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


@dataclass
class TrainerConfig:
    """Settings of a trainer session."""

    toast_duration_ms: int = 4000
    event_history_limit: int = 20  # events kept by the recording sink
    default_promotion: str = "queen"  # used when a promotion request names no piece
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_rotation: str = "10 MB"
    log_retention: str = "1 week"
    seed: Optional[int] = None  # training tips become reproducible when set


def load_config(
    config_path: Optional[str | Path] = None, overrides: Optional[list[str]] = None
) -> TrainerConfig:
    """Load the configuration.

    Args:
        config_path: Optional path to a YAML file. Keys it leaves out keep their default.
        overrides: Optional list of CLI-style overrides (e.g., ["toast_duration_ms=2500"]).

    Returns:
        The validated configuration.

    Raises:
        ConfigError: the file does not exist, or a value has the wrong type or is out of range.
    """
    config = OmegaConf.structured(TrainerConfig)
    try:
        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_path}")
            config = OmegaConf.merge(config, OmegaConf.load(config_path))

        if overrides:
            config = OmegaConf.merge(config, OmegaConf.from_dotlist(overrides))

        trainer_config = OmegaConf.to_object(config)
    except OmegaConfBaseException as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    assert isinstance(trainer_config, TrainerConfig)
    validate_config(trainer_config)
    return trainer_config


def validate_config(config: TrainerConfig) -> None:
    if config.toast_duration_ms <= 0:
        raise ConfigError(f"toast_duration_ms must be positive, got {config.toast_duration_ms}.")
    if config.event_history_limit <= 0:
        raise ConfigError(
            f"event_history_limit must be positive, got {config.event_history_limit}."
        )
    if config.default_promotion not in PROMOTION_CHOICES:
        raise ConfigError(
            f"default_promotion must be one of {[str(choice) for choice in PROMOTION_CHOICES]}, "
            f"got {config.default_promotion!r}."
        )
    if config.log_level.upper() not in LOG_LEVELS:
        raise ConfigError(f"Unknown log_level {config.log_level!r}.")
