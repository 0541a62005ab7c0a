"""Wires configuration, logging, the event sink and the session service together."""

from pathlib import Path
from typing import Optional

from loguru import logger

from chess_trainer.chess.events import EventSink
from chess_trainer.core.config import load_config
from chess_trainer.core.logging import setup_logging
from chess_trainer.services.chess_service import ChessService
from chess_trainer.services.event_sinks import RecordingEventSink


def create_service(
    config_path: Optional[str | Path] = None,
    overrides: Optional[list[str]] = None,
    event_sink: Optional[EventSink] = None,
) -> ChessService:
    """Build a ready-to-play session. Without an explicit sink, events are recorded in memory."""
    config = load_config(config_path, overrides)
    setup_logging(
        config.log_level,
        config.log_file,
        rotation=config.log_rotation,
        retention=config.log_retention,
    )
    sink = event_sink or RecordingEventSink(config.event_history_limit)
    logger.info(f"Starting chess trainer session (sink: {type(sink).__name__})")
    return ChessService(sink, config)
