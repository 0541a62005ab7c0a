"""Unit tests for chess_trainer/app.py"""

from unittest.mock import patch

from chess_trainer.app import create_service
from chess_trainer.core.shared_types import ChessEventType
from chess_trainer.services.event_sinks import LoggingEventSink, RecordingEventSink


def test_create_service_wires_config_and_sink() -> None:
    with patch("chess_trainer.app.setup_logging") as mock_setup_logging:
        service = create_service(
            overrides=["event_history_limit=5", "log_level=DEBUG", "log_retention=3 days"]
        )

    mock_setup_logging.assert_called_once_with("DEBUG", None, rotation="10 MB", retention="3 days")
    assert isinstance(service.event_sink, RecordingEventSink)
    assert service.event_sink.events.maxlen == 5
    assert service.event_sink.events[0].type == ChessEventType.GAME_START
    assert service.config.event_history_limit == 5


def test_create_service_with_explicit_sink() -> None:
    sink = LoggingEventSink()
    with patch("chess_trainer.app.setup_logging"):
        service = create_service(event_sink=sink)
    assert service.event_sink is sink
