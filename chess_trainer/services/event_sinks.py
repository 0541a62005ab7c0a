"""Consumers of chess events. The rules ontology would plug in here through the same `publish` method."""

from collections import deque

from loguru import logger

from chess_trainer.core.models import ChessEvent


class LoggingEventSink:
    """Writes each event to the log and has nothing to show the player."""

    def publish(self, event: ChessEvent) -> None:
        logger.info(f"Chess event: {event.model_dump(exclude_none=True, mode='json')}")


class RecordingEventSink:
    """
    Keeps the most recent events in memory.
    Useful for inspecting what a session published, and as a stand-in for a query layer in tests.
    """

    def __init__(self, history_limit: int = 20) -> None:
        self.events: deque[ChessEvent] = deque(maxlen=history_limit)

    def publish(self, event: ChessEvent) -> dict[str, object]:
        self.events.append(event)
        return {"event": str(event.type), "recorded": len(self.events)}

    def clear(self) -> None:
        self.events.clear()
