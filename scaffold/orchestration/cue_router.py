# ABOUTME: In-process cue router fanning controller cue events out to audio/voice/presentation subscribers.
# ABOUTME: Keeps a bounded log of recent cues and isolates subscriber failures from each other.

from collections import deque
from collections.abc import Callable

from loguru import logger

from scaffold.models.cues import CueEvent, CueType

CueHandler = Callable[[CueEvent], None]


class CueRouter:
    """
    Routes cue events to subscribed handlers.

    Handlers subscribe either to every cue or to a subset of cue types.
    A handler that raises is logged and skipped; the remaining handlers
    still receive the cue.
    """

    def __init__(self, history_size: int = 100):
        """
        Initialize cue router.

        Args:
            history_size: Number of recent cues retained for inspection
        """
        self._subscribers: list[tuple[CueHandler, frozenset[CueType] | None]] = []
        self._recent: deque[CueEvent] = deque(maxlen=history_size)

    def subscribe(
        self,
        handler: CueHandler,
        cue_types: set[CueType] | frozenset[CueType] | None = None
    ) -> None:
        """
        Register a handler.

        Args:
            handler: Callable receiving each matching CueEvent
            cue_types: Cue types to receive (None = all)
        """
        types = frozenset(cue_types) if cue_types is not None else None
        self._subscribers.append((handler, types))
        logger.debug(f"Subscribed cue handler {handler!r}")

    def unsubscribe(self, handler: CueHandler) -> None:
        """
        Remove every registration of `handler`.

        Raises:
            ValueError: If handler was never subscribed
        """
        remaining = [(h, t) for h, t in self._subscribers if h is not handler]
        if len(remaining) == len(self._subscribers):
            raise ValueError(f"Handler {handler!r} is not subscribed")
        self._subscribers = remaining

    def route_cue(self, event: CueEvent) -> dict:
        """
        Deliver a cue to every matching subscriber.

        Args:
            event: Cue to deliver

        Returns:
            dict with success status and recipients_count
        """
        self._recent.append(event)

        recipients_count = 0
        # Copy so handlers may (un)subscribe while being notified
        for handler, types in list(self._subscribers):
            if types is not None and event.cue not in types:
                continue
            try:
                handler(event)
            except Exception as e:
                logger.opt(exception=e).warning(
                    f"Cue handler {handler!r} failed on {event.cue.value}: {e}"
                )
                continue
            recipients_count += 1

        logger.debug(
            f"Routed cue {event.cue.value} (turn {event.turn_number}) "
            f"to {recipients_count} recipients"
        )

        return {
            "success": True,
            "recipients_count": recipients_count
        }

    @property
    def recent_cues(self) -> list[CueEvent]:
        """Recently routed cues, oldest first"""
        return list(self._recent)

    def clear_history(self) -> None:
        """Forget recorded cues"""
        self._recent.clear()
