"""Synchronous event notification for evolution cycles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from ..config.constants import GENOTYPE_EVOLVED_EVENT

__all__ = ["GeneticEvent", "EventManager", "GENOTYPE_EVOLVED_EVENT"]

logger = logging.getLogger(__name__)

Listener = Callable[["GeneticEvent"], None]


@dataclass(frozen=True)
class GeneticEvent:
    name: str
    source: Any


class EventManager:
    """Registry of listeners keyed by event name.

    Listeners run in registration order on the thread that fires the event.
    Exceptions raised by a listener propagate to the caller.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def add_listener(self, event_name: str, listener: Listener) -> None:
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.setdefault(event_name, []).append(listener)

    def remove_listener(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name, [])
        if listener in listeners:
            listeners.remove(listener)

    def listeners(self, event_name: str) -> list[Listener]:
        return list(self._listeners.get(event_name, []))

    def fire(self, event: GeneticEvent) -> None:
        listeners = self._listeners.get(event.name, [])
        logger.debug("firing %s to %d listener(s)", event.name, len(listeners))
        for listener in list(listeners):
            listener(event)
