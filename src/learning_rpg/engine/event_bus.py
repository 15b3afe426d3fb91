"""Synchronous event bus that records domain events and notifies observers."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Type

from learning_rpg.models.event import RpgEvent
from learning_rpg.storage.repos.event_ledger import EventLedgerRepo

logger = logging.getLogger(__name__)

Handler = Callable[[RpgEvent], None]


class EventBus:
    """Dispatches typed events to subscribed handlers, in order, before returning.

    Each emitted event is appended to the ledger first. Handler errors
    propagate to the code that emitted the event.
    """

    def __init__(self, ledger: EventLedgerRepo | None = None) -> None:
        self.ledger = ledger
        self._handlers: dict[Type[RpgEvent], list[Handler]] = defaultdict(list)

    def subscribe(self, event_cls: Type[RpgEvent], handler: Handler) -> None:
        self._handlers[event_cls].append(handler)

    def emit(self, event: RpgEvent) -> None:
        if self.ledger is not None:
            self.ledger.append(event)
        handlers = list(self._handlers.get(type(event), []))
        logger.debug("Emitting %s to %d handler(s)", event.event_type.value, len(handlers))
        for handler in handlers:
            handler(event)
