import logging
from collections.abc import Callable
from typing import NamedTuple

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class MatchCompleted(NamedTuple):
    match_id: int


class MatchReopened(NamedTuple):
    match_id: int
    status: str


class MatchDeleted(NamedTuple):
    match_id: int


Handler = Callable[[Session, object], object]

_subscribers: dict[type, list[Handler]] = {}


def subscribe(event_type: type, handler: Handler) -> Handler:
    handlers = _subscribers.setdefault(event_type, [])
    if handler not in handlers:
        handlers.append(handler)
    return handler


def subscriber(event_type: type) -> Callable[[Handler], Handler]:
    def register(handler: Handler) -> Handler:
        return subscribe(event_type, handler)

    return register


def subscribers(event_type: type) -> list[Handler]:
    return list(_subscribers.get(event_type, []))


def publish(db: Session, event: object) -> None:
    handlers = subscribers(type(event))
    if not handlers:
        logger.debug("No subscribers for %r", event)
        return

    for handler in handlers:
        logger.debug("Dispatching %r to %s", event, handler.__name__)
        handler(db, event)
