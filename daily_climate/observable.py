"""
Single-value publisher used to react to coordinate changes.

Subscribers are plain callables invoked synchronously on publish. Async work
belongs in a task the subscriber schedules itself, so publishing never
suspends the caller.
"""

import logging
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
Subscriber = Callable[[T], None]


class Observable(Generic[T]):
    """Holds the latest published value and notifies subscribers of each new one."""

    def __init__(self, name: str):
        self.name = name
        self._value: Optional[T] = None
        self._subscribers: List[Subscriber] = []

    @property
    def value(self) -> Optional[T]:
        return self._value

    def subscribe(self, callback: Subscriber) -> None:
        if callback is None:
            logger.warning("Ignoring None subscriber for %s", self.name)
            return
        self._subscribers.append(callback)
        logger.debug("Registered subscriber for %s", self.name)

    def unsubscribe(self, callback: Subscriber) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            logger.warning("Subscriber not found for %s", self.name)

    def publish(self, value: Optional[T]) -> None:
        """
        Replace the held value and notify subscribers.

        Publishing None is ignored: the held value is never cleared.
        Re-publishing an equal value still notifies.
        """
        if value is None:
            logger.debug("Ignoring empty value for %s", self.name)
            return

        self._value = value
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error(
                    "Subscriber for %s raised: %s", self.name, e, exc_info=True
                )
