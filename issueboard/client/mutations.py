from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"


Notifier = Callable[[Notification], None]


def log_notification(notification: Notification) -> None:
    level = logging.ERROR if notification.variant == "destructive" else logging.INFO
    logger.log(level, "%s: %s", notification.title, notification.description)


class MutationState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class Mutation(Generic[T]):
    """One write operation and its ``idle -> pending -> success|error`` state.

    Each ``run`` is independent; concurrent runs are not queued or ordered.
    ``reset`` returns the mutation to ``idle``.
    """

    def __init__(
        self,
        fn: Callable[..., Awaitable[T]],
        *,
        on_success: Optional[Callable[[T, tuple, dict], None]] = None,
        on_error: Optional[Callable[[Exception, tuple, dict], None]] = None,
    ) -> None:
        self._fn = fn
        self._on_success = on_success
        self._on_error = on_error
        self.state = MutationState.IDLE
        self.data: Optional[T] = None
        self.error: Optional[Exception] = None

    @property
    def is_pending(self) -> bool:
        return self.state is MutationState.PENDING

    async def run(self, *args: Any, **kwargs: Any) -> T:
        self.state = MutationState.PENDING
        self.error = None
        try:
            result = await self._fn(*args, **kwargs)
        except Exception as exc:
            self.state = MutationState.ERROR
            self.error = exc
            if self._on_error is not None:
                self._on_error(exc, args, kwargs)
            raise
        self.state = MutationState.SUCCESS
        self.data = result
        if self._on_success is not None:
            self._on_success(result, args, kwargs)
        return result

    __call__ = run

    def reset(self) -> None:
        self.state = MutationState.IDLE
        self.data = None
        self.error = None
