"""Best-effort collection results for optional context signals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from linesense.errors import GitCommandError
from linesense.runtime_logging import get_runtime_logger

T = TypeVar("T")

# Failures a collector may hit on a healthy machine with a broken or missing
# signal; anything else is a bug and propagates.
TOLERATED_ERRORS: tuple[type[BaseException], ...] = (OSError, GitCommandError, ValueError)


@dataclass(slots=True)
class Collected(Generic[T]):
    label: str
    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_default(self, default: T) -> T:
        if self.error is not None or self.value is None:
            return default
        return self.value


def collect(label: str, fn: Callable[[], T]) -> Collected[T]:
    try:
        return Collected(label=label, value=fn())
    except TOLERATED_ERRORS as exc:
        get_runtime_logger().debug(f"context.{label}.skipped", error=str(exc))
        return Collected(label=label, error=exc)
