"""Two-branch service result: a success value or a failure"""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from kanban_boards.failures import Failure

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    failure: Optional[Failure] = None

    @classmethod
    def ok(cls, value: T = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, failure: Failure) -> "Result[T]":
        return cls(failure=failure)

    @property
    def is_success(self) -> bool:
        return self.failure is None

    @property
    def is_failure(self) -> bool:
        return self.failure is not None

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """Transform the success value, passing failures through untouched"""
        if self.is_failure:
            return Result.fail(self.failure)
        return Result.ok(fn(self.value))

    def then(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        """Chain another result-returning step"""
        if self.is_failure:
            return Result.fail(self.failure)
        return fn(self.value)
