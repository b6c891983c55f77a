"""Result envelope returned by every dvcli operation.

An operation either succeeds with a typed payload or fails with a classified
:class:`~dvcli.core.exceptions.DVCliError`; never both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, NoReturn, TypeVar, Union

from dvcli.core.exceptions import DVCliError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful operation carrying its decoded payload."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        """Return the payload."""
        return self.value

    def map(self, fn: Callable[[T], U]) -> Success[U]:
        """Apply ``fn`` to the payload."""
        return Success(fn(self.value))


@dataclass(frozen=True)
class Failure:
    """Failed operation carrying the classified error."""

    error: DVCliError

    @property
    def ok(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None

    def unwrap(self) -> NoReturn:
        """Raise the carried error."""
        raise self.error

    def map(self, fn: Callable[[object], object]) -> Failure:
        return self


Result = Union[Success[T], Failure]
