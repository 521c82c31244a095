from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from projection_cs.utils.exceptions import ErrorKind, ProjectionError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class TransformResult(Generic[T]):
    """
    The outcome of a public projection_cs operation: a value or the error that prevented it.

    Exactly one of value and error is set. Operations return failures instead of raising,
    so callers branch on is_success (or call unwrap to get the exception back).

    Attributes:
        value: The produced value on success, None on failure
        error: The ProjectionError describing the failure, None on success

    Examples:
        >>> result = converter.convert(Coordinate(28.97, 41.0), "EPSG:4326", "EPSG:3857")
        >>> if result.is_success:
        ...     print(result.value)
        ... else:
        ...     print(result.kind, result.message)
    """

    value: Optional[T] = None
    error: Optional[ProjectionError] = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("a TransformResult holds either a value or an error")

    def __repr__(self):
        if self.is_success:
            return f"TransformResult.success({self.value!r})"
        return f"TransformResult.failure({self.error})"

    @classmethod
    def success(cls, value: T) -> TransformResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ProjectionError) -> TransformResult[T]:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return None if self.error is None else self.error.kind

    @property
    def message(self) -> Optional[str]:
        return None if self.error is None else self.error.message

    def unwrap(self) -> T:
        """
        Return the value, raising the stored error if this is a failure.

        Raises:
            ProjectionError: The error this result carries
        """
        if self.error is not None:
            raise self.error
        return self.value

    def map(self, f: Callable[[T], U]) -> TransformResult[U]:
        """
        Apply f to the value of a success; failures are passed through unchanged.

        A ProjectionError raised by f becomes a failure result.
        """
        if self.error is not None:
            return TransformResult.failure(self.error)
        try:
            return TransformResult.success(f(self.value))
        except ProjectionError as e:
            return TransformResult.failure(e)
