"""Custom exceptions for the dataset mutation workflow.

Every failure a caller may see is a subclass of `SMError` and serializes into a
discriminated payload through `to_payload()`, keyed by its `type` field.
"""

from collections.abc import Sequence
from typing import Any
from typing import Generic
from typing import Self
from typing import TypeVar

from loguru import logger as log

log.trace("Placeholder log avoid reimporting or resolving unused import warnings.")


class SMError(Exception):
    """Base class for all dataset mutation errors."""

    error_type: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> Any:
        return self.message

    def to_payload(self) -> dict[str, Any]:
        """Structured, JSON-serializable representation for callers."""
        return {"type": self.error_type, "message": self.message}


class ValidationFailed(SMError):
    """Metadata does not conform to the metadata schema."""

    error_type = "failed_validation"

    def __init__(self, violations: Sequence[dict[str, str]]) -> None:
        self.violations: list[dict[str, str]] = list(violations)
        paths = ", ".join(v["path"] or "<root>" for v in self.violations)
        super().__init__(
            f"Metadata validation failed with {len(self.violations)} error(s): {paths}"
        )

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.error_type, "validation_errors": self.violations}


class UnknownDatabase(SMError):
    """A requested molecular database is not in the registry."""

    error_type = "wrong_moldb_name"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Molecular database does not exist: {name}")

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.error_type, "moldb_name": self.name}


class _ReprocessingError(SMError):
    """The proposed edit cannot be applied without resubmitting the dataset."""

    hint: str = ""

    def __init__(
        self,
        *,
        metadata_diff: Sequence[dict[str, Any]],
        config_diff: Sequence[dict[str, Any]],
    ) -> None:
        self.metadata_diff = list(metadata_diff)
        self.config_diff = list(config_diff)
        super().__init__(self.hint)

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.error_type,
            "hint": self.hint,
            "metadata_diff": self.metadata_diff,
            "config_diff": self.config_diff,
        }


class ResubmissionRequired(_ReprocessingError):
    """Processing settings changed: the dataset must be deleted and resubmitted."""

    error_type = "drop_submit_needed"
    hint = "Resubmission needed. Call 'submitDataset' with 'delFirst: true'."


class ReprocessingRequired(_ReprocessingError):
    """Only the molecular databases changed: the dataset must be resubmitted."""

    error_type = "submit_needed"
    hint = "Resubmission needed. Call 'submitDataset'."


class Forbidden(SMError):
    """The acting user may not edit the dataset."""

    error_type = "forbidden"


class NotFound(SMError):
    """The dataset does not exist."""

    error_type = "not_found"


class EngineRequestFailed(SMError):
    """The processing engine answered with a non-success status."""

    error_type = "engine_request_failed"

    def __init__(self, *, route: str, body: str) -> None:
        self.route = route
        self.body = body
        super().__init__(f"Engine request to '{route}' failed: {body}")

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.error_type, "route": self.route, "body": self.body}


class RegistryError(SMError):
    """The molecular database registry could not be queried."""

    error_type = "registry_request_failed"


T = TypeVar("T")


class Unset:
    """A placeholder for unset values and allow None to be a valid value."""

    _instance: None | Self = None

    def __new__(cls, *args, **kwargs) -> "Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<unset>"

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Unset)

    def __hash__(self) -> int:
        return hash(Unset)


_unset = Unset()


class Result(Generic[T]):
    """Either packs a value (success) or an exception (failure).

    Useful for best-effort steps whose failure must be kept for inspection
        and logging without interrupting the surrounding workflow.

    1. By calling: `result()` either returns the value or re-raises the exception.
    2. By checking truthfulness: `bool(result) is True` means success.
    3. To access the value: `my_val = result.value_or(default_value)`.
    4. Or the exception: `my_exc = result.exception_or(default_exception)`.
    """

    def __init__(
        self,
        *,
        value: T | Unset = _unset,
        exception: Exception | Unset = _unset,
        error_info: dict[str, Any] | None = None,
    ) -> None:
        if value is _unset and exception is _unset:  # pragma: no cover
            msg = "Either value or exception must be provided."
            raise ValueError(msg)
        if value is not _unset and exception is not _unset:  # pragma: no cover
            msg = "Only one of value or exception can be provided."
            raise ValueError(msg)
        if exception is not _unset and not isinstance(
            exception, Exception
        ):  # pragma: no cover
            msg = "Exception must be an instance of Exception."
            raise ValueError(msg)
        if exception is _unset and error_info is not None:  # pragma: no cover
            msg = "Error info can only be provided with an exception."
            raise ValueError(msg)
        if value is not _unset and isinstance(value, Exception):
            msg = "Value cannot be an instance of Exception."
            raise ValueError(msg)
        self._value: T = value  # pyright: ignore[reportAttributeAccessIssue]
        self._exception: Exception = exception  # pyright: ignore[reportAttributeAccessIssue]
        self.error_info: dict[str, Any] = error_info if error_info is not None else {}

    def __bool__(self) -> bool:
        return self._value is not _unset and self._exception is _unset

    def __str__(self) -> str:
        return (
            f"Result(value={self._value})"
            if self
            else f"Result(exception={self._exception})"
        )

    def __repr__(self) -> str:
        return self.__str__()

    def __call__(self) -> T:
        """Returns the value or raises the exception."""
        if self:
            return self._value
        raise self._exception

    def value_or(self, default: T) -> T:
        """Returns the wrapped value or a default value when result is an exception."""
        return self._value if self else default

    def exception_or(self, default: Exception | None) -> Exception | None:
        """Returns the wrapped exception or a default one when result is a value."""
        return self._exception if not self else default

    def unwrap(self) -> T:
        """Alias for `self()`. Raises if the result is an exception."""
        return self()


__all__ = [
    "EngineRequestFailed",
    "Forbidden",
    "NotFound",
    "RegistryError",
    "ReprocessingRequired",
    "ResubmissionRequired",
    "Result",
    "SMError",
    "Unset",
    "UnknownDatabase",
    "ValidationFailed",
]
