"""
Pluggy client exceptions and validation-error classification.

Error families:
- PluggyConnectionError: the request never got a response
- PluggyAPIError: the API answered with a non-2xx status (or a non-JSON body)
- PluggyValidationError: a PluggyAPIError whose body listed field-level errors;
  only raised from create/update calls
- PollingTimeoutError / PollingCancelledError: execute_and_wait gave up

A failed connection attempt is NOT an exception: it is reported on
`Item.error` of the returned item.
"""

import functools
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, TypeVar

if TYPE_CHECKING:
    from ..schemas.item import Item

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


@dataclass
class ValidationErrorDetail:
    """One rejected request field."""

    parameter: str | None
    message: str
    code: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ValidationErrorDetail":
        return cls(
            parameter=data.get("parameter"),
            message=data.get("message", ""),
            code=data.get("code"),
        )


@dataclass
class ApiErrorBody:
    """Structured error body returned by the API."""

    code: int | str | None = None
    message: str = ""
    errors: list[ValidationErrorDetail] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ApiErrorBody":
        raw_errors = data.get("errors")
        errors = []
        if isinstance(raw_errors, list):
            errors = [ValidationErrorDetail.from_dict(e) for e in raw_errors if isinstance(e, dict)]
        return cls(
            code=data.get("code"),
            message=data.get("message", ""),
            errors=errors,
        )


class PluggyError(Exception):
    """Base exception for Pluggy client errors."""

    pass


class PluggyConnectionError(PluggyError):
    """Failed to connect to the Pluggy API."""

    pass


class PluggyAPIError(PluggyError):
    """API returned an error response."""

    def __init__(
        self,
        status_code: int,
        message: str,
        response_body: str | None = None,
        api_error: ApiErrorBody | None = None,
    ):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        self.api_error = api_error

        # Build detailed error message
        error_details = []
        if api_error and api_error.errors:
            for detail in api_error.errors:
                if detail.parameter:
                    error_details.append(f"{detail.parameter}: {detail.message}")
                else:
                    error_details.append(detail.message)

        detail_str = "; ".join(error_details) if error_details else message
        super().__init__(f"Pluggy API error {status_code}: {detail_str}")


class PluggyValidationError(PluggyAPIError):
    """The API rejected request fields."""

    def __init__(
        self,
        status_code: int,
        api_error: ApiErrorBody,
        response_body: str | None = None,
    ):
        super().__init__(
            status_code=status_code,
            message=api_error.message,
            response_body=response_body,
            api_error=api_error,
        )
        self.errors = api_error.errors


class PollingTimeoutError(PluggyError):
    """Item did not reach a terminal status before the deadline."""

    def __init__(self, item: "Item", timeout: float):
        self.item = item
        self.timeout = timeout
        super().__init__(
            f"Item {item.id} still {getattr(item.status, 'value', item.status)} after {timeout}s"
        )


class PollingCancelledError(PluggyError):
    """Polling was cancelled by the caller."""

    def __init__(self, item: "Item"):
        self.item = item
        super().__init__(f"Polling for item {item.id} cancelled")


def classify_api_error(error: PluggyAPIError) -> PluggyAPIError:
    """Turn an API error carrying field errors into a PluggyValidationError.

    Anything else (no body, no `errors`, empty `errors`) is returned as is.
    """
    if isinstance(error, PluggyValidationError):
        return error
    if error.api_error is not None and error.api_error.errors:
        return PluggyValidationError(
            status_code=error.status_code,
            api_error=error.api_error,
            response_body=error.response_body,
        )
    return error


def raises_validation_errors(func: F) -> F:
    """Decorate a mutating call so field-level rejections surface as
    PluggyValidationError. Other errors propagate unchanged."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PluggyAPIError as e:
            classified = classify_api_error(e)
            if classified is e:
                raise
            logger.warning(
                f"Validation failed ({classified.status_code}): "
                f"{[d.parameter for d in classified.errors]}"
            )
            raise classified from e

    return wrapper  # type: ignore[return-value]
