"""Error taxonomy shared by all storefront contexts.

Invalid input and unknown records are reported with protean's own
``ValidationError`` and ``ObjectNotFoundError``. The failures below are the
storefront's: each carries a discriminable ``kind``, a human readable
``message`` and structured ``details`` so callers can render precise
feedback. Storage errors are never wrapped here; the HTTP layer turns them
into a generic server failure.
"""

from typing import Any

from protean.exceptions import ValidationError


class StorefrontError(Exception):
    kind = "StorefrontError"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, "details": self.details}


class Unauthenticated(StorefrontError):
    kind = "Unauthenticated"

    def __init__(self, message: str = "Authentication required", **details: Any):
        super().__init__(message, **details)


class InvalidCredential(Unauthenticated):
    kind = "InvalidCredential"

    def __init__(self, message: str = "Invalid credentials", **details: Any):
        super().__init__(message, **details)


class PermissionDenied(StorefrontError):
    kind = "PermissionDenied"

    def __init__(self, message: str = "You are not allowed to perform this action", **details: Any):
        super().__init__(message, **details)


class AccountBlocked(PermissionDenied):
    kind = "AccountBlocked"

    def __init__(self, message: str = "Account is blocked", **details: Any):
        super().__init__(message, **details)


class InvalidStatus(StorefrontError):
    kind = "InvalidStatus"

    def __init__(self, message: str, **details: Any):
        super().__init__(message, **details)


class InsufficientStock(StorefrontError):
    kind = "InsufficientStock"

    def __init__(
        self,
        product_id: int,
        product_name: str,
        requested: int,
        available: int,
        size: str | None = None,
        line: int | None = None,
    ):
        label = f"{product_name} (size {size})" if size else product_name
        super().__init__(
            f"Insufficient stock for {label}: requested {requested}, available {available}",
            product_id=product_id,
            product_name=product_name,
            size=size,
            requested=requested,
            available=available,
            line=line,
        )
        self.product_id = product_id
        self.product_name = product_name
        self.size = size
        self.requested = requested
        self.available = available
        self.line = line


class MissingProduct(StorefrontError):
    kind = "MissingProduct"

    def __init__(self, product_id: int, product_name: str, line: int):
        super().__init__(
            f"Product {product_id} ({product_name}) on line {line} no longer exists",
            product_id=product_id,
            product_name=product_name,
            line=line,
        )
        self.product_id = product_id
        self.product_name = product_name
        self.line = line


def validation_error_from(exc) -> ValidationError:
    """Re-key a pydantic (or FastAPI request) validation error by field name."""
    messages: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        field = ".".join(loc) or "_entity"
        messages.setdefault(field, []).append(error["msg"])
    return ValidationError(messages)


def summarize(messages) -> str:
    """One line rendering of protean error messages, a dict of lists or plain text."""
    if isinstance(messages, dict):
        return "; ".join(
            f"{field}: {', '.join(str(problem) for problem in problems)}"
            if isinstance(problems, list | tuple)
            else f"{field}: {problems}"
            for field, problems in messages.items()
        )
    return str(messages)
