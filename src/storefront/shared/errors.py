"""Typed errors raised by storefront handlers and aggregates.

Every error builds on protean's exception hierarchy, so protean's own
failures (a `ValidationError` from a field, an `ObjectNotFoundError` from
`repository.get`) and ours travel through the same handlers. Each class
carries a machine-readable ``code`` next to protean's ``messages`` dict.
"""

from protean.exceptions import ObjectNotFoundError, ProteanException, ValidationError


def first_message(messages) -> str:
    """Flatten protean's ``{field: [msg, ...]}`` structure into one sentence."""
    if isinstance(messages, dict):
        for field, errors in messages.items():
            if isinstance(errors, (list, tuple)) and errors:
                return str(errors[0]) if field.startswith("_") else f"{field}: {errors[0]}"
            if errors:
                return str(errors)
        return "Invalid request"
    return str(messages)


class BusinessRuleError(ValidationError):
    """A request that is well formed but breaks a business rule (HTTP 400)."""

    default_code = "VALIDATION_ERROR"

    def __init__(self, messages, code=None):
        super().__init__(messages)
        self.code = code or self.default_code

    @property
    def message(self) -> str:
        return first_message(self.messages)


class InsufficientStockError(BusinessRuleError):
    default_code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id, product_name, requested, available):
        label = product_name or product_id
        super().__init__(
            {"quantity": [f"Insufficient stock for {label}: requested {requested}, available {available}"]}
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidStatusTransition(BusinessRuleError):
    default_code = "INVALID_STATUS_TRANSITION"

    def __init__(self, current, target, field="status"):
        super().__init__({field: [f"Cannot transition from {current} to {target}"]})


class NotFoundError(ObjectNotFoundError):
    """An addressed entity does not exist (HTTP 404)."""

    default_code = "NOT_FOUND"

    def __init__(self, messages, code=None):
        super().__init__(messages)
        self.code = code or self.default_code

    @property
    def message(self) -> str:
        return first_message(self.messages)


class InventoryNotFound(NotFoundError):
    default_code = "INVENTORY_NOT_FOUND"

    def __init__(self, product_id):
        super().__init__({"_entity": [f"No inventory record for product {product_id}"]})
        self.product_id = product_id


class ConflictError(ProteanException):
    """The request collides with existing state (HTTP 409)."""

    default_code = "CONFLICT"

    def __init__(self, messages, code=None):
        super().__init__(messages)
        self.code = code or self.default_code

    @property
    def message(self) -> str:
        return first_message(self.messages)


class AuthError(ProteanException):
    """Missing, invalid or expired credentials (401) or the wrong role (403)."""

    def __init__(self, message, status_code=401, code=None):
        super().__init__({"_auth": [message]})
        self.status_code = status_code
        self.code = code or ("UNAUTHORIZED" if status_code == 401 else "FORBIDDEN")

    @property
    def message(self) -> str:
        return first_message(self.messages)
