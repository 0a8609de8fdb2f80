"""Typed business failures.

Rule violations subclass Protean's ``ValidationError`` so the FastAPI
integration maps them to 400 responses; missing basket lines subclass
``ObjectNotFoundError`` and map to 404. ``UpstreamFailure`` is the only
failure that surfaces as a 500.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InsufficientStock(ValidationError):
    def __init__(self, product_name, requested, available):
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            {"stock": [f"Insufficient stock for {product_name}: requested {requested}, available {available}"]}
        )


class EmptyBasket(ValidationError):
    def __init__(self, basket_id):
        self.basket_id = basket_id
        super().__init__({"items": ["Cannot checkout an empty basket"]})


class InvalidTransition(ValidationError):
    def __init__(self, current, target, message=None):
        self.current = current
        self.target = target
        super().__init__({"status": [message or f"Cannot transition from {current} to {target}"]})


class AlreadyOrdered(InvalidTransition):
    def __init__(self, basket_id, current):
        self.basket_id = basket_id
        super().__init__(current, "SUBMITTED", f"Basket has already been ordered (status {current})")


class NoTaxConfiguration(ValidationError):
    def __init__(self, state):
        self.state = state
        super().__init__({"state": [f"No active tax configuration for {state}"]})


class ItemNotFound(ObjectNotFoundError):
    def __init__(self, basket_id, product_id):
        self.basket_id = basket_id
        self.product_id = product_id
        super().__init__({"product_id": [f"Product {product_id} is not in basket {basket_id}"]})


class UpstreamFailure(Exception):
    """The datastore or one of its routines failed."""

    def __init__(self, operation, cause=None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed" + (f": {cause}" if cause else ""))
