"""Basket lifecycle states and the one table of legal transitions.

Every status change in the storefront is validated against
``_VALID_TRANSITIONS``; nothing else decides whether a move is allowed.
"""

from enum import Enum


class BasketStatus(Enum):
    ACTIVE = "ACTIVE"
    SUBMITTED = "SUBMITTED"
    CHECKED_OUT = "CHECKED_OUT"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"

    @property
    def code(self):
        return _CODES[self]

    @property
    def description(self):
        return _DESCRIPTIONS[self]

    @classmethod
    def from_code(cls, code):
        for status, status_code in _CODES.items():
            if status_code == code:
                return status
        raise ValueError(f"Unknown basket status code: {code}")

    @classmethod
    def parse(cls, value):
        """Accept a status, its name, or its numeric code."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls.from_code(value)
        return cls(str(value).upper())

    def next_statuses(self):
        return _VALID_TRANSITIONS[self]

    def can_transition_to(self, target):
        return target in _VALID_TRANSITIONS[self]

    @property
    def is_active(self):
        return self is BasketStatus.ACTIVE

    @property
    def is_ordered(self):
        return self is not BasketStatus.ACTIVE

    @property
    def is_modifiable(self):
        return self in (BasketStatus.ACTIVE, BasketStatus.SUBMITTED)

    @property
    def is_in_shipping(self):
        return self in (BasketStatus.PROCESSING, BasketStatus.SHIPPED)

    @property
    def is_completed(self):
        return self in (BasketStatus.DELIVERED, BasketStatus.CANCELLED, BasketStatus.REFUNDED)


_CODES = {
    BasketStatus.ACTIVE: 0,
    BasketStatus.SUBMITTED: 1,
    BasketStatus.CHECKED_OUT: 2,
    BasketStatus.PROCESSING: 3,
    BasketStatus.SHIPPED: 4,
    BasketStatus.DELIVERED: 5,
    BasketStatus.CANCELLED: 6,
    BasketStatus.REFUNDED: 7,
}

_DESCRIPTIONS = {
    BasketStatus.ACTIVE: "Active basket",
    BasketStatus.SUBMITTED: "Order submitted",
    BasketStatus.CHECKED_OUT: "Checked out",
    BasketStatus.PROCESSING: "Processing",
    BasketStatus.SHIPPED: "Shipped",
    BasketStatus.DELIVERED: "Delivered",
    BasketStatus.CANCELLED: "Cancelled",
    BasketStatus.REFUNDED: "Refunded",
}

_VALID_TRANSITIONS = {
    BasketStatus.ACTIVE: frozenset({BasketStatus.SUBMITTED, BasketStatus.CANCELLED}),
    BasketStatus.SUBMITTED: frozenset({BasketStatus.CHECKED_OUT, BasketStatus.CANCELLED, BasketStatus.ACTIVE}),
    BasketStatus.CHECKED_OUT: frozenset({BasketStatus.PROCESSING, BasketStatus.CANCELLED}),
    BasketStatus.PROCESSING: frozenset({BasketStatus.SHIPPED, BasketStatus.CANCELLED}),
    BasketStatus.SHIPPED: frozenset({BasketStatus.DELIVERED}),
    BasketStatus.DELIVERED: frozenset({BasketStatus.REFUNDED}),
    BasketStatus.CANCELLED: frozenset(),
    BasketStatus.REFUNDED: frozenset(),
}

# Sales figures count checked-out baskets onwards, minus the ones that were unwound
ORDER_PLACED_CODE = BasketStatus.CHECKED_OUT.code
UNWOUND = frozenset({BasketStatus.CANCELLED, BasketStatus.REFUNDED})


def is_order_placed(status):
    status = BasketStatus.parse(status)
    return status.code >= ORDER_PLACED_CODE and status not in UNWOUND
