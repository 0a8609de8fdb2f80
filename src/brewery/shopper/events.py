"""Domain events for the Shopper aggregate."""

from protean.fields import DateTime, Identifier, String

from brewery.domain import brewery


@brewery.event(part_of="Shopper")
class ShopperRegistered:
    __version__ = 1

    shopper_id = Identifier(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)


@brewery.event(part_of="Shopper")
class ShopperProfileUpdated:
    __version__ = 1

    shopper_id = Identifier(required=True)
    changed_fields = String(required=True)
