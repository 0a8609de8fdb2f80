"""Shopper aggregate: a registered customer of the storefront."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String

from brewery.domain import brewery
from brewery.shopper.events import ShopperProfileUpdated, ShopperRegistered

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "address",
    "city",
    "state",
    "zip_code",
    "province",
    "country",
    "cookie",
)


@brewery.aggregate
class Shopper:
    first_name = String(required=True, max_length=50)
    last_name = String(required=True, max_length=50)
    email = String(required=True, max_length=100)
    phone = String(max_length=20)
    address = String(max_length=100)
    city = String(max_length=50)
    state = String(max_length=2)
    zip_code = String(max_length=15)
    province = String(max_length=50)
    country = String(max_length=50)
    cookie = Boolean(default=False)
    created_at = DateTime()
    last_visit_at = DateTime()

    @classmethod
    def register(cls, first_name, last_name, email, **profile):
        now = datetime.now(UTC)
        shopper = cls(
            first_name=first_name,
            last_name=last_name,
            email=email.strip().lower(),
            created_at=now,
            last_visit_at=now,
            **{k: v for k, v in profile.items() if v is not None},
        )
        shopper.raise_(ShopperRegistered(shopper_id=str(shopper.id), email=shopper.email, registered_at=now))
        return shopper

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def full_address(self):
        parts = [self.address, self.city, self.state, self.zip_code, self.country]
        return ", ".join(p for p in parts if p)

    def update_profile(self, **changes):
        updated = []
        for field in PROFILE_FIELDS:
            value = changes.get(field)
            if value is not None and getattr(self, field) != value:
                setattr(self, field, value)
                updated.append(field)

        if updated:
            self.raise_(ShopperProfileUpdated(shopper_id=str(self.id), changed_fields=",".join(updated)))
        return updated

    def record_visit(self, at=None):
        self.last_visit_at = at or datetime.now(UTC)
