"""Shopper lookups."""

from brewery.domain import brewery
from brewery.shopper.shopper import Shopper

QUERY_LIMIT = 1000


@brewery.repository(part_of=Shopper)
class ShopperRepository:
    def find_by_email(self, email: str) -> Shopper | None:
        matches = self._dao.query.filter(email=email.strip().lower()).all().items
        return matches[0] if matches else None

    def find_all(self) -> list[Shopper]:
        return sorted(self._dao.query.limit(QUERY_LIMIT).all().items, key=lambda s: (s.last_name, s.first_name))

    def count(self) -> int:
        return len(self.find_all())
