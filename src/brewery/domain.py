"""BB Brewery storefront: shoppers, catalogue, baskets, tax and shipping.

Every aggregate of the storefront lives in this single bounded context.
"""

from protean.domain import Domain

from brewery.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

brewery = Domain(name="brewery")
