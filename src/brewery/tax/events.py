"""Domain events for tax configuration and applied taxes."""

from protean.fields import Boolean, Float, Identifier, String

from brewery.domain import brewery


@brewery.event(part_of="TaxConfiguration")
class TaxRateConfigured:
    __version__ = 1

    configuration_id = Identifier(required=True)
    state = String(required=True)
    rate = Float(required=True)
    active = Boolean(required=True)


@brewery.event(part_of="AppliedTax")
class TaxApplied:
    """Tax was charged on a basket."""

    __version__ = 1

    applied_tax_id = Identifier(required=True)
    basket_id = Identifier(required=True)
    state = String(required=True)
    rate = Float(required=True)
    tax_amount = Float(required=True)
