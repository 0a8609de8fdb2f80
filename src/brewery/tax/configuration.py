"""Tax configuration and basket tax application: commands and handlers."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, String
from protean.utils.globals import current_domain

from brewery.basket.basket import Basket
from brewery.domain import brewery
from brewery.errors import NoTaxConfiguration
from brewery.shared.money import round_money, sum_money
from brewery.tax.tax import AppliedTax, TaxConfiguration

logger = structlog.get_logger(__name__)


@brewery.command(part_of="TaxConfiguration")
class ConfigureTaxRate:
    """Create the jurisdiction's rate, or update the active one in place."""

    state = String(required=True, max_length=2)
    rate_percentage = Float(required=True)
    description = String(max_length=100)
    province = String(max_length=50)


@brewery.command(part_of="TaxConfiguration")
class ToggleTaxConfiguration:
    configuration_id = Identifier(required=True)
    active = Boolean(required=True)


@brewery.command(part_of="TaxConfiguration")
class DeleteTaxConfiguration:
    configuration_id = Identifier(required=True)


@brewery.command(part_of="AppliedTax")
class ApplyTaxToBasket:
    basket_id = Identifier(required=True)
    state = String(required=True, max_length=2)
    # Defaults to the basket's own subtotal; a differing value is rejected
    subtotal = Float(min_value=0.0)


@brewery.command(part_of="AppliedTax")
class RemoveAppliedTaxes:
    basket_id = Identifier(required=True)


@brewery.command_handler(part_of=TaxConfiguration)
class TaxConfigurationHandler:
    @handle(ConfigureTaxRate)
    def configure(self, command):
        repo = current_domain.repository_for(TaxConfiguration)
        config = repo.find_active_for_state(command.state)
        if config is None:
            config = TaxConfiguration.configure(
                state=command.state,
                rate_percentage=command.rate_percentage,
                description=command.description,
                province=command.province,
            )
        else:
            config.reconfigure(command.rate_percentage, command.description)
        repo.add(config)
        logger.info("Tax rate configured", state=config.state, rate=config.rate)
        return str(config.id)

    @handle(ToggleTaxConfiguration)
    def toggle(self, command):
        repo = current_domain.repository_for(TaxConfiguration)
        config = repo.get(command.configuration_id)
        if command.active:
            # One active configuration per state: the re-activated row takes over
            current = repo.find_active_for_state(config.state)
            if current is not None and str(current.id) != str(config.id):
                current.set_active(False)
                repo.add(current)
                logger.info("Tax rate superseded", state=current.state, configuration_id=str(current.id))
        config.set_active(command.active)
        repo.add(config)

    @handle(DeleteTaxConfiguration)
    def delete(self, command):
        repo = current_domain.repository_for(TaxConfiguration)
        config = repo.get(command.configuration_id)
        repo._dao.delete(config)


def _charge_basket(basket, amount):
    basket.set_tax(amount)
    current_domain.repository_for(Basket).add(basket)


@brewery.command_handler(part_of=AppliedTax)
class AppliedTaxHandler:
    @handle(ApplyTaxToBasket)
    def apply(self, command):
        config = current_domain.repository_for(TaxConfiguration).find_active_for_state(command.state)
        if config is None:
            raise NoTaxConfiguration(command.state)

        # Raises ObjectNotFoundError for unknown baskets
        basket = current_domain.repository_for(Basket).get(command.basket_id)
        subtotal = basket.subtotal if command.subtotal is None else command.subtotal
        if round_money(subtotal) != round_money(basket.subtotal):
            raise ValidationError({"subtotal": [f"Subtotal {subtotal} does not match the basket's {basket.subtotal}"]})

        applied_repo = current_domain.repository_for(AppliedTax)
        applied = AppliedTax.charge(command.basket_id, config, subtotal)

        # Re-applying a jurisdiction replaces its earlier charge
        earlier = applied_repo.find_for_basket(command.basket_id)
        kept = [t for t in earlier if t.state != applied.state]
        _charge_basket(basket, sum_money([t.tax_amount for t in kept] + [applied.tax_amount]))

        for superseded in earlier:
            if superseded.state == applied.state:
                applied_repo._dao.delete(superseded)
        applied_repo.add(applied)
        logger.info(
            "Tax applied",
            basket_id=str(command.basket_id),
            state=applied.state,
            tax_amount=applied.tax_amount,
        )
        return str(applied.id)

    @handle(RemoveAppliedTaxes)
    def remove(self, command):
        basket = current_domain.repository_for(Basket).get(command.basket_id)
        repo = current_domain.repository_for(AppliedTax)
        removed = 0
        for applied in repo.find_for_basket(command.basket_id):
            repo._dao.delete(applied)
            removed += 1
        _charge_basket(basket, 0.0)
        return removed
