"""Shopper registration and profile maintenance."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from brewery.domain import brewery
from brewery.shopper.shopper import Shopper

logger = structlog.get_logger(__name__)


@brewery.command(part_of="Shopper")
class RegisterShopper:
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


@brewery.command(part_of="Shopper")
class UpdateShopperProfile:
    shopper_id = Identifier(required=True)
    first_name = String(max_length=50)
    last_name = String(max_length=50)
    phone = String(max_length=20)
    address = String(max_length=100)
    city = String(max_length=50)
    state = String(max_length=2)
    zip_code = String(max_length=15)
    province = String(max_length=50)
    country = String(max_length=50)
    cookie = Boolean()


@brewery.command(part_of="Shopper")
class RecordShopperVisit:
    shopper_id = Identifier(required=True)


@brewery.command_handler(part_of=Shopper)
class ShopperRegistrationHandler:
    @handle(RegisterShopper)
    def register_shopper(self, command):
        if current_domain.repository_for(Shopper).find_by_email(command.email) is not None:
            raise ValidationError({"email": [f"A shopper with email {command.email} already exists"]})

        shopper = Shopper.register(
            first_name=command.first_name,
            last_name=command.last_name,
            email=command.email,
            phone=command.phone,
            address=command.address,
            city=command.city,
            state=command.state,
            zip_code=command.zip_code,
            province=command.province,
            country=command.country,
            cookie=command.cookie,
        )
        current_domain.repository_for(Shopper).add(shopper)
        logger.info("Shopper registered", shopper_id=str(shopper.id))
        return str(shopper.id)

    @handle(UpdateShopperProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(Shopper)
        shopper = repo.get(command.shopper_id)
        shopper.update_profile(
            first_name=command.first_name,
            last_name=command.last_name,
            phone=command.phone,
            address=command.address,
            city=command.city,
            state=command.state,
            zip_code=command.zip_code,
            province=command.province,
            country=command.country,
            cookie=command.cookie,
        )
        repo.add(shopper)

    @handle(RecordShopperVisit)
    def record_visit(self, command):
        repo = current_domain.repository_for(Shopper)
        shopper = repo.get(command.shopper_id)
        shopper.record_visit()
        repo.add(shopper)
