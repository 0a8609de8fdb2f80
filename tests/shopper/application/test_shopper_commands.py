"""Application tests for shopper registration and profile maintenance."""

import pytest
from brewery.shopper.registration import RecordShopperVisit, UpdateShopperProfile
from brewery.shopper.shopper import Shopper
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _repo():
    return current_domain.repository_for(Shopper)


class TestRegisterShopper:
    def test_register_persists_shopper(self, register_shopper):
        shopper_id = register_shopper(first_name="Ada", email="ada@example.com", city="Roanoke")
        shopper = _repo().get(shopper_id)
        assert shopper.first_name == "Ada"
        assert shopper.city == "Roanoke"
        assert shopper.created_at is not None

    def test_duplicate_email_is_rejected_case_insensitively(self, register_shopper):
        register_shopper(email="brewer@example.com")
        with pytest.raises(ValidationError) as exc:
            register_shopper(email="Brewer@Example.com")
        assert "email" in exc.value.messages

    def test_missing_last_name_is_rejected(self, register_shopper):
        with pytest.raises(ValidationError):
            register_shopper(last_name=None)


class TestUpdateShopperProfile:
    def test_only_supplied_fields_change(self, register_shopper):
        shopper_id = register_shopper(city="Roanoke", phone="555-0001")
        current_domain.process(UpdateShopperProfile(shopper_id=shopper_id, city="Norfolk"), asynchronous=False)
        shopper = _repo().get(shopper_id)
        assert shopper.city == "Norfolk"
        assert shopper.phone == "555-0001"

    def test_unknown_shopper(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateShopperProfile(shopper_id="nobody", city="X"), asynchronous=False)


class TestVisits:
    def test_record_visit_moves_last_visit_forward(self, register_shopper):
        shopper_id = register_shopper()
        before = _repo().get(shopper_id).last_visit_at
        current_domain.process(RecordShopperVisit(shopper_id=shopper_id), asynchronous=False)
        assert _repo().get(shopper_id).last_visit_at >= before


class TestShopperQueries:
    def test_find_by_email_and_count(self, register_shopper):
        register_shopper(first_name="Zed", last_name="Amber", email="zed@example.com")
        register_shopper(first_name="Ann", last_name="Barley", email="ann@example.com")
        assert _repo().find_by_email("ZED@example.com").first_name == "Zed"
        assert _repo().find_by_email("nobody@example.com") is None
        assert [s.last_name for s in _repo().find_all()] == ["Amber", "Barley"]
        assert _repo().count() == 2
