"""
test_plan_manager.py
--------------------
Tests for plan records.
"""
import pytest

from catalog.core.exceptions import ConflictError, NotFoundError, ValidationError


class TestPlanManager:
    def test_create(self, plan_manager):
        plan = plan_manager.create(
            {"name": " Weekend Escape ", "description": " Two nights ", "price": "120"}
        )
        assert plan.name == "Weekend Escape"
        assert plan.description == "Two nights"
        assert plan.price == 120.0

    def test_optional_fields(self, plan_manager):
        plan = plan_manager.create({"name": "Day Trip"})
        assert plan.description is None
        assert plan.price is None

    def test_names_keep_case(self, plan_manager):
        plan_manager.create({"name": "Day Trip"})
        plan = plan_manager.create({"name": "day trip"})
        assert plan.name == "day trip"

        with pytest.raises(ConflictError):
            plan_manager.create({"name": "Day Trip"})

    def test_bad_price(self, plan_manager):
        with pytest.raises(ValidationError):
            plan_manager.create({"name": "Day Trip", "price": "cheap"})

    def test_partial_update(self, plan_manager):
        plan = plan_manager.create({"name": "Day Trip", "description": "Lunch included"})
        updated = plan_manager.update(plan.id, {"price": 35})

        assert updated.price == 35.0
        assert updated.description == "Lunch included"

    def test_update_clears_field(self, plan_manager):
        plan = plan_manager.create({"name": "Day Trip", "description": "Lunch included"})
        updated = plan_manager.update(plan.id, {"description": None})
        assert updated.description is None

    def test_get_deleted(self, plan_manager):
        plan = plan_manager.create({"name": "Day Trip"})
        plan_manager.delete(plan.id)

        with pytest.raises(NotFoundError):
            plan_manager.get(plan.id)
        with pytest.raises(NotFoundError):
            plan_manager.get_by_name("Day Trip")
