"""Tests for the domain models."""

from datetime import date

from cookiecogs.models import (
    AuditCount,
    DailyRecord,
    Ingredient,
    Priority,
    Product,
    PublicUser,
    Recipe,
    SalesChannel,
    User,
    UserPermissions,
    UserRole,
)
from cookiecogs.models.common import DateRange, priority_for


def test_product_counters_clamp_on_construction():
    product = Product(id=1, name="Test", stock=-5, prepared=-1)

    assert product.stock == 0
    assert product.prepared == 0


def test_product_counters_clamp_on_assignment():
    product = Product(id=1, name="Test", stock=10)

    product.stock = product.stock - 25
    product.prepared = -3

    assert product.stock == 0
    assert product.prepared == 0


def test_daily_record_sold_is_channel_sum():
    record = DailyRecord(
        verkauft_location=3,
        verkauft_ubereats=2,
        verkauft_wolt=1,
        verkauft_lieferando=4,
        verkauft_website=5,
        mitarbeiter_verbrauch=7,
    )

    # Staff consumption is not a sale
    assert record.sold == 15
    assert record.channel_total == 15


def test_legacy_aggregate_replaced_by_first_channel_write():
    record = DailyRecord(legacy_sold=9)
    assert record.sold == 9

    record.set_channel(SalesChannel.WOLT, 4)

    assert record.legacy_sold == 0
    assert record.sold == 4


def test_negative_channel_value_clamps():
    record = DailyRecord()
    record.set_channel(SalesChannel.LOCATION, -2)
    assert record.verkauft_location == 0


def test_product_sold_sums_history():
    product = Product(id=1, name="Test")
    product.record_for("2025-01-01").verkauft_location = 3
    product.record_for("2025-01-02").verkauft_website = 4

    assert product.sold == 7


def test_peek_record_does_not_create():
    product = Product(id=1, name="Test")
    record = product.peek_record("2025-01-01")

    assert record.sold == 0
    assert product.history == {}


def test_ingredient_amount_clamps():
    ingredient = Ingredient(id=1, name="Mehl", amount=2.0, unit="kg", cost_per_unit=1.5)
    ingredient.amount = ingredient.amount - 5

    assert ingredient.amount == 0
    assert ingredient.stock_value == 0


def test_recipe_scale():
    recipe = Recipe(product_id=1, ingredients={1: 2.0, 3: 0.5}, batch_yield=100)

    assert recipe.scale(50) == {1: 1.0, 3: 0.25}


def test_recipe_scale_with_zero_yield():
    recipe = Recipe(product_id=1, ingredients={1: 2.0}, batch_yield=0)
    assert recipe.scale(50) == {1: 0.0}


def test_audit_count_zero_is_counted():
    """A count of zero is a count; None is not."""
    assert AuditCount(product_id=1, location=0).is_counted
    assert not AuditCount(product_id=1).is_counted


def test_audit_count_ist_total_treats_missing_as_zero():
    count = AuditCount(product_id=1, lager_verpackt=10, location=5)
    assert count.ist_total == 15


def test_date_range_contains():
    period = DateRange(start=date(2025, 1, 10), end=date(2025, 1, 20))

    assert period.contains("2025-01-10")
    assert period.contains("2025-01-20")
    assert not period.contains("2025-01-21")
    assert DateRange().contains("1999-12-31")


def test_priority_for():
    today = date(2025, 1, 16)

    assert priority_for(date(2025, 1, 15), False, today) == Priority.OVERDUE
    assert priority_for(date(2025, 1, 16), False, today) == Priority.TODAY
    assert priority_for(date(2025, 1, 17), False, today) == Priority.TOMORROW
    assert priority_for(date(2025, 1, 30), False, today) == Priority.UPCOMING
    assert priority_for(date(2025, 1, 1), True, today) == Priority.DONE


def test_permission_presets():
    admin = UserPermissions.admin()
    employee = UserPermissions.employee()

    assert all(admin.model_dump().values())
    assert employee.perform_inventory
    assert not employee.manage_users
    assert not employee.export_data
    assert UserPermissions.for_role(UserRole.ADMIN) == admin


def test_public_user_hides_login_code():
    user = User(id=2, email="a@b.c", login_code="999", name="Anna")
    public = PublicUser.from_user(user)

    assert "login_code" not in public.model_dump()
    assert public.role == UserRole.MITARBEITER


def test_user_can():
    user = User(id=2, email="a@b.c", login_code="999", name="Anna")

    assert user.can("production")
    assert not user.can("manage_users")
    assert not user.can("no_such_flag")
