"""Tests for CSV exports."""

import io
from datetime import date

import pandas as pd
import pytest

from cookiecogs.models import AuditCount, ProductionPlan
from cookiecogs.services import export_service


def read(content: str) -> pd.DataFrame:
    return pd.read_csv(io.StringIO(content))


def test_daily_report(sample_history):
    df = read(export_service.daily_report(sample_history.products))

    assert list(df.columns) == export_service.DAILY_COLUMNS
    # 3 days x 9 products
    assert len(df) == 27
    row = df[(df["Tag"] == "2025-01-16") & (df["Cookie"] == "Chocolate Chip")].iloc[0]
    assert row["Verkauft"] == 14
    assert row["Umsatz"] == pytest.approx(35.0)


def test_daily_report_period(sample_history):
    from cookiecogs.models import DateRange

    content = export_service.daily_report(
        sample_history.products, DateRange(start=date(2025, 1, 16))
    )
    assert set(read(content)["Tag"]) == {"2025-01-16"}


def test_summary_report(sample_history):
    df = read(export_service.summary_report(sample_history.products))

    row = df[df["Cookie_Name"] == "Lemon"].iloc[0]
    assert row["Gesamt_Verkauft"] == 15
    assert row["Gesamtumsatz"] == pytest.approx(39.0)
    assert row["Gewinnmarge_Euro"] == pytest.approx(1.80)


def test_audit_report(audits, state):
    counts = [AuditCount(product_id=p.id, location=3) for p in state.products]
    audits.complete(counts, state.users[0], day="2025-01-16")

    df = read(export_service.audit_report(state.audits))

    assert list(df.columns) == export_service.AUDIT_COLUMNS
    assert len(df) == 9
    assert set(df["Ist_Gesamt"]) == {3}
    assert df["Bearbeiter_Name"].iloc[0] == "Administrator"


def test_empty_audit_report_has_header():
    df = read(export_service.audit_report([]))

    assert list(df.columns) == export_service.AUDIT_COLUMNS
    assert len(df) == 0


def test_recipe_report(catalog, state):
    catalog.set_recipe_ingredient(1, 3, 1.0)  # 1 kg butter per 100

    df = read(export_service.recipe_report(state.products, state.recipes, state.ingredients))

    row = df[df["Cookie_Name"] == "Chocolate Chip"].iloc[0]
    assert row["Butter (ungesalzen)_kg"] == pytest.approx(1.0)
    assert row["Gesamtkosten_Euro"] == pytest.approx(6.5)
    assert row["Kosten_pro_Cookie_Euro"] == pytest.approx(0.065)


def test_plan_report():
    plans = [
        ProductionPlan(id=1, product="Lemon", quantity=40, deadline=date(2025, 1, 20)),
        ProductionPlan(id=2, product="Red Velvet", quantity=10, done=True),
    ]

    df = read(export_service.plan_report(plans))

    assert list(df["Status"]) == ["Offen", "Erledigt"]
    assert df["Deadline"].iloc[0] == "2025-01-20"


def test_shopping_report(catalog):
    catalog.update_ingredient(3, amount=2)

    df = read(export_service.shopping_report(catalog.shopping_list()))

    assert len(df) == 1
    assert df["Geschaetzte_Kosten"].iloc[0] == pytest.approx(52.0)


def test_export_filename():
    name = export_service.export_filename("inventur_log")

    assert name.startswith("inventur_log_")
    assert name.endswith(".csv")
