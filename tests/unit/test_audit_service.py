"""Tests for audit service (SOLL/IST reconciliation)."""

from datetime import date

import pytest

from cookiecogs.models import AuditCount, DailyRecord, Deviation, Product
from cookiecogs.services.audit_service import classify_deviation, expected_stock
from cookiecogs.services.errors import NotFoundError, ValidationError


def full_counts(state, overrides=None):
    """A zero location count for every product, with per-product overrides."""
    overrides = overrides or {}
    return [
        overrides.get(p.id) or AuditCount(product_id=p.id, location=0)
        for p in state.products
    ]


@pytest.fixture
def admin(state):
    return state.users[0]


# =============================================================================
# Reconciliation
# =============================================================================

def test_expected_stock_uses_target_when_set():
    product = Product(id=1, name="Test", target_stock=20)
    assert expected_stock(product) == 20


def test_expected_stock_from_history_before_first_audit():
    product = Product(id=1, name="Test")
    product.history["2025-01-15"] = DailyRecord(prepared=20, verkauft_location=8, trash=2)
    product.history["2025-01-16"] = DailyRecord(prepared=10, verkauft_wolt=5)

    assert expected_stock(product) == 15


def test_classify_deviation():
    assert classify_deviation(None) == Deviation.NOT_ASSESSED
    assert classify_deviation(0) == Deviation.EXACT
    assert classify_deviation(-2) == Deviation.MINOR
    assert classify_deviation(3) == Deviation.MAJOR


def test_preview_partial_counts(audits, state):
    state.get_product(1).target_stock = 20
    preview = audits.preview([AuditCount(product_id=1, lager_verpackt=10, location=5)])

    line = preview.lines[0]
    assert line.ist_final == 15
    assert line.difference == -5
    assert preview.counted_products == 1
    assert not preview.is_complete
    # Uncounted products stay out of the total
    assert preview.lines[1].difference is None
    assert preview.total_difference == 5


def test_preview_zero_warn_level_never_flags_low_stock(audits, state):
    state.warn_levels["Chocolate Chip"] = 0
    del state.warn_levels["Oatmeal Raisin"]

    preview = audits.preview([
        AuditCount(product_id=1, location=3),
        AuditCount(product_id=2, location=3),
    ])

    assert preview.lines[0].low_stock is False
    # No stored level falls back to the default of 10
    assert preview.lines[1].low_stock is True


def test_preview_does_not_change_state(audits, state):
    audits.preview(full_counts(state))

    assert state.audits == []
    assert state.get_product(1).target_stock is None


# =============================================================================
# Completion
# =============================================================================

def test_complete_audit_sets_new_baseline(audits, state, admin):
    state.get_product(1).target_stock = 20
    counts = full_counts(state, {
        1: AuditCount(product_id=1, lager_verpackt=10, lager_versand=0, location=5),
    })

    audit = audits.complete(counts, admin, day="2025-01-16")

    line = audit.lines[0]
    assert line.ist_final == 15
    assert line.difference == -5
    product = state.get_product(1)
    assert product.target_stock == 15
    assert product.stock == 15
    assert product.history["2025-01-16"].inventur == 15
    assert audit.user == "admin@cookie.com"
    assert len(state.audits) == 1


def test_complete_audit_subtracts_prepared_from_stock(audits, state, admin):
    state.get_product(2).prepared = 4
    counts = full_counts(state, {2: AuditCount(product_id=2, location=10)})

    audits.complete(counts, admin)

    product = state.get_product(2)
    assert product.target_stock == 10
    assert product.stock == 6


def test_incomplete_audit_is_a_no_op(audits, state, admin, store):
    counts = full_counts(state)[:-1]

    assert audits.complete(counts, admin) is None
    assert state.audits == []
    assert all(p.target_stock is None for p in state.products)
    assert store.load("inventoryAudits") is None


def test_same_counts_twice_give_same_baseline(audits, state, admin):
    state.get_product(1).target_stock = 20
    counts = full_counts(state, {1: AuditCount(product_id=1, lager_verpackt=10, location=5)})

    first = audits.complete(counts, admin)
    second = audits.complete(counts, admin)

    assert first.lines[0].ist_final == second.lines[0].ist_final == 15
    assert state.get_product(1).target_stock == 15
    assert second.lines[0].difference == 0
    assert first.id != second.id


def test_unknown_product_in_counts(audits, admin, state):
    counts = full_counts(state) + [AuditCount(product_id=99, location=1)]

    with pytest.raises(ValidationError):
        audits.complete(counts, admin)


def test_complete_rejects_non_iso_day(audits, state, admin):
    with pytest.raises(ValidationError):
        audits.complete(full_counts(state), admin, day="16.01.2025")

    assert state.audits == []
    assert all(p.target_stock is None for p in state.products)
    assert audits.list_audits(period="7days") == []


def test_complete_normalises_day(audits, state, admin):
    audit = audits.complete(full_counts(state), admin, day=date(2025, 1, 16))

    assert audit.date == "2025-01-16"


# =============================================================================
# Audit log
# =============================================================================

@pytest.fixture
def audit_log(audits, state, admin):
    """Two audits: one early January, one mid January."""
    state.get_product(1).target_stock = 20
    audits.complete(full_counts(state, {1: AuditCount(product_id=1, location=17)}), admin, day="2025-01-02")
    audits.complete(full_counts(state, {1: AuditCount(product_id=1, location=12)}), admin, day="2025-01-16")
    return audits


def test_list_audits_newest_first(audit_log):
    assert [a.date for a in audit_log.list_audits()] == ["2025-01-16", "2025-01-02"]


def test_list_audits_period(audit_log):
    result = audit_log.list_audits(period="7days", reference=date(2025, 1, 20))
    assert [a.date for a in result] == ["2025-01-16"]


def test_list_audits_search(audit_log):
    assert len(audit_log.list_audits(search="2025-01-02")) == 1
    assert len(audit_log.list_audits(search="lemon")) == 2
    assert audit_log.list_audits(search="nobody") == []


def test_list_audits_unknown_period(audit_log):
    with pytest.raises(ValidationError):
        audit_log.list_audits(period="1year")


def test_audit_summary(audit_log):
    summary = audit_log.summary(reference=date(2025, 1, 20))

    # 20 -> 17 and 17 -> 12
    assert summary.audit_count == 2
    assert summary.total_differences == 8
    assert summary.average_total_difference == 4.0
    assert summary.recent_audits == 1
    assert summary.last_audit_date == "2025-01-16"


def test_get_audit(audit_log):
    audit = audit_log.list_audits()[0]
    assert audit_log.get_audit(audit.id) == audit

    with pytest.raises(NotFoundError):
        audit_log.get_audit("audit_0")
