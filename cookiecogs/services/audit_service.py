"""
Audit Service - SOLL/IST stock reconciliation

SOLL is the expected stock: the baseline set by the previous audit, or
the running balance of the product's history before its first audit.
IST is the counted stock summed over the three storage locations.
"""

import logging
import time
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from cookiecogs.config.constants import DEFAULT_WARN_LEVEL, MINOR_DEVIATION
from cookiecogs.models import (
    AuditCount,
    AuditLine,
    AuditLogSummary,
    AuditPreview,
    AuditPreviewLine,
    AuditStatus,
    Deviation,
    InventoryAudit,
    Product,
    User,
)
from cookiecogs.services.errors import NotFoundError, ValidationError
from cookiecogs.services.state import AUDITS, COOKIES, AppState, resolve_day

logger = logging.getLogger(__name__)

AUDIT_PERIODS = {"all": None, "7days": 7, "30days": 30, "90days": 90}
RECENT_AUDIT_DAYS = 7


def expected_stock(product: Product) -> int:
    """SOLL for one product."""
    if product.target_stock is not None:
        return product.target_stock
    return sum(r.prepared - r.sold - r.trash for r in product.history.values())


def classify_deviation(difference: Optional[int]) -> Deviation:
    if difference is None:
        return Deviation.NOT_ASSESSED
    if difference == 0:
        return Deviation.EXACT
    if abs(difference) <= MINOR_DEVIATION:
        return Deviation.MINOR
    return Deviation.MAJOR


def preview_audit(
    products: List[Product],
    counts: Iterable[AuditCount],
    warn_levels: Dict[str, int],
) -> AuditPreview:
    """
    Reconcile counts against SOLL without changing anything.

    Products without any count get difference None and are left out of
    the total.
    """
    by_product = {c.product_id: c for c in counts}
    lines = []

    for product in products:
        count = by_product.get(product.id) or AuditCount(product_id=product.id)
        soll = expected_stock(product)
        ist = count.ist_total
        difference = ist - soll if count.is_counted else None
        threshold = warn_levels.get(product.name, DEFAULT_WARN_LEVEL)

        lines.append(AuditPreviewLine(
            product_id=product.id,
            product_name=product.name,
            soll=soll,
            ist_final=ist,
            difference=difference,
            deviation=classify_deviation(difference),
            low_stock=ist != 0 and ist < threshold,
            counted=count.is_counted,
        ))

    return AuditPreview(
        lines=lines,
        total_difference=sum(abs(line.difference) for line in lines if line.difference is not None),
        counted_products=sum(1 for line in lines if line.counted),
        total_products=len(lines),
        low_stock_count=sum(1 for line in lines if line.low_stock),
    )


class AuditService:
    """Runs audits and queries the audit log."""

    def __init__(self, state: AppState):
        self.state = state

    def _check_counts(self, counts: List[AuditCount]):
        known = {p.id for p in self.state.products}
        unknown = sorted({c.product_id for c in counts} - known)
        if unknown:
            raise ValidationError("Counts reference unknown products", details={"product_ids": unknown})

    def preview(self, counts: List[AuditCount]) -> AuditPreview:
        self._check_counts(counts)
        return preview_audit(self.state.products, counts, self.state.warn_levels)

    def _new_audit_id(self) -> str:
        audit_id = f"audit_{int(time.time() * 1000)}"
        existing = {a.id for a in self.state.audits}
        suffix = 1
        candidate = audit_id
        while candidate in existing:
            candidate = f"{audit_id}_{suffix}"
            suffix += 1
        return candidate

    def complete(
        self,
        counts: List[AuditCount],
        user: User,
        day: Optional[str] = None,
    ) -> Optional[InventoryAudit]:
        """
        Complete an audit.

        Returns None without touching state unless every product has at
        least one count. Otherwise every product's SOLL baseline becomes
        its IST, stock becomes IST minus prepared, the day's inventur is
        recorded and one audit is appended to the log.
        """
        self._check_counts(counts)
        day = resolve_day(day)

        with self.state.lock:
            by_product = {c.product_id: c for c in counts}
            preview = preview_audit(self.state.products, counts, self.state.warn_levels)
            if not preview.is_complete:
                logger.info(
                    f"Audit not completed: {preview.counted_products}/{preview.total_products} counted"
                )
                return None

            lines = []
            for product, line in zip(self.state.products, preview.lines):
                count = by_product[product.id]
                ist = line.ist_final

                product.target_stock = ist
                product.stock = ist - product.prepared
                product.record_for(day).inventur = ist

                lines.append(AuditLine(
                    product_id=product.id,
                    product_name=product.name,
                    soll=line.soll,
                    ist_lager_verpackt=count.lager_verpackt or 0,
                    ist_lager_versand=count.lager_versand or 0,
                    ist_location=count.location or 0,
                    ist_final=ist,
                    difference=line.difference,
                    comment=count.comment,
                ))

            audit = InventoryAudit(
                id=self._new_audit_id(),
                date=day,
                user=user.email,
                user_name=user.name,
                lines=lines,
                total_difference=preview.total_difference,
                status=AuditStatus.COMPLETED,
            )
            self.state.audits.append(audit)

            logger.info(
                f"Audit {audit.id} completed by {user.email}: "
                f"{len(lines)} products, total difference {audit.total_difference}"
            )
            self.state.commit(COOKIES, AUDITS)
            return audit

    # =========================================================================
    # Audit log
    # =========================================================================

    def list_audits(
        self,
        search: Optional[str] = None,
        period: str = "all",
        reference: Optional[date] = None,
    ) -> List[InventoryAudit]:
        """
        Audits newest first.

        Args:
            search: Matches user name, date or any product name
            period: "all", "7days", "30days" or "90days"
        """
        if period not in AUDIT_PERIODS:
            raise ValidationError(f"Unknown period: {period}")

        days = AUDIT_PERIODS[period]
        reference = reference or date.today()
        result = []

        for audit in self.state.audits:
            if search:
                needle = search.lower()
                matches = (
                    needle in audit.user_name.lower()
                    or needle in audit.date
                    or any(needle in line.product_name.lower() for line in audit.lines)
                )
                if not matches:
                    continue

            if days is not None:
                if (reference - date.fromisoformat(audit.date)).days > days:
                    continue

            result.append(audit)

        result.sort(key=lambda a: (a.date, a.created_at), reverse=True)
        return result

    def get_audit(self, audit_id: str) -> InventoryAudit:
        for audit in self.state.audits:
            if audit.id == audit_id:
                return audit
        raise NotFoundError("Audit", audit_id)

    def summary(
        self,
        search: Optional[str] = None,
        period: str = "all",
        reference: Optional[date] = None,
    ) -> AuditLogSummary:
        reference = reference or date.today()
        audits = self.list_audits(search=search, period=period, reference=reference)
        if not audits:
            return AuditLogSummary()

        total = sum(a.total_difference for a in audits)
        recent_cutoff = reference - timedelta(days=RECENT_AUDIT_DAYS)
        return AuditLogSummary(
            audit_count=len(audits),
            total_differences=total,
            average_total_difference=round(total / len(audits), 2),
            recent_audits=sum(1 for a in audits if date.fromisoformat(a.date) >= recent_cutoff),
            last_audit_date=audits[0].date,
        )
