"""
Import Service - column-mapped CSV sales import

Rows are normalised to (date, product name, channel, amount), summed per
(date, product) and channel, then written over the matching daily
records. Bad rows and unknown products are skipped and counted.
"""

import io
import logging
import re
from typing import Dict, List, Optional, Tuple

import pandas as pd

from cookiecogs.models import (
    ColumnMapping,
    ImportResult,
    ImportRow,
    MappingResult,
    SalesChannel,
)
from cookiecogs.services.errors import ValidationError
from cookiecogs.services.state import COOKIES, AppState

logger = logging.getLogger(__name__)

# Channel keyword -> channel. Anything else counts as LOCATION.
CHANNEL_SYNONYMS = {
    "location": SalesChannel.LOCATION,
    "vor ort": SalesChannel.LOCATION,
    "laden": SalesChannel.LOCATION,
    "shop": SalesChannel.LOCATION,
    "ubereats": SalesChannel.UBEREATS,
    "uber eats": SalesChannel.UBEREATS,
    "uber": SalesChannel.UBEREATS,
    "wolt": SalesChannel.WOLT,
    "lieferando": SalesChannel.LIEFERANDO,
    "website": SalesChannel.WEBSITE,
    "online": SalesChannel.WEBSITE,
    "web": SalesChannel.WEBSITE,
    "mitarbeiter": SalesChannel.STAFF,
    "staff": SalesChannel.STAFF,
    "employee": SalesChannel.STAFF,
}

LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

TEMPLATE_CSV = (
    "Datum,Cookie,Plattform,Anzahl\n"
    "2025-01-16,Chocolate Chip,location,15\n"
    "2025-01-16,Chocolate Chip,ubereats,8\n"
    "2025-01-16,Oatmeal Raisin,wolt,5\n"
    "2025-01-16,Double Chocolate,website,12\n"
)


def resolve_channel(keyword: str) -> SalesChannel:
    return CHANNEL_SYNONYMS.get(keyword.strip().lower(), SalesChannel.LOCATION)


def parse_date(value: str) -> Optional[str]:
    """Normalise a date string to YYYY-MM-DD, or None if unparseable."""
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date().isoformat()


def parse_amount(value: str) -> Optional[int]:
    """Leading integer of a quantity ("12 Stk" is 12); None for non-numeric or negative values."""
    match = LEADING_INT.match(str(value))
    if match is None:
        return None
    number = int(match.group(1))
    if number < 0:
        return None
    return number


class ImportService:
    """Reads, maps and applies sales CSVs."""

    # Header patterns for mapping suggestions
    DATE_PATTERNS = [r"^dat", r"^tag", r"^day"]
    PRODUCT_PATTERNS = [r"^cookie", r"^produkt", r"^product", r"^sorte", r"^name", r"^item"]
    CHANNEL_PATTERNS = [r"^plattform", r"^platform", r"^kanal", r"^channel", r"^quelle", r"^source"]
    QUANTITY_PATTERNS = [r"^anzahl", r"^menge", r"^amount", r"^qty", r"^quantity", r"^count", r"^verkauft"]

    def __init__(self, state: AppState):
        self.state = state

    def read_csv(self, text: str) -> pd.DataFrame:
        """
        Parse CSV text into a string DataFrame.

        Raises:
            ValidationError: if the text has no header and data row
        """
        try:
            df = pd.read_csv(
                io.StringIO(text.strip()),
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise ValidationError(f"CSV could not be parsed: {e}")

        df.columns = [str(c).strip().strip('"') for c in df.columns]
        if df.empty:
            raise ValidationError("CSV needs a header row and at least one data row")
        return df

    def suggest_mapping(self, headers: List[str]) -> ColumnMapping:
        """Guess which header feeds which field."""
        headers_lower = {h: h.lower().strip() for h in headers}

        def find_match(patterns: List[str]) -> str:
            for header, lower in headers_lower.items():
                for pattern in patterns:
                    if re.search(pattern, lower):
                        return header
            return ""

        return ColumnMapping(
            date=find_match(self.DATE_PATTERNS),
            product=find_match(self.PRODUCT_PATTERNS),
            channel=find_match(self.CHANNEL_PATTERNS),
            quantity=find_match(self.QUANTITY_PATTERNS),
        )

    def map_rows(self, df: pd.DataFrame, mapping: ColumnMapping) -> MappingResult:
        """
        Normalise rows through a column mapping.

        Rows with a missing value, an unparseable date or an invalid
        quantity are skipped; their 1-based file line numbers are returned.
        """
        if not mapping.is_complete:
            raise ValidationError("All four columns (date, product, channel, quantity) must be mapped")

        missing = [c for c in (mapping.date, mapping.product, mapping.channel, mapping.quantity) if c not in df.columns]
        if missing:
            raise ValidationError("Mapped columns not in CSV", details={"columns": missing})

        result = MappingResult()
        for idx, record in enumerate(df.to_dict(orient="records")):
            line_number = idx + 2

            date_str = str(record[mapping.date]).strip()
            name = str(record[mapping.product]).strip()
            keyword = str(record[mapping.channel]).strip()
            amount_str = str(record[mapping.quantity]).strip()

            if not (date_str and name and keyword and amount_str):
                result.invalid_rows.append(line_number)
                continue

            day = parse_date(date_str)
            amount = parse_amount(amount_str)
            if day is None or amount is None:
                result.invalid_rows.append(line_number)
                continue

            result.rows.append(ImportRow(
                row_number=line_number,
                date=day,
                product_name=name,
                channel_keyword=keyword.lower(),
                channel=resolve_channel(keyword),
                amount=amount,
            ))

        return result

    def apply(self, mapped: MappingResult) -> ImportResult:
        """
        Merge mapped rows into the daily records.

        Amounts for the same (date, product) and channel are summed first;
        each summed channel value then overwrites the stored one.
        """
        grouped: Dict[Tuple[str, str], Dict[SalesChannel, int]] = {}
        display_names: Dict[str, str] = {}
        for row in mapped.rows:
            key = (row.date, row.product_name.lower())
            display_names.setdefault(row.product_name.lower(), row.product_name)
            channels = grouped.setdefault(key, {})
            channels[row.channel] = channels.get(row.channel, 0) + row.amount

        result = ImportResult(invalid_rows=len(mapped.invalid_rows))
        skipped_names = set()
        dates = set()

        with self.state.lock:
            for (day, name_lower), channels in sorted(grouped.items(), key=lambda kv: kv[0]):
                product = self.state.find_product(name_lower)
                if product is None:
                    result.skipped += 1
                    skipped_names.add(display_names[name_lower])
                    continue

                record = product.record_for(day)
                for channel, amount in channels.items():
                    record.set_channel(channel, amount)
                result.updated += 1
                dates.add(day)

            if result.updated:
                self.state.commit(COOKIES)

        result.skipped_products = sorted(skipped_names)
        result.dates = sorted(dates)
        result.message = f"{result.updated} entries updated"
        if result.skipped:
            result.message += f", {result.skipped} skipped (product not found)"
        if result.invalid_rows:
            result.message += f", {result.invalid_rows} invalid rows"

        logger.info(f"CSV import: {result.message}")
        return result

    def import_csv(self, text: str, mapping: Optional[ColumnMapping] = None) -> ImportResult:
        """Read, map (suggesting a mapping when none is given) and apply."""
        df = self.read_csv(text)
        mapping = mapping or self.suggest_mapping(list(df.columns))
        return self.apply(self.map_rows(df, mapping))

    @staticmethod
    def template_csv() -> str:
        return TEMPLATE_CSV
