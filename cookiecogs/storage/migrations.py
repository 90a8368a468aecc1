"""
Load-time schema migrations.

A document is a dict of store key -> raw collection. Version 0 is the
dashboard's original browser layout (camelCase fields, aggregate-only
`sold` on day records, German field names on audits and plans). Each step
upgrades the whole document by one version; everything after
`migrate()` sees current-version records only.
"""

import logging
import re
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
VERSION_KEY = "schemaVersion"

CHANNEL_FIELDS = (
    "verkauft_location",
    "verkauft_ubereats",
    "verkauft_wolt",
    "verkauft_lieferando",
    "verkauft_website",
)

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def camel_to_snake(name: str) -> str:
    return _CAMEL.sub("_", name).lower()


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _optional_int(value: Any):
    if value is None or value == "":
        return None
    return _int(value)


# =============================================================================
# Version 0 -> 1
# =============================================================================

def _v0_day(raw: dict) -> dict:
    record = {field: _int(raw.get(field)) for field in CHANNEL_FIELDS}
    record["mitarbeiter_verbrauch"] = _int(raw.get("mitarbeiter_verbrauch"))
    for field in ("prepared", "used", "trash", "new", "produziert"):
        record[field] = _int(raw.get(field))
    record["inventur"] = _optional_int(raw.get("inventur"))

    # Aggregate-only records keep whatever the channels do not explain
    channel_total = sum(record[f] for f in CHANNEL_FIELDS)
    record["legacy_sold"] = max(0, _int(raw.get("sold")) - channel_total)
    return record


def _v0_product(raw: dict) -> dict:
    return {
        "id": _int(raw.get("id")),
        "name": raw.get("name", ""),
        "category": raw.get("category") or "Classic",
        "price": _float(raw.get("price"), 2.50),
        "production_price": _float(raw.get("productionPrice"), 0.70),
        "stock": _int(raw.get("stock")),
        "prepared": _int(raw.get("prepared")),
        "target_stock": _optional_int(raw.get("sollBestand")),
        "history": {day: _v0_day(rec or {}) for day, rec in (raw.get("history") or {}).items()},
    }


def _v0_ingredient(raw: dict) -> dict:
    return {
        "id": _int(raw.get("id")),
        "name": raw.get("name", ""),
        "amount": _float(raw.get("amount")),
        "unit": raw.get("unit", ""),
        "min_stock": _float(raw.get("minStock"), 1.0),
        "cost_per_unit": _float(raw.get("costPerUnit")),
        "supplier": raw.get("supplier") or "Unbekannt",
        "last_updated": raw.get("lastUpdated") or None,
    }


def _v0_recipe(raw: dict) -> dict:
    return {
        "product_id": _int(raw.get("cookieId")),
        "ingredients": {
            str(ing_id): _float(qty) for ing_id, qty in (raw.get("ingredients") or {}).items()
        },
        "batch_yield": _int(raw.get("yield"), 100),
        "notes": raw.get("notes") or "",
    }


def _v0_audit(raw: dict, product_ids: Dict[str, int]) -> dict:
    lines = []
    for item in raw.get("items") or []:
        name = item.get("cookie", "")
        ist_final = item.get("ist_final", item.get("ist"))
        difference = item.get("differenz")
        lines.append({
            "product_id": product_ids.get(name, 0),
            "product_name": name,
            "soll": _int(item.get("soll")),
            "ist_lager_verpackt": _int(item.get("ist_lager_verpackt")),
            "ist_lager_versand": _int(item.get("ist_lager_versand")),
            "ist_location": _int(item.get("ist_location")),
            "ist_final": _int(ist_final),
            "difference": None if difference is None else _int(difference),
            "comment": item.get("kommentar") or "",
        })

    return {
        "id": str(raw.get("id", "")),
        "date": raw.get("date", ""),
        "user": raw.get("user", ""),
        "user_name": raw.get("userName", ""),
        "lines": lines,
        "total_difference": _int(raw.get("totalDifference")),
        "status": raw.get("status") or "completed",
        "created_at": raw.get("createdAt"),
    }


def _v0_todo(raw: dict) -> dict:
    return {
        "id": _int(raw.get("id")),
        "text": raw.get("text", ""),
        "due_date": raw.get("date"),
        "info": raw.get("info") or "",
        "done": bool(raw.get("done")),
        "created_at": raw.get("createdAt"),
    }


def _v0_plan(raw: dict) -> dict:
    return {
        "id": _int(raw.get("id")),
        "product": raw.get("cookie", ""),
        "quantity": _int(raw.get("menge"), 1),
        "deadline": raw.get("deadline"),
        "note": raw.get("note") or "",
        "done": bool(raw.get("done")),
        "created_at": raw.get("createdAt"),
    }


def _v0_user(raw: dict) -> dict:
    permissions = raw.get("permissions") or {}
    return {
        "id": _int(raw.get("id")),
        "email": raw.get("email", ""),
        "login_code": str(raw.get("password", "")),
        "role": raw.get("role") or "mitarbeiter",
        "name": raw.get("name", ""),
        "permissions": {camel_to_snake(k): bool(v) for k, v in permissions.items()},
        "created_at": raw.get("createdAt"),
        "last_login": raw.get("lastLogin"),
        "is_active": raw.get("isActive", True),
    }


def _snake_dict(raw: Any) -> Any:
    if not isinstance(raw, dict):
        return raw
    return {camel_to_snake(k): v for k, v in raw.items()}


def _drop_none(record: dict) -> dict:
    """Let model defaults fill fields the old layout never stored."""
    return {k: v for k, v in record.items() if v is not None}


def _list(doc: dict, key: str) -> list:
    value = doc.get(key)
    return value if isinstance(value, list) else []


def migrate_v0_to_v1(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(doc)

    if "cookies" in doc:
        out["cookies"] = [_v0_product(c) for c in _list(doc, "cookies")]
    if "ingredients" in doc:
        out["ingredients"] = [_drop_none(_v0_ingredient(i)) for i in _list(doc, "ingredients")]
    if "recipes" in doc:
        out["recipes"] = [_v0_recipe(r) for r in _list(doc, "recipes")]
    if "inventoryAudits" in doc:
        product_ids = {c.get("name", ""): _int(c.get("id")) for c in _list(doc, "cookies")}
        out["inventoryAudits"] = [
            _drop_none(_v0_audit(a, product_ids)) for a in _list(doc, "inventoryAudits")
        ]
    if "cookieToDos" in doc:
        out["cookieToDos"] = [_drop_none(_v0_todo(t)) for t in _list(doc, "cookieToDos")]
    if "cookieProdPlans" in doc:
        out["cookieProdPlans"] = [_drop_none(_v0_plan(p)) for p in _list(doc, "cookieProdPlans")]
    if "users" in doc:
        out["users"] = [_drop_none(_v0_user(u)) for u in _list(doc, "users")]
    if "settings" in doc:
        out["settings"] = _snake_dict(doc["settings"])
    if "websiteSettings" in doc:
        out["websiteSettings"] = _snake_dict(doc["websiteSettings"])

    return out


MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    0: migrate_v0_to_v1,
}


def migrate(doc: Dict[str, Any], from_version: int) -> Dict[str, Any]:
    """Upgrade a document from `from_version` to SCHEMA_VERSION."""
    version = from_version
    while version < SCHEMA_VERSION:
        step = MIGRATIONS[version]
        logger.info(f"Migrating stored data from schema v{version} to v{version + 1}")
        doc = step(doc)
        version += 1

    doc[VERSION_KEY] = SCHEMA_VERSION
    return doc
