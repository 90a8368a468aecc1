"""
Export Service - CSV reports

Each export builds a DataFrame with fixed German column headers and writes
it with pandas. Text fields are quoted, currency uses two decimals.
"""

import csv
import io
from typing import Dict, List, Optional

import pandas as pd

from cookiecogs.models import (
    DateRange,
    Ingredient,
    InventoryAudit,
    Product,
    ProductionPlan,
    Recipe,
    ShoppingList,
)
from cookiecogs.models.common import today_iso

DAILY_COLUMNS = [
    "Tag", "Cookie", "Kategorie", "Verkauft", "Vorbereitet", "Benutzt", "Entsorgt",
    "Neu_Produziert", "Verkaufspreis", "Produktionskosten", "Umsatz",
]
SUMMARY_COLUMNS = [
    "Cookie_Name", "Kategorie", "Gesamt_Verkauft", "Aktueller_Lagerbestand", "Vorbereitet",
    "Verkaufspreis", "Produktionskosten", "Gesamtumsatz", "Gewinnmarge_Euro", "Gewinnmarge_Prozent",
]
AUDIT_COLUMNS = [
    "Datum", "Bearbeiter", "Bearbeiter_Name", "Cookie", "Soll", "Ist_Lager_Verpackt",
    "Ist_Lager_Versand", "Ist_Location", "Ist_Gesamt", "Differenz", "Kommentar",
    "Gesamtabweichung", "Status", "Erstellt_Am",
]
PLAN_COLUMNS = ["Sorte", "Menge", "Deadline", "Notiz", "Status", "Erstellt_Am"]
SHOPPING_COLUMNS = [
    "Zutat", "Aktueller_Bestand", "Mindestbestand", "Empfohlene_Bestellmenge",
    "Kosten_pro_Einheit", "Lieferant", "Geschaetzte_Kosten",
]


def _to_csv(df: pd.DataFrame, float_format: str = "%.2f") -> str:
    output = io.StringIO()
    df.to_csv(
        output,
        index=False,
        quoting=csv.QUOTE_NONNUMERIC,
        float_format=float_format,
        lineterminator="\n",
    )
    return output.getvalue()


def export_filename(prefix: str, extension: str = "csv") -> str:
    return f"{prefix}_{today_iso()}.{extension}"


def daily_report(products: List[Product], period: Optional[DateRange] = None) -> str:
    """One row per product per recorded day."""
    period = period or DateRange()
    days = sorted({d for p in products for d in p.history if period.contains(d)})

    rows = []
    for day in days:
        for product in products:
            record = product.peek_record(day)
            rows.append({
                "Tag": day,
                "Cookie": product.name,
                "Kategorie": product.category,
                "Verkauft": record.sold,
                "Vorbereitet": record.prepared,
                "Benutzt": record.used,
                "Entsorgt": record.trash,
                "Neu_Produziert": record.new,
                "Verkaufspreis": float(product.price),
                "Produktionskosten": float(product.production_price),
                "Umsatz": float(record.sold * product.price),
            })

    return _to_csv(pd.DataFrame(rows, columns=DAILY_COLUMNS))


def summary_report(products: List[Product]) -> str:
    """One row per product over its whole history."""
    rows = []
    for product in products:
        margin = product.price - product.production_price
        rows.append({
            "Cookie_Name": product.name,
            "Kategorie": product.category,
            "Gesamt_Verkauft": product.sold,
            "Aktueller_Lagerbestand": product.stock,
            "Vorbereitet": product.prepared,
            "Verkaufspreis": float(product.price),
            "Produktionskosten": float(product.production_price),
            "Gesamtumsatz": float(product.sold * product.price),
            "Gewinnmarge_Euro": float(margin),
            "Gewinnmarge_Prozent": float(margin / product.price * 100) if product.price > 0 else 0.0,
        })

    return _to_csv(pd.DataFrame(rows, columns=SUMMARY_COLUMNS))


def audit_report(audits: List[InventoryAudit]) -> str:
    """One row per audit line."""
    rows = []
    for audit in audits:
        for line in audit.lines:
            rows.append({
                "Datum": audit.date,
                "Bearbeiter": audit.user,
                "Bearbeiter_Name": audit.user_name,
                "Cookie": line.product_name,
                "Soll": line.soll,
                "Ist_Lager_Verpackt": line.ist_lager_verpackt,
                "Ist_Lager_Versand": line.ist_lager_versand,
                "Ist_Location": line.ist_location,
                "Ist_Gesamt": line.ist_final,
                "Differenz": line.difference,
                "Kommentar": line.comment,
                "Gesamtabweichung": audit.total_difference,
                "Status": audit.status.value,
                "Erstellt_Am": audit.created_at.isoformat(),
            })

    df = pd.DataFrame(rows, columns=AUDIT_COLUMNS)
    df["Differenz"] = df["Differenz"].astype("Int64")
    return _to_csv(df)


def recipe_report(
    products: List[Product],
    recipes: Dict[int, Recipe],
    ingredients: List[Ingredient],
) -> str:
    """One row per recipe with a column per ingredient."""
    ingredient_columns = [f"{i.name}_{i.unit}" for i in ingredients]
    columns = ["Cookie_Name", "Kategorie", "Ausbeute_Stueck", "Notizen"]
    columns += ingredient_columns + ["Gesamtkosten_Euro", "Kosten_pro_Cookie_Euro"]

    rows = []
    for product in products:
        recipe = recipes.get(product.id)
        if recipe is None:
            continue

        row = {
            "Cookie_Name": product.name,
            "Kategorie": product.category,
            "Ausbeute_Stueck": recipe.batch_yield,
            "Notizen": recipe.notes,
        }
        total = 0.0
        for ingredient, column in zip(ingredients, ingredient_columns):
            amount = float(recipe.ingredients.get(ingredient.id, 0.0))
            row[column] = amount
            total += amount * ingredient.cost_per_unit
        row["Gesamtkosten_Euro"] = total
        row["Kosten_pro_Cookie_Euro"] = total / recipe.batch_yield if recipe.batch_yield > 0 else 0.0
        rows.append(row)

    return _to_csv(pd.DataFrame(rows, columns=columns), float_format="%.3f")


def plan_report(plans: List[ProductionPlan]) -> str:
    rows = [
        {
            "Sorte": p.product,
            "Menge": p.quantity,
            "Deadline": p.deadline.isoformat(),
            "Notiz": p.note,
            "Status": "Erledigt" if p.done else "Offen",
            "Erstellt_Am": p.created_at.strftime("%d.%m.%Y"),
        }
        for p in plans
    ]
    return _to_csv(pd.DataFrame(rows, columns=PLAN_COLUMNS))


def shopping_report(shopping: ShoppingList) -> str:
    rows = [
        {
            "Zutat": e.name,
            "Aktueller_Bestand": float(e.amount),
            "Mindestbestand": float(e.min_stock),
            "Empfohlene_Bestellmenge": float(e.recommended_order),
            "Kosten_pro_Einheit": float(e.cost_per_unit),
            "Lieferant": e.supplier,
            "Geschaetzte_Kosten": float(e.estimated_cost),
        }
        for e in shopping.entries
    ]
    return _to_csv(pd.DataFrame(rows, columns=SHOPPING_COLUMNS))
