"""Domain exceptions raised by the service layer."""

from typing import Any, Dict, List, Optional


class CookieCogsError(Exception):
    """Base class for domain errors."""

    code = "COOKIECOGS_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(CookieCogsError):
    """A referenced record does not exist."""

    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            f"{resource} not found: {identifier}",
            details={"resource": resource, "identifier": str(identifier)},
        )


class ValidationError(CookieCogsError):
    """Input rejected before any state change."""

    code = "VALIDATION_ERROR"


class InsufficientStockError(CookieCogsError):
    """Production would consume more of an ingredient than is on hand."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, shortfalls: List[Any]):
        self.shortfalls = shortfalls
        names = ", ".join(s.name for s in shortfalls)
        super().__init__(
            f"Insufficient ingredient stock: {names}",
            details={
                "shortfalls": [
                    {
                        "ingredient_id": s.ingredient_id,
                        "name": s.name,
                        "unit": s.unit,
                        "required": round(s.required, 3),
                        "available": round(s.available, 3),
                    }
                    for s in shortfalls
                ]
            },
        )
