"""
Application State

Owns every collection. Services mutate it under `lock` and finish each
command with `commit(*keys)`, which persists the touched collections and
then notifies subscribers.
"""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from cookiecogs.config import catalog as seed
from cookiecogs.config.constants import DEFAULT_BATCH_YIELD, DEFAULT_WARN_LEVEL
from cookiecogs.models import (
    CostSettings,
    Ingredient,
    InventoryAudit,
    Product,
    ProductionPlan,
    Recipe,
    Todo,
    User,
    WebsiteSettings,
)
from cookiecogs.models.common import iso_day
from cookiecogs.services.errors import NotFoundError, ValidationError
from cookiecogs.storage import SCHEMA_VERSION, VERSION_KEY, MemoryStore, migrate

logger = logging.getLogger(__name__)

Subscriber = Callable[[Tuple[str, ...]], None]

# Store keys
COOKIES = "cookies"
SETTINGS = "settings"
WEBSITE_SETTINGS = "websiteSettings"
INGREDIENTS = "ingredients"
AUDITS = "inventoryAudits"
WARN_LEVELS = "warnLevels"
RECIPES = "recipes"
TODOS = "cookieToDos"
PLANS = "cookieProdPlans"
USERS = "users"

ALL_KEYS = (
    COOKIES, SETTINGS, WEBSITE_SETTINGS, INGREDIENTS, AUDITS,
    WARN_LEVELS, RECIPES, TODOS, PLANS, USERS,
)


def _dump_list(items) -> List[dict]:
    return [item.model_dump(mode="json") for item in items]


class AppState:
    """
    Single owner of all domain collections.

    Args:
        store: JsonStore or MemoryStore. Defaults to an empty MemoryStore.
    """

    def __init__(self, store=None):
        self.store = store if store is not None else MemoryStore()
        self.lock = threading.RLock()
        self.initialized = False

        self.products: List[Product] = []
        self.ingredients: List[Ingredient] = []
        self.recipes: Dict[int, Recipe] = {}
        self.audits: List[InventoryAudit] = []
        self.warn_levels: Dict[str, int] = {}
        self.settings = CostSettings()
        self.website_settings = WebsiteSettings()
        self.todos: List[Todo] = []
        self.plans: List[ProductionPlan] = []
        self.users: List[User] = []

        self._subscribers: List[Subscriber] = []

    # =========================================================================
    # Observers
    # =========================================================================

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for commits. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, keys: Tuple[str, ...]):
        for callback in list(self._subscribers):
            try:
                callback(keys)
            except Exception:
                logger.exception(f"State subscriber {callback!r} failed")

    def commit(self, *keys: str):
        """Persist the given collections and notify subscribers in order."""
        keys = tuple(keys) or ALL_KEYS
        with self.lock:
            for key in keys:
                self.store.save(key, self.dump(key))
            self.store.save(VERSION_KEY, SCHEMA_VERSION)
        self._notify(keys)

    # =========================================================================
    # Serialization
    # =========================================================================

    def dump(self, key: str) -> Any:
        """Current-version JSON value of one collection."""
        if key == COOKIES:
            return _dump_list(self.products)
        if key == INGREDIENTS:
            return _dump_list(self.ingredients)
        if key == RECIPES:
            return _dump_list(self.recipes[pid] for pid in sorted(self.recipes))
        if key == AUDITS:
            return _dump_list(self.audits)
        if key == WARN_LEVELS:
            return dict(self.warn_levels)
        if key == SETTINGS:
            return self.settings.model_dump(mode="json")
        if key == WEBSITE_SETTINGS:
            return self.website_settings.model_dump(mode="json")
        if key == TODOS:
            return _dump_list(self.todos)
        if key == PLANS:
            return _dump_list(self.plans)
        if key == USERS:
            return _dump_list(self.users)
        raise KeyError(key)

    @staticmethod
    def _parse(doc: Dict[str, Any]) -> Dict[str, Any]:
        """Build model collections for every key present in `doc`."""
        parsed: Dict[str, Any] = {}
        if doc.get(COOKIES) is not None:
            parsed[COOKIES] = [Product.model_validate(c) for c in doc[COOKIES]]
        if doc.get(INGREDIENTS) is not None:
            parsed[INGREDIENTS] = [Ingredient.model_validate(i) for i in doc[INGREDIENTS]]
        if doc.get(RECIPES) is not None:
            recipes = [Recipe.model_validate(r) for r in doc[RECIPES]]
            parsed[RECIPES] = {r.product_id: r for r in recipes}
        if doc.get(AUDITS) is not None:
            parsed[AUDITS] = [InventoryAudit.model_validate(a) for a in doc[AUDITS]]
        if doc.get(WARN_LEVELS) is not None:
            parsed[WARN_LEVELS] = {str(k): int(v) for k, v in doc[WARN_LEVELS].items()}
        if doc.get(SETTINGS) is not None:
            parsed[SETTINGS] = CostSettings.model_validate(doc[SETTINGS])
        if doc.get(WEBSITE_SETTINGS) is not None:
            parsed[WEBSITE_SETTINGS] = WebsiteSettings.model_validate(doc[WEBSITE_SETTINGS])
        if doc.get(TODOS) is not None:
            parsed[TODOS] = [Todo.model_validate(t) for t in doc[TODOS]]
        if doc.get(PLANS) is not None:
            parsed[PLANS] = [ProductionPlan.model_validate(p) for p in doc[PLANS]]
        if doc.get(USERS) is not None:
            parsed[USERS] = [User.model_validate(u) for u in doc[USERS]]
        return parsed

    def _assign(self, parsed: Dict[str, Any]):
        attrs = {
            COOKIES: "products",
            INGREDIENTS: "ingredients",
            RECIPES: "recipes",
            AUDITS: "audits",
            WARN_LEVELS: "warn_levels",
            SETTINGS: "settings",
            WEBSITE_SETTINGS: "website_settings",
            TODOS: "todos",
            PLANS: "plans",
            USERS: "users",
        }
        for key, value in parsed.items():
            setattr(self, attrs[key], value)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _seed(self):
        self.products = seed.initial_products()
        self.ingredients = seed.initial_ingredients()
        self.recipes = seed.initial_recipes()
        self.audits = []
        self.warn_levels = seed.initial_warn_levels()
        self.settings = seed.initial_settings()
        self.website_settings = seed.initial_website_settings()
        self.todos = []
        self.plans = []
        self.users = seed.initial_users()

    def load(self) -> "AppState":
        """
        Read all collections from the store.

        Missing, empty or unreadable collections fall back to the seed
        catalog. Old layouts are migrated once here.
        """
        with self.lock:
            doc = {key: self.store.load(key) for key in ALL_KEYS}
            version = self.store.load(VERSION_KEY)
            if version is None:
                has_data = any(v is not None for v in doc.values())
                version = 0 if has_data else SCHEMA_VERSION

            migrated = version < SCHEMA_VERSION
            if migrated:
                doc = migrate(doc, version)

            self._seed()
            for key in ALL_KEYS:
                raw = doc.get(key)
                if raw is None or (key in (COOKIES, INGREDIENTS, RECIPES, USERS) and not raw):
                    continue
                try:
                    self._assign(self._parse({key: raw}))
                except (PydanticValidationError, TypeError, ValueError, AttributeError) as e:
                    logger.warning(f"Stored '{key}' is unreadable, using defaults: {e}")

            self._ensure_recipes()
            self.initialized = True
            logger.info(
                f"State loaded: {len(self.products)} products, "
                f"{len(self.ingredients)} ingredients, {len(self.audits)} audits"
            )

        if migrated:
            self.commit(*ALL_KEYS)
        return self

    def reset(self):
        """Wipe the store and start over from the seed catalog."""
        with self.lock:
            self.store.clear()
            self._seed()
            self.initialized = True
            logger.info("State reset to seed catalog")
        self.commit(*ALL_KEYS)

    def _ensure_recipes(self):
        for product in self.products:
            if product.id not in self.recipes:
                self.recipes[product.id] = Recipe(product_id=product.id, batch_yield=DEFAULT_BATCH_YIELD)

    # =========================================================================
    # Backup
    # =========================================================================

    def export_backup(self) -> Dict[str, Any]:
        """Every persisted collection plus an export timestamp."""
        with self.lock:
            doc = {key: self.dump(key) for key in ALL_KEYS}
        doc[VERSION_KEY] = SCHEMA_VERSION
        doc["exportDate"] = datetime.utcnow().isoformat() + "Z"
        return doc

    def import_backup(self, doc: Dict[str, Any]):
        """
        Replace collections from a backup document.

        The whole document is validated before anything is replaced.
        Collections absent from the document are kept.
        """
        if not isinstance(doc, dict):
            raise ValidationError("Backup must be a JSON object")

        version = doc.get(VERSION_KEY, 0)
        body = {key: doc[key] for key in ALL_KEYS if key in doc}
        if not body:
            raise ValidationError("Backup contains no known collections")
        if version < SCHEMA_VERSION:
            body = migrate(body, version)

        try:
            parsed = self._parse(body)
        except (PydanticValidationError, TypeError, ValueError, AttributeError) as e:
            raise ValidationError("Backup could not be read", details={"reason": str(e)})

        with self.lock:
            self._assign(parsed)
            self._ensure_recipes()
            self.initialized = True
            logger.info(f"Imported backup with {len(parsed)} collections")
        self.commit(*ALL_KEYS)

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_product(self, product_id: int) -> Product:
        for product in self.products:
            if product.id == product_id:
                return product
        raise NotFoundError("Product", product_id)

    def find_product(self, name: str) -> Optional[Product]:
        """Case-insensitive lookup by name."""
        needle = name.strip().lower()
        for product in self.products:
            if product.name.lower() == needle:
                return product
        return None

    def get_ingredient(self, ingredient_id: int) -> Ingredient:
        for ingredient in self.ingredients:
            if ingredient.id == ingredient_id:
                return ingredient
        raise NotFoundError("Ingredient", ingredient_id)

    def ingredients_by_id(self) -> Dict[int, Ingredient]:
        return {i.id: i for i in self.ingredients}

    def recipe_for(self, product_id: int) -> Recipe:
        """Stored recipe, or an empty default one (not stored)."""
        return self.recipes.get(product_id) or Recipe(product_id=product_id, batch_yield=DEFAULT_BATCH_YIELD)

    def warn_level(self, product_name: str, default: int = DEFAULT_WARN_LEVEL) -> int:
        return self.warn_levels.get(product_name) or default


def next_id(items: Iterable[Any]) -> int:
    """max(id) + 1, or 1 for an empty collection."""
    return max((item.id for item in items), default=0) + 1


def resolve_day(day=None) -> str:
    """YYYY-MM-DD for a history key or audit date; today when empty."""
    try:
        return iso_day(day)
    except ValueError:
        raise ValidationError(
            f"Invalid date '{day}', expected YYYY-MM-DD", details={"day": str(day)}
        ) from None
