import locale
import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Dict, List, Optional, Sequence

from pydantic import Field, TypeAdapter, ValidationError

# Filter -> sort -> limit pipeline over a snapshot of the catalog.

logger = logging.getLogger(__name__)

TRUTHY = ("true", "1", "yes", "on")

_NUMBER = TypeAdapter(Annotated[float, Field(allow_inf_nan=False)])
_INTEGER = TypeAdapter(int)


@dataclass
class QueryResult:
    items: List[Dict[str, Any]] = field(default_factory=list)
    count: int = 0
    total: int = 0


def set_collation(name: str = "") -> bool:
    """Use the collation of the named locale (the environment's when empty) for name sorting."""
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error as e:
        logger.warning("Cannot use locale %r for name sorting: %s", name, e)
        return False
    logger.debug("Name sorting uses collation %s", locale.setlocale(locale.LC_COLLATE))
    return True


def _name_key(product: Dict[str, Any]) -> str:
    folded = unicodedata.normalize("NFKD", str(product.get("name", ""))).casefold()
    try:
        return locale.strxfrm(folded)
    except (ValueError, OSError):
        return folded


SORTERS: Dict[str, Callable[[List[Dict[str, Any]]], List[Dict[str, Any]]]] = {
    "price_asc": lambda items: sorted(items, key=lambda p: p["price"]),
    "price_desc": lambda items: sorted(items, key=lambda p: p["price"], reverse=True),
    "rating": lambda items: sorted(items, key=lambda p: p.get("rating", 0), reverse=True),
    "name": lambda items: sorted(items, key=_name_key),
    "name_asc": lambda items: sorted(items, key=_name_key),
    "name_desc": lambda items: sorted(items, key=_name_key, reverse=True),
}


def _parse(adapter: TypeAdapter, value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return None
    try:
        return adapter.validate_python(value)
    except ValidationError:
        return None


def _is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


def query(snapshot: Sequence[Dict[str, Any]], params: Optional[Dict[str, Any]] = None) -> QueryResult:
    """
    Apply category, price bounds, stock, sort and limit, in that order.

    Unusable parameter values (non-numeric bounds, unknown sort keys,
    non-positive limits) are treated as absent. The snapshot is never
    modified; Python's sort is stable, so equal keys keep input order.
    """
    params = params or {}
    items = list(snapshot)

    category = params.get("category")
    if category:
        term = str(category).lower()
        items = [p for p in items if term in str(p.get("category", "")).lower()]

    min_price = _parse(_NUMBER, params.get("minPrice"))
    if min_price is not None:
        items = [p for p in items if p["price"] >= min_price]

    max_price = _parse(_NUMBER, params.get("maxPrice"))
    if max_price is not None:
        items = [p for p in items if p["price"] <= max_price]

    if params.get("inStock") is not None and _is_truthy(params["inStock"]):
        items = [p for p in items if p.get("stock", 0) > 0]

    sorter = SORTERS.get(params.get("sort") or "")
    if sorter is not None:
        items = sorter(items)

    limit = _parse(_INTEGER, params.get("limit"))
    if limit is not None and limit > 0:
        items = items[:limit]

    return QueryResult(items=items, count=len(items), total=len(snapshot))


def categories(snapshot: Sequence[Dict[str, Any]]) -> List[str]:
    seen: List[str] = []
    for p in snapshot:
        cat = p.get("category")
        if cat and cat not in seen:
            seen.append(cat)
    return seen
