import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection


@dataclass
class FoodQuery:
    filter: Dict[str, Any] = field(default_factory=dict)
    sort: Optional[List[Tuple[str, int]]] = None
    limit: int = 0

    def run(self, collection: Collection) -> list:
        cursor = collection.find(self.filter)
        if self.sort:
            cursor = cursor.sort(self.sort)
        if self.limit:
            cursor = cursor.limit(self.limit)
        return list(cursor)


LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_limit(value: Optional[str]) -> int:
    """Read the leading integer ("3abc" is 3, "2.5" is 2); 0 means no cap."""
    if not value:
        return 0
    match = LEADING_INT.match(value)
    if not match:
        return 0
    limit = int(match.group(1))
    return limit if limit > 0 else 0


def build_food_query(
    search: Optional[str] = None,
    email: Optional[str] = None,
    sort_by_date: Optional[str] = None,
    sort_by_quantity: Optional[str] = None,
    limit: Optional[str] = None,
) -> FoodQuery:
    query = FoodQuery(limit=parse_limit(limit))

    # search and email never combine; a search term wins
    if search:
        query.filter = {"FoodName": {"$regex": re.escape(search), "$options": "i"}}
    elif email:
        query.filter = {"Donator.Email": email}

    if sort_by_date == "acc":
        query.sort = [("ExpiredDateTime", ASCENDING)]
    elif sort_by_date == "dec":
        query.sort = [("ExpiredDateTime", DESCENDING)]
    # any non-empty value counts, and it overrides the date order
    if sort_by_quantity:
        query.sort = [("FoodQuantity", DESCENDING)]

    return query
