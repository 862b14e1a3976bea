"""
Order colored covers by a sort criterion and direction.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from models import ColoredItem
from sort_keys import SortCriterion, has_sort_key, sort_key

logger = logging.getLogger(__name__)

DEFAULT_CRITERION = SortCriterion.STEP


class SortDirection(Enum):
    ASCENDING = 'asc'
    DESCENDING = 'desc'


@dataclass
class SortResult:
    """Output of sort_covers."""
    items: list  # ordered ColoredItems
    criterion: SortCriterion  # criterion actually used
    direction: SortDirection
    rejected: list = field(default_factory=list)  # items without a key


def select_sort(asc: Optional[str] = None,
                desc: Optional[str] = None) -> tuple[SortCriterion, SortDirection]:
    """
    Pick criterion and direction from the --asc / --desc options.

    Descending wins when both are given. Neither gives the default criterion
    in ascending order.
    """
    if desc:
        return SortCriterion.parse(desc), SortDirection.DESCENDING
    if asc:
        return SortCriterion.parse(asc), SortDirection.ASCENDING
    return DEFAULT_CRITERION, SortDirection.ASCENDING


def partition_sortable(items: Iterable[ColoredItem],
                       criterion: SortCriterion) -> tuple[list, list]:
    """Split items into those with a key for criterion and those without."""
    sortable, rejected = [], []
    for item in items:
        (sortable if has_sort_key(item, criterion) else rejected).append(item)
    return sortable, rejected


def sort_covers(items: Iterable[ColoredItem],
                criterion: Optional[SortCriterion] = None,
                direction: SortDirection = SortDirection.ASCENDING) -> SortResult:
    """
    Stable sort of covers.

    Items with equal keys keep their input order in both directions. For a
    year sort, items whose date is not a year are left out and returned in
    `rejected`; if no item has a year the step sort is used instead.
    """
    items = list(items)
    criterion = criterion or DEFAULT_CRITERION
    rejected = []

    if criterion is SortCriterion.YEAR:
        sortable, rejected = partition_sortable(items, criterion)
        for item in rejected:
            logger.warning("Excluding %s from year sort: date %r is not a year",
                           item.file, item.tags.date)
        if items and not sortable:
            logger.warning("No cover has a release year, falling back to %s sort",
                           DEFAULT_CRITERION.value)
            criterion = DEFAULT_CRITERION
            sortable, rejected = items, []
        items = sortable

    ordered = sorted(
        items,
        key=lambda item: sort_key(item, criterion),
        reverse=direction is SortDirection.DESCENDING,
    )

    return SortResult(items=ordered, criterion=criterion, direction=direction, rejected=rejected)
