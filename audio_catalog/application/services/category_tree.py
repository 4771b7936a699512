"""Category tree building, paths, UI options and in-memory queries.

All functions are pure over a supplied list of CategoryResult.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import replace

from audio_catalog.application.dtos.category import (
    CategoryFilter,
    CategoryOption,
    CategoryPath,
    CategoryResult,
    CategoryStats,
    CategoryTreeNode,
)
from audio_catalog.domain.enums import CategoryLevel


def _by_sort_order(categories: Iterable[CategoryResult]) -> list[CategoryResult]:
    # sorted() is stable: equal sort_order keeps input order
    return sorted(categories, key=lambda c: c.sort_order)


def build_tree(
    categories: Sequence[CategoryResult], include_inactive: bool = False
) -> list[CategoryTreeNode]:
    """Group a flat category list into primaries with their subcategories.

    Children are grouped by parent_id in one pass. Inactive rows are dropped
    unless include_inactive; an inactive primary hides its subcategories.
    Subcategories whose parent is missing are not attached anywhere.
    """
    visible = [c for c in categories if include_inactive or c.is_active]
    children: defaultdict[str, list[CategoryResult]] = defaultdict(list)
    for c in visible:
        if c.parent_id is not None:
            children[c.parent_id].append(c)
    primaries = [c for c in visible if c.level == CategoryLevel.PRIMARY]
    return [
        CategoryTreeNode(category=p, children=_by_sort_order(children.get(p.id, [])))
        for p in _by_sort_order(primaries)
    ]


def flatten_tree(tree: Sequence[CategoryTreeNode]) -> list[CategoryResult]:
    """Return each primary followed by its subcategories."""
    flat: list[CategoryResult] = []
    for node in tree:
        flat.append(node.category)
        flat.extend(node.children)
    return flat


def get_path(
    categories: Sequence[CategoryResult],
    category_id: str | None = None,
    subcategory_id: str | None = None,
) -> CategoryPath:
    """Resolve a selection into categories and a breadcrumb of names.

    With only subcategory_id, the subcategory's parent fills category.
    """
    by_id = {c.id: c for c in categories}
    category = by_id.get(category_id) if category_id else None
    subcategory = by_id.get(subcategory_id) if subcategory_id else None
    if category is None and subcategory is not None and subcategory.parent_id:
        category = by_id.get(subcategory.parent_id)
    breadcrumb = [c.name for c in (category, subcategory) if c is not None]
    return CategoryPath(category=category, subcategory=subcategory, breadcrumb=breadcrumb)


def get_path_string(
    categories: Sequence[CategoryResult],
    category_id: str | None = None,
    subcategory_id: str | None = None,
    separator: str = " > ",
) -> str:
    return separator.join(get_path(categories, category_id, subcategory_id).breadcrumb)


def _option(category: CategoryResult, level: int | None = None) -> CategoryOption:
    return CategoryOption(
        label=category.name,
        value=category.id,
        key=category.id,
        title=category.description or category.name,
        level=level if level is not None else category.level,
        parent_id=category.parent_id,
        disabled=not category.is_active,
        color=category.color,
        icon=category.icon,
    )


def generate_options(
    categories: Sequence[CategoryResult],
    level: int | None = None,
    include_inactive: bool = False,
) -> list[CategoryOption]:
    """Flat option list, optionally restricted to one level, in sort order."""
    selected = [
        c
        for c in categories
        if (level is None or c.level == level) and (include_inactive or c.is_active)
    ]
    return [_option(c) for c in _by_sort_order(selected)]


def generate_hierarchical_options(
    tree: Sequence[CategoryTreeNode], include_inactive: bool = False
) -> list[CategoryOption]:
    """Nested option list: one option per primary with its subcategory options."""
    options: list[CategoryOption] = []
    for node in tree:
        if not (include_inactive or node.category.is_active):
            continue
        children = [
            _option(child, CategoryLevel.SECONDARY)
            for child in node.children
            if include_inactive or child.is_active
        ]
        primary = _option(node.category, CategoryLevel.PRIMARY)
        options.append(replace(primary, parent_id=None, children=children))
    return options


def get_subcategory_options(
    categories: Sequence[CategoryResult],
    parent_id: str,
    include_inactive: bool = False,
) -> list[CategoryOption]:
    """Options for the subcategories of one primary."""
    selected = [
        c
        for c in categories
        if c.parent_id == parent_id and (include_inactive or c.is_active)
    ]
    return [_option(c) for c in _by_sort_order(selected)]


def calculate_stats(categories: Sequence[CategoryResult]) -> CategoryStats:
    total = len(categories)
    active = sum(1 for c in categories if c.is_active)
    with_audio = sum(1 for c in categories if c.audio_count > 0)
    return CategoryStats(
        total_categories=total,
        level1_count=sum(1 for c in categories if c.level == CategoryLevel.PRIMARY),
        level2_count=sum(1 for c in categories if c.level == CategoryLevel.SECONDARY),
        active_count=active,
        inactive_count=total - active,
        categories_with_audio=with_audio,
        empty_categories_count=total - with_audio,
    )


def filter_categories(
    categories: Sequence[CategoryResult], criteria: CategoryFilter
) -> list[CategoryResult]:
    """Return the categories matching every constraint set on criteria."""

    def matches(c: CategoryResult) -> bool:
        if criteria.category_id and criteria.category_id not in (c.id, c.parent_id):
            return False
        if criteria.subcategory_id and c.id != criteria.subcategory_id:
            return False
        if criteria.level is not None and c.level != criteria.level:
            return False
        if criteria.is_active is not None and c.is_active != criteria.is_active:
            return False
        if criteria.has_audio is not None and (c.audio_count > 0) != criteria.has_audio:
            return False
        return True

    return [c for c in categories if matches(c)]


def search_categories(
    categories: Sequence[CategoryResult],
    term: str,
    fields: Sequence[str] = ("name", "description"),
) -> list[CategoryResult]:
    """Case-insensitive substring search over string fields. Blank term returns all."""
    needle = term.strip().lower()
    if not needle:
        return list(categories)
    return [
        c
        for c in categories
        if any(
            isinstance(value := getattr(c, f, None), str) and needle in value.lower()
            for f in fields
        )
    ]
