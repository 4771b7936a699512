"""Category hierarchy validation.

Pure functions over a supplied category list: no I/O and no mutation. Every
check runs and all violations are collected into a CategoryValidationResult;
callers decide whether to raise (see CategoryService).
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence

from audio_catalog.application.dtos.category import (
    CategoryCreate,
    CategoryError,
    CategoryResult,
    CategorySelection,
    CategoryUpdate,
    CategoryValidationResult,
)
from audio_catalog.core.constants import (
    COLOR_PATTERN,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_SUBCATEGORIES_PER_PARENT,
    SUBCATEGORY_WARNING_RATIO,
)
from audio_catalog.domain.enums import BatchOperation, CategoryErrorCode, CategoryLevel

Code = CategoryErrorCode


def _index(categories: Iterable[CategoryResult]) -> dict[str, CategoryResult]:
    return {c.id: c for c in categories}


def _supplied(data: CategoryCreate | CategoryUpdate, name: str) -> bool:
    if isinstance(data, CategoryUpdate):
        return data.has(name)
    return True


def validate_category(
    data: CategoryCreate | CategoryUpdate,
    existing: Sequence[CategoryResult],
    current_category_id: str | None = None,
    max_subcategories: int = MAX_SUBCATEGORIES_PER_PARENT,
) -> CategoryValidationResult:
    """Validate a create (current_category_id None) or update payload.

    Checks, all collected: name present and within length; description
    length; sibling-name uniqueness under the effective parent (own id
    excluded); parent exists; parent is primary; not its own parent; a
    category with children is not moved under a parent; color is #RRGGBB.
    Sibling count near or at max_subcategories only adds warnings.
    """
    errors: list[CategoryError] = []
    warnings: list[str] = []
    by_id = _index(existing)

    current: CategoryResult | None = None
    if current_category_id is not None:
        current = by_id.get(current_category_id)
        if current is None:
            errors.append(
                CategoryError(
                    Code.CATEGORY_NOT_FOUND,
                    f"Category to update does not exist: {current_category_id}",
                    details={"category_id": current_category_id},
                )
            )
            return CategoryValidationResult(errors, warnings)

    name_supplied = _supplied(data, "name")
    parent_supplied = _supplied(data, "parent_id")

    if name_supplied:
        name = data.name or ""
        if not name.strip():
            errors.append(
                CategoryError(Code.INVALID_HIERARCHY, "Category name is required", "name")
            )
        elif len(name) > MAX_NAME_LENGTH:
            errors.append(
                CategoryError(
                    Code.INVALID_HIERARCHY,
                    f"Category name must be at most {MAX_NAME_LENGTH} characters",
                    "name",
                )
            )

    if (
        _supplied(data, "description")
        and data.description is not None
        and len(data.description) > MAX_DESCRIPTION_LENGTH
    ):
        errors.append(
            CategoryError(
                Code.INVALID_HIERARCHY,
                f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
                "description",
            )
        )

    effective_name = data.name if name_supplied else (current.name if current else None)
    effective_parent = (
        data.parent_id if parent_supplied else (current.parent_id if current else None)
    )

    if effective_name and (name_supplied or parent_supplied):
        duplicate = next(
            (
                c
                for c in existing
                if c.name == effective_name
                and c.parent_id == effective_parent
                and c.id != current_category_id
            ),
            None,
        )
        if duplicate is not None:
            errors.append(
                CategoryError(
                    Code.DUPLICATE_NAME,
                    f"A category named {effective_name!r} already exists at this level",
                    "name",
                    {"existing_id": duplicate.id},
                )
            )

    if parent_supplied and effective_parent is not None:
        parent = by_id.get(effective_parent)
        if parent is None:
            errors.append(
                CategoryError(
                    Code.PARENT_NOT_FOUND,
                    f"Parent category does not exist: {effective_parent}",
                    "parent_id",
                )
            )
        elif parent.level != CategoryLevel.PRIMARY:
            errors.append(
                CategoryError(
                    Code.INVALID_LEVEL,
                    "Subcategories can only be created under a primary category",
                    "parent_id",
                    {"parent_level": parent.level},
                )
            )
        else:
            siblings = sum(
                1
                for c in existing
                if c.parent_id == effective_parent and c.id != current_category_id
            )
            if siblings >= max_subcategories:
                warnings.append(
                    f"Primary category {parent.name!r} already has {siblings} "
                    f"subcategories (limit {max_subcategories})"
                )
            elif siblings >= max_subcategories * SUBCATEGORY_WARNING_RATIO:
                warnings.append(
                    f"Primary category {parent.name!r} is approaching the "
                    f"subcategory limit ({siblings}/{max_subcategories})"
                )

        if current_category_id is not None and effective_parent == current_category_id:
            errors.append(
                CategoryError(
                    Code.CIRCULAR_REFERENCE,
                    "A category cannot be its own parent",
                    "parent_id",
                )
            )

        if current_category_id is not None and any(
            c.parent_id == current_category_id for c in existing
        ):
            errors.append(
                CategoryError(
                    Code.INVALID_HIERARCHY,
                    "A category with subcategories cannot be moved under another category",
                    "parent_id",
                )
            )

    if (
        _supplied(data, "color")
        and data.color is not None
        and not COLOR_PATTERN.match(data.color)
    ):
        errors.append(
            CategoryError(
                Code.INVALID_HIERARCHY,
                "Color must be a hex value like #FF0000",
                "color",
            )
        )

    return CategoryValidationResult(errors, warnings)


def _find_cycles(by_id: dict[str, CategoryResult]) -> list[list[str]]:
    """Return parent-chain cycles longer than one (self-parenting is reported separately)."""
    cycles: list[list[str]] = []
    seen_cycles: set[frozenset[str]] = set()
    done: set[str] = set()
    for start in by_id:
        path: list[str] = []
        on_path: set[str] = set()
        node: str | None = start
        while node is not None and node in by_id and node not in done:
            if node in on_path:
                cycle = path[path.index(node):]
                key = frozenset(cycle)
                if len(cycle) > 1 and key not in seen_cycles:
                    seen_cycles.add(key)
                    cycles.append(cycle)
                break
            path.append(node)
            on_path.add(node)
            parent = by_id[node].parent_id
            node = None if parent == node else parent
        done.update(path)
    return cycles


def validate_hierarchy_consistency(
    categories: Sequence[CategoryResult],
    max_subcategories: int = MAX_SUBCATEGORIES_PER_PARENT,
) -> CategoryValidationResult:
    """Check a whole category set against the hierarchy invariants.

    Flags malformed levels, level/parent disagreement, self-parenting,
    missing or non-primary parents, parent cycles and duplicate sibling
    names. Parents with more than max_subcategories children only warn.
    """
    errors: list[CategoryError] = []
    warnings: list[str] = []
    by_id = _index(categories)

    for c in categories:
        ref = {"category_id": c.id}
        if c.level not in CategoryLevel.values():
            errors.append(
                CategoryError(
                    Code.INVALID_LEVEL,
                    f"Category {c.name!r} has invalid level {c.level}",
                    details=ref,
                )
            )
        elif c.level == CategoryLevel.PRIMARY and c.parent_id is not None:
            errors.append(
                CategoryError(
                    Code.INVALID_HIERARCHY,
                    f"Primary category {c.name!r} must not have a parent",
                    details=ref,
                )
            )
        elif c.level == CategoryLevel.SECONDARY and c.parent_id is None:
            errors.append(
                CategoryError(
                    Code.INVALID_HIERARCHY,
                    f"Secondary category {c.name!r} must have a parent",
                    details=ref,
                )
            )

        if c.parent_id is None:
            continue
        if c.parent_id == c.id:
            errors.append(
                CategoryError(
                    Code.CIRCULAR_REFERENCE,
                    f"Category {c.name!r} is its own parent",
                    details=ref,
                )
            )
            continue
        parent = by_id.get(c.parent_id)
        if parent is None:
            errors.append(
                CategoryError(
                    Code.PARENT_NOT_FOUND,
                    f"Parent of category {c.name!r} does not exist",
                    details={**ref, "parent_id": c.parent_id},
                )
            )
        elif parent.level != CategoryLevel.PRIMARY:
            errors.append(
                CategoryError(
                    Code.INVALID_LEVEL,
                    f"Parent of category {c.name!r} must be a primary category",
                    details={**ref, "parent_id": c.parent_id},
                )
            )

    for cycle in _find_cycles(by_id):
        path = " -> ".join(by_id[i].name for i in cycle)
        errors.append(
            CategoryError(
                Code.CIRCULAR_REFERENCE,
                f"Circular parent reference: {path}",
                details={"category_ids": cycle},
            )
        )

    groups: defaultdict[tuple[str | None, str], list[str]] = defaultdict(list)
    for c in categories:
        groups[(c.parent_id, c.name)].append(c.id)
    for (parent_id, name), ids in groups.items():
        if len(ids) > 1:
            errors.append(
                CategoryError(
                    Code.DUPLICATE_NAME,
                    f"Duplicate category name at the same level: {name!r}",
                    details={"name": name, "category_ids": ids, "parent_id": parent_id},
                )
            )

    child_counts = Counter(
        c.parent_id for c in categories if c.parent_id is not None and c.parent_id in by_id
    )
    for parent_id, count in child_counts.items():
        if count > max_subcategories:
            warnings.append(
                f"Primary category {by_id[parent_id].name!r} has {count} subcategories, "
                f"above the recommended limit of {max_subcategories}"
            )

    return CategoryValidationResult(errors, warnings)


def validate_deletion(
    category_id: str, categories: Sequence[CategoryResult]
) -> CategoryValidationResult:
    """Reject deleting a category that has subcategories or referencing audio."""
    errors: list[CategoryError] = []
    category = _index(categories).get(category_id)
    if category is None:
        errors.append(
            CategoryError(
                Code.CATEGORY_NOT_FOUND,
                f"Category to delete does not exist: {category_id}",
                details={"category_id": category_id},
            )
        )
        return CategoryValidationResult(errors)

    children = sum(1 for c in categories if c.parent_id == category_id)
    if children:
        errors.append(
            CategoryError(
                Code.DELETE_RESTRICTED,
                f"Category {category.name!r} still has {children} subcategories",
                details={"category_id": category_id, "children_count": children},
            )
        )
    if category.audio_count > 0:
        errors.append(
            CategoryError(
                Code.DELETE_RESTRICTED,
                f"Category {category.name!r} is still used by {category.audio_count} audio records",
                details={"category_id": category_id, "audio_count": category.audio_count},
            )
        )
    return CategoryValidationResult(errors)


def validate_selection(
    selection: CategorySelection, categories: Sequence[CategoryResult]
) -> CategoryValidationResult:
    """Check that a selection references a primary and, optionally, one of its subcategories."""
    errors: list[CategoryError] = []
    by_id = _index(categories)

    if selection.subcategory_id and not selection.category_id:
        errors.append(
            CategoryError(
                Code.DATA_INCONSISTENCY,
                "A subcategory selection requires its primary category",
                "category_id",
            )
        )

    if selection.category_id:
        category = by_id.get(selection.category_id)
        if category is None:
            errors.append(
                CategoryError(
                    Code.CATEGORY_NOT_FOUND,
                    f"Primary category does not exist: {selection.category_id}",
                    "category_id",
                )
            )
        elif category.level != CategoryLevel.PRIMARY:
            errors.append(
                CategoryError(
                    Code.INVALID_LEVEL,
                    "Selected category must be a primary category",
                    "category_id",
                )
            )

    if selection.subcategory_id:
        subcategory = by_id.get(selection.subcategory_id)
        if subcategory is None:
            errors.append(
                CategoryError(
                    Code.CATEGORY_NOT_FOUND,
                    f"Subcategory does not exist: {selection.subcategory_id}",
                    "subcategory_id",
                )
            )
        else:
            if subcategory.level != CategoryLevel.SECONDARY:
                errors.append(
                    CategoryError(
                        Code.INVALID_LEVEL,
                        "Selected subcategory must be a secondary category",
                        "subcategory_id",
                    )
                )
            if selection.category_id and subcategory.parent_id != selection.category_id:
                errors.append(
                    CategoryError(
                        Code.DATA_INCONSISTENCY,
                        "Selected subcategory does not belong to the selected category",
                        "subcategory_id",
                    )
                )

    return CategoryValidationResult(errors)


def validate_batch_operation(
    category_ids: Sequence[str],
    operation: BatchOperation,
    categories: Sequence[CategoryResult],
    target_parent_id: str | None = None,
) -> CategoryValidationResult:
    """Validate a bulk activate / deactivate / delete / move request."""
    errors: list[CategoryError] = []
    if not category_ids:
        errors.append(
            CategoryError(Code.INVALID_HIERARCHY, "No categories selected for the operation")
        )
        return CategoryValidationResult(errors)

    by_id = _index(categories)
    for category_id in category_ids:
        if category_id not in by_id:
            errors.append(
                CategoryError(
                    Code.CATEGORY_NOT_FOUND,
                    f"Category does not exist: {category_id}",
                    details={"category_id": category_id},
                )
            )

    if operation == BatchOperation.DELETE:
        for category_id in category_ids:
            if category_id in by_id:
                errors.extend(validate_deletion(category_id, categories).errors)
    elif operation == BatchOperation.MOVE:
        if not target_parent_id:
            errors.append(
                CategoryError(
                    Code.INVALID_HIERARCHY,
                    "A move requires a target parent category",
                    "target_parent_id",
                )
            )
        else:
            target = by_id.get(target_parent_id)
            if target is None:
                errors.append(
                    CategoryError(
                        Code.PARENT_NOT_FOUND,
                        f"Target parent does not exist: {target_parent_id}",
                        "target_parent_id",
                    )
                )
            elif target.level != CategoryLevel.PRIMARY:
                errors.append(
                    CategoryError(
                        Code.INVALID_LEVEL,
                        "Categories can only be moved under a primary category",
                        "target_parent_id",
                    )
                )
            for category_id in category_ids:
                if category_id == target_parent_id:
                    errors.append(
                        CategoryError(
                            Code.CIRCULAR_REFERENCE,
                            f"Moving category {category_id} under itself would create a cycle",
                            details={"category_id": category_id},
                        )
                    )
                elif any(c.parent_id == category_id for c in categories):
                    errors.append(
                        CategoryError(
                            Code.MAX_DEPTH_EXCEEDED,
                            f"Category {category_id} has subcategories and cannot become one",
                            details={"category_id": category_id},
                        )
                    )

    return CategoryValidationResult(errors)
