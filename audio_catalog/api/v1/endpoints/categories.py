"""Category API: thin routes delegating to CategoryService.

Static paths are declared before /{category_id} so they are not captured
as ids.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import IntegrityError

from audio_catalog.api.v1.dependencies import (
    get_category_cache,
    get_category_service,
    get_category_service_for_write,
)
from audio_catalog.application.dtos.category import (
    CategoryCreate,
    CategoryQuery,
    CategoryReorder,
    CategorySelection,
    CategoryTreeNode,
    CategoryUpdate,
)
from audio_catalog.application.services.category_tree import get_path_string
from audio_catalog.application.use_cases.categories import CategoryService
from audio_catalog.core.limiter import limit_admin, limit_writes
from audio_catalog.domain.enums import BatchOperation
from audio_catalog.infrastructure.cache import CategoryCacheManager
from audio_catalog.schemas.category import (
    BatchResultResponse,
    CacheHealthResponse,
    CacheWarmupResponse,
    CategoryBatchRequest,
    CategoryCreateRequest,
    CategoryListResponse,
    CategoryMoveRequest,
    CategoryOptionResponse,
    CategoryPathResponse,
    CategoryReorderRequest,
    CategoryReorderResponse,
    CategoryResponse,
    CategoryStatsResponse,
    CategoryTreeNodeResponse,
    CategoryUpdateRequest,
    CategoryValidateRequest,
    ValidationResultResponse,
)

router = APIRouter()

ReadService = Annotated[CategoryService, Depends(get_category_service)]
WriteService = Annotated[CategoryService, Depends(get_category_service_for_write)]

_DUPLICATE_DETAIL = "A category with this name already exists at this level"


def _tree_node(node: CategoryTreeNode) -> CategoryTreeNodeResponse:
    return CategoryTreeNodeResponse(
        **CategoryResponse.model_validate(node.category).model_dump(),
        children=[CategoryResponse.model_validate(c) for c in node.children],
    )


def _update_from(body: CategoryUpdateRequest, exclude: frozenset[str] = frozenset()) -> CategoryUpdate:
    supplied = frozenset(body.model_fields_set) - exclude
    return CategoryUpdate(
        name=body.name,
        description=body.description,
        color=body.color,
        icon=body.icon,
        sort_order=body.sort_order,
        is_active=body.is_active,
        parent_id=body.parent_id,
        fields_set=supplied,
    )


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    service: ReadService,
    format: Literal["flat", "tree"] = "flat",
    include_inactive: bool = False,
    include_count: bool = False,
    parent_id: str | None = None,
    level: int | None = Query(None, ge=1, le=2),
    search: str | None = None,
    limit: int = Query(50, ge=1, le=200),
):
    """List categories flat (filterable, searchable) or as a tree."""
    if format == "tree":
        tree = await service.get_category_tree(include_count, include_inactive)
        return CategoryListResponse(
            format="tree", total=len(tree), tree=[_tree_node(n) for n in tree]
        )
    if search:
        items = await service.search_categories(search, include_inactive, level, limit)
    else:
        items = await service.list_categories(
            CategoryQuery(
                include_inactive=include_inactive,
                include_count=include_count,
                parent_id=parent_id,
                level=level,
            )
        )
    return CategoryListResponse(
        format="flat",
        total=len(items),
        categories=[CategoryResponse.model_validate(c) for c in items],
    )


@router.post("", response_model=CategoryResponse, status_code=201)
@limit_writes
async def create_category(
    request: Request,
    body: CategoryCreateRequest,
    service: WriteService,
):
    """Create a primary category, or a subcategory when parent_id is given."""
    try:
        created = await service.create_category(
            CategoryCreate(
                name=body.name,
                parent_id=body.parent_id,
                description=body.description,
                color=body.color,
                icon=body.icon,
                sort_order=body.sort_order,
                is_active=body.is_active,
            )
        )
    except IntegrityError as e:
        raise HTTPException(status_code=409, detail=_DUPLICATE_DETAIL) from e
    return CategoryResponse.model_validate(created)


@router.get("/stats", response_model=CategoryStatsResponse)
async def get_category_stats(service: ReadService):
    return CategoryStatsResponse.model_validate(await service.get_stats())


@router.get("/hierarchy-check", response_model=ValidationResultResponse)
async def check_hierarchy(service: ReadService):
    """Check all stored categories against the hierarchy rules."""
    result = await service.check_hierarchy()
    return ValidationResultResponse(
        is_valid=result.is_valid,
        errors=[e.to_dict() for e in result.errors],
        warnings=result.warnings,
    )


@router.get("/options", response_model=list[CategoryOptionResponse])
async def get_category_options(
    service: ReadService,
    level: int | None = Query(None, ge=1, le=2),
    include_inactive: bool = False,
    hierarchical: bool = False,
):
    """Options for category pickers: flat by level, or nested under primaries."""
    options = await service.get_options(level, include_inactive, hierarchical)
    return [CategoryOptionResponse.model_validate(o) for o in options]


@router.get("/path", response_model=CategoryPathResponse)
async def get_category_path(
    service: ReadService,
    category_id: str | None = None,
    subcategory_id: str | None = None,
):
    """Resolve a category selection into a breadcrumb."""
    resolved = await service.get_category_path(CategorySelection(category_id, subcategory_id))
    return CategoryPathResponse(
        category=CategoryResponse.model_validate(resolved.category) if resolved.category else None,
        subcategory=(
            CategoryResponse.model_validate(resolved.subcategory) if resolved.subcategory else None
        ),
        breadcrumb=resolved.breadcrumb,
        path=get_path_string(
            [c for c in (resolved.category, resolved.subcategory) if c is not None],
            category_id,
            subcategory_id,
        ),
    )


@router.get("/cache/health", response_model=CacheHealthResponse)
async def get_cache_health(
    cache: Annotated[CategoryCacheManager, Depends(get_category_cache)],
):
    health = cache.check_cache_health()
    return CacheHealthResponse(
        is_healthy=health.is_healthy,
        issues=health.issues,
        recommendations=health.recommendations,
        stats=cache.get_cache_stats(),
    )


@router.post("/cache/warmup", response_model=CacheWarmupResponse)
@limit_admin
async def warmup_cache(request: Request, service: ReadService):
    """Reload list, tree and stats caches. Failures are reported, not raised."""
    return CacheWarmupResponse(success=await service.warmup_cache())


@router.post("/reorder", response_model=CategoryReorderResponse)
@limit_writes
async def reorder_categories(
    request: Request,
    body: CategoryReorderRequest,
    service: WriteService,
):
    updated = await service.reorder_categories(
        [CategoryReorder(item.id, item.sort_order) for item in body.items]
    )
    return CategoryReorderResponse(updated=updated)


@router.post("/batch", response_model=BatchResultResponse)
@limit_writes
async def batch_operation(
    request: Request,
    body: CategoryBatchRequest,
    service: WriteService,
):
    """Activate, deactivate, delete or move many categories."""
    if body.operation in (BatchOperation.ACTIVATE, BatchOperation.DEACTIVATE):
        result = await service.batch_update_status(
            body.category_ids, body.operation == BatchOperation.ACTIVATE
        )
    elif body.operation == BatchOperation.DELETE:
        result = await service.batch_delete(body.category_ids, body.force, body.cascade)
    else:
        result = await service.batch_move(body.category_ids, body.target_parent_id)
    return BatchResultResponse.model_validate(result)


@router.post("/validate", response_model=ValidationResultResponse)
async def validate_category(body: CategoryValidateRequest, service: ReadService):
    """Dry run: validate a create (no category_id) or update payload without saving."""
    if body.category_id:
        data = _update_from(body, exclude=frozenset({"category_id"}))
        result = await service.validate_category(data, body.category_id)
    else:
        result = await service.validate_category(
            CategoryCreate(
                name=body.name or "",
                parent_id=body.parent_id,
                description=body.description,
                color=body.color,
                icon=body.icon,
                sort_order=body.sort_order,
            )
        )
    return ValidationResultResponse(
        is_valid=result.is_valid,
        errors=[e.to_dict() for e in result.errors],
        warnings=result.warnings,
    )


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str, service: ReadService):
    return CategoryResponse.model_validate(await service.get_category(category_id))


@router.patch("/{category_id}", response_model=CategoryResponse)
@limit_writes
async def update_category(
    request: Request,
    category_id: str,
    body: CategoryUpdateRequest,
    service: WriteService,
):
    """Partial update. Only fields present in the body are applied."""
    try:
        updated = await service.update_category(category_id, _update_from(body))
    except IntegrityError as e:
        raise HTTPException(status_code=409, detail=_DUPLICATE_DETAIL) from e
    return CategoryResponse.model_validate(updated)


@router.post("/{category_id}/move", response_model=CategoryResponse)
@limit_writes
async def move_category(
    request: Request,
    category_id: str,
    body: CategoryMoveRequest,
    service: WriteService,
):
    moved = await service.move_category(category_id, body.parent_id)
    return CategoryResponse.model_validate(moved)


@router.delete("/{category_id}", status_code=204)
@limit_writes
async def delete_category(
    request: Request,
    category_id: str,
    service: WriteService,
    force: bool = False,
):
    """Delete a category. force also deletes subcategories and clears audio references."""
    await service.delete_category(category_id, force=force)
