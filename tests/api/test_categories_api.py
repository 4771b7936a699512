"""Category API tests (in-memory repositories, no database)."""

from httpx import AsyncClient

from audio_catalog.application.dtos.audio import AudioCategoryRecord
from audio_catalog.infrastructure.cache import CategoryCacheManager
from tests.conftest import FakeCategoryRepository

BASE = "/api/v1/categories"


async def test_list_flat_active_only(client: AsyncClient) -> None:
    response = await client.get(BASE)
    assert response.status_code == 200
    data = response.json()
    assert data["format"] == "flat"
    assert data["total"] == 5
    assert data["tree"] is None
    assert "archive" not in {c["id"] for c in data["categories"]}


async def test_list_with_inactive_and_level(client: AsyncClient) -> None:
    everything = (await client.get(BASE, params={"include_inactive": "true"})).json()
    assert everything["total"] == 6
    secondary = (await client.get(BASE, params={"level": 2})).json()
    assert {c["id"] for c in secondary["categories"]} == {"pop", "rock", "tech"}


async def test_list_tree(client: AsyncClient) -> None:
    data = (await client.get(BASE, params={"format": "tree"})).json()
    assert data["format"] == "tree"
    assert [n["id"] for n in data["tree"]] == ["music", "podcast"]
    assert [c["id"] for c in data["tree"][0]["children"]] == ["rock", "pop"]


async def test_list_with_counts(
    client: AsyncClient, category_repo: FakeCategoryRepository
) -> None:
    category_repo.audios = [AudioCategoryRecord("a1", category_id="music", subcategory_id="pop")]
    data = (await client.get(BASE, params={"include_count": "true"})).json()
    counts = {c["id"]: c["audio_count"] for c in data["categories"]}
    assert counts["music"] == 1
    assert counts["pop"] == 1
    assert counts["rock"] == 0


async def test_search(client: AsyncClient) -> None:
    data = (await client.get(BASE, params={"search": "ROCK"})).json()
    assert [c["id"] for c in data["categories"]] == ["rock"]


async def test_blank_search_is_rejected(client: AsyncClient) -> None:
    response = await client.get(BASE, params={"search": "   "})
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_create_strips_markup(client: AsyncClient) -> None:
    response = await client.post(BASE, json={"name": "<b>Jazz</b>", "parent_id": "music"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Jazz"
    assert data["level"] == 2
    assert data["parent_id"] == "music"


async def test_create_with_encoded_script_name_is_rejected(client: AsyncClient) -> None:
    response = await client.post(
        BASE, json={"name": "&lt;script&gt;alert(1)&lt;/script&gt;", "parent_id": "music"}
    )
    assert response.status_code == 400
    assert response.json()["details"]["errors"][0]["field"] == "name"


async def test_create_duplicate_returns_structured_errors(client: AsyncClient) -> None:
    response = await client.post(BASE, json={"name": "Rock", "parent_id": "music"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "CATEGORY_VALIDATION_ERROR"
    assert body["details"]["errors"][0]["code"] == "DUPLICATE_NAME"


async def test_create_with_bad_color_and_empty_name(client: AsyncClient) -> None:
    response = await client.post(BASE, json={"name": "", "color": "blue"})
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["details"]["errors"]}
    assert fields == {"name", "color"}


async def test_create_without_name_fails_request_validation(client: AsyncClient) -> None:
    response = await client.post(BASE, json={"description": "no name"})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert body["details"][0]["loc"] == ["body", "name"]


async def test_get_category(client: AsyncClient) -> None:
    response = await client.get(f"{BASE}/pop")
    assert response.status_code == 200
    assert response.json()["name"] == "Pop"


async def test_get_missing_category(client: AsyncClient) -> None:
    response = await client.get(f"{BASE}/ghost")
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_get_id_with_key_separator_is_not_found(client: AsyncClient) -> None:
    response = await client.get(f"{BASE}/abc:def")
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_list_filter_with_key_separator_is_empty(client: AsyncClient) -> None:
    response = await client.get(BASE, params={"parent_id": "a|b"})
    assert response.status_code == 200
    assert response.json()["total"] == 0


async def test_get_category_count_does_not_depend_on_prior_lists(
    client: AsyncClient, category_repo: FakeCategoryRepository
) -> None:
    category_repo.audios = [AudioCategoryRecord("a1", category_id="music", subcategory_id="pop")]
    await client.get(BASE, params={"include_count": "true"})
    assert (await client.get(f"{BASE}/music")).json()["audio_count"] == 1
    await client.get(BASE)
    assert (await client.get(f"{BASE}/music")).json()["audio_count"] == 1


async def test_patch_updates_only_given_fields(client: AsyncClient) -> None:
    response = await client.patch(f"{BASE}/pop", json={"description": "Charts"})
    assert response.status_code == 200
    data = response.json()
    assert data["description"] == "Charts"
    assert data["name"] == "Pop"
    assert data["parent_id"] == "music"


async def test_patch_with_null_parent_moves_to_top_level(client: AsyncClient) -> None:
    response = await client.patch(f"{BASE}/pop", json={"parent_id": None})
    assert response.status_code == 200
    data = response.json()
    assert data["parent_id"] is None
    assert data["level"] == 1


async def test_move(client: AsyncClient) -> None:
    response = await client.post(f"{BASE}/tech/move", json={"parent_id": "music"})
    assert response.status_code == 200
    assert response.json()["parent_id"] == "music"


async def test_move_into_subcategory_is_rejected(client: AsyncClient) -> None:
    response = await client.post(f"{BASE}/tech/move", json={"parent_id": "rock"})
    assert response.status_code == 400
    codes = [e["code"] for e in response.json()["details"]["errors"]]
    assert "INVALID_LEVEL" in codes


async def test_delete_restricted_then_forced(
    client: AsyncClient, category_repo: FakeCategoryRepository
) -> None:
    response = await client.delete(f"{BASE}/music")
    assert response.status_code == 409
    assert response.json()["details"]["children_count"] == 2

    response = await client.delete(f"{BASE}/music", params={"force": "true"})
    assert response.status_code == 204
    assert "rock" not in category_repo.rows
    assert (await client.get(f"{BASE}/music")).status_code == 404


async def test_stats(client: AsyncClient) -> None:
    data = (await client.get(f"{BASE}/stats")).json()
    assert data["total_categories"] == 6
    assert data["level1_count"] == 3
    assert data["inactive_count"] == 1


async def test_hierarchy_check(client: AsyncClient) -> None:
    data = (await client.get(f"{BASE}/hierarchy-check")).json()
    assert data == {"is_valid": True, "errors": [], "warnings": []}


async def test_options(client: AsyncClient) -> None:
    flat = (await client.get(f"{BASE}/options", params={"level": 1})).json()
    assert [o["value"] for o in flat] == ["music", "podcast"]
    assert flat[0]["title"] == "Songs and albums"

    nested = (await client.get(f"{BASE}/options", params={"hierarchical": "true"})).json()
    assert [c["value"] for c in nested[0]["children"]] == ["rock", "pop"]


async def test_path(client: AsyncClient) -> None:
    response = await client.get(
        f"{BASE}/path", params={"category_id": "music", "subcategory_id": "rock"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["breadcrumb"] == ["Music", "Rock"]
    assert data["path"] == "Music > Rock"


async def test_path_with_mismatched_parent(client: AsyncClient) -> None:
    response = await client.get(
        f"{BASE}/path", params={"category_id": "podcast", "subcategory_id": "rock"}
    )
    assert response.status_code == 400


async def test_reorder(client: AsyncClient) -> None:
    response = await client.post(
        f"{BASE}/reorder",
        json={"items": [{"id": "pop", "sort_order": 0}, {"id": "rock", "sort_order": 1}]},
    )
    assert response.json() == {"updated": 2}
    tree = (await client.get(BASE, params={"format": "tree"})).json()["tree"]
    assert [c["id"] for c in tree[0]["children"]] == ["pop", "rock"]


async def test_reorder_unknown_id(client: AsyncClient) -> None:
    response = await client.post(f"{BASE}/reorder", json={"items": [{"id": "ghost", "sort_order": 0}]})
    assert response.status_code == 404


async def test_batch_deactivate(client: AsyncClient) -> None:
    response = await client.post(
        f"{BASE}/batch", json={"operation": "deactivate", "category_ids": ["pop", "ghost"]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["succeeded"] == ["pop"]
    assert data["failed"][0]["id"] == "ghost"
    listed = (await client.get(BASE)).json()
    assert "pop" not in {c["id"] for c in listed["categories"]}


async def test_batch_move_and_invalid_move(client: AsyncClient) -> None:
    ok = await client.post(
        f"{BASE}/batch",
        json={"operation": "move", "category_ids": ["tech"], "target_parent_id": "music"},
    )
    assert ok.json()["succeeded"] == ["tech"]

    invalid = await client.post(
        f"{BASE}/batch",
        json={"operation": "move", "category_ids": ["music"], "target_parent_id": "podcast"},
    )
    assert invalid.status_code == 400


async def test_batch_delete_cascade(client: AsyncClient) -> None:
    response = await client.post(
        f"{BASE}/batch",
        json={"operation": "delete", "category_ids": ["podcast"], "cascade": True},
    )
    assert response.json()["succeeded"] == ["podcast"]


async def test_batch_unknown_operation(client: AsyncClient) -> None:
    response = await client.post(f"{BASE}/batch", json={"operation": "explode", "category_ids": ["pop"]})
    assert response.status_code == 422


async def test_validate_dry_run(client: AsyncClient, category_repo: FakeCategoryRepository) -> None:
    duplicate = (await client.post(f"{BASE}/validate", json={"name": "Music"})).json()
    assert duplicate["is_valid"] is False
    assert duplicate["errors"][0]["code"] == "DUPLICATE_NAME"

    own_name = (
        await client.post(f"{BASE}/validate", json={"category_id": "pop", "name": "Pop"})
    ).json()
    assert own_name["is_valid"] is True
    assert category_repo.calls["create_category"] == 0
    assert category_repo.calls["update_category"] == 0


async def test_cache_warmup_and_health(client: AsyncClient, cache: CategoryCacheManager) -> None:
    before = (await client.get(f"{BASE}/cache/health")).json()
    assert before["is_healthy"] is False

    assert (await client.post(f"{BASE}/cache/warmup")).json() == {"success": True}

    after = (await client.get(f"{BASE}/cache/health")).json()
    assert after["is_healthy"] is True
    assert after["stats"]["tree"]["size"] == 1


async def test_list_is_cached_between_requests(
    client: AsyncClient, category_repo: FakeCategoryRepository
) -> None:
    await client.get(BASE)
    await client.get(BASE)
    assert category_repo.calls["list_categories"] == 1
