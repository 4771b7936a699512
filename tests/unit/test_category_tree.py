"""Tests for tree building, paths, options and in-memory queries."""

from audio_catalog.application.dtos.category import CategoryFilter, CategoryResult
from audio_catalog.application.services.category_tree import (
    build_tree,
    calculate_stats,
    filter_categories,
    flatten_tree,
    generate_hierarchical_options,
    generate_options,
    get_path,
    get_path_string,
    get_subcategory_options,
    search_categories,
)


def _cat(
    id: str,
    name: str,
    parent_id: str | None = None,
    sort_order: int = 0,
    is_active: bool = True,
    audio_count: int = 0,
    description: str | None = None,
) -> CategoryResult:
    return CategoryResult(
        id=id,
        name=name,
        level=1 if parent_id is None else 2,
        parent_id=parent_id,
        sort_order=sort_order,
        is_active=is_active,
        audio_count=audio_count,
        description=description,
    )


def _categories() -> list[CategoryResult]:
    return [
        _cat("pop", "Pop", "music", sort_order=1, audio_count=2),
        _cat("music", "Music", sort_order=1, description="Songs"),
        _cat("rock", "Rock", "music", sort_order=0),
        _cat("news", "News", sort_order=0),
        _cat("old", "Old", "music", sort_order=2, is_active=False),
        _cat("retired", "Retired", sort_order=5, is_active=False),
    ]


def test_build_tree_groups_and_orders() -> None:
    tree = build_tree(_categories())
    assert [n.id for n in tree] == ["news", "music"]
    music = tree[1]
    assert [c.id for c in music.children] == ["rock", "pop"]
    assert tree[0].children == []


def test_build_tree_keeps_input_order_for_equal_sort_order() -> None:
    categories = [_cat("p", "P"), _cat("b", "B", "p"), _cat("a", "A", "p")]
    tree = build_tree(categories)
    assert [c.id for c in tree[0].children] == ["b", "a"]


def test_build_tree_with_inactive() -> None:
    tree = build_tree(_categories(), include_inactive=True)
    assert [n.id for n in tree] == ["news", "music", "retired"]
    assert [c.id for c in tree[1].children] == ["rock", "pop", "old"]


def test_flatten_tree_yields_active_subset() -> None:
    categories = _categories()
    flat = flatten_tree(build_tree(categories))
    assert {c.id for c in flat} == {c.id for c in categories if c.is_active}
    assert [c.id for c in flat] == ["news", "music", "rock", "pop"]


def test_subcategory_with_missing_parent_is_not_attached() -> None:
    tree = build_tree([_cat("p", "P"), _cat("lost", "Lost", "ghost")])
    assert [c.id for c in flatten_tree(tree)] == ["p"]


def test_get_path_fills_parent_from_subcategory() -> None:
    path = get_path(_categories(), subcategory_id="pop")
    assert path.category is not None and path.category.id == "music"
    assert path.breadcrumb == ["Music", "Pop"]
    assert get_path_string(_categories(), "music", "pop") == "Music > Pop"
    assert get_path_string(_categories(), "music", separator="/") == "Music"
    assert get_path(_categories()).breadcrumb == []


def test_generate_options_by_level() -> None:
    options = generate_options(_categories(), level=1)
    assert [o.value for o in options] == ["news", "music"]
    assert options[1].title == "Songs"
    assert options[0].title == "News"

    with_inactive = generate_options(_categories(), level=2, include_inactive=True)
    assert [o.value for o in with_inactive] == ["rock", "pop", "old"]
    assert with_inactive[2].disabled is True


def test_generate_hierarchical_options() -> None:
    options = generate_hierarchical_options(build_tree(_categories()))
    music = options[1]
    assert music.parent_id is None
    assert [c.value for c in music.children] == ["rock", "pop"]
    assert all(c.level == 2 for c in music.children)
    assert options[0].children == []


def test_get_subcategory_options() -> None:
    assert [o.key for o in get_subcategory_options(_categories(), "music")] == ["rock", "pop"]


def test_calculate_stats() -> None:
    stats = calculate_stats(_categories())
    assert stats.total_categories == 6
    assert stats.level1_count == 3
    assert stats.level2_count == 3
    assert stats.active_count == 4
    assert stats.inactive_count == 2
    assert stats.categories_with_audio == 1
    assert stats.empty_categories_count == 5


def test_filter_categories() -> None:
    categories = _categories()
    family = filter_categories(categories, CategoryFilter(category_id="music"))
    assert {c.id for c in family} == {"music", "pop", "rock", "old"}
    with_audio = filter_categories(categories, CategoryFilter(has_audio=True))
    assert [c.id for c in with_audio] == ["pop"]
    inactive_secondary = filter_categories(categories, CategoryFilter(level=2, is_active=False))
    assert [c.id for c in inactive_secondary] == ["old"]


def test_search_categories() -> None:
    categories = _categories()
    assert [c.id for c in search_categories(categories, "SONG")] == ["music"]
    assert [c.id for c in search_categories(categories, "ro")] == ["rock"]
    assert search_categories(categories, "  ") == categories
    assert search_categories(categories, "songs", fields=("name",)) == []
