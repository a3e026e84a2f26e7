"""Unit tests for category hierarchy helpers."""

from dataclasses import dataclass

import pytest

from app.core.exceptions import CircularReferenceError
from app.modules.categories.tree import (
    build_breadcrumb,
    build_category_tree,
    check_circular_reference,
    collect_descendant_ids,
    find_leaf_categories,
)


@dataclass
class Cat:
    id: str
    parent_id: str | None
    name: str
    sort_order: int = 0


@pytest.fixture
def forest() -> list[Cat]:
    """Two trees plus one category whose parent is missing.

    electronics
      phones
        android
      laptops
    books
      fiction
    vinyl (parent "music" not present)
    """
    return [
        Cat("android", "phones", "Android"),
        Cat("electronics", None, "Electronics", sort_order=1),
        Cat("books", None, "Books", sort_order=2),
        Cat("phones", "electronics", "Phones", sort_order=1),
        Cat("laptops", "electronics", "Laptops", sort_order=0),
        Cat("fiction", "books", "Fiction"),
        Cat("vinyl", "music", "Vinyl", sort_order=3),
    ]


class TestBuildCategoryTree:
    """Tests for forest construction."""

    @pytest.mark.unit
    def test_roots_include_orphan(self, forest: list[Cat]) -> None:
        roots = build_category_tree(forest)

        assert [node.category.id for node in roots] == ["electronics", "books", "vinyl"]
        orphan = roots[-1]
        assert orphan.orphaned is True
        assert orphan.children == []
        assert roots[0].orphaned is False

    @pytest.mark.unit
    def test_children_sorted_by_sort_order(self, forest: list[Cat]) -> None:
        electronics = build_category_tree(forest)[0]

        assert [child.category.id for child in electronics.children] == ["laptops", "phones"]
        phones = electronics.children[1]
        assert [child.category.id for child in phones.children] == ["android"]

    @pytest.mark.unit
    def test_child_listed_before_parent(self) -> None:
        roots = build_category_tree([Cat("b", "a", "B"), Cat("a", None, "A")])

        assert len(roots) == 1
        assert roots[0].children[0].category.id == "b"

    @pytest.mark.unit
    def test_ties_broken_by_name(self) -> None:
        roots = build_category_tree([Cat("z", None, "Zebra"), Cat("a", None, "Aardvark")])

        assert [node.category.name for node in roots] == ["Aardvark", "Zebra"]

    @pytest.mark.unit
    def test_self_parent_becomes_root(self) -> None:
        roots = build_category_tree([Cat("loop", "loop", "Loop")])

        assert len(roots) == 1
        assert roots[0].orphaned is True

    @pytest.mark.unit
    def test_empty(self) -> None:
        assert build_category_tree([]) == []


class TestHierarchyQueries:
    """Tests for leaves, descendants and breadcrumbs."""

    @pytest.mark.unit
    def test_leaves(self, forest: list[Cat]) -> None:
        leaves = {category.id for category in find_leaf_categories(forest)}

        assert leaves == {"android", "laptops", "fiction", "vinyl"}

    @pytest.mark.unit
    def test_descendants(self, forest: list[Cat]) -> None:
        descendants = collect_descendant_ids("electronics", forest)

        assert set(descendants) == {"phones", "laptops", "android"}
        assert descendants.index("phones") < descendants.index("android")

    @pytest.mark.unit
    def test_descendants_of_leaf(self, forest: list[Cat]) -> None:
        assert collect_descendant_ids("fiction", forest) == []

    @pytest.mark.unit
    def test_descendants_tolerate_cycles(self) -> None:
        cyclic = [Cat("a", "b", "A"), Cat("b", "a", "B")]

        assert collect_descendant_ids("a", cyclic) == ["b"]

    @pytest.mark.unit
    def test_breadcrumb_root_first(self, forest: list[Cat]) -> None:
        path = build_breadcrumb("android", forest)

        assert [category.id for category in path] == ["electronics", "phones", "android"]

    @pytest.mark.unit
    def test_breadcrumb_stops_at_missing_parent(self, forest: list[Cat]) -> None:
        assert [category.id for category in build_breadcrumb("vinyl", forest)] == ["vinyl"]

    @pytest.mark.unit
    def test_breadcrumb_unknown_category(self, forest: list[Cat]) -> None:
        assert build_breadcrumb("nope", forest) == []


class TestCircularReference:
    """Tests for write-time cycle detection."""

    @pytest.mark.unit
    def test_own_parent_rejected(self, forest: list[Cat]) -> None:
        with pytest.raises(CircularReferenceError) as exc_info:
            check_circular_reference("phones", ["phones"], forest)

        assert exc_info.value.message == "A category cannot be its own parent"

    @pytest.mark.unit
    def test_descendant_as_parent_rejected(self, forest: list[Cat]) -> None:
        with pytest.raises(CircularReferenceError) as exc_info:
            check_circular_reference("electronics", ["android"], forest)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == (
            'Circular reference detected: "Phones" is already a child of this category'
        )

    @pytest.mark.unit
    def test_any_proposed_parent_checked(self, forest: list[Cat]) -> None:
        with pytest.raises(CircularReferenceError):
            check_circular_reference("electronics", ["fiction", "phones"], forest)

    @pytest.mark.unit
    def test_unrelated_parent_allowed(self, forest: list[Cat]) -> None:
        check_circular_reference("phones", ["books"], forest)

    @pytest.mark.unit
    def test_unknown_parent_allowed(self, forest: list[Cat]) -> None:
        check_circular_reference("phones", ["music"], forest)
