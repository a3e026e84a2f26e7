"""Category hierarchy helpers.

All functions work on plain sequences of category-like objects exposing
``id``, ``parent_id``, ``name`` and ``sort_order``; ORM rows and
lightweight ``select(...)`` rows both qualify.
"""

from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from app.core.exceptions import CircularReferenceError


class CategoryLike(Protocol):
    id: str
    parent_id: str | None
    name: str
    sort_order: int


@dataclass
class CategoryTreeNode:
    """One category with its children.

    ``orphaned`` marks a node promoted to root because its parent was not
    among the categories given (deleted, or beyond the fetched page).
    """

    category: Any
    children: list["CategoryTreeNode"] = field(default_factory=list)
    orphaned: bool = False


def _sort_key(node: CategoryTreeNode) -> tuple[int, str]:
    return (node.category.sort_order or 0, node.category.name or "")


def build_category_tree(categories: Sequence[CategoryLike]) -> list[CategoryTreeNode]:
    """Fold a flat category list into a forest.

    First pass indexes a node per id, second pass attaches each node to its
    parent. A node whose parent is missing from ``categories`` becomes an
    orphaned root. Nodes caught in a parent cycle have no root to hang
    from and are left out; writes reject cycles so this only concerns
    legacy data.
    """
    nodes = {category.id: CategoryTreeNode(category) for category in categories}
    roots: list[CategoryTreeNode] = []

    for category in categories:
        node = nodes[category.id]
        parent = nodes.get(category.parent_id) if category.parent_id else None

        if parent is not None and parent is not node:
            parent.children.append(node)
        else:
            node.orphaned = bool(category.parent_id)
            roots.append(node)

    for node in nodes.values():
        node.children.sort(key=_sort_key)
    roots.sort(key=_sort_key)

    return roots


def find_leaf_categories(categories: Sequence[CategoryLike]) -> list[CategoryLike]:
    """Categories no other category names as its parent."""
    parent_ids = {category.parent_id for category in categories if category.parent_id}
    return [category for category in categories if category.id not in parent_ids]


def _children_index(categories: Iterable[CategoryLike]) -> dict[str, list[str]]:
    children: dict[str, list[str]] = {}
    for category in categories:
        if category.parent_id:
            children.setdefault(category.parent_id, []).append(category.id)
    return children


def collect_descendant_ids(category_id: str, categories: Sequence[CategoryLike]) -> list[str]:
    """Ids of every category below ``category_id``, breadth first."""
    children = _children_index(categories)
    descendants: list[str] = []
    seen = {category_id}
    queue = deque(children.get(category_id, []))

    while queue:
        child_id = queue.popleft()
        if child_id in seen:
            continue
        seen.add(child_id)
        descendants.append(child_id)
        queue.extend(children.get(child_id, []))

    return descendants


def build_breadcrumb(category_id: str, categories: Sequence[CategoryLike]) -> list[CategoryLike]:
    """Path from the top-most known ancestor down to ``category_id``.

    Returns an empty list when the category is unknown. Stops at a missing
    parent or on revisiting a node.
    """
    by_id = {category.id: category for category in categories}
    path: list[CategoryLike] = []
    seen: set[str] = set()
    current = by_id.get(category_id)

    while current is not None and current.id not in seen:
        seen.add(current.id)
        path.append(current)
        current = by_id.get(current.parent_id) if current.parent_id else None

    path.reverse()
    return path


def check_circular_reference(
    category_id: str,
    proposed_parent_ids: Sequence[str],
    categories: Sequence[CategoryLike],
) -> None:
    """Reject a parent assignment that would make a category its own ancestor.

    Every ancestor path of every proposed parent is walked, using the
    stored ``parent_id`` of the other categories.

    Raises:
        CircularReferenceError: category is among its proposed parents or
            appears above one of them
    """
    if category_id in proposed_parent_ids:
        raise CircularReferenceError("A category cannot be its own parent", category_id)

    by_id = {category.id: category for category in categories}

    for parent_id in proposed_parent_ids:
        seen: set[str] = set()
        current = by_id.get(parent_id)

        while current is not None and current.id not in seen:
            seen.add(current.id)
            if current.parent_id == category_id:
                raise CircularReferenceError(
                    f'Circular reference detected: "{current.name}" is already '
                    "a child of this category",
                    category_id,
                )
            current = by_id.get(current.parent_id) if current.parent_id else None
