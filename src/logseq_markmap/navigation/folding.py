"""Fold operations on a compiled node tree. All of them mutate in place."""

from logseq_markmap.config import COLLAPSE_EXTEND, PROP_COLLAPSED
from logseq_markmap.models.node import GenericNode


def declared_collapsed(node: GenericNode, collapse_mode: str | None) -> bool:
    """True if the node's own block asks to stay collapsed."""
    return collapse_mode != COLLAPSE_EXTEND and node.properties.get(PROP_COLLAPSED) in (True, "true")


def hide_all(node: GenericNode) -> None:
    """Fold ``node`` and every descendant."""
    for n in node.walk():
        n.fold = True


def show_all(node: GenericNode, collapse_mode: str | None = None) -> int | None:
    """Unfold everything except nodes their author declared collapsed.

    Returns:
        Depth (relative to ``node``) of the shallowest node kept folded, or None.
    """
    shallowest: int | None = None
    todo = [(node, 0)]
    while todo:
        n, depth = todo.pop()
        if declared_collapsed(n, collapse_mode):
            n.fold = True
            if shallowest is None or depth < shallowest:
                shallowest = depth
        else:
            n.fold = False
        todo.extend((c, depth + 1) for c in n.children)
    return shallowest


def expand_level(node: GenericNode, level: int) -> None:
    """Unfold ``level`` generations below ``node``; fold everything deeper."""
    if level <= 0:
        hide_all(node)
        return
    node.fold = False
    for child in node.children:
        expand_level(child, level - 1)


def expand_step_by_step(node: GenericNode) -> bool:
    """Unfold the first folded node with children, in pre-order.

    Returns:
        True if a node was unfolded.
    """
    if node.fold and node.children:
        node.fold = False
        return True
    return any(expand_step_by_step(child) for child in node.children)


def collapse_step_by_step(node: GenericNode) -> bool:
    """Fold the first unfolded node with children, in reverse post-order.

    Returns:
        True if a node was folded.
    """
    if any(collapse_step_by_step(child) for child in reversed(node.children)):
        return True
    if not node.fold and node.children:
        node.fold = True
        return True
    return False
