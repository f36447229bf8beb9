"""Copy block properties and initial folds onto the compiled node tree."""

from collections.abc import Mapping
from typing import Any

from logseq_markmap.config import COLLAPSE_EXTEND
from logseq_markmap.models.block import Block
from logseq_markmap.models.node import GenericNode


def propagate_properties(
    root: GenericNode,
    blocks: tuple[Block, ...],
    *,
    page_properties: Mapping[str, Any] | None = None,
    blocks_by_index: Mapping[int, Block] | None = None,
    collapse_mode: str | None = None,
) -> None:
    """Annotate ``root`` in place.

    A compiled node is paired with its block through the index it carries when the
    compiler kept one. On a level where no sibling carries an index, nodes are paired
    with ``blocks`` by position, so the two trees must not be reordered independently.
    Unpaired nodes (list items inside a topic, say) get empty properties.

    Args:
        root: Compiled tree; its root stands for the page.
        blocks: The filtered and limited blocks the markdown was assembled from.
        page_properties: Properties of the page, copied onto the root.
        blocks_by_index: Index -> block map produced by the assembler.
        collapse_mode: The page's ``markMapCollapsed`` value; ``"extend"`` ignores
            block-level collapse.
    """
    root.properties = dict(page_properties or {})
    _walk(root, blocks, blocks_by_index or {}, collapse_mode)


def _walk(
    parent: GenericNode,
    blocks: tuple[Block, ...],
    blocks_by_index: Mapping[int, Block],
    collapse_mode: str | None,
) -> None:
    positional = all(child.block_index is None for child in parent.children)
    for i, node in enumerate(parent.children):
        block: Block | None
        if node.block_index is not None:
            block = blocks_by_index.get(node.block_index)
        elif positional and i < len(blocks):
            block = blocks[i]
        else:
            block = None

        node.properties = dict(block.properties) if block else {}
        if block and block.collapsed and collapse_mode != COLLAPSE_EXTEND:
            node.fold = True

        _walk(node, block.children if block else (), blocks_by_index, collapse_mode)  # type: ignore[arg-type]
