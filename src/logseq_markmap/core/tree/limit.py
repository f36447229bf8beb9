"""Cap the number of visible children per level.

Siblings beyond the limit are moved under one collapsed "..." placeholder.
"""

from dataclasses import replace
from typing import Any

from loguru import logger

from logseq_markmap.config import PROP_LIMIT
from logseq_markmap.models.block import Block


def parse_limit(value: Any) -> int | None:
    """Read a limit property. Unset, zero, negative or non-numeric means no limit."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        limit = int(value)
    else:
        try:
            limit = int(str(value).strip())
        except ValueError:
            logger.warning("Ignoring non-numeric limit: {!r}", value)
            return None
    if limit < 0:
        logger.warning("Ignoring negative limit: {!r}", value)
        return None
    return limit or None


def truncate_level(blocks: tuple[Block, ...], limit: int | None) -> tuple[Block, ...]:
    """Keep the first ``limit`` blocks and fold the rest into a placeholder."""
    if not limit or len(blocks) <= limit:
        return blocks
    return (*blocks[:limit], Block.make_placeholder(blocks[limit:]))


def limit_blocks(
    blocks: tuple[Block, ...],
    *,
    limit_all: Any = None,
    limit: Any = None,
) -> tuple[Block, ...]:
    """Apply child limits to a whole block tree in one pass.

    Args:
        blocks: Top-level blocks.
        limit_all: Document-wide limit for every level (``markMapLimitAll``); wins
            over any per-block limit.
        limit: Limit for the top level only (the page's ``markMapLimit``).

    Returns:
        The limited tree. Input blocks are not modified.
    """
    global_limit = parse_limit(limit_all)
    return _limit_level(blocks, global_limit or parse_limit(limit), global_limit)


def _limit_level(
    blocks: tuple[Block, ...], effective: int | None, global_limit: int | None
) -> tuple[Block, ...]:
    result: list[Block] = []
    for block in truncate_level(blocks, effective):
        if block.children:
            child_limit = global_limit or parse_limit(block.properties.get(PROP_LIMIT))
            block = replace(block, children=_limit_level(block.children, child_limit, global_limit))
        result.append(block)
    return tuple(result)
