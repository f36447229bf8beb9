"""Parse Logseq API payloads into block models and resolve lazy children."""

from dataclasses import replace
from typing import Any

from loguru import logger

from logseq_markmap.config import PROP_DISPLAY
from logseq_markmap.models.block import Block, BlockRef, DocumentConfig, Page
from logseq_markmap.protocols import BlockStoreProtocol


def parse_block(raw: Any) -> Block | BlockRef:
    """Parse one entry of a ``children`` array.

    The host inlines children as dicts, or sends ``["uuid", "<uuid>"]`` tuples for
    children it did not load.
    """
    if isinstance(raw, list | tuple):
        if len(raw) != 2 or raw[0] != "uuid":
            msg = f"Unexpected block reference: {raw!r}"
            raise ValueError(msg)
        return BlockRef(uuid=raw[1])
    return Block(
        uuid=raw.get("uuid", ""),
        content=raw.get("content") or "",
        children=tuple(parse_block(c) for c in raw.get("children") or []),
        properties=dict(raw.get("properties") or {}),
    )


def parse_page(raw: dict[str, Any]) -> Page:
    return Page(
        name=raw.get("name") or "",
        original_name=raw.get("originalName"),
        properties=dict(raw.get("properties") or {}),
        content=raw.get("content"),
        children=tuple(parse_block(c) for c in raw.get("children") or []),
    )


def parse_config(raw: dict[str, Any]) -> DocumentConfig:
    return DocumentConfig(
        preferred_format=str(raw.get("preferredFormat") or "markdown").lower(),
        current_graph=raw.get("currentGraph") or "",
    )


async def resolve_block_tree(
    store: BlockStoreProtocol, items: tuple[Block | BlockRef, ...] | list[Block | BlockRef]
) -> tuple[Block, ...]:
    """Replace every lazy :class:`BlockRef` by the fetched block, recursively.

    References the store cannot resolve are dropped.
    """
    result: list[Block] = []
    for item in items:
        if isinstance(item, BlockRef):
            if not item.uuid:
                continue
            fetched = await store.get_block(item.uuid, include_children=True)
            if fetched is None:
                logger.warning("Child block vanished before it could be fetched: {}", item.uuid)
                continue
            item = fetched
        if item.children:
            children = await resolve_block_tree(store, item.children)
            item = replace(item, children=children)
        result.append(item)
    return tuple(result)


def filter_blocks(blocks: tuple[Block, ...]) -> tuple[Block, ...]:
    """Drop blocks marked ``markMapDisplay:: hidden``, with their subtrees."""
    kept: list[Block] = []
    for block in blocks:
        if str(block.properties.get(PROP_DISPLAY, "")).lower() == "hidden":
            logger.debug("Hiding block {} from the mind-map", block.uuid)
            continue
        if block.children:
            block = replace(block, children=filter_blocks(block.children))
        kept.append(block)
    return tuple(kept)
