"""Block stores: the live Logseq app, or a JSON dump of one page."""

import asyncio
import json
from pathlib import Path
from typing import Any

from loguru import logger

from logseq_markmap.api import LogseqApi
from logseq_markmap.core.tree.loader import parse_block, parse_config, parse_page
from logseq_markmap.models.block import Block, BlockRef, DocumentConfig, Page


def _as_block(item: Block | BlockRef | None) -> Block | None:
    return item if isinstance(item, Block) else None


class LogseqBlockStore:
    """Async view of a running Logseq app.

    API calls are blocking, so each one runs in a worker thread.

    Args:
        api: HTTP client.
        page: Render this page instead of the one open in the app.
    """

    def __init__(self, api: LogseqApi, *, page: str | None = None) -> None:
        self.api = api
        self.page = page

    def follow_app(self) -> None:
        """Stop pinning a page; render whatever page the app shows from now on."""
        if self.page:
            logger.debug("Unpinning page {!r}", self.page)
        self.page = None

    async def _call(self, method: str, *args: Any) -> Any:
        return await asyncio.to_thread(self.api.call, method, *args)

    async def get_current_page_blocks_tree(self) -> list[Block | BlockRef]:
        if self.page:
            raw = await self._call("logseq.Editor.getPageBlocksTree", self.page)
        else:
            raw = await self._call("logseq.Editor.getCurrentPageBlocksTree")
        return [parse_block(b) for b in raw or []]

    async def get_current_page(self) -> Page | None:
        if self.page:
            raw = await self._call("logseq.Editor.getPage", self.page)
        else:
            raw = await self._call("logseq.Editor.getCurrentPage")
        return parse_page(raw) if raw else None

    async def get_current_block(self) -> Block | None:
        raw = await self._call("logseq.Editor.getCurrentBlock")
        return _as_block(parse_block(raw)) if raw else None

    async def get_block(self, uuid: str, *, include_children: bool = False) -> Block | None:
        raw = await self._call("logseq.Editor.getBlock", uuid, {"includeChildren": include_children})
        return _as_block(parse_block(raw)) if raw else None

    async def get_user_configs(self) -> DocumentConfig:
        return parse_config(await self._call("logseq.App.getUserConfigs") or {})


class JsonBlockStore:
    """A page exported to JSON, for offline rendering and tests.

    Layout::

        {"page": {...}, "blocks": [...], "config": {...}, "current_block": "<uuid>"}

    ``page``, ``blocks`` and ``config`` use the Logseq API's field names. Every block
    in ``blocks`` (at any depth) can be looked up by uuid, as can extra blocks listed
    under ``"refs"``.
    """

    def __init__(self, data: dict[str, Any]) -> None:
        self.data = data
        self._blocks: dict[str, Block] = {}
        for raw in [*data.get("blocks", []), *data.get("refs", [])]:
            self._index(parse_block(raw))

    @classmethod
    def from_file(cls, path: Path) -> "JsonBlockStore":
        with open(path, encoding="utf-8") as f:
            return cls(json.load(f))

    def _index(self, item: Block | BlockRef) -> None:
        if not isinstance(item, Block):
            return
        if item.uuid:
            self._blocks[item.uuid] = item
        for child in item.children:
            self._index(child)

    async def get_current_page_blocks_tree(self) -> list[Block | BlockRef]:
        return [parse_block(b) for b in self.data.get("blocks", [])]

    async def get_current_page(self) -> Page | None:
        raw = self.data.get("page")
        return parse_page(raw) if raw else None

    async def get_current_block(self) -> Block | None:
        uuid = self.data.get("current_block")
        return self._blocks.get(uuid) if uuid else None

    async def get_block(self, uuid: str, *, include_children: bool = False) -> Block | None:
        block = self._blocks.get(uuid)
        if block is None:
            logger.debug("Block {} not in dump", uuid)
            return None
        if include_children:
            return block
        return Block(uuid=block.uuid, content=block.content, properties=block.properties)

    async def get_user_configs(self) -> DocumentConfig:
        return parse_config(self.data.get("config") or {})
