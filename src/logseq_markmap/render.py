"""Render pipeline: block store -> markdown -> node tree -> navigation session."""

import asyncio
from dataclasses import dataclass
from typing import Any

from loguru import logger

from logseq_markmap.compiler import MarkdownTransformer
from logseq_markmap.config import PROP_COLLAPSE_MODE, PROP_LIMIT, PROP_LIMIT_ALL, PROP_TITLE
from logseq_markmap.core.markup.org_bridge import OrgBridgeRules
from logseq_markmap.core.markup.resolver import (
    Highlighter,
    TopicResolver,
    strip_leading_headings,
    strip_property_lines,
)
from logseq_markmap.core.markup.workflow import theme_workflow_tag
from logseq_markmap.core.tree.assembly import assemble_markdown
from logseq_markmap.core.tree.limit import limit_blocks
from logseq_markmap.core.tree.loader import filter_blocks, resolve_block_tree
from logseq_markmap.core.tree.propagation import propagate_properties
from logseq_markmap.errors import MarkmapError
from logseq_markmap.models.block import Block, BlockRef
from logseq_markmap.models.node import Assets, GenericNode
from logseq_markmap.navigation.commands import dispatch_key
from logseq_markmap.navigation.session import NavigationSession
from logseq_markmap.protocols import (
    BlockStoreProtocol,
    CompilerProtocol,
    HostProtocol,
    RendererProtocol,
)


@dataclass(frozen=True)
class RenderedDocument:
    """Everything one render produced, before it is put on screen."""

    title: str
    markdown: str
    root: GenericNode
    level: int
    assets: Assets
    collapse_mode: str | None = None


def clean_title(content: str) -> str:
    return strip_leading_headings(strip_property_lines(content))


class RenderPipeline:
    """Builds the mind-map for the current page and owns its navigation session.

    At most one render is in flight: :meth:`request_render` cancels a running render
    before starting a new one, and a render only installs its session if no newer
    render was requested meanwhile. A failed render leaves the previous session in
    place.

    Args:
        store: Source of pages and blocks.
        renderer: Receives every tree to display.
        compiler: Markdown compiler; a :class:`MarkdownTransformer` rooted at the
            graph directory is built per render when omitted.
        highlighter: Workflow-tag highlighter applied to topics.
        org_rules: Conversion rules for org graphs.
    """

    def __init__(
        self,
        store: BlockStoreProtocol,
        renderer: RendererProtocol,
        *,
        compiler: CompilerProtocol | None = None,
        highlighter: Highlighter = theme_workflow_tag,
        org_rules: OrgBridgeRules | None = None,
    ) -> None:
        self.store = store
        self.renderer = renderer
        self.compiler = compiler
        self.highlighter = highlighter
        self.org_rules = org_rules
        self.session: NavigationSession | None = None
        self.document: RenderedDocument | None = None
        self._generation = 0
        self._task: asyncio.Task[Any] | None = None

    async def _source(
        self, *, block_mode: bool, block_uuid: str | None
    ) -> tuple[str, tuple[Block | BlockRef, ...], dict[str, Any]]:
        """Pick the title, the blocks and the page properties to render."""
        page = await self.store.get_current_page()
        items: tuple[Block | BlockRef, ...] = tuple(await self.store.get_current_page_blocks_tree())
        page_properties = dict(page.properties) if page else {}

        title = ""
        if block_mode:
            if block_uuid:
                block = await self.store.get_block(block_uuid, include_children=True)
            else:
                block = await self.store.get_current_block()
            if block:
                title = clean_title(block.content)
                items = block.children
        elif page:
            title = page_properties.get(PROP_TITLE) or page.original_name or page.name

        if page and page.is_block_page:
            title = clean_title(page.content or "")
            items = page.children
        return title, items, page_properties

    async def build(self, *, block_mode: bool = False, block_uuid: str | None = None) -> RenderedDocument:
        """Run the whole pipeline without touching the screen."""
        config = await self.store.get_user_configs()
        title, items, page_properties = await self._source(
            block_mode=block_mode, block_uuid=block_uuid
        )
        collapse_mode = page_properties.get(PROP_COLLAPSE_MODE)

        blocks = filter_blocks(await resolve_block_tree(self.store, items))
        blocks = limit_blocks(
            blocks,
            limit_all=page_properties.get(PROP_LIMIT_ALL),
            limit=page_properties.get(PROP_LIMIT),
        )

        resolver = TopicResolver(
            self.store, config, highlighter=self.highlighter, org_rules=self.org_rules
        )
        assembled = await assemble_markdown(
            blocks, title=title, resolver=resolver, collapse_mode=collapse_mode
        )
        logger.debug("Assembled {} chars of markdown, {} levels", len(assembled.markdown), assembled.level)

        compiler = self.compiler or MarkdownTransformer(graph_path=config.current_graph)
        result = compiler.transform(assembled.markdown)
        propagate_properties(
            result.root,
            blocks,
            page_properties=page_properties,
            blocks_by_index=assembled.blocks_by_index,
            collapse_mode=collapse_mode,
        )
        return RenderedDocument(
            title=title,
            markdown=assembled.markdown,
            root=result.root,
            level=assembled.level,
            assets=compiler.get_used_assets(result.features),
            collapse_mode=collapse_mode,
        )

    async def render(
        self, *, block_mode: bool = False, block_uuid: str | None = None
    ) -> NavigationSession | None:
        """Render and display; replaces the navigation session.

        Returns:
            The new session, or None if a newer render superseded this one.

        Raises:
            MarkmapError: the render failed; the previous session is kept.
        """
        self._generation += 1
        generation = self._generation
        document = await self.build(block_mode=block_mode, block_uuid=block_uuid)
        if generation != self._generation:
            logger.debug("Render {} superseded by {}", generation, self._generation)
            return None

        session = NavigationSession(
            document.root, document.level, self.renderer, collapse_mode=document.collapse_mode
        )
        session.start()
        self.document = document
        self.session = session
        logger.info("Rendered {!r} ({} levels)", document.title, document.level)
        return session

    async def _render_logged(self, **kwargs: Any) -> NavigationSession | None:
        try:
            return await self.render(**kwargs)
        except MarkmapError:
            logger.exception("Render failed, keeping the previous mind-map")
            return None

    def request_render(
        self, *, block_mode: bool = False, block_uuid: str | None = None
    ) -> "asyncio.Task[NavigationSession | None]":
        """Start a render in the background, cancelling one still in flight."""
        if self._task is not None and not self._task.done():
            logger.debug("Cancelling in-flight render")
            self._task.cancel()
        task = asyncio.create_task(
            self._render_logged(block_mode=block_mode, block_uuid=block_uuid)
        )
        self._task = task
        return task

    def handle_key(self, key: str, host: HostProtocol | None = None) -> bool:
        return dispatch_key(key, self.session, host)
