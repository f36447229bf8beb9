"""Protocols for the collaborators the render pipeline is driven by."""

from typing import Protocol, runtime_checkable

from logseq_markmap.models.block import Block, BlockRef, DocumentConfig, Page
from logseq_markmap.models.node import Assets, GenericNode, TransformResult


@runtime_checkable
class BlockStoreProtocol(Protocol):
    """Read-only access to the host's blocks and pages."""

    async def get_current_page_blocks_tree(self) -> list[Block | BlockRef]:
        """Return the top-level blocks of the current page, children inline or lazy."""
        ...

    async def get_current_page(self) -> Page | None:
        """Return the current page, or None when no page is open."""
        ...

    async def get_current_block(self) -> Block | None:
        """Return the block being edited, if any."""
        ...

    async def get_block(self, uuid: str, *, include_children: bool = False) -> Block | None:
        """Fetch a single block by uuid, or None when it does not exist."""
        ...

    async def get_user_configs(self) -> DocumentConfig:
        """Return graph-wide settings."""
        ...


@runtime_checkable
class CompilerProtocol(Protocol):
    """Turns markdown into a generic node tree."""

    def transform(self, markdown: str) -> TransformResult:
        """Compile markdown into a tree."""
        ...

    def get_used_assets(self, features: frozenset[str]) -> Assets:
        """Return the styles and scripts a compiled tree needs."""
        ...


@runtime_checkable
class RendererProtocol(Protocol):
    """Draws the mind-map; owns layout, pan and zoom."""

    def set_data(self, node: GenericNode) -> None:
        """Display ``node`` as the root of the mind-map."""
        ...

    def fit(self) -> None:
        """Fit the whole tree into the viewport."""
        ...

    def rescale(self, factor: float) -> None:
        """Zoom the viewport by ``factor``."""
        ...


@runtime_checkable
class HostProtocol(Protocol):
    """Navigation hooks of the host application."""

    def push_state(self, name: str) -> None:
        """Navigate the host to a page name or block uuid."""
        ...

    def refresh(self) -> None:
        """Hide then re-show the mind-map UI so it renders the new route."""
        ...

    def go_back(self) -> None:
        """Host history back."""
        ...

    def go_forward(self) -> None:
        """Host history forward."""
        ...

    def close(self) -> None:
        """Hide the mind-map UI."""
        ...
