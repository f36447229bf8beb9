"""Domain models for the Logseq block tree."""

from dataclasses import dataclass, field
from typing import Any

from logseq_markmap.config import PLACEHOLDER_CONTENT, PROP_COLLAPSED


@dataclass(frozen=True)
class BlockRef:
    """A child the host did not inline; must be fetched by uuid."""

    uuid: str


@dataclass(frozen=True)
class Block:
    """A single block of a Logseq outline."""

    uuid: str
    content: str
    children: tuple["Block | BlockRef", ...] = ()
    properties: dict[str, Any] = field(default_factory=dict)
    placeholder: bool = False

    @property
    def collapsed(self) -> bool:
        return self.properties.get(PROP_COLLAPSED) in (True, "true")

    @classmethod
    def make_placeholder(cls, overflow: tuple["Block", ...]) -> "Block":
        """Build the synthetic "..." block standing in for truncated siblings."""
        return cls(
            uuid="",
            content=PLACEHOLDER_CONTENT,
            children=overflow,
            properties={PROP_COLLAPSED: True},
            placeholder=True,
        )


@dataclass(frozen=True)
class Page:
    """The page currently shown by the host.

    When the host has zoomed into a block, it reports that block as the page: such a
    page has ``content`` and ``children`` but no ``original_name``.
    """

    name: str
    original_name: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    content: str | None = None
    children: tuple[Block | BlockRef, ...] = ()

    @property
    def is_block_page(self) -> bool:
        return not self.original_name and bool(self.content)


@dataclass(frozen=True)
class DocumentConfig:
    """Graph-wide settings that affect how topics are rendered."""

    preferred_format: str = "markdown"
    current_graph: str = ""
