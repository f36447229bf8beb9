"""Flatten a block tree into one heading-structured markdown document."""

import re
from dataclasses import dataclass, field

from logseq_markmap.config import COLLAPSE_HIDDEN, MAX_HEADING_DEPTH
from logseq_markmap.core.markup.resolver import TopicResolver
from logseq_markmap.models.block import Block

INDEX_MARKER = "<!--mm:{}-->"
INDEX_MARKER_RE = re.compile(r"<!--mm:(\d+)-->")

# ![alt](src){:height 100, :width 200}
_IMAGE_SIZE_RE = re.compile(r"(!\[.*?\]\(.*?\))\{(:[a-z0-9 ]+(, )?)+\}", re.IGNORECASE)


@dataclass
class AssembledDocument:
    """Markdown ready for the compiler, plus what is needed to annotate its output.

    ``level`` is the deepest block depth walked, capped at MAX_HEADING_DEPTH.
    ``blocks_by_index`` maps the ``<!--mm:N-->`` marker of each heading to its block.
    """

    markdown: str
    level: int
    blocks_by_index: dict[int, Block] = field(default_factory=dict)


def heading_prefix(depth: int) -> str:
    """``##`` for top-level blocks, one more ``#`` per level; nothing past the cap."""
    return "#" * (depth + 2) + " " if depth < MAX_HEADING_DEPTH else ""


def mark_heading(topic: str, index: int) -> str:
    """Append the block index marker to the first line of ``topic``.

    The first line is the one that ends up on the heading.
    """
    first, sep, rest = topic.partition("\n")
    marker = INDEX_MARKER.format(index)
    return f"{first} {marker}{sep}{rest}" if first else f"{marker}{sep}{rest}"


def strip_image_sizes(markdown: str) -> str:
    return _IMAGE_SIZE_RE.sub(lambda m: m.group(1), markdown)


class _Walker:
    def __init__(self, resolver: TopicResolver, collapse_mode: str | None) -> None:
        self.resolver = resolver
        self.collapse_mode = collapse_mode
        self.level = 0
        self.blocks_by_index: dict[int, Block] = {}

    async def walk(self, blocks: tuple[Block, ...], depth: int) -> list[str]:
        self.level = min(MAX_HEADING_DEPTH, max(self.level, depth))
        lines: list[str] = []
        for block in blocks:
            topic = await self.resolver.resolve(block.content, block.properties)
            prefix = heading_prefix(depth)
            if prefix:
                index = len(self.blocks_by_index)
                self.blocks_by_index[index] = block
                topic = mark_heading(topic, index)
            line = prefix + topic
            if not (block.collapsed and self.collapse_mode == COLLAPSE_HIDDEN):
                line += "\n" + "\n".join(await self.walk(block.children, depth + 1))  # type: ignore[arg-type]
            lines.append(line)
        return lines


async def assemble_markdown(
    blocks: tuple[Block, ...],
    *,
    title: str,
    resolver: TopicResolver,
    collapse_mode: str | None = None,
) -> AssembledDocument:
    """Render ``blocks`` (already filtered and limited) as one markdown document.

    Args:
        blocks: Top-level blocks of the document.
        title: Document title, rendered as the H1 root.
        resolver: Produces each block's topic.
        collapse_mode: The page's ``markMapCollapsed`` value; ``"hidden"`` leaves the
            children of collapsed blocks out of the document.
    """
    walker = _Walker(resolver, collapse_mode)
    lines = await walker.walk(blocks, 0)
    markdown = f"# {title}\n\n" + "\n".join(lines)
    return AssembledDocument(
        markdown=strip_image_sizes(markdown),
        level=walker.level,
        blocks_by_index=walker.blocks_by_index,
    )
