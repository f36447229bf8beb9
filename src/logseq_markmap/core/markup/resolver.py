"""Rewrite one block's raw content into the markdown topic shown on its node."""

import asyncio
import html
import re
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from loguru import logger

from logseq_markmap.config import (
    MISSING_BLOCK_LABEL,
    PROP_BACKGROUND_COLOR,
    PROP_CUT,
    RENDERER_LABEL,
)
from logseq_markmap.core.markup.colors import pick_text_color
from logseq_markmap.core.markup.links import (
    TAG_LINK_STYLE,
    block_link,
    page_link,
    placeholder_link,
)
from logseq_markmap.core.markup.org_bridge import OrgBridgeRules, org_to_markdown
from logseq_markmap.core.markup.workflow import theme_workflow_tag
from logseq_markmap.models.block import Block, DocumentConfig
from logseq_markmap.protocols import BlockStoreProtocol

_UUID = r"[0-9A-F]{8}-[0-9A-F]{4}-[1-5][0-9A-F]{3}-[89AB][0-9A-F]{3}-[0-9A-F]{12}"

_PROPERTY_LINE_RE = re.compile(r"::(\s|$)")

# Checked in this order; only the first kind found is rendered.
_ADMONITIONS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(rf"#\+BEGIN_{kind}([\s\S]*?)#\+END_{kind}", re.IGNORECASE | re.MULTILINE), icon)
    for kind, icon in (("WARNING", "⚠️"), ("NOTE", "ℹ️"), ("TIP", "💡"))
]

_RENDERER_RE = re.compile(r"\{\{renderer.*?\}\}")
_HASHTAG_RE = re.compile(r"\s+#([^#\s()]+)")

_LINK_BLOCK_REF_RE = re.compile(rf"\[([^[\]]*)\]\(\(\(({_UUID})\)\)\)", re.IGNORECASE)
_LINK_PAGE_REF_RE = re.compile(r"\[([^[\]]*)\]\(\[\[(.*?)\]\]\)")
_EMBED_BLOCK_REF_RE = re.compile(rf"\{{\{{embed\s+\(\(({_UUID})\)\)\}}\}}", re.IGNORECASE)
_BLOCK_REF_RE = re.compile(rf"\(\(({_UUID})\)\)", re.IGNORECASE)
_EMBED_PAGE_REF_RE = re.compile(r"\{\{embed\s+\[\[([^[\]]*?)\]\]\}\}")
_PAGE_REF_RE = re.compile(r"\[\[([^[\]]*?)\]\]")

_LEADING_HEADING_RE = re.compile(r"^[#\s]+")

_URL_BODY = r"https?://[-a-zA-Z0-9@:%_+.~#?&/=]{2,256}\.[a-z]{2,4}(?:/[-a-zA-Z0-9@:%_+.~#?&/=]*)?"
_URL_BEFORE_SPACE_RE = re.compile(rf"({_URL_BODY})(?=\s)", re.IGNORECASE)
_URL_WHOLE_RE = re.compile(rf"^({_URL_BODY})$", re.IGNORECASE)

Highlighter = Callable[[str], str]


def strip_property_lines(content: str) -> str:
    """Drop ``key:: value`` lines; they are metadata, not display text."""
    return "\n".join(line for line in content.split("\n") if not _PROPERTY_LINE_RE.search(line))


def render_admonitions(topic: str) -> str:
    for pattern, icon in _ADMONITIONS:
        if pattern.search(topic):
            return pattern.sub(lambda m: f"{icon} {m.group(1).strip()}", topic, count=1)
    return topic


def replace_renderer_macros(topic: str) -> str:
    return _RENDERER_RE.sub(RENDERER_LABEL, topic)


def link_hashtags(topic: str) -> str:
    return _HASHTAG_RE.sub(
        lambda m: " " + page_link(m.group(1), f"#{m.group(1)}", style=TAG_LINK_STYLE), topic
    )


def link_page_refs(topic: str) -> str:
    """Resolve ``{{embed [[page]]}}`` then ``[[page]]``; no lookup needed."""
    topic = _EMBED_PAGE_REF_RE.sub(lambda m: page_link(m.group(1)), topic)
    return _PAGE_REF_RE.sub(lambda m: page_link(m.group(1)), topic)


def strip_leading_headings(topic: str) -> str:
    return _LEADING_HEADING_RE.sub("", topic).strip()


def wrap_bare_urls(topic: str) -> str:
    """Put ``<...>`` around URLs that are not already markdown links."""
    topic = _URL_BEFORE_SPACE_RE.sub(r"<\1>", topic)
    return _URL_WHOLE_RE.sub(r"<\1>", topic)


def ellipsize(text: str, length: int, *, marker: str = "...") -> str:
    if len(text) <= length:
        return text
    return text[: max(length - len(marker), 0)] + marker


def parse_cut(value: Any) -> int | None:
    """Read a ``markMapCut`` value; anything not a positive integer disables it."""
    try:
        length = int(str(value).strip())
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid {} value: {!r}", PROP_CUT, value)
        return None
    return length if length > 0 else None


def apply_cut(topic: str, length: int) -> str:
    return (
        f'<span style="cursor:pointer" title="{html.escape(topic, quote=True)}">'
        f"{ellipsize(topic, length)}</span>"
    )


def apply_background(topic: str, background: str) -> str:
    return (
        f'<span style="padding: 2px 6px; color: {pick_text_color(background)}; '
        f'background-color:{background};">{topic}</span>'
    )


def separate_block_content(topic: str) -> str:
    """Start code fences and lists on their own line, below the heading."""
    if topic.startswith("```") or topic.startswith("- "):
        return "\n" + topic
    return topic


async def replace_async(
    pattern: re.Pattern[str],
    text: str,
    replacer: Callable[[re.Match[str]], Awaitable[str]],
) -> str:
    """Like ``pattern.sub`` with an async replacer.

    All replacements run concurrently; results are spliced back by match
    position, so output order never depends on which lookup finishes first.
    """
    matches = list(pattern.finditer(text))
    if not matches:
        return text
    replacements = await asyncio.gather(*(replacer(m) for m in matches))
    parts: list[str] = []
    last = 0
    for m, replacement in zip(matches, replacements, strict=True):
        parts.append(text[last : m.start()])
        parts.append(replacement)
        last = m.end()
    parts.append(text[last:])
    return "".join(parts)


class TopicResolver:
    """Turns raw block content into a markdown topic.

    Args:
        store: Used to look up referenced and embedded blocks.
        config: Graph settings; ``preferred_format == "org"`` enables the org bridge.
        highlighter: Applied to every topic and to embedded block content.
        org_rules: Conversion rules for org topics.
    """

    def __init__(
        self,
        store: BlockStoreProtocol,
        config: DocumentConfig,
        *,
        highlighter: Highlighter = theme_workflow_tag,
        org_rules: OrgBridgeRules | None = None,
    ) -> None:
        self.store = store
        self.config = config
        self.highlighter = highlighter
        self.org_rules = org_rules or OrgBridgeRules()

    async def resolve(self, content: str, properties: Mapping[str, Any] | None = None) -> str:
        properties = properties or {}
        topic = strip_property_lines(content)
        topic = render_admonitions(topic)
        topic = replace_renderer_macros(topic)
        topic = link_hashtags(topic)
        if topic:
            topic = self.highlighter(topic)
        topic = await self.resolve_references(topic)

        if self.config.preferred_format == "org":
            topic = org_to_markdown(topic, self.org_rules)

        topic = strip_leading_headings(topic)
        topic = wrap_bare_urls(topic)

        cut = properties.get(PROP_CUT)
        if cut:
            length = parse_cut(cut)
            if length is not None:
                topic = apply_cut(topic, length)

        background = properties.get(PROP_BACKGROUND_COLOR)
        if background:
            topic = apply_background(topic, str(background))

        return separate_block_content(topic)

    async def resolve_references(self, topic: str) -> str:
        topic = await replace_async(_LINK_BLOCK_REF_RE, topic, self._labeled_block_link)
        topic = _LINK_PAGE_REF_RE.sub(lambda m: page_link(m.group(2), m.group(1)), topic)
        topic = await replace_async(_EMBED_BLOCK_REF_RE, topic, self._embedded_block_link)
        topic = await replace_async(_BLOCK_REF_RE, topic, self._embedded_block_link)
        return link_page_refs(topic)

    async def _lookup(self, uuid: str) -> Block | None:
        block = await self.store.get_block(uuid)
        if block is None:
            logger.warning("Referenced block not found: {}", uuid)
        return block

    async def _labeled_block_link(self, m: re.Match[str]) -> str:
        label, uuid = m.group(1), m.group(2)
        block = await self._lookup(uuid)
        if block is None:
            return placeholder_link(uuid, label)
        return block_link(block.uuid, label)

    async def _embedded_block_link(self, m: re.Match[str]) -> str:
        uuid = m.group(1)
        block = await self._lookup(uuid)
        if block is None:
            return placeholder_link(uuid, MISSING_BLOCK_LABEL)
        label = strip_property_lines(block.content) or MISSING_BLOCK_LABEL
        return block_link(block.uuid, self.highlighter(label))
