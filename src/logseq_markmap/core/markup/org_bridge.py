"""Convert org-mode topics to markdown.

There is no direct org -> markdown path, so text goes org -> HTML (org-python)
-> markdown (markdownify), then a few plain-text rules are applied.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger
from markdownify import ATX, MarkdownConverter
from orgpython import to_html

from logseq_markmap.errors import DialectConversionError


@dataclass(frozen=True)
class OrgBridgeRules:
    """Knobs for the org -> HTML -> markdown conversion."""

    heading_style: str = ATX
    code_language: str = ""
    strikethrough: str = "~~"
    # org's ^^highlight^^ has no markdown equivalent; it is folded into this marker.
    caret_emphasis: str = "~~"
    header_offset: int = 1


class _TopicConverter(MarkdownConverter):
    """markdownify converter with a configurable strikethrough marker."""

    def __init__(self, rules: OrgBridgeRules, **options: Any) -> None:
        super().__init__(**options)
        self._strike = rules.strikethrough

    def convert_del(self, el: Any, text: str, *args: Any, **kwargs: Any) -> str:
        text = text.strip()
        return f"{self._strike}{text}{self._strike}" if text else ""

    convert_s = convert_del
    convert_strike = convert_del


def org_to_html(text: str, rules: OrgBridgeRules) -> str:
    return to_html(text, toc=False, offset=rules.header_offset)


def html_to_markdown(markup: str, rules: OrgBridgeRules) -> str:
    converter = _TopicConverter(
        rules,
        heading_style=rules.heading_style,
        code_language=rules.code_language,
        escape_asterisks=False,
        escape_underscores=False,
        escape_misc=False,
    )
    markdown = converter.convert(markup).strip()
    return markdown.replace("^^", rules.caret_emphasis)


def org_to_markdown(text: str, rules: OrgBridgeRules | None = None) -> str:
    """Convert one org topic to markdown.

    Raises:
        DialectConversionError: if either stage fails; the render is aborted.
    """
    rules = rules or OrgBridgeRules()
    try:
        return html_to_markdown(org_to_html(text, rules), rules)
    except Exception as exc:
        logger.debug("org conversion failed for {!r}", text[:64])
        msg = f"Cannot convert org topic {text[:64]!r}: {exc}"
        raise DialectConversionError(msg) from exc
