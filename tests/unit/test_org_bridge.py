"""Tests for the org -> HTML -> markdown bridge."""

from unittest.mock import patch

import pytest

from logseq_markmap.core.markup.org_bridge import OrgBridgeRules, html_to_markdown, org_to_markdown
from logseq_markmap.errors import DialectConversionError, MarkmapError


def test_strikethrough_uses_configured_marker() -> None:
    assert html_to_markdown("<p>a <del>b</del></p>", OrgBridgeRules()) == "a ~~b~~"
    assert html_to_markdown("<p><s>gone</s></p>", OrgBridgeRules(strikethrough="--")) == "--gone--"


def test_caret_emphasis_is_folded_into_marker() -> None:
    assert html_to_markdown("<p>^^key^^ point</p>", OrgBridgeRules()) == "~~key~~ point"


def test_headings_are_atx() -> None:
    assert html_to_markdown("<h2>Title</h2>", OrgBridgeRules()) == "## Title"


def test_asterisks_and_underscores_are_not_escaped() -> None:
    assert html_to_markdown("<p>a*b snake_case</p>", OrgBridgeRules()) == "a*b snake_case"


def test_org_text_converts_to_plain_markdown() -> None:
    result = org_to_markdown("plain words")
    assert "plain words" in result
    assert "<" not in result


def test_conversion_failure_is_reported() -> None:
    with patch(
        "logseq_markmap.core.markup.org_bridge.org_to_html", side_effect=RuntimeError("boom")
    ):
        with pytest.raises(DialectConversionError, match="boom") as excinfo:
            org_to_markdown("* heading")
    assert isinstance(excinfo.value, MarkmapError)
