"""Tests for compiling markdown into a node tree."""

from unittest.mock import patch

import pytest

from logseq_markmap.compiler import MarkdownTransformer, graph_dir
from logseq_markmap.config import CODE_HIGHLIGHT_STYLES, KATEX_STYLES
from logseq_markmap.errors import CompilerError
from logseq_markmap.models.node import Assets

DOC = (
    "# Projects\n\n"
    "## Alpha <!--mm:0-->\n"
    "### Alpha one <!--mm:1-->\n\n"
    "## Beta <!--mm:2-->\n"
)


def test_headings_nest_under_the_title() -> None:
    root = MarkdownTransformer().transform(DOC).root
    assert root.content == "Projects"
    assert [c.content for c in root.children] == ["Alpha", "Beta"]
    alpha = root.children[0]
    assert [c.content for c in alpha.children] == ["Alpha one"]
    assert [n.block_index for n in root.walk()] == [None, 0, 1, 2]
    assert [n.depth for n in root.walk()] == [0, 1, 2, 1]


def test_list_items_become_children() -> None:
    root = MarkdownTransformer().transform(
        "# T\n\n## Topic <!--mm:0-->\n- one\n- two\n  - nested\n"
    ).root
    [topic] = root.children
    assert [c.content for c in topic.children] == ["one", "two"]
    assert [c.content for c in topic.children[1].children] == ["nested"]
    assert all(c.block_index is None for c in topic.children)


def test_paragraphs_below_a_heading() -> None:
    root = MarkdownTransformer().transform("# T\n\n## Topic <!--mm:0-->\nsecond line\n").root
    [topic] = root.children
    assert [c.content for c in topic.children] == ["<p>second line</p>"]


def test_code_blocks_request_highlighting() -> None:
    transformer = MarkdownTransformer()
    result = transformer.transform("# T\n\n## <!--mm:0-->\n```py\nx = 1\n```\n")
    [topic] = result.root.children
    assert topic.content == ""
    assert topic.block_index == 0
    assert "language-py" in topic.children[0].content
    assert result.features == frozenset({"code"})
    assert transformer.get_used_assets(result.features) == Assets(styles=tuple(CODE_HIGHLIGHT_STYLES))
    assert transformer.get_used_assets(frozenset()) == Assets()


def test_relative_images_are_resolved_against_the_graph() -> None:
    transformer = MarkdownTransformer(graph_path="logseq_local_/home/me/notes")
    root = transformer.transform("# T\n\n## ![cat](../assets/cat.png) <!--mm:0-->\n").root
    content = root.children[0].content
    assert 'href="/home/me/notes/assets/cat.png"' in content
    assert 'data-lightbox="gallery"' in content
    assert "🖼 cat" in content


def test_pdf_images_become_labels() -> None:
    root = MarkdownTransformer().transform("# T\n\n## ![report](../assets/q3.pdf) <!--mm:0-->\n").root
    assert root.children[0].content == "📄 report"


def test_links_open_in_a_new_window() -> None:
    root = MarkdownTransformer().transform("# T\n\n## [site](https://example.com) <!--mm:0-->\n").root
    assert 'target="_blank"' in root.children[0].content


def test_inline_html_links_pass_through() -> None:
    link = '<a class="mm-link" style="cursor: pointer" data-kind="page" data-target="X">X</a>'
    root = MarkdownTransformer().transform(f"# T\n\n## See {link} <!--mm:0-->\n").root
    assert root.children[0].content == f"See {link}"


def test_highlight_marks() -> None:
    root = MarkdownTransformer().transform("# T\n\n## a ==hot== b <!--mm:0-->\n- ==**bold** mark==\n").root
    [topic] = root.children
    assert topic.content == "a <mark>hot</mark> b"
    assert [c.content for c in topic.children] == ["<mark><strong>bold</strong> mark</mark>"]


def test_equals_signs_without_highlight_stay_text() -> None:
    root = MarkdownTransformer().transform("# T\n\n## x == y <!--mm:0-->\n").root
    assert root.children[0].content == "x == y"


def test_math_requests_katex() -> None:
    transformer = MarkdownTransformer()
    result = transformer.transform("# T\n\n## area $a^2$ <!--mm:0-->\n")
    assert 'class="math inline"' in result.root.children[0].content
    assert result.features == frozenset({"katex"})
    assert transformer.get_used_assets(result.features) == Assets(styles=tuple(KATEX_STYLES))


def test_prices_are_not_math() -> None:
    result = MarkdownTransformer().transform("# T\n\n## $5 and $10 <!--mm:0-->\n")
    assert result.root.children[0].content == "$5 and $10"
    assert result.features == frozenset()


def test_empty_title() -> None:
    root = MarkdownTransformer().transform("# \n\n## Only <!--mm:0-->\n").root
    assert root.content == ""
    assert [c.content for c in root.children] == ["Only"]


def test_compile_failure_is_wrapped() -> None:
    transformer = MarkdownTransformer()
    with patch.object(transformer.md, "parse", side_effect=RuntimeError("bad tokens")):
        with pytest.raises(CompilerError, match="bad tokens"):
            transformer.transform(DOC)


def test_graph_dir() -> None:
    assert graph_dir("logseq_local_/home/me/notes") == "/home/me/notes"
    assert graph_dir("/plain") == "/plain"
