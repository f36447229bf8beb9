"""Compile heading-structured markdown into a mind-map node tree.

The tree follows markmap's shape: the H1 is the root, headings nest by level, and
list items and other block content under a heading become its children. Node
content is rendered HTML.
"""

import html
from collections.abc import Callable
from posixpath import join as posix_join
from typing import Any

from loguru import logger
from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token
from mdit_py_plugins.dollarmath import dollarmath_plugin

from logseq_markmap.config import CODE_HIGHLIGHT_STYLES, GRAPH_PATH_PREFIX, KATEX_STYLES
from logseq_markmap.core.markup.attributes import match_attributes
from logseq_markmap.core.tree.assembly import INDEX_MARKER_RE
from logseq_markmap.errors import CompilerError
from logseq_markmap.models.node import Assets, GenericNode, TransformResult

_LIST_OPEN = ("bullet_list_open", "ordered_list_open")
_MATH_TOKENS = ("math_inline", "math_inline_double", "math_block", "math_block_label")


def graph_dir(current_graph: str) -> str:
    """``logseq_local_/home/me/notes`` -> ``/home/me/notes``."""
    if current_graph.startswith(GRAPH_PATH_PREFIX):
        return current_graph[len(GRAPH_PATH_PREFIX) :]
    return current_graph


def _render_link_open(self: Any, tokens: list[Token], idx: int, options: Any, env: Any) -> str:
    if tokens[idx].attrGet("href"):
        tokens[idx].attrSet("target", "_blank")
    return self.renderToken(tokens, idx, options, env)


def _mark_rule(state: StateInline, silent: bool) -> bool:
    """``==text==`` -> ``<mark>text</mark>``; the inner text is parsed as inline markdown."""
    start = state.pos
    if state.src[start : start + 2] != "==":
        return False
    end = state.src.find("==", start + 2, state.posMax)
    if end <= start + 2:
        return False
    if state.src[start + 2].isspace() or state.src[end - 1].isspace():
        return False

    if not silent:
        old_max = state.posMax
        state.pos = start + 2
        state.posMax = end
        state.push("mark_open", "mark", 1).markup = "=="
        state.md.inline.tokenize(state)
        state.push("mark_close", "mark", -1).markup = "=="
        state.posMax = old_max
    state.pos = end + 2
    return True


def _uses_math(tokens: list[Token]) -> bool:
    return any(
        tok.type in _MATH_TOKENS or any(c.type in _MATH_TOKENS for c in tok.children or [])
        for tok in tokens
    )


class MarkdownTransformer:
    """markdown-it-py backed compiler.

    Args:
        graph_path: Local graph directory; relative ``../assets`` image paths are
            resolved against it.
    """

    def __init__(self, *, graph_path: str = "") -> None:
        self.graph_path = graph_dir(graph_path)
        self.md = (
            MarkdownIt("commonmark", {"html": True})
            .enable(["table", "strikethrough"])
            .use(dollarmath_plugin, allow_digits=False)
        )
        self.md.inline.ruler.before("emphasis", "mark", _mark_rule)
        self.md.add_render_rule("link_open", _render_link_open)
        self.md.add_render_rule("image", self._make_image_rule())

    def _make_image_rule(self) -> Callable[..., str]:
        graph_path = self.graph_path

        def render_image(renderer: Any, tokens: list[Token], idx: int, options: Any, env: Any) -> str:
            attrs = match_attributes(renderer.image(tokens, idx, options, env))
            src = attrs.get("src") or attrs.get("href") or ""
            alt = attrs.get("alt") or attrs.get("title") or ""

            # Only POSIX graph paths are handled.
            if not src.startswith("http") and src.startswith(".."):
                src = posix_join(graph_path, src.replace("../", ""))

            if src.rsplit(".", 1)[-1].lower() == "pdf":
                return f"📄 {alt}"
            return (
                f'<a target="_blank" title="{html.escape(alt)}" data-lightbox="gallery" '
                f'href="{html.escape(src)}">🖼 {html.escape(alt)}</a>'
            )

        return render_image

    def transform(self, markdown: str) -> TransformResult:
        try:
            env: dict[str, Any] = {}
            tokens = self.md.parse(markdown, env)
            features: set[str] = set()
            root = self._build_tree(tokens, env, features)
            if _uses_math(tokens):
                features.add("katex")
        except Exception as exc:
            msg = f"Cannot compile markdown document: {exc}"
            raise CompilerError(msg) from exc
        logger.debug("Compiled {} nodes", sum(1 for _ in root.walk()))
        return TransformResult(root=root, features=frozenset(features))

    def get_used_assets(self, features: frozenset[str]) -> Assets:
        styles: list[str] = []
        if "code" in features:
            styles.extend(CODE_HIGHLIGHT_STYLES)
        if "katex" in features:
            styles.extend(KATEX_STYLES)
        return Assets(styles=tuple(styles))

    def _inline(self, token: Token, env: dict[str, Any]) -> tuple[str, int | None]:
        """Render an inline token, lifting out the block index marker."""
        rendered = self.md.renderer.renderInline(token.children or [], self.md.options, env)
        m = INDEX_MARKER_RE.search(rendered)
        index = int(m.group(1)) if m else None
        return INDEX_MARKER_RE.sub("", rendered).strip(), index

    def _block_html(self, tokens: list[Token], env: dict[str, Any]) -> str:
        return self.md.renderer.render(tokens, self.md.options, env).strip()

    def _build_tree(
        self, tokens: list[Token], env: dict[str, Any], features: set[str]
    ) -> GenericNode:
        root = GenericNode(content="", depth=0)
        # (heading level, node); the root sits below every heading level
        stack: list[tuple[int, GenericNode]] = [(0, root)]
        i = 0
        while i < len(tokens):
            tok = tokens[i]
            parent = stack[-1][1]

            if tok.type == "heading_open":
                level = int(tok.tag[1:])
                content, index = self._inline(tokens[i + 1], env)
                if level == 1 and root is parent and not root.content and not root.children:
                    root.content = content
                    stack[0] = (1, root)
                else:
                    while len(stack) > 1 and stack[-1][0] >= level:
                        stack.pop()
                    parent = stack[-1][1]
                    node = GenericNode(content=content, depth=parent.depth + 1)
                    if index is not None:
                        node.payload["index"] = index
                    parent.children.append(node)
                    stack.append((level, node))
                i += 3
                continue

            if tok.type in _LIST_OPEN:
                i = self._consume_list(tokens, i, parent, env, features)
                continue

            end = self._block_end(tokens, i)
            if tok.type in ("fence", "code_block"):
                features.add("code")
            content = self._block_html(tokens[i : end + 1], env)
            if content:
                parent.children.append(GenericNode(content=content, depth=parent.depth + 1))
            i = end + 1
        return root

    @staticmethod
    def _block_end(tokens: list[Token], start: int) -> int:
        """Index of the token closing the block opened at ``start``."""
        if tokens[start].nesting != 1:
            return start
        level = tokens[start].level
        close = tokens[start].type.replace("_open", "_close")
        for j in range(start + 1, len(tokens)):
            if tokens[j].type == close and tokens[j].level == level:
                return j
        msg = f"Unclosed {tokens[start].type} at token {start}"
        raise ValueError(msg)

    def _consume_list(
        self,
        tokens: list[Token],
        start: int,
        parent: GenericNode,
        env: dict[str, Any],
        features: set[str],
    ) -> int:
        """Append one node per list item to ``parent``; return the index after the list."""
        end = self._block_end(tokens, start)
        i = start + 1
        while i < end:
            tok = tokens[i]
            if tok.type != "list_item_open":
                i += 1
                continue
            item = GenericNode(content="", depth=parent.depth + 1)
            parent.children.append(item)
            item_end = self._block_end(tokens, i)
            i += 1
            parts: list[str] = []
            while i < item_end:
                inner = tokens[i]
                if inner.type in _LIST_OPEN:
                    i = self._consume_list(tokens, i, item, env, features)
                    continue
                if inner.type == "inline":
                    parts.append(self._inline(inner, env)[0])
                elif inner.type in ("fence", "code_block"):
                    features.add("code")
                    parts.append(self._block_html([inner], env))
                elif inner.type in _MATH_TOKENS:
                    parts.append(self._block_html([inner], env))
                i += 1
            item.content = "<br>".join(p for p in parts if p)
            i = item_end + 1
        return end + 1
