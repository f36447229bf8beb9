"""Terminal renderer and host, used by the CLI."""

from collections.abc import Callable

from loguru import logger
from markdownify import markdownify
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from logseq_markmap.api import LogseqApi
from logseq_markmap.models.node import GenericNode


def node_label(node: GenericNode) -> str:
    """Plain-text label of a node; topics are HTML fragments."""
    text = markdownify(
        node.content, escape_asterisks=False, escape_underscores=False, escape_misc=False
    )
    return " ".join(text.split())


class TerminalRenderer:
    """Draws the tree with rich, honouring folds.

    There is no viewport to pan in a terminal: ``fit`` resets the scale and redraws,
    ``rescale`` only tracks the factor shown in the footer.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.root: GenericNode | None = None
        self.scale = 1.0

    def _build(self, node: GenericNode, branch: Tree) -> None:
        for child in node.children:
            label = Text(node_label(child) or "·")
            if child.fold and child.children:
                label.append(f"  ▸ {len(child.children)}", style="dim")
                branch.add(label)
                continue
            self._build(child, branch.add(label))

    def draw(self) -> None:
        if self.root is None:
            return
        tree = Tree(Text(node_label(self.root) or "·", style="bold"))
        if not (self.root.fold and self.root.children):
            self._build(self.root, tree)
        self.console.print(tree)
        if self.scale != 1.0:
            self.console.print(f"[dim]zoom {self.scale:.2f}[/dim]")

    def set_data(self, node: GenericNode) -> None:
        self.root = node
        self.draw()

    def fit(self) -> None:
        self.scale = 1.0
        self.draw()

    def rescale(self, factor: float) -> None:
        self.scale *= factor
        logger.debug("Zoom {:.2f}", self.scale)


class TerminalHost:
    """Host hooks for the terminal browser.

    With an API client, navigation is forwarded to the running Logseq app; without
    one (rendering from a file) it is only recorded.

    Args:
        api: Logseq client, or None when offline.
        on_navigate: Called after the app was sent to another page.
        on_refresh: Called to re-render after navigating.
    """

    def __init__(
        self,
        api: LogseqApi | None = None,
        *,
        on_navigate: Callable[[], object] | None = None,
        on_refresh: Callable[[], object] | None = None,
    ) -> None:
        self.api = api
        self.on_navigate = on_navigate
        self.on_refresh = on_refresh
        self.visited: list[str] = []
        self.closed = False

    def push_state(self, name: str) -> None:
        self.visited.append(name)
        if self.api is None:
            logger.info("Offline, not navigating to {!r}", name)
            return
        self.api.push_state(name)
        self._navigated()

    def _navigated(self) -> None:
        if self.on_navigate is not None:
            self.on_navigate()

    def refresh(self) -> None:
        if self.on_refresh is not None:
            self.on_refresh()

    def go_back(self) -> None:
        if self.api is not None:
            self.api.invoke_external_command("logseq.go/backward")
            self._navigated()
            self.refresh()

    def go_forward(self) -> None:
        if self.api is not None:
            self.api.invoke_external_command("logseq.go/forward")
            self._navigated()
            self.refresh()

    def close(self) -> None:
        self.closed = True
