"""Interactive fold/focus state of one rendered mind-map."""

from loguru import logger

from logseq_markmap.config import MAX_HEADING_DEPTH, ZOOM_IN_FACTOR, ZOOM_OUT_FACTOR
from logseq_markmap.models.node import GenericNode
from logseq_markmap.navigation.folding import (
    collapse_step_by_step,
    expand_level,
    expand_step_by_step,
    hide_all,
    show_all,
)
from logseq_markmap.protocols import RendererProtocol


class NavigationSession:
    """View state of one full render; discarded when the next render completes.

    ``current_root`` is the node on screen: the compiled root, or a descendant after
    focusing in. ``stack`` holds the nodes focused out of, ``pointer_stack`` the
    sibling index to return to, and ``pointer`` the index of ``current_root`` among
    the children of ``stack[-1]``.

    ``total_level`` is how many generations exist below the focus root (capped at
    MAX_HEADING_DEPTH); ``current_level`` is how many are expanded. Both move by
    exactly one per focus in/out and are untouched by sibling moves.

    Every command that changes what is visible ends with one ``renderer.set_data``.
    """

    def __init__(
        self,
        root: GenericNode,
        total_level: int,
        renderer: RendererProtocol,
        *,
        collapse_mode: str | None = None,
    ) -> None:
        self.renderer = renderer
        self.collapse_mode = collapse_mode
        self.original_root = root
        self.original_total_level = max(0, min(total_level, MAX_HEADING_DEPTH))
        self.current_root = root
        self.stack: list[GenericNode] = []
        self.pointer_stack: list[int] = []
        self.pointer = 0
        self.total_level = self.original_total_level
        self.current_level = self.total_level
        # (total_level, current_level) before each focus in, parallel to ``stack``
        self._level_stack: list[tuple[int, int]] = []

    def start(self) -> None:
        """Expand the tree for display and hand it to the renderer."""
        self._show_all(self.current_root)
        self._push()

    # --- folding ---

    def _push(self) -> None:
        self.renderer.set_data(self.current_root)

    def _show_all(self, node: GenericNode) -> None:
        forced = show_all(node, self.collapse_mode)
        if forced is not None:
            self.current_level = min(forced, self.total_level)

    def collapse_all(self) -> None:
        self.current_level = 0
        hide_all(self.current_root)
        self._push()

    def expand_all(self) -> None:
        self.current_level = self.total_level
        self._show_all(self.current_root)
        self._push()

    def expand_to(self, level: int) -> None:
        """Show exactly ``level`` generations below the focus root."""
        hide_all(self.current_root)
        expand_level(self.current_root, level)
        self.current_level = max(0, min(level, self.total_level))
        self._push()

    def level_down(self) -> None:
        if self.current_level > 0:
            self.current_level -= 1
        hide_all(self.current_root)
        expand_level(self.current_root, self.current_level)
        self._push()

    def level_up(self) -> None:
        if self.current_level < self.total_level:
            self.current_level += 1
        hide_all(self.current_root)
        expand_level(self.current_root, self.current_level)
        self._push()

    def expand_step(self) -> bool:
        changed = expand_step_by_step(self.current_root)
        self._push()
        return changed

    def collapse_step(self) -> bool:
        changed = collapse_step_by_step(self.current_root)
        self._push()
        return changed

    # --- focus ---

    def focus_in(self, node: GenericNode | None = None) -> bool:
        """Narrow the view to the first child of ``node`` (default: the current root).

        Returns:
            False, changing nothing, if the node has no children.
        """
        node = node or self.current_root
        if not node.children:
            logger.debug("Cannot focus in: node has no children")
            return False
        self.pointer_stack.append(self.pointer)
        self.stack.append(node)
        self._level_stack.append((self.total_level, self.current_level))
        self.pointer = 0
        self.current_root = node.children[0]
        self.total_level = max(0, self.total_level - 1)
        self.current_level = self.total_level
        show_all(self.current_root, self.collapse_mode)
        self._push()
        return True

    def focus_out(self) -> bool:
        if not self.stack:
            return False
        self.current_root = self.stack.pop()
        self.pointer = self.pointer_stack.pop()
        self.total_level, self.current_level = self._level_stack.pop()
        show_all(self.current_root, self.collapse_mode)
        self._push()
        return True

    def _focus_sibling(self, offset: int) -> bool:
        if not self.stack:
            return False
        siblings = self.stack[-1].children
        target = self.pointer + offset
        if not 0 <= target < len(siblings):
            return False
        self.pointer = target
        self.current_root = siblings[target]
        self._push()
        return True

    def focus_next(self) -> bool:
        return self._focus_sibling(1)

    def focus_previous(self) -> bool:
        return self._focus_sibling(-1)

    def focus_reset(self) -> None:
        """Drop every focus frame and show the whole tree again."""
        self.current_root = self.original_root
        self.stack.clear()
        self.pointer_stack.clear()
        self._level_stack.clear()
        self.pointer = 0
        self.total_level = self.original_total_level
        self.current_level = self.total_level
        show_all(self.current_root, self.collapse_mode)
        self._push()

    # --- viewport ---

    def fit(self) -> None:
        self.renderer.fit()

    def zoom_in(self) -> None:
        self.renderer.rescale(ZOOM_IN_FACTOR)

    def zoom_out(self) -> None:
        self.renderer.rescale(ZOOM_OUT_FACTOR)
