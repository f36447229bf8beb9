"""Models shared with the markdown compiler and the renderer."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass
class GenericNode:
    """A node of the compiled mind-map tree.

    Mutable: navigation commands flip ``payload["fold"]`` in place.
    """

    content: str
    children: list["GenericNode"] = field(default_factory=list)
    payload: dict[str, Any] = field(default_factory=dict)
    depth: int = 0
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def fold(self) -> bool:
        return bool(self.payload.get("fold", False))

    @fold.setter
    def fold(self, value: bool) -> None:
        self.payload["fold"] = value

    @property
    def block_index(self) -> int | None:
        return self.payload.get("index")

    def walk(self) -> Iterator["GenericNode"]:
        """Yield this node and every descendant, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class TransformResult:
    """Output of a markdown compile: the tree and the features it used."""

    root: GenericNode
    features: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Assets:
    """Stylesheets and scripts the renderer must load for a compiled tree."""

    styles: tuple[str, ...] = ()
    scripts: tuple[str, ...] = ()


class LinkKind(str, Enum):
    """What a generated link points at."""

    PAGE = "page"
    BLOCK = "block"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class LinkTarget:
    """Navigation target carried by a generated link.

    ``target`` is a page name or a canonical 8-4-4-4-12 block uuid.
    """

    kind: LinkKind
    target: str
