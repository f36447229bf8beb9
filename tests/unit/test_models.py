"""Tests for domain models."""

import pytest

from logseq_markmap.models.block import Block, Page
from logseq_markmap.models.node import GenericNode


def test_block_is_frozen() -> None:
    block = Block(uuid="a", content="A")
    with pytest.raises(AttributeError):
        block.content = "changed"  # type: ignore[misc]


@pytest.mark.parametrize(("value", "expected"), [(True, True), ("true", True), (False, False), (None, False)])
def test_block_collapsed(value: object, expected: bool) -> None:
    assert Block(uuid="a", content="A", properties={"collapsed": value}).collapsed is expected


def test_placeholder_block() -> None:
    overflow = (Block(uuid="x", content="X"),)
    placeholder = Block.make_placeholder(overflow)
    assert placeholder.content == "..."
    assert placeholder.collapsed
    assert placeholder.placeholder
    assert placeholder.children == overflow


def test_page_is_block_page_only_without_original_name() -> None:
    assert not Page(name="p", original_name="P", content="text").is_block_page
    assert not Page(name="p").is_block_page
    assert Page(name="", content="zoomed").is_block_page


def test_node_fold_and_index() -> None:
    n = GenericNode(content="x")
    assert not n.fold
    assert n.block_index is None
    n.fold = True
    assert n.payload == {"fold": True}


def test_node_walk_is_pre_order() -> None:
    tree = GenericNode("r", [GenericNode("a", [GenericNode("a1")]), GenericNode("b")])
    assert [n.content for n in tree.walk()] == ["r", "a", "a1", "b"]
