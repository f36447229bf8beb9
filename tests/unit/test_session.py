"""Tests for the fold/focus state machine."""

import pytest

from logseq_markmap.models.node import GenericNode
from logseq_markmap.navigation.session import NavigationSession
from tests.unit.fakes import FakeRenderer, folds, node


def _tree() -> GenericNode:
    return node("root", node("A", node("A1", node("A1x")), node("A2")), node("B", node("B1")), node("C"))


@pytest.fixture
def session(renderer: FakeRenderer) -> NavigationSession:
    s = NavigationSession(_tree(), 3, renderer)
    s.start()
    return s


def test_start_shows_everything(session: NavigationSession, renderer: FakeRenderer) -> None:
    assert renderer.frames == [session.original_root]
    assert not any(folds(session.current_root).values())
    assert (session.total_level, session.current_level) == (3, 3)


def test_start_respects_declared_collapse(renderer: FakeRenderer) -> None:
    root = _tree()
    root.children[1].properties["collapsed"] = True
    s = NavigationSession(root, 3, renderer)
    s.start()
    assert root.children[1].fold
    assert s.current_level == 1


def test_total_level_is_capped() -> None:
    s = NavigationSession(_tree(), 9, FakeRenderer())
    assert s.original_total_level == 5
    assert NavigationSession(_tree(), -2, FakeRenderer()).total_level == 0


def test_every_command_pushes_once(session: NavigationSession, renderer: FakeRenderer) -> None:
    commands = [
        session.collapse_all,
        session.expand_all,
        lambda: session.expand_to(2),
        session.level_down,
        session.level_up,
        session.expand_step,
        session.collapse_step,
        session.focus_in,
        session.focus_next,
        session.focus_previous,
        session.focus_out,
        session.focus_reset,
    ]
    for command in commands:
        before = len(renderer.frames)
        command()
        assert len(renderer.frames) == before + 1


def test_collapse_all_and_expand_all(session: NavigationSession) -> None:
    session.collapse_all()
    assert session.current_level == 0
    assert all(folds(session.current_root).values())
    session.expand_all()
    assert session.current_level == 3
    assert not any(folds(session.current_root).values())


def test_expand_to_clamps_current_level(session: NavigationSession) -> None:
    session.expand_to(5)
    assert session.current_level == 3
    session.expand_to(1)
    assert session.current_level == 1
    state = folds(session.current_root)
    assert not state["root"]
    assert state["A"]


def test_level_down_and_up_stay_in_bounds(session: NavigationSession) -> None:
    for _ in range(5):
        session.level_down()
    assert session.current_level == 0
    assert session.current_root.fold
    for _ in range(5):
        session.level_up()
    assert session.current_level == 3
    assert not folds(session.current_root)["A1"]


def test_focus_in_and_out_are_symmetric(session: NavigationSession, renderer: FakeRenderer) -> None:
    session.expand_to(2)
    assert session.focus_in()
    assert session.current_root.content == "A"
    assert session.stack == [session.original_root]
    assert (session.total_level, session.current_level) == (2, 2)
    assert renderer.frames[-1] is session.current_root

    assert session.focus_out()
    assert session.current_root is session.original_root
    assert session.stack == []
    assert session.pointer == 0
    assert (session.total_level, session.current_level) == (3, 2)


def test_focus_in_on_a_leaf_changes_nothing(session: NavigationSession, renderer: FakeRenderer) -> None:
    leaf = session.original_root.children[2]
    frames = len(renderer.frames)
    assert not session.focus_in(leaf)
    assert session.current_root is session.original_root
    assert len(renderer.frames) == frames


def test_focus_out_at_top_is_a_no_op(session: NavigationSession) -> None:
    assert not session.focus_out()
    assert session.current_root is session.original_root


def test_sibling_moves_clamp_at_the_ends(session: NavigationSession) -> None:
    session.focus_in()
    assert not session.focus_previous()
    assert session.focus_next()
    assert session.current_root.content == "B"
    assert session.focus_next()
    assert session.current_root.content == "C"
    assert not session.focus_next()
    assert session.pointer == 2
    assert session.total_level == 2


def test_sibling_moves_need_a_parent(session: NavigationSession) -> None:
    assert not session.focus_next()
    assert not session.focus_previous()


def test_focus_out_returns_to_the_sibling_position(session: NavigationSession) -> None:
    session.focus_in()
    session.focus_next()
    session.focus_in()
    assert session.current_root.content == "B1"
    assert session.pointer_stack == [0, 1]
    session.focus_out()
    assert session.current_root.content == "B"
    assert session.pointer == 1
    session.focus_out()
    assert session.current_root is session.original_root
    assert session.pointer == 0


def test_focus_reset_restores_the_original_view(session: NavigationSession) -> None:
    session.focus_in()
    session.focus_in()
    session.collapse_all()
    session.focus_reset()
    assert session.current_root is session.original_root
    assert session.stack == []
    assert session.pointer_stack == []
    assert (session.total_level, session.current_level) == (3, 3)
    assert not any(folds(session.current_root).values())


def test_viewport_commands(session: NavigationSession, renderer: FakeRenderer) -> None:
    session.fit()
    session.zoom_in()
    session.zoom_out()
    assert renderer.fits == 1
    assert renderer.scales == [1.25, 0.8]
