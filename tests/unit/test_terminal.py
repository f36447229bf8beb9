"""Tests for the terminal renderer and host."""

import io
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from logseq_markmap.navigation.folding import hide_all, show_all
from logseq_markmap.terminal import TerminalHost, TerminalRenderer, node_label
from tests.unit.fakes import node


def _renderer() -> tuple[TerminalRenderer, io.StringIO]:
    out = io.StringIO()
    return TerminalRenderer(Console(file=out, width=100)), out


def test_node_label_flattens_html() -> None:
    label = node_label(node('<code style="x">TODO</code> Write <a class="mm-link">docs</a>'))
    assert label == "`TODO` Write docs"


def test_draws_unfolded_tree() -> None:
    renderer, out = _renderer()
    root = node("Root", node("A", node("A1")), node("B"))
    show_all(root)
    renderer.set_data(root)
    text = out.getvalue()
    for label in ("Root", "A", "A1", "B"):
        assert label in text


def test_folded_nodes_hide_their_children() -> None:
    renderer, out = _renderer()
    root = node("Root", node("Parent", node("Hidden child"), node("Other")))
    show_all(root)
    root.children[0].fold = True
    renderer.set_data(root)
    text = out.getvalue()
    assert "Parent" in text
    assert "▸ 2" in text
    assert "Hidden child" not in text


def test_fully_folded_root_shows_only_the_root() -> None:
    renderer, out = _renderer()
    root = node("Root", node("Child"))
    hide_all(root)
    renderer.set_data(root)
    assert "Child" not in out.getvalue()


def test_fit_and_rescale() -> None:
    renderer, out = _renderer()
    renderer.set_data(node("Root"))
    renderer.rescale(1.25)
    assert renderer.scale == 1.25
    renderer.fit()
    assert renderer.scale == 1.0
    assert out.getvalue().count("Root") == 2


def test_host_forwards_navigation_to_the_app() -> None:
    api = MagicMock()
    refreshed: list[bool] = []
    host = TerminalHost(api, on_refresh=lambda: refreshed.append(True))

    host.push_state("Python")
    host.refresh()
    host.go_back()
    host.go_forward()

    api.push_state.assert_called_once_with("Python")
    assert [c.args for c in api.invoke_external_command.call_args_list] == [
        ("logseq.go/backward",),
        ("logseq.go/forward",),
    ]
    assert len(refreshed) == 3


def test_host_reports_navigation_before_refreshing() -> None:
    events: list[str] = []
    host = TerminalHost(
        MagicMock(),
        on_navigate=lambda: events.append("navigate"),
        on_refresh=lambda: events.append("refresh"),
    )

    host.push_state("Python")
    host.refresh()
    host.go_back()

    assert events == ["navigate", "refresh", "navigate", "refresh"]


def test_offline_host_only_records() -> None:
    host = TerminalHost(on_navigate=lambda: pytest.fail("offline host navigated"))
    host.push_state("Python")
    host.go_back()
    host.close()
    assert host.visited == ["Python"]
    assert host.closed
