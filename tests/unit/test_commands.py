"""Tests for key dispatch."""

from logseq_markmap.navigation.commands import KEY_HELP, dispatch_key
from logseq_markmap.navigation.session import NavigationSession
from tests.unit.fakes import FakeHost, FakeRenderer, node


def _session() -> NavigationSession:
    s = NavigationSession(node("root", node("A", node("A1")), node("B")), 2, FakeRenderer())
    s.start()
    return s


def test_focus_keys() -> None:
    s = _session()
    assert dispatch_key(".", s)
    assert s.current_root.content == "A"
    assert dispatch_key("n", s)
    assert s.current_root.content == "B"
    assert dispatch_key("p", s)
    assert dispatch_key("b", s)
    assert s.current_root is s.original_root
    dispatch_key(".", s)
    assert dispatch_key(",", s)
    assert s.current_root is s.original_root


def test_level_keys() -> None:
    s = _session()
    dispatch_key("0", s)
    assert s.current_level == 0
    dispatch_key("1", s)
    assert s.current_level == 1
    dispatch_key("l", s)
    assert s.current_level == 2
    dispatch_key("h", s)
    assert s.current_level == 1
    dispatch_key("9", s)
    assert s.current_level == 2


def test_viewport_keys() -> None:
    s = _session()
    renderer = s.renderer
    assert isinstance(renderer, FakeRenderer)
    dispatch_key("space", s)
    dispatch_key("=", s)
    dispatch_key("-", s)
    assert renderer.fits == 1
    assert renderer.scales == [1.25, 0.8]


def test_unknown_key() -> None:
    assert not dispatch_key("x", _session())


def test_keys_before_first_render_are_ignored() -> None:
    assert not dispatch_key(".", None)


def test_host_keys() -> None:
    host = FakeHost()
    assert dispatch_key("cmd+[", None, host)
    assert dispatch_key("cmd+]", None, host)
    assert host.history == ["back", "forward"]
    assert dispatch_key("esc", None, host)
    assert host.closed
    assert not dispatch_key("q", None)


def test_help_covers_the_bindings() -> None:
    assert "." in KEY_HELP
    assert "1-5" in KEY_HELP
