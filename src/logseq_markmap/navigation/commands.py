"""Keyboard commands of the mind-map view."""

from collections.abc import Callable

from loguru import logger

from logseq_markmap.navigation.session import NavigationSession
from logseq_markmap.protocols import HostProtocol

SessionCommand = Callable[[NavigationSession], object]

SESSION_KEYS: dict[str, SessionCommand] = {
    "p": NavigationSession.focus_previous,
    "n": NavigationSession.focus_next,
    "b": NavigationSession.focus_out,
    ".": NavigationSession.focus_in,
    ",": NavigationSession.focus_reset,
    "0": NavigationSession.collapse_all,
    "9": NavigationSession.expand_all,
    "h": NavigationSession.level_down,
    "l": NavigationSession.level_up,
    "j": NavigationSession.expand_step,
    "k": NavigationSession.collapse_step,
    "space": NavigationSession.fit,
    "=": NavigationSession.zoom_in,
    "-": NavigationSession.zoom_out,
}
SESSION_KEYS.update(
    {str(n): (lambda session, n=n: session.expand_to(n)) for n in range(1, 6)}  # type: ignore[misc]
)

HOST_KEYS: dict[str, Callable[[HostProtocol], None]] = {
    "cmd+[": lambda host: host.go_back(),
    "cmd+]": lambda host: host.go_forward(),
    "q": lambda host: host.close(),
    "esc": lambda host: host.close(),
}

KEY_HELP: dict[str, str] = {
    "p / n": "previous / next sibling",
    "b": "focus out",
    ".": "focus in",
    ",": "reset focus",
    "0": "collapse all",
    "1-5": "expand to level",
    "9": "expand all",
    "h / l": "one level less / more",
    "j / k": "expand / collapse one step",
    "space": "fit to window",
    "= / -": "zoom in / out",
    "cmd+[ / cmd+]": "host back / forward",
    "q / esc": "close",
}


def dispatch_key(key: str, session: NavigationSession | None, host: HostProtocol | None = None) -> bool:
    """Run the command bound to ``key``.

    Session commands are ignored until a render has produced a session.

    Returns:
        True if a command ran.
    """
    if key in HOST_KEYS:
        if host is None:
            return False
        HOST_KEYS[key](host)
        return True
    command = SESSION_KEYS.get(key)
    if command is None:
        logger.debug("Unbound key: {!r}", key)
        return False
    if session is None:
        logger.debug("Ignoring {!r}: nothing rendered yet", key)
        return False
    command(session)
    return True
