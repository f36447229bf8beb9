"""Navigation links embedded in topics.

A link is plain markup carrying a structured target: the renderer's click handler
reads ``data-kind``/``data-target`` back with :func:`extract_link_targets` and hands
the value to :func:`follow_link`. No callback code is generated.
"""

import html
import re

from loguru import logger

from logseq_markmap.core.markup.attributes import match_attributes
from logseq_markmap.models.node import LinkKind, LinkTarget
from logseq_markmap.protocols import HostProtocol

LINK_CLASS = "mm-link"
LINK_STYLE = "cursor: pointer"
TAG_LINK_STYLE = "cursor: pointer; font-size: 60%; vertical-align: middle;"

_LINK_TAG_RE = re.compile(r"<a\b[^>]*>")


def link_markup(target: LinkTarget, label: str, *, style: str = LINK_STYLE) -> str:
    """Render ``label`` as a link to ``target``. ``label`` is inserted verbatim."""
    return (
        f'<a class="{LINK_CLASS}" style="{style}" '
        f'data-kind="{target.kind.value}" '
        f'data-target="{html.escape(target.target, quote=True)}">{label}</a>'
    )


def page_link(name: str, label: str | None = None, *, style: str = LINK_STYLE) -> str:
    return link_markup(LinkTarget(LinkKind.PAGE, name), name if label is None else label, style=style)


def block_link(uuid: str, label: str) -> str:
    return link_markup(LinkTarget(LinkKind.BLOCK, uuid), label)


def placeholder_link(uuid: str, label: str) -> str:
    return link_markup(LinkTarget(LinkKind.PLACEHOLDER, uuid), label)


def extract_link_targets(content: str) -> list[LinkTarget]:
    """Return the targets of all generated links in ``content``, in source order."""
    targets: list[LinkTarget] = []
    for m in _LINK_TAG_RE.finditer(content):
        attrs = match_attributes(m.group(0))
        if LINK_CLASS not in attrs.get("class", "").split():
            continue
        try:
            kind = LinkKind(attrs.get("data-kind", ""))
        except ValueError:
            logger.debug("Ignoring link with unknown kind: {!r}", attrs.get("data-kind"))
            continue
        targets.append(LinkTarget(kind, attrs.get("data-target", "")))
    return targets


def follow_link(host: HostProtocol, target: LinkTarget) -> bool:
    """Navigate the host to ``target``.

    The UI is refreshed (hidden then shown) after every push so the mind-map
    re-renders for the new route. Placeholder targets do nothing.

    Returns:
        True if the host was asked to navigate.
    """
    if target.kind is LinkKind.PLACEHOLDER:
        logger.debug("Not following placeholder link to {!r}", target.target)
        return False
    host.push_state(target.target)
    host.refresh()
    return True
