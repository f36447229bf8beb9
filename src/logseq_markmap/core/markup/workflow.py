"""Highlight task markers (TODO, DOING, ...) at the start of a topic."""

import re

# marker -> (background, foreground)
WORKFLOW_COLORS: dict[str, tuple[str, str]] = {
    "TODO": ("#845EC2", "#eee"),
    "LATER": ("#845EC2", "#eee"),
    "DOING": ("#FF8066", "#eee"),
    "NOW": ("#FF8066", "#eee"),
    "IN-PROGRESS": ("#FF8066", "#eee"),
    "WAITING": ("#4B4453", "#eee"),
    "WAIT": ("#4B4453", "#eee"),
    "DONE": ("#008B74", "#eee"),
    "CANCELED": ("#B0A8B9", "#333"),
    "CANCELLED": ("#B0A8B9", "#333"),
}

_MARKER_RE = re.compile(
    r"^(" + "|".join(re.escape(m) for m in sorted(WORKFLOW_COLORS, key=len, reverse=True)) + r")(\s+)"
)


def theme_workflow_tag(topic: str) -> str:
    """Wrap a leading task marker in a coloured badge; other text is untouched."""

    def badge(m: re.Match[str]) -> str:
        background, color = WORKFLOW_COLORS[m.group(1)]
        return (
            f'<code style="background: {background}; color: {color}; '
            f'padding: 0 4px;">{m.group(1)}</code>{m.group(2)}'
        )

    return _MARKER_RE.sub(badge, topic, count=1)
