"""Parse attributes out of a rendered HTML tag."""

import html
import re

# Compiled once; only used through finditer(), which keeps no state between calls.
_ATTR_RE = re.compile(r'\b([\w-]+)\s*=\s*"(.*?)"')


def match_attributes(tag_html: str) -> dict[str, str]:
    """Return ``name -> value`` for every ``name="value"`` pair in ``tag_html``.

    Values are HTML-unescaped. A repeated attribute keeps its last value.
    """
    return {m.group(1): html.unescape(m.group(2)) for m in _ATTR_RE.finditer(tag_html)}
