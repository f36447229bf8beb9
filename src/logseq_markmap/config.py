"""Configuration constants for logseq-markmap."""

import os
from pathlib import Path

# Logseq HTTP API server endpoint (Settings > Features > HTTP APIs server).
API_URL: str = os.environ.get("LOGSEQ_API_URL", "http://127.0.0.1:12315/api")

# API token location. First file found is used; LOGSEQ_API_TOKEN wins over all of them.
API_TOKEN_ENV: str = "LOGSEQ_API_TOKEN"
API_TOKEN_FILES: list[Path] = [
    Path("~/.config/logseq-markmap-token.txt").expanduser(),
    Path("~/.config/secret/logseq-api-token.txt").expanduser(),
]

# Cache prefix, used only when --cache is passed.
API_CACHE_PREFIX: str = "/tmp/logseq-markmap-cache/cache-"

# Deepest topic that still gets a heading marker (## .. ######).
MAX_HEADING_DEPTH: int = 5

# Block and page properties, as the host returns them (camelCased).
PROP_COLLAPSED = "collapsed"
PROP_BACKGROUND_COLOR = "backgroundColor"
PROP_CUT = "markMapCut"
PROP_LIMIT = "markMapLimit"
PROP_LIMIT_ALL = "markMapLimitAll"
PROP_TITLE = "markMapTitle"
PROP_COLLAPSE_MODE = "markMapCollapsed"
PROP_DISPLAY = "markMapDisplay"

# Values of the page-level markMapCollapsed property.
COLLAPSE_HIDDEN = "hidden"
COLLAPSE_EXTEND = "extend"

MISSING_BLOCK_LABEL = "[MISSING BLOCK]"
RENDERER_LABEL = "✨ Renderer"
PLACEHOLDER_CONTENT = "..."

# Zoom factors for the "=" and "-" keys.
ZOOM_IN_FACTOR = 1.25
ZOOM_OUT_FACTOR = 0.8

# Graph paths look like "logseq_local_/home/me/notes".
GRAPH_PATH_PREFIX = "logseq_local_"

# Assets the renderer should load for code blocks and math.
CODE_HIGHLIGHT_STYLES: list[str] = [
    "https://cdn.jsdelivr.net/npm/prismjs@1/themes/prism.css",
]
KATEX_STYLES: list[str] = [
    "https://cdn.jsdelivr.net/npm/katex@0.16/dist/katex.min.css",
]
