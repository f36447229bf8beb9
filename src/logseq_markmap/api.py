"""Logseq HTTP API client with optional caching."""

import hashlib
import json
import os
from pathlib import Path
from typing import Any

import requests
from loguru import logger

from logseq_markmap.config import API_CACHE_PREFIX, API_TOKEN_ENV, API_TOKEN_FILES, API_URL
from logseq_markmap.errors import ApiError


class LogseqApi:
    """Encapsulated Logseq HTTP API with caching.

    Only read methods are cached; navigation calls always go to the app.
    """

    def __init__(self, *, from_cache: bool = False, url: str | None = None) -> None:
        self.from_cache = from_cache
        self.url = url or API_URL
        self.sess = requests.Session()

        api_token_name: str | None = None
        env_token = os.environ.get(API_TOKEN_ENV)
        if env_token:
            self.api_token = env_token.strip()
            api_token_name = f"${API_TOKEN_ENV}"
        else:
            for token_path in API_TOKEN_FILES:
                try:
                    self.api_token = token_path.read_text(encoding="utf-8").strip()
                    api_token_name = str(token_path)
                    break
                except FileNotFoundError:
                    pass
            else:
                msg = (
                    f"Cannot find Logseq API token: set ${API_TOKEN_ENV} or create one of "
                    f"{API_TOKEN_FILES!r}"
                )
                raise RuntimeError(msg)

        self.api_cache_prefix: str | None = API_CACHE_PREFIX if self.from_cache else None

        logger.debug(
            "API ready: {} token from {!r}, from_cache {!r}",
            self.url,
            api_token_name,
            self.from_cache,
        )

        if self.api_cache_prefix:
            Path(self.api_cache_prefix).parent.mkdir(parents=True, exist_ok=True)

    def _cache_name(self, method: str, args: list[Any]) -> str | None:
        if not self.api_cache_prefix:
            return None
        name = method
        if args:
            params_str = json.dumps(args, sort_keys=True, separators=(",", ":"))
            if len(params_str) > 64:
                params_str = hashlib.sha1(params_str.encode("utf-8")).hexdigest()
            name += "--" + params_str
        return self.api_cache_prefix + name.replace("/", "--")

    def call(self, method: str, *args: Any, cache: bool = True) -> Any:
        """Invoke a Logseq API method (e.g. ``logseq.Editor.getBlock``), return its json."""
        cache_name = self._cache_name(method, list(args)) if cache else None
        if cache_name and Path(cache_name).exists():
            logger.debug("Filled from cache: {!r}", cache_name)
            with open(cache_name, encoding="utf-8") as f:
                return json.load(f)

        logger.debug("Making request: {} {}", method, repr(args)[:32])
        r = self.sess.post(
            self.url,
            json={"method": method, "args": list(args)},
            headers={"Authorization": f"Bearer {self.api_token}"},
        )
        if not r.ok:
            msg = f"API call failed: ({method!r}, {args!r}) -> {r.status_code} {r.text[:200]!r}"
            raise ApiError(msg)
        rv = r.json() if r.content else None
        if isinstance(rv, dict) and rv.get("error"):
            msg = f"API call failed: ({method!r}, {args!r}) -> {rv['error']!r}"
            raise ApiError(msg)

        if cache_name and r.content:
            with open(cache_name, "w", encoding="utf-8") as f:
                f.write(r.text)
        return rv

    # --- host navigation ---

    def push_state(self, name: str) -> None:
        self.call("logseq.App.pushState", "page", {"name": name}, cache=False)

    def invoke_external_command(self, command: str) -> None:
        self.call("logseq.App.invokeExternalCommand", command, cache=False)
