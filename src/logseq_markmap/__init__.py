"""Logseq outline to mind-map: markdown pipeline and fold/focus navigation."""

from logseq_markmap.api import LogseqApi
from logseq_markmap.compiler import MarkdownTransformer
from logseq_markmap.navigation.session import NavigationSession
from logseq_markmap.protocols import (
    BlockStoreProtocol,
    CompilerProtocol,
    HostProtocol,
    RendererProtocol,
)
from logseq_markmap.render import RenderPipeline
from logseq_markmap.store import JsonBlockStore, LogseqBlockStore

__all__ = [
    "BlockStoreProtocol",
    "CompilerProtocol",
    "HostProtocol",
    "JsonBlockStore",
    "LogseqApi",
    "LogseqBlockStore",
    "MarkdownTransformer",
    "NavigationSession",
    "RenderPipeline",
    "RendererProtocol",
]
