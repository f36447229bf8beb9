"""CLI for the Logseq mind-map: print markdown, draw the tree, or browse it."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console

from logseq_markmap.api import LogseqApi
from logseq_markmap.core.markup.links import extract_link_targets, follow_link
from logseq_markmap.errors import MarkmapError
from logseq_markmap.logging_config import configure_logging
from logseq_markmap.navigation.commands import KEY_HELP
from logseq_markmap.protocols import BlockStoreProtocol
from logseq_markmap.render import RenderPipeline
from logseq_markmap.store import JsonBlockStore, LogseqBlockStore
from logseq_markmap.terminal import TerminalHost, TerminalRenderer

app = typer.Typer(help="Logseq mind-map: render a page outline as a foldable tree.")

PageOption = Annotated[
    str | None, typer.Option("--page", "-p", help="Page name (default: the page open in Logseq)")
]
BlockOption = Annotated[
    str | None,
    typer.Option("--block", "-b", help="Render this block's subtree instead of the page"),
]
EditingOption = Annotated[
    bool, typer.Option("--editing-block", "-e", help="Render the block being edited")
]
FromFileOption = Annotated[
    Path | None,
    typer.Option("--from-file", "-f", help="Render a JSON page dump instead of the live app"),
]
CacheOption = Annotated[bool, typer.Option("--cache", help="Serve API reads from the local cache")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    configure_logging(verbose=verbose, quiet=quiet)


def _open_store(
    page: str | None, from_file: Path | None, cache: bool
) -> tuple[BlockStoreProtocol, LogseqApi | None]:
    if from_file is not None:
        if not from_file.exists():
            logger.error("Page dump not found: {}", from_file)
            raise typer.Exit(1)
        return JsonBlockStore.from_file(from_file), None
    try:
        api = LogseqApi(from_cache=cache)
    except RuntimeError as exc:
        logger.error("{}", exc)
        raise typer.Exit(1) from exc
    return LogseqBlockStore(api, page=page), api


def _render(pipeline: RenderPipeline, block: str | None, editing_block: bool) -> None:
    try:
        asyncio.run(pipeline.render(block_mode=bool(block) or editing_block, block_uuid=block))
    except MarkmapError as exc:
        logger.error("Render failed: {}", exc)
        raise typer.Exit(1) from exc


def _refresh(pipeline: RenderPipeline) -> None:
    """Re-render after navigating; a failure keeps the last mind-map on screen."""
    try:
        asyncio.run(pipeline.render())
    except MarkmapError as exc:
        logger.error("Render failed, keeping the previous mind-map: {}", exc)


@app.command()
def markdown(
    page: PageOption = None,
    block: BlockOption = None,
    editing_block: EditingOption = False,
    from_file: FromFileOption = None,
    cache: CacheOption = False,
) -> None:
    """Print the markdown the mind-map is compiled from."""
    store, _ = _open_store(page, from_file, cache)
    pipeline = RenderPipeline(store, TerminalRenderer())
    try:
        document = asyncio.run(
            pipeline.build(block_mode=bool(block) or editing_block, block_uuid=block)
        )
    except MarkmapError as exc:
        logger.error("Render failed: {}", exc)
        raise typer.Exit(1) from exc
    typer.echo(document.markdown)


@app.command()
def tree(
    page: PageOption = None,
    block: BlockOption = None,
    editing_block: EditingOption = False,
    from_file: FromFileOption = None,
    cache: CacheOption = False,
    level: int | None = typer.Option(None, "--level", "-l", help="Expand this many levels"),
) -> None:
    """Draw the mind-map once, as a tree."""
    store, _ = _open_store(page, from_file, cache)
    renderer = TerminalRenderer(Console(quiet=level is not None))
    pipeline = RenderPipeline(store, renderer)
    _render(pipeline, block, editing_block)
    if level is not None and pipeline.session is not None:
        renderer.console.quiet = False
        pipeline.session.expand_to(level)


def _print_help() -> None:
    for key, action in KEY_HELP.items():
        typer.echo(f"  {key:<14} {action}")
    typer.echo(f"  {'g<N>':<14} follow the N-th link of the focused topic")
    typer.echo(f"  {'?':<14} this help")


def _follow(pipeline: RenderPipeline, host: TerminalHost, key: str) -> bool:
    """Handle ``g<N>``: follow a link of the focused topic."""
    if pipeline.session is None:
        return False
    try:
        number = int(key[1:] or "1")
    except ValueError:
        return False
    targets = extract_link_targets(pipeline.session.current_root.content)
    if not 1 <= number <= len(targets):
        typer.echo(f"No link #{number} here ({len(targets)} links)")
        return False
    return follow_link(host, targets[number - 1])


@app.command()
def browse(
    page: PageOption = None,
    block: BlockOption = None,
    editing_block: EditingOption = False,
    from_file: FromFileOption = None,
    cache: CacheOption = False,
) -> None:
    """Browse the mind-map interactively; one key command per line."""
    store, api = _open_store(page, from_file, cache)
    pipeline = RenderPipeline(store, TerminalRenderer())
    host = TerminalHost(
        api,
        on_navigate=store.follow_app if isinstance(store, LogseqBlockStore) else None,
        on_refresh=lambda: _refresh(pipeline),
    )
    _render(pipeline, block, editing_block)

    while not host.closed:
        key = typer.prompt("key", default="q", show_default=False).strip()
        if key == "?":
            _print_help()
        elif key.startswith("g"):
            _follow(pipeline, host, key)
        elif not pipeline.handle_key(key, host):
            typer.echo(f"Unknown key {key!r}, '?' for help")
