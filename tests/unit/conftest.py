"""Shared test fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from logseq_markmap.models.block import Block, Page
from tests.unit.fakes import SAMPLE_DUMP, FakeBlockStore, FakeRenderer


@pytest.fixture
def sample_dump() -> dict[str, Any]:
    return json.loads(json.dumps(SAMPLE_DUMP))


@pytest.fixture
def dump_file(tmp_path: Path, sample_dump: dict[str, Any]) -> Path:
    """The sample page written to disk, as the CLI's --from-file expects it."""
    path = tmp_path / "page.json"
    path.write_text(json.dumps(sample_dump))
    return path


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def simple_store() -> FakeBlockStore:
    """A page with two top-level blocks, the first with two children."""
    blocks = [
        Block(
            uuid="a",
            content="Alpha",
            children=(Block(uuid="a1", content="Alpha one"), Block(uuid="a2", content="Alpha two")),
        ),
        Block(uuid="b", content="Beta"),
    ]
    return FakeBlockStore(page=Page(name="notes", original_name="Notes"), blocks=blocks)
