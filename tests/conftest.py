"""Shared fixtures for exporter tests."""

from pathlib import Path

import pytest

from library_bundle.models import GameLink, NamedItem, SourceGame
from library_bundle.services.library_source import DictLookupTable, InMemoryLibrary


def table(**names: str) -> DictLookupTable:
    """Build a lookup table from id=name keyword arguments."""
    return DictLookupTable(NamedItem(id=item_id, name=name) for item_id, name in names.items())


def make_library(games: list[SourceGame]) -> InMemoryLibrary:
    return InMemoryLibrary(
        game_list=games,
        platforms=table(p1="PC (Windows)", p2="Nintendo Switch"),
        companies=table(c1="Valve", c2="Nintendo", c3="Bethesda"),
        genres=table(g1="Action", g2="RPG", g3="Puzzle"),
        tags=table(t1="Singleplayer", t2="Co-op"),
        features=table(f1="Controller Support"),
        series=table(s1="Half-Life"),
        age_ratings=table(a1="PEGI 18"),
        sources=table(src1="Steam"),
        completion_statuses=table(cs1="Completed"),
    )


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Content store with a handful of image files."""
    root = tmp_path / "config" / "library" / "files"
    (root / "g1").mkdir(parents=True)
    (root / "g1" / "cover.jpg").write_bytes(b"cover-bytes")
    (root / "g1" / "bg.png").write_bytes(b"background-bytes")
    (root / "g1" / "icon.ico").write_bytes(b"icon-bytes")
    (root / "g2").mkdir()
    (root / "g2" / "front.webp").write_bytes(b"g2-cover")
    return root


@pytest.fixture
def sample_games() -> list[SourceGame]:
    return [
        SourceGame(
            id="g1",
            name="Half-Life 2",
            playtime=3600,
            platform_ids=["p1"],
            developer_ids=["c1"],
            publisher_ids=["c1"],
            genre_ids=["g1"],
            tag_ids=["t1", "t2"],
            series_ids=["s1"],
            source_id="src1",
            completion_status_id="cs1",
            links=[GameLink(name="Store", url="https://store.example/hl2")],
            cover_image="g1/cover.jpg",
            background_image="g1/bg.png",
            icon="g1/icon.ico",
        ),
        SourceGame(
            id="g2",
            name="Zelda",
            platform_ids=["p2"],
            genre_ids=["g1", "g3"],
            cover_image="g2/front.webp",
            background_image="g2/missing.png",
        ),
        SourceGame(id="g3", name="No Media"),
    ]


@pytest.fixture
def library(sample_games: list[SourceGame]) -> InMemoryLibrary:
    return make_library(sample_games)
