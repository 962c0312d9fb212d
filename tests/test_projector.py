"""Tests for projecting library games into export records."""

from datetime import date, datetime, timedelta

import pytest
from hypothesis import given, strategies as st

from conftest import make_library, table
from library_bundle.models import GameLink, SourceGame
from library_bundle.services.library_source import NIL_ID
from library_bundle.services.projector import RecordProjector, collect_links, normalize_playtime


class TestReferenceResolution:
    """Id references resolve to names; unknown ids are dropped."""

    def test_unresolved_genre_is_dropped_and_order_kept(self) -> None:
        game = SourceGame(id="x", genre_ids=["g3", "missing", "g1"])
        record = RecordProjector().project(game, make_library([game]))

        assert record.genres == ["Puzzle", "Action"]

    def test_duplicates_are_preserved(self) -> None:
        game = SourceGame(id="x", tag_ids=["t1", "t2", "t1"])
        record = RecordProjector().project(game, make_library([game]))

        assert record.tags == ["Singleplayer", "Co-op", "Singleplayer"]

    def test_developers_and_publishers_share_the_company_table(self) -> None:
        game = SourceGame(id="x", developer_ids=["c1"], publisher_ids=["c2", "c3"])
        record = RecordProjector().project(game, make_library([game]))

        assert record.developers == ["Valve"]
        assert record.publishers == ["Nintendo", "Bethesda"]

    def test_every_list_category_is_resolved(self) -> None:
        game = SourceGame(
            id="x",
            platform_ids=["p1"],
            feature_ids=["f1"],
            series_ids=["s1"],
            age_rating_ids=["a1"],
        )
        record = RecordProjector().project(game, make_library([game]))

        assert record.platform == ["PC (Windows)"]
        assert record.features == ["Controller Support"]
        assert record.series == ["Half-Life"]
        assert record.age_rating == ["PEGI 18"]

    def test_unresolved_references_are_counted(self) -> None:
        game = SourceGame(id="x", genre_ids=["nope", "g1"], tag_ids=["gone"], source_id="unknown")
        projector = RecordProjector()
        projector.project(game, make_library([game]))

        assert projector.unresolved_references == 3


class TestSingleReferences:
    def test_source_and_completion_status_resolve(self) -> None:
        game = SourceGame(id="x", source_id="src1", completion_status_id="cs1")
        record = RecordProjector().project(game, make_library([game]))

        assert record.source == "Steam"
        assert record.completion_status == "Completed"

    @pytest.mark.parametrize("empty_id", [None, "", NIL_ID])
    def test_empty_id_is_treated_as_absent(self, empty_id: str | None) -> None:
        game = SourceGame(id="x", source_id=empty_id, completion_status_id=empty_id)
        projector = RecordProjector()
        record = projector.project(game, make_library([game]))

        assert record.source is None
        assert record.completion_status is None
        assert projector.unresolved_references == 0

    def test_unknown_single_id_yields_none(self) -> None:
        game = SourceGame(id="x", source_id="deleted-source")
        record = RecordProjector().project(game, make_library([game]))

        assert record.source is None


class TestEmptyFieldConsistency:
    """Absent and empty id lists both project to an empty list."""

    def test_absent_and_empty_lists_project_identically(self) -> None:
        absent = SourceGame(id="a", tag_ids=None)
        empty = SourceGame(id="b", tag_ids=[])
        library = make_library([absent, empty])
        projector = RecordProjector()

        assert projector.project(absent, library).tags == []
        assert projector.project(empty, library).tags == []

    def test_game_without_links_has_empty_mapping(self) -> None:
        game = SourceGame(id="x")
        record = RecordProjector().project(game, make_library([game]))

        assert record.links == {}


class TestLinks:
    def test_last_link_with_same_name_wins(self) -> None:
        links = [
            GameLink(name="Wiki", url="https://wiki.example/old"),
            GameLink(name="Store", url="https://store.example"),
            GameLink(name="Wiki", url="https://wiki.example/new"),
        ]

        assert collect_links(links) == {
            "Wiki": "https://wiki.example/new",
            "Store": "https://store.example",
        }

    def test_no_links(self) -> None:
        assert collect_links(None) == {}


class TestScalars:
    def test_scalars_and_dates_copy_through(self) -> None:
        game = SourceGame(
            id="x",
            name="Portal",
            description="<p>Think with portals</p>",
            install_directory="C:/Games/Portal",
            is_installed=True,
            hidden=True,
            favorite=True,
            community_score=90,
            critic_score=88,
            user_score=None,
            release_date=date(2007, 10, 10),
            last_activity=datetime(2024, 5, 1, 20, 30),
            added=datetime(2023, 1, 2, 3, 4, 5),
            modified=datetime(2024, 5, 2),
        )
        record = RecordProjector().project(game, make_library([game]))

        assert record.id == "x"
        assert record.name == "Portal"
        assert record.description == "<p>Think with portals</p>"
        assert record.install_directory == "C:/Games/Portal"
        assert record.is_installed and record.hidden and record.favorite
        assert (record.community_score, record.critic_score, record.user_score) == (90, 88, None)
        assert record.release_date == date(2007, 10, 10)
        assert record.last_played == datetime(2024, 5, 1, 20, 30)
        assert record.added == datetime(2023, 1, 2, 3, 4, 5)
        assert record.modified == datetime(2024, 5, 2)

    def test_images_are_left_for_the_stager(self) -> None:
        game = SourceGame(id="x", cover_image="x/cover.jpg")
        record = RecordProjector().project(game, make_library([game]))

        assert record.cover_image is None

    @pytest.mark.parametrize(
        ("playtime", "expected"),
        [
            (3600, 3600),
            (59.9, 59),
            (timedelta(hours=2, seconds=5), 7205),
            (-10, 0),
            (None, 0),
        ],
    )
    def test_playtime_normalized_to_seconds(self, playtime: int | float | timedelta | None, expected: int) -> None:
        assert normalize_playtime(playtime) == expected


@given(st.lists(st.sampled_from(["g1", "g2", "g3", "unknown-1", "unknown-2"]), max_size=20))
def test_resolved_names_follow_source_order(ids: list[str]) -> None:
    """Resolution keeps exactly the known ids, in their original order."""
    genres = table(g1="Action", g2="RPG", g3="Puzzle")
    expected = [{"g1": "Action", "g2": "RPG", "g3": "Puzzle"}[i] for i in ids if i.startswith("g")]

    projector = RecordProjector()

    assert projector.resolve_names(ids, genres) == expected
    assert projector.unresolved_references == len(ids) - len(expected)
