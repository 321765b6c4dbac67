from __future__ import annotations

import json

import pytest

from adapters.searchee_loader import SearcheeLoadError, load_searchees, map_searchee
from core.models import Searchee, SearcheeFile


def test_load_keeps_order_and_maps_fields(tmp_path) -> None:
    path = tmp_path / "searchees.json"
    path.write_text(
        json.dumps(
            [
                {"name": "Movie.2020", "infoHash": "ABCDEF", "files": [{"name": "Movie.2020.mkv", "length": 10}]},
                {"name": "Show.S01", "files": ["Show.S01E01.mkv", "Show.S01E02.mkv"]},
            ]
        ),
        encoding="utf-8",
    )

    searchees = load_searchees(path)

    assert searchees == [
        Searchee(name="Movie.2020", files=(SearcheeFile("Movie.2020.mkv", 10),), info_hash="abcdef"),
        Searchee(
            name="Show.S01",
            files=(SearcheeFile("Show.S01E01.mkv"), SearcheeFile("Show.S01E02.mkv")),
        ),
    ]


def test_missing_name_is_reported_with_index() -> None:
    with pytest.raises(SearcheeLoadError, match="#3"):
        map_searchee({"files": []}, 3)


def test_non_list_payload_rejected(tmp_path) -> None:
    path = tmp_path / "searchees.json"
    path.write_text('{"name": "x"}', encoding="utf-8")

    with pytest.raises(SearcheeLoadError, match="JSON list"):
        load_searchees(path)
