"""
Almanac text parsing and result files.
"""

import json

import pytest

from almanac_pipeline import (
    AlmanacParseError, AlmanacPipeline, InvalidRangeError, STAGE_NAMES, load_almanac,
    parse_almanac, save_result_json,
)


def test_parse_canonical(almanac):
    assert almanac.seeds == [79, 14, 55, 13]
    assert sorted(almanac.tables) == sorted(STAGE_NAMES)
    location = almanac.tables["humidity-to-location"]
    assert location.name == "humidity-to-location"
    assert location.rules[1].destination_start == 56
    assert location.rules[1].source_start == 93
    assert location.rules[1].length == 4


def test_seed_ranges(almanac):
    assert almanac.seed_ranges() == [(79, 14), (55, 13)]


def test_odd_seed_count_cannot_pair():
    almanac = parse_almanac("seeds: 1 2 3\n")
    with pytest.raises(InvalidRangeError):
        almanac.seed_ranges()


def test_seeds_on_following_lines():
    almanac = parse_almanac("seeds:\n1 2\n3 4\n\nx-to-y map:\n0 1 1\n")
    assert almanac.seeds == [1, 2, 3, 4]
    assert almanac.tables["x-to-y"].map(1) == 0


def test_load_almanac(almanac_file):
    assert load_almanac(almanac_file).seeds == [79, 14, 55, 13]


@pytest.mark.parametrize(
    "text, line",
    [
        ("seeds: 1 2\n\nseed-to-soil map:\n50 98\n", 4),
        ("seeds: 1 2\n\nseed-to-soil map:\n50 98 two\n", 4),
        ("seeds: 1 x\n", 1),
        ("seeds: 1 2\n\nno header here\n", 3),
        ("seeds: 1 2\n\nseed-to-soil map:\n50 98 0\n", 4),
        ("seeds: 1 2\n\nseed-to-soil map:\n1 2 3\n\nseed-to-soil map:\n4 5 6\n", 6),
        ("seeds: 1 2\n\nseed-to-soil map:\n1 2 3\n4 5 6 7\n", 5),
    ],
)
def test_malformed_rows_are_fatal(text, line):
    with pytest.raises(AlmanacParseError) as exc:
        parse_almanac(text)
    assert exc.value.line == line
    assert f"line {line}" in str(exc.value)


def test_missing_seeds_table():
    with pytest.raises(AlmanacParseError):
        parse_almanac("seed-to-soil map:\n50 98 2\n")


@pytest.mark.parametrize("text", ["seeds:\n\nx-to-y map:\n0 1 1\n", "\nseeds:\n"])
def test_empty_seeds_table(text):
    with pytest.raises(AlmanacParseError) as exc:
        parse_almanac(text)
    assert "no values" in str(exc.value)
    assert exc.value.line == text.splitlines().index("seeds:") + 1


def test_save_result_json(tmp_path, almanac):
    res = AlmanacPipeline().run(almanac)
    path = tmp_path / "out" / "summary.json"
    save_result_json(res, path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["lowest_location_seeds"] == 35
    assert data["lowest_location_ranges"] == 46
    assert data["seed_locations"] == {"79": 82, "14": 43, "55": 86, "13": 35}
    assert data["range_count"] == 2
    assert data["seed_count"] == 4
