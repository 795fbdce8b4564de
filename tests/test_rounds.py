import json

import pytest

from gridmatch.game.rounds import (DEFAULT_ROUNDS, Round, check_round_sequence,
                                   load_rounds)


def test_round_is_immutable():
    round_ = Round(index=0, ai_name="Pip")
    with pytest.raises(AttributeError):
        round_.rows = 8


@pytest.mark.parametrize("kwargs", [
    {"index": -1},
    {"rows": 0},
    {"columns": 0},
    {"min_win_length": 0},
    {"rows": 3, "columns": 3, "min_win_length": 4},
])
def test_round_validation(kwargs):
    values = {"index": 0, "ai_name": "Pip"}
    values.update(kwargs)
    with pytest.raises(ValueError):
        Round(**values)


def test_from_dict_accepts_both_key_styles():
    camel = Round.from_dict({"index": 1, "aiName": "Marlo", "imageRef": "m.png",
                             "rows": 5, "columns": 8, "minWinLength": 5})
    snake = Round.from_dict({"index": 1, "ai_name": "Marlo", "image_ref": "m.png",
                             "rows": 5, "columns": 8, "min_win_length": 5})
    assert camel == snake
    assert camel.to_dict()["minWinLength"] == 5


def test_from_dict_requires_index():
    with pytest.raises(ValueError):
        Round.from_dict({"aiName": "Nobody"})


@pytest.mark.parametrize("record", [
    {"index": 0},
    {"index": 0, "aiName": None},
    {"index": 0, "ai_name": None, "rows": 6},
])
def test_from_dict_requires_ai_name(record):
    with pytest.raises(ValueError):
        Round.from_dict(record)


def test_default_rounds_are_sequential():
    assert load_rounds() == list(DEFAULT_ROUNDS)
    assert [r.index for r in DEFAULT_ROUNDS] == list(range(len(DEFAULT_ROUNDS)))


def test_load_rounds_from_file_orders_by_index(tmp_path):
    path = tmp_path / "rounds.json"
    path.write_text(json.dumps([
        {"index": 1, "aiName": "Second", "rows": 6, "columns": 7, "minWinLength": 4},
        {"index": 0, "aiName": "First", "rows": 4, "columns": 4, "minWinLength": 3},
    ]))

    rounds = load_rounds(str(path))
    assert [r.ai_name for r in rounds] == ["First", "Second"]
    assert rounds[0].min_win_length == 3


def test_load_rounds_accepts_wrapped_list(tmp_path):
    path = tmp_path / "rounds.json"
    path.write_text(json.dumps({"rounds": [{"index": 0, "aiName": "Only"}]}))
    assert load_rounds(str(path)) == [Round(index=0, ai_name="Only")]


def test_load_rounds_rejects_gaps(tmp_path):
    path = tmp_path / "rounds.json"
    path.write_text(json.dumps([{"index": 0, "aiName": "A"}, {"index": 2, "aiName": "C"}]))
    with pytest.raises(ValueError):
        load_rounds(str(path))


def test_load_rounds_rejects_malformed_json(tmp_path):
    path = tmp_path / "rounds.json"
    path.write_text("{not json")
    with pytest.raises(ValueError):
        load_rounds(str(path))


def test_load_rounds_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rounds(str(tmp_path / "missing.json"))


def test_check_round_sequence_rejects_empty_and_duplicates():
    with pytest.raises(ValueError):
        check_round_sequence([])
    with pytest.raises(ValueError):
        check_round_sequence([Round(index=0, ai_name="A"), Round(index=0, ai_name="B")])
