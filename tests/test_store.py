"""
Tests for JSON serialization, the workout/score store and CSV files.
"""

import json
from datetime import date

import pytest

from wodkit.core.config import NATIVE_HEADERS
from wodkit.core.models import ProposedScore, Score
from wodkit.io.csv_files import read_csv_rows, write_native_csv
from wodkit.io.serializers import (
    ValidationError,
    dict_to_score,
    dict_to_workout,
    parse_tags,
    score_to_dict,
    validate_date,
    workout_to_dict,
)
from wodkit.io.workout_store import WorkoutStore

FRAN_RECORD = {
    "id": "fran",
    "wodName": "Fran",
    "description": "21-15-9 reps for time of:\nThrusters (95/65 lb)\nPull-Ups",
    "tags": '["Girl"]',
    "category": "Girl",
    "difficulty": "Hard",
    "countLikes": 120,
    "wodUrl": "https://example.com/fran",
    "benchmarks": {
        "type": "time",
        "levels": {
            "elite": {"min": 0, "max": 180},
            "advanced": {"min": 180, "max": 240},
            "intermediate": {"min": 240, "max": 360},
            "beginner": {"min": 360, "max": None},
        },
    },
}


class TestSerializers:
    """dict <-> dataclass conversion."""

    def test_validate_date(self):
        assert validate_date("2024-03-15") == date(2024, 3, 15)
        with pytest.raises(ValidationError):
            validate_date("03/15/2024")
        with pytest.raises(ValidationError):
            validate_date("2024-02-30")

    def test_parse_tags(self):
        assert parse_tags(["Girl", "AMRAP"]) == ("Girl", "AMRAP")
        assert parse_tags('["Hero"]') == ("Hero",)
        assert parse_tags("not json") == ()
        assert parse_tags('{"a": 1}') == ()
        assert parse_tags(None) == ()

    def test_workout_from_export_keys(self):
        workout = dict_to_workout(FRAN_RECORD)

        assert workout.name == "Fran"
        assert workout.tags == ("Girl",)
        assert workout.count_likes == 120
        assert workout.url == "https://example.com/fran"
        assert workout.benchmarks.type == "time"
        assert workout.benchmarks.elite.max == 180
        assert workout.benchmarks.beginner.max is None

    def test_workout_round_trip(self):
        workout = dict_to_workout(FRAN_RECORD)
        assert dict_to_workout(workout_to_dict(workout)) == workout

    def test_workout_requires_name(self):
        with pytest.raises(ValidationError):
            dict_to_workout({"id": "x", "description": "no name"})

    def test_invalid_benchmark_type(self):
        record = dict(FRAN_RECORD, benchmarks={"type": "distance", "levels": {}})
        with pytest.raises(ValidationError):
            dict_to_workout(record)

    def test_band_must_be_object(self):
        levels = dict(FRAN_RECORD["benchmarks"]["levels"], elite=180)
        record = dict(FRAN_RECORD, benchmarks={"type": "time", "levels": levels})
        with pytest.raises(ValidationError, match="elite"):
            dict_to_workout(record)

    def test_likes_must_be_integer(self):
        with pytest.raises(ValidationError, match="countLikes"):
            dict_to_workout(dict(FRAN_RECORD, countLikes="many"))

    def test_likes_numeric_string_accepted(self):
        assert dict_to_workout(dict(FRAN_RECORD, countLikes="42")).count_likes == 42

    def test_score_round_trip(self):
        score = Score(
            id="s1",
            workout_id="fran",
            score_date=date(2024, 3, 15),
            is_rx=True,
            time_seconds=185.0,
        )
        data = score_to_dict(score)

        assert data == {
            "id": "s1",
            "workout_id": "fran",
            "score_date": "2024-03-15",
            "is_rx": True,
            "time_seconds": 185.0,
        }
        assert dict_to_score(data) == score

    def test_score_rejects_negative(self):
        with pytest.raises(ValidationError):
            dict_to_score({"id": "s", "workout_id": "w", "score_date": "2024-01-01", "reps": -3})

    def test_score_requires_fields(self):
        with pytest.raises(ValidationError):
            dict_to_score({"id": "s", "score_date": "2024-01-01"})


@pytest.fixture
def store(tmp_path) -> WorkoutStore:
    workouts_path = tmp_path / "workouts.json"
    workouts_path.write_text(json.dumps([FRAN_RECORD]))
    return WorkoutStore(workouts_path, tmp_path / "data" / "scores.jsonl")


class TestWorkoutStore:
    """Corpus loading and the score log."""

    def test_load_workouts(self, store):
        workouts = store.load_workouts()
        assert [w.name for w in workouts] == ["Fran"]

    def test_wrapped_corpus(self, tmp_path):
        path = tmp_path / "workouts.json"
        path.write_text(json.dumps({"workouts": [FRAN_RECORD]}))
        assert len(WorkoutStore(path, tmp_path / "s.jsonl").load_workouts()) == 1

    def test_missing_corpus(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            WorkoutStore(tmp_path / "nope.json", tmp_path / "s.jsonl").load_workouts()

    def test_invalid_corpus(self, tmp_path):
        path = tmp_path / "workouts.json"
        path.write_text("{not json")
        with pytest.raises(ValidationError):
            WorkoutStore(path, tmp_path / "s.jsonl").load_workouts()

    @pytest.mark.parametrize("overrides", [
        {"benchmarks": {"type": "time", "levels": {"elite": 180}}},
        {"countLikes": "many"},
    ])
    def test_malformed_record_is_validation_error(self, tmp_path, overrides):
        path = tmp_path / "workouts.json"
        path.write_text(json.dumps([dict(FRAN_RECORD, **overrides)]))
        with pytest.raises(ValidationError, match="Workout #0"):
            WorkoutStore(path, tmp_path / "s.jsonl").load_workouts()

    def test_missing_log_is_empty(self, store):
        assert store.load_scores() == []

    def test_append_and_group(self, store):
        older = Score(id="a", workout_id="fran", score_date=date(2024, 1, 1), time_seconds=250.0)
        newer = Score(id="b", workout_id="fran", score_date=date(2024, 2, 1), time_seconds=200.0)

        assert store.append_scores([newer, older]) == 2

        assert [s.id for s in store.load_scores()] == ["a", "b"]
        assert [s.id for s in store.scores_by_workout()["fran"]] == ["b", "a"]

    def test_save_proposed_assigns_ids(self, store):
        proposed = ProposedScore(workout_id="fran", score_date=date(2024, 3, 1), reps=10)
        saved = store.save_proposed([proposed])

        assert len(saved) == 1
        assert saved[0].id
        assert store.load_scores()[0].reps == 10

    def test_bad_line_reports_line_number(self, store):
        store.scores_path.parent.mkdir(parents=True)
        store.scores_path.write_text(
            '{"id": "a", "workout_id": "fran", "score_date": "2024-01-01", "reps": 5}\n'
            "not json\n"
        )
        with pytest.raises(ValidationError, match="line 2"):
            store.load_scores()


class TestCsvFiles:
    """CSV reading and native export writing."""

    def test_write_then_read(self, tmp_path):
        path = tmp_path / "out" / "scores.csv"
        row = {h: "" for h in NATIVE_HEADERS}
        row.update({"WOD Name": "Fran", "Date": "2024-03-15", "Score (time)": "185", "Rx": "yes"})

        assert write_native_csv(path, [row]) == 1

        headers, rows = read_csv_rows(path)
        assert headers == list(NATIVE_HEADERS)
        assert rows == [row]

    def test_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "in.csv"
        path.write_text("date,title\n03/15/2024,Fran\n,\n\n")
        headers, rows = read_csv_rows(path)

        assert headers == ["date", "title"]
        assert rows == [{"date": "03/15/2024", "title": "Fran"}]

    def test_bom_ignored(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffWOD Name,Date\nFran,2024-03-15\n".encode("utf-8"))
        headers, _ = read_csv_rows(path)
        assert headers[0] == "WOD Name"
