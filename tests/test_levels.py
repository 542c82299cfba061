"""
Unit tests for performance levels, trend weighting, sorting, analytics
and display formatting.

Values are hand-computed from the band tables below.
"""

from datetime import date

import pytest

from wodkit.core.analytics import (
    aggregate_movement_frequency,
    monthly_performance,
    movement_counts,
    rolling_average,
    tag_and_category_counts,
    top_movements,
)
from wodkit.core.formatting import (
    benchmark_ranges,
    format_score,
    format_seconds_min_sec,
    format_seconds_mmss,
    performance_badge,
)
from wodkit.core.levels import (
    adjusted_level,
    difficulty_multiplier,
    has_score,
    level_value,
    numeric_score,
    performance_level,
    results_ordinal,
    rounds_value,
    sort_workouts,
)
from wodkit.core.models import BenchmarkBand, BenchmarkSpec, Score, Workout

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

FRAN_BENCHMARKS = BenchmarkSpec(
    type="time",
    elite=BenchmarkBand(min=0, max=180),
    advanced=BenchmarkBand(min=180, max=240),
    intermediate=BenchmarkBand(min=240, max=360),
    beginner=BenchmarkBand(min=360, max=None),
)

CINDY_BENCHMARKS = BenchmarkSpec(
    type="rounds",
    elite=BenchmarkBand(min=25, max=None),
    advanced=BenchmarkBand(min=20, max=25),
    intermediate=BenchmarkBand(min=15, max=20),
    beginner=BenchmarkBand(min=0, max=15),
)

DEADLIFT_BENCHMARKS = BenchmarkSpec(
    type="load",
    elite=BenchmarkBand(min=455, max=None),
    advanced=BenchmarkBand(min=365, max=455),
    intermediate=BenchmarkBand(min=275, max=365),
    beginner=BenchmarkBand(min=0, max=275),
)


def _fran(**kwargs) -> Workout:
    defaults = dict(
        id="fran",
        name="Fran",
        description="21-15-9 reps for time of:\nThrusters (95/65 lb)\nPull-Ups",
        tags=("Girl",),
        category="Girl",
        difficulty="Hard",
        benchmarks=FRAN_BENCHMARKS,
        count_likes=120,
    )
    defaults.update(kwargs)
    return Workout(**defaults)


def _cindy() -> Workout:
    return Workout(
        id="cindy",
        name="Cindy",
        description="AMRAP in 20 minutes:\n5 Pull-Ups\n10 Push-Ups\n15 Air Squats",
        tags=("Girl", "AMRAP"),
        category="Girl",
        difficulty="Medium",
        benchmarks=CINDY_BENCHMARKS,
        count_likes=80,
    )


def _murph() -> Workout:
    return Workout(
        id="murph",
        name="Murph",
        description="For time:\n1 mile Run\n100 Pull-Ups\n200 Push-Ups\n300 Squats\n1 mile Run",
        tags=("Hero",),
        category="Hero",
        difficulty="Very Hard",
        benchmarks=None,
    )


def _score(
    workout_id: str = "fran",
    day: date = date(2024, 1, 10),
    is_rx: bool = True,
    **values,
) -> Score:
    return Score(id=f"{workout_id}-{day.isoformat()}", workout_id=workout_id, score_date=day, is_rx=is_rx, **values)


# ---------------------------------------------------------------------------
# Numeric score and level
# ---------------------------------------------------------------------------

class TestNumericScore:
    """Score value on the benchmark axis."""

    def test_time(self):
        assert numeric_score(_fran(), _score(time_seconds=185)) == 185.0

    def test_rounds_fold_partial_reps(self):
        value = numeric_score(_cindy(), _score("cindy", rounds_completed=5, partial_reps=12))
        assert value == pytest.approx(5.12)

    def test_partial_reps_clamped(self):
        assert rounds_value(5, 150) == pytest.approx(5.99)
        assert rounds_value(5, None) == 5.0

    def test_mismatched_field(self):
        # Time workout, but only reps recorded
        assert numeric_score(_fran(), _score(reps=40)) is None

    def test_no_benchmarks(self):
        assert numeric_score(_murph(), _score("murph", time_seconds=2400)) is None

    def test_spec_without_bands(self):
        workout = _fran(benchmarks=BenchmarkSpec(type="time"))
        assert numeric_score(workout, _score(time_seconds=185)) is None

    def test_has_score(self):
        assert has_score(_score(time_seconds=100))
        assert not has_score(_score(partial_reps=5))


class TestPerformanceLevel:
    """Banding for lower- and higher-is-better types."""

    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (150, "elite"),
            (180, "elite"),  # boundary is inclusive
            (181, "advanced"),
            (240, "advanced"),
            (300, "intermediate"),
            (400, "beginner"),
        ],
    )
    def test_time(self, seconds, expected):
        assert performance_level(_fran(), _score(time_seconds=seconds)) == expected

    @pytest.mark.parametrize(
        "rounds, partial, expected",
        [
            (25, 0, "elite"),
            (21, 3, "advanced"),
            (15, 0, "intermediate"),
            (5, 12, "beginner"),
        ],
    )
    def test_rounds(self, rounds, partial, expected):
        score = _score("cindy", rounds_completed=rounds, partial_reps=partial)
        assert performance_level(_cindy(), score) == expected

    def test_load(self):
        deadlift = Workout(id="dl", name="Deadlift 1RM", benchmarks=DEADLIFT_BENCHMARKS)
        assert performance_level(deadlift, _score("dl", load=405.0)) == "advanced"

    def test_missing_band_is_skipped(self):
        workout = _fran(
            benchmarks=BenchmarkSpec(
                type="time",
                elite=None,
                advanced=BenchmarkBand(min=0, max=240),
            )
        )
        assert performance_level(workout, _score(time_seconds=170)) == "advanced"
        assert performance_level(workout, _score(time_seconds=500)) == "beginner"

    def test_ungradable(self):
        assert performance_level(_murph(), _score("murph", time_seconds=2400)) is None

    def test_level_value(self):
        assert level_value("elite") == 4
        assert level_value("beginner") == 1
        assert level_value(None) is None

    def test_invalid_benchmark_type(self):
        with pytest.raises(ValueError):
            BenchmarkSpec(type="distance")  # type: ignore[arg-type]


class TestResultsOrdinal:
    """Sort ordinal for the results column."""

    def test_no_score(self):
        assert results_ordinal(_fran(), []) == -2

    def test_scaled(self):
        assert results_ordinal(_fran(), [_score(is_rx=False, time_seconds=150)]) == -1

    def test_rx_levels(self):
        assert results_ordinal(_fran(), [_score(time_seconds=150)]) == 4
        assert results_ordinal(_fran(), [_score(time_seconds=400)]) == 1

    def test_rx_without_level(self):
        assert results_ordinal(_murph(), [_score("murph", time_seconds=2400)]) == 0

    def test_only_latest_counts(self):
        scores = [
            _score(day=date(2024, 1, 1), time_seconds=150),
            _score(day=date(2024, 3, 1), is_rx=False, time_seconds=150),
        ]
        assert results_ordinal(_fran(), scores) == -1


class TestAdjustedLevel:
    """Rx bonus and difficulty weighting."""

    def test_difficulty_multiplier(self):
        assert difficulty_multiplier("Hard") == 1.2
        assert difficulty_multiplier("very hard") == 1.5
        assert difficulty_multiplier(None) == 1.0
        assert difficulty_multiplier("Brutal") == 1.0

    def test_rx_hard_intermediate(self):
        assert adjusted_level(2, True, "Hard") == pytest.approx(3.0)

    def test_rx_bonus_capped_at_elite(self):
        assert adjusted_level(4, True, "Medium") == pytest.approx(4.0)

    def test_scaled_no_bonus(self):
        assert adjusted_level(1, False, "Easy") == pytest.approx(0.8)
        assert adjusted_level(3, False, "Extremely Hard") == pytest.approx(6.0)


class TestSortWorkouts:
    """Table sorting."""

    def test_by_name(self):
        workouts = [_murph(), _fran(), _cindy()]
        assert [w.name for w in sort_workouts(workouts, "name")] == ["Cindy", "Fran", "Murph"]
        assert [w.name for w in sort_workouts(workouts, "name", "desc")] == ["Murph", "Fran", "Cindy"]

    def test_by_difficulty(self):
        workouts = [_fran(), _murph(), _cindy()]
        result = sort_workouts(workouts, "difficulty", "desc")
        assert [w.name for w in result] == ["Murph", "Fran", "Cindy"]

    def test_by_likes_missing_is_zero(self):
        workouts = [_fran(), _murph(), _cindy()]
        assert [w.name for w in sort_workouts(workouts, "likes")] == ["Murph", "Cindy", "Fran"]

    def test_by_date_unscored_last(self):
        scores = {
            "fran": [_score(day=date(2024, 2, 1), time_seconds=200)],
            "cindy": [_score("cindy", day=date(2024, 1, 1), rounds_completed=18)],
        }
        result = sort_workouts([_murph(), _fran(), _cindy()], "date", "asc", scores)
        assert [w.name for w in result] == ["Cindy", "Fran", "Murph"]

    def test_by_results(self):
        scores = {
            "fran": [_score(time_seconds=150)],
            "cindy": [_score("cindy", is_rx=False, rounds_completed=18)],
        }
        result = sort_workouts([_cindy(), _murph(), _fran()], "results", "desc", scores)
        assert [w.name for w in result] == ["Fran", "Cindy", "Murph"]

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            sort_workouts([_fran()], "popularity")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------

class TestMovementFrequency:
    """Per-category and flat movement counts."""

    def test_by_category(self):
        table = aggregate_movement_frequency([_fran(), _cindy(), _murph()])

        assert set(table) == {"Girl", "Hero"}
        assert table["Girl"]["Pull-Up"].count == 2
        assert table["Girl"]["Pull-Up"].workout_names == ("Fran", "Cindy")
        assert table["Girl"]["Thruster"].count == 1
        assert table["Hero"]["Run"].workout_names == ("Murph",)

    def test_uncategorized_skipped(self):
        table = aggregate_movement_frequency([_fran(category=None)])
        assert table == {}

    def test_repeated_mentions_count_once(self):
        counts = movement_counts([_murph()])
        assert counts["Run"].count == 1

    def test_top_movements(self):
        ranked = top_movements(movement_counts([_fran(), _cindy(), _murph()]), 1)
        assert ranked[0][0] == "Pull-Up"
        assert ranked[0][1].count == 3

    def test_tag_and_category_counts(self):
        scores = {"fran": [_score()], "cindy": [_score("cindy", rounds_completed=10)]}
        tags, categories = tag_and_category_counts([_fran(), _cindy(), _murph()], scores)

        assert tags == {"Girl": 2, "AMRAP": 1}
        assert categories == {"Girl": 2}


class TestTrend:
    """Monthly performance and rolling average."""

    def test_rolling_average(self):
        assert rolling_average([1, 2, 3], window=2) == [1.0, 1.5, 2.5]
        assert rolling_average([4.0], window=12) == [4.0]
        assert rolling_average([], window=12) == []

    def test_rolling_average_default_window_is_twelve(self):
        result = rolling_average([float(v) for v in range(1, 15)])

        assert len(result) == 14
        assert result[11] == pytest.approx(6.5)   # mean(1..12)
        assert result[12] == pytest.approx(7.5)   # mean(2..13): first value drops out
        assert result[13] == pytest.approx(8.5)   # mean(3..14)

    def test_monthly_rolling_average_over_a_year(self):
        # Elite in Jan 2024, then beginner every month; all scaled on Medium
        fran = _fran(difficulty="Medium")
        entries = [(fran, _score(day=date(2024, 1, 15), is_rx=False, time_seconds=170))]
        for i in range(1, 14):
            year, month = 2024 + i // 12, i % 12 + 1
            entries.append((fran, _score(day=date(year, month, 15), is_rx=False, time_seconds=400)))

        months = monthly_performance(entries)

        assert len(months) == 14
        assert months[0].average_level == pytest.approx(4.0)
        assert months[11].rolling_average == pytest.approx(15 / 12)
        assert months[12].rolling_average == pytest.approx(1.0)
        assert months[13].month == "2025-02"

    def test_rolling_average_rejects_bad_window(self):
        with pytest.raises(ValueError):
            rolling_average([1.0], window=0)

    def test_monthly_performance(self):
        fran, cindy, murph = _fran(), _cindy(), _murph()
        entries = [
            # Jan: elite Rx on Hard (4 * 1.2), intermediate scaled on Hard (2 * 1.2)
            (fran, _score(day=date(2024, 1, 5), time_seconds=170)),
            (fran, _score(day=date(2024, 1, 20), is_rx=False, time_seconds=300)),
            # Feb: beginner Rx on Medium (1.5 * 1.0); Murph has no benchmarks
            (cindy, _score("cindy", day=date(2024, 2, 3), rounds_completed=5, partial_reps=12)),
            (murph, _score("murph", day=date(2024, 2, 10), time_seconds=2700)),
        ]

        months = monthly_performance(entries)

        assert [m.month for m in months] == ["2024-01", "2024-02"]
        assert months[0].count == 2
        assert months[0].average_level == pytest.approx(3.6)
        assert months[1].count == 1
        assert months[1].average_level == pytest.approx(1.5)
        assert months[0].rolling_average == pytest.approx(3.6)
        assert months[1].rolling_average == pytest.approx(2.55)

    def test_unleveled_score_counts_as_beginner(self):
        # Time workout scored with reps only: no level, counted as 1 (+0.5 Rx)
        months = monthly_performance([(_fran(difficulty="Medium"), _score(reps=50))])
        assert months[0].scores[0].level == 1
        assert months[0].average_level == pytest.approx(1.5)

    def test_detail_records_weighting(self):
        months = monthly_performance([(_fran(), _score(time_seconds=300))])
        detail = months[0].scores[0]

        assert detail.workout_name == "Fran"
        assert detail.difficulty_multiplier == 1.2
        assert detail.adjusted_level == pytest.approx(3.0)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

class TestFormatting:
    """Display strings."""

    def test_mmss(self):
        assert format_seconds_mmss(185) == "3:05"
        assert format_seconds_mmss(59.9) == "0:59"
        assert format_seconds_mmss(-1) == "0:00"

    def test_min_sec(self):
        assert format_seconds_min_sec(2124) == "35min 24sec"
        assert format_seconds_min_sec(24) == "24sec"
        assert format_seconds_min_sec(60) == "1min 0sec"
        assert format_seconds_min_sec(0) == "0sec"

    def test_format_score(self):
        assert format_score(_score(time_seconds=185), "Rx") == "3:05 Rx"
        assert format_score(_score(reps=42)) == "42 reps"
        assert format_score(_score(load=225.0)) == "225 lbs"
        assert format_score(_score(rounds_completed=5, partial_reps=12)) == "5+12"
        assert format_score(_score(rounds_completed=5)) == "5 rounds"
        assert format_score(_score()) == "-"

    def test_time_ranges(self):
        ranges = benchmark_ranges(_fran())
        assert [r[0] for r in ranges] == ["Elite", "Advanced", "Intermediate", "Beginner"]
        assert ranges[0][2] == "0:00 - 3:00"
        assert ranges[1][2] == "3:00 - 4:00"
        assert ranges[3][2] == "6:00 - ∞"

    def test_rounds_ranges(self):
        ranges = benchmark_ranges(_cindy())
        assert ranges[0][2] == "> 25"
        assert ranges[3][2] == "0 - 15"

    def test_missing_band_is_na(self):
        workout = _fran(benchmarks=BenchmarkSpec(type="load", elite=BenchmarkBand(min=300)))
        ranges = benchmark_ranges(workout)
        assert ranges[0][2] == "> 300 lbs"
        assert ranges[1][2] == "N/A"

    def test_no_ranges_without_benchmarks(self):
        assert benchmark_ranges(_murph()) == []
        assert benchmark_ranges(None) == []

    def test_badges(self):
        assert performance_badge(_fran(), _score(is_rx=False, time_seconds=150)) == ("Scaled", "gray")
        assert performance_badge(_fran(), _score(time_seconds=150)) == ("Elite", "purple")
        assert performance_badge(_fran(), _score(time_seconds=300)) == ("Intermediate", "yellow")
        assert performance_badge(_murph(), _score("murph", time_seconds=2400)) == ("Rx", "green")
