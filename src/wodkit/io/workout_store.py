"""
File storage for the workout corpus and the score log.

The corpus is a JSON array of workout records (read-only here). Scores
are kept in a JSONL file, one score per line.
"""

import json
import uuid
from collections import defaultdict
from pathlib import Path
from typing import Iterable

from ..core.models import ProposedScore, Score, Workout
from .serializers import ValidationError, dict_to_score, dict_to_workout, score_to_json_line


class WorkoutStore:
    """
    Reads the workout corpus and reads/appends the score log.

    Both paths are independent; a missing scores file is treated as an
    empty log, a missing corpus file is an error.
    """

    def __init__(self, workouts_path: str | Path, scores_path: str | Path):
        """
        Initialize the store.

        Args:
            workouts_path: Path to the workouts JSON file
            scores_path: Path to the scores JSONL file
        """
        self.workouts_path = Path(workouts_path)
        self.scores_path = Path(scores_path)

    def load_workouts(self) -> list[Workout]:
        """
        Load the workout corpus.

        Returns:
            Workouts in file order

        Raises:
            FileNotFoundError: If the workouts file doesn't exist
            ValidationError: If the file or a record is invalid
        """
        if not self.workouts_path.exists():
            raise FileNotFoundError(f"Workouts file not found: {self.workouts_path}")

        try:
            with open(self.workouts_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.workouts_path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("workouts")
        if not isinstance(data, list):
            raise ValidationError(f"{self.workouts_path} must contain a list of workouts")

        workouts: list[Workout] = []
        for i, record in enumerate(data):
            if not isinstance(record, dict):
                raise ValidationError(f"Workout #{i} in {self.workouts_path} is not an object")
            try:
                workouts.append(dict_to_workout(record))
            except ValidationError as e:
                raise ValidationError(f"Workout #{i} in {self.workouts_path}: {e}") from e
        return workouts

    def load_scores(self) -> list[Score]:
        """
        Load all scores from the log.

        Returns:
            Scores sorted by date (oldest first); empty if the log doesn't exist

        Raises:
            ValidationError: If a line is invalid
        """
        if not self.scores_path.exists():
            return []

        scores: list[Score] = []
        with open(self.scores_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    scores.append(dict_to_score(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.scores_path}: {e}"
                    ) from e

        scores.sort(key=lambda s: s.score_date)
        return scores

    def append_scores(self, scores: Iterable[Score]) -> int:
        """
        Append scores to the log, creating it if needed.

        Returns:
            Number of scores written
        """
        self.scores_path.parent.mkdir(parents=True, exist_ok=True)
        written = 0
        with open(self.scores_path, "a", encoding="utf-8") as f:
            for score in scores:
                f.write(score_to_json_line(score) + "\n")
                written += 1
        return written

    def save_proposed(self, proposed: Iterable[ProposedScore]) -> list[Score]:
        """Assign ids to confirmed import scores and append them."""
        scores = [p.to_score(uuid.uuid4().hex) for p in proposed]
        self.append_scores(scores)
        return scores

    def scores_by_workout(self) -> dict[str, list[Score]]:
        """
        Group logged scores by workout id.

        Returns:
            workout id -> scores, newest first
        """
        grouped: dict[str, list[Score]] = defaultdict(list)
        for score in self.load_scores():
            grouped[score.workout_id].append(score)
        for scores in grouped.values():
            scores.sort(key=lambda s: s.score_date, reverse=True)
        return dict(grouped)


def get_default_workouts_path() -> Path:
    """
    Get the default workouts file path.

    Returns:
        ~/.wodkit/workouts.json
    """
    return Path.home() / ".wodkit" / "workouts.json"


def get_default_scores_path() -> Path:
    """
    Get the default score log path.

    Returns:
        ~/.wodkit/scores.jsonl
    """
    return Path.home() / ".wodkit" / "scores.jsonl"
