"""File storage and serialization for the workout corpus and score log."""
