"""wodkit: movement normalization, workout search, performance levels and score import."""

__version__ = "0.1.0"
