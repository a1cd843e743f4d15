"""Career Matcher package."""

__all__ = [
    "main",
    "config",
    "errors",
    "models",
    "db",
    "extractor",
    "job_processor",
    "scorer",
    "recommender",
    "ranker",
]
