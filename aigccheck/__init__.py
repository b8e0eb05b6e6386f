"""Building blocks for detecting AI-generated text: models, rule engine, score fusion, Gemini analysis, reports and history storage."""

__version__ = "2.0.0"

__all__ = [
    "config",
    "gemini_analysis",
    "gemini_cache",
    "gemini_client",
    "gemini_config",
    "models",
    "multimodal",
    "reporter",
    "repository",
    "rule_engine",
]