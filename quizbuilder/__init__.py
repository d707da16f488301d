"""Quiz builder: LLM-backed quiz generation and normalization service."""

__version__ = "0.1.0"
