"""Core configuration, logging, parsing and LLM access."""
