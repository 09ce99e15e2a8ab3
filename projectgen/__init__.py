"""School project generator: async LLM-to-PDF job service."""

__version__ = "0.1.0"
