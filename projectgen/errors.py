from __future__ import annotations

class ProjectGenError(Exception):
    """Base error for failures inside the generation pipeline."""

class GenerationError(ProjectGenError):
    """The text-generation service failed or returned nothing usable."""

class RenderError(ProjectGenError):
    """The headless browser could not produce the PDF."""
