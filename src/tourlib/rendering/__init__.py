"""Rendering for the tour viewer (requires a ModernGL context)."""

from .tour_renderer import TourRenderer

__all__ = ["TourRenderer"]
