"""Overlay presentation state."""

from .overlay import DetailCard, LoadingIndicator, PoiOverlay

__all__ = ['DetailCard', 'LoadingIndicator', 'PoiOverlay']
