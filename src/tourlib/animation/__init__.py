"""
Animation System

Eased, explicitly sampled camera transitions.
"""

from .easing import Easing
from .transition import CameraParameter, CameraTransitionEngine, ParameterTransition, sample

__all__ = [
    'Easing',
    'CameraParameter',
    'CameraTransitionEngine',
    'ParameterTransition',
    'sample',
]
