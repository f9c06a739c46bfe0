"""
AirHeart Gestures Module

Heart-shape detection from fingertip trails and pinch/move gestures for
scaling and rotating the detected shape.
"""
from .config import Config, load_config
from .types import Point2D, HandFrame, Mode
from .smoothing import PointSmoother, smooth_trail
from .trail import TrailBuffer, PushResult
from .heart_detector import HeartShapeClassifier, HeartAnalysis, RejectReason
from .pinch_zoom import PinchZoomController
from .rotation import RotationController
from .transform import TransformEaser
from .mode_machine import InteractionModeMachine

__all__ = [
    'Config',
    'load_config',
    'Point2D',
    'HandFrame',
    'Mode',
    'PointSmoother',
    'smooth_trail',
    'TrailBuffer',
    'PushResult',
    'HeartShapeClassifier',
    'HeartAnalysis',
    'RejectReason',
    'PinchZoomController',
    'RotationController',
    'TransformEaser',
    'InteractionModeMachine',
]
