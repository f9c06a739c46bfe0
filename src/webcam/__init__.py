"""
AirHeart Webcam Module

Camera capture and MediaPipe hand tracking feeding the gesture pipeline.
"""
from .hand_tracker import HandTracker
from .worker import InteractionWorker

__all__ = [
    'HandTracker',
    'InteractionWorker',
]
