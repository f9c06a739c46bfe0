"""
Config loader for AirHeart.
Loads YAML configuration with dataclass validation.

Every section validates itself on construction, so an invalid threshold
is rejected before any component is built from it.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
import math
import yaml


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30
    mirror: bool = True

    def __post_init__(self):
        _require(self.width > 0 and self.height > 0, "camera width/height must be positive")
        _require(self.fps > 0, "camera fps must be positive")


@dataclass
class MediaPipeConfig:
    model_path: Optional[str] = None  # defaults to models/hand_landmarker.task
    max_num_hands: int = 1
    min_detection_confidence: float = 0.3
    min_tracking_confidence: float = 0.3

    def __post_init__(self):
        _require(self.max_num_hands >= 1, "mediapipe max_num_hands must be >= 1")
        _require(0.0 <= self.min_detection_confidence <= 1.0,
                 "mediapipe min_detection_confidence must be in [0, 1]")
        _require(0.0 <= self.min_tracking_confidence <= 1.0,
                 "mediapipe min_tracking_confidence must be in [0, 1]")


@dataclass
class SmoothingConfig:
    alpha: float = 0.3  # EMA weight of the new sample (higher = snappier, more jitter)
    trail_weights: Tuple[float, ...] = (0.1, 0.2, 0.4, 0.2, 0.1)

    def __post_init__(self):
        self.trail_weights = tuple(float(w) for w in self.trail_weights)
        _require(0.0 < self.alpha <= 1.0, f"smoothing alpha must be in (0, 1], got {self.alpha}")
        _require(len(self.trail_weights) % 2 == 1, "smoothing trail_weights must have odd length")
        _require(all(w > 0 for w in self.trail_weights), "smoothing trail_weights must be positive")


@dataclass
class TrailConfig:
    min_movement: float = 0.005   # Normalized distance a point must move to be stored
    max_points: int = 200
    idle_timeout: float = 0.6     # Seconds without an accepted point before reset
    idle_min_points: int = 7      # Idle reset only applies above this many points

    def __post_init__(self):
        _require(self.min_movement >= 0.0, "trail min_movement must be >= 0")
        _require(self.max_points >= 1, "trail max_points must be >= 1")
        _require(self.idle_timeout > 0.0, "trail idle_timeout must be positive")
        _require(0 <= self.idle_min_points < self.max_points,
                 "trail idle_min_points must be in [0, max_points)")


@dataclass
class HeartConfig:
    min_points: int = 12
    max_points: int = 400

    # Bounding box size, normalized units
    min_width: float = 0.06
    min_height: float = 0.08
    max_width: float = 0.9
    max_height: float = 0.95

    # height / width
    min_aspect: float = 0.8
    max_aspect: float = 3.0

    band: float = 0.1                   # Fraction of height excluded around center_y
    min_lobe_points: int = 3            # Per side, upper region
    min_tip_points: int = 3             # Lower region
    max_tip_width_ratio: float = 0.9    # Lower span / overall width
    max_closure_ratio: float = 0.5      # Start-end distance / overall width

    cooldown_time: float = 1.5          # Seconds

    def __post_init__(self):
        _require(1 <= self.min_points <= self.max_points,
                 "heart min_points must be >= 1 and <= max_points")
        _require(0.0 <= self.min_width <= self.max_width, "heart min_width must be <= max_width")
        _require(0.0 <= self.min_height <= self.max_height, "heart min_height must be <= max_height")
        _require(0.0 < self.min_aspect <= self.max_aspect, "heart min_aspect must be > 0 and <= max_aspect")
        _require(0.0 <= self.band < 0.5, "heart band must be in [0, 0.5)")
        _require(self.min_lobe_points >= 1 and self.min_tip_points >= 1,
                 "heart lobe/tip point minimums must be >= 1")
        _require(self.max_tip_width_ratio > 0.0, "heart max_tip_width_ratio must be positive")
        _require(self.max_closure_ratio > 0.0, "heart max_closure_ratio must be positive")
        _require(self.cooldown_time >= 0.0, "heart cooldown_time must be >= 0")


@dataclass
class PinchConfig:
    debounce_interval: float = 0.03   # Seconds between processed frames
    noise_threshold: float = 0.005    # Distance change treated as tremor
    min_scale: float = 0.25
    max_scale: float = 4.0

    # Ease-out acceleration for sustained pinches
    acceleration: bool = True
    base_speed: float = 0.5
    max_speed: float = 3.0
    accel_constant: float = 0.8       # Seconds
    accel_gain: float = 0.3

    anchor_weight: float = 0.7        # Weight of the new distance when re-anchoring

    def __post_init__(self):
        _require(self.debounce_interval >= 0.0, "pinch debounce_interval must be >= 0")
        _require(self.noise_threshold >= 0.0, "pinch noise_threshold must be >= 0")
        _require(0.0 < self.min_scale <= self.max_scale,
                 f"pinch min_scale ({self.min_scale}) must be > 0 and <= max_scale ({self.max_scale})")
        _require(0.0 <= self.base_speed <= self.max_speed, "pinch base_speed must be <= max_speed")
        _require(self.accel_constant > 0.0, "pinch accel_constant must be positive")
        _require(self.accel_gain >= 0.0, "pinch accel_gain must be >= 0")
        _require(0.0 < self.anchor_weight <= 1.0, "pinch anchor_weight must be in (0, 1]")


@dataclass
class RotationConfig:
    dead_zone: float = 0.005
    sensitivity: float = 3.0
    max_pitch: float = math.pi / 2    # Clamp for rotation_x, radians

    def __post_init__(self):
        _require(self.dead_zone >= 0.0, "rotation dead_zone must be >= 0")
        _require(self.sensitivity > 0.0, "rotation sensitivity must be positive")
        _require(0.0 < self.max_pitch <= math.pi, "rotation max_pitch must be in (0, pi]")


@dataclass
class InteractionConfig:
    detection_interval: float = 0.1   # Seconds between heart checks (0 = every frame)
    detection_min_points: int = 15
    smooth_before_detection: bool = False
    exclusive_gestures: bool = True   # Skip rotation on frames that changed the scale

    def __post_init__(self):
        _require(self.detection_interval >= 0.0, "interaction detection_interval must be >= 0")
        _require(self.detection_min_points >= 1, "interaction detection_min_points must be >= 1")


@dataclass
class TransformConfig:
    min_scale: float = 0.4
    max_scale: float = 3.3
    scale_easing: float = 0.05
    rotation_easing: float = 0.08

    def __post_init__(self):
        _require(0.0 < self.min_scale <= self.max_scale, "transform min_scale must be > 0 and <= max_scale")
        _require(0.0 < self.scale_easing <= 1.0, "transform scale_easing must be in (0, 1]")
        _require(0.0 < self.rotation_easing <= 1.0, "transform rotation_easing must be in (0, 1]")


@dataclass
class UIConfig:
    window_name: str = "AirHeart"
    debug_overlay: bool = False


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    trail: TrailConfig = field(default_factory=TrailConfig)
    heart: HeartConfig = field(default_factory=HeartConfig)
    pinch: PinchConfig = field(default_factory=PinchConfig)
    rotation: RotationConfig = field(default_factory=RotationConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.

    Raises:
        ValueError: If any section holds an invalid value.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        smoothing=_dict_to_dataclass(SmoothingConfig, data.get('smoothing')),
        trail=_dict_to_dataclass(TrailConfig, data.get('trail')),
        heart=_dict_to_dataclass(HeartConfig, data.get('heart')),
        pinch=_dict_to_dataclass(PinchConfig, data.get('pinch')),
        rotation=_dict_to_dataclass(RotationConfig, data.get('rotation')),
        interaction=_dict_to_dataclass(InteractionConfig, data.get('interaction')),
        transform=_dict_to_dataclass(TransformConfig, data.get('transform')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )
