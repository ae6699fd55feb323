from .accuracy import Accuracy
from .beatmap import (
    Beatmap,
    Circle,
    HitObject,
    Parser,
    Slider,
    Spinner,
    TimingPoint,
)
from .difficulty import Difficulty, DifficultyResult, StandardDifficulty
from .errors import (
    Error,
    FormatError,
    InvalidArgumentError,
    MissingInputError,
    UnsupportedFeatureError,
    UnsupportedModeError,
)
from .game_mode import GameMode
from .mod import Mod
from .performance import PerformanceResult, performance_points
from .position import Position
from .stats import BeatmapStats

__version__ = "0.1.0"


__all__ = [
    "Accuracy",
    "Beatmap",
    "BeatmapStats",
    "Circle",
    "Difficulty",
    "DifficultyResult",
    "Error",
    "FormatError",
    "GameMode",
    "HitObject",
    "InvalidArgumentError",
    "MissingInputError",
    "Mod",
    "Parser",
    "PerformanceResult",
    "Position",
    "Slider",
    "Spinner",
    "StandardDifficulty",
    "TimingPoint",
    "UnsupportedFeatureError",
    "UnsupportedModeError",
    "performance_points",
]
