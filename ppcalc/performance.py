import logging

import numpy as np

from .accuracy import Accuracy
from .difficulty import StandardDifficulty
from .errors import (
    InvalidArgumentError,
    MissingInputError,
    UnsupportedFeatureError,
)
from .game_mode import GameMode, require_standard
from .mod import Mod
from .stats import BeatmapStats


log = logging.getLogger(__name__)


class PerformanceResult:
    """The performance points awarded for a play.

    Parameters
    ----------
    aim : float
        The aim component.
    speed : float
        The speed component.
    accuracy : float
        The accuracy component.
    total : float
        The combined performance points.
    computed_accuracy : Accuracy
        The hit counts the play was scored with.
    combo : int
        The combo of the play.
    max_combo : int
        The maximum combo of the map.
    mods : int
        The mods of the play.
    """
    def __init__(self,
                 *,
                 aim,
                 speed,
                 accuracy,
                 total,
                 computed_accuracy,
                 combo,
                 max_combo,
                 mods):
        self.aim = aim
        self.speed = speed
        self.accuracy = accuracy
        self.total = total
        self.computed_accuracy = computed_accuracy
        self.combo = combo
        self.max_combo = max_combo
        self.mods = mods

    def __repr__(self):
        return f'<{type(self).__qualname__}: {self.total:.2f}pp>'

    def __str__(self):
        return (
            f'{self.total:.2f} pp ({self.aim:.2f} aim, {self.speed:.2f} speed,'
            f' {self.accuracy:.2f} acc)'
        )


def _base_performance(stars):
    return (5.0 * max(1.0, stars / 0.0675) - 4.0) ** 3.0 / 100000.0


def standard_performance_points(*,
                                beatmap=None,
                                stars=None,
                                aim_stars=None,
                                speed_stars=None,
                                max_combo=None,
                                circle_count=None,
                                slider_count=None,
                                object_count=None,
                                base_ar=5.0,
                                base_od=5.0,
                                mods=Mod.nomod,
                                combo=None,
                                n300=None,
                                n100=0,
                                n50=0,
                                miss_count=0,
                                score_version=1,
                                accuracy_percent=None):
    """Compute the osu!standard performance points for a play.

    See :func:`performance_points` for the parameters.

    Returns
    -------
    result : PerformanceResult
        The performance points.
    """
    if score_version not in (1, 2):
        raise UnsupportedFeatureError(
            f'unsupported score version: {score_version!r}',
        )

    if stars is not None:
        beatmap = stars.beatmap

    if beatmap is not None:
        require_standard(beatmap.mode)
        max_combo = beatmap.max_combo()
        circle_count = beatmap.circle_count
        slider_count = beatmap.slider_count
        object_count = beatmap.object_count
        base_ar = beatmap.approach_rate
        base_od = beatmap.overall_difficulty

        if stars is None:
            stars = StandardDifficulty().calc(beatmap, mods)
    else:
        if max_combo is None:
            raise MissingInputError('max_combo is required without a beatmap')
        if max_combo <= 0:
            raise InvalidArgumentError(
                f'max_combo must be positive, got {max_combo!r}',
            )

        if None in (circle_count, slider_count, object_count):
            raise MissingInputError(
                'circle_count, slider_count and object_count are required'
                ' without a beatmap',
            )
        if object_count < circle_count + slider_count:
            raise InvalidArgumentError(
                f'object_count ({object_count}) must be at least'
                f' circle_count + slider_count'
                f' ({circle_count} + {slider_count})',
            )

    if stars is not None:
        mods = stars.mods
        aim_stars = stars.aim
        speed_stars = stars.speed

    if aim_stars is None or speed_stars is None:
        raise MissingInputError('aim and speed stars are required')

    if n300 is None:
        n300 = object_count - n100 - n50 - miss_count

    if combo is None:
        combo = max(0, max_combo - miss_count)

    object_count_over_2k = object_count / 2000.0
    length_bonus = 0.95 + 0.4 * min(1.0, object_count_over_2k)
    if object_count > 2000:
        length_bonus += np.log10(object_count_over_2k) * 0.5

    miss_penalty = 0.97 ** miss_count
    combo_break = combo ** 0.8 / max_combo ** 0.8

    stats = BeatmapStats(ar=base_ar, od=base_od).with_mods(mods)

    computed_accuracy = Accuracy(
        n300=n300,
        n100=n100,
        n50=n50,
        miss_count=miss_count,
        object_count=object_count,
        percent=accuracy_percent,
    )
    n300 = computed_accuracy.n300
    n100 = computed_accuracy.n100
    n50 = computed_accuracy.n50
    accuracy = computed_accuracy.value()

    # high/low ar bonus
    ar_bonus = 1.0
    if stats.ar > 10.33:
        ar_bonus += 0.45 * (stats.ar - 10.33)
    elif stats.ar < 8.0:
        low_ar_bonus = 0.01 * (8.0 - stats.ar)
        if mods & Mod.hidden:
            low_ar_bonus *= 2.0
        ar_bonus += low_ar_bonus

    accuracy_bonus = 0.5 + accuracy / 2.0
    od_bonus = 0.98 + stats.od ** 2 / 2500.0

    aim = (
        _base_performance(aim_stars) *
        length_bonus *
        miss_penalty *
        combo_break *
        ar_bonus
    )
    if mods & Mod.hidden:
        aim *= 1.18
    if mods & Mod.flashlight:
        aim *= 1.45 * length_bonus
    aim *= accuracy_bonus * od_bonus

    speed = (
        _base_performance(speed_stars) *
        length_bonus *
        miss_penalty *
        combo_break *
        accuracy_bonus *
        od_bonus
    )

    if score_version == 1:
        # sliders and spinners are free 300s in scorev1
        spinner_count = object_count - slider_count - circle_count
        real_accuracy = Accuracy(
            n300=max(0, n300 - slider_count - spinner_count),
            n100=n100,
            n50=n50,
            miss_count=miss_count,
        ).value()
    else:
        real_accuracy = accuracy
        circle_count = object_count

    accuracy_pp = (
        1.52163 ** stats.od *
        real_accuracy ** 24.0 *
        2.83 *
        min(1.15, (circle_count / 1000.0) ** 0.3)
    )
    if mods & Mod.hidden:
        accuracy_pp *= 1.02
    if mods & Mod.flashlight:
        accuracy_pp *= 1.02

    final_multiplier = 1.12
    if mods & Mod.no_fail:
        final_multiplier *= 0.90
    if mods & Mod.spun_out:
        final_multiplier *= 0.95

    total = (
        (aim ** 1.1 + speed ** 1.1 + accuracy_pp ** 1.1) ** (1.0 / 1.1) *
        final_multiplier
    )

    log.debug(
        'effective AR %.2f OD %.2f, length bonus %.4f, combo break %.4f',
        stats.ar,
        stats.od,
        length_bonus,
        combo_break,
    )

    return PerformanceResult(
        aim=float(aim),
        speed=float(speed),
        accuracy=float(accuracy_pp),
        total=float(total),
        computed_accuracy=computed_accuracy,
        combo=combo,
        max_combo=max_combo,
        mods=mods,
    )


_calculators = {
    GameMode.standard: standard_performance_points,
}


def performance_points(*, beatmap=None, stars=None, mode=None, **params):
    """Compute the performance points for a play.

    Parameters
    ----------
    beatmap : Beatmap, optional
        The beatmap played. Supplies the max combo, object counts and base
        AR/OD. When ``stars`` is not given the beatmap is rated with ``mods``.
    stars : DifficultyResult, optional
        A star rating. Supplies the beatmap, mods and aim/speed stars.
    aim_stars : float, optional
        The aim stars, when neither ``beatmap`` nor ``stars`` is given.
    speed_stars : float, optional
        The speed stars, when neither ``beatmap`` nor ``stars`` is given.
    max_combo : int, optional
        The maximum combo of the map. Required without a beatmap.
    circle_count : int, optional
        The number of circles. Required without a beatmap.
    slider_count : int, optional
        The number of sliders. Required without a beatmap.
    object_count : int, optional
        The number of objects. Required without a beatmap.
    base_ar : float, optional
        The approach rate without mods. Defaults to 5.
    base_od : float, optional
        The overall difficulty without mods. Defaults to 5.
    mode : GameMode, optional
        The game mode when no beatmap is given. Defaults to standard.
    mods : int, optional
        The mod mask. Ignored when ``stars`` is given.
    combo : int, optional
        The combo of the play. Defaults to full combo minus the misses.
    n300 : int, optional
        The number of 300s. Defaults to the objects not otherwise judged.
    n100 : int, optional
        The number of 100s.
    n50 : int, optional
        The number of 50s.
    miss_count : int, optional
        The number of misses.
    score_version : {1, 2}, optional
        The scoring system. Score v1 only rates accuracy on circles.
    accuracy_percent : float, optional
        A target accuracy; overrides ``n300``, ``n100`` and ``n50``.

    Returns
    -------
    result : PerformanceResult
        The performance points.

    Raises
    ------
    MissingInputError
        Raised when a required input is absent.
    InvalidArgumentError
        Raised when the inputs are inconsistent.
    UnsupportedModeError
        Raised for game modes other than osu!standard.
    UnsupportedFeatureError
        Raised for an unknown ``score_version``.
    """
    if stars is not None:
        mode = stars.beatmap.mode
    elif beatmap is not None:
        mode = beatmap.mode
    elif mode is None:
        mode = GameMode.standard

    if mode not in _calculators:
        require_standard(mode)

    return _calculators[mode](beatmap=beatmap, stars=stars, **params)
