import numpy as np
import pytest

import ppcalc.example_data.beatmaps
from ppcalc import (
    GameMode,
    InvalidArgumentError,
    MissingInputError,
    Mod,
    PerformanceResult,
    StandardDifficulty,
    UnsupportedFeatureError,
    UnsupportedModeError,
    performance_points,
)


# a map with 262 circles, 69 sliders and 5 spinners at AR5 OD8
worked_example = dict(
    max_combo=469,
    circle_count=262,
    slider_count=69,
    object_count=336,
    base_ar=5,
    base_od=8,
)


def test_worked_example_nomod():
    pp = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        **worked_example,
    )
    # the published stars are rounded to two places, so only the accuracy
    # component is matched closely
    assert pp.accuracy == pytest.approx(54.42, rel=1e-3)
    assert pp.aim == pytest.approx(36.23, rel=1e-2)
    assert pp.speed == pytest.approx(40.61, rel=1e-2)
    assert pp.total == pytest.approx(133.24, rel=1e-2)

    assert pp.combo == 469
    assert pp.max_combo == 469
    assert pp.computed_accuracy.value() == 1.0


def test_worked_example_hddt():
    pp = performance_points(
        aim_stars=2.92,
        speed_stars=3.11,
        mods=Mod.hidden | Mod.double_time,
        n100=9,
        miss_count=1,
        combo=400,
        **worked_example,
    )
    assert pp.accuracy == pytest.approx(60.41, rel=1e-3)
    assert pp.aim == pytest.approx(99.70, rel=1e-2)
    assert pp.speed == pytest.approx(101.68, rel=1e-2)
    assert pp.total == pytest.approx(266.01, rel=1e-2)

    assert str(pp.computed_accuracy) == '97.92% 9x100 0x50 1xmiss'
    assert pp.combo == 400
    assert pp.mods == Mod.hidden | Mod.double_time


def test_accuracy_percent_matches_counts():
    params = dict(
        aim_stars=2.92,
        speed_stars=3.11,
        mods=Mod.hidden | Mod.double_time,
        miss_count=1,
        combo=400,
        **worked_example,
    )
    from_counts = performance_points(n100=9, **params)
    from_percent = performance_points(accuracy_percent=97.92, **params)

    assert from_percent.computed_accuracy.n100 == 9
    assert from_percent.total == from_counts.total


def test_default_combo_subtracts_misses():
    pp = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        miss_count=3,
        **worked_example,
    )
    assert pp.combo == 466


@pytest.mark.parametrize('mod,factor', [
    (Mod.no_fail, 0.90),
    (Mod.spun_out, 0.95),
])
def test_total_multipliers(mod, factor):
    nomod = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        **worked_example,
    )
    modded = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        mods=mod,
        **worked_example,
    )
    assert modded.total == pytest.approx(nomod.total * factor)
    assert modded.aim == nomod.aim
    assert modded.speed == nomod.speed
    assert modded.accuracy == nomod.accuracy


def test_hidden_and_flashlight_accuracy_bonus():
    nomod = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        **worked_example,
    )
    hdfl = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        mods=Mod.hidden | Mod.flashlight,
        **worked_example,
    )
    assert hdfl.accuracy == pytest.approx(nomod.accuracy * 1.02 * 1.02)
    assert hdfl.aim > nomod.aim
    assert hdfl.speed == nomod.speed


def test_flashlight_aim_scales_with_length():
    nomod = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        **worked_example,
    )
    fl = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        mods=Mod.flashlight,
        **worked_example,
    )
    length_bonus = 0.95 + 0.4 * 336 / 2000
    assert fl.aim / nomod.aim == pytest.approx(1.45 * length_bonus)
    assert fl.speed == nomod.speed


def test_length_bonus_past_2000_objects():
    def aim(object_count):
        return performance_points(
            aim_stars=2.09,
            speed_stars=2.19,
            max_combo=2500,
            circle_count=1000,
            slider_count=700,
            object_count=object_count,
            base_ar=9,
            base_od=8,
        ).aim

    # the bonus is linear up to 2000 objects, then grows logarithmically
    short = 0.95 + 0.4
    long = 0.95 + 0.4 + 0.5 * np.log10(2)
    assert aim(4000) / aim(2000) == pytest.approx(long / short)


def test_high_ar_bonus():
    def aim(base_ar):
        return performance_points(
            aim_stars=2.92,
            speed_stars=3.11,
            mods=Mod.double_time,
            **{**worked_example, 'base_ar': base_ar},
        ).aim

    # AR10 is AR11 under DT, AR7 becomes AR9 which gets no bonus
    assert aim(10) / aim(7) == pytest.approx(1 + 0.45 * (11 - 10.33))


def test_score_v2_rates_all_objects():
    v1 = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        **worked_example,
    )
    v2 = performance_points(
        aim_stars=2.09,
        speed_stars=2.19,
        score_version=2,
        **worked_example,
    )
    # at 100% both accuracies are perfect, v2 counts 336 objects instead of
    # 262 circles toward the length bonus
    ratio = (336 / 262) ** 0.3
    assert v2.accuracy == pytest.approx(v1.accuracy * ratio)


def test_from_beatmap():
    beatmap = ppcalc.example_data.beatmaps.example()
    pp = performance_points(beatmap=beatmap, mods=Mod.hidden)
    stars = StandardDifficulty().calc(beatmap, mods=Mod.hidden)
    expected = performance_points(stars=stars)

    assert pp.max_combo == 17
    assert pp.combo == 17
    assert pp.mods == Mod.hidden
    assert pp.total == expected.total
    assert pp.total > 0


def test_stars_override_mods():
    beatmap = ppcalc.example_data.beatmaps.example()
    stars = StandardDifficulty().calc(beatmap, mods=Mod.double_time)
    pp = performance_points(stars=stars, mods=Mod.hard_rock)
    assert pp.mods == Mod.double_time


def test_unsupported_score_version():
    with pytest.raises(UnsupportedFeatureError):
        performance_points(
            aim_stars=2.09,
            speed_stars=2.19,
            score_version=3,
            **worked_example,
        )


def test_unsupported_mode():
    with pytest.raises(UnsupportedModeError):
        performance_points(
            mode=GameMode.mania,
            aim_stars=2.09,
            speed_stars=2.19,
            **worked_example,
        )

    beatmap = ppcalc.example_data.beatmaps.example()
    beatmap.mode = GameMode.taiko
    with pytest.raises(UnsupportedModeError):
        performance_points(beatmap=beatmap)


def test_missing_max_combo():
    params = dict(worked_example)
    del params['max_combo']
    with pytest.raises(MissingInputError):
        performance_points(aim_stars=2.09, speed_stars=2.19, **params)


@pytest.mark.parametrize('max_combo', [0, -1])
def test_invalid_max_combo(max_combo):
    params = dict(worked_example, max_combo=max_combo)
    with pytest.raises(InvalidArgumentError):
        performance_points(aim_stars=2.09, speed_stars=2.19, **params)


@pytest.mark.parametrize('field', [
    'circle_count',
    'slider_count',
    'object_count',
])
def test_missing_counts(field):
    params = dict(worked_example)
    del params[field]
    with pytest.raises(MissingInputError):
        performance_points(aim_stars=2.09, speed_stars=2.19, **params)


def test_zero_counts_are_allowed():
    params = dict(worked_example, slider_count=0)
    pp = performance_points(aim_stars=2.09, speed_stars=2.19, **params)
    assert pp.total > 0


def test_too_few_objects():
    params = dict(worked_example, object_count=300)
    with pytest.raises(InvalidArgumentError):
        performance_points(aim_stars=2.09, speed_stars=2.19, **params)


def test_missing_stars():
    with pytest.raises(MissingInputError):
        performance_points(aim_stars=2.09, **worked_example)
    with pytest.raises(MissingInputError):
        performance_points(speed_stars=2.19, **worked_example)


def test_str():
    pp = PerformanceResult(
        aim=36.2312,
        speed=40.6077,
        accuracy=54.4213,
        total=133.2391,
        computed_accuracy=None,
        combo=469,
        max_combo=469,
        mods=Mod.nomod,
    )
    assert str(pp) == '133.24 pp (36.23 aim, 40.61 speed, 54.42 acc)'
