from hypothesis.strategies import (
    booleans,
    composite,
    floats as _floats,
    integers,
    lists,
    one_of,
    sampled_from,
    sets,
)

from ppcalc import Beatmap, Circle, Mod, Slider, Spinner, TimingPoint
from ppcalc.position import Position


def floats(*args, **kwargs):
    # I don't really want to deal with these edge cases right now.
    return _floats(*args, allow_nan=False, allow_infinity=False, **kwargs)


def mods():
    """Mod masks built from any combination of the known mods.
    """
    members = [m for m in Mod if m]
    return sets(sampled_from(members)).map(Mod.pack)


def times():
    return floats(0, 600000)


@composite
def positions(draw):
    return Position(
        x=draw(integers(0, Position.x_max)),
        y=draw(integers(0, Position.y_max)),
    )


@composite
def timing_points(draw, *, offset=None):
    inherited = draw(booleans())
    if inherited:
        ms_per_beat = -draw(floats(10, 1000))
    else:
        ms_per_beat = draw(floats(100, 2000))

    return TimingPoint(
        offset=draw(times()) if offset is None else offset,
        ms_per_beat=ms_per_beat,
        inherited=inherited,
    )


@composite
def circles(draw):
    return Circle(
        position=draw(positions()),
        time=draw(times()),
    )


@composite
def spinners(draw):
    return Spinner(
        position=draw(positions()),
        time=draw(times()),
    )


@composite
def sliders(draw):
    return Slider(
        position=draw(positions()),
        time=draw(times()),
        repeat=draw(integers(1, 10)),
        length=draw(floats(1, 1000)),
    )


def hit_objects(*, allow_sliders=True):
    if allow_sliders:
        return one_of(circles(), sliders(), spinners())
    return one_of(circles(), spinners())


@composite
def beatmaps(draw, *, allow_sliders=True, min_size=0):
    """osu!standard beatmaps with hit objects sorted by time.

    Parameters
    ----------
    allow_sliders : bool, optional
        Whether the map may contain sliders.
    min_size : int, optional
        The minimum number of hit objects.
    """
    hit_objs = draw(lists(
        hit_objects(allow_sliders=allow_sliders),
        min_size=min_size,
        max_size=50,
    ))
    hit_objs = sorted(hit_objs, key=lambda hitobj: hitobj.time)

    # the first timing point always sets the bpm
    first = draw(timing_points(offset=0.0))
    first.inherited = False
    first.ms_per_beat = abs(first.ms_per_beat)
    rest = draw(lists(timing_points(), max_size=5))

    return Beatmap(
        format_version=draw(integers(3, 14)),
        circle_size=draw(floats(0, 10)),
        overall_difficulty=draw(floats(0, 10)),
        approach_rate=draw(floats(0, 10)),
        hp_drain_rate=draw(floats(0, 10)),
        slider_multiplier=draw(floats(0.4, 3.6)),
        slider_tick_rate=draw(floats(0.5, 8)),
        timing_points=[first] + sorted(rest, key=lambda tp: tp.offset),
        hit_objects=hit_objs,
    )
