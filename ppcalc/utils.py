import math


class no_default:
    """Sentinel type; this should not be instantiated.

    This type is used so functions can tell the difference between no argument
    passed and an explicit value passed even if ``None`` is a valid value.
    """
    def __new__(cls):
        raise TypeError('cannot create instances of sentinel type')


def get_field(cs, ix, default=no_default):
    """Index into a split line, with an optional default for short lines.
    """
    try:
        return cs[ix]
    except IndexError:
        if default is no_default:
            raise ValueError(f'missing field {ix} in {cs!r}')
        return default


def accuracy(count_300, count_100, count_50, count_miss):
    """Calculate osu! standard accuracy from discrete hit counts.

    Parameters
    ----------
    count_300 : int
        The number of 300's hit.
    count_100 : int
        The number of 100's hit.
    count_50 : int
        The number of 50's hit.
    count_miss : int
        The number of misses

    Returns
    -------
    accuracy : float
        The accuracy in the range [0, 1]. This is 0 when there are no hits or
        misses at all.
    """
    points_of_hits = count_300 * 300.0 + count_100 * 100.0 + count_50 * 50.0
    total_hits = count_300 + count_100 + count_50 + count_miss
    if total_hits <= 0:
        return 0.0
    return max(0.0, min(points_of_hits / (total_hits * 300.0), 1.0))


def round_half_up(value):
    """Round to the nearest integer, with halves going up.

    :func:`round` rounds halves to even, which gives different hit counts than
    the game does.
    """
    return int(math.floor(value + 0.5))
