import re

import numpy as np

from .bit_enum import BitEnum


class Mod(BitEnum):
    """The mods that affect difficulty or performance points in osu!.
    """
    nomod = 0
    no_fail = 1
    easy = 1 << 1
    touch_device = 1 << 2  # also the legacy no video bit
    hidden = 1 << 3
    hard_rock = 1 << 4
    double_time = 1 << 6
    half_time = 1 << 8
    nightcore = 1 << 9  # always used with double_time
    flashlight = 1 << 10
    spun_out = 1 << 12

    @classmethod
    def _abbreviations(cls):
        return {
            'NF': cls.no_fail,
            'EZ': cls.easy,
            'TD': cls.touch_device,
            'HD': cls.hidden,
            'HR': cls.hard_rock,
            'DT': cls.double_time,
            'HT': cls.half_time,
            'NC': cls.nightcore,
            'FL': cls.flashlight,
            'SO': cls.spun_out,
        }

    @classmethod
    def parse(cls, cs):
        """Parse a mod mask out of a string of shortened mod names.

        Parameters
        ----------
        cs : str
            The mod string, for example ``'HDDT'``. Case is ignored and
            unknown abbreviations contribute nothing.

        Returns
        -------
        mod_mask : int
            The mod mask.
        """
        cs = cs.upper()
        if cs == 'NOMOD':
            return int(cls.nomod)

        mapping = cls._abbreviations()
        return cls.pack(
            mapping[abbrev]
            for abbrev in re.findall(r'\w{2}', cs)
            if abbrev in mapping
        )

    @classmethod
    def serialize(cls, mods):
        """Serialize a mod mask into a string of shortened mod names.

        Parameters
        ----------
        mods : int
            The mod mask.

        Returns
        -------
        cs : str
            The abbreviations of the set mods in bit order, for example
            ``'HDDT'``. This is empty when no known mod is set.
        """
        names = {v: k for k, v in cls._abbreviations().items()}
        return ''.join(names[m] for m in cls.unpack(mods))


#: mods that change the playback rate
speed_changing = Mod.double_time | Mod.half_time | Mod.nightcore

#: mods that change the map's stats
map_changing = Mod.hard_rock | Mod.easy | speed_changing


OD0_MS = 79.5
OD10_MS = 19.5
AR0_MS = 1800.0
AR5_MS = 1200.0
AR10_MS = 450.0

OD_MS_STEP = (OD0_MS - OD10_MS) / 10.0
AR_MS_STEP1 = (AR0_MS - AR5_MS) / 5.0
AR_MS_STEP2 = (AR5_MS - AR10_MS) / 5.0


def ar_to_ms(ar):
    """Convert an approach rate value to milliseconds of time that an element
    appears on the screen before being hit.

    Parameters
    ----------
    ar : float
        The approach rate.

    Returns
    -------
    milliseconds : float
        The number of milliseconds that an element appears on the screen before
        being hit at the given approach rate.

    See Also
    --------
    :func:`ppcalc.mod.ms_to_ar`
    """
    # NOTE: The formula is different for ar < 5 and ar >= 5
    # see: https://osu.ppy.sh/wiki/Song_Setup#Approach_Rate
    if ar < 5.0:
        return AR0_MS - AR_MS_STEP1 * ar
    return AR5_MS - AR_MS_STEP2 * (ar - 5.0)


def ms_to_ar(ms):
    """Convert milliseconds to hit an element into an approach rate value.

    Parameters
    ----------
    ms : float
        The number of milliseconds that an element appears on the screen before
        being hit.

    Returns
    -------
    ar : float
        The approach rate value that produces the given millisecond value.

    See Also
    --------
    :func:`ppcalc.mod.ar_to_ms`
    """
    if ms > AR5_MS:
        return (AR0_MS - ms) / AR_MS_STEP1
    return 5.0 + (AR5_MS - ms) / AR_MS_STEP2


def od_to_ms_300(od):
    """Convert an overall difficulty value into milliseconds to hit an object
    at maximum accuracy.

    Parameters
    ----------
    od : float
        The overall difficulty.

    Returns
    -------
    ms : float
        The number of milliseconds to hit an object at maximum accuracy.

    Notes
    -----
    The game rounds the window up to a whole millisecond step.
    """
    return OD0_MS - np.ceil(OD_MS_STEP * od)


def ms_300_to_od(ms):
    """Convert the milliseconds to score a 300 into an OD value.

    Parameters
    ----------
    ms : float
        The length of the 300 window in milliseconds.

    Returns
    -------
    od : float
        The OD value that produces a 300 window of length ``ms``.
    """
    return (OD0_MS - ms) / OD_MS_STEP


def circle_radius(cs):
    """Compute the ``CS`` attribute into a circle radius in osu! pixels.

    Parameters
    ----------
    cs : float
        The circle size.

    Returns
    -------
    radius : float
        The radius in osu! pixels.
    """
    return (512 / 16) * (1 - 0.7 * (cs - 5) / 5)
