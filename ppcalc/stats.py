from .mod import (
    AR0_MS,
    AR10_MS,
    Mod,
    OD0_MS,
    OD10_MS,
    ar_to_ms,
    map_changing,
    ms_300_to_od,
    ms_to_ar,
    od_to_ms_300,
)


def apply_ar(ar, speed_multiplier, multiplier):
    """Compute the effective approach rate under mods.

    Parameters
    ----------
    ar : float
        The base approach rate.
    speed_multiplier : float
        The playback rate.
    multiplier : float
        The flat multiplier from HR/EZ.

    Returns
    -------
    ar : float
        The effective approach rate.

    Notes
    -----
    The window is capped to the AR0-AR10 range before the speed change, which
    lets the result reach -5 to 11.
    """
    ms = ar_to_ms(ar * multiplier)
    ms = min(AR0_MS, max(AR10_MS, ms))
    return ms_to_ar(ms / speed_multiplier)


def apply_od(od, speed_multiplier, multiplier):
    """Compute the effective overall difficulty under mods.

    Parameters
    ----------
    od : float
        The base overall difficulty.
    speed_multiplier : float
        The playback rate.
    multiplier : float
        The flat multiplier from HR/EZ.

    Returns
    -------
    od : float
        The effective overall difficulty.
    """
    ms = od_to_ms_300(od * multiplier)
    ms = min(OD0_MS, max(OD10_MS, ms))
    return ms_300_to_od(ms / speed_multiplier)


class BeatmapStats:
    """The difficulty settings of a map, optionally adjusted for mods.

    Parameters
    ----------
    ar : float, optional
        The approach rate.
    od : float, optional
        The overall difficulty.
    cs : float, optional
        The circle size.
    hp : float, optional
        The HP drain rate.
    speed_multiplier : float, optional
        The playback rate these stats were computed for.

    Notes
    -----
    Stats that are ``None`` are left untouched by :meth:`with_mods`.

    The mod cache is a plain dict; share an instance between threads only
    with external locking.
    """
    def __init__(self,
                 *,
                 ar=None,
                 od=None,
                 cs=None,
                 hp=None,
                 speed_multiplier=1.0):
        self.ar = ar
        self.od = od
        self.cs = cs
        self.hp = hp
        self.speed_multiplier = speed_multiplier
        self._mods_cache = {}

    def __repr__(self):
        fields = ', '.join(
            f'{name}={getattr(self, name)!r}'
            for name in ('ar', 'od', 'cs', 'hp', 'speed_multiplier')
        )
        return f'<{type(self).__qualname__}: {fields}>'

    @classmethod
    def from_beatmap(cls, beatmap):
        """The base stats of a beatmap.
        """
        return cls(
            ar=beatmap.approach_rate,
            od=beatmap.overall_difficulty,
            cs=beatmap.circle_size,
            hp=beatmap.hp_drain_rate,
        )

    def with_mods(self, mods):
        """Compute these stats with mods applied.

        Parameters
        ----------
        mods : int
            The mod mask.

        Returns
        -------
        stats : BeatmapStats
            The adjusted stats. The same object is returned for every call
            with the same ``mods`` on this instance.
        """
        mods = int(mods)
        try:
            return self._mods_cache[mods]
        except KeyError:
            pass

        self._mods_cache[mods] = stats = self._compute_with_mods(mods)
        return stats

    def _compute_with_mods(self, mods):
        ar, od, cs, hp = self.ar, self.od, self.cs, self.hp
        if not mods & map_changing:
            return type(self)(ar=ar, od=od, cs=cs, hp=hp)

        speed_multiplier = 1.0
        if mods & (Mod.double_time | Mod.nightcore):
            speed_multiplier = 1.5
        if mods & Mod.half_time:
            speed_multiplier *= 0.75

        multiplier = 1.0
        if mods & Mod.hard_rock:
            multiplier = 1.4
        if mods & Mod.easy:
            multiplier *= 0.5

        if ar is not None:
            ar = apply_ar(ar, speed_multiplier, multiplier)

        if od is not None:
            od = apply_od(od, speed_multiplier, multiplier)

        if cs is not None:
            if mods & Mod.hard_rock:
                cs *= 1.3
            if mods & Mod.easy:
                cs *= 0.5
            cs = min(10.0, cs)

        if hp is not None:
            hp = min(10.0, hp * multiplier)

        return type(self)(
            ar=ar,
            od=od,
            cs=cs,
            hp=hp,
            speed_multiplier=speed_multiplier,
        )
