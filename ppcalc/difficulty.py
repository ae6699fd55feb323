from enum import IntEnum, unique

import numpy as np

from .beatmap import Circle, Slider, Spinner
from .errors import MissingInputError
from .game_mode import GameMode, require_standard
from .mod import Mod, circle_radius
from .position import distance, playfield_center
from .stats import BeatmapStats


@unique
class Strain(IntEnum):
    """Indices for the strain specific values.
    """
    speed = 0
    aim = 1


class DifficultyHitObject:
    """An object used to accumulate the strain information for calculating
    stars.

    Parameters
    ----------
    hit_object : HitObject
        The hit object to wrap.
    scaling_factor : float
        The factor that normalizes positions to a common circle size.
    """
    decay_base = 0.3, 0.15

    almost_diameter = 90.0

    stream_spacing = 110.0
    single_spacing = 125.0

    weight_scaling = 1400.0, 26.25

    def __init__(self, hit_object, scaling_factor):
        self.hit_object = hit_object

        if isinstance(hit_object, Spinner):
            position = playfield_center
        else:
            position = hit_object.position
        self.normalized_position = position.scale(scaling_factor)

        self.strains = [0.0, 0.0]
        self.is_single = False

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: {self.hit_object!r},'
            f' speed={self.strains[Strain.speed]:g},'
            f' aim={self.strains[Strain.aim]:g}>'
        )

    def calculate_strains(self, previous, speed_multiplier):
        """Compute both strains of this object from the previous one.

        Parameters
        ----------
        previous : DifficultyHitObject
            The previous difficulty hit object.
        speed_multiplier : float
            The playback rate.
        """
        for strain in Strain:
            self.strains[strain] = self._calculate_strain(
                previous,
                strain,
                speed_multiplier,
            )

    def _calculate_strain(self, previous, strain, speed_multiplier):
        result = 0.0

        time_elapsed = (
            self.hit_object.time - previous.hit_object.time
        ) / speed_multiplier
        decay = self.decay_base[strain] ** (time_elapsed / 1000.0)

        if isinstance(self.hit_object, (Circle, Slider)):
            d = distance(
                self.normalized_position,
                previous.normalized_position,
            )
            if strain == Strain.speed:
                self.is_single = d > self.single_spacing
            result = (
                self._spacing_weight(d, strain) *
                self.weight_scaling[strain]
            )

        result /= max(time_elapsed, 50.0)
        return previous.strains[strain] * decay + result

    def _spacing_weight(self, distance, strain):
        if strain == Strain.speed:
            if distance > self.single_spacing:
                return 2.5
            elif distance > self.stream_spacing:
                return (
                    1.6 +
                    0.9 *
                    (distance - self.stream_spacing) /
                    (self.single_spacing - self.stream_spacing)
                )
            elif distance > self.almost_diameter:
                return (
                    1.2 +
                    0.4 *
                    (distance - self.almost_diameter) /
                    (self.stream_spacing - self.almost_diameter)
                )
            elif distance > self.almost_diameter / 2.0:
                return (
                    0.95 +
                    0.25 *
                    (distance - self.almost_diameter / 2.0) /
                    (self.almost_diameter / 2.0)
                )
            return 0.95

        return distance ** 0.99


class DifficultyResult:
    """The star rating of a beatmap with a given mod combination.

    Parameters
    ----------
    beatmap : Beatmap
        The beatmap that was rated.
    mods : int
        The mods the rating was computed with.
    aim : float
        The aim stars.
    speed : float
        The speed stars.
    total : float
        The total stars.
    singles : int
        The number of objects the speed strain considers single taps.
    singles_threshold : int
        The number of circles and sliders at least ``singletap_threshold``
        milliseconds after the previous object.
    singletap_threshold : float
        The interval used for ``singles_threshold``.
    speed_multiplier : float
        The playback rate implied by ``mods``.
    objects : list[DifficultyHitObject]
        The per-object strain state.
    """
    def __init__(self,
                 *,
                 beatmap,
                 mods,
                 aim,
                 speed,
                 total,
                 singles,
                 singles_threshold,
                 singletap_threshold,
                 speed_multiplier,
                 objects):
        self.beatmap = beatmap
        self.mods = mods
        self.aim = aim
        self.speed = speed
        self.total = total
        self.singles = singles
        self.singles_threshold = singles_threshold
        self.singletap_threshold = singletap_threshold
        self.speed_multiplier = speed_multiplier
        self.objects = objects

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: {self.beatmap!r},'
            f' +{Mod.serialize(self.mods) or "nomod"}, {self.total:.2f}>'
        )

    def __str__(self):
        return (
            f'{self.total:.2f} stars ({self.aim:.2f} aim,'
            f' {self.speed:.2f} speed)'
        )

    def strain_timeline(self):
        """The strain of each object over time.

        Returns
        -------
        times : np.ndarray
            Column vector of object times in milliseconds.
        strains : np.ndarray
            Array of strains as ``float64``. Speed in the first column, aim in
            the second.
        """
        times = np.array(
            [ob.hit_object.time for ob in self.objects],
            dtype=np.float64,
        ).reshape((-1, 1))
        strains = np.array(
            [ob.strains for ob in self.objects],
            dtype=np.float64,
        ).reshape((-1, 2))
        return times, strains


class StandardDifficulty:
    """osu!standard difficulty calculator.

    Slider paths are not taken into account; only the object positions and
    times are.

    The beatmap, mods and singletap threshold given to :meth:`calc` are
    remembered, so later calls may omit them to reuse the previous values.
    """
    strain_step = 400.0
    decay_weight = 0.9

    circle_size_buffer_threshold = 30.0

    star_scaling_factor = 0.0675
    extreme_scaling_factor = 0.5

    # 240 bpm 1/2 notes
    default_singletap_threshold = (60000 / 240) / 2

    def __init__(self):
        self.beatmap = None
        self.mods = Mod.nomod
        self.singletap_threshold = self.default_singletap_threshold

    def calc(self, beatmap=None, mods=None, singletap_threshold=None):
        """Compute the star rating of a beatmap.

        Parameters
        ----------
        beatmap : Beatmap, optional
            The beatmap to rate. Defaults to the beatmap of the previous
            call.
        mods : int, optional
            The mod mask. Defaults to the mods of the previous call, or no
            mods.
        singletap_threshold : float, optional
            Interval in milliseconds for counting ``singles_threshold``.
            Defaults to the previous value, or 125ms (240 bpm 1/2 notes).

        Returns
        -------
        result : DifficultyResult
            The star rating.

        Raises
        ------
        MissingInputError
            Raised when no beatmap was given to this or any previous call.
        UnsupportedModeError
            Raised when the beatmap is not an osu!standard map.
        """
        if beatmap is not None:
            self.beatmap = beatmap
        if mods is not None:
            self.mods = mods
        if singletap_threshold is not None:
            self.singletap_threshold = singletap_threshold

        beatmap = self.beatmap
        if beatmap is None:
            raise MissingInputError('no beatmap given')
        require_standard(beatmap.mode)

        mods = self.mods
        stats = BeatmapStats(cs=beatmap.circle_size).with_mods(mods)
        speed_multiplier = stats.speed_multiplier

        objects = self._difficulty_hit_objects(
            beatmap.hit_objects,
            stats.cs,
            speed_multiplier,
        )

        speed = self._calculate_difficulty(
            Strain.speed,
            objects,
            speed_multiplier,
        )
        aim = self._calculate_difficulty(
            Strain.aim,
            objects,
            speed_multiplier,
        )

        scaling = self.star_scaling_factor
        speed = np.sqrt(speed) * scaling
        aim = np.sqrt(aim) * scaling
        if mods & Mod.touch_device:
            aim = aim ** 0.8

        # heavily aim or speed focused maps get a bonus
        total = (
            aim +
            speed +
            abs(speed - aim) *
            self.extreme_scaling_factor
        )

        singles, singles_threshold = self._count_singles(
            objects,
            speed_multiplier,
            self.singletap_threshold,
        )

        return DifficultyResult(
            beatmap=beatmap,
            mods=mods,
            aim=float(aim),
            speed=float(speed),
            total=float(total),
            singles=singles,
            singles_threshold=singles_threshold,
            singletap_threshold=self.singletap_threshold,
            speed_multiplier=speed_multiplier,
            objects=objects,
        )

    def scaling_factor(self, cs):
        """The factor that normalizes positions on circle radius so that
        everything is rated as if it had the same circle size.

        Parameters
        ----------
        cs : float
            The effective circle size.

        Returns
        -------
        scaling_factor : float
            The factor to multiply positions by.
        """
        radius = circle_radius(cs)
        scaling_factor = 52.0 / radius

        # high circle size (small circles) bonus
        threshold = self.circle_size_buffer_threshold
        if radius < threshold:
            scaling_factor *= 1.0 + min(threshold - radius, 5.0) / 50.0

        return scaling_factor

    def _difficulty_hit_objects(self, hit_objects, cs, speed_multiplier):
        scaling_factor = self.scaling_factor(cs)

        objects = [
            DifficultyHitObject(hit_object, scaling_factor)
            for hit_object in hit_objects
        ]
        for previous, current in zip(objects, objects[1:]):
            current.calculate_strains(previous, speed_multiplier)

        return objects

    def _calculate_difficulty(self, strain, difficulty_hit_objects,
                              speed_multiplier):
        """Aggregate one strain into a weighted difficulty value.

        The map is analyzed in chunks of ``strain_step`` milliseconds. The
        highest strain of each chunk is collected and the chunks are summed
        with decaying weights, hardest first.
        """
        highest_strains = []
        append_highest_strain = highest_strains.append

        decay_base = DifficultyHitObject.decay_base[strain]
        strain_step = self.strain_step * speed_multiplier
        interval_end = strain_step
        max_strain = 0.0

        previous = None
        for difficulty_hit_object in difficulty_hit_objects:
            while difficulty_hit_object.hit_object.time > interval_end:
                append_highest_strain(max_strain)

                # the new chunk starts at the previous object's strain,
                # decayed to the start of the chunk
                if previous is None:
                    max_strain = 0.0
                else:
                    decay = decay_base ** (
                        (interval_end - previous.hit_object.time) / 1000.0
                    )
                    max_strain = previous.strains[strain] * decay

                interval_end += strain_step

            max_strain = max(max_strain, difficulty_hit_object.strains[strain])
            previous = difficulty_hit_object

        difficulty = 0.0
        weight = 1.0

        decay_weight = self.decay_weight
        for value in sorted(highest_strains, reverse=True):
            difficulty += value * weight
            weight *= decay_weight

        return difficulty

    def _count_singles(self, objects, speed_multiplier, threshold):
        singles = 0
        singles_threshold = 0

        for previous, current in zip(objects, objects[1:]):
            if current.is_single:
                singles += 1

            if not isinstance(current.hit_object, (Circle, Slider)):
                continue

            interval = (
                current.hit_object.time - previous.hit_object.time
            ) / speed_multiplier
            if interval >= threshold:
                singles_threshold += 1

        return singles, singles_threshold


class Difficulty:
    """Difficulty calculator that picks a mode specific calculator based on
    the beatmap's game mode.

    Calculators are cached per mode on this instance, and the last beatmap is
    remembered so later calls may omit it.
    """
    calculator_types = {
        GameMode.standard: StandardDifficulty,
    }

    def __init__(self):
        self.beatmap = None
        self._calculators = {}

    def calculator(self, mode):
        """The calculator for a game mode.

        Parameters
        ----------
        mode : GameMode
            The game mode.

        Returns
        -------
        calculator : StandardDifficulty
            The cached calculator for ``mode``.

        Raises
        ------
        UnsupportedModeError
            Raised when there is no calculator for ``mode``.
        """
        try:
            return self._calculators[mode]
        except KeyError:
            pass

        if mode not in self.calculator_types:
            require_standard(mode)

        self._calculators[mode] = calculator = self.calculator_types[mode]()
        return calculator

    def calc(self, beatmap=None, mods=None, singletap_threshold=None):
        """Compute the star rating of a beatmap.

        Parameters
        ----------
        beatmap : Beatmap, optional
            The beatmap to rate. Defaults to the beatmap of the previous
            call.
        mods : int, optional
            The mod mask, forwarded to the mode specific calculator.
        singletap_threshold : float, optional
            The singletap threshold in milliseconds, forwarded to the mode
            specific calculator.

        Returns
        -------
        result : DifficultyResult
            The star rating.

        Raises
        ------
        MissingInputError
            Raised when no beatmap was given to this or any previous call.
        UnsupportedModeError
            Raised when the beatmap's mode is not supported.
        """
        if beatmap is not None:
            self.beatmap = beatmap

        beatmap = self.beatmap
        if beatmap is None:
            raise MissingInputError('no beatmap given')

        return self.calculator(beatmap.mode).calc(
            beatmap,
            mods,
            singletap_threshold,
        )
