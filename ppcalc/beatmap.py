import logging
import re

import numpy as np

from .errors import FormatError, MissingInputError
from .game_mode import GameMode
from .position import Position, playfield_center
from .utils import get_field


log = logging.getLogger(__name__)


class TimingPoint:
    """A timing point assigns properties to an offset into a beatmap.

    Parameters
    ----------
    offset : float
        When this ``TimingPoint`` takes effect in milliseconds.
    ms_per_beat : float
        The milliseconds per beat, this is another representation of BPM.
    inherited : bool
        Whether this is an inherited timing point. An inherited timing point
        does not change the BPM; its ``ms_per_beat`` value is negative and
        encodes a slider velocity multiplier as ``-100 * multiplier``.
    """
    def __init__(self, offset, ms_per_beat, inherited=False):
        self.offset = offset
        self.ms_per_beat = ms_per_beat
        self.inherited = inherited

    @property
    def velocity_multiplier(self):
        """The slider velocity multiplier of this timing point.
        """
        if self.inherited and self.ms_per_beat < 0:
            return -100.0 / self.ms_per_beat
        return 1.0

    @property
    def bpm(self):
        """The bpm of this timing point.

        If this is an inherited timing point this value will be None.
        """
        if self.inherited or self.ms_per_beat <= 0:
            return None
        return 60000 / self.ms_per_beat

    def __repr__(self):
        inherited = 'inherited ' if self.inherited else ''
        return (
            f'<{type(self).__qualname__}:'
            f' {inherited}{self.offset:g}ms, {self.ms_per_beat:g}ms/beat>'
        )

    @classmethod
    def parse(cls, data):
        """Parse a TimingPoint object from a line in a ``.osu`` file.

        Parameters
        ----------
        data : str
            The line to parse.

        Returns
        -------
        timing_point : TimingPoint
            The parsed timing point.

        Raises
        ------
        ValueError
            Raised when ``data`` does not describe a ``TimingPoint`` object.
        """
        fields = [f.strip() for f in data.split(',')]
        if len(fields) < 2:
            raise ValueError(
                f'failed to parse {cls.__qualname__} from {data!r}',
            )

        try:
            offset = float(fields[0])
        except ValueError:
            raise ValueError(f'offset should be a float, got {fields[0]!r}')

        try:
            ms_per_beat = float(fields[1])
        except ValueError:
            raise ValueError(
                f'ms_per_beat should be a float, got {fields[1]!r}',
            )

        # the 7th field is "uninherited"; older maps do not have it
        inherited = get_field(fields, 6, '1') == '0'

        return cls(offset, ms_per_beat, inherited)


class HitObject:
    """An abstract hit element for osu! standard.

    Parameters
    ----------
    position : Position
        Where this element appears on the screen.
    time : float
        When this element appears in the map in milliseconds.
    """
    type_code = None

    def __init__(self, position, time):
        self.position = position
        self.time = time

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: {self.position},'
            f' {self.time:g}ms>'
        )

    @classmethod
    def parse(cls, data):
        """Parse a HitObject object from a line in a ``.osu`` file.

        Parameters
        ----------
        data : str
            The line to parse.

        Returns
        -------
        hit_object : HitObject
            The parsed hit object. This will be the concrete subclass given
            the type.

        Raises
        ------
        ValueError
            Raised when ``data`` does not describe a ``HitObject`` object.
        """
        try:
            x, y, time, type_, *rest = data.split(',')
        except ValueError:
            raise ValueError(f'not enough elements in line, got {data!r}')

        try:
            position = Position(float(x), float(y))
        except ValueError:
            raise ValueError(
                f'position should be two floats, got {x!r}, {y!r}',
            )
        if not np.isfinite(position).all():
            raise ValueError(
                f'position should be finite, got {x!r}, {y!r}',
            )

        try:
            time = float(time)
        except ValueError:
            raise ValueError(f'time should be a float, got {time!r}')
        if not np.isfinite(time):
            raise ValueError(f'time should be finite, got {time!r}')

        try:
            type_ = int(type_)
        except ValueError:
            raise ValueError(f'type should be an int, got {type_!r}')

        # the type field also holds new combo and colour skip flags
        if type_ & Circle.type_code:
            return Circle._parse(position, time, rest)
        elif type_ & Spinner.type_code:
            return Spinner._parse(position, time, rest)
        elif type_ & Slider.type_code:
            return Slider._parse(position, time, rest)
        raise ValueError(f'unknown type code {type_!r}')


class Circle(HitObject):
    """A circle hit element.

    Parameters
    ----------
    position : Position
        Where this circle appears on the screen.
    time : float
        When this circle appears in the map in milliseconds.
    """
    type_code = 1

    @classmethod
    def _parse(cls, position, time, rest):
        return cls(position, time)


class Spinner(HitObject):
    """A spinner hit element.

    Parameters
    ----------
    position : Position
        Where this spinner appears on the screen. Spinners are always played
        in the middle of the screen so this is informational only.
    time : float
        When this spinner appears in the map in milliseconds.
    """
    type_code = 8

    def __init__(self, position=playfield_center, time=0.0):
        super().__init__(position, time)

    @classmethod
    def _parse(cls, position, time, rest):
        return cls(position, time)


class Slider(HitObject):
    """A slider hit element.

    Parameters
    ----------
    position : Position
        Where the head of this slider appears on the screen.
    time : float
        When this slider appears in the map in milliseconds.
    repeat : int
        The number of times the slider is travelled; 1 means no repeats.
    length : float
        The length of one repetition in osu! pixels.
    """
    type_code = 2

    def __init__(self, position, time, repeat, length):
        super().__init__(position, time)
        if repeat < 1:
            raise ValueError(f'repeat should be at least 1, got {repeat!r}')
        self.repeat = repeat
        self.length = length

    def ticks(self, pixels_per_beat, tick_rate):
        """The combo given by this slider: head, tail, repeats and ticks.

        Parameters
        ----------
        pixels_per_beat : float
            The slider velocity in osu! pixels per beat.
        tick_rate : float
            The number of ticks per beat.

        Returns
        -------
        combo : int
            The combo this slider is worth.
        """
        repeat = self.repeat
        num_beats = (self.length * repeat) / pixels_per_beat

        # subtract an epsilon so that whole beat counts such as 2.0000001
        # do not get an extra tick
        ticks = int(np.ceil((num_beats - 0.1) / repeat * tick_rate)) - 1
        return max(0, ticks) * repeat + repeat + 1

    @classmethod
    def _parse(cls, position, time, rest):
        # hitsound, curve, repeat, pixel_length, ...
        repeat = get_field(rest, 2)
        try:
            repeat = int(repeat)
        except ValueError:
            raise ValueError(f'repeat should be an int, got {repeat!r}')

        length = get_field(rest, 3)
        try:
            length = float(length)
        except ValueError:
            raise ValueError(
                f'pixel_length should be a float, got {length!r}',
            )
        if not np.isfinite(length):
            raise ValueError(
                f'pixel_length should be finite, got {length!r}',
            )

        return cls(position, time, repeat, length)


class Beatmap:
    """A beatmap for osu! standard, with just the data needed for difficulty
    and performance points.

    Parameters
    ----------
    format_version : int
        The version of the beatmap file.
    mode : GameMode
        The game mode.
    title : str
        The title of the song limited to ascii characters.
    title_unicode : str
        The title of the song with unicode support.
    artist : str
        The name of the song artist limited to ascii characters.
    artist_unicode : str
        The name of the song artist with unicode support.
    creator : str
        The username of the mapper.
    version : str
        The name of the beatmap's difficulty.
    hp_drain_rate : float
        The ``HP`` attribute of the beatmap.
    circle_size : float
        The ``CS`` attribute of the beatmap.
    overall_difficulty : float
        The ``OD`` attribute of the beatmap.
    approach_rate : float, optional
        The ``AR`` attribute of the beatmap. Old maps do not have an AR, in
        which case the OD is used.
    slider_multiplier : float
        The multiplier for slider velocity.
    slider_tick_rate : float
        How often slider ticks appear.
    timing_points : list[TimingPoint]
        The timing points the the map, sorted by offset.
    hit_objects : list[HitObject]
        The hit objects in the map, sorted by time.
    """
    def __init__(self,
                 *,
                 format_version=1,
                 mode=GameMode.standard,
                 title='',
                 title_unicode='',
                 artist='',
                 artist_unicode='',
                 creator='',
                 version='',
                 hp_drain_rate=5.0,
                 circle_size=5.0,
                 overall_difficulty=5.0,
                 approach_rate=None,
                 slider_multiplier=1.0,
                 slider_tick_rate=1.0,
                 timing_points=None,
                 hit_objects=None):
        self.format_version = format_version
        self.mode = mode
        self.title = title
        self.title_unicode = title_unicode
        self.artist = artist
        self.artist_unicode = artist_unicode
        self.creator = creator
        self.version = version
        self.hp_drain_rate = hp_drain_rate
        self.circle_size = circle_size
        self.overall_difficulty = overall_difficulty
        if approach_rate is None:
            approach_rate = overall_difficulty
        self.approach_rate = approach_rate
        self.slider_multiplier = slider_multiplier
        self.slider_tick_rate = slider_tick_rate
        self.timing_points = [] if timing_points is None else timing_points
        self.hit_objects = [] if hit_objects is None else hit_objects

    @property
    def display_name(self):
        """The name of the map as it appears in game.
        """
        return f'{self.artist} - {self.title} [{self.version}]'

    def _count(self, type_):
        return sum(isinstance(ob, type_) for ob in self.hit_objects)

    @property
    def circle_count(self):
        return self._count(Circle)

    @property
    def slider_count(self):
        return self._count(Slider)

    @property
    def spinner_count(self):
        return self._count(Spinner)

    @property
    def object_count(self):
        return len(self.hit_objects)

    def max_combo(self):
        """The highest combo that can be achieved on this beatmap.

        Returns
        -------
        max_combo : int
            The max combo.

        Raises
        ------
        MissingInputError
            Raised when the map has sliders but no timing points.
        """
        max_combo = 0

        timing_points = self.timing_points
        # keep track of the current timing point without rescanning from the
        # start for every slider
        index = -1
        next_offset = -np.inf
        pixels_per_beat = None

        for hit_object in self.hit_objects:
            if not isinstance(hit_object, Slider):
                max_combo += 1
                continue

            if not timing_points:
                raise MissingInputError(
                    f'{self!r} has sliders but no timing points',
                )

            while hit_object.time >= next_offset:
                index += 1
                if len(timing_points) > index + 1:
                    next_offset = timing_points[index + 1].offset
                else:
                    next_offset = np.inf

                tp = timing_points[index]
                pixels_per_beat = self.slider_multiplier * 100.0
                # maps older than v8 don't apply the velocity multiplier to
                # slider ticks
                if self.format_version >= 8:
                    pixels_per_beat *= tp.velocity_multiplier

            max_combo += hit_object.ticks(
                pixels_per_beat,
                self.slider_tick_rate,
            )

        return max_combo

    def __repr__(self):
        return f'<{type(self).__qualname__}: {self.display_name}>'

    def __str__(self):
        name = f'{self.artist} - {self.title} ['
        if self.title_unicode or self.artist_unicode:
            name += f'({self.artist_unicode} - {self.title_unicode})'
        name += f'{self.version}] mapped by {self.creator}'

        return (
            f'{name}\n'
            '\n'
            f'AR{round(self.approach_rate, 2):g}'
            f' OD{round(self.overall_difficulty, 2):g}'
            f' CS{round(self.circle_size, 2):g}'
            f' HP{round(self.hp_drain_rate, 2):g}\n'
            f'{self.circle_count} circles, {self.slider_count} sliders,'
            f' {self.spinner_count} spinners\n'
            f'{self.max_combo()} max combo\n'
        )

    @classmethod
    def from_path(cls, path):
        """Read in a ``Beatmap`` object from a file on disk.

        Parameters
        ----------
        path : str or pathlib.Path
            The path to the file to read from.

        Returns
        -------
        beatmap : Beatmap
            The parsed beatmap object.

        Raises
        ------
        FormatError
            Raised when the file is missing the ``.osu`` header.
        """
        with open(path, encoding='utf-8-sig') as file:
            return cls.from_file(file)

    @classmethod
    def from_file(cls, file):
        """Read in a ``Beatmap`` object from an open file object.

        Parameters
        ----------
        file : file-like
            The file object to read from. It is consumed line by line.

        Returns
        -------
        beatmap : Beatmap
            The parsed beatmap object.
        """
        parser = Parser()
        for line in file:
            parser.feed_line(line)
        return parser.done()

    @classmethod
    def parse(cls, data):
        """Parse a ``Beatmap`` from text in the ``.osu`` format.

        Parameters
        ----------
        data : str
            The data to parse.

        Returns
        -------
        beatmap : Beatmap
            The parsed beatmap object.

        Raises
        ------
        FormatError
            Raised when the data is missing the ``.osu`` header.
        """
        return Parser().feed(data).done()


class Parser:
    """Incremental ``.osu`` parser.

    Lines are passed one at a time to :meth:`feed_line` (or in blocks to
    :meth:`feed`) and :meth:`done` returns the finished :class:`Beatmap`.

    Malformed lines are logged and skipped; only a missing or unrecognised
    ``osu file format v<N>`` header is fatal.

    Parameters
    ----------
    beatmap : Beatmap, optional
        The beatmap to fill in. A new one is created by default.
    """
    _version_regex = re.compile(r'^osu file format v(\d+)$')
    _section_regex = re.compile(r'^\[([^\]]+)\]$')

    _metadata_fields = {
        'Title': 'title',
        'TitleUnicode': 'title_unicode',
        'Artist': 'artist',
        'ArtistUnicode': 'artist_unicode',
        'Creator': 'creator',
        'Version': 'version',
    }

    _difficulty_fields = {
        'CircleSize': 'circle_size',
        'OverallDifficulty': 'overall_difficulty',
        'ApproachRate': 'approach_rate',
        'HPDrainRate': 'hp_drain_rate',
        'SliderMultiplier': 'slider_multiplier',
        'SliderTickRate': 'slider_tick_rate',
    }

    def __init__(self, beatmap=None):
        self.beatmap = Beatmap() if beatmap is None else beatmap
        self.section = None
        self.line_number = 0
        self.skipped = 0
        self._seen_header = False
        self._seen_approach_rate = False

        self._handlers = {
            'General': self._parse_metadata,
            'Metadata': self._parse_metadata,
            'Difficulty': self._parse_difficulty,
            'TimingPoints': self._parse_timing_point,
            'HitObjects': self._parse_hit_object,
        }

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: line {self.line_number},'
            f' section {self.section!r}>'
        )

    def feed(self, data):
        """Feed a block of text.

        Parameters
        ----------
        data : str
            The text to parse.

        Returns
        -------
        self : Parser
            This parser, so that :meth:`done` can be chained.
        """
        for line in data.splitlines():
            self.feed_line(line)
        return self

    def feed_line(self, line):
        """Feed a single line.

        Parameters
        ----------
        line : str
            The line to parse, with or without its line ending.

        Raises
        ------
        FormatError
            Raised when the first significant line is not the format header.
        """
        self.line_number += 1
        if self.line_number == 1:
            line = line.lstrip('\ufeff')

        if not self._seen_header:
            # files with stray whitespace before the header exist in the wild
            line = line.strip()
            if not line or line.startswith('//'):
                return
            self._parse_header(line)
            return

        # comments, according to lazer
        if line.startswith((' ', '_')):
            return

        line = line.strip()
        if not line or line.startswith('//'):
            return

        match = self._section_regex.match(line)
        if match is not None:
            self.section = match.group(1)
            return

        handler = self._handlers.get(self.section)
        if handler is None:
            return

        try:
            handler(line)
        except ValueError as e:
            self.skipped += 1
            log.warning(
                'skipping line %d in section [%s]: %s\n> %s',
                self.line_number,
                self.section,
                e,
                line,
            )

    def done(self):
        """Finish parsing.

        Returns
        -------
        beatmap : Beatmap
            The parsed beatmap.

        Raises
        ------
        FormatError
            Raised when no format header was ever fed.
        """
        if not self._seen_header:
            raise FormatError('missing osu file format specifier')

        beatmap = self.beatmap
        if not self._seen_approach_rate:
            # old maps didn't have an AR so the OD is used as a default
            beatmap.approach_rate = beatmap.overall_difficulty
        return beatmap

    def _parse_header(self, line):
        match = self._version_regex.match(line)
        if match is None:
            raise FormatError(
                f'missing osu file format specifier in: {line!r}',
            )
        self.beatmap.format_version = int(match.group(1))
        self._seen_header = True

    @staticmethod
    def _key_value(line):
        try:
            key, value = line.split(':', 1)
        except ValueError:
            raise ValueError(f'expected a "Key: Value" pair, got {line!r}')
        return key.strip(), value.strip()

    def _parse_metadata(self, line):
        key, value = self._key_value(line)
        if key == 'Mode':
            try:
                self.beatmap.mode = GameMode(int(value))
            except ValueError:
                raise ValueError(f'unknown game mode {value!r}')
            return

        attr = self._metadata_fields.get(key)
        if attr is not None:
            setattr(self.beatmap, attr, value)

    def _parse_difficulty(self, line):
        key, value = self._key_value(line)
        attr = self._difficulty_fields.get(key)
        if attr is None:
            return

        try:
            value = float(value)
        except ValueError:
            raise ValueError(f'{key} should be a float, got {value!r}')

        setattr(self.beatmap, attr, value)
        if attr == 'approach_rate':
            self._seen_approach_rate = True

    def _parse_timing_point(self, line):
        self.beatmap.timing_points.append(TimingPoint.parse(line))

    def _parse_hit_object(self, line):
        self.beatmap.hit_objects.append(HitObject.parse(line))
