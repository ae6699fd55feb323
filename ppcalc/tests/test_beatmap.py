import logging
from math import isclose

import pytest

import ppcalc.example_data.beatmaps
from ppcalc import (
    Beatmap,
    Circle,
    FormatError,
    GameMode,
    MissingInputError,
    Parser,
    Slider,
    Spinner,
    TimingPoint,
)
from ppcalc.position import Position


def osu_text(header='osu file format v14',
             difficulty=('OverallDifficulty:8', 'ApproachRate:9'),
             timing_points=('0,500,4,2,0,50,1,0',),
             hit_objects=('64,64,500,1,0,0:0:0:0:',)):
    return '\n'.join([
        header,
        '',
        '[General]',
        'Mode: 0',
        '',
        '[Difficulty]',
        *difficulty,
        'SliderMultiplier:1.4',
        'SliderTickRate:1',
        '',
        '[TimingPoints]',
        *timing_points,
        '',
        '[HitObjects]',
        *hit_objects,
        '',
    ])


@pytest.fixture
def beatmap():
    return ppcalc.example_data.beatmaps.example()


def test_version(beatmap):
    assert beatmap.format_version == 14


def test_display_name(beatmap):
    assert beatmap.display_name == 'ppcalc - Example [Normal]'


def test_parse_section_metadata(beatmap):
    assert beatmap.title == 'Example'
    assert beatmap.title_unicode == 'Example'
    assert beatmap.artist == 'ppcalc'
    assert beatmap.artist_unicode == 'ppcalc'
    assert beatmap.creator == 'ppcalc'
    assert beatmap.version == 'Normal'
    assert beatmap.mode == GameMode.standard


def test_parse_section_difficulty(beatmap):
    assert beatmap.hp_drain_rate == 5.0
    assert beatmap.circle_size == 4.0
    assert beatmap.overall_difficulty == 8.0
    assert beatmap.approach_rate == 9.0
    assert beatmap.slider_multiplier == 1.4
    assert beatmap.slider_tick_rate == 1.0


def test_parse_section_timing_points(beatmap):
    first, second = beatmap.timing_points

    assert first.offset == 0.0
    assert first.ms_per_beat == 500.0
    assert not first.inherited
    assert first.bpm == 120.0
    assert first.velocity_multiplier == 1.0

    assert second.offset == 4000.0
    assert second.inherited
    assert second.bpm is None
    assert isclose(second.velocity_multiplier, 2.0)


def test_parse_section_hit_objects(beatmap):
    types = [type(ob) for ob in beatmap.hit_objects]
    assert types == [
        Circle,
        Slider,
        Circle,
        Slider,
        Circle,
        Circle,
        Slider,
        Spinner,
        Circle,
        Circle,
    ]

    slider = beatmap.hit_objects[3]
    assert slider.position == Position(256, 256)
    assert slider.time == 2000.0
    assert slider.repeat == 2
    assert slider.length == 280.0


def test_counts(beatmap):
    assert beatmap.circle_count == 6
    assert beatmap.slider_count == 3
    assert beatmap.spinner_count == 1
    assert beatmap.object_count == 10


def test_max_combo(beatmap):
    # 6 circles + 1 spinner + sliders worth 2, 5 and 3
    assert beatmap.max_combo() == 17


def test_str(beatmap):
    assert str(beatmap) == (
        'ppcalc - Example [(ppcalc - Example)Normal] mapped by ppcalc\n'
        '\n'
        'AR9 OD8 CS4 HP5\n'
        '6 circles, 3 sliders, 1 spinners\n'
        '17 max combo\n'
    )


def test_old_format_ignores_velocity_multiplier(beatmap):
    # before v8 the inherited timing point does not change slider ticks, so
    # the last slider is worth 5 instead of 3
    beatmap.format_version = 7
    assert beatmap.max_combo() == 19


def test_slider_ticks():
    assert Slider(Position(0, 0), 0.0, 1, 140.0).ticks(140.0, 1.0) == 2
    assert Slider(Position(0, 0), 0.0, 2, 280.0).ticks(140.0, 1.0) == 5
    assert Slider(Position(0, 0), 0.0, 1, 560.0).ticks(280.0, 1.0) == 3
    assert Slider(Position(0, 0), 0.0, 1, 560.0).ticks(140.0, 1.0) == 5
    # very short sliders never have a negative tick count
    assert Slider(Position(0, 0), 0.0, 3, 1.0).ticks(140.0, 1.0) == 4


def test_slider_repeat_must_be_positive():
    with pytest.raises(ValueError):
        Slider(Position(0, 0), 0.0, 0, 100.0)


def test_max_combo_no_sliders():
    beatmap = Beatmap.parse(osu_text(hit_objects=(
        '64,64,500,1,0,0:0:0:0:',
        '256,192,1000,12,0,2000,0:0:0:0:',
        '128,64,2500,5,0,0:0:0:0:',
    )))
    assert beatmap.max_combo() == 3


def test_max_combo_slider_without_timing_points():
    beatmap = Beatmap.parse(osu_text(
        timing_points=(),
        hit_objects=('128,64,1000,2,0,L|268:64,1,140',),
    ))
    with pytest.raises(MissingInputError):
        beatmap.max_combo()


def test_max_combo_slider_before_first_timing_point():
    beatmap = Beatmap.parse(osu_text(
        timing_points=('1000,500,4,2,0,50,1,0',),
        hit_objects=('128,64,0,2,0,L|268:64,1,140',),
    ))
    assert beatmap.max_combo() == 2


def test_missing_header():
    with pytest.raises(FormatError):
        Beatmap.parse(osu_text(header='not an osu file'))


def test_empty_input():
    with pytest.raises(FormatError):
        Beatmap.parse('')


def test_header_with_bom_and_leading_blank_lines():
    text = osu_text(header='osu file format v9')
    beatmap = Beatmap.parse('\ufeff\n\n' + text)
    assert beatmap.format_version == 9


def test_approach_rate_defaults_to_overall_difficulty():
    beatmap = Beatmap.parse(osu_text(difficulty=('OverallDifficulty:7',)))
    assert beatmap.approach_rate == 7.0


def test_mode():
    beatmap = Beatmap.parse(osu_text().replace('Mode: 0', 'Mode: 1'))
    assert beatmap.mode == GameMode.taiko


def test_comments_and_unknown_sections_are_ignored():
    beatmap = Beatmap.parse(osu_text(hit_objects=(
        '// a comment',
        ' 1,2,3,1,0',
        '_1,2,3,1,0',
        '64,64,500,1,0,0:0:0:0:',
        '',
        '[Colours]',
        'Combo1 : 255,0,0',
    )))
    assert beatmap.object_count == 1


def test_malformed_lines_are_skipped(caplog):
    parser = Parser()
    with caplog.at_level(logging.WARNING, logger='ppcalc.beatmap'):
        parser.feed(osu_text(
            difficulty=('OverallDifficulty:eight', 'ApproachRate:9'),
            timing_points=('0,500,4,2,0,50,1,0', 'nonsense'),
            hit_objects=(
                '64,64,500,1,0,0:0:0:0:',
                '1,2',
                '64,64,abc,1,0',
                '64,64,700,64,0',
                '128,64,1000,2,0,L|268:64,0,140',
                '128,64,1000,2,0,L|268:64',
            ),
        ))
    beatmap = parser.done()

    assert parser.skipped == 7
    assert len(caplog.records) == 7
    assert all(r.levelno == logging.WARNING for r in caplog.records)
    assert 'nonsense' in caplog.text

    # the malformed OD keeps its default
    assert beatmap.overall_difficulty == 5.0
    assert len(beatmap.timing_points) == 1
    assert beatmap.object_count == 1


def test_non_finite_fields_are_skipped(caplog):
    with caplog.at_level(logging.WARNING, logger='ppcalc.beatmap'):
        beatmap = Beatmap.parse(osu_text(hit_objects=(
            '64,64,500,1,0,0:0:0:0:',
            '128,64,1000,2,0,L|268:64,1,nan',
            '128,64,1500,2,0,L|268:64,1,inf',
            '64,64,inf,1,0',
            'nan,64,2000,1,0',
        )))

    assert len(caplog.records) == 4
    assert 'finite' in caplog.text
    assert beatmap.object_count == 1
    assert beatmap.max_combo() == 1


def test_feed_line_matches_parse():
    text = osu_text(hit_objects=(
        '64,64,500,1,0,0:0:0:0:',
        '128,64,1000,2,0,L|268:64,1,140',
    ))

    parser = Parser()
    for line in text.splitlines(keepends=True):
        parser.feed_line(line)
    fed = parser.done()
    parsed = Beatmap.parse(text)

    assert fed.format_version == parsed.format_version
    assert fed.overall_difficulty == parsed.overall_difficulty
    assert fed.max_combo() == parsed.max_combo() == 3
    assert [type(ob) for ob in fed.hit_objects] == [Circle, Slider]


def test_timing_point_parse_short_line():
    # old maps only have offset and ms per beat
    tp = TimingPoint.parse('100,-200')
    assert tp.offset == 100.0
    assert tp.ms_per_beat == -200.0
    assert not tp.inherited
    assert tp.velocity_multiplier == 1.0


def test_timing_point_parse_invalid():
    with pytest.raises(ValueError):
        TimingPoint.parse('100')
    with pytest.raises(ValueError):
        TimingPoint.parse('abc,500')
