import logging
import re

import click

from . import Beatmap, Difficulty, Error, Mod, performance_points


_play_patterns = (
    ('n100', re.compile(r'^(\d+)x100$')),
    ('n50', re.compile(r'^(\d+)x50$')),
    ('accuracy_percent', re.compile(r'^(\d+(?:\.\d*)?)%$')),
    ('combo', re.compile(r'^(\d+)x$')),
    ('miss_count', re.compile(r'^(\d+)(?:m|xm|xmiss)$')),
)


def parse_play(tokens):
    """Parse the mods and play description tokens of the command line.

    Parameters
    ----------
    tokens : iterable[str]
        Tokens like ``+HDDT``, ``97.92%``, ``400x``, ``1m`` or ``9x100``.

    Returns
    -------
    mods : int
        The mod mask.
    params : dict
        Keyword arguments for :func:`ppcalc.performance_points`.

    Raises
    ------
    click.BadParameter
        Raised for a token that matches none of the forms.
    """
    mods = Mod.nomod
    params = {}

    for token in tokens:
        if token.startswith('+'):
            mods = Mod.parse(token[1:])
            continue

        for name, pattern in _play_patterns:
            match = pattern.match(token.lower())
            if match is not None:
                value = match.group(1)
                if name == 'accuracy_percent':
                    params[name] = float(value)
                else:
                    params[name] = int(value)
                break
        else:
            raise click.BadParameter(
                f'unrecognized play argument {token!r}',
                param_hint='PLAY',
            )

    return mods, params


@click.command()
@click.argument(
    'beatmap',
    type=click.Path(exists=True, dir_okay=False),
)
@click.argument('play', nargs=-1)
@click.option(
    '--score-version',
    type=click.Choice(['1', '2']),
    default='1',
    help='The scoring system; score v1 only rates accuracy on circles.',
)
@click.option(
    '--singletap-threshold',
    type=float,
    default=None,
    help='Interval in milliseconds counted as a singletap.',
)
@click.option(
    '-v',
    '--verbose',
    count=True,
    help='Log more; pass twice for debug output.',
)
def main(beatmap, play, score_version, singletap_threshold, verbose):
    """Compute the star rating and performance points of a play on an
    osu!standard beatmap.

    PLAY is any of +MODS, ACC%, COMBOx, MISSESm, N100x100 and N50x50, for
    example: +HDDT 97.92% 400x 1m
    """
    logging.basicConfig(
        level=(logging.WARNING, logging.INFO, logging.DEBUG)[min(verbose, 2)],
        format='%(levelname)s %(name)s: %(message)s',
    )

    mods, params = parse_play(play)

    try:
        beatmap = Beatmap.from_path(beatmap)
        stars = Difficulty().calc(
            beatmap,
            mods=mods,
            singletap_threshold=singletap_threshold,
        )
        pp = performance_points(
            stars=stars,
            score_version=int(score_version),
            **params,
        )
    except Error as e:
        raise click.ClickException(str(e))

    click.echo(str(beatmap))
    click.echo(f'+{Mod.serialize(mods) or "nomod"}')
    click.echo(str(stars))
    click.echo(str(pp.computed_accuracy))
    click.echo(f'{pp.combo}/{pp.max_combo} combo')
    click.echo(str(pp))


if __name__ == '__main__':
    main()
