from importlib.resources import files

from ppcalc import Beatmap


def example_beatmap(name):
    """Load one of the example beatmaps.

    Parameters
    ----------
    name : str
        The name of the example file to open.

    Returns
    -------
    beatmap : Beatmap
        The parsed beatmap.
    """
    with files(__name__).joinpath(name).open(encoding='utf-8-sig') as file:
        return Beatmap.from_file(file)


def example(version='Normal'):
    """Load the bundled example map.

    The map has 6 circles, 3 sliders and 1 spinner with a max combo of 17.
    The last slider sits under an inherited timing point that doubles the
    slider velocity.

    Parameters
    ----------
    version : str
        The version to load.

    Returns
    -------
    example : Beatmap
        The beatmap object.
    """
    return example_beatmap(f'ppcalc - Example (ppcalc) [{version}].osu')
