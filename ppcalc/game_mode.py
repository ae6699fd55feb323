from enum import IntEnum, unique

from .errors import UnsupportedModeError


@unique
class GameMode(IntEnum):
    """The various game modes in osu!.
    """
    standard = 0
    taiko = 1
    ctb = 2
    mania = 3


def require_standard(mode):
    """Check that ``mode`` is osu!standard.

    Parameters
    ----------
    mode : GameMode or int
        The mode to check.

    Raises
    ------
    UnsupportedModeError
        Raised when ``mode`` is not :data:`GameMode.standard`.
    """
    if mode != GameMode.standard:
        try:
            name = GameMode(mode).name
        except ValueError:
            name = repr(mode)
        raise UnsupportedModeError(f'game mode {name} is not supported')
