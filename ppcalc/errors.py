class Error(Exception):
    """Base class for the errors raised by ppcalc.
    """


class FormatError(Error, ValueError):
    """Raised when beatmap text is missing the ``osu file format v<N>``
    header.
    """


class MissingInputError(Error, TypeError):
    """Raised when a required input was not given and cannot be derived.
    """


class UnsupportedModeError(Error, NotImplementedError):
    """Raised for game modes other than osu!standard.
    """


class UnsupportedFeatureError(Error, NotImplementedError):
    """Raised for unknown scoring versions.
    """


class InvalidArgumentError(Error, ValueError):
    """Raised when an input is present but inconsistent or out of range.
    """
