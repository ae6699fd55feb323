from .errors import MissingInputError
from .utils import accuracy as calculate_accuracy, round_half_up


class Accuracy:
    """osu!standard accuracy, as judgement counts.

    Parameters
    ----------
    n300 : int, optional
        The number of 300s. When omitted it is the remainder of the object
        count after the other judgements.
    n100 : int, optional
        The number of 100s.
    n50 : int, optional
        The number of 50s.
    miss_count : int, optional
        The number of misses.
    object_count : int, optional
        The number of objects in the map. Required with ``percent``.
    percent : float, optional
        A target accuracy in the range [0, 100]. When given, the 300, 100 and
        50 counts are solved for to be as close as possible to this value and
        the explicit ``n300``, ``n100`` and ``n50`` are ignored.

    Raises
    ------
    MissingInputError
        Raised when ``percent`` is given without ``object_count``.
    """
    def __init__(self,
                 *,
                 n300=None,
                 n100=0,
                 n50=0,
                 miss_count=0,
                 object_count=None,
                 percent=None):
        self.n300 = n300
        self.n100 = n100
        self.n50 = n50
        self.miss_count = miss_count
        self.object_count = object_count

        if percent is not None:
            if object_count is None:
                raise MissingInputError(
                    'object_count is required when specifying percent',
                )
            self._round_hitcounts(percent, object_count)

    def _round_hitcounts(self, percent, object_count):
        """Solve for the hit counts closest to ``percent``.
        """
        self.miss_count = miss_count = min(object_count, self.miss_count)
        max_300 = object_count - miss_count

        max_accuracy = calculate_accuracy(max_300, 0, 0, miss_count) * 100.0
        percent = max(0.0, min(max_accuracy, percent))

        # solve the accuracy formula for n100 assuming no 50s
        missing = (percent * 0.01 - 1.0) * object_count + miss_count
        n100 = round_half_up(-1.5 * missing)
        n50 = 0

        if n100 > max_300:
            # acc lower than all 100s, use 50s
            n100 = 0
            n50 = min(max_300, round_half_up(-1.2 * missing))

        self.n100 = n100
        self.n50 = n50
        self.n300 = object_count - n100 - n50 - miss_count

    def value(self, object_count=None):
        """The accuracy value.

        Parameters
        ----------
        object_count : int, optional
            The number of objects; only needed when ``n300`` was not given
            and no ``object_count`` was passed to the constructor.

        Returns
        -------
        accuracy : float
            The accuracy in the range [0, 1].

        Raises
        ------
        MissingInputError
            Raised when ``n300`` cannot be derived.
        """
        n300 = self.n300
        if n300 is None:
            if object_count is None:
                object_count = self.object_count
            if object_count is None:
                raise MissingInputError(
                    'either n300 or object_count must be specified',
                )
            n300 = object_count - self.n100 - self.n50 - self.miss_count

        return calculate_accuracy(n300, self.n100, self.n50, self.miss_count)

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: n300={self.n300}, n100={self.n100},'
            f' n50={self.n50}, miss_count={self.miss_count}>'
        )

    def __str__(self):
        return (
            f'{self.value() * 100.0:.2f}% {self.n100}x100 {self.n50}x50'
            f' {self.miss_count}xmiss'
        )
