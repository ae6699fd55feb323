import enum
from functools import reduce
import operator as op


class BitEnum(enum.IntEnum):
    """A type for enums representing bitmask field values.
    """
    @classmethod
    def pack(cls, members):
        """Pack a bitmask from a collection of members.

        Parameters
        ----------
        members : iterable[BitEnum]
            The members to set.

        Returns
        -------
        bitmask : int
            The packed bitmask. This is 0 when ``members`` is empty.
        """
        return reduce(op.or_, (int(m) for m in members), 0)

    @classmethod
    def unpack(cls, bitmask):
        """Unpack a bitmask into the members it contains.

        Parameters
        ----------
        bitmask : int
            The bitmask to unpack.

        Returns
        -------
        members : list[BitEnum]
            The set members in ascending bit order. Members with a value of 0
            are never included.
        """
        return sorted(
            (m for m in cls if m and (bitmask & m) == m),
            key=int,
        )
