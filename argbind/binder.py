"""
Positional binding.

A PositionalBinder lives for one parse call. Positional tokens are handed to it
in arrival order and bound to the command's slots in declared order:

- a plain slot takes exactly one token,
- a remainder slot takes every following token, up to its maximum,
- a token arriving when every slot is full is refused (the caller keeps it as
  a leftover).

Required slots are checked once the scan is over (missing()).
"""
import logging

from .converters import convert, typename
from .faults import InvalidValueError
from .utils import enumerate_words, quantify

logger = logging.getLogger(__name__)


class PositionalBinder:
    """
    Bind positional tokens of one command to its slots.

    The sink values of every slot are reset when the binder is created: a plain
    slot reads None and a remainder slot an empty list until tokens arrive.
    """

    def __init__(self, positionals, sink, /):
        self._slots = tuple(positionals)
        self._sink = sink
        self._index = 0
        self._counts = [0] * len(self._slots)
        for slot in self._slots:
            setattr(sink, slot.dest, [] if slot.remainder else None)

    def __bool__(self):
        return bool(self._slots)

    @property
    def open(self):
        """
        Whether a slot can still take a token.
        """
        return self._index < len(self._slots)

    def bind(self, text, /):
        """
        Bind one token to the current slot.

        Returns False when every slot is full and the token was not taken.
        Raises InvalidValueError when the token does not convert to the slot type.
        """
        if not self.open:
            return False

        slot = self._slots[self._index]
        try:
            value = convert(text, slot.type, base=slot.base)
        except Exception as exception:
            raise InvalidValueError(
                "invalid argument for positional `%s' (expected %s): %s" % (slot.name, typename(slot.type), exception),
                input=text,
                argument=slot,
                hint="use a valid %s for %s" % (typename(slot.type), slot.name),
                exception=exception,
            ) from exception

        self._counts[self._index] += 1
        if slot.remainder:
            getattr(self._sink, slot.dest).append(value)
            if slot.maximum and self._counts[self._index] >= slot.maximum:
                self._index += 1
        else:
            setattr(self._sink, slot.dest, value)
            self._index += 1

        logger.debug("bound %r to positional %s", text, slot.name)
        return True

    def missing(self):
        """
        Build the message for unfilled required slots, None when all are filled.

        - "the required argument `Name` was not provided"
        - "the required argument `Rest (at least 2 arguments, but got only 1)` was not provided"
        - "the required arguments `A`, `B` and `C` were not provided"
        """
        names = []
        for slot, count in zip(self._slots, self._counts):
            if count >= slot.minimum:
                continue
            if not slot.remainder:
                names.append(slot.name)
            elif slot.minimum == 1:
                names.append("%s (at least %s)" % (slot.name, quantify(1, "argument")))
            else:
                names.append("%s (at least %s, but got only %d)" % (slot.name, quantify(slot.minimum, "argument"), count))

        if not names:
            return None
        if len(names) == 1:
            return "the required argument `%s` was not provided" % names[0]
        return "the required arguments %s were not provided" % enumerate_words("`%s`" % name for name in names)


__all__ = ("PositionalBinder",)
