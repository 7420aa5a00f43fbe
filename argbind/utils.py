"""
Small helpers shared by the descriptor, parser and fault layers.

- Unset / UnsetType: "not provided", distinct from None (a default of None is a
  real default).
- coalesce(): turn Unset into a fallback.
- rename(): give generated callables a readable name for tracebacks.
- mirror(): read-only property handing out copies of a private field.
- pluralize() / quantify() / enumerate_words(): message wording.

    >>> coalesce(Unset, "fallback"), coalesce(None, "fallback")
    ('fallback', None)
    >>> enumerate_words(["val1", "val2", "val3"], "or")
    'val1, val2 or val3'
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel: falsy, printed as "Unset", one instance per
    process. Usable in isinstance() unions (str | Unset).
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object, or default when object is Unset. Falsy values are kept.
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) sets __name__ and __qualname__ in place;
    rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")
        return functools.partial(_rename, name=name)
    if len(parameters) == 2:
        callable, name = parameters
        return _rename(callable, name=name)
    raise TypeError("rename() takes 1 or 2 arguments but %d were given" % len(parameters))


def _rename(callable, /, *, name):
    if not builtins.callable(callable):
        raise TypeError("rename() target must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    callable.__name__ = callable.__qualname__ = name
    return callable


def _immortalize(object):
    """
    Copy containers recursively (sequences to lists, mappings to dicts, sets to
    sets). Named tuples and other objects are returned by identity.
    """
    if isinstance(object, tuple) and hasattr(object, "_fields"):
        return object
    if isinstance(object, Sequence) and not isinstance(object, str):
        return [_immortalize(item) for item in object]
    if isinstance(object, Mapping):
        return {key: _immortalize(value) for key, value in object.items()}
    if isinstance(object, Set):
        return {_immortalize(item) for item in object}
    return object


def mirror(name, /):
    """
    Read-only property reading self._<name>, containers copied on every access.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Pluralize the last word of a phrase ("required flag" -> "required flags").
    """
    head, _, word = text.rpartition(" ")
    lower = word.lower()
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        plural = word + "es"
    elif lower.endswith("y") and lower[-2:-1] not in ("", "a", "e", "i", "o", "u"):
        plural = word[:-1] + "ies"
    else:
        plural = word + "s"
    if word.isupper():
        plural = plural.upper()
    return head + " " + plural if head else plural


def quantify(count, word, /):
    """
    "1 argument" / "3 arguments".
    """
    return "%d %s" % (count, word if count == 1 else pluralize(word))


def enumerate_words(words, /, conjunction="and"):
    """
    Join words as "a", "a and b", "a, b and c".
    """
    words = list(words)
    if len(words) < 2:
        return "".join(words)
    return "%s %s %s" % (", ".join(words[:-1]), conjunction, words[-1])


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "quantify",
    "enumerate_words",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
