"""
Value sinks.

A Namespace is the caller-owned object the parser writes option and positional
values into (one attribute per descriptor dest). Groups and subcommands with a
dest get a nested Namespace. Any object accepting setattr works as a sink; this
class only adds equality and readable representations.
"""
from rich.pretty import pretty_repr


class Namespace:
    """
    Attribute bag used as the default sink.

    >>> ns = Namespace(verbose=True)
    >>> ns.verbose
    True
    """

    def __init__(self, **values):
        vars(self).update(values)

    def __eq__(self, other):
        if not isinstance(other, Namespace):
            return NotImplemented
        return vars(self) == vars(other)

    def __contains__(self, name):
        return name in vars(self)

    def __rich_repr__(self):
        yield from vars(self).items()

    def __repr__(self):
        return "namespace(%s)" % ", ".join("%s=%s" % (name, pretty_repr(value)) for name, value in vars(self).items())


__all__ = ("Namespace",)
