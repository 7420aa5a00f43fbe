"""
Argbind command layer: the descriptor tables the parser runs against.

What this module provides
- Command: one descriptor table (options, flags, groups, positional slots) plus
  its subcommands. The root command is what a Parser is built from; every
  subcommand is itself a Command attached under a parent.
- Entry: a resolved named spec inside a table, i.e. the spec plus its effective
  short/long names (group namespaces applied), the path of group dests leading
  to its sink, and its user-facing label.

Core ideas
- Tables are immutable once built and can be shared by any number of parsers.
- Lookups walk the tree: a command's own table (with its groups flattened in
  declaration order) first, then the enclosing command, up to the root. Options
  of a parent stay usable after a subcommand was selected.
- Every identity is unique across the visible chain. Collisions (short or long
  names, sink dests, subcommand names/aliases) are construction-time errors.

Quick start
    from argbind import Command, Flag, Option, Positional

    root = Command(
        Flag("-v", "--verbose"),
        commands=(
            Command(
                Option("-m", "--message", required=True),
                Positional("PATHS", remainder=True),
                name="commit",
                aliases=("ci",),
            ),
        ),
    )
"""
import functools
import operator
import re
from typing import NamedTuple

from .arguments import Flag, Option, Positional, Group, _label
from .utils import *


class Entry(NamedTuple):
    argument: Option | Flag
    short: str | UnsetType
    long: str | UnsetType
    path: tuple
    label: str


class CommandType(type):
    """
    Metaclass providing stable representations and mirrored read-only fields
    for Command (see argbind.arguments for the same pattern on specs).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _process_arguments(cls, metadata):
    """
    Split the declared arguments into named entries and positional slots.

    - Groups are walked recursively; their namespace prefixes long names and
      their dest extends the sink path.
    - Positional slots keep declaration order and must satisfy: at most one
      remainder, the remainder is last, no required slot after an optional one.
    """
    entries = metadata["entries"] = []
    positionals = metadata["positionals"] = []

    def _walk(arguments, namespace, path):
        for argument in arguments:
            if isinstance(argument, Group):
                _walk(
                    argument.arguments,
                    ".".join(filter(None, (namespace, coalesce(argument.namespace, "")))),
                    path + ((argument.dest,) if argument.dest else ()),
                )
            elif isinstance(argument, Option | Flag):
                long = argument.long
                if long and namespace:
                    long = "%s.%s" % (namespace, long)
                entries.append(Entry(argument, argument.short, long, path, _label(argument.short, long)))
            else:
                raise TypeError(f"{cls.__typename__} arguments must be options, flags, groups or positionals")

    named = []
    for argument in metadata["arguments"]:
        if isinstance(argument, Positional):
            positionals.append(argument)
        else:
            named.append(argument)
    _walk(named, "", ())

    remainder = None
    optional = None
    for positional in positionals:
        if remainder:
            raise TypeError(f"{cls.__typename__} remainder positional {remainder!r} must be the last positional")
        remainder = positional.name if positional.remainder else None
        if positional.minimum and optional:
            raise TypeError(f"{cls.__typename__} required positional {positional.name!r} cannot follow the optional positional {optional!r}")
        optional = optional or (positional.name if not positional.minimum else None)

    dests = set()
    for path, dest in [(entry.path, entry.argument.dest) for entry in entries] + [((), positional.dest) for positional in positionals]:
        if (path, dest) in dests:
            raise ValueError(f"{cls.__typename__} dest {'.'.join(path + (dest,))!r} is already in use")
        dests.add((path, dest))
    # a group sink cannot share its attribute with a value
    for path, dest in dests:
        for index in range(len(path)):
            if (path[:index], path[index]) in dests:
                raise ValueError(f"{cls.__typename__} dest {'.'.join(path[:index + 1])!r} is already in use")
    metadata["dests"] = dests


def _check_names(cls, entries, inherited, /):
    """
    Reject short/long names already used in the table or by an enclosing command.

    inherited maps "-x"/"--name" spellings to the label of their owner.
    """
    seen = dict(inherited)
    for entry in entries:
        for spelling in ("-%s" % entry.short if entry.short else None, "--%s" % entry.long if entry.long else None):
            if spelling is None:
                continue
            if spelling in seen:
                raise ValueError(f"{cls.__typename__} option `{entry.label}' uses the same name as option `{seen[spelling]}'")
            seen[spelling] = entry.label
    return seen


def _attach_to_parent(self, parent):
    """
    Register this command under its parent, enforcing single attachment and
    unique names/aliases among siblings.
    """
    if self._parent is not Unset:
        raise ValueError(f"{type(self).__typename__} {self.name!r} is already attached to a parent")
    if self.name is None:
        raise TypeError(f"sub{type(self).__typename__} must have a 'name'")

    for name in (self.name, *self.aliases):
        if parent._children.setdefault(name, self) is not self:
            raise ValueError(f"{type(self).__typename__} name {name!r} is already in use")

    if ((), self.dest) in parent._dests or any(path[:1] == (self.dest,) for path, _ in parent._dests):
        raise ValueError(f"{type(self).__typename__} dest {self.dest!r} is already in use")
    parent._dests.add(((), self.dest))

    self._parent = parent


def _check_tree(command, inherited, /):
    """
    Verify a whole subtree against the names visible from its ancestors.

    Runs again every time a subtree is attached under a new parent, so names
    of commands built later (higher in the tree) are checked as well.
    """
    visible = _check_names(type(command), command._entries, inherited)
    for child in command._commands:
        _check_tree(child, visible)


class Command(metaclass=CommandType):
    """
    Descriptor table of one command level.

    Parameters
    - *arguments: Option, Flag, Group and Positional specs, in declaration order.
    - name: the command name (required for subcommands, optional for the root).
    - aliases: alternative names for a subcommand.
    - commands: subcommands (Command instances, attached to this one).
    - dest: sink attribute holding the subcommand's nested Namespace; defaults
      to the name with '-' turned into '_'.
    - optional: when subcommands exist, whether selecting one is optional.
    - descr: short description (metadata only).

    Notes
    - Collections are exposed as read-only copies (mirror()).
    - entries/positionals/commands are stored in declaration order.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "dest",
        "optional",
        "descr",
        "entries",
        "positionals",
        "commands",
    )

    __displayable__ = (
        "name",
        "aliases",
        "dest",
        "optional",
        "entries",
        "positionals",
        "commands",
    )

    @property
    def root(self):
        """
        Return the topmost command in the current command hierarchy.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the full ancestry from root to this command as a tuple.
        """
        path = [command := self]
        while command.parent:
            path.append(command := command.parent)
        return tuple(reversed(path))

    @property
    def children(self):
        """
        Subcommands by name and alias.
        """
        return dict(self._children)

    def __new__(
            cls,
            *arguments,
            name=Unset,
            aliases=(),
            commands=(),
            dest=Unset,
            optional=False,
            descr=Unset,
    ):
        if not isinstance(name, str | Unset):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif isinstance(name, str) and not re.fullmatch(r"[^\W_][\w.:-]*", name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' must be a word that does not start with '-'")

        if isinstance(aliases, str):
            raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
        for alias in (aliases := tuple(aliases)):
            if not isinstance(alias, str) or not re.fullmatch(r"[^\W_][\w.:-]*", alias):
                raise ValueError(f"{cls.__typename__} 'aliases' must be words that do not start with '-'")
        if aliases and name is Unset:
            raise TypeError(f"{cls.__typename__} 'aliases' require a 'name'")

        if not isinstance(dest, str | Unset):
            raise TypeError(f"{cls.__typename__} 'dest' must be a string")
        dest = coalesce(dest, name.replace("-", "_") if name else None)
        if dest is not None and not dest.isidentifier():
            raise ValueError(f"{cls.__typename__} {name!r} must specify a valid 'dest'")

        if not isinstance(descr, str | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")

        metadata = {"arguments": arguments}
        _process_arguments(cls, metadata)

        self = super().__new__(cls)
        self._name = coalesce(name)
        self._aliases = aliases
        self._dest = dest
        self._optional = bool(optional)
        self._descr = coalesce(descr)
        self._entries = tuple(metadata["entries"])
        self._positionals = tuple(metadata["positionals"])
        self._dests = metadata["dests"]
        self._shorts = {entry.short: entry for entry in self._entries if entry.short}
        self._longs = {entry.long: entry for entry in self._entries if entry.long}
        self._children = {}
        self._parent = Unset

        for command in commands:
            if not isinstance(command, Command):
                raise TypeError(f"{cls.__typename__} 'commands' must be commands")
            _attach_to_parent(command, self)
        self._commands = tuple(commands)

        _check_tree(self, {})
        return self

    @property
    def parent(self):
        """
        The enclosing command, None for a root.
        """
        return coalesce(self._parent)

    def find(self, prefix, name, /):
        """
        Resolve an option spelling ("-" + "v" or "--" + "verbose") in this table,
        then in the enclosing commands.

        Returns a (command, entry) pair naming the owning command, or None when
        nothing matches.
        """
        table = self._shorts if prefix == "-" else self._longs
        try:
            return self, table[name]
        except KeyError:
            return self.parent.find(prefix, name) if self.parent else None

    def complete(self, prefix, /):
        """
        (command, entry) pairs whose long name starts with prefix, in this table
        and the enclosing ones (nearest first).
        """
        matches = [(self, entry) for long, entry in self._longs.items() if long.startswith(prefix)]
        if self.parent:
            matches.extend(self.parent.complete(prefix))
        return matches

    def spellings(self):
        """
        All option spellings visible from this command ("-v", "--verbose", ...).
        """
        names = ["-" + short for short in self._shorts] + ["--" + long for long in self._longs]
        return names + (self.parent.spellings() if self.parent else [])


__all__ = (
    "Command",
    "Entry",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
