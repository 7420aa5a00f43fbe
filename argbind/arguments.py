r"""
Argbind argument descriptors.

Overview
- Specs
  • Flag: named, presence-only switch (bool kind), e.g., -v/--verbose.
  • Option[_T]: named, value-bearing option (str, int, float, bool or a custom
    converter), optionally repeatable as a list (slice kind) or a dict (map kind).
  • Positional[_T]: unnamed slot bound by order, optionally a remainder slot
    that absorbs every remaining positional token.
  • Group: a nested descriptor table of options, flags and further groups,
    optionally with its own sink (dest) and long-name namespace.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields listed in __introspectable__ as read-only properties.

Names
- A named spec takes at most one short name ("-x", one letter or digit) and at
  most one long name ("--long-name"), and at least one of the two.
- Long names match r"--[^\W\d_](-?[^\W_]+)*"; Unicode letters are allowed.

Metadata (sanitized on construction)
- dest: sink attribute; defaults to the long name ("--dry-run" → "dry_run"),
  else the short name, else (positionals) the lowercased slot name.
- type: converter. str/int/float/bool use strict built-in parsers, anything
  else is called with the raw string.
- choices: ordered strings, duplicates rejected, matched against the raw value.
- default: typed value applied at the start of every parse.
- descr/hidden: metadata only, kept for help renderers.

Quick example:
    >>> from argbind.arguments import Flag, Option, Positional, Group
    >>> Flag("-v", "--verbose")
    >>> Option("-j", "--jobs", type=int, default=1)
    >>> Option("-I", "--include", container=list)
    >>> Positional("FILES", remainder=True, required=True)
    >>> Group(Option("--host"), Option("--port", type=int), dest="server", namespace="server")

Public API
- Classes: Flag, Option, Positional, Group
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping, Set

from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable specs.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in construction error messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
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
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(short='v', long='verbose', type=<class 'str'>, ...)
            """
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


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize the shared 'descr' and 'dest' fields.

    - descr: optional short description; trimmed, non-empty when provided,
      None when Unset.
    - dest: optional sink attribute; must be a valid Python identifier when
      provided. Left Unset here, each spec derives its own default.
    """
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not isinstance(dest := metadata["dest"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'dest' must be a string")
    elif isinstance(dest, str) and not dest.isidentifier():
        raise ValueError(f"{cls.__typename__} 'dest' must be a valid identifier")


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: split and validate the names of a named spec (Option, Flag).

    - names: one or two strings; at most one short ("-x") and one long
      ("--long-name") name.
    - short/long: filled from the names (without dashes), Unset when absent.
    - dest: defaults to the long name with '-' turned into '_', else the short name.

    Raises
    - TypeError: names missing or not strings.
    - ValueError: malformed names, two shorts or two longs, a short dest that is
      not an identifier (e.g. "-1" without an explicit dest).
    """
    short = long = Unset

    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"-[^\W_]", name):
            if short:
                raise ValueError(f"{cls.__typename__} cannot have more than one short name")
            short = name[1]
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
            if long:
                raise ValueError(f"{cls.__typename__} cannot have more than one long name")
            long = name[2:]
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} must be a short (-x) or long (--name) option name")

    metadata["short"] = short
    metadata["long"] = long
    del metadata["names"]

    dest = metadata["dest"]
    if dest is Unset:
        dest = long.replace("-", "_") if long else short
        if not dest.isidentifier():
            raise ValueError(f"{cls.__typename__} with name '-{short}' must specify a 'dest'")
    metadata["dest"] = dest

    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate value-bearing fields ('type', 'choices', 'base').

    - type: must be callable.
    - choices: ordered iterable of unique strings (sets are rejected since the
      order is shown to the user).
    - base: integer base for int values: 0 (prefix auto-detect) or 2..36, and
      only meaningful with type=int.
    """
    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str | Set):
        raise TypeError(f"{cls.__typename__} 'choices' must be an ordered iterable of strings")
    sanitized = []
    for choice in choices:
        if not isinstance(choice, str):
            raise TypeError(f"{cls.__typename__} 'choices' must be an ordered iterable of strings")
        if choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    metadata["choices"] = tuple(sanitized)

    if not isinstance(base := metadata["base"], int) or isinstance(base, bool):
        raise TypeError(f"{cls.__typename__} 'base' must be an integer")
    if base != 0 and not 2 <= base <= 36:
        raise ValueError(f"{cls.__typename__} 'base' must be 0 or between 2 and 36")
    if base != 10 and metadata["type"] is not int:
        raise TypeError(f"{cls.__typename__} 'base' requires type=int")


class Flag(metaclass=ArgumentType):
    """
    Named, presence-only option specification (bool kind).

    Present → True. An inline value is accepted and parsed as a bool, so
    "--color=false" switches a flag off explicitly. Repeating a flag keeps it True.
    """

    __introspectable__ = (
        "short",
        "long",
        "dest",
        "default",
        "required",
        "descr",
        "hidden",
    )

    def __new__(
            cls,
            *names,
            dest=Unset,
            default=False,
            required=False,
            descr=Unset,
            hidden=False,
    ):
        metadata = {
            "names": names,
            "dest": dest,
            "default": default,
            "required": required,
            "descr": descr,
            "hidden": bool(hidden),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        if not isinstance(metadata["default"], bool):
            raise TypeError(f"{cls.__typename__} 'default' must be a boolean")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def label(self):
        """
        The user-facing spelling: "-v", "--verbose" or "-v, --verbose".
        """
        return _label(self.short, self.long)

    @property
    def takes_value(self):
        return False

    @property
    def container(self):
        return Unset

    @property
    def repeatable(self):
        return False


class Option[_T](metaclass=ArgumentType):
    """
    Named, value-bearing option specification.

    Kinds
    - scalar (container Unset): the last occurrence wins.
    - slice (container=list): every occurrence appends one converted value.
    - map (container=dict): every occurrence sets one "key:value" entry; the
      value is converted, the key stays a string. The delimiter is configurable.

    Values are taken from the same token ("--name=value", "-nvalue", "-n=value")
    or, failing that, from the next token whatever it looks like. An optional
    option never takes the next token: without an inline value it receives
    optional_value instead.
    """

    __introspectable__ = (
        "short",
        "long",
        "dest",
        "type",
        "container",
        "delimiter",
        "base",
        "default",
        "choices",
        "required",
        "optional",
        "optional_value",
        "descr",
        "hidden",
    )

    __displayable__ = (
        "short",
        "long",
        "dest",
        "type",
        "container",
        "default",
        "choices",
        "required",
    )

    def __new__(
            cls,
            *names,
            dest=Unset,
            type=str,
            container=Unset,
            delimiter=":",
            base=10,
            default=Unset,
            choices=(),
            required=False,
            optional=False,
            optional_value=Unset,
            descr=Unset,
            hidden=False,
    ):
        """
        Construct an Option spec with the provided metadata.

        Parameters
        - names: "-x" and/or "--long-name".
        - dest: sink attribute (derived from the names when Unset).
        - type: converter applied to each raw value.
        - container: Unset | list | dict; list and dict make the option repeatable.
        - delimiter: key/value separator for dict options.
        - base: integer base for type=int (0 auto-detects 0x/0o/0b prefixes).
        - default: typed default value; a list/dict option takes an iterable/mapping.
        - choices: allowed raw values, in the order shown in error messages.
        - required: the option must appear on the command line.
        - optional, optional_value: the value may be omitted; optional_value
          (a raw string, converted like any other value) is used then.
        """
        metadata = {
            "names": names,
            "dest": dest,
            "type": type,
            "container": container,
            "delimiter": delimiter,
            "base": base,
            "default": default,
            "choices": choices,
            "required": required,
            "optional": bool(optional),
            "optional_value": optional_value,
            "descr": descr,
            "hidden": bool(hidden),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        if metadata["container"] not in (Unset, list, dict):
            raise TypeError(f"{cls.__typename__} 'container' must be list or dict")

        if not isinstance(delimiter := metadata["delimiter"], str):
            raise TypeError(f"{cls.__typename__} 'delimiter' must be a string")
        elif not delimiter:
            raise ValueError(f"{cls.__typename__} 'delimiter' cannot be empty")

        # Containers keep a private snapshot of their default; a fresh copy is
        # handed to the sink on every parse.
        if (default := metadata["default"]) is not Unset:
            if metadata["container"] is list:
                if not isinstance(default, Iterable) or isinstance(default, str | Mapping):
                    raise TypeError(f"list {cls.__typename__} 'default' must be an iterable")
                metadata["default"] = tuple(default)
            elif metadata["container"] is dict:
                if not isinstance(default, Mapping):
                    raise TypeError(f"dict {cls.__typename__} 'default' must be a mapping")
                metadata["default"] = dict(default)

        if metadata["optional"] and not isinstance(metadata["optional_value"], str):
            raise TypeError(f"optional {cls.__typename__} 'optional_value' must be a string")
        if not metadata["optional"] and metadata["optional_value"] is not Unset:
            raise TypeError(f"{cls.__typename__} 'optional_value' requires optional=True")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def label(self):
        return _label(self.short, self.long)

    @property
    def takes_value(self):
        return True

    @property
    def repeatable(self):
        return self._container is not Unset


class Positional[_T](metaclass=ArgumentType):
    """
    Positional slot specification (bound by order, not by name).

    - A plain slot takes exactly one token.
    - A remainder slot takes every remaining positional token as a list, up to
      'maximum' when given; the tokens after that fall through to the next slot
      (there is none: a remainder is always last) and end up as leftovers.
    - required: bool, or for a remainder slot the minimum number of tokens
      (required=True on a remainder means at least one).
    """

    __introspectable__ = (
        "name",
        "dest",
        "type",
        "base",
        "required",
        "remainder",
        "maximum",
        "descr",
    )

    def __new__(
            cls,
            name,
            /,
            type=str,
            required=False,
            remainder=False,
            maximum=Unset,
            dest=Unset,
            base=10,
            descr=Unset,
    ):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} name must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} name cannot be empty")

        metadata = {
            "name": name,
            "dest": dest,
            "type": type,
            "base": base,
            "choices": (),
            "required": required,
            "remainder": bool(remainder),
            "maximum": maximum,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)
        del metadata["choices"]

        if metadata["dest"] is Unset:
            metadata["dest"] = name.lower().replace("-", "_")
            if not metadata["dest"].isidentifier():
                raise ValueError(f"{cls.__typename__} {name!r} must specify a 'dest'")

        if not isinstance(required := metadata["required"], int):
            raise TypeError(f"{cls.__typename__} 'required' must be a boolean or an integer")
        if not isinstance(required, bool):
            if not metadata["remainder"]:
                raise TypeError(f"{cls.__typename__} counted 'required' is only allowed on a remainder")
            if required < 0:
                raise ValueError(f"{cls.__typename__} 'required' cannot be negative")

        if (maximum := metadata["maximum"]) is not Unset:
            if not metadata["remainder"]:
                raise TypeError(f"{cls.__typename__} 'maximum' is only allowed on a remainder")
            if not isinstance(maximum, int) or isinstance(maximum, bool):
                raise TypeError(f"{cls.__typename__} 'maximum' must be an integer")
            if maximum < max(1, int(required)):
                raise ValueError(f"{cls.__typename__} 'maximum' cannot be lower than 'required'")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def minimum(self):
        """
        Number of tokens the slot needs (0 for an optional slot).
        """
        return int(self._required)


class Group(metaclass=ArgumentType):
    """
    Nested descriptor table of named specs.

    - arguments: Option, Flag or Group instances, in declaration order.
    - dest: when given, the group's values live in a nested Namespace at that
      attribute of the enclosing sink; otherwise they are written next to the
      enclosing options.
    - namespace: when given, long names of the group's options are prefixed,
      "--host" in namespace "server" is spelled "--server.host". Nested
      namespaces are joined with ".".
    """

    __introspectable__ = (
        "name",
        "arguments",
        "dest",
        "namespace",
        "descr",
    )

    def __new__(cls, *arguments, name=Unset, dest=Unset, namespace=Unset, descr=Unset):
        metadata = {
            "name": name,
            "arguments": arguments,
            "dest": dest,
            "namespace": namespace,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        if not isinstance(name, str | Unset):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        metadata["name"] = coalesce(name, coalesce(namespace, coalesce(dest)))

        if not isinstance(namespace, str | Unset):
            raise TypeError(f"{cls.__typename__} 'namespace' must be a string")
        elif isinstance(namespace, str) and not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", namespace):
            raise ValueError(f"{cls.__typename__} 'namespace' must look like a long option name")

        for argument in arguments:
            if not isinstance(argument, Option | Flag | Group):
                raise TypeError(f"{cls.__typename__} arguments must be options, flags or groups")
        metadata["arguments"] = tuple(arguments)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


def _label(short, long, /):
    if short and long:
        return "-%s, --%s" % (short, long)
    return "-%s" % short if short else "--%s" % long


__all__ = (
    "Flag",
    "Option",
    "Positional",
    "Group",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
