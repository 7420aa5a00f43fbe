"""
Argbind parser: one left-to-right pass over an argument vector.

Pipeline (per token)
- tokenize() classifies the raw string (option, double dash, positional-like).
- Options are matched against the active command table (groups included),
  then the enclosing commands, and their values are consumed at once: inline
  value, next token, or optional value.
- Positional-like tokens are either subcommand names or go to the positional
  binder; tokens nobody takes are kept as leftovers in their original order.

Modes (see argbind.modes.Mode) decide what happens after "--" and after the
first positional-like token, and whether unknown options fail.

States
- SCANNING: options are recognized.
- TERMINATED: a "--" was seen. With PASS_DOUBLE_DASH the rest of the input is
  passed through verbatim, otherwise it is bound like positionals.
- STOPPED: PASS_AFTER_NON_OPTION stopped at the first positional-like token;
  that token and the rest are bound as positionals (or passed through).
- DONE: the input is exhausted, or a stopped tail was bound; end-of-scan
  checks run.

Errors
- The first error stops the call. Sink writes done before it are kept.
- Errors raised while scanning hand back the token being processed plus every
  token not looked at yet; errors of the end-of-scan checks hand back the
  leftovers collected so far (ParseError.leftovers).
"""
import difflib
import enum
import logging
import os
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from .binder import PositionalBinder
from .commands import Command
from .converters import convert, parse_bool, typename
from .faults import *
from .modes import Mode
from .namespace import Namespace
from .tokens import DOUBLE_DASH, OptionToken, tokenize
from .utils import *

logger = logging.getLogger(__name__)


class State(enum.Enum):
    SCANNING = enum.auto()
    TERMINATED = enum.auto()
    STOPPED = enum.auto()
    DONE = enum.auto()


class ParseState:
    """
    Mutable state of one parseargs() call.

    - remaining: tokens not taken from the input yet.
    - current: the last token taken from the input (Unset before the first).
    - command / path: the active command and the chain from the root to it.
    - sinks: the sink of every activated command.
    - binders: one positional binder per activated command, the last one active.
    - written: (command, entry) pairs written during this call.
    - leftovers: tokens handed back to the caller.
    """

    def __init__(self, args, command, sink, /):
        self.remaining = deque(args)
        self.current = Unset
        self.command = command
        self.path = [command]
        self.sinks = {command: sink}
        self.binders = [PositionalBinder(command.positionals, sink)]
        self.written = set()
        self.state = State.SCANNING
        self.leftovers = []

    @property
    def binder(self):
        return self.binders[-1]

    def pop(self):
        self.current = self.remaining.popleft()
        return self.current


class Parser:
    """
    Bind argument vectors to a command table.

    Parameters
    - command: the root Command.
    - namespace: the sink values are written to (a fresh Namespace when Unset).
      Attributes missing on it are created with their initial value: False for
      flags, an empty list/dict for repeatable options, None otherwise.
    - modes: a combination of Mode members, fixed for the parser's lifetime.
    - name: program name shown in rendered errors.
    - fancy, colorful: rendering options for PRINT_ERRORS.

    A parser can be called any number of times; every call starts from the
    declared defaults and keeps accumulating into repeatable options that have
    no default.
    """

    def __init__(self, command, namespace=Unset, modes=Mode.DEFAULT, *, name=Unset, fancy=False, colorful=True):
        if not isinstance(command, Command):
            raise TypeError("Parser() 'command' must be a command")
        if command.parent:
            raise ValueError("Parser() 'command' must be a root command")
        if not isinstance(modes, int) or isinstance(modes, bool):
            raise TypeError("Parser() 'modes' must be a combination of modes")
        if not isinstance(name, str | Unset):
            raise TypeError("Parser() 'name' must be a string")

        self._command = command
        self._namespace = Namespace() if namespace is Unset else namespace
        self._modes = Mode(modes)
        self._name = coalesce(name, command.name or os.path.basename(sys.argv[0]))
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

        _prepare(command, self._namespace)

    @property
    def command(self):
        return self._command

    @property
    def namespace(self):
        return self._namespace

    @property
    def modes(self):
        return self._modes

    @property
    def name(self):
        return self._name

    def parseargs(self, args=Unset, /):
        """
        Parse one argument vector and return the leftovers.

        Parameters
        - args:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, taken as is.

        Returns
        - list[str]: the leftover tokens in their original relative order.

        Raises
        - ParseError (a subclass of it) on the first error, carrying the
          leftovers of the failed call.
        - TypeError: when args is not Unset/str/Iterable[str].
        """
        if args is Unset:
            tokens = sys.argv[1:]
        elif isinstance(args, str):
            tokens = shlex.split(args)
        elif isinstance(args, Iterable):
            tokens = list(args)
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("parseargs() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parseargs() argument must be a string or an iterable of strings")

        logger.debug("parsing %r with modes %r", tokens, self._modes)

        state = ParseState(tokens, self._command, self._namespace)
        _reset(self._command, self._namespace)

        try:
            self._scan(state)
        except ParseError as fault:
            self._fail(fault, [state.current, *state.remaining])

        state.state = State.DONE
        try:
            self._finish(state)
        except ParseError as fault:
            self._fail(fault, state.leftovers)

        logger.debug("leftovers: %r", state.leftovers)
        return state.leftovers

    def _fail(self, fault, leftovers, /):
        trigger(
            fault,
            leftovers=leftovers,
            prog=self._name,
            print=Mode.PRINT_ERRORS in self._modes,
            fancy=self._fancy,
            colorful=self._colorful,
            docs=getdoc(fault.code) if fault.code else None,
        )

    def _scan(self, state, /):
        """
        Mode controller: route every token until the input is exhausted.
        """
        while state.remaining and state.state is not State.DONE:
            text = state.pop()

            if state.state is State.TERMINATED:
                self._positional(state, text)
                continue

            token = tokenize(text)

            if token is DOUBLE_DASH:
                state.state = State.TERMINATED
                if Mode.PASS_DOUBLE_DASH in self._modes:
                    logger.debug("double dash, passing %d tokens through", len(state.remaining))
                    state.leftovers.extend(state.remaining)
                    state.remaining.clear()
                else:
                    logger.debug("double dash, options are off")
                continue

            if isinstance(token, OptionToken):
                self._option(state, token)
                continue

            if self._dispatch(state, text, strict=Mode.PASS_AFTER_NON_OPTION not in self._modes):
                continue

            if Mode.PASS_AFTER_NON_OPTION in self._modes:
                state.state = State.STOPPED
            if state.state is State.STOPPED:
                self._stop(state)
                continue

            self._positional(state, text)

    def _stop(self, state, /):
        """
        Bind the current token and everything after it as positionals.

        The input is left untouched until the whole tail is bound, so a
        failure hands the complete tail back.
        """
        tail = [state.current, *state.remaining]
        logger.debug("stopped at non-option %r", state.current)

        for index, text in enumerate(tail):
            if text == "--" and Mode.PASS_DOUBLE_DASH in self._modes:
                state.leftovers.extend(tail[index + 1:])
                break
            if not state.binder.bind(text):
                state.leftovers.append(text)

        state.remaining.clear()
        state.state = State.DONE

    def _positional(self, state, text, /):
        if not state.binder.bind(text):
            logger.debug("leftover %r", text)
            state.leftovers.append(text)

    def _dispatch(self, state, text, /, *, strict):
        """
        Activate the subcommand named by text, if this token can name one.

        A token names a subcommand only while the active command has
        subcommands, no positional slot is open and no leftover was produced.
        Unknown names fail when strict and subcommands are required.
        """
        command = state.command
        if not command.commands or state.binder.open or state.leftovers:
            return False

        try:
            child = command.children[text]
        except KeyError:
            if not strict or command.optional:
                return False
            suggestions = difflib.get_close_matches(text, command.children.keys(), 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "available commands: %s" % ", ".join(sorted(each.name for each in command.commands))
            raise UnknownCommandError(
                "Unknown command `%s'" % text,
                input=text,
                suggestions=suggestions,
                hint=hint,
            ) from None

        sink = state.sinks[command]
        nested = getattr(sink, child.dest, None)
        if nested is None:
            nested = Namespace()
            setattr(sink, child.dest, nested)
        _prepare(child, nested)
        _reset(child, nested)

        state.command = child
        state.path.append(child)
        state.sinks[child] = nested
        state.binders.append(PositionalBinder(child.positionals, nested))
        logger.debug("activated command %r", child.name)
        return True

    def _match(self, state, prefix, name, /):
        """
        Option matcher: resolve a spelling to a (command, entry) pair.

        Returns None for an unknown option under IGNORE_UNKNOWN.
        """
        found = state.command.find(prefix, name)

        if found is None and name and prefix == "--" and Mode.ALLOW_ABBREVIATIONS in self._modes:
            candidates = state.command.complete(name)
            if len(candidates) > 1:
                raise AmbiguousOptionError(
                    "ambiguous flag `--%s' (could be %s)" % (
                        name, enumerate_words(("--" + entry.long for _, entry in candidates), "or")
                    ),
                    input=prefix + name,
                    suggestions=["--" + entry.long for _, entry in candidates],
                    hint="spell out more of the option name",
                )
            if candidates:
                found, = candidates
                logger.debug("expanded --%s to --%s", name, found[1].long)

        if found is None:
            if Mode.IGNORE_UNKNOWN in self._modes:
                return None
            suggestions = difflib.get_close_matches(prefix + name, state.command.spellings(), 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = None
            raise UnknownOptionError(
                "unknown flag `%s%s'" % (prefix, name),
                input=prefix + name,
                suggestions=suggestions,
                hint=hint,
            )

        return found

    def _option(self, state, token, /):
        """
        Handle one option token: a long option or a cluster of short ones.
        """
        if token.prefix == "--":
            found = self._match(state, "--", token.name)
            if found is None:
                logger.debug("unknown option %r passed through", token.text)
                state.leftovers.append(token.text)
                return
            self._consume(state, *found, token.value)
            return

        name, value, tail = token.name, token.value, token.tail
        while True:
            found = self._match(state, "-", name)
            if found is None:
                logger.debug("unknown option %r passed through", token.text)
                state.leftovers.append(token.text)
                return

            command, entry = found
            if entry.argument.takes_value:
                # "-ovalue": the rest of the cluster is the value
                self._consume(state, command, entry, value if value is not None else (tail or None))
                return
            if value is not None or not tail:
                self._consume(state, command, entry, value)
                return

            self._consume(state, command, entry, None)
            name, tail = tail[0], tail[1:]
            if tail.startswith("="):
                value, tail = tail[1:], ""

    def _consume(self, state, command, entry, value, /):
        """
        Value consumer: obtain, validate and convert the value of one option
        occurrence, then store it.
        """
        argument = entry.argument

        if not argument.takes_value:
            if value is None:
                result = True
            else:
                try:
                    result = parse_bool(value)
                except ValueError as exception:
                    raise InvalidValueError(
                        "invalid argument for flag `%s' (expected bool): %s" % (entry.label, exception),
                        input=value,
                        argument=argument,
                        hint="use one of true/false, t/f or 1/0",
                        exception=exception,
                    ) from exception
            self._store(state, command, entry, Unset, result)
            return

        if value is None:
            if argument.optional:
                value = argument.optional_value
            elif state.remaining:
                value = state.pop()
            else:
                raise MissingArgumentError(
                    "expected argument for flag `%s'" % entry.label,
                    argument=argument,
                    hint="give a value, e.g. %s <%s>" % (entry.label.split(", ")[-1], typename(argument.type)),
                )

        key = Unset
        if argument.container is dict:
            key, separator, value = value.partition(argument.delimiter)
            if not separator:
                raise InvalidValueError(
                    "invalid argument for flag `%s' (expected key%svalue): %r" % (entry.label, argument.delimiter, key),
                    input=key,
                    argument=argument,
                    hint="use key%svalue" % argument.delimiter,
                )

        if argument.choices and value not in argument.choices:
            raise InvalidChoiceError(
                "Invalid value `%s' for option `%s'. Allowed values are: %s" % (
                    value, entry.label, enumerate_words(argument.choices, "or")
                ),
                input=value,
                argument=argument,
                suggestions=difflib.get_close_matches(value, argument.choices, 5),
                hint="choose one of: %s" % ", ".join(argument.choices),
            )

        try:
            result = convert(value, argument.type, base=argument.base)
        except Exception as exception:
            raise InvalidValueError(
                "invalid argument for flag `%s' (expected %s): %s" % (entry.label, typename(argument.type), exception),
                input=value,
                argument=argument,
                hint="use a valid %s for %s" % (typename(argument.type), entry.label),
                exception=exception,
            ) from exception

        self._store(state, command, entry, key, result)

    def _store(self, state, command, entry, key, value, /):
        sink = _sink(state.sinks[command], entry.path)
        argument = entry.argument
        first = (command, entry) not in state.written
        state.written.add((command, entry))

        if argument.repeatable:
            values = getattr(sink, argument.dest, None)
            if values is None or (first and argument.default is not Unset):
                values = argument.container()
                setattr(sink, argument.dest, values)
            if argument.container is dict:
                values[key] = value
            else:
                values.append(value)
        else:
            setattr(sink, argument.dest, value)

        logger.debug("set %s to %r", entry.label, value)

    def _finish(self, state, /):
        """
        Result collector: end-of-scan checks.

        Order: required subcommand, required options, required positionals.
        """
        command = state.command
        if command.commands and not command.optional:
            names = sorted(child.name for child in command.commands)
            if len(names) == 1:
                message = "Please specify the %s command" % names[0]
            else:
                message = "Please specify one command of: %s" % enumerate_words(names, "or")
            raise CommandRequiredError(message, hint="available commands: %s" % ", ".join(names))

        labels = [
            entry.label
            for command in state.path
            for entry in command.entries
            if entry.argument.required and (command, entry) not in state.written
        ]
        if len(labels) == 1:
            raise MissingRequiredOptionError("the required flag `%s' was not specified" % labels[0])
        if labels:
            raise MissingRequiredOptionError(
                "the required flags %s were not specified" % enumerate_words("`%s'" % label for label in labels)
            )

        for binder in state.binders:
            if message := binder.missing():
                raise MissingRequiredPositionalError(message)


def _sink(sink, path, /):
    """
    Walk (and create) the nested namespaces of a group path.
    """
    for name in path:
        nested = getattr(sink, name, None)
        if nested is None:
            nested = Namespace()
            setattr(sink, name, nested)
        sink = nested
    return sink


def _prepare(command, sink, /):
    """
    Create the sink attributes of a command that are missing.
    """
    for entry in command.entries:
        target = _sink(sink, entry.path)
        argument = entry.argument
        if hasattr(target, argument.dest):
            continue
        if argument.repeatable:
            initial = argument.container(coalesce(argument.default, ()))
        else:
            initial = coalesce(argument.default)
        setattr(target, argument.dest, initial)

    for child in command.commands:
        if not hasattr(sink, child.dest):
            setattr(sink, child.dest, None)


def _reset(command, sink, /):
    """
    Apply the declared defaults of a command (start of every call).
    """
    for entry in command.entries:
        argument = entry.argument
        if argument.default is Unset:
            continue
        target = _sink(sink, entry.path)
        if argument.repeatable:
            setattr(target, argument.dest, argument.container(argument.default))
        else:
            setattr(target, argument.dest, argument.default)


def parse(command, args=Unset, /, *, modes=Mode.DEFAULT, **options):
    """
    Parse args against command into a fresh Namespace.

    Returns
    - (namespace, leftovers)

    Example
        >>> namespace, leftovers = parse(Command(Flag("-v")), ["-v", "file"])
        >>> namespace.v, leftovers
        (True, ['file'])
    """
    parser = Parser(command, modes=modes, **options)
    leftovers = parser.parseargs(args)
    return parser.namespace, leftovers


__all__ = (
    "Parser",
    "ParseState",
    "State",
    "parse",
)
