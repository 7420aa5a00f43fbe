"""
String to value coercion for option and positional values.

The built-in kinds (str, bool, int, float) are converted with strict parsers
whose diagnostics quote the offending literal, e.g.

    parsing "notint1": invalid syntax

Python's own int()/float() are more lenient (surrounding whitespace, digit
separators) and their messages do not carry the literal in a stable form, so
the built-in kinds never reach them with unchecked input. Any other callable is
a custom kind: it receives the raw string and its exceptions are reported as
they are.
"""
import json

_TRUE = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSE = frozenset(("0", "f", "F", "FALSE", "false", "False"))


def _quote(text):
    return json.dumps(text, ensure_ascii=False)


def _invalid(text):
    return ValueError("parsing %s: invalid syntax" % _quote(text))


def parse_bool(text, /):
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise _invalid(text)


def parse_int(text, /, base=10):
    # digit separators are only understood together with a base prefix
    if not text or text != text.strip() or (base != 0 and "_" in text):
        raise _invalid(text)
    try:
        return int(text, base)
    except ValueError:
        raise _invalid(text) from None


def parse_float(text, /):
    if not text or text != text.strip() or "_" in text:
        raise _invalid(text)
    try:
        return float(text)
    except ValueError:
        raise _invalid(text) from None


def typename(type, /):
    """
    Name of a value kind as shown in "(expected ...)" diagnostics.
    """
    return getattr(type, "__name__", "value")


def convert(text, type=str, /, *, base=10):
    """
    Convert one raw token to the declared kind.

    Raises
    - ValueError from the built-in parsers (message ends with "invalid syntax").
    - Whatever a custom converter raises.
    """
    if type is str:
        return text
    if type is bool:
        return parse_bool(text)
    if type is int:
        return parse_int(text, base)
    if type is float:
        return parse_float(text)
    return type(text)


__all__ = (
    "convert",
    "parse_bool",
    "parse_int",
    "parse_float",
    "typename",
)
