"""
Tokenizer: classify one raw argument.

Shapes
- "--"                 → DOUBLE_DASH
- "--name", "--name=v" → OptionToken(prefix="--", name="name", value="v" | None)
- "-x", "-x=v", "-xyz" → OptionToken(prefix="-", name="x", value="v" | None, tail="yz")
- anything else        → PositionalToken (no leading dash, a bare "-", or "---...")

The tail of a short token is left uninterpreted here: whether "-ovalue" is the
option "o" with the inline value "value" or the cluster "-o -v -a ..." depends
on the descriptor matched for "o", which is the value consumer's business.
"""
from typing import NamedTuple


class OptionToken(NamedTuple):
    text: str
    prefix: str
    name: str
    value: str | None = None
    tail: str = ""

    @property
    def flag(self):
        """
        The option spelling as typed, without inline value ("-v", "--value").
        """
        return self.prefix + self.name


class PositionalToken(NamedTuple):
    text: str


class DoubleDash(NamedTuple):
    text: str = "--"


DOUBLE_DASH = DoubleDash()


def tokenize(text, /):
    if text == "--":
        return DOUBLE_DASH

    if text.startswith("---") or len(text) < 2 or not text.startswith("-"):
        return PositionalToken(text)

    if text.startswith("--"):
        name, separator, value = text[2:].partition("=")
        return OptionToken(text, "--", name, value if separator else None)

    name, rest = text[1], text[2:]
    if rest.startswith("="):
        return OptionToken(text, "-", name, rest[1:])
    return OptionToken(text, "-", name, None, rest)


__all__ = (
    "OptionToken",
    "PositionalToken",
    "DoubleDash",
    "DOUBLE_DASH",
    "tokenize",
)
