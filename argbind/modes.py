"""
Parser behavior modes.

A parser is configured once with a combination of Mode members (a bitset);
the combination never changes for the lifetime of the parser.

- PASS_DOUBLE_DASH: a bare "--" ends option parsing and every later token is
  passed through verbatim as a leftover (never bound to a positional slot).
  This differs from go-flags, which binds those tokens to positionals: with a
  required slot, "tool -- -file" fails with a missing positional. Leave the
  mode off to have the tokens after "--" bound.
- IGNORE_UNKNOWN: unknown options become leftovers instead of failing.
- PRINT_ERRORS: render the error to stderr (rich) before raising it.
- PASS_AFTER_NON_OPTION: the first non-option token stops option parsing; it
  and everything after it go to the positional slots, or to the leftovers when
  no slot is declared.
- ALLOW_ABBREVIATIONS: an unambiguous prefix of a long name matches it.
"""
from enum import IntFlag


class Mode(IntFlag):
    NONE = 0
    PASS_DOUBLE_DASH = 1 << 0
    IGNORE_UNKNOWN = 1 << 1
    PRINT_ERRORS = 1 << 2
    PASS_AFTER_NON_OPTION = 1 << 3
    ALLOW_ABBREVIATIONS = 1 << 4

    DEFAULT = PASS_DOUBLE_DASH | PRINT_ERRORS


__all__ = ("Mode",)
