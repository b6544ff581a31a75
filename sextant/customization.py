"""
Parser customization: the only externally tunable part of matching.

A ParserCustomization tells the tokenizer and the option parser which
characters introduce an option ("-" by default, "/" for DOS-flavoured tools,
"+" for X11-style switches) and which characters split an inline value away
from its option ("--name=value").

normalize() is the canonical spelling rule used when comparing aliases with
tokens. Given a name of two or more characters whose first character is a
prefix character:
- if the second character is also a prefix character, the result is "--" +
  everything after the second character (long form);
- otherwise the result is "-" + everything after the first character (short form).
Anything else is returned unchanged. The rule is idempotent.

    >>> slashes = ParserCustomization(option_prefix="-/")
    >>> normalize("/v", slashes), normalize("//verbose", slashes)
    ('-v', '--verbose')
"""
from typing import final


@final
class ParserCustomization:
    """
    Immutable prefix/delimiter configuration.

    Parameters
    - option_prefix: str
      Every character is a recognized option prefix. Must be non-empty.
    - token_delimiters: str
      Characters that separate an inline value from an option name. May be
      empty to disable inline values.
    """
    __slots__ = ("_option_prefix", "_token_delimiters")

    def __init__(self, *, option_prefix="-", token_delimiters=" ="):
        if not isinstance(option_prefix, str):
            raise TypeError("customization 'option_prefix' must be a string")
        elif not option_prefix:
            raise ValueError("customization 'option_prefix' cannot be empty")
        if not isinstance(token_delimiters, str):
            raise TypeError("customization 'token_delimiters' must be a string")
        elif set(token_delimiters) & set(option_prefix):
            raise ValueError("customization 'token_delimiters' cannot reuse prefix characters")
        object.__setattr__(self, "_option_prefix", option_prefix)
        object.__setattr__(self, "_token_delimiters", token_delimiters)

    def option_prefix(self):
        return self._option_prefix

    def token_delimiters(self):
        return self._token_delimiters

    def is_prefix(self, char, /):
        return len(char) == 1 and char in self._option_prefix

    def __setattr__(self, name, value, /):
        raise AttributeError("parser customization is read-only")

    def __eq__(self, other):
        if not isinstance(other, ParserCustomization):
            return NotImplemented
        return (self._option_prefix, self._token_delimiters) == (other._option_prefix, other._token_delimiters)

    def __hash__(self):
        return hash((self._option_prefix, self._token_delimiters))

    def __repr__(self):
        return "parser-customization(option_prefix=%r, token_delimiters=%r)" % (
            self._option_prefix,
            self._token_delimiters,
        )

    def __rich_repr__(self):
        yield "option_prefix", self._option_prefix
        yield "token_delimiters", self._token_delimiters


DEFAULT_CUSTOMIZATION = ParserCustomization()


def normalize(name, customization=DEFAULT_CUSTOMIZATION, /):
    """
    Return the canonical spelling of an option name or token.

    Names shorter than two characters are returned unchanged, so a lone
    prefix character ("-") never collapses into something else.
    """
    prefix = customization.option_prefix()
    if len(name) < 2 or name[0] not in prefix:
        return name
    if name[1] in prefix:
        return "--" + name[2:]
    return "-" + name[1:]


__all__ = (
    "ParserCustomization",
    "DEFAULT_CUSTOMIZATION",
    "normalize",
)
