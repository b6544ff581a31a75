"""
Token stream: classified tokens and an immutable cursor over them.

- Token(kind, text): one classified unit of the argument list. The kind is
  decided once by tokenize() and never re-derived by the parsers.
- TokenCursor: a position into a shared, immutable tuple of tokens. Advancing
  returns a new cursor; the original is untouched, so several candidate
  parsers can be tried against the same starting point.
- tokenize(arguments, customization): the upstream classifier. An element is
  an OPTION when it starts with a prefix character and is longer than one
  character; everything else is an ARGUMENT. "--name=value" style elements
  are split into the option and its value.

    >>> cursor = tokenize(["--output=out.txt", "input.txt"])
    >>> [token.text for token in cursor.remaining()]
    ['--output', 'out.txt', 'input.txt']
"""
from enum import Enum
from typing import NamedTuple, final

from .customization import DEFAULT_CUSTOMIZATION
from .faults import EmptyCursorError


class TokenType(Enum):
    OPTION = "option"
    ARGUMENT = "argument"


class Token(NamedTuple):
    kind: TokenType
    text: str

    def is_option(self):
        return self.kind is TokenType.OPTION

    def is_argument(self):
        return self.kind is TokenType.ARGUMENT


@final
class TokenCursor:
    """
    Immutable position into a token sequence.

    invariants
    - the underlying tuple is shared between every cursor derived from it.
    - 0 <= position <= len(tokens); a cursor at the end is empty (falsy).
    - advancing an empty cursor yields an empty cursor, never an error.
    """
    __slots__ = ("_tokens", "_position")

    def __init__(self, tokens=(), position=0):
        tokens = tuple(tokens)
        for token in tokens:
            if not isinstance(token, Token):
                raise TypeError("token cursor entries must be tokens")
        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError("token cursor position must be an integer")
        if position < 0:
            raise ValueError("token cursor position cannot be negative")
        object.__setattr__(self, "_tokens", tokens)
        object.__setattr__(self, "_position", min(position, len(tokens)))

    @classmethod
    def _derive(cls, tokens, position):
        self = object.__new__(cls)
        object.__setattr__(self, "_tokens", tokens)
        object.__setattr__(self, "_position", min(position, len(tokens)))
        return self

    @property
    def position(self):
        return self._position

    def has_token(self):
        return self._position < len(self._tokens)

    def current(self):
        """
        Return the token at the cursor.

        Raises EmptyCursorError (a ParserLogicError) when the cursor is empty:
        asking an exhausted cursor for a token is a bug in the caller.
        """
        if not self.has_token():
            raise EmptyCursorError(
                "no token left at position %d" % self._position,
                hint="check has_token() before reading the current token",
            )
        return self._tokens[self._position]

    def advance(self, count=1, /):
        if not isinstance(count, int) or isinstance(count, bool):
            raise TypeError("advance() argument must be an integer")
        if count < 0:
            raise ValueError("advance() argument cannot be negative")
        return type(self)._derive(self._tokens, self._position + count)

    def remaining(self):
        return self._tokens[self._position:]

    def __bool__(self):
        return self.has_token()

    def __len__(self):
        return len(self._tokens) - self._position

    def __iter__(self):
        return iter(self.remaining())

    def __setattr__(self, name, value, /):
        raise AttributeError("token cursor is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("token cursor is immutable")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __eq__(self, other):
        if not isinstance(other, TokenCursor):
            return NotImplemented
        return self._position == other._position and (
            self._tokens is other._tokens or self._tokens == other._tokens
        )

    def __hash__(self):
        return hash((self._tokens, self._position))

    def __repr__(self):
        return "token-cursor(position=%d, remaining=%r)" % (
            self._position,
            [token.text for token in self.remaining()],
        )

    def __rich_repr__(self):
        yield "position", self._position
        yield "remaining", self.remaining()


def tokenize(arguments, customization=DEFAULT_CUSTOMIZATION, /):
    """
    classify raw arguments into a token cursor positioned at the start.

    rules
    - non-string arguments raise TypeError.
    - an element longer than one character whose first character is a prefix
      character is an option; a lone prefix character ("-") is an argument.
    - an option containing a delimiter after its first character is split in
      two: the option up to the delimiter and an argument holding the rest
      (possibly empty, as in "--name=").
    """
    if isinstance(arguments, str):
        raise TypeError("tokenize() argument must be an iterable of strings, not a string")

    prefix = customization.option_prefix()
    delimiters = getattr(customization, "token_delimiters", lambda: "")()

    tokens = []
    for argument in arguments:
        if not isinstance(argument, str):
            raise TypeError("tokenize() arguments must be strings")
        if len(argument) > 1 and argument[0] in prefix:
            split = next((index for index, char in enumerate(argument) if index and char in delimiters), -1)
            if split > 0:
                tokens.append(Token(TokenType.OPTION, argument[:split]))
                tokens.append(Token(TokenType.ARGUMENT, argument[split + 1:]))
            else:
                tokens.append(Token(TokenType.OPTION, argument))
        else:
            tokens.append(Token(TokenType.ARGUMENT, argument))
    return TokenCursor(tokens)


__all__ = (
    "TokenType",
    "Token",
    "TokenCursor",
    "tokenize",
)
