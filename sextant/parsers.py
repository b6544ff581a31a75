r"""
Sextant primitive parsers: named options and positional arguments.

Overview
- Parsers
  • Opt: matches one option token against its aliases (after prefix
    normalization). Flag options consume that token only; value options also
    consume the following argument token.
  • Arg: matches the next argument token unconditionally, by position.

- Decorators
  • @opt(...): build an Opt and bind the decorated function as its callback.
  • @arg(...): build an Arg and bind the decorated function as its callback.

- Matching contract (both parsers)
  • parse(tokens, customization) re-runs validate() first, then tries to match
    at the cursor and returns Result(ParseState(outcome, cursor)).
  • NO_MATCH hands back the input cursor untouched; MATCHED and
    SHORT_CIRCUIT_ALL hand back the cursor just past every consumed token.
  • Failures (bad definition, bad input) come back as error results; nothing
    in the parse path raises.

- Configuration (fluent, returns the parser)
  • name(alias) / parser[alias]      (Opt only)
  • help(text), choices(*values), cardinality(minimum, maximum),
    optional(), required(count)

- Introspection & representation
  • ParserType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields listed in __introspectable__ as read-only properties.
  • get_usage_text() / get_help_text() are pure projections for renderers.

Quick example:
    >>> from sextant import Opt, Arg, Binding, tokenize
    >>> config = {"verbose": False, "output": None, "files": []}
    >>> verbose = Opt(Binding(config, "verbose"))["-v"]["--verbose"]
    >>> output = Opt(Binding(config, "output"), "path").name("-o").name("--output")
    >>> files = Arg(Binding(config, "files"), "file")
    >>> result = verbose.parse(tokenize(["-v", "-o", "out.txt", "a.txt"]))
    >>> result = output.parse(result.cursor)
    >>> result = files.parse(result.cursor)
    >>> config
    {'verbose': True, 'output': 'out.txt', 'files': ['a.txt']}

Public API
- Classes: BoundParser, Opt, Arg, HelpEntry
- Decorators: opt, arg
"""
import copy
import functools
import operator
import re
import warnings
from typing import NamedTuple

from rich.text import Text

from .cardinality import Cardinality
from .customization import DEFAULT_CUSTOMIZATION, normalize
from .faults import (
    DelegatedError,
    DuplicateNameWarning,
    EmptyNameError,
    FlagSinkError,
    InvalidChoiceError,
    MalformedNameError,
    MissingNamesError,
    MissingSinkError,
    MissingValueError,
)
from .results import Outcome, ParseState, Result
from .sinks import FlagSink, Sink, ValueSink
from .utils import *


class HelpEntry(NamedTuple):
    display: str
    description: str | Text | None


class ParserType(type):
    """
    Metaclass that makes parsers introspectable.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations ("opt", "arg", "bound-parser").
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private backing field "_<name>".
    - Provide stable __repr__/__rich_repr__ over __displayable__ (or
      __introspectable__ when unset). Names spelled "get_<field>" are called
      and shown as "<field>".
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
            - opt(names=['-v', '--verbose'], sink=flag-sink(...), hint=None, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                object = getattr(self, name)
                if name.startswith("get_"):
                    name, object = name.removeprefix("get_"), object()
                yield name, object
        self.__rich_repr__ = __rich_repr__

        return self


class BoundParser(metaclass=ParserType):
    """
    Shared configuration and behavior of Opt and Arg.

    State (fixed once configured, read-only while parsing)
    - sink: FlagSink | ValueSink | None (None until bound, e.g. by a decorator)
    - hint: display name of the value ("file" renders as "<file>")
    - description: help text (str or rich Text)
    - permitted_values: tuple of accepted raw strings, a predicate, or None
    - cardinality: see get_cardinality(); defaults to 0..1, or 0..unbounded
      for container sinks
    """

    __introspectable__ = (
        "sink",
        "hint",
        "description",
        "permitted_values",
    )
    __displayable__ = (
        "sink",
        "hint",
        "description",
        "permitted_values",
        "get_cardinality",
    )

    def __init__(self, destination=Unset, hint=Unset, /, *, type=str):
        if not isinstance(hint, str | Unset):
            raise TypeError(f"{self.__typename__} 'hint' must be a string")
        elif isinstance(hint, str) and not hint.strip():
            raise ValueError(f"{self.__typename__} 'hint' cannot be empty")
        if not callable(type):
            raise TypeError(f"{self.__typename__} 'type' must be callable")
        self._hint = coalesce(hint)
        self._type = type
        self._description = None
        self._permitted_values = None
        self._cardinality = Unset
        self._sink = None
        if destination is not Unset:
            self._bind(destination)

    def _wants_flag(self):
        return False

    def _bind(self, destination):
        """
        attach the destination, wrapping bindings/callables into the right sink.
        """
        if isinstance(destination, Sink):
            self._sink = destination
        elif self._wants_flag():
            self._sink = FlagSink(destination)
        else:
            self._sink = ValueSink(destination, type=self._type)

    # --- configuration ---

    def help(self, text, /):
        if not isinstance(text, str | Text):
            raise TypeError(f"{self.__typename__} description must be a string")
        elif isinstance(text, str) and not (text := text.strip()):
            raise ValueError(f"{self.__typename__} description cannot be empty")
        self._description = text
        return self

    def choices(self, *values):
        """
        restrict accepted raw values.

        forms
        - choices("fast", "safe"): an ordered set of accepted strings.
        - choices(predicate): a single callable deciding per raw string.
        """
        if len(values) == 1 and callable(values[0]):
            self._permitted_values = values[0]
            return self
        if not values:
            raise ValueError(f"{self.__typename__} 'choices' cannot be empty")
        sanitized = []
        for value in values:
            if not isinstance(value, str):
                raise TypeError(f"{self.__typename__} 'choices' must be strings")
            if value in sanitized:
                raise ValueError(f"{self.__typename__} 'choices' cannot contain duplicates")
            sanitized.append(value)
        self._permitted_values = tuple(sanitized)
        return self

    def cardinality(self, minimum, maximum=Unset, /):
        self._cardinality = Cardinality.between(minimum, maximum)
        return self

    def optional(self):
        self._cardinality = Cardinality.optional()
        return self

    def required(self, count=1, /):
        if self._sink is not None and self._sink.is_container():
            self._cardinality = Cardinality.unbounded(count)
        else:
            self._cardinality = Cardinality.required(count)
        return self

    def get_cardinality(self):
        if self._cardinality is not Unset:
            return self._cardinality
        if self._sink is not None and self._sink.is_container():
            return Cardinality.unbounded()
        return Cardinality.optional()

    # --- checks ---

    def validate(self, customization=DEFAULT_CUSTOMIZATION, /):
        if self._sink is None:
            return Result.logic_error(MissingSinkError(
                f"{self.__typename__} is not bound to a destination",
                hint=f"pass a binding or a callable, or decorate a function with @{self.__typename__}()",
            ))
        return Result.ok()

    def check_choice(self, raw, /):
        """
        verify raw text against the permitted values (always ok when unset).
        """
        if self._permitted_values is None:
            return Result.ok()
        if callable(self._permitted_values):
            try:
                accepted = self._permitted_values(raw)
            except Exception as exception:
                return Result.runtime_error(DelegatedError(
                    "choice check raised %s: %s" % (type(exception).__name__, exception),
                    hint="check additional logs for more details",
                    token=raw,
                    exception=exception,
                ))
            if accepted:
                return Result.ok()
            return Result.runtime_error(InvalidChoiceError(
                "value %r not expected" % raw,
                hint="run with --help to see accepted values",
                token=raw,
            ))
        if raw in self._permitted_values:
            return Result.ok()
        return Result.runtime_error(InvalidChoiceError(
            "value %r not expected, allowed values are: %s" % (raw, ", ".join(self._permitted_values)),
            hint="choose one of %s" % ", ".join(map(repr, self._permitted_values)),
            token=raw,
            choices=self._permitted_values,
        ))

    # --- projections ---

    def get_usage_text(self):
        raise NotImplementedError

    def get_help_text(self):
        return [HelpEntry(self.get_usage_text(), self._description)]

    # --- matching ---

    def parse(self, tokens, customization=DEFAULT_CUSTOMIZATION, /):
        raise NotImplementedError

    # --- copying ---

    def clone(self):
        """
        independent copy with identical configuration.

        containers owned by the parser are copied; the sink is cloned, so the
        clone writes into the same destination (shared on purpose, last writer wins).
        """
        clone = copy.copy(self)
        if self._sink is not None:
            clone._sink = self._sink.clone()
        return clone

    def __deepcopy__(self, memo, /):
        return self.clone()


class Opt(BoundParser):
    """
    Named option parser with one or more aliases.

    Construction
    - Opt(destination): a flag; the destination receives True when present.
    - Opt(destination, hint, type=...): a value option; the next argument
      token is converted with `type` and handed to the destination.
    - destination: Binding | callable | FlagSink | ValueSink (or omitted and
      bound later by the @opt() decorator).

    Aliases are added with name(alias) or opt[alias]; they are not checked
    until validate(), which parse() runs on every call.
    """

    __introspectable__ = (
        "names",
        "sink",
        "hint",
        "description",
        "permitted_values",
    )
    __displayable__ = (
        "names",
        "sink",
        "hint",
        "description",
        "permitted_values",
        "get_cardinality",
    )

    def __init__(self, destination=Unset, hint=Unset, /, *, type=str):
        self._names = []
        super().__init__(destination, hint, type=type)

    def _wants_flag(self):
        return self._hint is None

    def name(self, alias, /):
        if not isinstance(alias, str):
            raise TypeError(f"{self.__typename__} names must be strings")
        if alias in self._names:
            warnings.warn(DuplicateNameWarning(
                "option name %r is already registered" % alias,
                hint="remove the repeated name",
                token=alias,
            ), stacklevel=2)
        self._names.append(alias)
        return self

    def __getitem__(self, alias, /):
        return self.name(alias)

    def is_match(self, token, customization=DEFAULT_CUSTOMIZATION, /):
        normalized = normalize(token, customization)
        return any(normalize(name, customization) == normalized for name in self._names)

    def validate(self, customization=DEFAULT_CUSTOMIZATION, /):
        if not self._names:
            return Result.logic_error(MissingNamesError(
                "no names supplied to option",
                hint="add one with .name('--name') or opt['--name']",
            ))
        prefix = customization.option_prefix()
        for name in self._names:
            if not name:
                return Result.logic_error(EmptyNameError(
                    "option name cannot be empty",
                    hint="use a spelling like '-n' or '--name'",
                ))
            if name[0] != "-" and name[0] not in prefix:
                return Result.logic_error(MalformedNameError(
                    "option name %r must begin with '-'%s" % (
                        name,
                        "".join(" or %r" % char for char in prefix if char != "-"),
                    ),
                    hint="use a spelling like '-n' or '--name'",
                    token=name,
                ))
            if all(char == "-" or char in prefix for char in name):
                return Result.logic_error(MalformedNameError(
                    "option name %r has nothing after its prefix" % name,
                    hint="use a spelling like '-n' or '--name'",
                    token=name,
                ))
        return super().validate(customization)

    def get_usage_text(self):
        return "|".join(self._names)

    def get_help_text(self):
        display = ", ".join(self._names)
        if self._hint:
            display += " <%s>" % self._hint
        return [HelpEntry(display, self._description)]

    def parse(self, tokens, customization=DEFAULT_CUSTOMIZATION, /):
        validation = self.validate(customization)
        if not validation:
            return validation

        if not tokens.has_token():
            return Result.parsed(Outcome.NO_MATCH, tokens)
        token = tokens.current()
        if not token.is_option() or not self.is_match(token.text, customization):
            return Result.parsed(Outcome.NO_MATCH, tokens)

        remaining = tokens.advance()
        if self._sink.is_flag():
            result = self._sink.set_flag(True)
            if not result:
                return result
            if result.value is Outcome.SHORT_CIRCUIT_ALL:
                return Result.parsed(Outcome.SHORT_CIRCUIT_ALL, remaining)
            return Result.parsed(Outcome.MATCHED, remaining)

        if not remaining.has_token() or not remaining.current().is_argument():
            return Result.runtime_error(MissingValueError(
                "expected argument following %r" % token.text,
                hint="pass a value after it (for example: %s <%s>)" % (token.text, coalesce(self._hint, "value")),
                token=token.text,
            ), value=ParseState(Outcome.NO_MATCH, remaining))

        argument = remaining.current()
        choice = self.check_choice(argument.text)
        if not choice:
            return choice
        result = self._sink.set_value(argument.text)
        if not result:
            return result
        if result.value is Outcome.SHORT_CIRCUIT_ALL:
            return Result.parsed(Outcome.SHORT_CIRCUIT_ALL, remaining.advance())
        return Result.parsed(Outcome.MATCHED, remaining.advance())

    def clone(self):
        clone = super().clone()
        clone._names = list(self._names)
        return clone


class Arg(BoundParser):
    """
    Positional argument parser: eligibility is decided by position alone.

    Construction
    - Arg(destination, hint, type=...): the next argument token is converted
      with `type` and handed to the destination. Binding to a list appends
      and makes the default cardinality unbounded.
    """

    def validate(self, customization=DEFAULT_CUSTOMIZATION, /):
        validation = super().validate(customization)
        if validation and self._sink.is_flag():
            return Result.logic_error(FlagSinkError(
                f"{self.__typename__} cannot be bound to a flag sink",
                hint="use a ValueSink or pass the destination directly",
            ))
        return validation

    def get_usage_text(self):
        if not self._hint:
            return ""
        hint = "<%s>" % self._hint
        cardinality = self.get_cardinality()
        parts = [hint] * cardinality.minimum
        if cardinality.is_unbounded():
            parts.append("[%s...]" % hint)
        else:
            parts.extend(["[%s]" % hint] * (cardinality.maximum - cardinality.minimum))
        return " ".join(parts)

    def parse(self, tokens, customization=DEFAULT_CUSTOMIZATION, /):
        validation = self.validate(customization)
        if not validation:
            return validation

        if not tokens.has_token() or not tokens.current().is_argument():
            return Result.parsed(Outcome.NO_MATCH, tokens)

        token = tokens.current()
        choice = self.check_choice(token.text)
        if not choice:
            return choice
        result = self._sink.set_value(token.text)
        if not result:
            return result
        return Result.parsed(Outcome.MATCHED, tokens.advance())


def opt(*names, hint=Unset, type=str, help=Unset):
    """
    Decorator/factory for defining an option handled by a function.

    Usage
    - Flag (no hint): the function receives True when the option is present.
        @opt("-v", "--verbose")
        def on_verbose(flag): ...

    - Value (with hint): the function receives the converted value.
        @opt("-j", "--jobs", hint="count", type=int)
        def on_jobs(jobs): ...

    Behavior
    - Validates that it decorates a callable and enforces single application.
    - Returns the configured Opt; the function's return value may be an
      Outcome (e.g. SHORT_CIRCUIT_ALL) or a Result, anything else means MATCHED.
    """
    parser = Opt(Unset, hint, type=type)
    for name in names:
        parser.name(name)
    if help is not Unset:
        parser.help(help)

    @rename("opt")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@opt() must be applied to a callable")
        if parser.sink is not None:
            raise TypeError("@opt() must be applied only once")
        parser._bind(callback)
        return parser

    return wrapper


def arg(hint=Unset, /, *, type=str, help=Unset):
    """
    Decorator/factory for defining a positional argument handled by a function.

    Usage
        @arg("file")
        def on_file(path): ...

    Behavior
    - Validates that it decorates a callable and enforces single application.
    - Returns the configured Arg.
    """
    parser = Arg(Unset, hint, type=type)
    if help is not Unset:
        parser.help(help)

    @rename("arg")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@arg() must be applied to a callable")
        if parser.sink is not None:
            raise TypeError("@arg() must be applied only once")
        parser._bind(callback)
        return parser

    return wrapper


__all__ = (
    # Classes (parsers)
    "BoundParser",
    "Opt",
    "Arg",
    "HelpEntry",

    # Decorators (bind a function as the destination)
    "opt",
    "arg",
)

# Keep the metaclass out of star-imports and docs; it is not part of the public API.
del ParserType
