"""
Sextant faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the engine
  can report. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- ParserFault: base type that carries message + options and knows how to
  render itself. Two families:
  • ParserLogicError: the CLI was *defined* wrongly (empty alias, no sink).
  • ParserRuntimeError: the *user* typed something wrong (missing value,
    disallowed choice, unconvertible text). Messages are meant to be shown
    verbatim to the end user.
- ParserWarning: soft, non-fatal notices emitted through the warnings module.
- report(): central entry point to render any fault or warning via rich.

Faults are values
- The parse path never raises faults; it wraps them into sextant.results.Result.
  They are Exception subclasses only so that callers *may* raise them, and so
  that tracebacks and `except` clauses work naturally when they do.

Integration
- The host application may expose, in __main__:
  • __prog__: program name shown in headers.
  • __styles__: mapping overriding the rich styles below.
  • __codes__: mapping from FaultCode to friendlier labels.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - configuration (21xxx): the parser definition is wrong
      • MISSING_NAMES, EMPTY_NAME, MALFORMED_NAME, MISSING_SINK, FLAG_SINK,
        UNWRITABLE_DESTINATION, EMPTY_CURSOR
    - input (22xxx): the user input is wrong
      • MISSING_VALUE, INVALID_CHOICE, UNCASTABLE_VALUE, NOT_ENOUGH_MATCHES,
        TOO_MANY_MATCHES
    - delegated (23xxx): a user callback failed
      • DELEGATED_ERROR
    - warnings (24xxx)
      • DUPLICATE_NAME
    """
    # --- configuration errors (21xxx) ---
    MISSING_NAMES          = 21101
    EMPTY_NAME             = 21102
    MALFORMED_NAME         = 21103
    MISSING_SINK           = 21111
    FLAG_SINK              = 21112
    UNWRITABLE_DESTINATION = 21113
    EMPTY_CURSOR           = 21121

    # --- input errors (22xxx) ---
    MISSING_VALUE          = 22101
    INVALID_CHOICE         = 22102
    UNCASTABLE_VALUE       = 22103
    NOT_ENOUGH_MATCHES     = 22111
    TOO_MANY_MATCHES       = 22112

    # --- delegated errors (23xxx) ---
    DELEGATED_ERROR        = 23101

    # --- warnings (24xxx) ---
    DUPLICATE_NAME         = 24101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _render(self, styles, title_style, message_style):
    """
    shared rich rendering for faults and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the message, then an optional " → hint" line.
    - fancy=True wraps the body in a Panel titled with the header.
    """
    colorful = self.options.get("colorful", True)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), style)

    prog = text(
        coalesce(self.options.get("prog", Unset), getattr(__import__("__main__"), "__prog__", "sextant")),
        styler("prog-name")
    )

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(self.code.normalize(), styler("code")),
        " | ",
        text(self.title.title(), styler(title_style)),
        " ]"
    )
    renders = [text(self.message, styler(message_style))]
    if hint := self.options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if self.options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")

    return Group(header, *renders)


class ParserFault(Exception):
    """
    base type for every error the engine reports.

    contract
    - message: one-sentence, lowercased, user-readable description.
    - options: read-only mapping of context (code, title, hint, token, ...).
    - code/title fall back to the class defaults when not given as options.
    """
    code = FaultCode.DELEGATED_ERROR
    title = "parser error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("%s() message must be a string" % type(self).__name__)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)
        if "code" in options:
            self.code = options["code"]
        if "title" in options:
            self.title = options["title"]

    def __eq__(self, other):
        if not isinstance(other, ParserFault):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message and self.code == other.code

    def __hash__(self):
        return hash((type(self), self.message, self.code))

    def __rich__(self):
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })
        return _render(self, styles, "error-title", "error-message")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ParserLogicError(ParserFault):
    title = "invalid parser definition"


class ParserRuntimeError(ParserFault):
    title = "invalid input"


class MissingNamesError(ParserLogicError):
    code = FaultCode.MISSING_NAMES
    title = "option without names"


class EmptyNameError(ParserLogicError):
    code = FaultCode.EMPTY_NAME
    title = "empty option name"


class MalformedNameError(ParserLogicError):
    code = FaultCode.MALFORMED_NAME
    title = "malformed option name"


class MissingSinkError(ParserLogicError):
    code = FaultCode.MISSING_SINK
    title = "unbound parser"


class FlagSinkError(ParserLogicError):
    code = FaultCode.FLAG_SINK
    title = "flag bound to positional"


class UnwritableDestinationError(ParserLogicError):
    code = FaultCode.UNWRITABLE_DESTINATION
    title = "unwritable destination"


class EmptyCursorError(ParserLogicError):
    code = FaultCode.EMPTY_CURSOR
    title = "empty token cursor"


class MissingValueError(ParserRuntimeError):
    code = FaultCode.MISSING_VALUE
    title = "missing value"


class InvalidChoiceError(ParserRuntimeError):
    code = FaultCode.INVALID_CHOICE
    title = "invalid choice"


class UncastableValueError(ParserRuntimeError):
    code = FaultCode.UNCASTABLE_VALUE
    title = "invalid value"


class DelegatedError(ParserRuntimeError):
    code = FaultCode.DELEGATED_ERROR
    title = "delegated error"


class NotEnoughMatchesError(ParserRuntimeError):
    code = FaultCode.NOT_ENOUGH_MATCHES
    title = "not enough values"


class TooManyMatchesError(ParserRuntimeError):
    code = FaultCode.TOO_MANY_MATCHES
    title = "too many values"


class ParserWarning(Warning):
    """
    base type for soft notices (emitted with warnings.warn, never fatal).
    """
    code = FaultCode.DUPLICATE_NAME
    title = "parser warning"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("%s() message must be a string" % type(self).__name__)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)
        if "code" in options:
            self.code = options["code"]
        if "title" in options:
            self.title = options["title"]

    def __rich__(self):
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })
        return _render(self, styles, "warning-title", "warning-message")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateNameWarning(ParserWarning):
    code = FaultCode.DUPLICATE_NAME
    title = "duplicate option name"


def report(fault, /, **options):
    """
    render a fault or warning with the given display options.

    contract
    - fault must provide __rich__ and __replace__ (ParserFault / ParserWarning).
    - options are merged into the fault via copy.replace(fault, **options).
    - the rendering goes to options["console"] when given, else to the shared
      stderr console.

    typical options
    - console, prog, colorful, fancy, hint.
    """
    if (
        not hasattr(fault, "__rich__") or
        not callable(fault.__rich__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("report() argument must have __rich__ and __replace__ methods")
    target = options.pop("console", console)
    target.print(copy.replace(fault, **options))


def exit_with(fault, /, status=1, **options):
    """
    report a runtime fault and terminate the process.

    intended for the very top of a program (the engine itself never exits);
    logic errors are re-raised instead since they indicate a broken definition.
    """
    if isinstance(fault, ParserLogicError):
        raise fault
    report(fault, **options)
    sys.exit(status)


__all__ = (
    "FaultCode",
    "ParserFault",
    "ParserLogicError",
    "ParserRuntimeError",
    "MissingNamesError",
    "EmptyNameError",
    "MalformedNameError",
    "MissingSinkError",
    "FlagSinkError",
    "UnwritableDestinationError",
    "EmptyCursorError",
    "MissingValueError",
    "InvalidChoiceError",
    "UncastableValueError",
    "DelegatedError",
    "NotEnoughMatchesError",
    "TooManyMatchesError",
    "ParserWarning",
    "DuplicateNameWarning",
    "report",
    "exit_with",
)
