"""
Result model shared by every engine operation.

A Result is either ok (carrying a value) or an error (carrying a fault).
Parse operations carry a ParseState(outcome, cursor) as their value:

- Outcome.NO_MATCH: the parser did not recognise the token; try the next
  candidate. Not an error.
- Outcome.MATCHED: tokens were consumed; resume from the returned cursor.
- Outcome.SHORT_CIRCUIT_ALL: stop all further parsing immediately and treat
  the input as fully handled (e.g. a help flag).

Errors come in two kinds, mirrored by the fault families:

- ResultType.LOGIC_ERROR: the CLI definition is wrong (ParserLogicError).
- ResultType.RUNTIME_ERROR: the user input is wrong (ParserRuntimeError).

Callers must check is_ok() (or bool(result)) before reading the payload.
An error result makes no promise about its cursor; stop driving that branch.
"""
from enum import Enum
from typing import NamedTuple, final

from .faults import ParserFault, ParserLogicError, ParserRuntimeError


class ResultType(Enum):
    OK = "ok"
    LOGIC_ERROR = "logic-error"
    RUNTIME_ERROR = "runtime-error"


class Outcome(Enum):
    NO_MATCH = "no-match"
    MATCHED = "matched"
    SHORT_CIRCUIT_ALL = "short-circuit-all"


class ParseState(NamedTuple):
    outcome: Outcome
    cursor: object


@final
class Result:
    """
    Immutable success/failure value.

    construction
    - Result.ok(value=None)
    - Result.logic_error(fault, value=None)
    - Result.runtime_error(fault, value=None)
      `fault` is a fault instance of the matching family, or a message string
      wrapped into the generic ParserLogicError/ParserRuntimeError.
    """
    __slots__ = ("_kind", "_value", "_fault")

    def __init__(self, kind, value=None, fault=None, /):
        if not isinstance(kind, ResultType):
            raise TypeError("result kind must be a result type")
        if (kind is ResultType.OK) != (fault is None):
            raise ValueError("only error results carry a fault")
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_fault", fault)

    @classmethod
    def ok(cls, value=None, /):
        return cls(ResultType.OK, value)

    @classmethod
    def logic_error(cls, fault, /, value=None):
        if isinstance(fault, str):
            fault = ParserLogicError(fault)
        if not isinstance(fault, ParserLogicError):
            raise TypeError("logic_error() argument must be a logic fault or a message")
        return cls(ResultType.LOGIC_ERROR, value, fault)

    @classmethod
    def runtime_error(cls, fault, /, value=None):
        if isinstance(fault, str):
            fault = ParserRuntimeError(fault)
        if not isinstance(fault, ParserRuntimeError):
            raise TypeError("runtime_error() argument must be a runtime fault or a message")
        return cls(ResultType.RUNTIME_ERROR, value, fault)

    @classmethod
    def from_fault(cls, fault, /, value=None):
        """
        build the error result matching the family of the given fault.
        """
        if isinstance(fault, ParserLogicError):
            return cls.logic_error(fault, value=value)
        if isinstance(fault, ParserRuntimeError):
            return cls.runtime_error(fault, value=value)
        if isinstance(fault, ParserFault):
            # Unclassified faults are treated as user-facing.
            return cls.runtime_error(ParserRuntimeError(fault.message, **fault.options), value=value)
        raise TypeError("from_fault() argument must be a parser fault")

    @classmethod
    def parsed(cls, outcome, cursor, /):
        """
        shortcut for Result.ok(ParseState(outcome, cursor)).
        """
        return cls.ok(ParseState(outcome, cursor))

    @property
    def kind(self):
        return self._kind

    @property
    def value(self):
        return self._value

    @property
    def fault(self):
        return self._fault

    @property
    def message(self):
        return "" if self._fault is None else self._fault.message

    @property
    def outcome(self):
        return self._value.outcome if isinstance(self._value, ParseState) else None

    @property
    def cursor(self):
        return self._value.cursor if isinstance(self._value, ParseState) else None

    def is_ok(self):
        return self._kind is ResultType.OK

    def is_error(self):
        return self._kind is not ResultType.OK

    def is_logic_error(self):
        return self._kind is ResultType.LOGIC_ERROR

    def is_runtime_error(self):
        return self._kind is ResultType.RUNTIME_ERROR

    def __bool__(self):
        return self.is_ok()

    def __setattr__(self, name, value, /):
        raise AttributeError("result is immutable")

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return (self._kind, self._value, self._fault) == (other._kind, other._value, other._fault)

    def __hash__(self):
        return hash((self._kind, self._fault))

    def __repr__(self):
        if self.is_ok():
            return "result(%s, value=%r)" % (self._kind.value, self._value)
        return "result(%s, message=%r)" % (self._kind.value, self.message)

    def __rich_repr__(self):
        yield "kind", self._kind
        if self.is_ok():
            yield "value", self._value
        else:
            yield "fault", self._fault


def outcome_of(returned, /):
    """
    interpret whatever a user callback returned as a Result.

    - a Result is propagated as is (an ok Result without a value means MATCHED).
    - an Outcome becomes an ok Result carrying that outcome.
    - anything else (usually None) means MATCHED.
    """
    if isinstance(returned, Result):
        if returned.is_ok() and returned.value is None:
            return Result.ok(Outcome.MATCHED)
        return returned
    if isinstance(returned, Outcome):
        return Result.ok(returned)
    return Result.ok(Outcome.MATCHED)


__all__ = (
    "ResultType",
    "Outcome",
    "ParseState",
    "Result",
    "outcome_of",
)
