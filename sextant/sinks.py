"""
Bound sinks: where a matched value goes.

A sink owns exactly one destination, fixed at construction:
- a Binding(target, name): a settable slot on an object (attribute) or in a
  mapping (key). When the slot currently holds a list, values are appended
  and the sink counts as a container.
- a callable: invoked exactly once per accepted value, synchronously.

The set of sink kinds is closed: FlagSink (presence-only, receives True) and
ValueSink (receives a raw string, converted through its `type`). Neither can
be subclassed.

Both report through sextant.results.Result and never raise for user input:
- conversion failures -> UncastableValueError (runtime)
- exceptions escaping a callback -> DelegatedError (runtime)
- slots that refuse the write -> UnwritableDestinationError (logic)

Values are converted before anything is stored, so a failure never leaves a
destination half-updated.

    >>> settings = {"level": 0}
    >>> ValueSink(Binding(settings, "level"), type=int).set_value("3").value
    <Outcome.MATCHED: 'matched'>
    >>> settings
    {'level': 3}
"""
from collections.abc import Callable, Mapping, MutableMapping, MutableSequence
from typing import final

from .faults import DelegatedError, UncastableValueError, UnwritableDestinationError
from .results import Outcome, Result, outcome_of

_TRUTHY = frozenset({"y", "yes", "true", "on", "1"})
_FALSY = frozenset({"n", "no", "false", "off", "0"})


@final
class Binding:
    """
    Reference to one settable slot: target[name] for mappings, target.name otherwise.

    The target itself is referenced, never copied; clones of a parser write
    into the same slot (last writer wins).
    """
    __slots__ = ("_target", "_name")

    def __init__(self, target, name, /):
        if not isinstance(name, str):
            raise TypeError("binding name must be a string")
        elif not name:
            raise ValueError("binding name cannot be empty")
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_name", name)

    @property
    def target(self):
        return self._target

    @property
    def name(self):
        return self._name

    def get(self, default=None, /):
        if isinstance(self._target, Mapping):
            return self._target.get(self._name, default)
        return getattr(self._target, self._name, default)

    def set(self, value, /):
        if isinstance(self._target, MutableMapping):
            self._target[self._name] = value
        else:
            setattr(self._target, self._name, value)

    def is_container(self):
        return isinstance(self.get(), MutableSequence)

    def __setattr__(self, name, value, /):
        raise AttributeError("binding is immutable")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        # the slot is shared on purpose, see the class docstring
        return self

    def __eq__(self, other):
        if not isinstance(other, Binding):
            return NotImplemented
        return self._target is other._target and self._name == other._name

    def __hash__(self):
        return hash((id(self._target), self._name))

    def __repr__(self):
        return "binding(%s, %r)" % (type(self._target).__name__, self._name)


def convert(raw, type=str, /):
    """
    convert raw token text with the given converter.

    returns Result.ok(converted) or an UncastableValueError runtime result.
    `bool` understands y/yes/true/on/1 and n/no/false/off/0 (any case).
    """
    if type is bool:
        lowered = raw.lower()
        if lowered in _TRUTHY:
            return Result.ok(True)
        if lowered in _FALSY:
            return Result.ok(False)
        return Result.runtime_error(UncastableValueError(
            "expected a boolean value but did not recognise %r" % raw,
            hint="use one of: yes, no, true, false, on, off, 1, 0",
            token=raw,
        ))
    try:
        return Result.ok(type(raw))
    except Exception as exception:
        return Result.runtime_error(UncastableValueError(
            "unable to convert %r to %s" % (raw, getattr(type, "__name__", "destination type")),
            hint="check the value format",
            token=raw,
            exception=exception,
        ))


class Sink:
    """
    Closed base of the two sink kinds. Only this module may extend it.
    """
    __slots__ = ("_destination",)

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError("type 'Sink' is not an acceptable base type")
        super().__init_subclass__(**options)

    def __new__(cls, *args, **kwargs):
        if cls is Sink:
            raise TypeError("Sink cannot be instantiated directly; use FlagSink or ValueSink")
        return super().__new__(cls)

    def __init__(self, destination, /):
        if not isinstance(destination, Binding) and not isinstance(destination, Callable):
            raise TypeError("%s destination must be a binding or a callable" % type(self).__name__)
        self._destination = destination

    @property
    def destination(self):
        return self._destination

    def is_flag(self):
        return False

    def is_container(self):
        return isinstance(self._destination, Binding) and self._destination.is_container()

    def _store(self, value):
        """
        write the converted value into the destination, or hand it to the callback.
        """
        if isinstance(self._destination, Binding):
            try:
                if self.is_container():
                    self._destination.get().append(value)
                else:
                    self._destination.set(value)
            except (AttributeError, TypeError) as exception:
                return Result.logic_error(UnwritableDestinationError(
                    "cannot store a value into %r" % self._destination.name,
                    hint="bind to a writable attribute or mapping key",
                    exception=exception,
                ))
            return Result.ok(Outcome.MATCHED)
        try:
            returned = self._destination(value)
        except Exception as exception:
            name = getattr(self._destination, "__name__", "callback")
            return Result.runtime_error(DelegatedError(
                "%s raised %s: %s" % (name, type(exception).__name__, exception),
                hint="check additional logs for more details",
                exception=exception,
            ))
        return outcome_of(returned)

    def __eq__(self, other):
        if not isinstance(other, Sink):
            return NotImplemented
        return type(self) is type(other) and self._destination == other._destination

    def __hash__(self):
        return hash((type(self), self._destination))


@final
class FlagSink(Sink):
    """
    presence-only sink: receives True when its option is seen.
    """
    __slots__ = ()

    def is_flag(self):
        return True

    def is_container(self):
        return False

    def set_flag(self, flag, /):
        return self._store(bool(flag))

    def clone(self):
        return FlagSink(self._destination)

    def __repr__(self):
        return "flag-sink(%r)" % (self._destination,)


@final
class ValueSink(Sink):
    """
    value sink: converts raw token text through `type` then stores it.
    """
    __slots__ = ("_type",)

    def __init__(self, destination, /, type=str):
        super().__init__(destination)
        if not callable(type):
            raise TypeError("ValueSink 'type' must be callable")
        self._type = type

    @property
    def type(self):
        return self._type

    def set_value(self, raw, /):
        if not isinstance(raw, str):
            raise TypeError("set_value() argument must be a string")
        converted = convert(raw, self._type)
        if not converted:
            return converted
        return self._store(converted.value)

    def clone(self):
        return ValueSink(self._destination, type=self._type)

    def __eq__(self, other):
        if not isinstance(other, ValueSink):
            return NotImplemented
        return self._destination == other._destination and self._type is other._type

    def __hash__(self):
        return hash((ValueSink, self._destination, self._type))

    def __repr__(self):
        return "value-sink(%r, type=%s)" % (self._destination, getattr(self._type, "__name__", self._type))


__all__ = (
    "Binding",
    "Sink",
    "FlagSink",
    "ValueSink",
    "convert",
)
