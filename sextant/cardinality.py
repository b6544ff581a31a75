"""
Cardinality: how many times a parser may (and must) match.

A Cardinality is a (minimum, maximum) pair where maximum == 0 means
"unbounded". It drives two things:
- validation by a composing caller: check(count, label) after a run, and
  is_exhausted(count) to stop offering tokens to a parser that is full;
- the bracketing of positional usage text (<file>, [<file>], [<file>...]).

    >>> Cardinality.required(2)
    Cardinality(minimum=2, maximum=2)
    >>> Cardinality.unbounded().check(0, "<file>").is_ok()
    True
"""
from .faults import NotEnoughMatchesError, TooManyMatchesError
from .results import Result
from .utils import Unset


class Cardinality(__import__("collections").namedtuple("Cardinality", ("minimum", "maximum"))):
    __slots__ = ()

    def __new__(cls, minimum=0, maximum=1):
        for name, value in (("minimum", minimum), ("maximum", maximum)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError("cardinality %r must be an integer" % name)
            if value < 0:
                raise ValueError("cardinality %r cannot be negative" % name)
        if maximum and maximum < minimum:
            raise ValueError("cardinality 'maximum' cannot be lower than 'minimum'")
        return super().__new__(cls, minimum, maximum)

    @classmethod
    def optional(cls):
        return cls(0, 1)

    @classmethod
    def required(cls, count=1):
        return cls.counted(count)

    @classmethod
    def counted(cls, count):
        if not isinstance(count, int) or isinstance(count, bool):
            raise TypeError("cardinality count must be an integer")
        if count < 1:
            raise ValueError("cardinality count must be a positive integer")
        return cls(count, count)

    @classmethod
    def unbounded(cls, minimum=0):
        return cls(minimum, 0)

    @classmethod
    def between(cls, minimum, maximum=Unset):
        """
        build from builder arguments: one number means exactly that many.
        """
        if maximum is Unset:
            return cls(minimum, minimum)
        return cls(minimum, maximum)

    def is_optional(self):
        return self.minimum == 0

    def is_required(self):
        return self.minimum > 0

    def is_bounded(self):
        return self.maximum > 0

    def is_unbounded(self):
        return self.maximum == 0

    def is_exhausted(self, count, /):
        return self.is_bounded() and count >= self.maximum

    def check(self, count, label, /):
        """
        validate a final match count.

        returns ok, or a runtime error naming the label (usually the usage text).
        """
        if count < self.minimum:
            return Result.runtime_error(NotEnoughMatchesError(
                "expected %d %s for %s but got %d" % (
                    self.minimum,
                    "value" if self.minimum == 1 else "values",
                    label,
                    count,
                ),
                hint="provide %s" % label,
                token=label,
            ))
        if self.is_bounded() and count > self.maximum:
            return Result.runtime_error(TooManyMatchesError(
                "expected at most %d %s for %s but got %d" % (
                    self.maximum,
                    "value" if self.maximum == 1 else "values",
                    label,
                    count,
                ),
                hint="remove the extra values",
                token=label,
            ))
        return Result.ok()

    def __rich_repr__(self):
        yield "minimum", self.minimum
        yield "maximum", self.maximum


__all__ = (
    "Cardinality",
)
