"""
Behavioral tests for Opt (named options).

Scope
- Matching: alias normalization, custom prefixes, inline values.
- Consumption: flags take one token, value options two, NO_MATCH takes none
  and hands back the input cursor.
- Validation: names, prefixes, sinks; re-run on every parse.
- Builders, projections, cloning and the @opt() decorator.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import enum
import unittest
import warnings
from unittest import TestCase

from sextant import (
    Binding,
    DuplicateNameWarning,
    EmptyNameError,
    HelpEntry,
    InvalidChoiceError,
    MalformedNameError,
    MissingNamesError,
    MissingSinkError,
    MissingValueError,
    Opt,
    Outcome,
    ParserCustomization,
    Result,
    UncastableValueError,
    normalize,
    opt,
    tokenize,
)

SLASHES = ParserCustomization(option_prefix="-/")


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


class OptMatchTest(TestCase):

    def setUp(self):
        self.settings = {"verbose": False}
        self.option = Opt(Binding(self.settings, "verbose"))["-v"]["--verbose"]

    def testMatchesEveryAlias(self):
        self.assertTrue(self.option.is_match("-v"))
        self.assertTrue(self.option.is_match("--verbose"))

    def testRejectsOtherSpellings(self):
        self.assertFalse(self.option.is_match("-x"))
        self.assertFalse(self.option.is_match("--v"))
        self.assertFalse(self.option.is_match("verbose"))

    def testMatchesCustomPrefixes(self):
        self.assertTrue(self.option.is_match("/v", SLASHES))
        self.assertTrue(self.option.is_match("//verbose", SLASHES))
        self.assertTrue(self.option.is_match("-/verbose", SLASHES))
        self.assertFalse(self.option.is_match("/v"))

    def testNormalizeIsIdempotent(self):
        for name in ("-v", "--verbose", "/v", "//verbose", "-", "--", "v", ""):
            once = normalize(name, SLASHES)
            self.assertEqual(normalize(once, SLASHES), once)

    def testNormalizeShortNamesUnchanged(self):
        self.assertEqual(normalize("-"), "-")
        self.assertEqual(normalize("/", SLASHES), "/")


class OptParseTest(TestCase):

    def setUp(self):
        self.settings = {"verbose": False, "output": None, "jobs": 1}
        self.verbose = Opt(Binding(self.settings, "verbose"))["-v"]["--verbose"]
        self.output = Opt(Binding(self.settings, "output"), "path").name("-o").name("--output")
        self.jobs = Opt(Binding(self.settings, "jobs"), "count", type=int)["-j"]

    def testFlagSetsTrue(self):
        tokens = tokenize(["-v"])
        result = self.verbose.parse(tokens)
        self.assertTrue(result)
        self.assertIs(result.outcome, Outcome.MATCHED)
        self.assertEqual(result.cursor, tokens.advance())
        self.assertIs(self.settings["verbose"], True)

    def testLongFlag(self):
        result = self.verbose.parse(tokenize(["--verbose", "file"]))
        self.assertIs(result.outcome, Outcome.MATCHED)
        self.assertEqual(result.cursor.position, 1)

    def testValueOptionConsumesTwoTokens(self):
        result = self.output.parse(tokenize(["-o", "out.txt", "file"]))
        self.assertIs(result.outcome, Outcome.MATCHED)
        self.assertEqual(result.cursor.position, 2)
        self.assertEqual(self.settings["output"], "out.txt")

    def testInlineValue(self):
        result = self.output.parse(tokenize(["--output=out.txt"]))
        self.assertIs(result.outcome, Outcome.MATCHED)
        self.assertFalse(result.cursor)
        self.assertEqual(self.settings["output"], "out.txt")

    def testNoMatchReturnsInputCursor(self):
        for arguments in (["-x"], ["file"], []):
            tokens = tokenize(arguments)
            result = self.verbose.parse(tokens)
            self.assertIs(result.outcome, Outcome.NO_MATCH)
            self.assertEqual(result.cursor, tokens)
        self.assertIs(self.settings["verbose"], False)

    def testConsumesAtMostTwoTokens(self):
        for option, arguments in (
                (self.verbose, ["-v", "a", "b"]),
                (self.output, ["-o", "a", "b"]),
                (self.verbose, ["a", "-v"]),
        ):
            tokens = tokenize(arguments)
            result = option.parse(tokens)
            self.assertIn(result.cursor.position - tokens.position, (0, 1, 2))

    def testMissingValue(self):
        result = Opt(Binding({}, "name"), "name")["--name"].parse(tokenize(["--name"]))
        self.assertTrue(result.is_runtime_error())
        self.assertIsInstance(result.fault, MissingValueError)
        self.assertIn("--name", result.message)

    def testValueFollowedByOption(self):
        result = self.output.parse(tokenize(["-o", "-v"]))
        self.assertIsInstance(result.fault, MissingValueError)
        self.assertIsNone(self.settings["output"])

    def testConversion(self):
        self.assertTrue(self.jobs.parse(tokenize(["-j", "4"])))
        self.assertEqual(self.settings["jobs"], 4)

    def testConversionFailure(self):
        result = self.jobs.parse(tokenize(["-j", "four"]))
        self.assertIsInstance(result.fault, UncastableValueError)
        self.assertEqual(self.settings["jobs"], 1)

    def testChoices(self):
        settings = {"mode": None}
        mode = Opt(Binding(settings, "mode"), "mode")["--mode"].choices("a", "b")

        rejected = mode.parse(tokenize(["--mode", "c"]))
        self.assertTrue(rejected.is_runtime_error())
        self.assertIsInstance(rejected.fault, InvalidChoiceError)
        self.assertEqual(rejected.message, "value 'c' not expected, allowed values are: a, b")
        self.assertIsNone(settings["mode"])

        accepted = mode.parse(tokenize(["--mode", "a"]))
        self.assertIs(accepted.outcome, Outcome.MATCHED)
        self.assertEqual(settings["mode"], "a")

    def testChoicePredicate(self):
        settings = {"level": None}
        level = Opt(Binding(settings, "level"), "level")["-l"].choices(str.isdigit)
        self.assertIsInstance(level.parse(tokenize(["-l", "high"])).fault, InvalidChoiceError)
        self.assertTrue(level.parse(tokenize(["-l", "3"])))

    def testShortCircuit(self):
        @opt("-h", "--help")
        def on_help(flag):
            return Outcome.SHORT_CIRCUIT_ALL

        result = on_help.parse(tokenize(["--help", "file"]))
        self.assertIs(result.outcome, Outcome.SHORT_CIRCUIT_ALL)
        self.assertEqual(result.cursor.position, 1)

    def testValueShortCircuit(self):
        received = []

        @opt("--print", hint="value")
        def on_print(value):
            received.append(value)
            return Outcome.SHORT_CIRCUIT_ALL

        result = on_print.parse(tokenize(["--print", "1", "rest"]))
        self.assertIs(result.outcome, Outcome.SHORT_CIRCUIT_ALL)
        self.assertEqual(result.cursor.position, 2)
        self.assertEqual(received, ["1"])

    def testConverterErrorIsReturned(self):
        settings = {"color": None}
        color = Opt(Binding(settings, "color"), "color", type=lambda raw: Color[raw.upper()])["--color"]

        rejected = color.parse(tokenize(["--color", "blue"]))
        self.assertTrue(rejected.is_runtime_error())
        self.assertIsInstance(rejected.fault, UncastableValueError)
        self.assertIsNone(settings["color"])

        self.assertTrue(color.parse(tokenize(["--color", "red"])))
        self.assertIs(settings["color"], Color.RED)

    def testCustomPrefix(self):
        result = self.verbose.parse(tokenize(["/v"], SLASHES), SLASHES)
        self.assertIs(result.outcome, Outcome.MATCHED)

    def testParseDoesNotMutateParser(self):
        before = repr(self.output)
        self.output.parse(tokenize(["-o", "out.txt"]))
        self.assertEqual(repr(self.output), before)


class OptValidationTest(TestCase):

    def setUp(self):
        self.settings = {}
        self.binding = Binding(self.settings, "flag")

    def testNoNames(self):
        option = Opt(self.binding)
        result = option.validate()
        self.assertTrue(result.is_logic_error())
        self.assertIsInstance(result.fault, MissingNamesError)
        self.assertTrue(option.name("-x").validate())

    def testParseRevalidates(self):
        result = Opt(self.binding).parse(tokenize(["-x"]))
        self.assertTrue(result.is_logic_error())
        self.assertEqual(self.settings, {})

    def testEmptyName(self):
        self.assertIsInstance(Opt(self.binding)[""].validate().fault, EmptyNameError)

    def testMissingPrefix(self):
        result = Opt(self.binding)["verbose"].validate()
        self.assertIsInstance(result.fault, MalformedNameError)
        self.assertIn("verbose", result.message)

    def testPrefixOnly(self):
        self.assertIsInstance(Opt(self.binding)["-"].validate().fault, MalformedNameError)
        self.assertIsInstance(Opt(self.binding)["--"].validate().fault, MalformedNameError)

    def testCustomPrefixAccepted(self):
        option = Opt(self.binding)["/v"]
        self.assertIsInstance(option.validate().fault, MalformedNameError)
        self.assertTrue(option.validate(SLASHES))

    def testMissingSink(self):
        result = Opt()["-v"].validate()
        self.assertIsInstance(result.fault, MissingSinkError)

    def testNonStringName(self):
        with self.assertRaises(TypeError):
            Opt(self.binding).name(1)

    def testDuplicateNameWarns(self):
        option = Opt(self.binding)["-v"]
        with self.assertWarns(DuplicateNameWarning):
            option.name("-v")
        self.assertEqual(option.names, ["-v", "-v"])

    def testDistinctNamesDoNotWarn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            Opt(self.binding)["-v"]["--verbose"]


class OptProjectionTest(TestCase):

    def setUp(self):
        self.output = Opt(Binding({}, "output"), "path")["-o"]["--output"].help("where to write")

    def testUsage(self):
        self.assertEqual(self.output.get_usage_text(), "-o|--output")

    def testHelp(self):
        self.assertEqual(self.output.get_help_text(), [HelpEntry("-o, --output <path>", "where to write")])

    def testFlagHelpHasNoHint(self):
        flag = Opt(Binding({}, "verbose"))["-v"]["--verbose"]
        self.assertEqual(flag.get_help_text(), [HelpEntry("-v, --verbose", None)])

    def testEmptyHintRejected(self):
        with self.assertRaises(ValueError):
            Opt(Binding({}, "output"), "")
        with self.assertRaises(ValueError):
            opt("-o", hint="  ")

    def testHelpValidation(self):
        with self.assertRaises(ValueError):
            Opt()["-v"].help("   ")
        with self.assertRaises(TypeError):
            Opt()["-v"].help(3)

    def testChoicesValidation(self):
        with self.assertRaises(ValueError):
            Opt()["-m"].choices()
        with self.assertRaises(ValueError):
            Opt()["-m"].choices("a", "a")
        with self.assertRaises(TypeError):
            Opt()["-m"].choices("a", 1)

    def testIntrospection(self):
        self.assertEqual(self.output.names, ["-o", "--output"])
        self.assertEqual(self.output.hint, "path")
        self.assertEqual(self.output.description, "where to write")
        self.assertIsNone(self.output.permitted_values)
        self.assertFalse(self.output.sink.is_flag())

    def testNamesAreCopies(self):
        self.output.names.append("-x")
        self.assertEqual(self.output.names, ["-o", "--output"])

    def testRepr(self):
        self.assertTrue(repr(self.output).startswith("opt(names=['-o', '--output'], sink=value-sink("))

    def testCardinality(self):
        self.assertEqual(self.output.get_cardinality(), (0, 1))
        self.assertEqual(self.output.required().get_cardinality(), (1, 1))
        self.assertEqual(self.output.cardinality(0, 3).get_cardinality(), (0, 3))
        self.assertEqual(Opt(Binding({"paths": []}, "paths"), "path")["-I"].get_cardinality(), (0, 0))


class OptCloneTest(TestCase):

    def testCloneIsIndependent(self):
        settings = {"level": None}
        original = Opt(Binding(settings, "level"), "level")["-l"].choices("1", "2")
        clone = original.clone()
        clone.name("--level").choices("3")
        self.assertEqual(original.names, ["-l"])
        self.assertEqual(original.permitted_values, ("1", "2"))
        self.assertEqual(clone.names, ["-l", "--level"])

    def testCloneSharesDestination(self):
        settings = {"level": None}
        clone = copy.deepcopy(Opt(Binding(settings, "level"), "level")["-l"])
        clone.parse(tokenize(["-l", "2"]))
        self.assertEqual(settings["level"], "2")


class OptDecoratorTest(TestCase):

    def testFlagCallback(self):
        received = []

        @opt("-v", "--verbose", help="say more")
        def on_verbose(flag):
            received.append(flag)

        self.assertIsInstance(on_verbose, Opt)
        self.assertTrue(on_verbose.sink.is_flag())
        self.assertEqual(on_verbose.description, "say more")
        self.assertTrue(on_verbose.parse(tokenize(["--verbose"])))
        self.assertEqual(received, [True])

    def testValueCallback(self):
        received = []

        @opt("-j", "--jobs", hint="count", type=int)
        def on_jobs(jobs):
            received.append(jobs)

        self.assertTrue(on_jobs.parse(tokenize(["-j", "4"])))
        self.assertEqual(received, [4])

    def testCallbackError(self):
        @opt("--mode", hint="mode")
        def on_mode(mode):
            return Result.runtime_error("unknown mode %r" % mode)

        result = on_mode.parse(tokenize(["--mode", "x"]))
        self.assertEqual(result.message, "unknown mode 'x'")

    def testSingleApplication(self):
        decorator = opt("-v")
        decorator(print)
        with self.assertRaises(TypeError):
            decorator(print)

    def testRequiresCallable(self):
        with self.assertRaises(TypeError):
            opt("-v")("not callable")


if __name__ == "__main__":
    unittest.main()
