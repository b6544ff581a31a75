"""
Tests for the Unset sentinel and the small helpers in sextant.utils.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from sextant.utils import *


class UnsetTest(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPickle(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnion(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("name", str | Unset)
        self.assertNotIsInstance(3, str | Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Subclass(UnsetType):
                pass


class HelpersTest(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testRename(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(rename("again")(function).__qualname__, "again")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorReturnsCopies(self):
        class Holder:
            names = mirror("names")

            def __init__(self):
                self._names = ["-v"]

        holder = Holder()
        holder.names.append("-x")
        self.assertEqual(holder.names, ["-v"])


if __name__ == "__main__":
    unittest.main()
