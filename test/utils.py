"""
Tests for the internal helpers.

This module verifies semantic guarantees of `argvest.utils`:
- Unset singleton identity, falsy semantics and representation.
- Copying, deep copying, pickling, and thread safety of the sentinel.
- Finality (UnsetType cannot be subclassed).
- nullify, rename and kebab helpers.
- StorageGuard write-once storage and read-only views.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from types import MappingProxyType
from unittest import TestCase

from argvest.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.

    This suite asserts that:
    - UnsetType() always returns the same instance (singleton).
    - The sentinel is falsy but not equal to other falsy values.
    - Copy/deepcopy/pickle round-trips preserve identity.
    - The type is final and cannot be subclassed.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor and the exported name refer to the same object.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(self.unset, Unset)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)

    def testPickleRoundTrip(self) -> None:
        """
        Pickle round-trips preserve the identity of the singleton.
        """
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance (thread-safe singleton).
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, Unset)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """nullify, rename and kebab."""

    def testNullifyReplacesOnlyUnset(self):
        self.assertIsNone(nullify(Unset))
        self.assertEqual(nullify(Unset, "default"), "default")
        self.assertEqual(nullify(0, 1), 0)
        self.assertEqual(nullify("", "default"), "")
        self.assertIsNone(nullify(None, "default"))

    def testRenameAsDecorator(self):
        @rename("converter")
        def function():
            pass

        self.assertEqual(function.__name__, "converter")

    def testRenameRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            rename(3)

    def testKebab(self):
        self.assertEqual(kebab("bind_address"), "bind-address")
        self.assertEqual(kebab("verbose"), "verbose")
        with self.assertRaises(TypeError):
            kebab(3)


class Record(StorageGuard):
    items = view("items")
    mapping = view("mapping")
    scalar = view("scalar")

    def __new__(cls, items, mapping, scalar):
        with super().__new__(cls) as self:
            setattr(self, "-items", items)
            setattr(self, "-mapping", mapping)
            setattr(self, "-scalar", scalar)
        return self


class StorageGuardTest(TestCase):
    """write-once storage and read-only views."""

    def setUp(self):
        self.record = Record(["a", "b"], {"key": "value"}, 3)

    def testViewsAreImmutable(self):
        self.assertEqual(self.record.items, ("a", "b"))
        self.assertIsInstance(self.record.mapping, MappingProxyType)
        self.assertEqual(self.record.scalar, 3)

    def testStorageIsHidden(self):
        with self.assertRaises(AttributeError):
            getattr(self.record, "-items")

    def testStorageIsLockedAfterBuild(self):
        with self.assertRaises(AttributeError):
            setattr(self.record, "-scalar", 4)
        self.assertEqual(self.record.scalar, 3)

    def testPublicAttributesAreRejected(self):
        with self.assertRaises(AttributeError):
            self.record.scalar = 4
        with self.assertRaises(AttributeError):
            self.record.other = 4

    def testDeletionIsRejected(self):
        with self.assertRaises(AttributeError):
            del self.record.scalar


if __name__ == '__main__':
    unittest.main()
