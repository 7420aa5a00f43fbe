"""
Commands module behavioral tests (descriptor tables and the command tree).

Scope
- Validate table construction: group flattening, namespaces, sink paths.
- Validate construction-time identity checks: names, dests, subcommand names
  and aliases, across the whole visible chain.
- Validate positional slot ordering rules.
- Validate lookups: own table first, then enclosing commands; prefix completion.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Command, Option, Flag, Positional, Group).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argbind import Command, Option, Flag, Positional, Group


class TestCommandTable(TestCase):
    """Behavioral tests for a single descriptor table."""

    def testEntriesInDeclarationOrder(self):
        c = Command(Flag("-v"), Group(Option("--host"), Option("--port")), Option("-o"))
        self.assertEqual([entry.label for entry in c.entries], ["-v", "--host", "--port", "-o"])

    def testGroupNamespacePrefixesLongNames(self):
        c = Command(Group(Option("-H", "--host"), namespace="server"))
        entry, = c.entries
        self.assertEqual(entry.long, "server.host")
        self.assertEqual(entry.short, "H")
        self.assertEqual(entry.label, "-H, --server.host")

    def testNestedNamespacesAreJoined(self):
        c = Command(Group(Group(Option("--user"), namespace="auth"), namespace="db"))
        entry, = c.entries
        self.assertEqual(entry.long, "db.auth.user")

    def testGroupDestExtendsPath(self):
        c = Command(Group(Group(Option("--user"), dest="auth"), dest="db"))
        entry, = c.entries
        self.assertEqual(entry.path, ("db", "auth"))

    def testGroupWithoutDestSharesTheSink(self):
        c = Command(Group(Option("--host")))
        entry, = c.entries
        self.assertEqual(entry.path, ())

    def testDuplicateShortRejected(self):
        with self.assertRaises(ValueError):
            Command(Flag("-v"), Flag("-v", dest="other"))

    def testDuplicateLongRejected(self):
        with self.assertRaises(ValueError):
            Command(Flag("--verbose"), Group(Flag("--verbose", dest="other")))

    def testSameLongInDistinctNamespacesAllowed(self):
        c = Command(
            Group(Option("--host"), namespace="a", dest="a"),
            Group(Option("--host"), namespace="b", dest="b"),
        )
        self.assertEqual([entry.long for entry in c.entries], ["a.host", "b.host"])

    def testDuplicateDestRejected(self):
        with self.assertRaises(ValueError):
            Command(Option("--first", dest="value"), Option("--second", dest="value"))

    def testPositionalDestClashRejected(self):
        with self.assertRaises(ValueError):
            Command(Option("--file"), Positional("FILE"))

    def testGroupDestClashWithValueRejected(self):
        with self.assertRaises(ValueError):
            Command(Option("--server"), Group(Option("--host"), dest="server"))

    def testRemainderMustBeLast(self):
        with self.assertRaises(TypeError):
            Command(Positional("REST", remainder=True), Positional("LAST"))

    def testRequiredCannotFollowOptional(self):
        with self.assertRaises(TypeError):
            Command(Positional("A"), Positional("B", required=True))

    def testRequiredRemainderCannotFollowOptional(self):
        with self.assertRaises(TypeError):
            Command(Positional("A"), Positional("R", remainder=True, required=2))

    def testPositionalsKeepOrder(self):
        c = Command(Positional("A", required=True), Positional("B"), Positional("R", remainder=True))
        self.assertEqual([slot.name for slot in c.positionals], ["A", "B", "R"])

    def testUnsupportedArgumentRejected(self):
        with self.assertRaises(TypeError):
            Command("--verbose")

    def testNameValidation(self):
        with self.assertRaises(ValueError):
            Command(name="-x")
        with self.assertRaises(TypeError):
            Command(name=1)

    def testAliasesRequireName(self):
        with self.assertRaises(TypeError):
            Command(aliases=("x",))

    def testDestFromName(self):
        self.assertEqual(Command(name="dry-run").dest, "dry_run")
        self.assertIsNone(Command().dest)

    def testRepr(self):
        self.assertTrue(repr(Command(Flag("-v"), name="tool")).startswith("command("))


class TestCommandTree(TestCase):
    """Behavioral tests for subcommands and parent links."""

    def testParentLinks(self):
        leaf = Command(name="leaf")
        middle = Command(name="middle", commands=(leaf,))
        root = Command(name="root", commands=(middle,))
        self.assertIs(leaf.parent, middle)
        self.assertIs(leaf.root, root)
        self.assertEqual(leaf.path, (root, middle, leaf))
        self.assertIsNone(root.parent)

    def testChildrenByNameAndAlias(self):
        commit = Command(name="commit", aliases=("ci",))
        root = Command(commands=(commit,))
        self.assertIs(root.children["commit"], commit)
        self.assertIs(root.children["ci"], commit)

    def testSubcommandNeedsName(self):
        with self.assertRaises(TypeError):
            Command(commands=(Command(),))

    def testSiblingNamesMustBeUnique(self):
        with self.assertRaises(ValueError):
            Command(commands=(Command(name="a", dest="x"), Command(name="a", dest="y")))

    def testAliasClashWithSiblingName(self):
        with self.assertRaises(ValueError):
            Command(commands=(Command(name="add"), Command(name="append", aliases=("add",))))

    def testSubcommandDestClashRejected(self):
        with self.assertRaises(ValueError):
            Command(Option("--commit"), commands=(Command(name="commit"),))

    def testAttachedOnlyOnce(self):
        sub = Command(name="sub")
        Command(commands=(sub,))
        with self.assertRaises(ValueError):
            Command(commands=(sub,))

    def testNameClashWithParentRejected(self):
        with self.assertRaises(ValueError):
            Command(Flag("-v"), commands=(Command(Flag("-v", dest="other"), name="sub"),))

    def testNameClashWithGrandparentRejected(self):
        middle = Command(name="middle", commands=(Command(Flag("--debug"), name="leaf"),))
        with self.assertRaises(ValueError):
            Command(Flag("--debug"), commands=(middle,))

    def testSiblingsMayReuseNames(self):
        root = Command(commands=(
            Command(Flag("-f", "--force"), name="add"),
            Command(Flag("-f", "--force"), name="remove"),
        ))
        self.assertEqual(len(root.commands), 2)

    def testFindFallsBackToParent(self):
        sub = Command(Option("-m"), name="commit")
        root = Command(Flag("-v", "--verbose"), commands=(sub,))
        owner, entry = sub.find("-", "v")
        self.assertIs(owner, root)
        self.assertEqual(entry.label, "-v, --verbose")
        owner, entry = sub.find("-", "m")
        self.assertIs(owner, sub)
        self.assertIsNone(root.find("-", "m"))

    def testFindLongNamesInGroups(self):
        root = Command(Group(Option("--host"), namespace="server"))
        self.assertIsNotNone(root.find("--", "server.host"))
        self.assertIsNone(root.find("--", "host"))

    def testCompleteNearestFirst(self):
        sub = Command(Flag("--verify"), name="sub")
        root = Command(Flag("--verbose"), commands=(sub,))
        self.assertEqual([entry.long for _, entry in sub.complete("ver")], ["verify", "verbose"])
        self.assertEqual(sub.complete("x"), [])

    def testSpellings(self):
        sub = Command(Option("-m", "--message"), name="sub")
        Command(Flag("-v"), commands=(sub,))
        self.assertEqual(sub.spellings(), ["-m", "--message", "-v"])


if __name__ == "__main__":
    unittest.main()
