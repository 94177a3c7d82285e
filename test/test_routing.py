"""
Routing and path tests.

Scope
- route(): group descent, command names and shortcuts, global shortcuts,
  default-command fallback with inherited defaults.
- GroupPath / CommandPath: persistence, joined names, option accumulation.
- CommandGroup child validation.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from helmsman import CLI, Command, CommandGroup, CommandPath, Flag, GroupPath, route


class TestRoute(TestCase):

    def setUp(self):
        self.migrate = Command("migrate", "[<target>]", shortcut="m")
        self.status = Command("status")
        self.inner = CommandGroup("inner", self.status, default=self.status)
        self.db = CommandGroup("db", self.migrate, self.inner, shortcut="d")
        self.app = CLI("app", self.db)

    def testCommandByShortcutInsideGroup(self):
        resolved = route(self.app, ["db", "m", "up"])
        self.assertIs(resolved.command, self.migrate)
        self.assertEqual(resolved.residual, ["up"])
        self.assertEqual(resolved.path.names, ("app", "db"))
        self.assertFalse(resolved.fallback)

    def testUnknownTokenFallsBackToHelpWithPartialPath(self):
        resolved = route(self.app, ["db", "unknown"])
        self.assertIs(resolved.command, self.app.help_command)
        self.assertEqual(resolved.path.joined(), "app db")
        self.assertEqual(resolved.residual, ["unknown"])
        self.assertTrue(resolved.fallback)

    def testNoTokensFallBack(self):
        resolved = route(self.app, [])
        self.assertIs(resolved.command, self.app.help_command)
        self.assertEqual(resolved.path.names, ("app",))
        self.assertEqual(resolved.residual, [])
        self.assertTrue(resolved.fallback)

    def testGroupShortcutDescends(self):
        self.assertIs(route(self.app, ["d", "migrate"]).command, self.migrate)

    def testGlobalShortcutsAtAnyDepth(self):
        resolved = route(self.app, ["db", "-h", "migrate"])
        self.assertIs(resolved.command, self.app.help_command)
        self.assertEqual(resolved.path.names, ("app", "db"))
        self.assertEqual(resolved.residual, ["migrate"])
        self.assertFalse(resolved.fallback)
        self.assertIs(route(self.app, ["db", "inner", "-v"]).command, self.app.version_command)

    def testBuiltinCommandsByName(self):
        self.assertIs(route(self.app, ["help"]).command, self.app.help_command)
        self.assertIs(route(self.app, ["version"]).command, self.app.version_command)

    def testBuiltinNamesBelowRoot(self):
        resolved = route(self.app, ["db", "help", "migrate"])
        self.assertIs(resolved.command, self.app.help_command)
        self.assertEqual(resolved.path.names, ("app", "db"))
        self.assertEqual(resolved.residual, ["migrate"])
        self.assertFalse(resolved.fallback)
        self.assertIs(route(self.app, ["db", "inner", "version"]).command, self.app.version_command)

    def testChildShadowsBuiltinName(self):
        own = Command("help")
        app = CLI("app", CommandGroup("db", own))
        self.assertIs(route(app, ["db", "help"]).command, own)

    def testNearestDefaultWins(self):
        resolved = route(self.app, ["db", "inner", "anything"])
        self.assertIs(resolved.command, self.status)
        self.assertTrue(resolved.fallback)
        self.assertEqual(resolved.residual, ["anything"])

    def testOptionTokenStopsRouting(self):
        resolved = route(self.app, ["db", "--verbose", "migrate"])
        self.assertIs(resolved.command, self.app.help_command)
        self.assertEqual(resolved.residual, ["--verbose", "migrate"])

    def testRootWithoutDefault(self):
        resolved = route(CommandGroup("tool", Command("run")), ["walk"])
        self.assertIsNone(resolved.command)
        self.assertTrue(resolved.fallback)

    def testResumeFromPath(self):
        resolved = route(GroupPath(self.app).appending(self.db), ["migrate", "x"])
        self.assertIs(resolved.command, self.migrate)
        self.assertEqual(resolved.residual, ["x"])

    def testDecisionsAreTraced(self):
        with self.assertLogs("helmsman.routing", level="DEBUG") as logs:
            route(self.app, ["db", "unknown"])
        self.assertIn("falling back to help", logs.output[-1])

    def testRoutingIsRepeatable(self):
        first = route(self.app, ["db", "m"])
        second = route(self.app, ["db", "m"])
        self.assertEqual(first.path, second.path)
        self.assertIsNot(first.path, second.path)


class TestPaths(TestCase):

    def setUp(self):
        self.verbose = Flag("--verbose")
        self.dry = Flag("--dry-run")
        self.force = Flag("-f", "--force")
        self.migrate = Command("migrate", options=[self.force])
        self.db = CommandGroup("db", self.migrate, shared=[self.dry])
        self.app = CLI("app", self.db, shared=[self.verbose], help_flag=False)

    def testAppendingReturnsNewPath(self):
        root = GroupPath(self.app)
        deeper = root.appending(self.db)
        self.assertEqual(root.names, ("app",))
        self.assertEqual(deeper.names, ("app", "db"))
        self.assertIs(deeper.parent, root)

    def testCommandPath(self):
        path = GroupPath(self.app).appending(self.db).appending(self.migrate)
        self.assertIsInstance(path, CommandPath)
        self.assertEqual(path.joined(), "app db migrate")
        self.assertIs(path.command, self.migrate)
        self.assertIs(path.root, self.app)
        self.assertIs(path.group, self.db)

    def testOptionsOwnThenSharedRootFirst(self):
        path = GroupPath(self.app).appending(self.db).appending(self.migrate)
        self.assertEqual(path.options, (self.force, self.verbose, self.dry))

    def testCannotDescendBelowCommand(self):
        path = GroupPath(self.app).appending(self.db).appending(self.migrate)
        with self.assertRaises(TypeError):
            path.appending(self.db)

    def testNodesMustBeGroups(self):
        with self.assertRaises(TypeError):
            GroupPath(self.migrate)


class TestCommandGroup(TestCase):

    def testDuplicateChildNamesRejected(self):
        with self.assertRaises(ValueError):
            CommandGroup("db", Command("migrate"), Command("migrate"))

    def testShortcutClashRejected(self):
        with self.assertRaises(ValueError):
            CommandGroup("db", Command("migrate", shortcut="m"), Command("m"))

    def testChildrenMustBeCommands(self):
        with self.assertRaises(TypeError):
            CommandGroup("db", "migrate")

    def testCommandDecorator(self):
        db = CommandGroup("db")

        @db.command("<target>", shortcut="m")
        def migrate_up(arguments, options):
            """Apply migrations."""

        self.assertIs(db.find("migrate-up"), migrate_up)
        self.assertIs(db.find("m"), migrate_up)
        self.assertEqual(migrate_up.descr, "Apply migrations.")
        self.assertEqual(db.commands, (migrate_up,))

    def testInvalidNamesRejected(self):
        for name in ("-db", "1db", "db_x", ""):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    CommandGroup(name)

    def testDefaultMustBeCommand(self):
        with self.assertRaises(TypeError):
            CommandGroup("db", default="help")


if __name__ == "__main__":
    unittest.main()
