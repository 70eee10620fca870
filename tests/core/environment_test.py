import unittest

from numlisp.core.environment import Environment
from numlisp.lang.error import UnboundSymbolError


class EnvironmentTestCase(unittest.TestCase):

    def test_define_lookup(self):
        env = Environment()
        env.define("x", 1.0)
        self.assertEqual(1.0, env.lookup("x"))

        env.define("x", 2.0)  # overwrites in place
        self.assertEqual(2.0, env.lookup("x"))

    def test_unbound(self):
        env = Environment({"x": 1.0}).child_frame()
        with self.assertRaises(UnboundSymbolError) as ctx:
            env.lookup("y")
        self.assertEqual("y", ctx.exception.name)

    def test_chain(self):
        root = Environment({"a": 1.0})
        middle = root.child_frame({"b": 2.0})
        leaf = middle.child_frame()

        self.assertEqual(1.0, leaf.lookup("a"))
        self.assertEqual(2.0, leaf.lookup("b"))
        self.assertIs(root, middle.parent)
        self.assertIs(middle, leaf.parent)
        self.assertIn("a", leaf)
        self.assertNotIn("b", root)

    def test_shadowing(self):
        parent = Environment({"x": 1.0})
        child = parent.child_frame()
        child.define("x", 10.0)

        self.assertEqual(10.0, child.lookup("x"))
        self.assertEqual(1.0, parent.lookup("x"))

        del child
        self.assertEqual(1.0, parent.lookup("x"))

    def test_shared_frame(self):
        parent = Environment()
        child = parent.child_frame()
        self.assertNotIn("late", child)

        parent.define("late", 3.0)  # later writes to a shared frame are visible downstream
        self.assertEqual(3.0, child.lookup("late"))

    def test_bindings_copied(self):
        bindings = {"x": 1.0}
        env = Environment(bindings)
        env.define("y", 2.0)
        self.assertEqual({"x": 1.0}, bindings)


if __name__ == '__main__':
    unittest.main()
