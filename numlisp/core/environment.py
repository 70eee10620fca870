"""Lexical environments: a chain of frames mapping symbol names to values.

Frames are shared by reference, never copied. A Closure holds the frame it was created in, so later definitions made in
that frame (or its ancestors) are visible to it, while definitions made in a child frame never leak upwards.
"""

from numlisp.lang.error import UnboundSymbolError


class Environment:
    """One frame of bindings plus an optional parent frame."""

    def __init__(self, bindings=None, parent=None):
        self.bindings = dict(bindings) if bindings else {}
        self.parent = parent

    def define(self, name, value):
        """Binds name in this frame only, shadowing any binding of name in an ancestor."""
        self.bindings[name] = value

    def lookup(self, name):
        """Returns the value bound to name in the nearest frame that binds it."""
        env = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]
            env = env.parent
        raise UnboundSymbolError(name)

    def child_frame(self, bindings=None):
        """Returns a new, empty (or pre-populated) frame whose parent is self. Used for call activation records."""
        return Environment(bindings, parent=self)

    def __contains__(self, name):
        try:
            self.lookup(name)
        except UnboundSymbolError:
            return False
        return True

    def __repr__(self):
        depth, env = 0, self.parent
        while env is not None:
            depth, env = depth + 1, env.parent
        return f"Environment({sorted(self.bindings)}, depth={depth})"
