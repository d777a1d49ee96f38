"""
Presence marker bound for boolean flags.

This module exposes a single instance: `present`. The binder records it for
every boolean flag found on the command line, so entry routines can test
presence either by membership (`"verbose" in context.args`) or by identity
(`context.args.get("verbose") is present`).

Notes
- `present` is a cached singleton (per-process) and is truthy.
- It pretty-prints as "(present)" and renders with colors in Rich.
"""
from rich.text import Text

present = type("present-type", (), {
    "__module__": None,
    "__slots__": (),
    "__rich__": lambda self: Text.assemble(("(", "green"), ("present", "bold green"), (")", "green")),
    "__repr__": lambda self: "(present)",
    "__bool__": lambda self: True,
    "__doc__": "presence marker bound for boolean flags",
    # Cache the singleton creation so repeated instantiation returns the same object.
    "__new__": __import__("functools").cache(lambda cls: super(type, cls).__new__(cls)),
})()


__all__ = ("present",)
