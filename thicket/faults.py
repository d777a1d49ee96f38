"""
thicket faults (errors, warnings and signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep copy consistent and searches predictable.
- CommandException / CommandWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, actionable way.
- HelpRequested: the non-error signal raised when the synthesized --help flag is
  found; it shares the non-execution path of faults but exits successfully.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

UX goals
- Position-first messages: flag faults include the ordinal position of the
  offending token (“at second position”).
- Soft but technical language: short titles, one-sentence bodies, one clear hint.

Integration
- The resolver, spec parser and binder raise faults with code/title/hint and a
  structured payload in their options.
- The tool (thicket.commands) catches them, merges its runtime options through
  copy.replace() and calls trigger(): outside shell mode the exception is
  re-raised, in shell mode it is rendered via rich and the process exits.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (111xx)
      • UNRESOLVED_COMMAND
    - flags (1111x)
      • UNKNOWN_FLAG, MISSING_FLAG_VALUE, MISSING_REQUIRED_ARGS
    - declarations (112xx)
      • MALFORMED_SPEC, MALFORMED_UNIT
    - warnings (12xxx)
      • DUPLICATED_FLAG

    rationale
    - codes are discoverable in logs and docs and normalized to a string via
      normalize() so hosts can remap them (e.g., to shorter labels).
    """
    # --- routing errors (11xxx) ---
    UNRESOLVED_COMMAND          = 11101

    # --- flag errors (11xxx) ---
    UNKNOWN_FLAG                = 11111
    MISSING_FLAG_VALUE          = 11112
    MISSING_REQUIRED_ARGS       = 11113

    # --- declaration errors (11xxx) ---
    MALFORMED_SPEC              = 11201
    MALFORMED_UNIT              = 11202

    # --- warnings (12xxx) ---
    DUPLICATED_FLAG             = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, kind):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the message, then " → hint" when a hint is present.
    - fancy: the same content inside a left-titled panel.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", options.get("prog", "thicket")), styler("prog-name"))

    try:
        code = options["code"].normalize()
    except KeyError:
        code = "-"

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code, styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(f"{kind}-title")),
        " ]"
    )
    renders = [text(fault.message, styler(f"{kind}-message"))]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left", expand=False)

    return Group(header, *renders)


class CommandException(Exception):
    """
    Base class for every user-facing error.

    The message is a one-sentence, lowercased description; everything else
    (code, title, hint, structured payload, runtime flags) lives in the
    read-only `options` mapping.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #F5F5F5",
            "code": "bold #36C5F0",  # same sky-blue as routes in help
            "error-title": "bold #EF4444",
            "error-message": "#D4D4D8",
            "hint-arrow": "#22C55E dim",
            "hint": "italic #22C55E",  # same green as flag names
        }, "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnresolvedCommandError(CommandException): ...
class UnknownFlagError(CommandException): ...
class MissingFlagValueError(CommandException): ...
class MissingRequiredArgsError(CommandException): ...
class MalformedSpecError(CommandException): ...
class MalformedUnitError(CommandException): ...


class CommandWarning(ABC, Warning):
    """
    Base class for non-fatal notices; rendered in shell mode, otherwise emitted
    through the warnings module.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #F5F5F5",
            "code": "bold #FFD600",
            "warning-title": "bold #FFD600",
            "warning-message": "#D4D4D8",
            "hint-arrow": "#22C55E dim",
            "hint": "italic #22C55E",
        }, "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicatedFlagWarning(CommandWarning): ...


class HelpRequested(Exception):
    """
    signal raised by the binder when the synthesized --help flag is present.

    this is not an error: the tool renders the help document instead of
    executing the entry routine and exits successfully. `binding` holds the
    values bound before --help was reached.
    """

    def __init__(self, binding=Unset, /):
        super().__init__("help requested")
        self.binding = binding


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via rich console; otherwise exceptions are
      raised and warnings are emitted through the warnings module.

    typical options
    - shell, fancy, colorful, prog, and any context the reporter may want to
      show (input/index/route/...).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when not
    found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be an fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "UnresolvedCommandError",
    "UnknownFlagError",
    "MissingFlagValueError",
    "MissingRequiredArgsError",
    "MalformedSpecError",
    "MalformedUnitError",
    "CommandWarning",
    "DuplicatedFlagWarning",
    "HelpRequested",
    "FaultCode",
    "trigger",
    "getdoc",
)
