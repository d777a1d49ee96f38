"""
thicket tool: the dispatcher that drives one invocation end to end.

Pipeline
    tokens ─► resolve (thicket.tree) ─► parse specs (thicket.specs)
           ─► bind (thicket.bindings) ─► execute (thicket.host)

- A group result prints the group listing to stdout and exits 0; remaining
  tokens are ignored.
- `--help` on a leaf prints its help to stdout and exits 0, even when required
  flags are missing.
- Anything else runs the leaf's entry routine inside the isolated host and
  returns its exit code.

Fault surfacing
- shell=False: faults propagate to the caller unchanged (library and tests).
- shell=True: the fault is rendered on stderr after the context that helps fix
  it (listing of the deepest group, or the leaf's full help), then the process
  exits with status 1.
- Duplicated-flag warnings are captured while binding and rendered on stderr in
  shell mode, otherwise re-emitted through the warnings module.
"""
import copy
import shlex
import sys
from collections.abc import Iterable
from pathlib import Path
from warnings import catch_warnings, simplefilter, warn

from rich.console import Console

from .bindings import bind
from .faults import *
from .help import HelpDoc, render_help, render_listing
from .host import execute
from .specs import parse_all
from .tree import Group, resolve, scan
from .utils import Introspectable, Unset, coalesce

stdout = Console(highlight=False)
stderr = Console(stderr=True, highlight=False)


class Tool(metaclass=Introspectable):
    """
    A command tree bound to its runtime flags.

    Properties
    - root: directory holding the command tree.
    - name: program name shown in usage lines and fault headers.
    - shell: when True, faults are rendered and terminate the process.
    - fancy: wrap help, listings and faults in rich panels.
    - colorful: style output with the palette (overridable via __styles__).

    Invocation
    - invoke(tool, prompt) or tool.__invoke__(prompt); returns the exit code.
    """

    __introspectable__ = (
        "root",
        "name",
        "shell",
        "fancy",
        "colorful",
    )

    def __init__(self, root, /, name=Unset, *, shell=False, fancy=False, colorful=False):
        if not isinstance(root, str | Path):
            raise TypeError(f"{type(self).__typename__} 'root' must be a string or a path")
        if not isinstance(name := coalesce(name, "thicket"), str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not name.strip():
            raise ValueError(f"{type(self).__typename__} 'name' must not be empty")
        for option, value in (("shell", shell), ("fancy", fancy), ("colorful", colorful)):
            if not isinstance(value, bool):
                raise TypeError(f"{type(self).__typename__} {option!r} must be a boolean")

        self._root = Path(root)
        self._name = name
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful

    def _context(self, fault):
        """
        renderable printed before a fault in shell mode, or None.

        - unknown command: listing of the deepest group reached.
        - any binding failure: the leaf's full help.
        - malformed declarations: nothing, no help can be built. This also
          holds when the deepest group's own metadata cannot be read.
        """
        options = fault.options
        layout = {"prog": self._name, "colorful": self._colorful}
        try:
            match fault:
                case UnresolvedCommandError() if "group" in options:
                    return render_listing(options["group"], **layout, fancy=self._fancy)
                case UnknownFlagError() | MissingFlagValueError() | MissingRequiredArgsError() if "unit" in options:
                    return render_help(HelpDoc.of(options["unit"], options["specs"]), **layout, fancy=self._fancy)
        except MalformedUnitError:
            return None
        return None

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this tool's runtime flags merged into its options.

        Outside shell mode exceptions are raised and warnings emitted; in shell
        mode both are rendered on stderr and exceptions end the process.
        """
        if (
            not hasattr(fault, "__trigger__") or
            not callable(fault.__trigger__) or
            not hasattr(fault, "__replace__") or
            not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        fault = copy.replace(fault, **options, prog=self._name, shell=self._shell, fancy=self._fancy, colorful=self._colorful)
        if self._shell and isinstance(fault, CommandException) and (context := self._context(fault)) is not None:
            stderr.print(context)
        trigger(fault)

    def _bind(self, leaf, specs, tokens):
        """bind tokens, surfacing warnings raised meanwhile once binding ends."""
        captured = []
        try:
            with catch_warnings(record=True) as captured:
                simplefilter("always")
                return bind(specs, tokens)
        except (UnknownFlagError, MissingFlagValueError, MissingRequiredArgsError) as fault:
            self.trigger(fault, unit=leaf, specs=specs)
        finally:
            for warning in captured:
                if isinstance(warning.message, CommandWarning):
                    self.trigger(warning.message)
                else:
                    warn(warning.message, warning.category, stacklevel=2)

    def _dispatch(self, tokens):
        try:
            unit, remaining = resolve(scan(self._root), tokens)
        except (UnresolvedCommandError, MalformedUnitError) as fault:
            return self.trigger(fault)

        if isinstance(unit, Group):
            try:
                listing = render_listing(unit, prog=self._name, colorful=self._colorful, fancy=self._fancy)
                stdout.print(listing)
            except MalformedUnitError as fault:
                return self.trigger(fault)
            return 0

        try:
            unit.entry  # raises when main is missing
            specs = parse_all(unit.arguments)
        except (MalformedUnitError, MalformedSpecError) as fault:
            return self.trigger(fault)

        try:
            binding = self._bind(unit, specs, remaining)
        except HelpRequested:
            stdout.print(render_help(HelpDoc.of(unit, specs), prog=self._name, colorful=self._colorful, fancy=self._fancy))
            return 0

        return execute(unit, binding, self._root)

    def __invoke__(self, prompt=Unset):
        """
        Run one invocation and return its exit code.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used as is.

        Raises
        - TypeError: when prompt is not Unset/str/Iterable[str], or when an
          iterable contains a non-string element.
        - CommandException subclasses: outside shell mode, any fault.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        return self._dispatch(tokens)


def invoke(tool, prompt=Unset, /):
    """
    Convenience runner for tools.

    Parameters
    - tool: an instance providing __invoke__(prompt).
    - prompt: Unset (sys.argv[1:]), a shell-like string or an iterable of str.

    Returns
    - int exit code of the invocation.
    """
    if hasattr(tool, "__invoke__") and callable(tool.__invoke__):
        return tool.__invoke__(prompt)
    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Tool",
    "invoke",
)
