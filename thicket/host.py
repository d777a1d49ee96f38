"""
thicket execution host.

What this module provides
- Context: the invocation-scoped object handed to a script's `main(context)`.
- isolated(root): scope guard restoring the process environment and working
  directory after the entry routine, whatever it did.
- execute(leaf, binding, root): run a leaf's entry routine inside that scope and
  return its exit code.

Isolation guarantees
- A `sys.exit()` (or `raise SystemExit`) inside the entry routine ends the
  routine only; it becomes the invocation's exit code.
- Changes to `os.environ` or the working directory made by the routine are
  rolled back when it returns.
- The routine only ever receives a complete, validated Binding.
"""
import os
import subprocess
from contextlib import contextmanager
from pathlib import Path
from types import MappingProxyType, SimpleNamespace

from rich.console import Console

from . import logs
from .utils import Introspectable

ROOT = "THICKET_ROOT"
"""environment variable exporting the command tree root to scripts."""


class Context(metaclass=Introspectable):
    """
    Everything a script may use during one invocation.

    Properties
    - root: command tree root (read-only Path), for sibling resources.
    - unit: the resolved Leaf.
    - args: the Binding (flag name → value string or `present`).
    - forwarded: tokens given after "--", verbatim.
    - environ: private copy of the environment, with THICKET_ROOT set.
    - cwd: working directory the routine starts in.
    - console: rich console on stderr.
    - log: the colored log helpers (info, success, warn, error, debug).
    """

    __introspectable__ = (
        "root",
        "unit",
        "forwarded",
        "cwd",
    )
    __displayable__ = (
        "root",
        "unit",
        "args",
        "forwarded",
        "cwd",
    )

    def __init__(self, root, unit, args, /, environ=None, cwd=None):
        self._root = Path(root).resolve()
        self._unit = unit
        self._args = args
        self._forwarded = tuple(args.forwarded)
        self._environ = dict(os.environ if environ is None else environ) | {ROOT: str(self._root)}
        self._cwd = Path(os.getcwd() if cwd is None else cwd)
        self.console = Console(stderr=True)
        self.log = SimpleNamespace(
            info=logs.info,
            success=logs.success,
            warn=logs.warn,
            error=logs.error,
            debug=logs.debug,
        )

    @property
    def args(self):
        return self._args

    @property
    def environ(self):
        return MappingProxyType(self._environ)

    def run(self, *command, **options):
        """
        Run an external command with this context's environment and working
        directory.

        Keyword options are forwarded to subprocess.run(); `check` defaults to
        False so the caller inspects `returncode` itself.

        Returns
        - subprocess.CompletedProcess
        """
        if not command:
            raise TypeError("run() requires at least one argument")
        options.setdefault("check", False)
        options.setdefault("cwd", self._cwd)
        options.setdefault("env", self._environ)
        return subprocess.run([str(part) for part in command], **options)


@contextmanager
def isolated(root, /):
    """
    Confine environment and working-directory mutations to the scope.

    On entry THICKET_ROOT is exported; on exit os.environ and the working
    directory are restored to their state before entry.
    """
    environ = dict(os.environ)
    directory = os.getcwd()
    os.environ[ROOT] = str(Path(root).resolve())
    try:
        yield
    finally:
        os.chdir(directory)
        os.environ.clear()
        os.environ.update(environ)


def _exit_code(code):
    """translate a SystemExit payload the way the interpreter does."""
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    logs.console.print(str(code), highlight=False)
    return 1


def execute(leaf, binding, root, /):
    """
    Run `leaf`'s entry routine with a fresh Context.

    Returns
    - int exit code: the routine's int return value, the code of a SystemExit
      it raised, or 0.
    """
    entry = leaf.entry
    context = Context(root, leaf, binding)

    with isolated(root):
        try:
            result = entry(context)
        except SystemExit as exit:
            return _exit_code(exit.code)

    return result if isinstance(result, int) and not isinstance(result, bool) else 0


__all__ = (
    "Context",
    "ROOT",
    "isolated",
    "execute",
)
