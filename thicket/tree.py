"""
thicket command tree: discovery and resolution.

What this module provides
- Unit: a node of the command tree, either a Group (a directory holding more
  units) or a Leaf (an executable Python script).
- scan(root): walk the command directory once and build the in-memory tree.
- resolve(tree, tokens): find the deepest unit named by the leading tokens and
  return it with the tokens left for argument binding.

Declaration contract
- A leaf is a "<name>.py" file. Its source is evaluated (never imported) and may
  define:
    DESCRIPTION = "one-line summary"
    ARGUMENTS = ["--env:target environment", "--force:[o,b]skip checks"]
    HELP = ("Deploy", "long description ...")
    def main(context): ...
  Only `main` is mandatory.
- A group is a directory. Its own DESCRIPTION and HELP live in the hidden
  ".group.py" file inside it.
- Names starting with "." are hidden: never listed, never resolvable.

Declarations are evaluated lazily and at most once per scan, so listing a group
costs one evaluation per visible child and resolving a leaf costs one.
"""
import difflib
import functools
import os
from collections.abc import Callable, Sequence
from pathlib import Path

from .faults import *
from .utils import Introspectable, ordinal

HIDDEN = "."
"""reserved prefix for entries excluded from listings and resolution."""

METADATA = ".group.py"
"""hidden file holding a group's own declaration."""

SUFFIX = ".py"
"""suffix of leaf scripts; the command name is the file stem."""


def _hidden(name):
    return name.startswith(HIDDEN) or name == "__pycache__"


def _malformed(path, reason, hint):
    return MalformedUnitError(
        "%s in %r" % (reason, str(path)),
        title="malformed command",
        code=FaultCode.MALFORMED_UNIT,
        path=path,
        reason=reason,
        hint=hint,
        docs=getdoc(FaultCode.MALFORMED_UNIT),
    )


def _evaluate(path):
    """
    evaluate a declaration file into a fresh namespace.

    the module-level code runs, the entry routine is never called. any failure
    (including a top-level sys.exit) is reported as a malformed unit.
    """
    namespace = {
        "__name__": "thicket.units." + path.stem.lstrip(HIDDEN),
        "__file__": str(path),
    }
    try:
        code = compile(path.read_text(encoding="utf-8"), str(path), "exec")
        exec(code, namespace)
    except (Exception, SystemExit) as error:
        raise _malformed(
            path,
            "%s while reading declaration (%s)" % (type(error).__name__, error),
            "fix the script so that it can be evaluated without side effects"
        ) from error
    return namespace


class Unit(metaclass=Introspectable):
    """
    Common shape of command tree nodes.

    Properties
    - path: filesystem location (directory or script).
    - name: command name (directory name or script stem).
    - kind: "group" or "leaf".
    - parent: enclosing Group, None for the root.
    - route: names from the root down to this unit (the root itself excluded).
    - summary, title, body: declared description and help tuple.
    """

    __introspectable__ = (
        "path",
        "name",
    )
    __displayable__ = (
        "path",
        "name",
        "kind",
    )
    kind = "unit"

    def __init__(self, path, /, parent=None):
        self._path = Path(path)
        self._name = self._path.stem if self._path.suffix == SUFFIX else self._path.name
        self._parent = parent

    @property
    def parent(self):
        return self._parent

    @property
    def route(self):
        route = []
        unit = self
        while unit.parent is not None:
            route.append(unit.name)
            unit = unit.parent
        return tuple(reversed(route))

    def _source(self):
        """path of the file holding this unit's declaration, or None."""
        raise NotImplementedError

    @functools.cached_property
    def _declaration(self):
        if (source := self._source()) is None:
            namespace = {}
        else:
            namespace = _evaluate(source)

        if not isinstance(summary := namespace.get("DESCRIPTION", ""), str):
            raise _malformed(source, "DESCRIPTION must be a string", "set DESCRIPTION = \"one-line summary\"")

        pair = namespace.get("HELP", (self._name, ""))
        if (
            isinstance(pair, str) or
            not isinstance(pair, Sequence) or
            len(pair) != 2 or
            not all(isinstance(part, str) for part in pair)
        ):
            raise _malformed(source, "HELP must be a (title, description) pair of strings", "set HELP = (\"Title\", \"long description\")")

        return namespace | {"DESCRIPTION": summary, "HELP": tuple(pair)}

    @property
    def summary(self):
        return self._declaration["DESCRIPTION"]

    @property
    def title(self):
        return self._declaration["HELP"][0]

    @property
    def body(self):
        return self._declaration["HELP"][1]


class Group(Unit):
    """
    Directory-backed namespace of commands.

    Properties
    - children: visible child units by name, in name order.
    """

    __introspectable__ = (
        "path",
        "name",
        "children",
    )
    kind = "group"

    def __init__(self, path, /, parent=None):
        super().__init__(path, parent)
        self._children = {}

    def _source(self):
        if (metadata := self._path / METADATA).is_file():
            return metadata
        return None


class Leaf(Unit):
    """
    Executable script.

    Properties
    - arguments: raw argument declarations (parsed by thicket.specs).
    - entry: the script's `main(context)` routine.
    """
    kind = "leaf"

    def _source(self):
        return self._path

    @property
    def arguments(self):
        return self._declaration.get("ARGUMENTS", ())

    @property
    def entry(self):
        if not isinstance(entry := self._declaration.get("main"), Callable):
            raise _malformed(self._path, "missing entry routine 'main'", "define 'def main(context): ...' in the script")
        return entry


def _walk(group, seen):
    for entry in sorted(group.path.iterdir(), key=lambda entry: entry.name):
        if _hidden(entry.name):
            continue
        if entry.is_dir():
            if (real := os.path.realpath(entry)) in seen:
                continue
            child = Group(entry, group)
            _walk(child, seen | {real})
        elif entry.is_file() and entry.suffix == SUFFIX:
            child = Leaf(entry, group)
        else:
            continue
        # a directory shadows a script of the same name
        group._children.setdefault(child.name, child)


def scan(root, /):
    """
    Build the command tree rooted at `root`.

    Returns
    - Group for the root directory, with every visible descendant attached.

    Raises
    - MalformedUnitError: when root is not a directory.
    """
    if not (root := Path(root)).is_dir():
        raise _malformed(root, "command tree root is not a directory", "point THICKET_ROOT at the directory holding your scripts")
    tree = Group(root)
    _walk(tree, {os.path.realpath(root)})
    return tree


def resolve(tree, tokens, /):
    """
    Resolve the leading tokens to a unit of the tree.

    Behavior
    - consume tokens while each names a child group;
    - a token naming a leaf is consumed and ends resolution;
    - a token starting with "-" ends resolution without being consumed;
    - any other token naming no child fails with UnresolvedCommandError.

    Returns
    - (unit, remaining): the resolved Group or Leaf and the unconsumed tokens.
    """
    tokens = tuple(tokens)
    unit = tree
    index = 0

    while index < len(tokens) and isinstance(unit, Group):
        if (token := tokens[index]).startswith("-"):
            break
        try:
            unit = unit.children[token]
        except KeyError:
            suggestions = difflib.get_close_matches(token, unit.children.keys(), 5)
            noun = "subcommand" if unit.route else "command"
            route = " ".join(unit.route)
            try:
                hint = "did you mean %r?" % " ".join((*unit.route, suggestions[0]))
            except IndexError:
                hint = "run it without arguments to list available %ss" % noun
            raise UnresolvedCommandError(
                "unknown %s %r at %s position%s" % (noun, token, ordinal(index + 1), " in %r" % route if route else ""),
                title="unknown %s" % noun,
                code=FaultCode.UNRESOLVED_COMMAND,
                input=token,
                index=index + 1,
                route=unit.route,
                group=unit,
                children=tuple(unit.children.keys()),
                suggestions=suggestions,
                hint=hint,
                docs=getdoc(FaultCode.UNRESOLVED_COMMAND),
            ) from None
        index += 1

    return unit, tokens[index:]


__all__ = (
    "Unit",
    "Group",
    "Leaf",
    "HIDDEN",
    "METADATA",
    "scan",
    "resolve",
)
