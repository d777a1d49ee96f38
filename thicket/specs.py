r"""
thicket argument specifications.

Overview
- ArgSpec: one declared flag of a leaf script. Every flag is named (there are
  no positionals), either required or optional, and either value-bearing or
  boolean (presence only).
- parse(spec): turn one declaration string into an ArgSpec.
- parse_all(specs): turn a leaf's ARGUMENTS into the ordered ArgSpec set,
  rejecting duplicates and appending the synthesized --help flag.

Declaration grammar
    --name:description
    --name:[options]description

- name: "--" followed by a letter and then letters, digits or underscores.
- options: comma separated, "o" (optional) and/or "b" (boolean).
- description: everything after the option block (or the colon), verbatim.

Examples
    >>> parse("--env:target environment")
    arg-spec(name='env', optional=False, boolean=False, descr='target environment')
    >>> parse("--dry_run:[o,b]print actions only")
    arg-spec(name='dry_run', optional=True, boolean=True, descr='print actions only')

Notes
- A description that itself starts with "[" cannot be told apart from an
  option block; a leading "[...]" is always read as options.
"""
import re
from collections.abc import Iterable

from .faults import FaultCode, MalformedSpecError, getdoc
from .utils import Introspectable

PREFIX = "--"
"""two-character prefix shared by every flag token."""

OPTIONS = {"o": "optional", "b": "boolean"}
"""option letters accepted inside the bracket block and the field they set."""


class ArgSpec(metaclass=Introspectable):
    """
    One declared flag.

    Properties
    - name: identifier without the "--" prefix (unique within a leaf).
    - optional: when False, binding fails if the flag is absent.
    - boolean: when True, the flag is satisfied by presence alone and never
      takes a value.
    - descr: description shown in help, verbatim.
    - flag: the name with its prefix, as typed on the command line.
    """

    __introspectable__ = (
        "name",
        "optional",
        "boolean",
        "descr",
    )

    def __init__(self, name, /, optional=False, boolean=False, descr=""):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not re.fullmatch(r"[A-Za-z][A-Za-z0-9_]*", name):
            raise ValueError(f"{type(self).__typename__} 'name' must be an identifier without prefix")
        if not isinstance(descr, str):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")

        self._name = name
        self._optional = bool(optional)
        self._boolean = bool(boolean)
        self._descr = descr

    @property
    def flag(self):
        return PREFIX + self._name

    @property
    def required(self):
        """
        True when the flag must appear on the command line.

        Boolean flags are satisfied by presence, so only required value flags
        are ever reported as missing.
        """
        return not self._optional and not self._boolean

    def __eq__(self, other):
        if not isinstance(other, ArgSpec):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    def __hash__(self):
        return hash(tuple(self.__rich_repr__()))


HELP = ArgSpec("help", optional=True, boolean=True, descr="show this help message and exit")
"""the synthesized flag appended to every leaf's declared set."""


def _malformed(spec, reason, hint):
    return MalformedSpecError(
        "%s in argument declaration %r" % (reason, spec),
        title="malformed declaration",
        code=FaultCode.MALFORMED_SPEC,
        spec=spec,
        reason=reason,
        hint=hint,
        docs=getdoc(FaultCode.MALFORMED_SPEC),
    )


def _split(spec):
    """
    split a declaration at its first unescaped colon.

    returns (head, tail) or None when no unescaped colon exists.
    """
    match = re.search(r"(?<!\\):", spec)
    if not match:
        return None
    return spec[:match.start()], spec[match.end():]


def parse(spec, /):
    """
    Parse one declaration string into an ArgSpec.

    Raises
    - MalformedSpecError: when the name is malformed, the colon is missing, the
      option block is unterminated, or an unknown option letter is used.
    """
    if not isinstance(spec, str):
        raise _malformed(spec, "non-string value", "declare every argument as a string, e.g. '--name:description'")

    if (parts := _split(spec)) is None:
        raise _malformed(spec, "missing ':' separator", "separate the flag from its description, e.g. '--name:description'")
    name, rest = parts

    if not re.fullmatch(r"--[A-Za-z][A-Za-z0-9_]*", name):
        raise _malformed(
            spec,
            "malformed flag name %r" % name,
            "flag names start with '--' and a letter, followed by letters, digits or '_'"
        )

    options = set()
    if rest.startswith("["):
        if (end := rest.find("]")) < 0:
            raise _malformed(spec, "unterminated option block", "close the option block with ']', e.g. '[o,b]'")
        block, rest = rest[1:end], rest[end + 1:]
        for option in (block.split(",") if block.strip() else ()):
            if (option := option.strip()) not in OPTIONS:
                raise _malformed(
                    spec,
                    "unknown option %r" % option,
                    "only 'o' (optional) and 'b' (boolean) are accepted inside '[...]'"
                )
            options.add(option)

    return ArgSpec(
        name[len(PREFIX):],
        optional="o" in options,
        boolean="b" in options,
        descr=rest,
    )


def parse_all(specs, /):
    """
    Parse a leaf's declarations into its ordered ArgSpec set.

    Behavior
    - declarations are parsed in order (first malformed one aborts).
    - names must be unique; "help" is reserved for the synthesized flag.
    - the synthesized --help spec is appended last.

    Returns
    - tuple[ArgSpec, ...]
    """
    if isinstance(specs, str) or not isinstance(specs, Iterable):
        raise _malformed(specs, "non-sequence declarations", "ARGUMENTS must be a list of strings")

    parsed = []
    seen = set()
    for spec in specs:
        argument = parse(spec)
        if argument.name == HELP.name:
            raise _malformed(spec, "reserved flag name '--help'", "'--help' is provided automatically; remove it")
        if argument.name in seen:
            raise _malformed(spec, "duplicated flag name %r" % argument.flag, "declare each flag only once")
        seen.add(argument.name)
        parsed.append(argument)

    parsed.append(HELP)
    return tuple(parsed)


__all__ = (
    "ArgSpec",
    "HELP",
    "PREFIX",
    "parse",
    "parse_all",
)
