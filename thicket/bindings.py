"""
thicket argument binding and validation.

What this module provides
- ParsedArgs: the runtime token stream split at the first bare "--" into
  leading (flag) tokens and forwarded (opaque) tokens.
- Binding: the validated, read-only mapping from flag name to its value
  (a string for value flags, `present` for boolean flags), plus the forwarded
  tokens.
- split(tokens): build a ParsedArgs.
- bind(specs, tokens): match the leading tokens against an ArgSpec set.

Failure policy
- Structural mistakes stop the scan immediately: an unknown flag
  (UnknownFlagError) or a value flag without a usable value
  (MissingFlagValueError).
- Required flags are checked only after the whole scan and reported together
  (MissingRequiredArgsError), so the user sees every gap at once.
- The synthesized --help terminates the scan and raises HelpRequested, also
  when it stands where a value flag expected its value.
- A repeated flag keeps its last value and emits DuplicatedFlagWarning.
"""
import difflib
import warnings
from collections import deque
from collections.abc import Mapping

from .faults import *
from .marks import present
from .specs import HELP, PREFIX
from .utils import Introspectable, ordinal

SEPARATOR = "--"
"""token that ends flag parsing; everything after it is forwarded verbatim."""


class ParsedArgs(metaclass=Introspectable):
    """
    Runtime tokens split at the first literal "--".

    Properties
    - leading: tokens before the separator (validated against the spec set).
    - forwarded: tokens after the separator, in original order, never validated.
    """

    __introspectable__ = (
        "leading",
        "forwarded",
    )

    def __init__(self, leading=(), forwarded=()):
        self._leading = tuple(leading)
        self._forwarded = tuple(forwarded)


class Binding(Mapping):
    """
    Validated values for one invocation.

    Behaves as a read-only mapping from flag name (without prefix) to its value:
    the literal string for value flags, `present` for boolean flags. Flags that
    were not given are simply absent.

    Properties
    - forwarded: tokens found after the "--" separator.
    """

    def __init__(self, values=(), forwarded=()):
        self._values = dict(values)
        self._forwarded = tuple(forwarded)

    @property
    def forwarded(self):
        return self._forwarded

    def __getitem__(self, name, /):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "binding(%r, forwarded=%r)" % (self._values, self._forwarded)

    def __rich_repr__(self):
        yield "values", dict(self._values)
        yield "forwarded", self._forwarded


def split(tokens, /):
    """
    Split raw tokens at the first bare "--".

    Everything before it stays in `leading`; everything after it becomes
    `forwarded`, verbatim and in order, even if it looks like flags.
    """
    tokens = list(tokens)
    try:
        index = tokens.index(SEPARATOR)
    except ValueError:
        return ParsedArgs(tokens, ())
    return ParsedArgs(tokens[:index], tokens[index + 1:])


def bind(specs, tokens, /):
    """
    Bind runtime tokens against an ordered ArgSpec set.

    Parameters
    - specs: Iterable[ArgSpec], usually the output of specs.parse_all().
    - tokens: Iterable[str], the raw tokens left after command resolution.

    Returns
    - Binding with every given flag and the forwarded tokens.

    Raises
    - UnknownFlagError: a leading token is not a declared flag.
    - MissingFlagValueError: a value flag is last or followed by a flag-like token.
    - HelpRequested: the synthesized --help flag was found.
    - MissingRequiredArgsError: one or more required flags are absent.
    """
    specs = tuple(specs)
    switches = {argument.flag: argument for argument in specs}
    parsed = split(tokens)

    values = {}
    queue = deque(parsed.leading)
    index = 0

    while queue:
        index += 1
        token = queue.popleft()

        try:
            argument = switches[token]
        except KeyError:
            suggestions = difflib.get_close_matches(token, switches.keys(), 5)
            try:
                hint = "did you mean %r? you can also pass '--help' to see all flags" % suggestions[0]
            except IndexError:
                hint = "pass '--help' to see all flags"
            raise UnknownFlagError(
                "unknown flag %r at %s position" % (token, ordinal(index)),
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                input=token,
                index=index,
                suggestions=suggestions,
                hint=hint,
                docs=getdoc(FaultCode.UNKNOWN_FLAG),
            ) from None

        if argument.name == HELP.name:
            raise HelpRequested(Binding(values, parsed.forwarded))

        if argument.name in values:
            warnings.warn(DuplicatedFlagWarning(
                "flag %r at %s position was already provided; the last one wins" % (token, ordinal(index)),
                title="duplicated flag",
                code=FaultCode.DUPLICATED_FLAG,
                input=token,
                index=index,
                hint="keep a single %s" % token,
                docs=getdoc(FaultCode.DUPLICATED_FLAG),
            ), stacklevel=2)

        if argument.boolean:
            values[argument.name] = present
            continue

        if queue and queue[0] in switches and switches[queue[0]].name == HELP.name:
            raise HelpRequested(Binding(values, parsed.forwarded))

        if not queue or queue[0].startswith(PREFIX):
            raise MissingFlagValueError(
                "flag %r at %s position expects a value" % (token, ordinal(index)),
                title="missing flag value",
                code=FaultCode.MISSING_FLAG_VALUE,
                input=token,
                index=index,
                argument=argument,
                hint="pass a value right after it (for example: %s <%s>)" % (token, argument.name),
                docs=getdoc(FaultCode.MISSING_FLAG_VALUE),
            )

        index += 1
        values[argument.name] = queue.popleft()

    if missing := tuple(argument.name for argument in specs if argument.required and argument.name not in values):
        raise MissingRequiredArgsError(
            "missing required %s %s" % (
                "flag" if len(missing) == 1 else "flags",
                ", ".join(repr(PREFIX + name) for name in missing)
            ),
            title="missing required arguments",
            code=FaultCode.MISSING_REQUIRED_ARGS,
            missing=missing,
            hint="add %s" % " ".join("%s%s <%s>" % (PREFIX, name, name) for name in missing),
            docs=getdoc(FaultCode.MISSING_REQUIRED_ARGS),
        )

    return Binding(values, parsed.forwarded)


__all__ = (
    "ParsedArgs",
    "Binding",
    "SEPARATOR",
    "split",
    "bind",
)
