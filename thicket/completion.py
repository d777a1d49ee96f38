"""
Completion candidates for the word being typed.

Shell integration (bash/zsh hooks) lives outside this package; it only needs to
call `thicket --complete <words...>` and offer the printed candidates. The last
word is the partial one (possibly empty).

- inside a group: visible child names starting with the partial word;
- on a leaf: "--flag" names not used yet (their values skipped), "--help" included;
- after a bare "--": nothing, forwarded tokens are opaque.

Any fault while resolving or reading declarations yields no candidates.
"""
from collections import deque

from .bindings import SEPARATOR
from .faults import CommandException
from .specs import PREFIX, parse_all
from .tree import Group, resolve, scan


def complete(root, words, /):
    """
    Return the sorted candidates completing the last of `words`.

    Parameters
    - root: command tree root.
    - words: tokens typed after the program name, the last one being partial.
    """
    *head, partial = list(words) or [""]

    try:
        unit, remaining = resolve(scan(root), head)
        if isinstance(unit, Group):
            if remaining:
                return []
            return sorted(name for name in unit.children if name.startswith(partial))
        specs = parse_all(unit.arguments)
    except CommandException:
        return []

    if SEPARATOR in remaining:
        return []

    switches = {argument.flag: argument for argument in specs}
    used = set()
    queue = deque(remaining)
    while queue:
        if (argument := switches.get(queue.popleft())) is None:
            continue
        used.add(argument.flag)
        if not argument.boolean and queue and not queue[0].startswith(PREFIX):
            queue.popleft()

    return sorted(flag for flag in switches if flag not in used and flag.startswith(partial))


__all__ = ("complete",)
