"""
thicket console script.

    thicket [group...] [leaf] [--flag [value]]... [-- forwarded...]
    thicket --complete <words...>

Configuration comes from the environment (see thicket.config); faults are
rendered on stderr and end the process with status 1.
"""
import sys

from . import config
from .commands import Tool, invoke
from .completion import complete

COMPLETE = "--complete"
"""hidden first token switching the script to completion mode."""


def main(argv=None, /):
    """
    Run the console script with `argv` (sys.argv[1:] by default) and exit.

    Exit codes
    - 0: success, help or listing.
    - 1: any fault.
    - 130: interrupted from the keyboard.
    - otherwise: the entry routine's own code.
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    options = config.load()

    if argv[:1] == [COMPLETE]:
        for candidate in complete(options["root"], argv[1:]):
            print(candidate)
        sys.exit(0)

    try:
        code = invoke(Tool(options.pop("root"), **options, shell=True), argv)
    except KeyboardInterrupt:
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
