"""
Colored log helpers for scripts.

Every helper takes an already-computed message and prints one line to a rich
console on stderr, prefixed with a colored level label:

    info("deploying %s" % env)      # "info: deploying staging"
    success("done")                 # "ok: done"
    warn("cache is stale")          # "warn: cache is stale"
    error("cluster unreachable")    # "error: cluster unreachable"
    debug("payload=%r" % payload)   # only when THICKET_DEBUG is set

Label styles can be overridden through __styles__ in __main__ using the keys
"log-info", "log-success", "log-warn", "log-error" and "log-debug". Setting
NO_COLOR disables colors altogether.
"""
import os
from collections import defaultdict

from rich.console import Console
from rich.text import Text

console = Console(stderr=True, highlight=False)

LEVELS = {
    "info": ("info", "bold #36C5F0"),
    "success": ("ok", "bold #22C55E"),
    "warn": ("warn", "bold #FFD600"),
    "error": ("error", "bold #EF4444"),
    "debug": ("debug", "#9CA3AF"),
}


def _emit(level, message):
    label, style = LEVELS[level]
    styles = defaultdict(str, getattr(__import__("__main__"), "__styles__", {}))
    if "NO_COLOR" in os.environ:
        style = ""
    else:
        style = styles["log-" + level] or style
    console.print(Text.assemble((label, style), ": ", str(message)))


def info(message, /):
    _emit("info", message)


def success(message, /):
    _emit("success", message)


def warn(message, /):
    _emit("warn", message)


def error(message, /):
    _emit("error", message)


def debug(message, /):
    """Print only when the THICKET_DEBUG environment variable is set."""
    if os.environ.get("THICKET_DEBUG"):
        _emit("debug", message)


__all__ = (
    "info",
    "success",
    "warn",
    "error",
    "debug",
)
