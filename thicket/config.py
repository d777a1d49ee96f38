"""
Environment-driven configuration of the console script.

    THICKET_ROOT    command tree root            (default: ./commands)
    THICKET_PROG    program name shown in help   (default: thicket)
    THICKET_COLOR   "0" disables colors          (default: on)
    NO_COLOR        any value disables colors, overriding THICKET_COLOR
    THICKET_FANCY   "1" wraps output in panels   (default: off)

load() returns the keyword arguments of thicket.commands.Tool; the console
script adds shell=True itself.
"""
import os
from pathlib import Path

DEFAULTS = {
    "root": "commands",
    "name": "thicket",
}


def _flag(value, default):
    if value is None:
        return default
    return value.strip().lower() not in ("", "0", "false", "no", "off")


def load(environ=None, /):
    """
    Read the tool configuration from `environ` (os.environ by default).

    Returns
    - dict with "root", "name", "colorful" and "fancy" keys.
    """
    environ = os.environ if environ is None else environ
    return {
        "root": Path(environ.get("THICKET_ROOT") or DEFAULTS["root"]),
        "name": environ.get("THICKET_PROG") or DEFAULTS["name"],
        "colorful": "NO_COLOR" not in environ and _flag(environ.get("THICKET_COLOR"), True),
        "fancy": _flag(environ.get("THICKET_FANCY"), False),
    }


__all__ = (
    "DEFAULTS",
    "load",
)
