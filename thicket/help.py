"""
thicket help documents and rich rendering.

What this module provides
- HelpDoc: the derived, read-only help of a leaf (title, usage specs, body).
- render_usage(doc, ...): the single "usage: ..." line.
- render_help(doc, ...): title, usage, flag table and long description.
- render_listing(group, ...): a group's usage, summary, children table and
  long description.

Palette keys
- title, usage-label, program-name, route, description-section
- group-label, flag-name, metavar, optional, argument-description
- children-title, children-table, children, children-description, malformed

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- With colorful=False styling is suppressed; fancy=True wraps the output in a
  rich Panel titled with the document title.
"""
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Group as RenderGroup
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .faults import MalformedUnitError
from .specs import PREFIX
from .utils import Introspectable

PALETTE = {
    # === Head sections ===
    "title": "bold #FFFFFF",
    "usage-label": "bold #00E6FF",  # CYAN → signature info color
    "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
    "route": "bold #36C5F0",  # SKY-BLUE → softer than cyan
    "description-section": "italic #A3A3A3",  # Neutral gray

    # === Flags ===
    "group-label": "bold #FFFFFF",  # Pure white headers
    "flag-name": "bold #22C55E",  # GREEN for flags
    "metavar": "bold #FFD600",  # AMBER for values
    "optional": "#737373",  # Dim brackets
    "argument-description": "#9CA3AF",  # Muted gray

    # === Children table ===
    "children-title": "bold #FFFFFF",
    "children-table": "#4B5563",  # Slate border
    "children": "bold #36C5F0",  # Sky-blue subcommands
    "children-description": "#9CA3AF",
    "malformed": "italic #EF4444",  # child whose declaration cannot be read
}


class HelpDoc(metaclass=Introspectable):
    """
    Help of one leaf, derived on demand and never persisted.

    Properties
    - title: help title declared by the script.
    - route: command names from the tree root to the leaf.
    - usage: the leaf's ArgSpec set, synthesized --help included.
    - body: long description declared by the script.
    """

    __introspectable__ = (
        "title",
        "route",
        "usage",
        "body",
    )

    def __init__(self, title, usage=(), body="", route=()):
        self._title = str(title)
        self._usage = tuple(usage)
        self._body = str(body)
        self._route = tuple(route)

    @classmethod
    def of(cls, leaf, specs, /):
        """Build the help of `leaf` from its parsed ArgSpec set."""
        return cls(leaf.title, specs, leaf.body, leaf.route)


def _styling(colorful):
    styles = defaultdict(str, PALETTE | getattr(__import__("__main__"), "__styles__", {}))

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

    return styler, text


def _head(route, prog, styler, text):
    usage = Text()
    usage.append("usage", styler("usage-label")).append(": ")
    usage.append(text(prog, styler("program-name")))
    for name in route:
        usage.append(" ").append(text(name, styler("route")))
    return usage


def render_usage(doc, /, *, prog="thicket", colorful=False):
    """
    Render the usage line of a leaf.

    Required value flags appear bare, everything else in brackets; value flags
    are followed by their name as a placeholder. Forwarding is always shown.
    """
    styler, text = _styling(colorful)
    usage = _head(doc.route, prog, styler, text)

    for argument in doc.usage:
        segment = text(argument.flag, styler("flag-name"))
        if not argument.boolean:
            segment = Text.assemble(segment, " ", text("<%s>" % argument.name, styler("metavar")))
        if not argument.required:
            segment = Text.assemble(text("[", styler("optional")), segment, text("]", styler("optional")))
        usage.append(" ").append(segment)

    usage.append(" ").append(text("[%s ...]" % PREFIX, styler("optional")))
    return usage


def render_help(doc, /, *, prog="thicket", colorful=False, fancy=False):
    """
    Render the full help of a leaf: title, usage line, flag table and long
    description.
    """
    styler, text = _styling(colorful)
    renders = []

    if not fancy and doc.title:
        renders.append(text(doc.title, styler("title")))

    renders.append(render_usage(doc, prog=prog, colorful=colorful))

    if doc.usage:
        table = Table.grid(padding=(0, 3))
        table.add_column(no_wrap=True)
        table.add_column()
        for argument in doc.usage:
            name = text(argument.flag, styler("flag-name"))
            if not argument.boolean:
                name = Text.assemble(name, " ", text("<%s>" % argument.name, styler("metavar")))
            table.add_row(
                Text.assemble("  ", name),
                text(argument.descr, styler("argument-description")),
            )
        renders.append(Text.assemble("\n", text("flags", styler("group-label")), ":"))
        renders.append(table)

    if doc.body:
        renders.append(Text.assemble("\n", text(doc.body, styler("description-section"))))

    if fancy:
        return Panel(RenderGroup(*renders), title=text(doc.title or "help", styler("title")), title_align="left", expand=False)
    return RenderGroup(*renders)


def render_listing(group, /, *, prog="thicket", colorful=False, fancy=False):
    """
    Render the listing of a group: usage line, summary, a table of the visible
    children (name and summary, groups marked with a trailing "/") and the long
    description.

    Every child's declaration is evaluated to read its summary; no entry
    routine is ever called. A child whose declaration cannot be read is still
    listed, with "(malformed)" in place of its summary.
    """
    styler, text = _styling(colorful)
    renders = []

    if not fancy and group.title:
        renders.append(text(group.title, styler("title")))

    usage = _head(group.route, prog, styler, text)
    usage.append(" ").append(text("<command>", styler("metavar")))
    usage.append(" ").append(text("[...]", styler("optional")))
    renders.append(usage)

    if group.summary:
        renders.append(text(group.summary, styler("description-section")))

    if group.children:
        table = Table(
            "name", "help",
            title=text("subcommands" if group.route else "commands", styler("children-title")),
            box=ROUNDED,
            style=styler("children-table"),
            header_style=styler("children-title"),
            title_justify="left",
        )
        for name, child in group.children.items():
            try:
                summary = text(child.summary, styler("children-description"))
            except MalformedUnitError:
                summary = text("(malformed)", styler("malformed"))
            table.add_row(text(name + "/" * (child.kind == "group"), styler("children")), summary)
        renders.append(table)
    else:
        renders.append(text("no commands available", styler("description-section")))

    if group.body:
        renders.append(Text.assemble("\n", text(group.body, styler("description-section"))))

    if fancy:
        return Panel(RenderGroup(*renders), title=text(group.title or "commands", styler("title")), title_align="left", expand=False)
    return RenderGroup(*renders)


__all__ = (
    "HelpDoc",
    "PALETTE",
    "render_usage",
    "render_help",
    "render_listing",
)
