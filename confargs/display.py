"""
Help layout for registered specs.

Each spec renders as a fixed-width two-column entry:

        -o, --output OUTPUT              where to write (out.txt)
    |<------ head column (45%) ------>| |<------ description ------>|

- four-space indent, then '-s, ' (or four spaces without a short);
- the long ('--[no-]name' for switches) and, for value-taking kinds, ' ARG';
- the description, plus ' (hint)', wrapped into the second column;
- a header wider than its column sits alone on its line, with the whole
  description below it.

Separators print verbatim. The layout is built once as rich Text; the plain
string is its .plain, so colored and uncolored output always agree.

Palette keys (override any of them through __styles__ in __main__)
- flag-name, option-name, metavar, argument-description, hint, group-label
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.text import Text

from .flags import Kind, FlagSpec
from .grammar import prefix_long

HEAD_RATIO = 0.45

DEFAULT_WIDTH = 80

PALETTE = {
    "flag-name": "bold #22C55E",  # GREEN for presence-only kinds
    "option-name": "bold #00E6FF",  # CYAN for value-taking kinds
    "metavar": "bold #FFD600",  # AMBER for argument names
    "argument-description": "#9CA3AF",  # Muted gray
    "hint": "italic #A3A3A3",
    "group-label": "bold #FFFFFF",  # Pure white separators
}


def styler(colorful=True):
    """Return a style lookup honoring __styles__, or one yielding no style at all."""
    styles = defaultdict(str, PALETTE | getattr(__import__("__main__"), "__styles__", {}))
    return (lambda style: styles[style]) if colorful else (lambda style: "")


def _header(spec, style):
    name = style("option-name" if spec.kind.valued else "flag-name")

    header = Text("    ")
    if spec.short and spec.long:
        header.append(spec.short, name).append(", ")
    elif spec.short:
        header.append(spec.short, name)
    else:
        header.append("    ")

    if spec.kind is Kind.SWITCH:
        header.append(prefix_long(spec.long, "[%s-]" % spec.prefix), name)
    elif spec.long:
        header.append(spec.long, name)

    if spec.kind.valued:
        header.append(" ").append(spec.arg_name, style("metavar"))
    return header


def _description(spec, style):
    descr = Text()
    if spec.descr:
        descr.append(spec.descr, style("argument-description"))
    if spec.hint:
        descr.append(" (" if spec.descr else "(").append(spec.hint, style("hint")).append(")")
    return descr


def render_spec(spec, /, width=DEFAULT_WIDTH, style=None):
    """Lay a single spec out as rich Text (trailing whitespace stripped)."""
    style = style or styler(False)
    head = int(width * HEAD_RATIO)
    console = Console(width=width)

    header = _header(spec, style)
    descr = _description(spec, style)
    lines = [line for line in descr.wrap(console, width - head - 1)] if descr else []
    for line in lines:
        line.rstrip()

    section = Text()
    section.append(header)
    if len(header) <= head:
        section.append(" " * (head - len(header)))
        if lines:
            section.append(" ").append(lines.pop(0))
    for line in lines:
        section.append("\n").append(" " * (head + 1)).append(line)
    section.rstrip()
    return section


def render_entry(entry, /, width=DEFAULT_WIDTH, style=None):
    style = style or styler(False)
    if isinstance(entry, FlagSpec):
        return render_spec(entry, width, style)
    return Text(str(entry), style("group-label"))


def render(entries, /, width=DEFAULT_WIDTH, colorful=True):
    """Render every entry as a rich Group, one entry per line."""
    style = styler(colorful)
    return Group(*(render_entry(entry, width, style) for entry in entries))


def format_spec(spec, /, width=DEFAULT_WIDTH):
    return render_spec(spec, width).plain


def format_entries(entries, /, width=DEFAULT_WIDTH):
    """
    Plain help text: every entry right-stripped, joined by newlines, ending
    with a newline.
    """
    return "\n".join(render_entry(entry, width).plain.rstrip() for entry in entries) + "\n"


__all__ = (
    "styler",
    "render_spec",
    "render_entry",
    "render",
    "format_spec",
    "format_entries",
)
