r"""
Switch grammar: the textual shapes recognized on the command line.

Patterns
- OPTION: anything led by a dash plus one more character ('-x', '--', '--name=v').
- LONG:   '--' followed by ':'-joined segments ('--name', '--nest:name').
- SHORT:  '-' followed by exactly one character that is not a dash ('-x').
- SWITCH: switch shorthand '--[no-]name', '--nest:[no-]name'.
- NEST:   nested long '--nest:name'.

Helpers
- is_option / next_arg: token classification used while scanning argv.
- shortify / longify: normalize bare names into '-x' / '--name' and validate them.
- prefix_long: insert a prefix before the final nested segment of a long.
"""
import re

from .faults import InvalidSwitchFormatError

OPTION_BREAK = "--"

OPTION = re.compile(r"-.", re.DOTALL)

LONG = re.compile(r"--[^\s:=\[\]]+(?::[^\s:=\[\]]+)*")

SHORT = re.compile(r"-[^\s=-]")

# groups: nesting prefix (with trailing ':'), negative prefix, name
SWITCH = re.compile(r"--((?:[^\s:=\[\]]+:)*)\[([^\s\[\]]*?)-\]([^\s:=\[\]]+)")

# groups: nesting prefix, final segment
NEST = re.compile(r"--(.+):([^:]+)")


def is_option(object, /):
    """
    Return True when object is a string shaped like an option token.

    Non-string objects are never options; they travel through argv untouched.
    """
    return isinstance(object, str) and OPTION.match(object) is not None


def next_arg(argv, /, default=None):
    """
    Shift and return the head of argv when it is an argument, not an option.

    Returns default (leaving argv untouched) when argv is empty or its head
    looks like an option token.
    """
    if not argv or is_option(argv[0]):
        return default
    return argv.pop(0)


def shortify(object, /):
    """
    Turn object into a short switch by prefixing '-' as needed.

    - shortify('-o') -> '-o'
    - shortify('o')  -> '-o'
    - shortify(None) -> None
    """
    if object is None:
        return None

    switch = str(object)
    if not is_option(switch):
        switch = "-" + switch

    if not SHORT.fullmatch(switch):
        raise InvalidSwitchFormatError(
            "invalid short switch: %s" % switch,
            title="invalid short switch",
            hint="a short switch is a dash followed by one character (for example: -v)",
            switch=switch,
        )
    return switch


def longify(object, /):
    """
    Turn object into a long switch by prefixing '--' as needed.

    - longify('--opt')     -> '--opt'
    - longify('opt')       -> '--opt'
    - longify('nest:opt')  -> '--nest:opt'
    - longify(None)        -> None
    """
    if object is None:
        return None

    switch = str(object)
    if not is_option(switch):
        switch = "--" + switch

    if not LONG.fullmatch(switch):
        raise InvalidSwitchFormatError(
            "invalid long switch: %s" % switch,
            title="invalid long switch",
            hint="a long switch is two dashes followed by ':'-separated words (for example: --name)",
            switch=switch,
        )
    return switch


def prefix_long(switch, prefix, /, sep=":"):
    """
    Add a prefix onto the last nested segment of a long switch.

    - prefix_long('--opt', 'no-')         -> '--no-opt'
    - prefix_long('--nested:opt', 'no-')  -> '--nested:no-opt'
    """
    if switch.startswith("--"):
        switch = switch[2:]
    segments = switch.split(sep)
    segments[-1] = prefix + segments[-1]
    return "--" + sep.join(segments)


__all__ = (
    "OPTION_BREAK",
    "is_option",
    "next_arg",
    "shortify",
    "longify",
    "prefix_long",
)
