"""
Attribute inference: shorthand declaration strings to FlagSpec attributes.

    Argument            Implies
    -s                  short='-s'
    --long              long='--long'
    --long ARG          long='--long', arg_name='ARG'
    --[no-]long         long='--long', prefix='no'          (a switch)
    --nest:long         long='--nest:long', nest=('nest',)
    'some string'       descr='some string'

Patterns overlay, e.g. '-s ARG' or '--nest:[no-]long'. The heuristics aim
to get common declarations right; explicit attributes always win over
whatever was inferred.
"""
from .faults import InvalidSwitchFormatError
from .flags import Kind, FlagSpec, DEFAULT_DELIMITER
from .grammar import LONG, SHORT, SWITCH, NEST, is_option


def parse_attrs(args, /):
    """
    Parse a sequence of declaration strings into an attributes dict.

    Raises ValueError for conflicting declarations (two longs, two shorts,
    two descriptions, or an argument name on a switch) and
    InvalidSwitchFormatError for dash-led strings matching no grammar.
    """
    attrs = {}

    def put(name, value):
        if name in attrs and attrs[name] != value:
            raise ValueError("conflicting %s options: %r" % (name, [attrs[name], value]))
        attrs[name] = value

    for arg in args:
        if not is_option(arg):
            put("descr", arg)
            continue

        switch, *rest = arg.split(None, 1)
        arg_name = rest[0] if rest else None

        if match := SWITCH.fullmatch(switch):
            if arg_name is not None:
                raise ValueError("arg_name specified for switch: %s" % arg_name)
            nest, prefix, name = match.groups()
            put("long", "--" + nest + name)
            put("prefix", prefix)
            if nest:
                put("nest", tuple(nest.rstrip(":").split(":")))
            continue

        if LONG.fullmatch(switch):
            put("long", switch)
            if match := NEST.fullmatch(switch):
                put("nest", tuple(match.group(1).split(":")))
        elif SHORT.fullmatch(switch):
            put("short", switch)
        else:
            raise InvalidSwitchFormatError(
                "invalid switch: %r" % arg,
                title="invalid switch",
                hint="declare '-s', '--long', '--long ARG' or '--[no-]long'",
                switch=arg,
            )

        if arg_name is not None:
            put("arg_name", arg_name)

    return attrs


def guess_kind_by_value(value, /):
    """
    True -> SWITCH, False -> FLAG, list/tuple -> LIST, anything else -> OPTION.
    """
    match value:
        case True:
            return Kind.SWITCH
        case False:
            return Kind.FLAG
        case list() | tuple():
            return Kind.LIST
        case _:
            return Kind.OPTION


def guess_kind(attrs, /):
    """
    Guess a flag kind from attributes. A guess is just a guess; pass 'kind'
    for certainty.

        prefix     -> SWITCH
        arg_name   -> LIST when it contains ',', else by default value
        default    -> by default value
        otherwise  -> FLAG
    """
    if "prefix" in attrs:
        return Kind.SWITCH
    if "arg_name" in attrs:
        if "," in str(attrs["arg_name"]):
            return Kind.LIST
        return guess_kind_by_value(attrs.get("default"))
    if "default" in attrs:
        return guess_kind_by_value(attrs["default"])
    return Kind.FLAG


def guess_hint(attrs, /):
    """
    Derive a display hint from the default: None for booleans and None, the
    joined values for lists, str(default) otherwise.
    """
    match default := attrs.get("default"):
        case True | False | None:
            return None
        case list() | tuple():
            delimiter = attrs.get("delimiter", DEFAULT_DELIMITER) or DEFAULT_DELIMITER
            return delimiter.join(map(str, default)) or None
        case _:
            return str(default).strip() or None


def build(args=(), attrs=None, /):
    """
    Construct a FlagSpec from declaration strings plus explicit attributes.

    Explicit attributes override inferred ones; an explicit 'kind' (a Kind or
    its name) overrides the guess. A missing hint is derived from the default.
    """
    attrs = parse_attrs(args) | dict(attrs or {})
    kind = Kind.resolve(attrs.pop("kind")) if attrs.get("kind") is not None else guess_kind(attrs)
    attrs.pop("kind", None)
    if "hint" not in attrs:
        attrs["hint"] = guess_hint(attrs)
    if kind is not Kind.SWITCH:
        attrs.pop("prefix", None)
    return FlagSpec(kind, **attrs)


__all__ = (
    "parse_attrs",
    "guess_kind",
    "guess_kind_by_value",
    "guess_hint",
    "build",
)
