r"""
confargs flag specifications.

Overview
- Kinds (a closed set, modelled as a tag plus dispatch tables)
  • FLAG:   presence-only, assigns True (or the inverse of its default), e.g. -v/--verbose.
  • SWITCH: boolean pair, '--name' assigns the default, '--no-name' its inverse.
  • OPTION: takes one value, either inline ('--name=value', '-nvalue') or from the next token.
  • LIST:   an option whose values accumulate into a list across one parse pass.

- FlagSpec
  • One immutable declaration per registered option; every field is exposed
    through a read-only property (see __introspectable__).
  • consume(): pull the value a matched switch needs from argv and assign it.
  • assign(): write a value into the (possibly nested) config slot.
  • assign_default(): write the default at the start of a parse pass.

- Session
  • Per-pass state: which specs already wrote during this pass and how many
    values each list holds. Lists use it to replace stale contents on their
    first write and append afterwards.

- Constructors
  • Flag(...), Switch(...), Option(...), List(...) build a FlagSpec of the
    matching kind. Positional arguments are switch strings ('-o', '--output').

Metadata (sanitized on construction)
- key: config slot (None assigns nothing, only the callback runs).
- nest: tuple of intermediate keys ('a:b' strings are split on ':').
- short / long: inferred from a string key when omitted, None disables.
- default: None unless given (True for switches, a list for lists).
- callback: Callable | None, applied to the value before assignment.
- descr / hint: display only.
- arg_name / optional (OPTION, LIST): '[NAME]' marks the value optional.
- prefix / negative_long (SWITCH): negative_long defaults to '--' + prefix + '-' + name.
- delimiter / limit (LIST): delimiter defaults to ',' (None disables splitting).

Quick example:
    >>> verbose = Flag("-v", "--verbose", key="verbose")
    >>> output = Option("-o", "--output", key="output", default="out.txt")
    >>> tags = List("--tag", key="tags", delimiter=",")
"""
import enum
import functools
import operator
import re
from collections.abc import Iterable

from .faults import MissingLongForSwitchError, MissingValueError, UnexpectedValueError, TooManyValuesError, \
    InvalidSwitchFormatError
from .grammar import LONG, SHORT, next_arg, shortify, longify, prefix_long
from .utils import *

DEFAULT_ARG_NAME = "VALUE"

DEFAULT_DELIMITER = ","

OPTIONAL = re.compile(r"\[.*\]")


class Kind(enum.Enum):
    """
    the closed set of flag kinds.

    the kind decides how a spec consumes argv and how it writes into config;
    both decisions are looked up in the dispatch tables at the bottom of
    this module, never through subclass overrides.
    """
    FLAG = "flag"
    SWITCH = "switch"
    OPTION = "option"
    LIST = "list"

    @property
    def valued(self):
        """True for kinds that take a value from argv."""
        return self in (Kind.OPTION, Kind.LIST)

    @classmethod
    def resolve(cls, object, /):
        """
        Accept a Kind or its (case-insensitive) name.
        """
        if isinstance(object, cls):
            return object
        if isinstance(object, str):
            try:
                return cls(object.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"unknown flag kind: {object!r}")


class Session:
    """
    state of a single parse pass.

    a fresh session is created for every scan, so repeated passes over the
    same specs never see each other's bookkeeping.
    """
    __slots__ = ("_touched", "_counts")

    def __init__(self):
        self._touched = set()
        self._counts = {}

    def touch(self, spec, /):
        self._touched.add(spec)

    def touched(self, spec, /):
        return spec in self._touched

    def reset(self, spec, /):
        """Forget that spec wrote during this pass (its next write starts over)."""
        self._touched.discard(spec)
        self._counts.pop(spec, None)

    def count(self, spec, /):
        return self._counts.get(spec, 0)

    def grow(self, spec, amount, /):
        self._counts[spec] = self.count(spec) + amount


class SpecType(type):
    """
    Metaclass that gives specs stable introspection.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide readable __repr__/__rich_repr__ implementations for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens).
    - an instance-level __displayable__ narrows which properties are shown;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag-spec(kind=<Kind.OPTION: 'option'>, key='output', long='--output', ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(getattr(self, "__displayable__", Unset), type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the fields shared by every kind.

    - nest: None | str | Iterable; strings are split on ':'. Stored as a tuple.
    - callback: None | Callable.
    - descr / hint: None | str; strings are trimmed and must stay non-empty.
    - default: Unset becomes None (True for switches).

    Mutates metadata in place.
    """
    if (nest := metadata["nest"]) is None:
        nest = ()
    elif isinstance(nest, str):
        nest = tuple(nest.split(":")) if nest else ()
    elif isinstance(nest, Iterable):
        nest = tuple(nest)
    else:
        raise TypeError(f"{cls.__typename__} 'nest' must be a string or an iterable of keys")
    metadata["nest"] = nest

    if metadata["callback"] is not None and not callable(metadata["callback"]):
        raise TypeError(f"{cls.__typename__} 'callback' must be callable")

    for name in ("descr", "hint"):
        if (text := metadata[name]) is None:
            continue
        if not isinstance(text, str):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        if not (text := text.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = text

    metadata["default"] = coalesce(metadata["default"], True if metadata["kind"] is Kind.SWITCH else None)


def _sanitize_switch_metadata(cls, metadata, /):
    r"""
    Internal: classify positional switch strings and infer short/long from the key.

    Rules
    - every positional switch must match SHORT ('-x') or LONG ('--name');
      at most one of each is allowed, and neither may also be passed by keyword.
    - when short is omitted and key is a one-character string without nest,
      the key becomes the short.
    - when long is omitted and no short was inferred, a string key becomes the
      long, prefixed by the nest path: key='b', nest=('a',) -> '--a:b'.
    - an explicit None disables inference.
    - SWITCH requires a long; its negative long is derived from prefix.
    """
    for switch in metadata.pop("switches"):
        if not isinstance(switch, str):
            raise TypeError(f"{cls.__typename__} switches must be strings")
        if SHORT.fullmatch(switch):
            field = "short"
        elif LONG.fullmatch(switch):
            field = "long"
        else:
            raise InvalidSwitchFormatError(
                "invalid switch: %s" % switch,
                title="invalid switch",
                hint="use '-x' for a short switch or '--name' for a long one",
                switch=switch,
            )
        if metadata[field] is not Unset:
            raise ValueError(f"conflicting {field} switches: {[metadata[field], switch]!r}")
        metadata[field] = switch

    key = metadata["key"]
    implied = key if isinstance(key, str) and len(key) == 1 and not metadata["nest"] else None

    short = metadata["short"]
    metadata["short"] = shortify(coalesce(short, implied))

    long = metadata["long"]
    if long is Unset:
        long = ":".join(map(str, metadata["nest"] + (key,))) if isinstance(key, str) and not implied else None
    metadata["long"] = longify(long)

    if metadata["kind"] is not Kind.SWITCH:
        metadata["prefix"] = None
        metadata["negative_long"] = None
        return

    if metadata["long"] is None:
        raise MissingLongForSwitchError(
            "no long switch specified for switch %r" % (key,),
            title="switch without long",
            hint="give the switch a long form (for example: --[no-]name)",
            key=key,
        )
    if not isinstance(prefix := metadata["prefix"], str):
        raise TypeError(f"{cls.__typename__} 'prefix' must be a string")
    negative = metadata["negative_long"]
    if negative is Unset or negative is None:
        metadata["negative_long"] = prefix_long(metadata["long"], prefix + "-")
    else:
        metadata["negative_long"] = longify(negative)


def _sanitize_valued_metadata(cls, metadata, /):
    """
    Internal: validate the fields of value-taking kinds (OPTION, LIST).

    - arg_name: defaults to the upper-cased key, or VALUE without a key.
    - optional: defaults to whether arg_name is bracketed ('[NAME]').
    - delimiter (LIST): defaults to ','; None disables splitting.
    - limit (LIST): None or a positive integer, not exceeded by the default.
    """
    kind = metadata["kind"]
    if not kind.valued:
        for name in ("arg_name", "optional", "delimiter", "limit"):
            metadata[name] = None
        return

    arg_name = coalesce(metadata["arg_name"])
    if arg_name is None:
        arg_name = str(metadata["key"]).upper() if metadata["key"] is not None else DEFAULT_ARG_NAME
    elif not isinstance(arg_name, str) or not arg_name.strip():
        raise ValueError(f"{cls.__typename__} 'arg_name' must be a non-empty string")
    metadata["arg_name"] = arg_name.strip()

    optional = metadata["optional"]
    metadata["optional"] = bool(OPTIONAL.fullmatch(metadata["arg_name"])) if optional is Unset else bool(optional)

    if kind is not Kind.LIST:
        metadata["delimiter"] = None
        metadata["limit"] = None
        return

    delimiter = coalesce(metadata["delimiter"], DEFAULT_DELIMITER)
    if delimiter is not None and (not isinstance(delimiter, str) or not delimiter):
        raise ValueError(f"{cls.__typename__} 'delimiter' must be a non-empty string or None")
    metadata["delimiter"] = delimiter

    limit = metadata["limit"]
    if limit is not None:
        if not isinstance(limit, int) or isinstance(limit, bool):
            raise TypeError(f"{cls.__typename__} 'limit' must be an integer")
        if limit < 1:
            raise ValueError(f"{cls.__typename__} 'limit' must be a positive integer")

    metadata["default"] = _split(delimiter, metadata["default"])
    if limit is not None and len(metadata["default"]) > limit:
        raise ValueError(f"{cls.__typename__} 'default' holds more than 'limit' ({limit}) values")


def _split(delimiter, object, /):
    if isinstance(object, (list, tuple)):
        return list(object)
    if isinstance(object, str):
        if delimiter is None:
            return [object]
        return object.split(delimiter) if object else []
    if object is None:
        return []
    return [object]


class FlagSpec(metaclass=SpecType):
    """
    A single registered option declaration.

    FlagSpec is a tagged value: 'kind' selects the consume/assign routines from
    the module dispatch tables. All fields are read-only after construction;
    per-pass bookkeeping lives in a Session.
    """

    __introspectable__ = (
        "kind",
        "key",
        "nest",
        "short",
        "long",
        "negative_long",
        "prefix",
        "default",
        "callback",
        "descr",
        "hint",
        "arg_name",
        "optional",
        "delimiter",
        "limit",
    )

    def __init__(
            self,
            kind,
            /,
            *switches,
            key=None,
            nest=None,
            short=Unset,
            long=Unset,
            default=Unset,
            callback=None,
            descr=None,
            hint=None,
            arg_name=Unset,
            optional=Unset,
            prefix="no",
            negative_long=Unset,
            delimiter=Unset,
            limit=None
    ):
        metadata = {
            "kind": Kind.resolve(kind),
            "switches": switches,
            "key": key,
            "nest": nest,
            "short": short,
            "long": long,
            "negative_long": negative_long,
            "prefix": prefix,
            "default": default,
            "callback": callback,
            "descr": descr,
            "hint": hint,
            "arg_name": arg_name,
            "optional": optional,
            "delimiter": delimiter,
            "limit": limit,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_switch_metadata(type(self), metadata)
        _sanitize_valued_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def __displayable__(self):
        fields = ["kind", "key", "nest", "short", "long"]
        match self._kind:
            case Kind.SWITCH:
                fields += ["negative_long", "default"]
            case Kind.OPTION:
                fields += ["arg_name", "optional", "default"]
            case Kind.LIST:
                fields += ["arg_name", "optional", "delimiter", "limit", "default"]
            case _:
                fields += ["default"]
        return tuple(fields)

    @property
    def switches(self):
        """Every switch string mapping to self: long, negative long, short (absent ones skipped)."""
        return tuple(switch for switch in (self._long, self._negative_long, self._short) if switch is not None)

    def split(self, object, /):
        """
        Split a raw list value.

        Sequences pass through, strings are split on the delimiter (or wrapped
        when splitting is disabled), None becomes [] and anything else is wrapped.
        """
        if self._kind is not Kind.LIST:
            raise TypeError(f"{self._kind.value} spec cannot split values")
        return _split(self._delimiter, object)

    def process(self, object, /):
        """Run a raw value through the callback, the way this kind does it."""
        return _PROCESSORS[self._kind](self, object)

    def consume(self, switch, value, argv, config, session, /):
        """
        Determine, process and assign the value for a matched switch.

        value is the inline value (None when the token carried none); argv is
        the remaining token list and may be shifted by value-taking kinds.
        Returns the assigned value.
        """
        return _CONSUMERS[self._kind](self, switch, value, argv, config, session)

    def assign(self, config, value, session, /):
        """Write value into config (when key is set) and mark self touched."""
        return _ASSIGNERS[self._kind](self, config, value, session)

    def assign_default(self, config, session, /):
        """Write the default into config, leaving self untouched for this pass."""
        self.assign(config, self.default, session)
        session.reset(self)
        return config

    def resolve(self, config, /):
        """
        Return the mapping inside config that holds self.key, creating the
        intermediate mappings named by nest on the way.
        """
        for key in self._nest:
            if config.get(key) is None:
                config[key] = {}
            config = config[key]
        return config


def _process_value(spec, object):
    return spec._callback(object) if spec._callback else object


def _process_list(spec, object):
    values = spec.split(object)
    if spec._callback:
        return [spec._callback(value) for value in values]
    return values


def _unexpected(spec, switch, value):
    return UnexpectedValueError(
        "value specified for %s: %r" % (switch, value),
        title="%s cannot take a value" % spec._kind.value,
        hint="remove everything from '=' (for example: %s)" % switch,
        switch=switch,
        value=value,
        spec=spec,
    )


def _consume_flag(spec, switch, value, argv, config, session):
    if value is not None:
        raise _unexpected(spec, switch, value)
    value = spec.process(True if spec._default is None else not spec._default)
    spec.assign(config, value, session)
    return value


def _consume_switch(spec, switch, value, argv, config, session):
    if value is not None:
        raise _unexpected(spec, switch, value)
    value = spec.process(not spec._default if switch == spec._negative_long else spec._default)
    spec.assign(config, value, session)
    return value


def _consume_valued(spec, switch, value, argv, config, session):
    if value is None:
        value = next_arg(argv, Unset)
        if value is Unset:
            if not spec._optional:
                raise MissingValueError(
                    "no value provided for: %s" % switch,
                    title="missing value",
                    hint="pass a value after a space or '=' (for example: %s=%s)" % (switch, spec._arg_name),
                    switch=switch,
                    spec=spec,
                )
            value = spec.default
    value = spec.process(value)
    spec.assign(config, value, session)
    return value


def _assign_value(spec, config, value, session):
    if spec._key is not None:
        spec.resolve(config)[spec._key] = value
    session.touch(spec)
    return config


def _assign_list(spec, config, values, session):
    values = list(values)
    first = not session.touched(spec)
    count = len(values) + (0 if first else session.count(spec))

    if spec._limit is not None and count > spec._limit:
        raise TooManyValuesError(
            "too many values for %r: %d exceeds the limit of %d" % (
                spec._long or spec._short or spec._key, count, spec._limit
            ),
            title="too many values",
            hint="pass at most %d value(s)" % spec._limit,
            spec=spec,
            count=count,
            limit=spec._limit,
        )

    if first:
        session.reset(spec)
    if spec._key is not None:
        target = spec.resolve(config)
        if first or not isinstance(target.get(spec._key), list):
            target[spec._key] = []
        target[spec._key].extend(values)

    session.touch(spec)
    session.grow(spec, len(values))
    return config


_PROCESSORS = {
    Kind.FLAG: _process_value,
    Kind.SWITCH: _process_value,
    Kind.OPTION: _process_value,
    Kind.LIST: _process_list,
}

_CONSUMERS = {
    Kind.FLAG: _consume_flag,
    Kind.SWITCH: _consume_switch,
    Kind.OPTION: _consume_valued,
    Kind.LIST: _consume_valued,
}

_ASSIGNERS = {
    Kind.FLAG: _assign_value,
    Kind.SWITCH: _assign_value,
    Kind.OPTION: _assign_value,
    Kind.LIST: _assign_list,
}


def Flag(*switches, **attrs):
    """
    Build a presence-only FlagSpec.

        Flag("-v", "--verbose", key="verbose")

    Seeing the flag assigns True when the default is None, else the inverse
    of the default: Flag("--quiet", default=True) assigns False.
    """
    return FlagSpec(Kind.FLAG, *switches, **attrs)


def Switch(*switches, **attrs):
    """
    Build a boolean-pair FlagSpec ('--name' / '--no-name'). A long is required.

        Switch("--color", key="color")
    """
    return FlagSpec(Kind.SWITCH, *switches, **attrs)


def Option(*switches, **attrs):
    """
    Build a single-value FlagSpec.

        Option("-o", "--output", key="output", default="out.txt")
    """
    return FlagSpec(Kind.OPTION, *switches, **attrs)


def List(*switches, **attrs):
    """
    Build an accumulating FlagSpec; values split on the delimiter (',' by default).

        List("--tag", key="tags", limit=3)
    """
    return FlagSpec(Kind.LIST, *switches, **attrs)


__all__ = (
    # Types
    "Kind",
    "FlagSpec",
    "Session",

    # Constructors
    "Flag",
    "Switch",
    "Option",
    "List",
)

# Remove the internal metaclass from the module namespace; not part of the public API.
del SpecType
