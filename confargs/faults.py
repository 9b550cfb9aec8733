"""
confargs faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  (errors and warnings), grouped by domain.
- ParserException / ParserWarning: base types that carry message + options and
  know how to render themselves with rich.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Domains
- declaration (112 0x): raised while building or registering specs.
- scanning (112 1x): raised while parsing argv.
- warnings (122 0x): non-fatal notices.

Integration
- Outside shell mode exceptions are raised and warnings go through warnings.warn.
- In shell mode both are rendered to a stderr rich console; exceptions then exit(1).
"""
import inspect
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - declaration (1120x)
      • INVALID_SWITCH_FORMAT, DUPLICATE_SWITCH, MISSING_LONG_FOR_SWITCH
    - scanning (1121x)
      • UNKNOWN_OPTION, MISSING_VALUE, UNEXPECTED_VALUE, TOO_MANY_VALUES
    - warnings (1220x)
      • SHADOWED_SWITCH
    """
    # --- declaration errors ---
    INVALID_SWITCH_FORMAT   = 11201
    DUPLICATE_SWITCH        = 11202
    MISSING_LONG_FOR_SWITCH = 11203

    # --- scanning errors ---
    UNKNOWN_OPTION          = 11211
    MISSING_VALUE           = 11212
    UNEXPECTED_VALUE        = 11213
    TOO_MANY_VALUES         = 11214

    # --- warnings ---
    SHADOWED_SWITCH         = 12201

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, kind):
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = getattr(main, "__prog__", None) or fault.options.get("prog") or os.path.basename(sys.argv[0])
    code = fault.options.get("code")
    title = fault.options.get("title") or type(fault).__name__

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
        " | ",
        text(title.title(), kind + "-title"),
        " ]"
    )
    message = text(fault.message, kind + "-message")
    renders = [message]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fault.options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class ParserException(Exception):
    """
    base of every fault raised while declaring specs or scanning argv.

    the message is the human sentence; options carry everything else:
    - title/code/hint for rendering,
    - context such as token, switch or spec,
    - runtime flags (shell/fancy/colorful/prog) merged by trigger().
    """
    code = None

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType({"code": type(self).code} | options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        return replica


class InvalidSwitchFormatError(ParserException):
    code = FaultCode.INVALID_SWITCH_FORMAT


class DuplicateSwitchError(ParserException):
    code = FaultCode.DUPLICATE_SWITCH


class MissingLongForSwitchError(ParserException):
    code = FaultCode.MISSING_LONG_FOR_SWITCH


class UnknownOptionError(ParserException):
    code = FaultCode.UNKNOWN_OPTION


class MissingValueError(ParserException):
    code = FaultCode.MISSING_VALUE


class UnexpectedValueError(ParserException):
    code = FaultCode.UNEXPECTED_VALUE


class TooManyValuesError(ParserException):
    code = FaultCode.TOO_MANY_VALUES


class ParserWarning(Warning):
    code = None

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType({"code": type(self).code} | options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedSwitchWarning(ParserWarning):
    code = FaultCode.SHADOWED_SWITCH


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise exceptions
      are raised and warnings are emitted.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    if not options:
        return fault.__trigger__()
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParserException",
    "InvalidSwitchFormatError",
    "DuplicateSwitchError",
    "MissingLongForSwitchError",
    "UnknownOptionError",
    "MissingValueError",
    "UnexpectedValueError",
    "TooManyValuesError",
    "ParserWarning",
    "ShadowedSwitchWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
