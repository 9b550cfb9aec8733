"""
confargs parser: register option specs and scan argv into a config mapping.

What this module provides
- Parser: owns a Registry and a config mapping, and scans argument lists.
  • Declaration: on(), on_override(), add(), handle(), register(), separator().
  • Scanning: scan() (the control loop), parse() (non-destructive),
    parse_inplace() (replaces argv's contents with the result).
  • Help: format_help(), print_help(), __str__ and __rich__.

Scanning rules
- Defaults are written at the start of every pass (assign_defaults=True).
- Tokens that are not strings, or do not look like '-x', are plain arguments.
- The option break ('--' by default, a string or a compiled pattern) stops
  option processing; everything after it is returned untouched. Only
  option-shaped tokens can break: a break like 'stop' is a plain argument.
- An option token resolves as: the token itself; then '--name=value' split on
  the first '='; then compact short syntax '-xvalue' (only without '=' and
  only for single-dash tokens).
- A compact remainder after a flag or switch is pushed back as a new short:
  '-xy' means '-x -y', while '-yxVAL' gives the value 'xVAL' to a valued '-y'.

Quick start
    from confargs import Parser

    parser = Parser()
    parser.on("-v", "--verbose", "more output", key="verbose")
    parser.add("output", "out.txt", "-o", "--output FILE", "where to write")
    parser.on("--[no-]color", key="color")

    args = parser.parse("-v --output=build.txt --no-color src")
    # args == ["src"]
    # parser.config == {"verbose": True, "output": "build.txt", "color": False}

Shell mode
- Parser(shell=True) renders parse faults to stderr (help first), then exits
  with status 1. Exceptions raised by callbacks always propagate unchanged.
"""
import difflib
import re
import shlex
import sys

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from . import display
from .attributes import build
from .faults import *
from .flags import Kind, Session
from .grammar import OPTION_BREAK, is_option
from .registry import Registry
from .utils import *


class Parser:
    """
    Declarative option parser writing parsed values into a config mapping.

    Options (constructor)
    - config: the mapping receiving values (a new dict when None).
    - option_break: str | re.Pattern; the token that stops option scanning.
    - preserve_option_break: keep the break token at the head of the remainder.
    - assign_defaults: write every spec's default at the start of each pass.
    - shell: render faults and exit(1) instead of raising.
    - colorful / fancy: styling of rendered help and faults.
    - prog: program name shown in fault headers.
    """

    def __init__(
            self,
            config=None,
            /,
            *,
            option_break=OPTION_BREAK,
            preserve_option_break=False,
            assign_defaults=True,
            shell=False,
            colorful=True,
            fancy=False,
            prog=None
    ):
        if config is None:
            config = {}
        if not isinstance(option_break, (str, re.Pattern)):
            raise TypeError("option_break must be a string or a compiled pattern")
        self.config = config
        self.option_break = option_break
        self.preserve_option_break = bool(preserve_option_break)
        self.assign_defaults = bool(assign_defaults)
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self.prog = prog
        self.registry = Registry()
        self._stderr = False

    # --- config access ---

    def __getitem__(self, key):
        return self.config.get(key)

    def __setitem__(self, key, value):
        self.config[key] = value

    # --- declaration ---

    def register(self, spec, /, override=False):
        return self.registry.register(spec, override, **self._options())

    def unregister(self, spec, /):
        return self.registry.unregister(spec)

    def lookup(self, switch, /):
        return self.registry.lookup(switch)

    def separator(self, text, /):
        """Add a display-only line of text between specs."""
        return self.registry.separator(text)

    def sort(self, key=None):
        """Sort specs between separators (by long, else short, unless key is given)."""
        self.registry.sort(key)
        return self

    def remove(self, key, /):
        """Unregister every spec assigning to key; returns them."""
        return self.registry.remove(key)

    def on(self, *args, **attrs):
        """
        Build a spec from declaration strings and attributes, register it and
        return it.

            parser.on("-s", "--long ARG", "description", key="long")
            parser.on("--list A,B,C", key="list")         # a list
            parser.on("--[no-]switch", key="switch")      # a switch
            parser.on("-k", "description", long="--key", kind="list")

        Explicit attributes win over whatever the strings imply.
        """
        return self.register(build(args, attrs))

    def on_override(self, *args, **attrs):
        """Same as on(), but specs with overlapping switches are removed."""
        return self.register(build(args, attrs), override=True)

    def add(self, key, default=None, /, *args, **attrs):
        """
        Same as on(), with key and default given first. These are equivalent:

            parser.add("opt", "value", "-s", "--long", descr="description")
            parser.on("-s", "--long", descr="description", key="opt", default="value")
        """
        return self.on(*args, **(attrs | {"key": key, "default": default}))

    def handle(self, *args, **attrs):
        """
        Decorator form of on(): the decorated function becomes the callback.

            @parser.handle("--level N", key="level")
            def level(value):
                return int(value)
        """
        def wrapper(callback):
            self.on(*args, **(attrs | {"callback": callback}))
            return callback

        return rename(wrapper, "handle")

    # --- scanning ---

    def scan(self, argv, emit, /):
        """
        Consume argv in place, passing each plain argument to emit.

        Returns the remainder left after the option break (including the break
        itself when preserve_option_break is set).
        """
        session = Session()
        if self.assign_defaults:
            for spec in self.registry.specs:
                spec.assign_default(self.config, session)

        while argv:
            token = argv.pop(0)

            if not is_option(token):
                emit(token)
                continue

            if self._is_break(token):
                if self.preserve_option_break:
                    argv.insert(0, token)
                break

            spec, switch, value, compact = self._resolve_token(token)

            if compact and spec.kind in (Kind.FLAG, Kind.SWITCH):
                argv.insert(0, "-" + value)
                value = None

            spec.consume(switch, value, argv, self.config, session)

        return argv

    def parse(self, argv=None, /):
        """
        Parse a copy of argv (sys.argv[1:] when None; strings are split with
        shlex) and return the plain arguments followed by the remainder.
        """
        if argv is None:
            argv = sys.argv[1:]
        if isinstance(argv, str):
            argv = shlex.split(argv)
        return self._parse(list(argv))

    def parse_inplace(self, argv, /):
        """Same as parse(), but replaces the contents of the list argv with the result."""
        if isinstance(argv, str):
            return self._parse(shlex.split(argv))
        argv[:] = self._parse(list(argv))
        return argv

    def _parse(self, argv):
        arguments = []
        try:
            remainder = self.scan(argv, arguments.append)
        except ParserException as fault:
            if not self.shell:
                raise
            self.trigger(fault)
            raise
        return arguments + remainder

    def _is_break(self, token):
        if isinstance(self.option_break, re.Pattern):
            return self.option_break.fullmatch(token) is not None
        return token == self.option_break

    def _resolve_token(self, token):
        r"""
        resolve an option token into (spec, switch, value, compact).

        attempts, in order
        - the token verbatim:                '--name', '-n'         → value None
        - split on the first '=':            '--name=v', '-n='      → value 'v', ''
        - compact short (no '=', one dash):  '-nvalue'              → value 'value'

        the compact flag tells the caller that value is the rest of a short run,
        which flags and switches push back as a new short instead of rejecting.
        unresolved tokens raise UnknownOptionError naming the switch part, with
        the full token and close matches in its options.
        """
        if spec := self.registry.lookup(token):
            return spec, token, None, False

        switch, equals, value = token.partition("=")
        if equals:
            if spec := self.registry.lookup(switch):
                return spec, switch, value, False
        elif token[1] != "-" and len(token) > 2:
            if spec := self.registry.lookup(token[:2]):
                return spec, token[:2], token[2:], True

        suggestions = difflib.get_close_matches(switch, self.registry.switches.keys(), 5)
        if suggestions:
            hint = "did you mean %r? see the help for all options" % suggestions[0]
        else:
            hint = "see the help for all available options"
        raise UnknownOptionError(
            "unknown option: %s" % switch,
            title="unknown option",
            hint=hint,
            token=token,
            switch=switch,
            suggestions=suggestions,
        )

    # --- faults ---

    def _options(self):
        return {"shell": self.shell, "fancy": self.fancy, "colorful": self.colorful, "prog": self.prog}

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options.

        In shell mode the help is printed to stderr first, then the fault is
        rendered and the process exits with status 1; otherwise the fault is
        raised (or warned, for warnings).
        """
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        if self.shell and isinstance(fault, ParserException):
            self._stderr = True
            try:
                self.print_help()
            finally:
                self._stderr = False
        trigger(fault, **(options | self._options()))

    # --- help ---

    def format_help(self, width=80):
        """Plain fixed-width help text for every entry, newline-terminated."""
        return display.format_entries(self.registry.entries, width)

    def __str__(self):
        return self.format_help()

    def __rich__(self):
        renderable = display.render(self.registry.entries, colorful=self.colorful)
        if not self.fancy:
            return renderable
        title = None
        if self.prog:
            style = display.styler(self.colorful)
            title = Text.assemble("[", " ", f"{self.prog} OPTIONS".upper(), " ", "]", style=style("group-label"))
        return Panel(renderable, title=title, title_align="left")

    def print_help(self):
        Console(stderr=self._stderr).print(self)


__all__ = (
    "Parser",
)
