"""
confargs registry: ordered FlagSpec entries plus the switch lookup table.

- entries keep registration order (and interleaved separators) for display.
- switches maps every switch string ('--name', '--no-name', '-n') to the one
  spec that owns it; several strings may point at the same spec.
- conflicts are checked before anything changes, so a failed register leaves
  the registry untouched.
"""
from types import MappingProxyType

from .faults import DuplicateSwitchError, ShadowedSwitchWarning, trigger
from .flags import FlagSpec


class Separator:
    """A display-only line of text interleaved between registered specs."""
    __slots__ = ("text",)

    def __init__(self, text, /):
        if not isinstance(text, str):
            raise TypeError("separator text must be a string")
        self.text = text

    def __str__(self):
        return self.text

    def __repr__(self):
        return "separator(%r)" % self.text


class Registry:
    """
    Owns the registered specs and the switch-string lookup table.

        >>> registry = Registry()
        >>> spec = registry.register(Option("--opt"))
        >>> registry.lookup("--opt") is spec
        True
    """

    def __init__(self):
        self._entries = []
        self._switches = {}

    @property
    def entries(self):
        """Specs and separators, in registration order."""
        return tuple(self._entries)

    @property
    def switches(self):
        """Read-only view of the switch string to spec mapping."""
        return MappingProxyType(self._switches)

    @property
    def specs(self):
        """Registered specs (without separators), in registration order."""
        return tuple(entry for entry in self._entries if isinstance(entry, FlagSpec))

    def lookup(self, switch, /):
        return self._switches.get(switch)

    def conflicts(self, spec, /):
        """Specs other than spec that own one of spec's switch strings (first-seen order)."""
        conflicts = []
        for switch in spec.switches:
            current = self._switches.get(switch)
            if current is not None and current is not spec and current not in conflicts:
                conflicts.append(current)
        return conflicts

    def register(self, spec, /, override=False, **options):
        """
        Register spec and map each of its switch strings to it. Returns spec.

        Without override a switch already owned by a different spec raises
        DuplicateSwitchError. With override, every conflicting spec is fully
        unregistered first and a ShadowedSwitchWarning is emitted.
        Registering the same instance twice is a no-op. options (shell, fancy,
        colorful) are forwarded to trigger() with the warning.
        """
        if not isinstance(spec, FlagSpec):
            raise TypeError("register() argument must be a flag spec")

        if conflicts := self.conflicts(spec):
            if not override:
                switch = next(switch for switch in spec.switches if self._switches.get(switch) in conflicts)
                raise DuplicateSwitchError(
                    "switch is already mapped to a different option: %s" % switch,
                    title="duplicate switch",
                    hint="rename the switch or register with override",
                    switch=switch,
                    spec=spec,
                    existing=self._switches[switch],
                )
            for conflict in conflicts:
                self.unregister(conflict)
            trigger(ShadowedSwitchWarning(
                "%d option(s) shadowed by %s" % (len(conflicts), ", ".join(spec.switches)),
                title="shadowed switch",
                spec=spec,
                shadowed=tuple(conflicts),
            ), **options)

        if not any(entry is spec for entry in self._entries):
            self._entries.append(spec)
        for switch in spec.switches:
            self._switches[switch] = spec
        return spec

    def unregister(self, spec, /):
        """Remove spec from the entries and drop every switch pointing at it. Returns spec."""
        self._entries = [entry for entry in self._entries if entry is not spec]
        for switch in [switch for switch, current in self._switches.items() if current is spec]:
            del self._switches[switch]
        return spec

    def remove(self, key, /):
        """Unregister every spec with the given key; returns the removed specs."""
        return [self.unregister(spec) for spec in self.specs if spec.key == key]

    def separator(self, text, /):
        separator = Separator(text)
        self._entries.append(separator)
        return separator

    def sort(self, key=None):
        """
        Sort the specs of each run between separators independently.

        The default key is the long switch, or the short one without a long.
        """
        if key is None:
            def key(spec):
                return spec.long or spec.short or ""

        entries, run = [], []
        for entry in self._entries:
            if isinstance(entry, FlagSpec):
                run.append(entry)
                continue
            entries.extend(sorted(run, key=key))
            entries.append(entry)
            run = []
        entries.extend(sorted(run, key=key))
        self._entries = entries
        return self

    def __contains__(self, object, /):
        if isinstance(object, str):
            return object in self._switches
        return any(entry is object for entry in self._entries)

    def __iter__(self):
        return iter(self.specs)

    def __len__(self):
        return len(self.specs)


__all__ = (
    "Separator",
    "Registry",
)
