# core/registry.py — Module registry for cross-module services
#
# Modules advertise the interfaces they implement (IMPLEMENTS in their
# manifest) by registering a provider object here during register(). Modules
# that declare REQUIRES fetch those providers at request time.

import logging
from typing import Any

log = logging.getLogger("spoolvault.registry")


class ModuleRegistry:
    """Maps interface names to provider objects and checks REQUIRES declarations."""

    def __init__(self):
        self._providers: dict[str, Any] = {}
        self._declared_requires: list[tuple[str, str]] = []  # (module_id, interface)

    def register_provider(self, interface_name: str, impl: Any) -> None:
        """Register an implementation for the named interface (last writer wins)."""
        existing = self._providers.get(interface_name)
        if existing is not None and type(existing) is not type(impl):
            log.warning(
                f"Interface '{interface_name}' already provided by "
                f"{type(existing).__name__!r}; replacing with {type(impl).__name__!r}"
            )
        self._providers[interface_name] = impl
        log.debug(f"Registered provider for '{interface_name}': {type(impl).__name__}")

    def get_provider(self, interface_name: str) -> Any:
        """Return the provider for an interface, or None when nothing registered it."""
        provider = self._providers.get(interface_name)
        if provider is None:
            log.warning(
                f"No provider registered for interface '{interface_name}'. "
                "Check that the implementing module is loaded."
            )
        return provider

    def record_requires(self, module_id: str, requires: list[str]) -> None:
        for iface in requires:
            if (module_id, iface) not in self._declared_requires:
                self._declared_requires.append((module_id, iface))

    def validate_dependencies(self) -> bool:
        """Log every REQUIRES entry without a provider. Returns True when all are met."""
        missing = [
            (module_id, iface)
            for module_id, iface in self._declared_requires
            if iface not in self._providers
        ]
        for module_id, iface in missing:
            log.error(
                f"Unsatisfied dependency: module '{module_id}' requires "
                f"'{iface}' but no provider is registered."
            )
        if not missing:
            log.info(f"All module dependencies satisfied ({len(self._declared_requires)} checked).")
        return not missing

    @property
    def providers(self) -> dict[str, Any]:
        return dict(self._providers)


registry = ModuleRegistry()
