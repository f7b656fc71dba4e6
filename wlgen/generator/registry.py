"""Mapping from protocol-native names to generated identifiers."""

import logging
from collections.abc import ItemsView

from .types import WlgenError

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "wl_"


class RegistryError(WlgenError):
    """Raised on unknown lookups or conflicting registrations."""


def to_camel_case(name: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Convert a native name such as ``wl_data_device`` to ``DataDevice``.

    The optional namespace prefix is stripped, the name is split on
    underscores, and the first character of every word is upper-cased. The
    remainder of each word is left alone, so already cased identifiers pass
    through unchanged.
    """
    if prefix and name.startswith(prefix):
        name = name[len(prefix) :]

    return "".join(word[:1].upper() + word[1:] for word in name.split("_"))


class IdentifierRegistry:
    """Write-once table of native name -> generated identifier."""

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self.prefix = prefix
        self._names: dict[str, str] = {}
        self._owners: dict[str, str] = {}

    def register(self, native: str) -> str:
        """Case a native name, record the mapping and return the identifier."""
        ident = to_camel_case(native, self.prefix)

        existing = self._names.get(native)
        if existing is not None:
            return existing

        owner = self._owners.get(ident)
        if owner is not None:
            raise RegistryError(f"{native} and {owner} both map to identifier {ident}")

        self._names[native] = ident
        self._owners[ident] = native
        logger.debug("Registered %s as %s", native, ident)
        return ident

    def lookup(self, native: str) -> str:
        """Return the identifier registered for a native name."""
        try:
            return self._names[native]
        except KeyError:
            raise RegistryError(f"{native} was never registered") from None

    def items(self) -> ItemsView[str, str]:
        return self._names.items()

    def __contains__(self, native: object) -> bool:
        return native in self._names

    def __len__(self) -> int:
        return len(self._names)


class GenerationContext:
    """Registries shared by both generation passes.

    Interface names live in their own registry, apart from member names
    (event, request, enum or entry). The identifiers composed from both that
    end up at package scope are claimed through ``declare``.
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self.prefix = prefix
        self.interfaces = IdentifierRegistry(prefix)
        self.members = IdentifierRegistry(prefix)
        self._declared: dict[str, str] = {}

    def declare(self, ident: str, origin: str) -> str:
        """Claim a package level Go identifier on behalf of ``origin``.

        Every generated type, constructor and constant shares one Go package
        scope, so two protocol elements may not produce the same identifier.
        """
        owner = self._declared.get(ident)
        if owner is not None and owner != origin:
            raise RegistryError(f"{origin} and {owner} both declare {ident}")

        self._declared[ident] = origin
        return ident
