"""
Block type registry.

A ``BlockRegistry`` is an ordinary object created by the host at startup and
passed to whatever builds pipelines. Registration returns a handle that can
undo it; there is no process-wide catalog.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from tscore.block_loader import load_blocks
from tscore.instance import BlockInstance
from tsblocks.base_block import TsBlock

logger = logging.getLogger(__name__)

PACKAGE = "tsblocks"


@dataclass(frozen=True)
class RegistryEntry:
    """Manifest of one registered block type."""
    identifier: str
    name: str
    description: str
    category: str
    package: str
    block_class: Type[TsBlock]


class RegistryHandle:
    """Proof of one registration; ``unregister()`` removes it again."""

    def __init__(self, registry: "BlockRegistry", entry: RegistryEntry):
        self.registry = registry
        self.entry = entry

    @property
    def active(self) -> bool:
        return self.registry._entries.get(self.entry.identifier) is self.entry

    def unregister(self) -> bool:
        """Remove the entry if it is still the registered one."""
        if not self.active:
            return False
        del self.registry._entries[self.entry.identifier]
        logger.debug(f"Unregistered {self.entry.identifier}")
        return True

    def __repr__(self):
        return f"RegistryHandle({self.entry.identifier!r}, active={self.active})"


class BlockRegistry:
    """Catalog of available block types, keyed by identifier."""

    def __init__(self):
        self._entries: Dict[str, RegistryEntry] = {}

    def register(self,
                 block_class: Type[TsBlock],
                 identifier: Optional[str] = None,
                 name: Optional[str] = None,
                 description: Optional[str] = None,
                 category: Optional[str] = None,
                 package: str = PACKAGE,
                 overwrite: bool = False) -> RegistryHandle:
        """
        Register a block type.

        Manifest fields default to what the block class declares.

        Raises:
            ValueError: if the identifier is taken and ``overwrite`` is False
        """
        block = block_class()
        entry = RegistryEntry(
            identifier=identifier or block.identifier,
            name=name or block.block_name,
            description=description or block.doc.split("\n", 1)[0],
            category=category or block.category,
            package=package,
            block_class=block_class,
        )
        if entry.identifier in self._entries and not overwrite:
            raise ValueError(f"Block '{entry.identifier}' is already registered")
        self._entries[entry.identifier] = entry
        logger.debug(f"Registered {entry.identifier} ({entry.category})")
        return RegistryHandle(self, entry)

    def get(self, identifier: str) -> RegistryEntry:
        if identifier not in self._entries:
            raise KeyError(f"Unknown block '{identifier}'")
        return self._entries[identifier]

    def entries(self, category: Optional[str] = None) -> List[RegistryEntry]:
        return [e for e in self._entries.values() if category is None or e.category == category]

    def identifiers(self) -> List[str]:
        return list(self._entries)

    def create_block(self, identifier: str) -> TsBlock:
        return self.get(identifier).block_class()

    def construct(self, identifier: str, name: Optional[str] = None, **options: Any) -> BlockInstance:
        """
        Create a block instance; unspecified options take their defaults.

        Raises:
            KeyError: if the identifier is not registered
            InvalidOptionError: if an option is unknown or out of domain
        """
        return BlockInstance(self.create_block(identifier), options, name=name)

    def __contains__(self, identifier):
        return identifier in self._entries

    def __len__(self):
        return len(self._entries)


def register_ts_blocks(registry: BlockRegistry) -> List[RegistryHandle]:
    """Register every block type found in the tsblocks package."""
    handles = [registry.register(block_class) for block_class in load_blocks()]
    logger.info(f"Registered {len(handles)} time series blocks")
    return handles
