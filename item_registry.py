#!/usr/bin/env python3
"""
Item Registry
Read-only lookup of display names and textures for item identifiers
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Protocol

@dataclass
class RegistryEntry:
    identifier: str
    display_name: str
    texture: Optional[str] = None
    mod_id: Optional[str] = None

class ItemRegistry(Protocol):
    """Anything that can resolve an identifier to a display entry"""

    def resolve(self, identifier: str) -> Optional[RegistryEntry]:
        ...

class StaticItemRegistry:
    """Registry backed by an in-memory mapping, optionally loaded from JSON

    The JSON file maps identifiers either to a display name string or to an
    object with `name`/`displayName`, `texture` and `modId` fields.
    """

    def __init__(self, entries: Optional[Dict[str, RegistryEntry]] = None):
        self.entries: Dict[str, RegistryEntry] = dict(entries or {})
        self.logger = logging.getLogger(__name__)

    def __len__(self):
        return len(self.entries)

    def add(self, identifier: str, display_name: str, texture: Optional[str] = None):
        mod_id = identifier.split(":", 1)[0] if ":" in identifier else None
        self.entries[identifier] = RegistryEntry(identifier, display_name, texture, mod_id)

    def resolve(self, identifier: str) -> Optional[RegistryEntry]:
        return self.entries.get(identifier)

    @classmethod
    def from_file(cls, path: Path) -> "StaticItemRegistry":
        """Load a registry; unreadable files give an empty registry"""
        registry = cls()
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            registry.logger.error(f"Failed to load item registry {path}: {e}")
            return registry

        if not isinstance(data, dict):
            registry.logger.error(f"Item registry {path} must be a JSON object")
            return registry

        for identifier, value in data.items():
            if isinstance(value, str):
                registry.add(identifier, value)
            elif isinstance(value, dict):
                name = value.get('displayName') or value.get('name') or identifier
                registry.add(identifier, name, value.get('texture'))
                if value.get('modId'):
                    registry.entries[identifier].mod_id = value['modId']
            else:
                registry.logger.debug(f"Skipping registry entry {identifier}: unsupported value")

        registry.logger.info(f"Loaded {len(registry)} registry entries from {path}")
        return registry
