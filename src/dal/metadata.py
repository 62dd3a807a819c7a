"""Registry mapping content-type uids to their physical tables."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from schema import ContentTypeDef

logger = logging.getLogger(__name__)


class ContentTypeRegistry:
    """Holds content-type and component metadata for cascade resolution."""

    def __init__(self, definitions: Optional[Iterable[ContentTypeDef]] = None) -> None:
        """Initialize the registry with optional definitions."""
        self._types: Dict[str, ContentTypeDef] = {}
        for definition in definitions or ():
            self.register(definition)

    def register(self, definition: ContentTypeDef) -> ContentTypeDef:
        """Add or replace a definition."""
        if definition.uid in self._types:
            logger.debug("Replacing content type definition for %s", definition.uid)
        self._types[definition.uid] = definition
        return definition

    def get(self, uid: str) -> ContentTypeDef:
        """Return the definition for ``uid``.

        Raises:
            KeyError: If the uid was never registered.
        """
        try:
            return self._types[uid]
        except KeyError:
            raise KeyError(f"Unknown content type '{uid}'") from None

    def table_name(self, uid: str) -> str:
        return self.get(uid).table_name

    def __contains__(self, uid: object) -> bool:
        return uid in self._types

    def uids(self) -> List[str]:
        return sorted(self._types)

    def validate(self) -> None:
        """Check that every component reference resolves to a registered component.

        Raises:
            ValueError: On dangling or non-component references.
        """
        for definition in self._types.values():
            for name, attr in definition.child_attributes().items():
                targets = [attr.component] if attr.is_component else attr.components
                for target in targets:
                    target_def = self._types.get(target)
                    if target_def is None:
                        raise ValueError(
                            f"{definition.uid}.{name} references unknown component '{target}'"
                        )
                    if target_def.kind != "component":
                        raise ValueError(
                            f"{definition.uid}.{name} references '{target}', "
                            f"which is a {target_def.kind}, not a component"
                        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ContentTypeRegistry":
        """Build a registry from ``{"contentTypes": [...], "components": [...]}``."""
        definitions = [ContentTypeDef(**item) for item in data.get("contentTypes", [])]
        definitions += [
            ContentTypeDef(**{"kind": "component", **item}) for item in data.get("components", [])
        ]
        registry = cls(definitions)
        registry.validate()
        return registry

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ContentTypeRegistry":
        """Load a registry from a JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_mapping(json.load(f))
