"""Repository for loot definitions."""
from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Dict

from fishloot.data.errors import DataValidationError, DuplicateLootError
from fishloot.data.repositories.base import RepositoryBase
from fishloot.domain.defs import LootDef, LootType

_FLAG_FIELDS = {
    "instant-game": "instant_game",
    "disable-game": "disable_game",
    "disable-stats": "disable_stats",
    "show-in-finder": "show_in_finder",
    "prevent-grabbing": "prevent_grabbing",
    "to-inventory": "to_inventory",
}


class LootRepository(RepositoryBase[LootDef]):
    """Loads loot definitions.

    The raw data is either one ``id -> section`` object or a list of them
    (one per source file). Loot ids must be unique across all of them.
    Keys describing item appearance are not modelled here and are ignored.
    """

    def __init__(self, base_path: Path | str | None = None, sections: object | None = None) -> None:
        super().__init__("loots.json", base_path, sections)

    def _get_file_path(self) -> Path:
        """Prefer a ``loots/`` directory of per-file sections over ``loots.json``."""
        directory = super()._get_file_path().with_suffix("")
        if directory.is_dir():
            return directory
        return super()._get_file_path()

    def _build(self, raw: object) -> Dict[str, LootDef]:
        documents = raw if isinstance(raw, list) else [raw]
        loots: Dict[str, LootDef] = {}
        for doc_index, document in enumerate(documents):
            doc_context = "loots" if len(documents) == 1 else f"loots[{doc_index}]"
            doc_map = self._require_mapping(document, doc_context)
            for loot_id, entry in doc_map.items():
                context = f"{doc_context}.{loot_id}"
                if loot_id in loots:
                    raise DuplicateLootError(f"Duplicate loot id '{loot_id}' in {doc_context}.")
                loots[loot_id] = self._build_loot(loot_id, entry, context)
        return loots

    def _build_loot(self, loot_id: str, entry: object, context: str) -> LootDef:
        self._require_str(loot_id, f"{context} id")
        loot_map = self._require_mapping(entry, context)
        loot_type = self._require_loot_type(loot_map.get("type", LootType.ITEM.value), f"{context}.type")
        groups = tuple(self._require_str_list(loot_map.get("groups"), f"{context}.groups"))
        nick = loot_map.get("nick", loot_id)
        if not isinstance(nick, str):
            raise DataValidationError(f"{context}.nick must be a string.")
        lore = tuple(self._require_str_list(loot_map.get("lore"), f"{context}.lore"))
        score = self._require_float(loot_map.get("score", 0), f"{context}.score")
        flags = {
            attribute: self._require_bool(loot_map[key], f"{context}.{key}")
            for key, attribute in _FLAG_FIELDS.items()
            if key in loot_map
        }
        custom_raw = self._require_mapping(loot_map.get("custom-data", {}), f"{context}.custom-data")
        custom_data = MappingProxyType({str(key): str(value) for key, value in custom_raw.items()})
        return LootDef(
            id=loot_id,
            type=loot_type,
            groups=groups,
            nick=nick,
            lore=lore,
            score=score,
            custom_data=custom_data,
            **flags,
        )

    @staticmethod
    def _require_loot_type(value: object, context: str) -> LootType:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        try:
            return LootType(value.strip().upper())
        except ValueError as exc:
            allowed = ", ".join(member.value for member in LootType)
            raise DataValidationError(f"{context} must be one of: {allowed}.") from exc
