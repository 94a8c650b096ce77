"""Repository building the conditional group tree from loot condition sections."""
from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Tuple

from fishloot.data.errors import ConfigurationReferenceError, CyclicGroupError, DataValidationError
from fishloot.data.repositories.base import RepositoryBase
from fishloot.data.repositories.loot_repo import LootRepository
from fishloot.domain.conditional import ConditionalElement, WeightRule
from fishloot.domain.requirements import (
    ArgEqualsRequirement,
    ArgInRequirement,
    ArgRangeRequirement,
    ConstantRequirement,
    HasArgRequirement,
    Requirement,
)
from fishloot.domain.targets import LootTarget, parse_target
from fishloot.domain.weights import parse_weight

logger = logging.getLogger(__name__)

RequirementFactory = Callable[[Mapping[str, object], str], Requirement]

_NODE_KEYS = {"conditions", "list", "sub-groups"}


def _param(params: Mapping[str, object], key: str, context: str) -> object:
    if key not in params:
        raise DataValidationError(f"{context} is missing '{key}'.")
    return params[key]


def _arg_name(params: Mapping[str, object], context: str) -> str:
    arg = _param(params, "arg", context)
    if not isinstance(arg, str) or not arg:
        raise DataValidationError(f"{context}.arg must be a non-empty string.")
    return arg


def _values(params: Mapping[str, object], context: str) -> Tuple[object, ...]:
    values = _param(params, "values", context)
    if not isinstance(values, list):
        raise DataValidationError(f"{context}.values must be a list.")
    return tuple(values)


def _optional_number(params: Mapping[str, object], key: str, context: str) -> float | None:
    value = params.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DataValidationError(f"{context}.{key} must be a number.")
    return float(value)


def _build_range(params: Mapping[str, object], context: str) -> Requirement:
    minimum = _optional_number(params, "min", context)
    maximum = _optional_number(params, "max", context)
    if minimum is not None and maximum is not None and minimum > maximum:
        raise DataValidationError(f"{context} has min greater than max.")
    return ArgRangeRequirement(_arg_name(params, context), minimum, maximum)


BUILTIN_REQUIREMENTS: Dict[str, RequirementFactory] = {
    "always": lambda params, context: ConstantRequirement(True),
    "never": lambda params, context: ConstantRequirement(False),
    "equals": lambda params, context: ArgEqualsRequirement(
        _arg_name(params, context), _param(params, "value", context)
    ),
    "in": lambda params, context: ArgInRequirement(_arg_name(params, context), _values(params, context)),
    "not-in": lambda params, context: ArgInRequirement(
        _arg_name(params, context), _values(params, context), negate=True
    ),
    "range": _build_range,
    "has-arg": lambda params, context: HasArgRequirement(_arg_name(params, context)),
}


class LootConditionsRepository(RepositoryBase[ConditionalElement]):
    """Loads the top-level groups of the loot condition tree.

    Each group section may declare ``conditions`` (requirements, evaluated in
    order), ``list`` (``"target:weight"`` rules) and ``sub-groups``. Rules
    naming an unknown loot, or a malformed combination, are logged and
    skipped; structural problems raise DataValidationError.
    """

    def __init__(
        self,
        loot_repo: LootRepository,
        requirement_factories: Mapping[str, RequirementFactory] | None = None,
        base_path: Path | str | None = None,
        sections: object | None = None,
    ) -> None:
        super().__init__("loot_conditions.json", base_path, sections)
        self._loot_repo = loot_repo
        self._factories: Dict[str, RequirementFactory] = dict(BUILTIN_REQUIREMENTS)
        if requirement_factories:
            self._factories.update(requirement_factories)

    def _build(self, raw: object) -> Dict[str, ConditionalElement]:
        root = self._require_mapping(raw, "loot_conditions")
        return {
            group_id: self._build_node(section, f"loot_conditions.{group_id}", (id(root),))
            for group_id, section in root.items()
        }

    def _build_node(
        self, section: object, context: str, ancestors: Tuple[int, ...]
    ) -> ConditionalElement:
        if id(section) in ancestors:
            raise CyclicGroupError(f"{context} contains itself.")
        node_map = self._require_mapping(section, context)
        unknown = set(node_map) - _NODE_KEYS
        if unknown:
            raise DataValidationError(f"{context} has unknown keys: {sorted(unknown)}")

        requirements = tuple(
            self._build_requirement(entry, f"{context}.conditions[{index}]")
            for index, entry in enumerate(self._require_list(node_map.get("conditions", []), f"{context}.conditions"))
        )

        rules: List[WeightRule] = []
        for index, entry in enumerate(self._require_list(node_map.get("list", []), f"{context}.list")):
            rule_context = f"{context}.list[{index}]"
            try:
                rules.append(self._build_rule(entry, rule_context))
            except ConfigurationReferenceError as exc:
                logger.warning("Skipping rule %s: %s", rule_context, exc)

        children_map = self._require_mapping(node_map.get("sub-groups", {}), f"{context}.sub-groups")
        child_ancestors = ancestors + (id(section),)
        children = {
            child_id: self._build_node(child, f"{context}.{child_id}", child_ancestors)
            for child_id, child in children_map.items()
        }
        return ConditionalElement(
            requirements=requirements,
            element=tuple(rules),
            children=MappingProxyType(children),
        )

    def _build_rule(self, entry: object, context: str) -> WeightRule:
        if isinstance(entry, str):
            target_text, separator, weight_raw = entry.rpartition(":")
            if not separator:
                raise DataValidationError(f"{context} must look like 'target:weight'.")
        elif isinstance(entry, dict):
            target_text = self._require_str(entry.get("target"), f"{context}.target")
            weight_raw = entry.get("weight")
        else:
            raise DataValidationError(f"{context} must be a string or an object.")

        try:
            operation = parse_weight(weight_raw)
        except ValueError as exc:
            raise DataValidationError(f"{context}: {exc}") from exc
        try:
            target = parse_target(target_text)
        except ValueError as exc:
            raise ConfigurationReferenceError(str(exc)) from exc
        if isinstance(target, LootTarget) and target.loot_id not in self._loot_repo:
            raise ConfigurationReferenceError(f"Unknown loot id '{target.loot_id}'.")
        return WeightRule(target=target, operation=operation)

    def _build_requirement(self, entry: object, context: str) -> Requirement:
        params = self._require_mapping(entry, context)
        kind = self._require_str(params.get("type"), f"{context}.type")
        factory = self._factories.get(kind)
        if factory is None:
            logger.warning("Unknown requirement type '%s' at %s; the group stays closed.", kind, context)
            return ConstantRequirement(False)
        return factory(params, context)
