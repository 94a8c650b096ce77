"""Per-attempt context handed to requirements and weight expressions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


@dataclass(frozen=True, slots=True)
class LootContext:
    """The acting holder plus named arguments (location, environment, hook, ...)."""

    holder: Any = None
    args: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "LootContext":
        return cls()

    def arg(self, key: str, default: Any = None) -> Any:
        return self.args.get(key, default)

    def has_arg(self, key: str) -> bool:
        return key in self.args

    def with_args(self, **extra: Any) -> "LootContext":
        merged: Dict[str, Any] = dict(self.args)
        merged.update(extra)
        return LootContext(holder=self.holder, args=merged)

    def placeholder_values(self) -> Dict[str, str]:
        """Return the ``{name}`` substitutions available to expressions."""
        values = {key: str(value) for key, value in self.args.items() if value is not None}
        if self.holder is not None:
            values.setdefault("player", str(self.holder))
        return values
