from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Datum:
    """One bar: a numeric value and the label drawn under it."""

    value: float
    label: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))
        object.__setattr__(self, "label", str(self.label))
