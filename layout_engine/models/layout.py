from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class SlotEntry:
    slot: int
    class_name: str
    method: str

    @property
    def label(self) -> str:
        return f"{self.class_name}::{self.method}"


@dataclass
class LayoutResult:
    class_offsets: Dict[str, int]
    method_offsets: Dict[str, int]
    slots: List[SlotEntry]  # ordered by slot
    table_bound: int
    occupancy: float
    density: float
    optimal: bool
    backend: str = ""
    timeout_ms: int = 0
    elapsed_ms: float = 0.0
    upper_bound: int = 0
    empty_classes: List[str] = field(default_factory=list)

    @property
    def top_slot(self) -> int:
        return self.slots[-1].slot if self.slots else 0

    def slot_of(self, class_name: str, method: str) -> int:
        return self.class_offsets[class_name] + self.method_offsets[method]

    def as_dict(self) -> Dict[str, object]:
        return {
            "class_offsets": dict(self.class_offsets),
            "method_offsets": dict(self.method_offsets),
            "table": [
                {"slot": s.slot, "class": s.class_name, "method": s.method} for s in self.slots
            ],
            "table_bound": self.table_bound,
            "occupancy": self.occupancy,
            "density": self.density,
            "optimal": self.optimal,
            "backend": self.backend,
            "timeout_ms": self.timeout_ms,
            "elapsed_ms": round(self.elapsed_ms, 3),
            "empty_classes": list(self.empty_classes),
        }
