from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ClassDef:
    name: str
    methods: Tuple[str, ...]


@dataclass(frozen=True)
class Entry:
    class_name: str
    method: str
