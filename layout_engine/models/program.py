from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from ..errors import DuplicateClassError, DuplicateMethodError
from .classdef import ClassDef, Entry


class Program:
    """Read-only view over the parsed classes and the entries they need."""

    def __init__(self, classes: Iterable[ClassDef]):
        self._classes: Dict[str, ClassDef] = {}
        for cd in classes:
            if cd.name in self._classes:
                raise DuplicateClassError(cd.name)
            seen: set[str] = set()
            for m in cd.methods:
                if m in seen:
                    raise DuplicateMethodError(cd.name, m)
                seen.add(m)
            self._classes[cd.name] = cd

        entries: List[Entry] = []
        methods: Dict[str, None] = {}
        for cd in self._classes.values():
            for m in cd.methods:
                entries.append(Entry(cd.name, m))
                methods.setdefault(m, None)
        self._entries: Tuple[Entry, ...] = tuple(entries)
        self._methods: Tuple[str, ...] = tuple(methods)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Sequence[str]]]) -> "Program":
        return cls(ClassDef(name, tuple(methods)) for name, methods in pairs)

    @property
    def classes(self) -> Tuple[ClassDef, ...]:
        return tuple(self._classes.values())

    @property
    def class_names(self) -> Tuple[str, ...]:
        # Only classes that contribute entries get an offset
        return tuple(name for name, cd in self._classes.items() if cd.methods)

    @property
    def empty_classes(self) -> Tuple[str, ...]:
        return tuple(name for name, cd in self._classes.items() if not cd.methods)

    @property
    def method_names(self) -> Tuple[str, ...]:
        return self._methods

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self._entries

    def class_def(self, name: str) -> ClassDef:
        return self._classes[name]

    def __repr__(self) -> str:
        return (
            f"Program(classes={len(self.class_names)}, methods={len(self._methods)}, "
            f"entries={len(self._entries)})"
        )
