# Re-export common types
from .classdef import ClassDef, Entry
from .layout import LayoutResult, SlotEntry
from .program import Program
from .variables import TABLE_BOUND, VarKey, class_var, method_var

__all__ = [
    "ClassDef",
    "Entry",
    "Program",
    "VarKey",
    "class_var",
    "method_var",
    "TABLE_BOUND",
    "SlotEntry",
    "LayoutResult",
]
