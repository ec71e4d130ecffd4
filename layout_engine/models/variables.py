from dataclasses import dataclass

CLASS = "class"
METHOD = "method"
BOUND = "bound"


@dataclass(frozen=True, order=True)
class VarKey:
    kind: str  # class, method, bound
    name: str

    @property
    def ident(self) -> str:
        # Solver-facing identifier; the kind prefix keeps class m1 apart from method m1
        return f"{self.kind}:{self.name}"


def class_var(name: str) -> VarKey:
    return VarKey(CLASS, name)


def method_var(name: str) -> VarKey:
    return VarKey(METHOD, name)


TABLE_BOUND = VarKey(BOUND, "BOUND")
