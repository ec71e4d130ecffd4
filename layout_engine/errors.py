from __future__ import annotations


class LayoutError(Exception):
    """Base class for every error raised while computing a dispatch layout."""


class MalformedInputError(LayoutError):
    def __init__(self, message: str, block: str) -> None:
        super().__init__(f"{message}: {block.strip()!r}")
        self.block = block


class ProgramError(LayoutError):
    pass


class DuplicateClassError(ProgramError):
    def __init__(self, class_name: str) -> None:
        super().__init__(f"class {class_name!r} is declared more than once")
        self.class_name = class_name


class DuplicateMethodError(ProgramError):
    def __init__(self, class_name: str, method: str) -> None:
        super().__init__(f"class {class_name!r} declares method {method!r} more than once")
        self.class_name = class_name
        self.method = method


class UnsatisfiableLayoutError(LayoutError):
    def __init__(self, upper_bound: int, message: str | None = None) -> None:
        super().__init__(message or f"no collision-free layout fits within table bound {upper_bound}")
        self.upper_bound = upper_bound


class LayoutDefectError(UnsatisfiableLayoutError):
    """The guaranteed-feasible witness bound was reported unsatisfiable."""

    def __init__(self, upper_bound: int) -> None:
        super().__init__(
            upper_bound,
            f"solver reported the witness bound {upper_bound} unsatisfiable; "
            "the constraint encoding is broken",
        )


class LayoutTimeoutError(LayoutError):
    """No model was found before the solve budget ran out. Retrying with a larger budget may help."""

    def __init__(self, timeout_ms: int, backend: str) -> None:
        super().__init__(f"{backend}: no layout found within {timeout_ms}ms")
        self.timeout_ms = timeout_ms
        self.backend = backend
