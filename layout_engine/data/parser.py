from __future__ import annotations

import re
from typing import List, Tuple

from ..errors import MalformedInputError
from ..models.program import Program

_COMMENT = re.compile(r"#[^\n]*")
_NAME = re.compile(r"[^\s{};]+")


def _check_name(token: str, kind: str, block: str) -> str:
    if not _NAME.fullmatch(token):
        raise MalformedInputError(f"invalid {kind} name {token!r}", block)
    return token


def parse_blocks(text: str) -> List[Tuple[str, List[str]]]:
    """Split ``Name { m1; m2 }`` blocks into (class name, methods) pairs.

    Whitespace around names is ignored, as are trailing blank text and empty
    method tokens (``{ a; b; }``). Anything else that does not fit the shape,
    a stray ``}`` included, raises MalformedInputError for the offending block.
    """
    text = _COMMENT.sub("", text)
    chunks = text.split("}")
    # Whatever follows the last closing brace must be blank
    tail = chunks.pop()
    if tail.strip():
        raise MalformedInputError("class block is missing its closing '}'", tail)

    out: List[Tuple[str, List[str]]] = []
    for chunk in chunks:
        if not chunk.strip():
            # Every chunk here was closed by a '}', so a blank one is a stray brace
            raise MalformedInputError("class block is missing its opening '{'", chunk + "}")
        parts = chunk.split("{")
        if len(parts) != 2:
            problem = "missing '{'" if len(parts) == 1 else "more than one '{'"
            raise MalformedInputError(f"class block has {problem}", chunk + "}")
        head, body = parts
        name = head.strip()
        if not name:
            raise MalformedInputError("class block has no class name", chunk + "}")
        _check_name(name, "class", chunk + "}")
        methods = [
            _check_name(tok.strip(), "method", chunk + "}") for tok in body.split(";") if tok.strip()
        ]
        out.append((name, methods))
    return out


def parse_program(text: str) -> Program:
    return Program.from_pairs(parse_blocks(text))
