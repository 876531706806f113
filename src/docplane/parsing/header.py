"""Declaration header parser.

Turns ``pro Name, a, b, KEY=key`` (possibly spread over continuation lines)
into the routine's name, kind and ordered argument lists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docplane.config.constants import CONTINUATION_MARKER, DECLARATION_KEYWORDS

if TYPE_CHECKING:
    from docplane.tree.routine import Routine


def parse_header(code: str, routine: Routine, *, first_line: bool) -> None:
    """Parse one comment-stripped declaration line into ``routine``.

    On the first line the introducing keyword and the routine name come
    first. Continuation lines only carry arguments.
    """
    tokens = [token.strip() for token in code.split(",")]
    if first_line and tokens:
        _declare(tokens.pop(0), routine)

    for token in tokens:
        if token.endswith(CONTINUATION_MARKER):
            token = token[: -len(CONTINUATION_MARKER)].strip()
        if not token:
            continue
        if "=" in token:
            routine.add_keyword(token.split("=", 1)[0].strip())
        else:
            routine.add_parameter(token)


def _declare(head: str, routine: Routine) -> None:
    parts = head.split(None, 1)
    if parts and parts[0].lower() in DECLARATION_KEYWORDS:
        routine.is_function = parts[0].lower() == "function"
        parts = parts[1:]
    name = parts[0].strip() if parts else ""
    if name.endswith(CONTINUATION_MARKER):
        name = name[: -len(CONTINUATION_MARKER)].strip()
    routine.name = name

    class_name = routine.class_name
    if class_name is None:
        return
    file = routine.file
    cls = file.session.resolve_class(class_name)
    routine.owning_class = cls
    if routine.is_method:
        cls.methods.append(routine)
    else:
        file.is_class_definition = True
        file.defined_class = cls
        cls.file = file
