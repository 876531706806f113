"""Positional parameters and keywords of a routine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from docplane.tree.base import DocEntity, VariableSource

if TYPE_CHECKING:
    from docplane.tree.routine import Routine


@dataclass(eq=False)
class Argument(DocEntity):
    """A parameter (``is_keyword=False``) or keyword of a routine."""

    routine: Routine = field(repr=False)
    name: str
    is_keyword: bool = False
    comments: list[str] = field(default_factory=list)
    is_input: bool = False
    is_output: bool = False
    is_optional: bool = False
    is_required: bool = False
    is_hidden: bool = False
    is_private: bool = False
    is_obsolete: bool = False
    type: str = ""
    default: str = ""

    index_type = "argument"

    @property
    def index_name(self) -> str:
        return self.name

    @property
    def is_first(self) -> bool:
        visible = self.routine.visible_arguments()
        return bool(visible) and visible[0] is self

    @property
    def is_last(self) -> bool:
        visible = self.routine.visible_arguments()
        return bool(visible) and visible[-1] is self

    def add_comments(self, lines: list[str]) -> None:
        if self.comments and any(line.strip() for line in lines):
            self.comments.append("")
        self.comments.extend(lines)
        if self.is_keyword:
            self.routine.seed_property_comments(self)

    def has_comments(self) -> bool:
        return any(line.strip() for line in self.comments)

    def set_attribute(self, name: str, value: str | None = None) -> bool:
        """Apply a ``{name}`` or ``{name=value}`` attribute. False if unknown."""
        name = name.strip().lower()
        flags = {
            "in": "is_input",
            "out": "is_output",
            "optional": "is_optional",
            "required": "is_required",
            "hidden": "is_hidden",
            "private": "is_private",
            "obsolete": "is_obsolete",
        }
        if name in flags and value is None:
            setattr(self, flags[name], True)
            return True
        if name in ("type", "default") and value is not None:
            setattr(self, name, value.strip())
            return True
        return False

    def is_visible(self) -> bool:
        if self.is_hidden:
            return False
        if self.is_private and self.routine.file.session.user_level:
            return False
        return self.routine.is_visible()

    def _variables(self) -> dict[str, Callable[[], Any]]:
        return {
            "name": lambda: self.name,
            "is_keyword": lambda: self.is_keyword,
            "is_first": lambda: self.is_first,
            "is_last": lambda: self.is_last,
            "is_input": lambda: self.is_input,
            "is_output": lambda: self.is_output,
            "is_optional": lambda: self.is_optional,
            "is_required": lambda: self.is_required,
            "is_obsolete": lambda: self.is_obsolete,
            "is_private": lambda: self.is_private,
            "is_hidden": lambda: self.is_hidden,
            "type": lambda: self.type,
            "default": lambda: self.default,
            "has_comments": self.has_comments,
            "comments": lambda: self.routine.file.markup.parse(self.comments),
        }

    def _variable_delegate(self) -> VariableSource | None:
        return self.routine
