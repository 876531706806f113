"""Procedures and functions, free routines and methods."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from docplane.config.constants import (
    CLASS_DEFINE_SUFFIX,
    EXTRA_KEYWORDS,
    GETTER_SUFFIX,
    INIT_SUFFIX,
    METHOD_SEPARATOR,
    SETTER_SUFFIX,
)
from docplane.core.errors import InternalError
from docplane.tree.argument import Argument
from docplane.tree.base import DocEntity, VariableSource
from docplane.tree.docs import DocText

if TYPE_CHECKING:
    from docplane.tree.classes import ClassEntity
    from docplane.tree.file import SourceFile


class DocumentationLevel(str, Enum):
    """How completely a routine is documented."""

    UNDOCUMENTED = "undocumented"
    PARTIAL = "partial"
    FULL = "full"


class AccessorKind(str, Enum):
    """Accessor convention matched by a method name."""

    INIT = "init"
    GETTER = "getter"
    SETTER = "setter"


@dataclass(eq=False)
class Routine(DocEntity):
    """A routine declared in a source file.

    The name is assigned once, by the header parser, and is registered in the
    index at that moment.
    """

    file: SourceFile = field(repr=False)
    _name: str | None = field(default=None, repr=False)
    is_function: bool = False
    is_method: bool = False
    is_abstract: bool = False
    is_obsolete: bool = False
    is_hidden: bool = False
    is_private: bool = False
    parameters: list[Argument] = field(default_factory=list)
    keywords: list[Argument] = field(default_factory=list)
    docs: DocText = field(default_factory=DocText)
    level: DocumentationLevel | None = None
    start_line: int = 0
    n_lines: int = 0
    owning_class: ClassEntity | None = field(default=None, repr=False)

    index_type = "routine"

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name or ""

    @name.setter
    def name(self, value: str) -> None:
        if self._name is not None:
            raise InternalError.unexpected(
                "routine name already set", old=self._name, new=value
            )
        self._name = value
        self.is_method = METHOD_SEPARATOR in value
        self.file.session.create_index_entry(value, self)

    @property
    def index_name(self) -> str:
        return self.name

    @property
    def class_name(self) -> str | None:
        """Class part of a method name, or of a ``<class>__define`` routine."""
        if self.is_method:
            return self.name.split(METHOD_SEPARATOR, 1)[0]
        if self.is_class_define:
            return self.name[: -len(CLASS_DEFINE_SUFFIX)]
        return None

    @property
    def method_name(self) -> str:
        if self.is_method:
            return self.name.split(METHOD_SEPARATOR, 1)[1]
        return self.name

    @property
    def is_class_define(self) -> bool:
        lower = self.name.lower()
        return (
            not self.is_method
            and len(lower) > len(CLASS_DEFINE_SUFFIX)
            and lower.endswith(CLASS_DEFINE_SUFFIX)
        )

    @property
    def accessor_kind(self) -> AccessorKind | None:
        if not self.is_method:
            return None
        lower = self.name.lower()
        if lower.endswith(GETTER_SUFFIX):
            return AccessorKind.GETTER
        if lower.endswith(SETTER_SUFFIX):
            return AccessorKind.SETTER
        if lower.endswith(INIT_SUFFIX):
            return AccessorKind.INIT
        return None

    # ------------------------------------------------------------------
    # Arguments
    # ------------------------------------------------------------------

    def add_parameter(self, name: str) -> Argument:
        param = Argument(routine=self, name=name)
        self.parameters.append(param)
        return param

    def add_keyword(self, name: str) -> Argument:
        keyword = Argument(routine=self, name=name, is_keyword=True)
        self.keywords.append(keyword)
        if self.owning_class is not None and name.lower() not in EXTRA_KEYWORDS:
            self.file.session.promote_keyword_to_property(self, name)
        return keyword

    def get_argument(self, name: str, *, keyword: bool | None = None) -> Argument | None:
        """Find a parameter or keyword by case-insensitive name."""
        lower = name.lower()
        candidates: list[Argument] = []
        if keyword is not True:
            candidates.extend(self.parameters)
        if keyword is not False:
            candidates.extend(self.keywords)
        return next((arg for arg in candidates if arg.name.lower() == lower), None)

    def visible_arguments(self) -> list[Argument]:
        return [arg for arg in self.parameters + self.keywords if arg.is_visible()]

    def seed_property_comments(self, keyword: Argument) -> None:
        """Copy an accessor keyword's comments to its undocumented property."""
        if self.owning_class is None or self.accessor_kind is None:
            return
        prop = self.owning_class.properties.get(keyword.name.lower())
        if prop is not None and not prop.has_comments():
            prop.comments = list(keyword.comments)

    # ------------------------------------------------------------------
    # Documentation
    # ------------------------------------------------------------------

    def compute_level(self) -> DocumentationLevel:
        args = self.parameters + self.keywords
        documented_args = [arg for arg in args if arg.has_comments()]
        if not self.docs.has_comments() and not documented_args:
            return DocumentationLevel.UNDOCUMENTED
        if (
            self.docs.has_comments()
            and len(documented_args) == len(args)
            and (not self.is_function or self.docs.has_tag("returns"))
        ):
            return DocumentationLevel.FULL
        return DocumentationLevel.PARTIAL

    def finalize(self) -> None:
        """Compute completeness and register with the session's aggregations.

        Called once no more comments can attach: at the next declaration or at
        the end of the file.
        """
        session = self.file.session
        self.level = self.compute_level()
        if self.level is not DocumentationLevel.FULL:
            session.create_documentation_entry(self)
        if self.is_obsolete:
            session.create_obsolete_entry(self)
        if self.docs.has_tag("bugs"):
            session.create_bug_entry(self)
        if self.docs.has_tag("todo"):
            session.create_todo_entry(self)
        for category in self.docs.categories:
            session.create_category_entry(category, self)
        if self.docs.has_tag("requires"):
            version = " ".join(self.docs.tag_lines("requires")).strip()
            session.check_required_version(version, self)

    def is_visible(self) -> bool:
        if self.is_hidden:
            return False
        if self.is_private and self.file.session.user_level:
            return False
        return self.file.is_visible()

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def _variables(self) -> dict[str, Callable[[], Any]]:
        markup = self.file.markup
        table: dict[str, Callable[[], Any]] = {
            "name": lambda: self.name,
            "method_name": lambda: self.method_name,
            "class_name": lambda: self.class_name or "",
            "is_function": lambda: self.is_function,
            "is_method": lambda: self.is_method,
            "is_abstract": lambda: self.is_abstract,
            "is_obsolete": lambda: self.is_obsolete,
            "is_private": lambda: self.is_private,
            "is_hidden": lambda: self.is_hidden,
            "is_visible": self.is_visible,
            "n_lines": lambda: self.n_lines,
            "start_line": lambda: self.start_line,
            "documentation_level": lambda: (self.level or self.compute_level()).value,
            "has_comments": self.docs.has_comments,
            "comments": lambda: self.docs.body(markup),
            "comments_first_line": lambda: self.docs.body(markup).first_sentence(),
            "n_parameters": lambda: len([p for p in self.parameters if p.is_visible()]),
            "parameters": lambda: [p for p in self.parameters if p.is_visible()],
            "n_keywords": lambda: len([k for k in self.keywords if k.is_visible()]),
            "keywords": lambda: [k for k in self.keywords if k.is_visible()],
            "n_arguments": lambda: len(self.visible_arguments()),
            "arguments": self.visible_arguments,
            "has_categories": lambda: bool(self.docs.categories),
            "categories": lambda: list(self.docs.categories),
            "index_name": lambda: self.index_name,
            "index_type": lambda: self.index_type,
            "routine_url": lambda: f"{self.file.basename}#{self.name.lower().replace(':', '_')}",
        }
        for tag in (
            "returns",
            "examples",
            "author",
            "copyright",
            "history",
            "version",
            "bugs",
            "todo",
            "restrictions",
            "uses",
            "requires",
            "customer_id",
            "pre",
            "post",
        ):
            table[f"has_{tag}"] = lambda tag=tag: self.docs.has_tag(tag)
            table[tag] = lambda tag=tag: self.docs.body(markup, tag)
        return table

    def _variable_delegate(self) -> VariableSource | None:
        return self.file
