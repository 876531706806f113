"""Classes, their fields and their properties.

Classes live in the session's class arena keyed by lowercase name. Parent,
ancestor and child links are stored as keys into that arena so that diamond
hierarchies and pathological cycles need no ownership cycles.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from docplane.tree.base import DocEntity, VariableSource

if TYPE_CHECKING:
    from docplane.tree.file import SourceFile
    from docplane.tree.routine import Routine
    from docplane.tree.session import BuildSession


@dataclass(eq=False)
class Field(DocEntity):
    """A data member first declared by ``owner``."""

    owner: ClassEntity = field(repr=False)
    name: str
    type: str
    comments: list[str] = field(default_factory=list)

    index_type = "field"

    @property
    def index_name(self) -> str:
        return f"{self.owner.name}.{self.name}"

    def has_comments(self) -> bool:
        return any(line.strip() for line in self.comments)

    def is_visible(self) -> bool:
        return self.owner.is_visible()

    def _variables(self) -> dict[str, Callable[[], Any]]:
        return {
            "name": lambda: self.name,
            "type": lambda: self.type,
            "class_name": lambda: self.owner.name,
            "has_comments": self.has_comments,
            "comments": lambda: self.owner.markup.parse(self.comments),
            "index_name": lambda: self.index_name,
            "index_type": lambda: self.index_type,
        }

    def _variable_delegate(self) -> VariableSource | None:
        return self.owner


@dataclass(eq=False)
class Property(DocEntity):
    """A property synthesized from accessor-method keywords."""

    owner: ClassEntity = field(repr=False)
    name: str
    is_get: bool = False
    is_set: bool = False
    is_init: bool = False
    is_hidden: bool = False
    comments: list[str] = field(default_factory=list)

    index_type = "property"

    @property
    def index_name(self) -> str:
        return self.name

    def has_comments(self) -> bool:
        return any(line.strip() for line in self.comments)

    def is_visible(self) -> bool:
        return not self.is_hidden and self.owner.is_visible()

    def _variables(self) -> dict[str, Callable[[], Any]]:
        return {
            "name": lambda: self.name,
            "class_name": lambda: self.owner.name,
            "is_get": lambda: self.is_get,
            "is_set": lambda: self.is_set,
            "is_init": lambda: self.is_init,
            "has_comments": self.has_comments,
            "comments": lambda: self.owner.markup.parse(self.comments),
            "index_name": lambda: self.index_name,
            "index_type": lambda: self.index_type,
        }

    def _variable_delegate(self) -> VariableSource | None:
        return self.owner


@dataclass(eq=False)
class ClassEntity(DocEntity):
    """A class, defined in a parsed file or only referenced.

    ``fields`` holds only the members this class declares itself; members
    already declared by an ancestor belong to that ancestor.
    """

    session: BuildSession = field(repr=False)
    name: str
    file: SourceFile | None = field(default=None, repr=False)
    parent_keys: list[str] = field(default_factory=list)
    ancestor_keys: list[str] = field(default_factory=list)
    child_keys: list[str] = field(default_factory=list)
    fields: dict[str, Field] = field(default_factory=dict)
    properties: dict[str, Property] = field(default_factory=dict)
    methods: list[Routine] = field(default_factory=list, repr=False)
    structure_resolved: bool = False

    index_type = "class"

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def index_name(self) -> str:
        return self.name

    @property
    def markup(self) -> Any:
        return self.file.markup if self.file is not None else self.session.markup

    @property
    def parents(self) -> list[ClassEntity]:
        return [self.session.classes[key] for key in self.parent_keys]

    @property
    def ancestors(self) -> list[ClassEntity]:
        return [self.session.classes[key] for key in self.ancestor_keys]

    @property
    def children(self) -> list[ClassEntity]:
        return [self.session.classes[key] for key in self.child_keys]

    @property
    def define_routine(self) -> Routine | None:
        if self.file is None:
            return None
        target = f"{self.key}__define"
        return next((r for r in self.file.routines if r.name.lower() == target), None)

    def add_parent(self, parent: ClassEntity) -> None:
        if parent.key not in self.parent_keys:
            self.parent_keys.append(parent.key)
        if self.key not in parent.child_keys:
            parent.child_keys.append(self.key)
        for key in [parent.key, *parent.ancestor_keys]:
            if key != self.key and key not in self.ancestor_keys:
                self.ancestor_keys.append(key)

    def inherited_field_names(self) -> set[str]:
        names: set[str] = set()
        for ancestor in self.ancestors:
            names.update(ancestor.fields)
        return names

    def add_field(self, name: str, type_description: str) -> Field:
        member = Field(owner=self, name=name, type=type_description)
        self.fields[name.lower()] = member
        self.session.create_index_entry(member.name, member)
        return member

    def get_property(self, name: str) -> Property:
        """Look up a property by name, creating it on first use."""
        key = name.lower()
        prop = self.properties.get(key)
        if prop is None:
            prop = Property(owner=self, name=key)
            self.properties[key] = prop
            self.session.create_index_entry(prop.name, prop)
        return prop

    def all_fields(self) -> list[Field]:
        """Own fields followed by inherited ones, nearest ancestor first."""
        result = list(self.fields.values())
        for ancestor in self.ancestors:
            result.extend(ancestor.fields.values())
        return result

    def comments(self) -> list[str]:
        routine = self.define_routine
        if routine is not None and routine.docs.has_comments():
            return routine.docs.comments
        if self.file is not None:
            return self.file.docs.comments
        return []

    def is_visible(self) -> bool:
        if self.file is None:
            return True
        routine = self.define_routine
        if routine is not None and not routine.is_visible():
            return False
        return self.file.is_visible()

    def _variables(self) -> dict[str, Callable[[], Any]]:
        def visible(items: list[Any]) -> list[Any]:
            return [item for item in items if item.is_visible()]

        return {
            "classname": lambda: self.name,
            "has_url": lambda: self.file is not None,
            "url": lambda: self.file.basename if self.file is not None else "",
            "has_comments": lambda: any(line.strip() for line in self.comments()),
            "comments": lambda: self.markup.parse(self.comments()),
            "n_parents": lambda: len(self.parent_keys),
            "parents": lambda: self.parents,
            "n_ancestors": lambda: len(self.ancestor_keys),
            "ancestors": lambda: self.ancestors,
            "n_children": lambda: len(visible(self.children)),
            "children": lambda: visible(self.children),
            "n_fields": lambda: len(self.fields),
            "fields": lambda: list(self.fields.values()),
            "field_names": lambda: ", ".join(f.name for f in self.fields.values()),
            "n_all_fields": lambda: len(self.all_fields()),
            "all_fields": self.all_fields,
            "n_properties": lambda: len(visible(list(self.properties.values()))),
            "properties": lambda: visible(
                sorted(self.properties.values(), key=lambda p: p.name)
            ),
            "n_methods": lambda: len(visible(self.methods)),
            "methods": lambda: visible(self.methods),
            "index_name": lambda: self.index_name,
            "index_type": lambda: self.index_type,
        }

    def _variable_delegate(self) -> VariableSource | None:
        return self.file if self.file is not None else self.session
