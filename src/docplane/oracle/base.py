"""Class introspection protocol.

The documentation builder never interprets class definitions itself. It asks
an oracle for a class's direct superclasses and for the members of one
instance of the class (inherited members included), then derives ancestry
and field ownership from the answers.

Member values are run-time shaped values: numpy scalars and arrays, numpy
structured arrays or plain mappings for structures, ``ObjectRef`` and
``PointerRef`` for heap references and ``None`` for undefined members.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from docplane.core.errors import OracleError


@dataclass(frozen=True, slots=True)
class ObjectRef:
    """Object reference, typed when ``class_name`` is known."""

    class_name: str | None = None


@dataclass(frozen=True, slots=True)
class PointerRef:
    """Heap variable pointer."""


StructureMember = tuple[str, Any]


@runtime_checkable
class ClassOracle(Protocol):
    """External source of class hierarchy and member layout facts."""

    def superclasses(self, class_name: str) -> list[str]:
        """Direct superclass names in declaration order; empty for a root class."""
        ...

    def own_structure(self, class_name: str) -> list[StructureMember]:
        """Members of one instance of the class, inherited members included.

        Raises:
            OracleError: If the class definition cannot be found or evaluated.
        """
        ...


@dataclass
class ClassSpec:
    superclasses: list[str] = field(default_factory=list)
    members: list[StructureMember] = field(default_factory=list)


class MappingOracle:
    """Oracle answering from in-memory class specifications.

    ``members`` lists only the members a class declares itself; inherited
    members are prepended from the superclasses when the structure is
    requested, the way an instance of the class would lay them out.
    """

    def __init__(self, classes: Mapping[str, ClassSpec | Mapping[str, Any]] | None = None) -> None:
        self._classes: dict[str, ClassSpec] = {}
        for name, spec in (classes or {}).items():
            self.add(name, spec)

    def add(self, name: str, spec: ClassSpec | Mapping[str, Any]) -> None:
        if not isinstance(spec, ClassSpec):
            spec = ClassSpec(
                superclasses=list(spec.get("superclasses", [])),
                members=list(_members(spec.get("members", []))),
            )
        self._classes[name.lower()] = spec

    def superclasses(self, class_name: str) -> list[str]:
        spec = self._classes.get(class_name.lower())
        return list(spec.superclasses) if spec else []

    def own_structure(self, class_name: str) -> list[StructureMember]:
        return self._structure(class_name, set())

    def _structure(self, class_name: str, seen: set[str]) -> list[StructureMember]:
        key = class_name.lower()
        spec = self._classes.get(key)
        if spec is None:
            raise OracleError.definition_not_found(class_name)
        seen.add(key)
        members: list[StructureMember] = []
        names: set[str] = set()
        for parent in spec.superclasses:
            if parent.lower() in seen:
                continue
            for name, value in self._structure(parent, seen):
                if name.lower() not in names:
                    names.add(name.lower())
                    members.append((name, value))
        for name, value in spec.members:
            if name.lower() not in names:
                names.add(name.lower())
                members.append((name, value))
        return members


def _members(members: Mapping[str, Any] | Sequence[StructureMember]) -> list[StructureMember]:
    if isinstance(members, Mapping):
        return list(members.items())
    return [(name, value) for name, value in members]
