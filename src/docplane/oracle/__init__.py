"""Class introspection oracles and type descriptions."""

from docplane.oracle.base import (
    ClassOracle,
    ClassSpec,
    MappingOracle,
    ObjectRef,
    PointerRef,
    StructureMember,
)
from docplane.oracle.define import DefineSourceOracle
from docplane.oracle.typedesc import type_description

__all__ = [
    "ClassOracle",
    "ClassSpec",
    "DefineSourceOracle",
    "MappingOracle",
    "ObjectRef",
    "PointerRef",
    "StructureMember",
    "type_description",
]
