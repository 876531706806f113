"""The cross-referenced documentation tree."""

from docplane.tree.argument import Argument
from docplane.tree.base import DocEntity, Variable, VariableSource
from docplane.tree.classes import ClassEntity, Field, Property
from docplane.tree.docs import DocText
from docplane.tree.file import Directory, SourceFile
from docplane.tree.routine import AccessorKind, DocumentationLevel, Routine
from docplane.tree.session import BuildSession, IndexEntry

__all__ = [
    "AccessorKind",
    "Argument",
    "BuildSession",
    "ClassEntity",
    "Directory",
    "DocEntity",
    "DocText",
    "DocumentationLevel",
    "Field",
    "IndexEntry",
    "Property",
    "Routine",
    "SourceFile",
    "Variable",
    "VariableSource",
]
