"""Cross-reference builder: class hierarchy, fields and properties."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docplane.core.errors import OracleError
from docplane.core.logging import get_logger
from docplane.oracle.typedesc import type_description
from docplane.tree.classes import ClassEntity, Property
from docplane.tree.routine import AccessorKind

if TYPE_CHECKING:
    from docplane.tree.routine import Routine
    from docplane.tree.session import BuildSession

log = get_logger("tree.xref")


def resolve_class(session: BuildSession, name: str) -> ClassEntity:
    """Return the class named ``name``, creating and resolving it on first use.

    A new class is registered before its superclasses are resolved, so a
    self-referential hierarchy terminates instead of recursing forever.
    """
    key = name.lower()
    existing = session.classes.get(key)
    if existing is not None:
        return existing

    cls = ClassEntity(session=session, name=name)
    session.classes[key] = cls
    session.create_index_entry(cls.name, cls)

    try:
        parent_names = session.oracle.superclasses(name)
    except OracleError as e:
        # Unreadable definition: no parents and no fields.
        session.warning(str(e), class_name=name)
        return cls

    for parent_name in parent_names:
        if parent_name.lower() == key:
            session.warning(f"class {name} lists itself as a superclass")
            continue
        parent = resolve_class(session, parent_name)
        cls.add_parent(parent)

    _resolve_fields(session, cls)
    log.debug(
        "class_resolved",
        class_name=name,
        parents=cls.parent_keys,
        ancestors=cls.ancestor_keys,
        fields=list(cls.fields),
    )
    return cls


def _resolve_fields(session: BuildSession, cls: ClassEntity) -> None:
    try:
        members = session.oracle.own_structure(cls.name)
    except OracleError as e:
        session.warning(str(e), class_name=cls.name)
        return

    inherited = cls.inherited_field_names()
    for member_name, value in members:
        key = member_name.lower()
        if key in inherited or key in cls.fields:
            continue
        cls.add_field(member_name.lower(), type_description(value))
    cls.structure_resolved = True


def promote_keyword_to_property(routine: Routine, keyword: str) -> Property | None:
    """Record ``keyword`` of an accessor method as a property of its class.

    Flags only ever accumulate: a getter and a setter sharing a keyword end up
    as one property that is both gettable and settable.
    """
    cls = routine.owning_class
    kind = routine.accessor_kind
    if cls is None or kind is None:
        return None

    prop = cls.get_property(keyword)
    if kind is AccessorKind.INIT:
        prop.is_init = True
    elif kind is AccessorKind.GETTER:
        prop.is_get = True
    else:
        prop.is_set = True
    return prop
