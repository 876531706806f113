"""Named-variable lookup shared by every documentation tree entity.

Templates read the tree through ``get_variable(name)``. Each entity answers
the names it owns and delegates everything else along an explicit chain:
argument -> routine -> file -> session.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Variable:
    """A found variable. Lookups return ``None`` when a name is unknown."""

    value: Any


class VariableSource(ABC):
    """Anything that answers ``get_variable``."""

    @abstractmethod
    def _variables(self) -> dict[str, Callable[[], Any]]:
        """Map of lowercase variable name to a zero-argument getter."""

    def _variable_delegate(self) -> VariableSource | None:
        return None

    def get_variable(self, name: str) -> Variable | None:
        getter = self._variables().get(name.lower())
        if getter is not None:
            return Variable(getter())
        delegate = self._variable_delegate()
        if delegate is None:
            return None
        return delegate.get_variable(name)

    def variable_names(self) -> list[str]:
        """Names answered directly by this entity, without delegation."""
        return sorted(self._variables())


class DocEntity(VariableSource):
    """An entity that can appear in generated output and in the index."""

    index_type: str = "entity"

    @property
    @abstractmethod
    def index_name(self) -> str:
        """Display name used for index entries."""

    @abstractmethod
    def is_visible(self) -> bool:
        """Whether the entity appears in the documentation."""
