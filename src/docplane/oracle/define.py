"""Class oracle reading ``<class>__define.pro`` structure definitions.

IDL declares a class with a procedure named ``<class>__define`` whose body
builds a named structure::

    pro point3__define
      compile_opt strictarr
      define = { Point3, inherits Point2, z: 0.0, tags: strarr(4) }
    end

The oracle finds that procedure on its search path, reads the structure
literal and evaluates the member initializers into run-time shaped values.
Initializers it cannot evaluate become undefined members.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from docplane.config.constants import CLASS_DEFINE_SUFFIX
from docplane.core.errors import OracleError
from docplane.core.excludes import is_prunable
from docplane.core.logging import get_logger
from docplane.oracle.base import ObjectRef, PointerRef, StructureMember
from docplane.parsing.tokenizer import SourceTokenizer, split_top_level

log = get_logger("oracle.define")

_NUMBER_RE = re.compile(
    r"^(?P<mantissa>[+-]?(?:\d+\.?\d*|\.\d+))"
    r"(?P<exp>[eEdD][+-]?\d+)?"
    r"(?P<suffix>ULL|UL|US|LL|[BSLUD])?$",
    re.IGNORECASE,
)
_CALL_RE = re.compile(r"^(?P<name>[A-Za-z_]\w*)\s*\((?P<args>.*)\)$", re.DOTALL)

_INTEGER_SUFFIXES: dict[str, type[np.generic]] = {
    "": np.int16,
    "b": np.uint8,
    "s": np.int16,
    "l": np.int32,
    "ll": np.int64,
    "u": np.uint16,
    "us": np.uint16,
    "ul": np.uint32,
    "ull": np.uint64,
}

_ARRAY_FUNCTIONS: dict[str, Any] = {
    "bytarr": np.uint8,
    "intarr": np.int16,
    "lonarr": np.int32,
    "lon64arr": np.int64,
    "uintarr": np.uint16,
    "ulonarr": np.uint32,
    "ulon64arr": np.uint64,
    "fltarr": np.float32,
    "dblarr": np.float64,
    "complexarr": np.complex64,
    "dcomplexarr": np.complex128,
    "strarr": "U1",
}

_CONVERSIONS: dict[str, type[np.generic]] = {
    "byte": np.uint8,
    "fix": np.int16,
    "long": np.int32,
    "long64": np.int64,
    "uint": np.uint16,
    "ulong": np.uint32,
    "ulong64": np.uint64,
    "float": np.float32,
    "double": np.float64,
}

_SYSTEM_VALUES: dict[str, Any] = {
    "!null": None,
    "!values.f_nan": np.float32("nan"),
    "!values.d_nan": np.float64("nan"),
    "!values.f_infinity": np.float32("inf"),
    "!values.d_infinity": np.float64("inf"),
    "!pi": np.float32(np.pi),
    "!dpi": np.float64(np.pi),
}


@dataclass
class ClassDefinition:
    name: str
    path: Path
    superclasses: list[str] = field(default_factory=list)
    members: list[tuple[str, str]] = field(default_factory=list)


class DefineSourceOracle:
    """Oracle answering from ``__define`` procedures found on a search path."""

    def __init__(self, search_path: Iterable[Path]) -> None:
        self._search_path = [Path(p) for p in search_path]
        self._locations: dict[str, Path] | None = None
        self._definitions: dict[str, ClassDefinition | None] = {}

    # ------------------------------------------------------------------
    # ClassOracle protocol
    # ------------------------------------------------------------------

    def superclasses(self, class_name: str) -> list[str]:
        definition = self._definition(class_name)
        return list(definition.superclasses) if definition else []

    def own_structure(self, class_name: str) -> list[StructureMember]:
        return self._structure(class_name, set())

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def _structure(self, class_name: str, seen: set[str]) -> list[StructureMember]:
        definition = self._definition(class_name)
        if definition is None:
            raise OracleError.definition_not_found(class_name)
        seen.add(class_name.lower())

        members: list[StructureMember] = []
        names: set[str] = set()
        for parent in definition.superclasses:
            if parent.lower() in seen:
                continue
            for name, value in self._structure(parent, seen):
                if name.lower() not in names:
                    names.add(name.lower())
                    members.append((name, value))
        for name, expr in definition.members:
            if name.lower() in names:
                continue
            names.add(name.lower())
            members.append((name, self.evaluate(expr, seen)))
        return members

    def _definition(self, class_name: str) -> ClassDefinition | None:
        key = class_name.lower()
        if key not in self._definitions:
            path = self._find(key)
            self._definitions[key] = None if path is None else self._read(class_name, path)
        return self._definitions[key]

    def _find(self, key: str) -> Path | None:
        if self._locations is None:
            self._locations = {}
            for root in self._search_path:
                for dirpath, dirnames, filenames in os.walk(root):
                    dirnames[:] = sorted(d for d in dirnames if not is_prunable(d))
                    for filename in sorted(filenames):
                        lower = filename.lower()
                        if lower.endswith(f"{CLASS_DEFINE_SUFFIX}.pro"):
                            self._locations.setdefault(lower, Path(dirpath) / filename)
        return self._locations.get(f"{key}{CLASS_DEFINE_SUFFIX}.pro")

    def _read(self, class_name: str, path: Path) -> ClassDefinition:
        try:
            lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            raise OracleError.structure_unavailable(class_name, str(e)) from e

        code = " ".join(statement.code for statement in SourceTokenizer(lines))
        body = _find_structure(code, class_name)
        if body is None:
            raise OracleError.structure_unavailable(
                class_name, f"no {{ {class_name}, ... }} structure in {path.name}"
            )

        definition = ClassDefinition(name=class_name, path=path)
        for entry in split_top_level(body)[1:]:
            entry = entry.strip()
            if not entry:
                continue
            if entry.lower().startswith("inherits "):
                definition.superclasses.append(entry.split(None, 1)[1].strip())
            elif ":" in entry:
                name, expr = entry.split(":", 1)
                definition.members.append((name.strip(), expr.strip()))
            else:
                log.debug("structure_entry_skipped", class_name=class_name, entry=entry)
        log.debug(
            "class_definition_read",
            class_name=class_name,
            path=str(path),
            superclasses=definition.superclasses,
            n_members=len(definition.members),
        )
        return definition

    # ------------------------------------------------------------------
    # Initializer evaluation
    # ------------------------------------------------------------------

    def evaluate(self, expr: str, seen: set[str] | None = None) -> Any:
        """Evaluate a structure member initializer; ``None`` if not understood."""
        expr = expr.strip()
        seen = seen if seen is not None else set()
        if not expr:
            return None
        if expr[0] in ("'", '"') and expr[-1] == expr[0] and len(expr) >= 2:
            return np.str_(expr[1:-1].replace(expr[0] * 2, expr[0]))
        if expr.lower() in _SYSTEM_VALUES:
            return _SYSTEM_VALUES[expr.lower()]
        if (number := _number(expr)) is not None:
            return number
        if expr.startswith("[") and expr.endswith("]"):
            items = [self.evaluate(item, seen) for item in split_top_level(expr[1:-1])]
            return _array_of(items)
        if expr.startswith("{") and expr.endswith("}"):
            return self._struct(expr[1:-1], seen)
        if (match := _CALL_RE.match(expr)) is not None:
            return self._call(match.group("name").lower(), split_top_level(match["args"]), seen)
        return None

    def _struct(self, body: str, seen: set[str]) -> dict[str, Any] | None:
        entries = [entry.strip() for entry in split_top_level(body) if entry.strip()]
        if not entries:
            return {}
        if ":" not in entries[0] and not entries[0].lower().startswith("inherits "):
            # named structure: { name } or { name, ... }
            name = entries[0]
            if name.lower() in seen:
                return None
            try:
                return dict(self._structure(name, set(seen)))
            except OracleError:
                return None
        result: dict[str, Any] = {}
        for entry in entries:
            if ":" in entry:
                name, expr = entry.split(":", 1)
                result[name.strip()] = self.evaluate(expr, seen)
        return result

    def _call(self, name: str, args: list[str], seen: set[str]) -> Any:
        if name == "ptr_new":
            return PointerRef()
        if name == "obj_new":
            values = [self.evaluate(arg, seen) for arg in args if arg.strip()]
            class_name = str(values[0]) if values and isinstance(values[0], str) else None
            return ObjectRef(class_name)
        if name in ("complex", "dcomplex"):
            parts = [self.evaluate(arg, seen) for arg in args]
            real = float(parts[0]) if parts and parts[0] is not None else 0.0
            imag = float(parts[1]) if len(parts) > 1 and parts[1] is not None else 0.0
            kind = np.complex64 if name == "complex" else np.complex128
            return kind(complex(real, imag))
        if name in _CONVERSIONS:
            value = self.evaluate(args[0], seen) if args else None
            try:
                return _CONVERSIONS[name](value if value is not None else 0)
            except (TypeError, ValueError):
                return None
        dims = self._dims(args, seen)
        if name in _ARRAY_FUNCTIONS and dims:
            dtype = _ARRAY_FUNCTIONS[name]
            if dtype == "U1":
                return np.full(dims, "", dtype="U1")
            return np.zeros(dims, dtype=dtype)
        if name in ("ptrarr", "objarr") and dims:
            arr = np.empty(dims, dtype=object)
            arr.fill(PointerRef() if name == "ptrarr" else ObjectRef())
            return arr
        if name == "replicate" and len(args) >= 2:
            value = self.evaluate(args[0], seen)
            rep_dims = self._dims(args[1:], seen)
            if not rep_dims or value is None:
                return None
            arr = np.empty(rep_dims, dtype=object)
            for index in np.ndindex(*rep_dims):
                arr[index] = value
            if isinstance(value, dict):
                return arr
            return np.asarray(arr.tolist(), dtype=np.asarray(value).dtype)
        return None

    def _dims(self, args: list[str], seen: set[str]) -> tuple[int, ...]:
        """IDL dimensions, returned in numpy (reversed) order."""
        dims: list[int] = []
        for arg in args:
            if "=" in arg or arg.strip().startswith("/"):
                continue
            value = self.evaluate(arg, seen)
            if value is None:
                return ()
            try:
                dims.append(int(value))
            except (TypeError, ValueError):
                return ()
        return tuple(reversed(dims))


def _find_structure(code: str, class_name: str) -> str | None:
    """Body of the ``{ class_name ... }`` literal in ``code``, braces excluded."""
    pattern = re.compile(r"\{\s*" + re.escape(class_name) + r"\s*(?=[,}])", re.IGNORECASE)
    match = pattern.search(code)
    if match is None:
        return None
    depth = 0
    quote: str | None = None
    for i in range(match.start(), len(code)):
        ch = code[i]
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return code[match.start() + 1 : i]
    return None


def _number(expr: str) -> np.generic | None:
    match = _NUMBER_RE.match(expr.replace(" ", ""))
    if match is None:
        return None
    mantissa, exp, suffix = match["mantissa"], match["exp"] or "", (match["suffix"] or "").lower()
    is_float = "." in mantissa or bool(exp)
    if is_float or suffix == "d":
        double = suffix == "d" or exp[:1].lower() == "d"
        value = float(mantissa + ("e" + exp[1:] if exp else ""))
        return np.float64(value) if double else np.float32(value)
    kind = _INTEGER_SUFFIXES.get(suffix)
    if kind is None:
        return None
    try:
        return kind(int(mantissa))
    except OverflowError:
        return None


def _array_of(items: list[Any]) -> np.ndarray | None:
    if not items or any(item is None for item in items):
        return None
    if any(isinstance(item, ObjectRef | PointerRef | dict) for item in items):
        arr = np.empty(len(items), dtype=object)
        for i, item in enumerate(items):
            arr[i] = item
        return arr
    return np.asarray(items, dtype=np.asarray(items[0]).dtype)
