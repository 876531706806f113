"""Render run-time values as IDL declarations of their shape.

The text is descriptive only: it is what a field's type reads as in the
documentation and is never parsed back.

Rules, in priority order:

1. structure with more than one element: ``replicate({ ... }, 3)``
2. structure with exactly one element: ``{ a: 0L, b: 0.0 }``
3. scalar: literal with the IDL type suffix (``1B``, ``1S``, ``1L``, ``1.0``,
   ``1.0D``, ``1US``, ``1UL``, ``1LL``, ``1ULL``, ``'s'``, ``complex(1.0, 0.0)``,
   ``ptr_new()``, ``obj_new('Cls')``, ``<undefined>``)
4. one-dimensional array of at most five elements: ``[1L, 2L, 3L]``
5. other arrays: sized constructor, ``lonarr(10)`` or ``fltarr(3, 4)``

Array dimensions are written in IDL order, fastest varying first, which is
the reverse of a C-ordered numpy shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import numpy as np

from docplane.oracle.base import ObjectRef, PointerRef

UNDEFINED = "<undefined>"
MAX_LITERAL_ELEMENTS = 5

# numpy dtype kind+size -> (literal suffix, array constructor)
_INTEGER_KINDS: dict[str, tuple[str, str]] = {
    "uint8": ("B", "bytarr"),
    "int8": ("B", "bytarr"),
    "bool": ("B", "bytarr"),
    "int16": ("S", "intarr"),
    "int32": ("L", "lonarr"),
    "int64": ("LL", "lon64arr"),
    "uint16": ("US", "uintarr"),
    "uint32": ("UL", "ulonarr"),
    "uint64": ("ULL", "ulon64arr"),
}
_ARRAY_CONSTRUCTORS: dict[str, str] = {
    "float32": "fltarr",
    "float64": "dblarr",
    "complex64": "complexarr",
    "complex128": "dcomplexarr",
}


def type_description(value: Any) -> str:
    """Describe the shape of ``value`` as an IDL declaration."""
    if value is None:
        return UNDEFINED
    if isinstance(value, Mapping):
        return _struct_literal(value)
    if isinstance(value, ObjectRef | PointerRef):
        return _reference(value)
    if isinstance(value, np.void) and value.dtype.names:
        return _struct_literal({name: value[name] for name in value.dtype.names})
    if isinstance(value, np.ndarray):
        return _array(value)
    if isinstance(value, np.generic):
        return _scalar(value)
    if isinstance(value, list | tuple):
        return _array(_as_array(value))
    return _scalar(_python_scalar(value))


def _array(arr: np.ndarray) -> str:
    if arr.ndim == 0:
        return type_description(arr[()])
    flat = arr.reshape(-1)
    if arr.dtype.names or (arr.dtype.kind == "O" and arr.size and isinstance(flat[0], Mapping)):
        if arr.size == 1:
            return type_description(flat[0])
        return f"replicate({type_description(flat[0])}, {_dims(arr)})"
    if arr.ndim == 1 and arr.size <= MAX_LITERAL_ELEMENTS:
        return "[" + ", ".join(type_description(item) for item in flat) + "]"
    return f"{_constructor(arr)}({_dims(arr)})"


def _dims(arr: np.ndarray) -> str:
    return ", ".join(str(n) for n in reversed(arr.shape))


def _constructor(arr: np.ndarray) -> str:
    name = arr.dtype.name
    if name in _INTEGER_KINDS:
        return _INTEGER_KINDS[name][1]
    if name in _ARRAY_CONSTRUCTORS:
        return _ARRAY_CONSTRUCTORS[name]
    if arr.dtype.kind in ("U", "S"):
        return "strarr"
    if arr.dtype.kind == "O":
        first = arr.reshape(-1)[0] if arr.size else None
        if isinstance(first, ObjectRef):
            return "objarr"
        if isinstance(first, PointerRef):
            return "ptrarr"
        if isinstance(first, str):
            return "strarr"
    return "make_array"


def _scalar(value: np.generic | Any) -> str:
    if isinstance(value, ObjectRef | PointerRef):
        return _reference(value)
    if value is None:
        return UNDEFINED
    if isinstance(value, str | np.str_ | bytes | np.bytes_):
        text = value.decode(errors="replace") if isinstance(value, bytes) else str(value)
        return "'" + text.replace("'", "''") + "'"
    name = np.asarray(value).dtype.name
    if name in _INTEGER_KINDS:
        return f"{int(value)}{_INTEGER_KINDS[name][0]}"
    if name == "float32":
        return _float(value)
    if name == "float64":
        return _float(value) + "D"
    if name == "complex64":
        return f"complex({_float(value.real)}, {_float(value.imag)})"
    if name == "complex128":
        return f"dcomplex({_float(value.real)}D, {_float(value.imag)}D)"
    return UNDEFINED


def _float(value: np.floating) -> str:
    text = str(value)
    if any(mark in text for mark in (".", "e", "inf", "nan")):
        return text
    return text + ".0"


def _reference(value: ObjectRef | PointerRef) -> str:
    if isinstance(value, PointerRef):
        return "ptr_new()"
    if value.class_name:
        return f"obj_new('{value.class_name}')"
    return "obj_new()"


def _struct_literal(members: Mapping[str, Any]) -> str:
    if not members:
        return "{ }"
    body = ", ".join(f"{name}: {type_description(value)}" for name, value in members.items())
    return "{ " + body + " }"


def _python_scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return np.uint8(value)
    if isinstance(value, int):
        return np.int32(value) if -(2**31) <= value < 2**31 else np.int64(value)
    if isinstance(value, float):
        return np.float64(value)
    if isinstance(value, complex):
        return np.complex128(value)
    return value


def _as_array(values: list[Any] | tuple[Any, ...]) -> np.ndarray:
    if any(isinstance(v, ObjectRef | PointerRef | Mapping) or v is None for v in values):
        arr = np.empty(len(values), dtype=object)
        for i, v in enumerate(values):
            arr[i] = v
        return arr
    return np.asarray([_python_scalar(v) for v in values])
