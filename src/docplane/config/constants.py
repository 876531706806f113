"""Configuration constants.

Values here are properties of the IDL source language and of the
documentation comment grammar. They are not user-configurable.

For configurable values, see models.py.
"""

# =============================================================================
# Source Language Markers
# =============================================================================

COMMENT_MARKER = ";"
"""Starts a comment that runs to the end of the line."""

DOC_OPEN_MARKER = ";+"
"""Opens a documentation block."""

DOC_CLOSE_MARKER = ";-"
"""Closes a documentation block."""

CONTINUATION_MARKER = "$"
"""Trailing marker joining a statement with the next line."""

METHOD_SEPARATOR = "::"
"""Separates class name and method name in a routine name."""

CLASS_DEFINE_SUFFIX = "__define"
"""Suffix of the routine that declares a class structure."""

DECLARATION_KEYWORDS = frozenset(("pro", "function"))
BLOCK_OPEN_KEYWORD = "begin"
IMPLICIT_BLOCK_KEYWORDS = frozenset(("case", "switch"))
BLOCK_END_KEYWORDS = frozenset(
    (
        "end",
        "endif",
        "endelse",
        "endfor",
        "endforeach",
        "endwhile",
        "endrep",
        "endcase",
        "endswitch",
    )
)

# =============================================================================
# Accessor Conventions
# =============================================================================
# Matched as fixed-length, case-insensitive suffixes of the routine name.

INIT_SUFFIX = "init"
GETTER_SUFFIX = "getproperty"
SETTER_SUFFIX = "setproperty"

EXTRA_KEYWORDS = frozenset(("_extra", "_ref_extra", "_strict_extra"))
"""Pass-through keywords never promoted to properties."""

# =============================================================================
# Styles
# =============================================================================

FORMAT_STYLES = ("idldoc", "rst", "idl", "verbatim")
"""Registered documentation dialects."""

MARKUP_STYLES = ("verbatim", "preformatted", "rst")
"""Registered markup styles."""

DEFAULT_MARKUP = {
    "idldoc": "verbatim",
    "rst": "rst",
    "idl": "preformatted",
    "verbatim": "verbatim",
}
"""Markup used for a dialect when none is requested."""

DOCFORMAT_DIRECTIVE = "docformat"
"""First-line directive overriding the format and markup for one file."""

DEFAULT_SOURCE_SUFFIXES = (".pro",)
