"""
Constants for Safe Criteria.

Central location for operation names, directive keys, and error codes.
"""

# ============================================================
# GUARDED OPERATIONS
# ============================================================

# Data-access operations intercepted by default.
# Reads, deletes, updates and aggregates all take criteria as first argument.
GUARDED_OPERATIONS = (
    "find",
    "find_one",
    "destroy",
    "destroy_one",
    "update",
    "update_one",
    "count",
    "sum",
    "avg",
)

# ============================================================
# CRITERIA DIRECTIVES
# ============================================================

# Key holding the filter clause
WHERE_KEY = "where"

# Key holding per-call metadata (bypass flag lives here)
META_KEY = "meta"

# Top-level criteria keys that are NOT filter predicates.
# Anything else at the top level is a legacy bare filter.
KNOWN_DIRECTIVE_KEYS = frozenset({
    WHERE_KEY,
    "limit",
    "skip",
    "sort",
    "select",
    "omit",
    META_KEY,
    "populate",
    "populates",
})

# Flag inside `meta` that suppresses the absence check for one call
DEFAULT_BYPASS_FLAG = "allow_undefined_where"

# Method on a returned query handle used to re-attach metadata
METADATA_ATTACH_METHOD = "meta"

# ============================================================
# ENTITY ATTRIBUTES
# ============================================================

# Per-entity boolean override
ENTITY_OVERRIDE_ATTR = "reject_undefined_where"

# Attributes checked, in order, for the name used in error messages
ENTITY_NAME_ATTRS = ("identity", "global_id")

# ============================================================
# ERROR CODES
# ============================================================

E_UNDEFINED_WHERE = "E_UNDEFINED_WHERE"
E_CONFIGURATION = "E_CONFIGURATION"
