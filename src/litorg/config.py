"""Engine-wide constants and their per-run overrides."""

from __future__ import annotations

# Reserved block name used as a self-inclusion shortcut. It may be declared
# any number of times and is the only name usable in call-style markers.
BOOTSTRAP_NAME = "include"

# Nested ``<<marker>>`` expansion ceiling (top-level blocks are depth 0).
DEFAULT_MAX_WEAVE_DEPTH = 3

# Largest accepted :max-depth. Every nesting level costs a few stack frames
# and the weave must stay below the interpreter recursion limit.
MAX_WEAVE_DEPTH_LIMIT = 100

# Nested ``:noweb`` dependency chain ceiling for the resolver.
DEFAULT_RESOLUTION_DEPTH = 256

# Process exit code when ``:exit-with-error`` is requested.
ERROR_EXIT_CODE = 23

INCLUSION_TEMPLATE = "#include <{ref}>\n"

# Parameter keys of ``#+depends:`` records.
EXTERNAL_REFS_KEY = "cpp"
NESTED_REFS_KEY = "noweb"

# Parameter key of ``#+begin_src`` lines binding a block to an aggregate name.
REFERENCE_NAME_KEY = "noweb-ref"
