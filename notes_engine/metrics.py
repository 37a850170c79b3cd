"""Prometheus metrics for the note state engine.

All metric objects are defined here so they can be imported from any module.
"""

from prometheus_client import Counter, Gauge

# ---------------------------------------------------------------------------
# Note store metrics
# ---------------------------------------------------------------------------

NOTE_MUTATIONS = Counter(
    "notes_mutations_total",
    "Total number of applied note mutations",
    ["operation"],  # create, update, delete, toggle_pin, set_color
)

NOTES_TOTAL = Gauge(
    "notes_total",
    "Number of notes in the in-memory collection",
)

# ---------------------------------------------------------------------------
# Storage metrics
# ---------------------------------------------------------------------------

STORAGE_WRITES = Counter(
    "notes_storage_writes_total",
    "Total successful collection writes to the key-value store",
)

STORAGE_LOAD_FAILURES = Counter(
    "notes_storage_load_failures_total",
    "Stored collections discarded on load",
    ["reason"],  # read_error, invalid_json, not_array, invalid_note
)
