"""Heritage - relational family graph, relationship resolution and chart layout.

Records people, unions and uncertain genealogical dates, and turns them into
deterministic, non-overlapping pedigree and descendants charts.
"""

__version__ = "0.3.0"

# Configure structlog before any module logs
from heritage.logging import configure_logging  # noqa: E402,F401


# Lazy imports to keep `import heritage` cheap for the CLI
def __getattr__(name: str):
    if name == "dates":
        from heritage import dates
        return dates
    if name == "models":
        from heritage import models
        return models
    if name == "store":
        from heritage import store
        return store
    if name == "relationships":
        from heritage import relationships
        return relationships
    if name == "layout":
        from heritage import layout
        return layout
    if name == "migration":
        from heritage import migration
        return migration
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
