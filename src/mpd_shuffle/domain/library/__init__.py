"""Library domain - tracks, filters and catalog queries.

This domain handles:
- Track model built from MPD song dicts
- Filter parsing and matching
- Fetching the full catalog from MPD
"""

from .catalog import fetch_catalog
from .filters import (
    Filter,
    FilterField,
    matches,
    parse_filter,
    parse_filters,
    split_filters,
)
from .models import Track
