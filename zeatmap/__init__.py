from .bucketing import (
    Granularity,
    available_years,
    bucket,
    bucket_start,
    iso_week_number,
    label,
    tooltip_label,
)
from .navigation import NavigationController, NavigationCursor, ScrollRequest, SCROLL_DURATION_MS
from .items import GridPosition, LegendItem, LegendPosition, ZeatMapItem, placeholder_item
from .options import HeatmapOptions
from .heatmap_widget import ZeatMapWidget

__version__ = "1.0.0"
