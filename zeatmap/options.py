from .bucketing import Granularity
from .items import LegendItem, LegendPosition


class HeatmapOptions:
    """Every knob ZeatMapWidget understands, with the defaults it uses."""

    def __init__(
        self,
        granularity=Granularity.DAY,
        show_day=True,
        show_week=False,
        show_month=True,
        show_year=False,
        show_year_dropdown=True,
        highlight_today=True,
        show_legend=True,
        legend_items=None,
        legend_position=LegendPosition.CENTER,
        item_size=30,
        item_border_radius=5.0,
        row_spacing=8,
        column_spacing=8,
        row_header_width=150,
        card_color=None,
        years=None,
        selected_year=None,
        scrolling_enabled=True,
        drag_scrolling_enabled=True,
        header_title=None,
        month_rollover=True,
    ):
        self.granularity = Granularity(granularity)
        self.show_day = show_day
        self.show_week = show_week
        self.show_month = show_month
        self.show_year = show_year
        self.show_year_dropdown = show_year_dropdown
        self.highlight_today = highlight_today
        self.show_legend = show_legend
        self.legend_items = [
            item if isinstance(item, LegendItem) else LegendItem(*item)
            for item in (legend_items or [])
        ]
        self.legend_position = LegendPosition(legend_position)
        self.item_size = item_size
        self.item_border_radius = item_border_radius
        self.row_spacing = row_spacing
        self.column_spacing = column_spacing
        self.row_header_width = row_header_width
        self.card_color = card_color
        self.years = list(years) if years else None
        self.selected_year = selected_year
        self.scrolling_enabled = scrolling_enabled
        self.drag_scrolling_enabled = drag_scrolling_enabled
        self.header_title = header_title or "ZeatMap"
        self.month_rollover = month_rollover

    @property
    def column_stride(self):
        return self.item_size + self.column_spacing

    @property
    def row_stride(self):
        return self.item_size + self.row_spacing

    def header_rows(self):
        """Header rows to draw, coarsest first, never finer than the granularity."""
        rows = []
        for granularity, shown in (
            (Granularity.YEAR, self.show_year),
            (Granularity.MONTH, self.show_month),
            (Granularity.WEEK, self.show_week),
            (Granularity.DAY, self.show_day),
        ):
            if shown and granularity.rank >= self.granularity.rank:
                rows.append(granularity)
        return rows
