"""diskscope - disk usage explorer with treemap, sunburst, bar chart and list views."""

__version__ = "0.1.0"
