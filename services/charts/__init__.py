"""Chart payload builders: merge storage rows onto pre-built axes.

- grid.py: repartition (heatmap) grids, blank cells for missing buckets
- series.py: evolution, group-by and XY series, zero for missing buckets
"""
