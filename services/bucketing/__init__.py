"""Time bucketing and axis alignment.

- frequency.py: bucketing frequencies and calendar label generation
- grid_index.py: flat grid index arithmetic and ISO week-date reconstruction
- axes.py: repartition (heatmap) axis definitions
"""
