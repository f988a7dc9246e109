"""
Master Plan - Hierarchical Site-Plan Pin Store

Keeps the drill-down tree of map levels (master plan, district, building),
the pins anchored to each level, the back-navigation history and the
admin/customer mode flag, and persists all of it across reloads.
"""

__version__ = "0.1.0"
__author__ = "Master Plan Team"
