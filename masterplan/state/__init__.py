"""
Level hierarchy, pin and navigation state module.

Holds the level and pin registries, the navigation history and the
MasterPlanStore that composes them and persists every mutation.
"""
