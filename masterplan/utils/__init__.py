"""
Utility functions module.

Shared helpers used across the store and its collaborators.
"""
