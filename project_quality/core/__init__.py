"""
Core record models, statistics, rule catalog and invariant validators.
"""
