"""
Shared Components

Types used across the query builder, synchronizer and resource models.
"""
