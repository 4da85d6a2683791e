"""
Domain Layer

Query building, nested-resource synchronization and the resource models.
"""
