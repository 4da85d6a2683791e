"""
Universe Catalog

Data layer for a fictional universe: users, planetary systems, stars,
planets and the chemical compounds they are made of.
"""

__version__ = "1.0.0"
