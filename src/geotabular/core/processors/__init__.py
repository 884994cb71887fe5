"""
Processors turning raw tabular and GeoJSON input into typed datasets.
"""
