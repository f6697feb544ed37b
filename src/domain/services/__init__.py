"""
Domain Services Package

Pure functions over time points and buckets: the Europe/Paris calendar, the
bucket aggregator, the comparative statistics views and the weather codes.
"""
