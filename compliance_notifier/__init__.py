"""Compliance notification service for certified roofing businesses.

The package re-exports nothing; import from the layer you need.
"""
