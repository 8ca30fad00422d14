"""
clustering package marker.
"""
