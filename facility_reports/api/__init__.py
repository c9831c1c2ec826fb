"""
Facility Reports HTTP surface
"""
