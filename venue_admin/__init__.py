"""
Venue admin portal API
"""
