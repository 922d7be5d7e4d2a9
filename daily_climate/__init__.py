"""
The Daily Climate: location lookup, weather forecast and headlines dashboard.
"""
