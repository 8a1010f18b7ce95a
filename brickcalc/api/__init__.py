"""
HTTP API for the Technic calculators.
"""
