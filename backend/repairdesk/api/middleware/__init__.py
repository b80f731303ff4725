"""
API middleware module.
"""
