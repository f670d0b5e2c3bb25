"""
Configuration loading for Storage Gas.
"""
