"""
Core utilities: logging, exceptions and runtime state.
"""
