"""
Storage and image processing services.
"""
