"""
Image Resizer: creates resized copies of original images uploaded to a
storage bucket.
"""

__version__ = "0.1.0"
