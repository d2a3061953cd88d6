"""
Object name utilities for the Image Resizer.

Object names always use "/" separators regardless of the host OS, so
posixpath is used throughout instead of os.path.
"""

import posixpath
from typing import Dict, Optional

from image_resizer.models import ObjectPath, SizeSpec


def is_image(content_type: Optional[str]) -> bool:
    """
    Check whether a content type denotes an image.

    Args:
        content_type: MIME type of the object (may be missing)

    Returns:
        True if the content type starts with "image/"
    """
    return bool(content_type) and content_type.startswith("image/")


def parse_object_path(object_name: str) -> ObjectPath:
    """
    Split an object name into directory, base name and extension.

    Args:
        object_name: Full object name, e.g. "images/photo_xoriginal.jpg"

    Returns:
        ObjectPath with directory "images", name "photo_xoriginal", extension ".jpg"
    """
    directory, filename = posixpath.split(object_name)
    name, extension = posixpath.splitext(filename)
    return ObjectPath(directory=directory, name=name, extension=extension)


def is_original(name: str, identifier: str) -> bool:
    """Check whether a base name (without extension) carries the original marker."""
    return name.endswith(identifier)


def derive_resized_path(object_path: ObjectPath, identifier: str, size_name: str) -> str:
    """
    Build the destination object name for one size.

    The trailing marker of the base name is replaced by "_<size_name><ext>",
    so the result never ends with the marker and is never re-processed.

    Args:
        object_path: Parsed source object name
        identifier: Original image marker
        size_name: Name of the target size

    Returns:
        Destination object name
    """
    base = object_path.name[: len(object_path.name) - len(identifier)]
    resized_name = f"{base}_{size_name}{object_path.extension}"
    return posixpath.join(object_path.directory, resized_name)


def derive_resized_paths(
    object_path: ObjectPath, identifier: str, sizes: Dict[str, SizeSpec]
) -> Dict[str, str]:
    """Map every configured size name to its destination object name."""
    return {
        size_name: derive_resized_path(object_path, identifier, size_name)
        for size_name in sizes
    }
