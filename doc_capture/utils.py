"""
Utility functions for the document capture application
"""

import os
import platform
import time
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname


def ensure_directory(directory):
    """
    Create the specified directory if it doesn't exist

    Args:
        directory: Path to the directory to create
    """
    os.makedirs(directory, exist_ok=True)


def current_millis() -> int:
    """Milliseconds since the Unix epoch"""
    return time.time_ns() // 1_000_000


def path_to_uri(path) -> str:
    """Convert a filesystem path to an absolute file:// URI"""
    return Path(path).resolve().as_uri()


def uri_to_path(uri: str) -> Path:
    """
    Convert a file:// URI back to a filesystem path

    Raises:
        ValueError: if the URI uses another scheme
    """
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        raise ValueError(f"Not a file URI: {uri}")
    return Path(url2pathname(parsed.path))


def get_system_info():
    """
    Get information about the current system

    Returns:
        dict: System information
    """
    info = {
        "platform": platform.platform(),
        "python_version": platform.python_version(),
        "architecture": platform.machine(),
        "system": platform.system()
    }
    info["is_macos"] = info["system"] == "Darwin"
    return info


def display_macos_camera_permission_help():
    """Display help for macOS camera permissions"""
    if not get_system_info()["is_macos"]:
        return
    print("Camera access is required for document scanning.")
    print("Please grant camera permission in System Settings > Privacy & Security > Camera")
