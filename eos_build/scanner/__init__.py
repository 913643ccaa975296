"""Description file discovery."""

from eos_build.scanner.discovery import find_build_files

__all__ = ["find_build_files"]
