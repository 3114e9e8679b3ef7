"""empd: check whether a path is an empty directory, an empty file, or a dangling symlink."""

__version__ = "0.1.0"

__all__ = ["__version__"]
