"""Dataset inspection and preprocessing"""

from .manager import DatasetManager

__all__ = ["DatasetManager"]
