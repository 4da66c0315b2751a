"""
Target definitions. Importing this package registers every target.
"""

from .copilot import COPILOT
from .kiro import KIRO

__all__ = ["COPILOT", "KIRO"]
