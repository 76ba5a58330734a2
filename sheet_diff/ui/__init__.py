"""User interface: terminal rendering and interactive menu."""

from .console import ResultsView
from .menu import MenuInterface

__all__ = [
    "ResultsView",
    "MenuInterface",
]
