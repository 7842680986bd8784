"""
Utilidades: debounce y tokens de generación.
"""

from storematch.utils.debounce import Debouncer
from storematch.utils.generation import GenerationCounter

__all__ = [
    "Debouncer",
    "GenerationCounter",
]
