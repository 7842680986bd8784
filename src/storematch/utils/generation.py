"""
Tokens de generación para descartar respuestas obsoletas.

Cada request nuevo invalida a los anteriores: si la respuesta de un
request viejo llega después, quien la recibe la descarta.
"""


class GenerationCounter:
    """Contador monótono de requests emitidos."""

    def __init__(self):
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def next(self) -> int:
        """Emite un token nuevo e invalida los anteriores."""
        self._current += 1
        return self._current

    def is_current(self, token: int) -> bool:
        return token == self._current

    def invalidate(self) -> None:
        """Invalida cualquier request en vuelo sin emitir uno nuevo."""
        self._current += 1
