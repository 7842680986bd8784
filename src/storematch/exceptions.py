"""
Excepciones del dominio.

Los repositorios dejan pasar los errores del cliente de Supabase;
los servicios los envuelven en esta jerarquía y los loguean una sola vez.
"""

from typing import Optional


class StoreMatchError(Exception):
    """Error base de storematch."""


class ValidationFailed(StoreMatchError):
    """Argumentos inválidos detectados antes de cualquier I/O."""


class SaveFailed(ValidationFailed):
    """Precondición de guardado incumplida (fundador faltante o selección vacía)."""


class NotFound(StoreMatchError):
    """Una búsqueda requerida por un paso posterior no devolvió filas."""


class FounderNotFound(NotFound):
    def __init__(self, founder_id):
        super().__init__(f"Fundador no encontrado: {founder_id}")
        self.founder_id = founder_id


class MatchingNotFound(NotFound):
    def __init__(self, matching_id):
        super().__init__(f"Matching no encontrado: {matching_id}")
        self.matching_id = matching_id


class StoreAccessError(StoreMatchError):
    """Falla del almacenamiento subyacente (Supabase/PostgREST)."""

    def __init__(self, operation: str, detail: Optional[str] = None):
        message = f"Error en '{operation}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation
        self.detail = detail


class StoreReadFailed(StoreAccessError):
    """Falla de lectura."""


class StoreWriteFailed(StoreAccessError):
    """Falla de escritura."""
