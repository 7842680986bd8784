"""
Debounce para búsqueda mientras se escribe.

Cada evento reinicia el temporizador; el callback corre una sola vez,
con el último valor, cuando pasa el período de silencio.
"""

import asyncio
import inspect
from typing import Any, Callable, Optional

import structlog

from storematch.config import get_settings

logger = structlog.get_logger()


class Debouncer:
    """
    Acción diferida y cancelable sobre el event loop de asyncio.

    Uso:
        debouncer = Debouncer(search, delay=0.3)
        debouncer.trigger("카")
        debouncer.trigger("카페")   # solo se busca "카페"
    """

    def __init__(self, callback: Callable[[Any], Any], delay: Optional[float] = None):
        self.callback = callback
        self.delay = delay if delay is not None else get_settings().search_debounce_seconds
        self._task: Optional[asyncio.Task] = None
        # Tarea que ya pasó el período de silencio y está ejecutando el callback
        self._running: Optional[asyncio.Task] = None
        self._value: Any = None

    @property
    def pending(self) -> bool:
        """True mientras haya una acción esperando; False una vez que el callback arrancó."""
        return self._task is not None and not self._task.done()

    def trigger(self, value: Any) -> None:
        """Registra un evento y reinicia el temporizador. Requiere un loop corriendo."""
        self.cancel()
        self._value = value
        self._task = asyncio.get_running_loop().create_task(self._fire_later())

    def cancel(self) -> None:
        """Descarta la acción pendiente, si la hay."""
        if self.pending:
            self._task.cancel()
        self._task = None

    async def flush(self) -> None:
        """Ejecuta ya la acción pendiente en lugar de esperar."""
        if not self.pending:
            return
        value = self._value
        self.cancel()
        await self._invoke(value)

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay)
        value = self._value
        self._running, self._task = self._task, None
        try:
            await self._invoke(value)
        except Exception as e:
            logger.error("Error en búsqueda diferida", value=value, error=str(e), exc_info=True)
        finally:
            if self._running is asyncio.current_task():
                self._running = None

    async def _invoke(self, value: Any) -> None:
        result = self.callback(value)
        if inspect.isawaitable(result):
            await result
