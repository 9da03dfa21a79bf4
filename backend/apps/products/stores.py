"""
Piezas compartidas por los stores del cliente (historial, wishlist, busqueda).

- Adaptadores de almacenamiento: ``MemoryStorage`` para tests y
  ``SessionStorage`` sobre la sesion de Django (persistente entre visitas).
- ``Subscribable``: get/set/subscribe minimo.
- ``DerivedFetch``: ejecuta fetches derivados del estado sin bloquear a quien
  los dispara y publica solo el resultado mas reciente.
"""

import copy
import logging
import threading

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Almacenamiento en memoria, aislado por copia"""

    def __init__(self, initial=None):
        self._data = copy.deepcopy(dict(initial or {}))

    def load(self, key):
        return copy.deepcopy(self._data.get(key))

    def save(self, key, value):
        self._data[key] = copy.deepcopy(value)


class SessionStorage:
    """Almacenamiento en request.session; los valores deben ser JSON"""

    def __init__(self, session):
        self.session = session

    def load(self, key):
        return self.session.get(key)

    def save(self, key, value):
        self.session[key] = value
        self.session.modified = True


class Subscribable:
    def __init__(self):
        self._listeners = []

    def subscribe(self, listener):
        """Registra listener(store); devuelve la funcion para desuscribir"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)


def fetch_or_empty(fetcher, spec, empty):
    """Ejecuta fetcher(spec); ante cualquier fallo registra el error y devuelve empty()"""
    try:
        return fetcher(spec)
    except Exception:
        logger.exception('Fetch failed for %r', spec)
        return empty()


class DerivedFetch(Subscribable):
    """
    Resultado derivado de un estado, refrescado con ``_dispatch(spec)``.

    Sin executor el fetch corre en linea. Con executor se envia y se devuelve
    el Future. Cada fetch lleva un numero de generacion: si otro fetch se
    disparo despues, el resultado viejo se descarta.
    """

    def __init__(self, fetcher, empty, executor=None):
        super().__init__()
        self._fetcher = fetcher
        self._empty = empty
        self._executor = executor
        self._generation = 0
        self._lock = threading.Lock()
        self.result = empty()

    def _dispatch(self, spec):
        with self._lock:
            self._generation += 1
            generation = self._generation
        if self._executor is None:
            self._publish(spec, generation)
            return None
        return self._executor.submit(self._publish, spec, generation)

    def _publish(self, spec, generation):
        result = fetch_or_empty(self._fetcher, spec, self._empty)
        with self._lock:
            if generation != self._generation:
                logger.debug('Discarding stale result for %r (generation %s)', spec, generation)
                return
            self.result = result
        self._notify()
