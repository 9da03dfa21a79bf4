"""
Historial de navegacion: los ultimos productos vistos, del mas reciente al
mas antiguo, sin duplicados y con un maximo de entradas.

El historial alimenta dos rieles de la tienda:
- "history": los propios productos vistos, en orden de recencia.
- "related": otros productos de las categorias vistas.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from django.db.models import Q

from .conf import storefront_setting
from .filters import parse_object_id
from .models import Product
from .stores import DerivedFetch, Subscribable

logger = logging.getLogger(__name__)

HISTORY = 'history'
RELATED = 'related'
MODES = (HISTORY, RELATED)

# Valor que llega cuando el cliente serializa un objeto en vez de su id
INVALID_CATEGORY_VALUES = {'[object Object]'}


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    category: str = ''

    @classmethod
    def from_dict(cls, data):
        return cls(id=str(data['id']), category=str(data.get('category') or ''))

    def to_dict(self):
        return {'id': self.id, 'category': self.category}


class BrowsingHistoryStore(Subscribable):
    """
    Historial persistido en un adaptador de almacenamiento.

    Se guarda como {"products": [{"id": ..., "category": ...}, ...]}.
    """

    def __init__(self, storage, key=None, limit=None):
        super().__init__()
        self.storage = storage
        self.key = key or storefront_setting('BROWSING_HISTORY_SESSION_KEY')
        self.limit = limit or storefront_setting('BROWSING_HISTORY_LIMIT')

    def get(self):
        raw = self.storage.load(self.key)
        if raw is None:
            return []
        try:
            return [HistoryEntry.from_dict(item) for item in raw['products']]
        except (KeyError, TypeError, AttributeError):
            logger.warning('Discarding unreadable browsing history stored under %r', self.key)
            return []

    def set(self, entries):
        products = []
        seen = set()
        for entry in entries:
            if entry.id in seen:
                continue
            seen.add(entry.id)
            products.append(entry)
        products = products[:self.limit]
        self.storage.save(self.key, {'products': [entry.to_dict() for entry in products]})
        self._notify()

    def add_item(self, entry):
        """Mueve (o inserta) la entrada al frente; descarta la mas antigua si se excede el limite"""
        if isinstance(entry, dict):
            entry = HistoryEntry.from_dict(entry)
        products = [p for p in self.get() if p.id != entry.id]
        products.insert(0, entry)
        if len(products) > self.limit:
            products.pop()
        self.set(products)

    def clear(self):
        self.set([])


@dataclass(frozen=True)
class HistoryQuery:
    mode: str = HISTORY
    ids: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()


def clean_categories(categories):
    """Sin duplicados (primer orden visto), sin vacios ni valores invalidos"""
    cleaned = []
    for category in categories:
        category = (category or '').strip()
        if not category or category in INVALID_CATEGORY_VALUES or category in cleaned:
            continue
        cleaned.append(category)
    return tuple(cleaned)


def build_history_query(mode, ids, categories):
    if mode not in MODES:
        mode = HISTORY
    ids = tuple(i.strip() for i in ids if i and i.strip())
    return HistoryQuery(mode=mode, ids=ids, categories=clean_categories(categories))


def derive_history_query(entries, mode=HISTORY):
    """Consulta del riel a partir de las entradas del historial"""
    return build_history_query(
        mode,
        [entry.id for entry in entries],
        [entry.category for entry in entries],
    )


def _numeric(values):
    """Ids validos en orden; los no numericos o fuera de rango se ignoran"""
    parsed = (parse_object_id(value) for value in values)
    return [object_id for object_id in parsed if object_id is not None]


def fetch_history_products(query):
    """
    Ejecuta un HistoryQuery contra la base de datos.

    - Sin ids: lista vacia.
    - history: exactamente esos productos, en el orden del historial.
    - related: productos de esas categorias que no estan en el historial; sin
      categorias validas, cualquier producto fuera del historial.
    """
    if not query.ids:
        return []

    ids = _numeric(query.ids)
    queryset = Product.objects.select_related('category', 'brand').prefetch_related('images')

    if query.mode == HISTORY:
        position = {pk: index for index, pk in enumerate(ids)}
        products = list(queryset.filter(pk__in=ids))
        products.sort(key=lambda product: position[product.pk])
        return products

    queryset = queryset.filter(is_published=True).exclude(pk__in=ids)
    if query.categories:
        category_ids = _numeric(query.categories)
        slugs = [c for c in query.categories if parse_object_id(c) is None]
        queryset = queryset.filter(Q(category_id__in=category_ids) | Q(category__slug__in=slugs))
    else:
        logger.info('Related products: no valid categories, falling back to any product outside history')

    limit = storefront_setting('RELATED_LIMIT')
    if limit:
        queryset = queryset[:limit]
    return list(queryset)


class HistoryRail(DerivedFetch):
    """
    Riel "history" o "related" enganchado a un BrowsingHistoryStore.

    Se refresca solo cuando el store cambia; ``result`` guarda la ultima
    lista de productos publicada.
    """

    def __init__(self, store, mode=HISTORY, fetcher=fetch_history_products, executor=None):
        super().__init__(fetcher, list, executor=executor)
        self.store = store
        self.mode = mode if mode in MODES else HISTORY
        self._unsubscribe = store.subscribe(lambda _store: self.refresh())

    def refresh(self):
        return self._dispatch(derive_history_query(self.store.get(), self.mode))

    def close(self):
        self._unsubscribe()
