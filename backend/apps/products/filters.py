"""
Estado de filtros de la busqueda del storefront.

``FilterState`` es el estado sincronizado con la URL (todos los valores son
strings, tal como llegan en los query params). ``derive_query`` lo traduce,
sin tocar la base de datos, a un ``QuerySpec`` listo para ejecutar.
"""

import logging
from dataclasses import dataclass, fields, replace
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

ALL = 'all'
DEFAULT_SORT = 'best-selling'
DEFAULT_PAGE = '1'

# Ordenamientos de la tienda; el desempate por -id hace estable la paginacion
SORT_ORDERS = {
    'best-selling': ('-num_sales', '-id'),
    'price-low-to-high': ('price', '-id'),
    'price-high-to-low': ('-price', '-id'),
    'avg-customer-review': ('-avg_rating', '-id'),
    'newest-arrivals': ('-created_at', '-id'),
}
FALLBACK_ORDERING = ('-id',)

# En la URL el texto libre viaja como "q"
URL_PARAM_NAMES = {'query': 'q'}


@dataclass(frozen=True)
class FilterState:
    query: str = ALL
    category: str = ALL
    tag: str = ALL
    price: str = ALL
    rating: str = ALL
    brand: str = ALL
    sort: str = DEFAULT_SORT
    page: str = DEFAULT_PAGE

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def from_query_params(cls, params):
        """Estado inicial a partir de los query params del request"""
        values = {}
        for name in cls.field_names():
            raw = params.get(URL_PARAM_NAMES.get(name, name))
            if raw is None and name in URL_PARAM_NAMES:
                raw = params.get(name)
            if raw is not None and str(raw).strip():
                values[name] = str(raw).strip()
        return cls(**values)

    def to_query_params(self):
        """Campos distintos de su valor por defecto, con los nombres de la URL"""
        params = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value != f.default:
                params[URL_PARAM_NAMES.get(f.name, f.name)] = value
        return params

    def merge(self, patch):
        """
        Nuevo estado con ``patch`` aplicado.

        Cualquier cambio que no sea solo de ``page`` vuelve a la pagina 1.
        ``None`` o un string vacio restauran el valor por defecto del campo.
        """
        defaults = {f.name: f.default for f in fields(self)}
        unknown = set(patch) - set(defaults)
        if unknown:
            raise TypeError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")

        changes = {}
        for name, value in patch.items():
            if value is None or not str(value).strip():
                changes[name] = defaults[name]
            else:
                changes[name] = str(value).strip()

        if set(changes) - {'page'}:
            changes['page'] = DEFAULT_PAGE
        return replace(self, **changes)


@dataclass(frozen=True)
class QuerySpec:
    query: Optional[str] = None
    category: Optional[str] = None
    tag: Optional[str] = None
    brand: Optional[str] = None
    price_range: Optional[Tuple[Decimal, Decimal]] = None
    min_rating: Optional[Decimal] = None
    ordering: Tuple[str, ...] = SORT_ORDERS[DEFAULT_SORT]
    page: int = 1
    page_size: int = 12
    # Un valor de faceta ilegible no produce error: la consulta no encuentra nada
    unsatisfiable: bool = False

    @property
    def offset(self):
        return (self.page - 1) * self.page_size


def parse_price_range(value):
    """
    "10-50" -> (Decimal('10'), Decimal('50')); "all" -> None.

    Raises ValueError para rangos mal formados.
    """
    if value == ALL:
        return None
    low, sep, high = value.partition('-')
    if not sep:
        raise ValueError(f'Invalid price range: {value!r}')
    try:
        bounds = Decimal(low), Decimal(high)
    except InvalidOperation:
        raise ValueError(f'Invalid price range: {value!r}') from None
    if not all(bound.is_finite() for bound in bounds):
        raise ValueError(f'Invalid price range: {value!r}')
    return bounds


def parse_rating(value):
    if value == ALL:
        return None
    try:
        rating = Decimal(value)
    except InvalidOperation:
        raise ValueError(f'Invalid rating: {value!r}') from None
    if not rating.is_finite():
        raise ValueError(f'Invalid rating: {value!r}')
    return rating


# Maximo de una clave primaria BigAutoField
MAX_OBJECT_ID = 2 ** 63 - 1


def parse_object_id(value):
    """Id numerico en ASCII dentro del rango de la base; si no, None"""
    value = (value or '').strip()
    if not (value.isascii() and value.isdigit()):
        return None
    object_id = int(value)
    if object_id > MAX_OBJECT_ID:
        return None
    return object_id


def parse_page(value):
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


def _facet(value):
    return None if value == ALL else value


def derive_query(state, page_size):
    """Traduce un FilterState a QuerySpec; las facetas en "all" no filtran"""
    unsatisfiable = False

    try:
        price_range = parse_price_range(state.price)
    except ValueError as exc:
        logger.warning('Search: %s', exc)
        price_range, unsatisfiable = None, True

    try:
        min_rating = parse_rating(state.rating)
    except ValueError as exc:
        logger.warning('Search: %s', exc)
        min_rating, unsatisfiable = None, True

    return QuerySpec(
        query=_facet(state.query),
        category=_facet(state.category),
        tag=_facet(state.tag),
        brand=_facet(state.brand),
        price_range=price_range,
        min_rating=min_rating,
        ordering=SORT_ORDERS.get(state.sort, FALLBACK_ORDERING),
        page=parse_page(state.page),
        page_size=page_size,
        unsatisfiable=unsatisfiable,
    )
