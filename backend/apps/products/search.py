"""
Busqueda del storefront: composicion de filtros (AND), orden y paginacion,
mas el store ``SearchFilterState`` que refetchea cuando cambia una faceta.
"""

import logging
import math
from dataclasses import dataclass, field
from urllib.parse import urlencode

from django.db.models import Q

from .conf import storefront_setting
from .filters import FilterState, derive_query, parse_object_id
from .models import Brand, Category, Product
from .stores import DerivedFetch

logger = logging.getLogger(__name__)


class ReferenceNotFound(LookupError):
    """Categoria o marca de la URL que no existe"""


@dataclass
class SearchResult:
    products: list = field(default_factory=list)
    total_pages: int = 0
    total_products: int = 0
    page: int = 1
    from_index: int = 0
    to_index: int = 0

    @classmethod
    def empty(cls, page=1):
        return cls(page=page)


def _reference_lookup(ref):
    lookup = Q(slug=ref) | Q(name__iexact=ref)
    object_id = parse_object_id(ref)
    if object_id is not None:
        lookup |= Q(pk=object_id)
    return lookup


def resolve_category(ref):
    """Acepta id, slug o nombre"""
    category = Category.objects.filter(_reference_lookup(ref)).first()
    if category is None:
        raise ReferenceNotFound(f'Category "{ref}" not found')
    return category


def resolve_brand(ref):
    """Acepta id, slug o nombre"""
    brand = Brand.objects.filter(_reference_lookup(ref)).first()
    if brand is None:
        raise ReferenceNotFound(f'Brand "{ref}" not found')
    return brand


def build_product_filter(spec):
    """
    AND de todas las facetas activas del QuerySpec.

    Raises ReferenceNotFound si la categoria o la marca no existen.
    """
    conditions = Q(is_published=True)

    if spec.query:
        conditions &= Q(name__icontains=spec.query)
    if spec.tag:
        conditions &= Q(tags__name=spec.tag)
    if spec.category:
        # La categoria incluye a todas sus subcategorias
        category = resolve_category(spec.category)
        conditions &= Q(category_id__in=category.descendant_ids())
    if spec.brand:
        conditions &= Q(brand=resolve_brand(spec.brand))
    if spec.price_range:
        low, high = spec.price_range
        conditions &= Q(price__gte=low, price__lte=high)
    if spec.min_rating is not None:
        conditions &= Q(avg_rating__gte=spec.min_rating)

    return conditions


def search_products(spec):
    """Ejecuta el QuerySpec y devuelve una pagina de productos"""
    if spec.unsatisfiable:
        return SearchResult.empty(spec.page)

    try:
        conditions = build_product_filter(spec)
    except ReferenceNotFound as exc:
        logger.warning('Search: %s', exc)
        return SearchResult.empty(spec.page)

    queryset = Product.objects.filter(conditions).select_related(
        'category', 'brand'
    ).prefetch_related('images').order_by(*spec.ordering)

    total = queryset.count()
    total_pages = math.ceil(total / spec.page_size)
    if spec.offset >= total:
        return SearchResult(total_pages=total_pages, total_products=total, page=spec.page)

    products = list(queryset[spec.offset:spec.offset + spec.page_size])

    return SearchResult(
        products=products,
        total_pages=total_pages,
        total_products=total,
        page=spec.page,
        from_index=spec.offset + 1 if products else 0,
        to_index=spec.offset + len(products),
    )


class SearchFilterState(DerivedFetch):
    """
    Filtros, orden y pagina actuales de la busqueda.

    ``set_filter`` mezcla el parche, vuelve a la pagina 1 salvo que solo
    cambie la pagina, y dispara un nuevo fetch cuyo resultado reemplaza a
    ``result``. Los listeners reciben el store tras cada cambio de estado y
    tras cada resultado.
    """

    def __init__(self, state=None, fetcher=search_products, executor=None, page_size=None):
        super().__init__(fetcher, SearchResult.empty, executor=executor)
        self.state = state or FilterState()
        self.page_size = page_size or storefront_setting('PAGE_SIZE')

    @classmethod
    def from_request(cls, request, **kwargs):
        return cls(FilterState.from_query_params(request.GET), **kwargs)

    @property
    def query_string(self):
        return urlencode(self.state.to_query_params())

    @property
    def query_spec(self):
        return derive_query(self.state, self.page_size)

    def set_filter(self, **patch):
        self.state = self.state.merge(patch)
        self._notify()
        return self.refresh()

    def refresh(self):
        return self._dispatch(self.query_spec)
