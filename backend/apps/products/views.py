import logging
from dataclasses import asdict

from rest_framework import status, permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.shortcuts import get_object_or_404
from django.db.models import Q, Count

from .models import Product, Category, Brand, Tag
from .serializers import (
    # Customer serializers
    ProductCardSerializer,
    ProductDetailSerializer,
    CategorySerializer,
    BrandSerializer,

    # Client stores
    HistoryEntrySerializer,
    WishlistAddSerializer,
    CartItemSerializer,
)
from .permissions import IsCatalogAdmin
from .search import SearchFilterState
from .history import (
    HISTORY,
    BrowsingHistoryStore,
    HistoryEntry,
    HistoryRail,
    build_history_query,
    fetch_history_products,
)
from .stores import SessionStorage, fetch_or_empty
from .cart import CartStore, InsufficientStock
from .wishlist import WishlistStore

logger = logging.getLogger(__name__)

class AdminPagination(PageNumberPagination):
    """Paginacion del back-office"""
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100

def _published_count():
    return Count('products', filter=Q(products__is_published=True))

def _split_param(value):
    return value.split(',') if value else []

# =============================================================================
# CUSTOMER ENDPOINTS - Busqueda y catalogo
# =============================================================================
# - El estado de filtros se reconstruye desde la URL en cada request
# - Las facetas en "all" no filtran; las demas se combinan con AND
# - query_string devuelve la URL canonica (sin valores por defecto)

def _search_response(request):
    store = SearchFilterState.from_request(request)
    store.refresh()
    result = store.result

    serializer = ProductCardSerializer(result.products, many=True)
    return Response({
        'products': serializer.data,
        'total_pages': result.total_pages,
        'total_products': result.total_products,
        'page': result.page,
        'from': result.from_index,
        'to': result.to_index,
        'filters': asdict(store.state),
        'query_string': store.query_string,
    })

@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def public_list_products(request):
    """
    Lista publica de productos publicados

    Query Params: q, category, tag, price ("10-50"), rating, brand, sort, page
    """
    return _search_response(request)

@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def public_products_search(request):
    """Busqueda publica de productos (mismos parametros que la lista)"""
    return _search_response(request)

@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def public_product_detail(request, slug):
    """
    Detalle publico de producto por slug

    BUSINESS LOGIC:
    - Solo productos publicados
    - Registra la visita en el historial de navegacion de la sesion
    """
    product = get_object_or_404(
        Product.objects.select_related(
            'category', 'brand'
        ).prefetch_related('images', 'tags'),
        slug=slug,
        is_published=True
    )
    store = BrowsingHistoryStore(SessionStorage(request.session))
    store.add_item(HistoryEntry(id=str(product.pk), category=str(product.category_id)))

    serializer = ProductDetailSerializer(product)
    return Response({'product': serializer.data})

@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def public_category_list(request):
    """Lista publica de categorias activas"""
    categories = Category.objects.filter(is_active=True).annotate(
        published_count=_published_count()
    ).order_by('name')

    serializer = CategorySerializer(categories, many=True)
    return Response({
        'categories': serializer.data,
        'total_count': len(serializer.data)
    })

@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def public_brand_list(request):
    """Lista publica de marcas activas"""
    brands = Brand.objects.filter(is_active=True).annotate(
        published_count=_published_count()
    ).order_by('name')

    serializer = BrandSerializer(brands, many=True)
    return Response({
        'brands': serializer.data,
        'total_count': len(serializer.data)
    })

@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def public_tag_list(request):
    """Etiquetas de productos publicados, legibles: "best-seller" -> "Best Seller" """
    tags = Tag.objects.filter(products__is_published=True).distinct().order_by('name')
    return Response({
        'tags': [{'value': tag.name, 'label': tag.label} for tag in tags]
    })

# =============================================================================
# BROWSING HISTORY - Historial de navegacion
# =============================================================================
# - browsing-history/: lectura sin estado (ids y categorias en la URL)
# - history/: el historial guardado en la sesion del cliente

@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def browsing_history_products(request):
    """
    Productos para los rieles de historial

    Query Params:
    - type: history | related (default: history)
    - ids: ids de producto separados por coma, del mas reciente al mas antiguo
    - categories: categorias separadas por coma
    """
    query = build_history_query(
        request.GET.get('type', HISTORY),
        _split_param(request.GET.get('ids')),
        _split_param(request.GET.get('categories')),
    )
    products = fetch_or_empty(fetch_history_products, query, list)

    serializer = ProductCardSerializer(products, many=True)
    return Response({'type': query.mode, 'products': serializer.data})

@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([permissions.AllowAny])
def browsing_history(request):
    """
    Historial de la sesion

    - GET: entradas, de la mas reciente a la mas antigua
    - POST {id, category}: registra una visita
    - DELETE: vacia el historial
    """
    store = BrowsingHistoryStore(SessionStorage(request.session))

    if request.method == 'POST':
        serializer = HistoryEntrySerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        store.add_item(HistoryEntry(**serializer.validated_data))
        return Response({
            'message': 'Product added to browsing history.',
            'products': [entry.to_dict() for entry in store.get()]
        }, status=status.HTTP_201_CREATED)

    if request.method == 'DELETE':
        store.clear()
        return Response({'message': 'Browsing history cleared.', 'products': []})

    return Response({'products': [entry.to_dict() for entry in store.get()]})

@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def browsing_history_rail(request):
    """Riel history/related calculado con el historial de la sesion"""
    store = BrowsingHistoryStore(SessionStorage(request.session))
    rail = HistoryRail(store, mode=request.GET.get('type', HISTORY))
    try:
        rail.refresh()
    finally:
        rail.close()

    serializer = ProductCardSerializer(rail.result, many=True)
    return Response({'type': rail.mode, 'products': serializer.data})

# =============================================================================
# WISHLIST - Lista de deseos por sesion
# =============================================================================

def _wishlist_item(product, color='', size=''):
    card = ProductCardSerializer(product).data
    return {
        'id': str(product.pk),
        'name': product.name,
        'slug': product.slug,
        'image': card['image_url'],
        'price': card['price'],
        'list_price': card['list_price'],
        'brand': product.brand.name if product.brand else '',
        'category': product.category.name,
        'count_in_stock': product.stock,
        'color': color,
        'size': size,
    }

@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([permissions.AllowAny])
def wishlist(request):
    """
    Wishlist de la sesion

    - GET: items en orden de alta
    - POST {product_id, color?, size?}: agrega un producto publicado
    - DELETE: vacia la wishlist
    """
    store = WishlistStore(SessionStorage(request.session))

    if request.method == 'POST':
        serializer = WishlistAddSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        item = _wishlist_item(data['product_id'], data.get('color', ''), data.get('size', ''))
        if not store.add_item(item):
            return Response({
                'message': 'Product already in wishlist.',
                'items': store.items()
            }, status=status.HTTP_200_OK)
        return Response({
            'message': 'Product added to wishlist.',
            'items': store.items()
        }, status=status.HTTP_201_CREATED)

    if request.method == 'DELETE':
        store.clear()
        return Response({'message': 'Wishlist cleared.', 'items': []})

    return Response({'items': store.items()})

@api_view(['DELETE'])
@permission_classes([permissions.AllowAny])
def wishlist_remove_item(request, product_id):
    """Quitar un producto de la wishlist"""
    store = WishlistStore(SessionStorage(request.session))
    if not store.remove_item(product_id):
        return Response(
            {"error": "Product is not in the wishlist."},
            status=status.HTTP_404_NOT_FOUND
        )
    return Response({'message': 'Product removed from wishlist.', 'items': store.items()})

# =============================================================================
# CART - Carrito por sesion
# =============================================================================

def _cart_item(product, color='', size=''):
    card = ProductCardSerializer(product).data
    return {
        'product': str(product.pk),
        'name': product.name,
        'slug': product.slug,
        'image': card['image_url'],
        'category': product.category.name,
        'price': card['price'],
        'count_in_stock': product.stock,
        'color': color,
        'size': size,
    }

@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([permissions.AllowAny])
def cart(request):
    """
    Carrito de la sesion

    - GET: lineas y subtotal
    - POST {product_id, color?, size?, quantity?}: suma unidades a la linea
    - DELETE: vacia el carrito
    """
    store = CartStore(SessionStorage(request.session))

    if request.method == 'POST':
        serializer = CartItemSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        item = _cart_item(data['product_id'], data['color'], data['size'])
        try:
            client_id = store.add_item(item, data['quantity'])
        except InsufficientStock as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({
            'message': 'Product added to cart.',
            'client_id': client_id,
            'cart': store.cart()
        }, status=status.HTTP_201_CREATED)

    if request.method == 'DELETE':
        store.clear()
        return Response({'message': 'Cart cleared.', 'cart': store.cart()})

    return Response({'cart': store.cart()})

@api_view(['PATCH', 'DELETE'])
@permission_classes([permissions.AllowAny])
def cart_item(request):
    """
    Una linea del carrito, identificada por {product_id, color?, size?}

    - PATCH {quantity}: fija la cantidad
    - DELETE: quita la linea
    """
    store = CartStore(SessionStorage(request.session))
    serializer = CartItemSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    item = _cart_item(data['product_id'], data['color'], data['size'])

    if request.method == 'DELETE':
        changed = store.remove_item(item)
    else:
        try:
            changed = store.update_item(item, data['quantity'])
        except InsufficientStock as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    if not changed:
        return Response(
            {"error": "Product is not in the cart."},
            status=status.HTTP_404_NOT_FOUND
        )
    return Response({'message': 'Cart updated.', 'cart': store.cart()})

# =============================================================================
# ADMIN ENDPOINTS - CRUD de marcas y categorias
# =============================================================================
# - Listados paginados, mas recientes primero, con busqueda por nombre
# - Slug unico: si no viene se deriva del nombre

@api_view(['GET', 'POST'])
@permission_classes([permissions.IsAuthenticated, IsCatalogAdmin])
def admin_brand_list(request):
    """
    Lista / alta de marcas

    Query Params:
    - query: busqueda por nombre
    - page, limit: paginacion
    """
    if request.method == 'POST':
        serializer = BrandSerializer(data=request.data)
        if serializer.is_valid():
            brand = serializer.save()
            logger.info('Brand %s created by %s', brand.slug, request.user)
            return Response({
                'message': 'Brand created successfully.',
                'brand': BrandSerializer(brand).data
            }, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    queryset = Brand.objects.annotate(published_count=_published_count())
    query = request.GET.get('query')
    if query:
        queryset = queryset.filter(name__icontains=query)
    queryset = queryset.order_by('-updated_at', '-id')

    paginator = AdminPagination()
    paginated_brands = paginator.paginate_queryset(queryset, request)
    serializer = BrandSerializer(paginated_brands, many=True)

    return paginator.get_paginated_response({
        'brands': serializer.data,
        'total_pages': paginator.page.paginator.num_pages
    })

@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([permissions.IsAuthenticated, IsCatalogAdmin])
def admin_brand_detail(request, pk):
    """Ver / actualizar / eliminar una marca"""
    brand = get_object_or_404(Brand, pk=pk)

    if request.method == 'DELETE':
        brand.delete()
        logger.info('Brand %s deleted by %s', pk, request.user)
        return Response({"message": "Brand deleted successfully."}, status=status.HTTP_200_OK)

    if request.method in ('PUT', 'PATCH'):
        partial = request.method == 'PATCH'
        serializer = BrandSerializer(brand, data=request.data, partial=partial)
        if serializer.is_valid():
            brand = serializer.save()
            logger.info('Brand %s updated by %s', brand.slug, request.user)
            return Response({
                'message': 'Brand updated successfully.',
                'brand': BrandSerializer(brand).data
            })
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    return Response({'brand': BrandSerializer(brand).data})

@api_view(['GET', 'POST'])
@permission_classes([permissions.IsAuthenticated, IsCatalogAdmin])
def admin_category_list(request):
    """
    Lista / alta de categorias

    Query Params:
    - query: busqueda por nombre
    - page, limit: paginacion
    """
    if request.method == 'POST':
        serializer = CategorySerializer(data=request.data)
        if serializer.is_valid():
            category = serializer.save()
            logger.info('Category %s created by %s', category.slug, request.user)
            return Response({
                'message': 'Category created successfully.',
                'category': CategorySerializer(category).data
            }, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    queryset = Category.objects.select_related('parent').annotate(
        published_count=_published_count()
    )
    query = request.GET.get('query')
    if query:
        queryset = queryset.filter(name__icontains=query)
    queryset = queryset.order_by('-updated_at', '-id')

    paginator = AdminPagination()
    paginated_categories = paginator.paginate_queryset(queryset, request)
    serializer = CategorySerializer(paginated_categories, many=True)

    return paginator.get_paginated_response({
        'categories': serializer.data,
        'total_pages': paginator.page.paginator.num_pages
    })

@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([permissions.IsAuthenticated, IsCatalogAdmin])
def admin_category_detail(request, pk):
    """
    Ver / actualizar / eliminar una categoria

    BUSINESS LOGIC:
    - Una categoria no puede ser padre de si misma ni de sus ancestros
    - No se elimina una categoria que aun tiene productos
    """
    category = get_object_or_404(Category, pk=pk)

    if request.method == 'DELETE':
        if category.products.exists():
            return Response(
                {"error": "Cannot delete a category that still has products."},
                status=status.HTTP_400_BAD_REQUEST
            )
        category.delete()
        logger.info('Category %s deleted by %s', pk, request.user)
        return Response({"message": "Category deleted successfully."}, status=status.HTTP_200_OK)

    if request.method in ('PUT', 'PATCH'):
        partial = request.method == 'PATCH'
        serializer = CategorySerializer(category, data=request.data, partial=partial)
        if serializer.is_valid():
            category = serializer.save()
            logger.info('Category %s updated by %s', category.slug, request.user)
            return Response({
                'message': 'Category updated successfully.',
                'category': CategorySerializer(category).data
            })
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    return Response({'category': CategorySerializer(category).data})
