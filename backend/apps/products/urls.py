from django.urls import path
from . import views

# =============================================================================
# E-COMMERCE ARCHITECTURE: Products URL Structure
# =============================================================================
# STATUS: Completo
# PURPOSE: Rutas separadas por audiencia (tienda publica, stores de sesion, admin)
# NOTA: '<slug:slug>/' va al final para no capturar las rutas fijas
# =============================================================================

urlpatterns = [
    # =============================================================================
    # ADMIN ENDPOINTS - CRUD de marcas y categorias
    # =============================================================================
    path('admin/brands/', views.admin_brand_list, name='admin-brand-list'),                      # GET: Lista, POST: Crear
    path('admin/brands/<int:pk>/', views.admin_brand_detail, name='admin-brand-detail'),         # GET/PUT/PATCH/DELETE
    path('admin/categories/', views.admin_category_list, name='admin-category-list'),            # GET: Lista, POST: Crear
    path('admin/categories/<int:pk>/', views.admin_category_detail, name='admin-category-detail'), # GET/PUT/PATCH/DELETE

    # =============================================================================
    # CLIENT STORES - Historial, wishlist y carrito de la sesion
    # =============================================================================
    path('browsing-history/', views.browsing_history_products, name='browsing-history-products'),  # GET: ?type=&ids=&categories=
    path('history/', views.browsing_history, name='browsing-history'),                              # GET/POST/DELETE
    path('history/products/', views.browsing_history_rail, name='browsing-history-rail'),           # GET: ?type=history|related
    path('wishlist/', views.wishlist, name='wishlist'),                                             # GET/POST/DELETE
    path('wishlist/<str:product_id>/', views.wishlist_remove_item, name='wishlist-remove-item'),    # DELETE
    path('cart/', views.cart, name='cart'),                                                         # GET/POST/DELETE
    path('cart/item/', views.cart_item, name='cart-item'),                                          # PATCH/DELETE

    # =============================================================================
    # CUSTOMER ENDPOINTS - APIs publicas
    # =============================================================================
    path('', views.public_list_products, name='product-list'),                   # GET: Lista publica de productos
    path('search/', views.public_products_search, name='product-search'),        # GET: Busqueda con filtros
    path('categories/', views.public_category_list, name='category-list'),       # GET: Lista de categorias
    path('brands/', views.public_brand_list, name='brand-list'),                 # GET: Lista de marcas
    path('tags/', views.public_tag_list, name='tag-list'),                       # GET: Lista de etiquetas
    path('<slug:slug>/', views.public_product_detail, name='product-detail'),    # GET: Detalle de producto por slug
]
