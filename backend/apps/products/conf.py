from django.conf import settings

DEFAULTS = {
    'PAGE_SIZE': 12,
    'BROWSING_HISTORY_LIMIT': 10,
    'BROWSING_HISTORY_SESSION_KEY': 'browsingHistoryStore',
    'WISHLIST_SESSION_KEY': 'wishlist-storage',
    'CART_SESSION_KEY': 'cart-store',
    'RELATED_LIMIT': None,
    'DEFAULT_PRODUCT_IMAGE': '/images/default-product.png',
}


def storefront_setting(name):
    """Lee settings.STOREFRONT[name] con el valor por defecto del catalogo"""
    return getattr(settings, 'STOREFRONT', {}).get(name, DEFAULTS[name])
