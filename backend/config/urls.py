"""
URL configuration for the storefront backend.
"""

from django.urls import include, path

urlpatterns = [
    path('api/products/', include('apps.products.urls')),
]
