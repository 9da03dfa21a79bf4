# backend/apps/products/tests/conftest.py
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core.dev_utils import create_test_products

User = get_user_model()

@pytest.fixture
def api_client():
    """Cliente API anonimo (con sesion propia)"""
    return APIClient()

@pytest.fixture
def catalog(db):
    """Catalogo de ejemplo: dict slug -> Product"""
    return create_test_products()

@pytest.fixture
def admin_user(db):
    """Usuario admin del back-office"""
    return User.objects.create_user(
        email='admin@test.com',
        username='admin',
        password='testpass123',
        role='admin'
    )

@pytest.fixture
def customer_user(db):
    """Usuario customer sin acceso al back-office"""
    return User.objects.create_user(
        email='customer@test.com',
        username='customer',
        password='testpass123',
        role='customer'
    )

def _jwt_client(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client

@pytest.fixture
def admin_client(admin_user):
    """Cliente API autenticado como admin"""
    return _jwt_client(admin_user)

@pytest.fixture
def customer_client(customer_user):
    """Cliente API autenticado como customer"""
    return _jwt_client(customer_user)

@pytest.fixture
def page_size_4(settings):
    settings.STOREFRONT = {**settings.STOREFRONT, 'PAGE_SIZE': 4}
    return 4
