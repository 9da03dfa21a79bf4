# backend/apps/users/tests/test_models.py
import pytest
from django.contrib.auth import get_user_model
from django.db import IntegrityError

User = get_user_model()

@pytest.fixture
def user_data():
    """Datos de prueba para crear usuario"""
    return {
        'email': 'test@example.com',
        'username': 'testuser',
        'password': 'testpass123',
        'first_name': 'Test',
        'last_name': 'User',
    }

@pytest.mark.django_db
class TestUserModel:

    def test_create_user_success(self, user_data):
        """Test crear usuario exitosamente"""
        user = User.objects.create_user(**user_data)

        assert user.email == user_data['email']
        assert user.role == 'customer'  # Default role
        assert user.is_customer is True
        assert user.is_admin is False
        assert user.check_password(user_data['password'])

    def test_admin_can_manage_catalog(self, user_data):
        """Test admin activo gestiona el catalogo"""
        user = User.objects.create_user(**user_data, role='admin')

        assert user.is_admin is True
        assert user.can_manage_catalog() is True

    def test_inactive_admin_cannot_manage_catalog(self, user_data):
        """Test admin inactivo no gestiona el catalogo"""
        user = User.objects.create_user(**user_data, role='admin', is_active=False)
        assert user.can_manage_catalog() is False

    def test_customer_cannot_manage_catalog(self, user_data):
        user = User.objects.create_user(**user_data)
        assert user.can_manage_catalog() is False

    def test_superuser_is_admin(self):
        """Test superusuario cuenta como admin sin importar el rol"""
        user = User.objects.create_superuser(
            email='super@example.com',
            username='superuser',
            password='superpass123'
        )
        assert user.is_admin is True

    def test_user_str_representation(self, user_data):
        """Test representación string del usuario"""
        user = User.objects.create_user(**user_data)
        assert str(user) == 'test@example.com (Customer)'

    def test_unique_email_constraint(self, user_data):
        """Test que el email debe ser único"""
        User.objects.create_user(**user_data)

        with pytest.raises(IntegrityError):
            User.objects.create_user(
                email=user_data['email'],
                username='differentuser',
                password='testpass123'
            )

    def test_email_as_username_field(self):
        assert User.USERNAME_FIELD == 'email'
