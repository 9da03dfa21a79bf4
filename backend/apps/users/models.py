from django.db import models
from django.contrib.auth.models import AbstractUser

# =============================================================================
# E-COMMERCE ARCHITECTURE: Storefront Users
# =============================================================================
# STATUS: Completo
# PURPOSE: Usuarios con rol para separar tienda publica y back-office
# BUSINESS LOGIC:
# - Customers: Navegan el catalogo, historial y wishlist
# - Admins: Gestionan marcas y categorias desde el back-office
# =============================================================================

class User(AbstractUser):
    ROLE_CHOICES = [
        ('admin', 'Admin'),
        ('customer', 'Customer'),
    ]
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='customer')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    def __str__(self):
        return f'{self.email} ({self.get_role_display()})'

    @property
    def is_admin(self):
        return self.role == 'admin' or self.is_superuser

    @property
    def is_customer(self):
        return self.role == 'customer'

    def can_manage_catalog(self):
        """Puede administrar marcas y categorias"""
        return self.is_admin and self.is_active
