# =============================================================================
# E-COMMERCE ARCHITECTURE: Custom Permissions
# =============================================================================
# STATUS: Completo
# PURPOSE: Separar la tienda publica del back-office
# BUSINESS LOGIC: Solo admins activos gestionan marcas y categorias
# =============================================================================

from rest_framework import permissions

class IsCatalogAdmin(permissions.BasePermission):
    """
    Solo administradores del catalogo
    """
    message = "Only catalog administrators can access this endpoint."

    def has_permission(self, request, view):
        return (request.user.is_authenticated and
                request.user.can_manage_catalog())
