from rest_framework import serializers
from django.utils.text import slugify

from .conf import storefront_setting
from .models import Product, Category, ProductImage, Brand

# =============================================================================
# E-COMMERCE ARCHITECTURE: Catalog Serializers
# =============================================================================
# STATUS: Completo
# PURPOSE: Forma de los productos en la tienda y CRUD de marcas/categorias
# BUSINESS LOGIC: Las tarjetas de producto comparten una sola forma en
# busqueda, historial, relacionados y wishlist
# =============================================================================

class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'slug']

class BrandSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Brand
        fields = ['id', 'name', 'slug', 'logo_url']

class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ['id', 'image_url', 'alt_text', 'is_primary', 'order']

# =============================================================================
# Customer Audience
# =============================================================================

class ProductCardSerializer(serializers.ModelSerializer):
    """Tarjeta de producto (busqueda, historial, relacionados)"""
    category = CategorySummarySerializer(read_only=True)
    brand = BrandSummarySerializer(read_only=True)
    image_url = serializers.SerializerMethodField()
    count_in_stock = serializers.IntegerField(source='stock', read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'image_url', 'price', 'list_price',
            'category', 'brand', 'avg_rating', 'num_reviews', 'count_in_stock'
        ]

    def get_image_url(self, obj):
        return obj.primary_image_url or storefront_setting('DEFAULT_PRODUCT_IMAGE')

class ProductDetailSerializer(ProductCardSerializer):
    """Detalle de producto (vista del cliente)"""
    images = ProductImageSerializer(many=True, read_only=True)
    tags = serializers.SlugRelatedField(many=True, read_only=True, slug_field='name')

    class Meta(ProductCardSerializer.Meta):
        fields = ProductCardSerializer.Meta.fields + [
            'description', 'images', 'tags', 'num_sales', 'created_at', 'updated_at'
        ]

# =============================================================================
# Admin Audience: CRUD de marcas y categorias
# =============================================================================

class SlugFromNameMixin:
    """Si no viene slug se deriva del nombre y se valida que no este en uso"""

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get('slug') or 'name' not in attrs or self.instance is not None:
            return attrs
        slug = slugify(attrs['name'])
        if self.Meta.model.objects.filter(slug=slug).exists():
            raise serializers.ValidationError(
                {'slug': f'{self.Meta.model.__name__} with slug "{slug}" already exists'}
            )
        attrs['slug'] = slug
        return attrs

class CategorySerializer(SlugFromNameMixin, serializers.ModelSerializer):
    product_count = serializers.SerializerMethodField()
    parent_id = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(),
        source='parent',
        required=False,
        allow_null=True
    )

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'slug', 'description', 'parent_id', 'image_url',
            'is_featured', 'is_active', 'product_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': {'required': False}}

    def get_product_count(self, obj):
        # Anotado en los listados publicos; si no, se calcula
        annotated = getattr(obj, 'published_count', None)
        if annotated is not None:
            return annotated
        return obj.products.filter(is_published=True).count()

    def validate_parent_id(self, value):
        if value is not None and self.instance is not None:
            if value.pk in self.instance.descendant_ids():
                raise serializers.ValidationError("A category cannot be its own parent or descendant")
        return value

class BrandSerializer(SlugFromNameMixin, serializers.ModelSerializer):
    product_count = serializers.SerializerMethodField()

    class Meta:
        model = Brand
        fields = [
            'id', 'name', 'slug', 'description', 'logo_url', 'website',
            'is_featured', 'is_active', 'product_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': {'required': False}}

    def get_product_count(self, obj):
        annotated = getattr(obj, 'published_count', None)
        if annotated is not None:
            return annotated
        return obj.products.filter(is_published=True).count()

# =============================================================================
# Client stores: historial, wishlist y carrito
# =============================================================================

class HistoryEntrySerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')

class WishlistAddSerializer(serializers.Serializer):
    product_id = serializers.PrimaryKeyRelatedField(queryset=Product.objects.filter(is_published=True))
    color = serializers.CharField(max_length=50, required=False, allow_blank=True)
    size = serializers.CharField(max_length=50, required=False, allow_blank=True)

class CartItemSerializer(serializers.Serializer):
    product_id = serializers.PrimaryKeyRelatedField(queryset=Product.objects.filter(is_published=True))
    color = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    size = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
