from django.db import models
from django.utils.text import slugify

# =============================================================================
# E-COMMERCE ARCHITECTURE: Storefront Catalog
# =============================================================================
# STATUS: Completo
# PURPOSE: Catalogo publico con categorias jerarquicas, marcas y etiquetas
# BUSINESS LOGIC:
# - Products: solo los publicados aparecen en la tienda y en la busqueda
# - Categories: arbol via parent, la busqueda incluye subcategorias
# - Brands & Categories: administradas desde el back-office
# - Images: una imagen principal por producto
# =============================================================================

#-----Category Model-----
class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    parent = models.ForeignKey(
        'self', related_name='children',
        on_delete=models.SET_NULL, null=True, blank=True
    )
    image_url = models.URLField(blank=True)
    is_featured = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Category"
        verbose_name_plural = "Categories"
        ordering = ['name']

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name

    def descendant_ids(self):
        """Ids de esta categoria y de todas sus subcategorias"""
        ids = [self.pk]
        frontier = [self.pk]
        while frontier:
            children = list(
                Category.objects.filter(parent_id__in=frontier)
                .exclude(pk__in=ids)
                .values_list('pk', flat=True)
            )
            ids.extend(children)
            frontier = children
        return ids

#-----Brand Model-----
class Brand(models.Model):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    logo_url = models.URLField(blank=True)
    website = models.URLField(blank=True)
    is_featured = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name

#-----Tag Model-----
class Tag(models.Model):
    # Valor crudo tal como llega en la URL, p.ej. "best-seller"
    name = models.SlugField(max_length=60, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def label(self):
        return ' '.join(word.capitalize() for word in self.name.split('-'))

#-----Product Model-----
class Product(models.Model):
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    list_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    stock = models.PositiveIntegerField(default=0)
    category = models.ForeignKey(Category, related_name='products', on_delete=models.PROTECT)
    brand = models.ForeignKey(Brand, related_name='products', on_delete=models.SET_NULL, null=True, blank=True)
    tags = models.ManyToManyField('Tag', related_name='products', blank=True)

    # Metricas de clientes (solo cambian con reviews y ventas)
    avg_rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    num_reviews = models.PositiveIntegerField(default=0)
    num_sales = models.PositiveIntegerField(default=0)

    is_published = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Product"
        verbose_name_plural = "Products"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_published', 'category'], name='products_pr_is_publ_3c1f0a_idx'),
            models.Index(fields=['is_published', 'brand'], name='products_pr_is_publ_8d2e4b_idx'),
            models.Index(fields=['num_sales'], name='products_pr_num_sal_5a7c91_idx'),
        ]

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name

    @property
    def is_available(self):
        """Producto disponible para compra"""
        return self.is_published and self.stock > 0

    @property
    def primary_image_url(self):
        # Usa la cache de prefetch_related('images') cuando existe
        images = list(self.images.all())
        for image in images:
            if image.is_primary:
                return image.image_url
        return images[0].image_url if images else None

#-----Product Image Model-----
class ProductImage(models.Model):
    product = models.ForeignKey(Product, related_name='images', on_delete=models.CASCADE)
    image_url = models.URLField()
    alt_text = models.CharField(max_length=200, blank=True)
    is_primary = models.BooleanField(default=False)
    order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Product Image"
        verbose_name_plural = "Product Images"
        ordering = ['-is_primary', 'order', 'created_at']

    def save(self, *args, **kwargs):
        # Solo una imagen puede ser primaria por producto
        if self.is_primary and self.product_id:
            qs = ProductImage.objects.filter(product_id=self.product_id, is_primary=True)
            if self.pk:
                qs = qs.exclude(pk=self.pk)
            qs.update(is_primary=False)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"Image for {self.product.name} ({'Primary' if self.is_primary else 'Secondary'})"
