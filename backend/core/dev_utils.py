# =============================================================================
# E-COMMERCE ARCHITECTURE: Development Utilities
# =============================================================================
# STATUS: Completo
# PURPOSE: Datos de ejemplo del catalogo para desarrollo y tests
# BUSINESS LOGIC: Catalogo pequeno con subcategorias, marcas y etiquetas
# USO: python manage.py seed_catalog
# =============================================================================

from decimal import Decimal

from django.contrib.auth import get_user_model

User = get_user_model()

def create_test_users():
    """
    Crear usuarios de prueba para cada rol
    Util para desarrollo y testing
    """

    admin, created = User.objects.get_or_create(
        email='admin@storefront.com',
        defaults={
            'username': 'admin',
            'first_name': 'Admin',
            'last_name': 'User',
            'role': 'admin',
        }
    )
    if created:
        admin.set_password('admin123')
        admin.save()

    customer, created = User.objects.get_or_create(
        email='customer@storefront.com',
        defaults={
            'username': 'customer1',
            'first_name': 'Customer',
            'last_name': 'One',
            'role': 'customer',
        }
    )
    if created:
        customer.set_password('customer123')
        customer.save()

    return admin, customer

def create_test_categories():
    """Crear categorias de prueba (Shoes es subcategoria de Clothing)"""
    from apps.products.models import Category

    categories_data = [
        {'name': 'Electronics', 'description': 'Electronic devices and gadgets'},
        {'name': 'Clothing', 'description': 'Fashion and apparel'},
        {'name': 'Books', 'description': 'Books and literature'},
    ]

    categories = {}
    for cat_data in categories_data:
        category, _ = Category.objects.get_or_create(
            name=cat_data['name'],
            defaults=cat_data
        )
        categories[category.slug] = category

    shoes, _ = Category.objects.get_or_create(
        name='Shoes',
        defaults={'description': 'Sneakers and boots', 'parent': categories['clothing']}
    )
    categories[shoes.slug] = shoes
    return categories

def create_test_brands():
    """Crear marcas de prueba"""
    from apps.products.models import Brand

    brands_data = [
        {'name': 'Apple', 'description': 'Think Different'},
        {'name': 'Samsung', 'description': 'Inspire the World'},
        {'name': 'Nike', 'description': 'Just Do It'},
        {'name': 'Adidas', 'description': 'Impossible is Nothing'},
    ]

    brands = {}
    for brand_data in brands_data:
        brand, _ = Brand.objects.get_or_create(
            name=brand_data['name'],
            defaults=brand_data
        )
        brands[brand.slug] = brand
    return brands

def create_test_products():
    """Crear productos publicados con etiquetas, ratings y ventas"""
    from apps.products.models import Product, Tag

    categories = create_test_categories()
    brands = create_test_brands()

    products_data = [
        ('iPhone 15', 'electronics', 'apple', '999.00', '4.8', 120, ['best-seller', 'new-arrival']),
        ('Galaxy S24', 'electronics', 'samsung', '899.00', '4.5', 95, ['best-seller']),
        ('Air Zoom Pegasus', 'shoes', 'nike', '130.00', '4.6', 300, ['best-seller', 'todays-deal']),
        ('Ultraboost Light', 'shoes', 'adidas', '45.00', '4.1', 80, ['todays-deal']),
        ('Running Tee', 'clothing', 'nike', '25.00', '3.9', 40, []),
        ('Python Tricks', 'books', None, '35.00', '4.7', 60, ['new-arrival']),
    ]

    products = {}
    for name, category, brand, price, rating, sales, tags in products_data:
        product, created = Product.objects.get_or_create(
            name=name,
            defaults={
                'description': f'{name} from the sample catalog',
                'price': Decimal(price),
                'stock': 10,
                'category': categories[category],
                'brand': brands[brand] if brand else None,
                'avg_rating': Decimal(rating),
                'num_sales': sales,
                'is_published': True,
            }
        )
        if created:
            product.tags.set([Tag.objects.get_or_create(name=tag)[0] for tag in tags])
        products[product.slug] = product
    return products
