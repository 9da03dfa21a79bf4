from django.core.management.base import BaseCommand

from core.dev_utils import create_test_products, create_test_users


class Command(BaseCommand):
    help = "Carga usuarios, categorias, marcas y productos de ejemplo"

    def handle(self, *args, **options):
        admin, customer = create_test_users()
        products = create_test_products()
        self.stdout.write(self.style.SUCCESS(
            f'Catalog seeded: {len(products)} products, users {admin.email} and {customer.email}'
        ))
