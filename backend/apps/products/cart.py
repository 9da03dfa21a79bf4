"""
Carrito persistido por sesion.

Una linea del carrito se identifica por producto + color + talla; agregar el
mismo producto con otra talla crea otra linea. Los precios se guardan como
strings con dos decimales para que el estado sea JSON.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from .conf import storefront_setting
from .stores import Subscribable

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


class InsufficientStock(ValueError):
    """La cantidad pedida supera el stock del producto"""

    def __init__(self, message='Not enough items in stock'):
        super().__init__(message)


def round2(value):
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def line_key(item):
    return (str(item['product']), item.get('color', ''), item.get('size', ''))


def client_id(item):
    return '_'.join(line_key(item))


def empty_cart():
    return {'items': [], 'items_price': '0.00', 'total_price': '0.00'}


class CartStore(Subscribable):
    """
    Lineas del carrito con su subtotal.

    Cada item es un dict con "product", "price", "count_in_stock", "color",
    "size" y "quantity". ``items_price`` y ``total_price`` se recalculan en
    cada cambio.
    """

    def __init__(self, storage, key=None):
        super().__init__()
        self.storage = storage
        self.key = key or storefront_setting('CART_SESSION_KEY')

    def cart(self):
        raw = self.storage.load(self.key)
        if raw is None:
            return empty_cart()
        if not isinstance(raw, dict) or not isinstance(raw.get('items'), list):
            logger.warning('Discarding unreadable cart stored under %r', self.key)
            return empty_cart()
        return raw

    def items(self):
        return self.cart()['items']

    def _find(self, item):
        key = line_key(item)
        for existing in self.items():
            if line_key(existing) == key:
                return existing
        return None

    def _save(self, items):
        items_price = round2(sum(
            (Decimal(str(x['price'])) * x['quantity'] for x in items), Decimal(0)
        ))
        self.storage.save(self.key, {
            'items': items,
            'items_price': str(items_price),
            'total_price': str(items_price),
        })
        self._notify()

    def add_item(self, item, quantity=1):
        """
        Suma ``quantity`` unidades; devuelve el client_id de la linea.

        Raises InsufficientStock si la linea quedaria por encima del stock.
        """
        existing = self._find(item)
        current = existing['quantity'] if existing else 0
        if item['count_in_stock'] < current + quantity:
            raise InsufficientStock()

        key = line_key(item)
        line = {**item, 'product': key[0], 'quantity': current + quantity, 'client_id': client_id(item)}
        if existing:
            items = [line if line_key(x) == key else x for x in self.items()]
        else:
            items = self.items() + [line]
        self._save(items)
        return line['client_id']

    def update_item(self, item, quantity):
        """Fija la cantidad de una linea existente; sin linea no hace nada"""
        existing = self._find(item)
        if existing is None:
            return False
        if item.get('count_in_stock', existing['count_in_stock']) < quantity:
            raise InsufficientStock()

        key = line_key(item)
        items = [
            {**x, 'quantity': quantity} if line_key(x) == key else x
            for x in self.items()
        ]
        self._save(items)
        return True

    def remove_item(self, item):
        key = line_key(item)
        items = self.items()
        remaining = [x for x in items if line_key(x) != key]
        if len(remaining) == len(items):
            return False
        self._save(remaining)
        return True

    def clear(self):
        self._save([])
