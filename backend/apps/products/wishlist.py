import logging

from django.utils import timezone

from .conf import storefront_setting
from .stores import Subscribable

logger = logging.getLogger(__name__)


class WishlistStore(Subscribable):
    """
    Wishlist persistida por sesion.

    Cada item es un dict con al menos "id"; se guarda como {"items": [...]}
    en el orden en que se agregaron.
    """

    def __init__(self, storage, key=None):
        super().__init__()
        self.storage = storage
        self.key = key or storefront_setting('WISHLIST_SESSION_KEY')

    def items(self):
        raw = self.storage.load(self.key)
        if raw is None:
            return []
        items = raw.get('items') if isinstance(raw, dict) else None
        if not isinstance(items, list):
            logger.warning('Discarding unreadable wishlist stored under %r', self.key)
            return []
        return items

    def _save(self, items):
        self.storage.save(self.key, {'items': items})
        self._notify()

    def contains(self, item_id):
        item_id = str(item_id)
        return any(str(item['id']) == item_id for item in self.items())

    def add_item(self, item):
        """Agrega el item si no esta; devuelve False si ya existia"""
        if self.contains(item['id']):
            return False
        items = self.items()
        items.append({**item, 'id': str(item['id']), 'added_at': timezone.now().isoformat()})
        self._save(items)
        return True

    def remove_item(self, item_id):
        item_id = str(item_id)
        items = self.items()
        remaining = [item for item in items if str(item['id']) != item_id]
        if len(remaining) == len(items):
            return False
        self._save(remaining)
        return True

    def clear(self):
        self._save([])
