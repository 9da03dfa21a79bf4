import pytest
from django.urls import reverse
from rest_framework import status

from apps.products.stores import MemoryStorage
from apps.products.wishlist import WishlistStore


@pytest.fixture
def store():
    return WishlistStore(MemoryStorage(), key='wishlist')


class TestWishlistStore:

    def test_add_is_idempotent(self, store):
        assert store.add_item({'id': 1, 'name': 'Tee'}) is True
        assert store.add_item({'id': '1', 'name': 'Tee'}) is False

        items = store.items()
        assert len(items) == 1
        assert items[0]['id'] == '1'
        assert 'added_at' in items[0]

    def test_items_keep_insertion_order(self, store):
        store.add_item({'id': 'a'})
        store.add_item({'id': 'b'})
        assert [item['id'] for item in store.items()] == ['a', 'b']

    def test_remove_and_contains(self, store):
        store.add_item({'id': 'a'})
        assert store.contains('a')
        assert store.remove_item('a') is True
        assert store.remove_item('a') is False
        assert not store.contains('a')

    def test_clear(self, store):
        store.add_item({'id': 'a'})
        store.clear()
        assert store.items() == []


@pytest.mark.django_db
class TestWishlistViews:

    def test_add_product(self, api_client, catalog):
        tee = catalog['running-tee']
        response = api_client.post(reverse('wishlist'), {'product_id': tee.pk, 'size': 'M'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        item = response.data['items'][0]
        assert item['id'] == str(tee.pk)
        assert item['brand'] == 'Nike'
        assert item['category'] == 'Clothing'
        assert item['size'] == 'M'
        assert item['image'] == '/images/default-product.png'

    def test_add_twice_keeps_one(self, api_client, catalog):
        tee = catalog['running-tee']
        api_client.post(reverse('wishlist'), {'product_id': tee.pk}, format='json')
        response = api_client.post(reverse('wishlist'), {'product_id': tee.pk}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['items']) == 1

    def test_unknown_product_is_rejected(self, api_client, catalog):
        response = api_client.post(reverse('wishlist'), {'product_id': 99999}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'product_id' in response.data

    def test_remove_item(self, api_client, catalog):
        tee = catalog['running-tee']
        api_client.post(reverse('wishlist'), {'product_id': tee.pk}, format='json')

        url = reverse('wishlist-remove-item', args=[tee.pk])
        assert api_client.delete(url).status_code == status.HTTP_200_OK
        assert api_client.delete(url).status_code == status.HTTP_404_NOT_FOUND

    def test_clear(self, api_client, catalog):
        api_client.post(reverse('wishlist'), {'product_id': catalog['iphone-15'].pk}, format='json')
        api_client.delete(reverse('wishlist'))

        assert api_client.get(reverse('wishlist')).data['items'] == []
