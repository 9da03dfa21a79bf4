import pytest
from django.urls import reverse
from rest_framework import status

from apps.products.cart import CartStore, InsufficientStock
from apps.products.stores import MemoryStorage


def line(product='1', price='10.00', stock=5, color='', size=''):
    return {'product': product, 'price': price, 'count_in_stock': stock, 'color': color, 'size': size}


@pytest.fixture
def store():
    return CartStore(MemoryStorage(), key='cart')


class TestCartStore:

    def test_empty_cart(self, store):
        assert store.cart() == {'items': [], 'items_price': '0.00', 'total_price': '0.00'}

    def test_same_line_is_merged(self, store):
        first = store.add_item(line(), 2)
        second = store.add_item(line(), 1)

        assert first == second == '1__'
        assert [x['quantity'] for x in store.items()] == [3]
        assert store.cart()['items_price'] == '30.00'

    def test_other_size_is_a_new_line(self, store):
        store.add_item(line(size='M'))
        store.add_item(line(size='L'))

        assert [x['size'] for x in store.items()] == ['M', 'L']

    def test_stock_is_checked_against_the_merged_quantity(self, store):
        store.add_item(line(stock=3), 2)

        with pytest.raises(InsufficientStock, match='Not enough items in stock'):
            store.add_item(line(stock=3), 2)
        assert store.items()[0]['quantity'] == 2

    def test_update_sets_quantity(self, store):
        store.add_item(line(price='2.50'))
        assert store.update_item(line(price='2.50'), 4) is True

        assert store.items()[0]['quantity'] == 4
        assert store.cart()['total_price'] == '10.00'

    def test_update_missing_line_is_a_noop(self, store):
        assert store.update_item(line(), 2) is False
        assert store.items() == []

    def test_update_over_stock_is_rejected(self, store):
        store.add_item(line(stock=3))
        with pytest.raises(InsufficientStock):
            store.update_item(line(stock=3), 4)

    def test_remove_and_clear(self, store):
        store.add_item(line(product='1'))
        store.add_item(line(product='2', price='5.00'))

        assert store.remove_item(line(product='1')) is True
        assert store.remove_item(line(product='1')) is False
        assert store.cart()['items_price'] == '5.00'

        store.clear()
        assert store.cart()['items'] == []
        assert store.cart()['items_price'] == '0.00'

    def test_listeners_are_notified(self, store):
        seen = []
        store.subscribe(lambda s: seen.append(len(s.items())))

        store.add_item(line())
        store.clear()
        assert seen == [1, 0]


@pytest.mark.django_db
class TestCartViews:

    def test_add_product(self, api_client, catalog):
        tee = catalog['running-tee']
        response = api_client.post(
            reverse('cart'), {'product_id': tee.pk, 'size': 'M', 'quantity': 2}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['client_id'] == f'{tee.pk}__M'
        cart = response.data['cart']
        assert cart['items'][0]['quantity'] == 2
        assert cart['items'][0]['category'] == 'Clothing'
        assert cart['items_price'] == '50.00'

    def test_cart_persists_in_the_session(self, api_client, catalog):
        api_client.post(reverse('cart'), {'product_id': catalog['iphone-15'].pk}, format='json')
        api_client.post(reverse('cart'), {'product_id': catalog['iphone-15'].pk}, format='json')

        cart = api_client.get(reverse('cart')).data['cart']
        assert len(cart['items']) == 1
        assert cart['items'][0]['quantity'] == 2

    def test_not_enough_stock(self, api_client, catalog):
        response = api_client.post(
            reverse('cart'), {'product_id': catalog['iphone-15'].pk, 'quantity': 11}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Not enough items in stock'

    def test_zero_quantity_is_rejected(self, api_client, catalog):
        response = api_client.post(
            reverse('cart'), {'product_id': catalog['iphone-15'].pk, 'quantity': 0}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'quantity' in response.data

    def test_update_and_remove_line(self, api_client, catalog):
        tee = catalog['running-tee']
        api_client.post(reverse('cart'), {'product_id': tee.pk}, format='json')

        response = api_client.patch(
            reverse('cart-item'), {'product_id': tee.pk, 'quantity': 3}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['cart']['items_price'] == '75.00'

        url = reverse('cart-item')
        assert api_client.delete(url, {'product_id': tee.pk}, format='json').status_code == status.HTTP_200_OK
        assert api_client.delete(url, {'product_id': tee.pk}, format='json').status_code == status.HTTP_404_NOT_FOUND

    def test_clear(self, api_client, catalog):
        api_client.post(reverse('cart'), {'product_id': catalog['iphone-15'].pk}, format='json')
        api_client.delete(reverse('cart'))

        assert api_client.get(reverse('cart')).data['cart']['items'] == []
