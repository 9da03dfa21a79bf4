import pytest
from django.urls import reverse
from rest_framework import status


def rail_slugs(response):
    return [product['slug'] for product in response.data['products']]


@pytest.mark.django_db
class TestBrowsingHistoryProductsEndpoint:
    """GET /api/products/browsing-history/?type=&ids=&categories="""

    def test_history_keeps_requested_order(self, api_client, catalog):
        ids = f"{catalog['running-tee'].pk},{catalog['iphone-15'].pk},{catalog['python-tricks'].pk}"
        response = api_client.get(reverse('browsing-history-products'), {'type': 'history', 'ids': ids})

        assert response.status_code == status.HTTP_200_OK
        assert rail_slugs(response) == ['running-tee', 'iphone-15', 'python-tricks']

    def test_related_uses_categories_and_excludes_history(self, api_client, catalog):
        iphone = catalog['iphone-15']
        response = api_client.get(reverse('browsing-history-products'), {
            'type': 'related',
            'ids': str(iphone.pk),
            'categories': str(iphone.category_id),
        })

        assert response.status_code == status.HTTP_200_OK
        assert rail_slugs(response) == ['galaxy-s24']

    def test_related_without_categories_falls_back_to_anything_else(self, api_client, catalog):
        iphone = catalog['iphone-15']
        response = api_client.get(reverse('browsing-history-products'), {
            'type': 'related',
            'ids': str(iphone.pk),
            'categories': '',
        })

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['products']) == 5
        assert 'iphone-15' not in rail_slugs(response)

    def test_invalid_categories_are_ignored(self, api_client, catalog):
        iphone = catalog['iphone-15']
        response = api_client.get(reverse('browsing-history-products'), {
            'type': 'related',
            'ids': str(iphone.pk),
            'categories': '[object Object], ,',
        })

        assert len(response.data['products']) == 5

    def test_category_slugs_are_accepted(self, api_client, catalog):
        tee = catalog['running-tee']
        response = api_client.get(reverse('browsing-history-products'), {
            'type': 'related',
            'ids': str(tee.pk),
            'categories': 'shoes',
        })

        assert set(rail_slugs(response)) == {'air-zoom-pegasus', 'ultraboost-light'}

    @pytest.mark.parametrize('params', [{}, {'ids': ''}, {'ids': ' , ', 'type': 'related'}])
    def test_without_ids_returns_empty_list(self, api_client, catalog, params):
        response = api_client.get(reverse('browsing-history-products'), params)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['products'] == []

    def test_unknown_ids_are_not_an_error(self, api_client, catalog):
        response = api_client.get(reverse('browsing-history-products'), {'ids': 'abc,99999'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['products'] == []

    @pytest.mark.parametrize('bad_id', ['99999999999999999999', '²', '-3'])
    def test_bad_ids_do_not_hide_valid_ones(self, api_client, catalog, bad_id):
        iphone = catalog['iphone-15']
        response = api_client.get(reverse('browsing-history-products'), {
            'type': 'history',
            'ids': f'{bad_id},{iphone.pk}',
        })

        assert response.status_code == status.HTTP_200_OK
        assert rail_slugs(response) == ['iphone-15']

    def test_related_ignores_bad_ids_and_categories(self, api_client, catalog):
        iphone = catalog['iphone-15']
        response = api_client.get(reverse('browsing-history-products'), {
            'type': 'related',
            'ids': f'99999999999999999999,{iphone.pk}',
            'categories': f'{iphone.category_id},99999999999999999999',
        })

        assert response.status_code == status.HTTP_200_OK
        assert rail_slugs(response) == ['galaxy-s24']


@pytest.mark.django_db
class TestSessionBrowsingHistory:
    """Historial guardado en la sesion del cliente"""

    def test_empty_history(self, api_client):
        response = api_client.get(reverse('browsing-history'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['products'] == []

    def test_add_and_reorder(self, api_client):
        url = reverse('browsing-history')
        api_client.post(url, {'id': 'p1', 'category': 'c1'}, format='json')
        api_client.post(url, {'id': 'p2', 'category': 'c2'}, format='json')
        response = api_client.post(url, {'id': 'p1', 'category': 'c1'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['products'] == [
            {'id': 'p1', 'category': 'c1'},
            {'id': 'p2', 'category': 'c2'},
        ]

    def test_add_requires_id(self, api_client):
        response = api_client.post(reverse('browsing-history'), {'category': 'c1'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'id' in response.data

    def test_history_is_capped_at_ten(self, api_client):
        url = reverse('browsing-history')
        for n in range(1, 12):
            api_client.post(url, {'id': f'p{n}', 'category': 'c'}, format='json')

        products = api_client.get(url).data['products']
        assert len(products) == 10
        assert products[0]['id'] == 'p11'
        assert products[-1]['id'] == 'p2'

    def test_product_detail_records_the_view(self, api_client, catalog):
        iphone = catalog['iphone-15']
        response = api_client.get(reverse('product-detail', args=['iphone-15']))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['product']['slug'] == 'iphone-15'
        assert set(response.data['product']['tags']) == {'best-seller', 'new-arrival'}

        history = api_client.get(reverse('browsing-history')).data['products']
        assert history == [{'id': str(iphone.pk), 'category': str(iphone.category_id)}]

    def test_unpublished_product_detail_is_404(self, api_client, catalog):
        catalog['iphone-15'].is_published = False
        catalog['iphone-15'].save()

        response = api_client.get(reverse('product-detail', args=['iphone-15']))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_rails_follow_session_history(self, api_client, catalog):
        api_client.get(reverse('product-detail', args=['galaxy-s24']))
        api_client.get(reverse('product-detail', args=['iphone-15']))

        history = api_client.get(reverse('browsing-history-rail'), {'type': 'history'})
        assert rail_slugs(history) == ['iphone-15', 'galaxy-s24']

        related = api_client.get(reverse('browsing-history-rail'), {'type': 'related'})
        assert related.data['type'] == 'related'
        assert rail_slugs(related) == []

        api_client.get(reverse('product-detail', args=['air-zoom-pegasus']))
        related = api_client.get(reverse('browsing-history-rail'), {'type': 'related'})
        assert rail_slugs(related) == ['ultraboost-light']

    def test_unknown_rail_type_answers_as_history(self, api_client, catalog):
        api_client.get(reverse('product-detail', args=['iphone-15']))

        response = api_client.get(reverse('browsing-history-rail'), {'type': 'foo'})
        assert response.data['type'] == 'history'
        assert rail_slugs(response) == ['iphone-15']

    def test_clear_empties_every_read(self, api_client, catalog):
        api_client.get(reverse('product-detail', args=['iphone-15']))

        response = api_client.delete(reverse('browsing-history'))
        assert response.status_code == status.HTTP_200_OK

        assert api_client.get(reverse('browsing-history')).data['products'] == []
        for mode in ('history', 'related'):
            rail = api_client.get(reverse('browsing-history-rail'), {'type': mode})
            assert rail.data['products'] == []

    def test_histories_are_per_client(self, api_client, catalog):
        from rest_framework.test import APIClient

        api_client.post(reverse('browsing-history'), {'id': 'p1', 'category': 'c1'}, format='json')
        other = APIClient()

        assert other.get(reverse('browsing-history')).data['products'] == []
