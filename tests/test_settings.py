import pytest
from rest_framework import status

from apps.operations.models import FarmConfig, ShedBirdCount

pytestmark = pytest.mark.django_db


class TestFarmConfiguration:
    URL = '/api/v1/settings/farm/'

    def test_defaults_created_on_first_read(self, worker_client):
        response = worker_client.get(self.URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['farm_name'] == 'My Poultry Farm'
        assert FarmConfig.objects.count() == 1

    def test_manager_updates_configuration(self, manager_client):
        response = manager_client.patch(self.URL, {
            'farm_name': 'Sunrise Layers',
            'default_currency': 'kes',
            'initial_bird_count': 99999,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        config = FarmConfig.load()
        assert config.farm_name == 'Sunrise Layers'
        assert config.default_currency == 'KES'
        # only changed through birds per shed
        assert config.initial_bird_count == 0

    def test_worker_cannot_update(self, worker_client):
        response = worker_client.patch(self.URL, {'farm_name': 'Mine now'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['detail'] == 'Permission denied. Only managers can update farm settings.'


class TestBirdsPerShed:
    URL = '/api/v1/settings/birds-per-shed/'

    def test_lists_every_known_shed(self, worker_client):
        ShedBirdCount.objects.create(shed='Shed B', count=400)

        response = worker_client.get(self.URL)

        assert response.status_code == status.HTTP_200_OK
        sheds = {entry['shed']: entry['count'] for entry in response.data['sheds']}
        assert list(sheds) == ['Shed A', 'Shed B', 'Shed C', 'Shed D', 'Shed E']
        assert sheds['Shed B'] == 400
        assert sheds['Shed A'] == 0

    def test_saving_sets_starting_bird_count(self, manager_client):
        ShedBirdCount.objects.create(shed='Shed E', count=50)

        response = manager_client.put(self.URL, {
            'sheds': [
                {'shed': 'Shed A', 'count': 500},
                {'shed': 'Shed B', 'count': 300},
            ]
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['initial_bird_count'] == 800
        assert FarmConfig.load().initial_bird_count == 800
        assert not ShedBirdCount.objects.filter(shed='Shed E').exists()

    def test_duplicate_sheds_rejected(self, manager_client):
        response = manager_client.put(self.URL, {
            'sheds': [
                {'shed': 'Shed A', 'count': 500},
                {'shed': 'Shed A', 'count': 300},
            ]
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'sheds' in response.data

    def test_worker_cannot_save(self, worker_client):
        response = worker_client.put(self.URL, {'sheds': [{'shed': 'Shed A', 'count': 1}]}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestNotifications:
    URL = '/api/v1/settings/notifications/'

    def test_toggle_preferences(self, worker_client, worker):
        response = worker_client.patch(self.URL, {'enable_low_stock_alerts': True}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            'enable_low_stock_alerts': True,
            'enable_high_mortality_alerts': False,
            'enable_daily_summary': False,
        }
        worker.refresh_from_db()
        assert worker.enable_low_stock_alerts is True


def test_settings_overview(manager_client, farm_config):
    response = manager_client.get('/api/v1/settings/')

    assert response.status_code == status.HTTP_200_OK
    assert response.data['farm']['initial_bird_count'] == 1000
    assert response.data['can_edit_farm'] is True
    assert len(response.data['birds_per_shed']) == 5
    assert set(response.data['notifications']) == {
        'enable_low_stock_alerts', 'enable_high_mortality_alerts', 'enable_daily_summary',
    }
