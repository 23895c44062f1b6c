import pytest
from django.core.cache import cache
from django.urls import reverse
from rest_framework.test import APIClient

from portal.models import Administrator

ADMIN_EMAIL = 'admin@clinic.test'
ADMIN_PASSWORD = 'P@ssw0rd1'


@pytest.fixture(autouse=True)
def _clean_cache():
    # throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def _media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path / 'uploads'
    settings.CONTACT_RECIPIENT = 'frontdesk@clinic.test'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    return Administrator.objects.create_user(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, name='Admin')


@pytest.fixture
def login():
    def _login(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
        return client.post(reverse('login'), {'email': email, 'password': password}, format='json')
    return _login


@pytest.fixture
def admin_client(admin_user, login):
    c = APIClient()
    r = login(c)
    assert r.status_code == 200
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['token']}")
    return c
