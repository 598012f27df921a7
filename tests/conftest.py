import pytest
from django.contrib.contenttypes.models import ContentType
from rest_framework.test import APIClient

from tests.factories import UserFactory
from users.models import User


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """
    Automatically enable database access for all tests.
    This fixture runs for every test function.
    """
    pass


@pytest.fixture(autouse=True)
def clear_content_type_cache():
    """
    Clear ContentType cache before and after each test to prevent
    cross-test contamination.
    """
    ContentType.objects.clear_cache()
    yield
    ContentType.objects.clear_cache()


@pytest.fixture
def staff_user():
    return UserFactory(role=User.Role.STAFF)


@pytest.fixture
def admin_user():
    return UserFactory(role=User.Role.ADMIN)


@pytest.fixture
def api_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client
