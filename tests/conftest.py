"""Pytest configuration for the profile fields test suite."""

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from rest_framework.test import APIClient

from app.platform.profilefields.models import ProfileFieldDefinition

from tests.helpers import COLOURS


@pytest.fixture
def make_definition(db):
    def _make(shortname="colour", param1=COLOURS, **kwargs):
        values = {
            "name": shortname.replace("_", " ").title(),
            "datatype": "autocomplete",
            "param2": "0",
        }
        values.update(kwargs)
        return ProfileFieldDefinition.objects.create(shortname=shortname, param1=param1, **values)
    return _make


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(username="alice", email="alice@example.com", password="secret-pass")


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user(username="bob", email="bob@example.com", password="secret-pass")


@pytest.fixture
def manager(db):
    """User holding the "update user" permission."""
    User = get_user_model()
    manager = User.objects.create_user(username="carol", email="carol@example.com", password="secret-pass")
    manager.user_permissions.add(
        Permission.objects.get(codename="change_user", content_type__app_label="auth")
    )
    # Reload to drop the cached permission set
    return User.objects.get(pk=manager.pk)


@pytest.fixture
def api_client():
    return APIClient()
