import pytest

from app.platform.profilefields.models import ProfileFieldData, ProfileFieldDefinition

DEFINITIONS_URL = "/api/v1/profile-fields/definitions/"
IMPORT_URL = "/api/v1/profile-fields/import/"


def profile_url(user):
    return f"/api/v1/profile-fields/users/{user.pk}/"


@pytest.mark.django_db
def test_admin_creates_definition_with_normalised_options(api_client, admin_user):
    api_client.force_authenticate(admin_user)

    response = api_client.post(DEFINITIONS_URL, {
        "shortname": "colour",
        "name": "Favourite colour",
        "datatype": "autocomplete",
        "param1": "Red\r\nGreen\r\n\r\nBlue",
        "param2": "1",
        "defaultdata": "Green",
    }, format="json")

    assert response.status_code == 201
    assert response.data["status"] == "success"
    definition = ProfileFieldDefinition.objects.get(shortname="colour")
    assert definition.param1 == "Red\nGreen\nBlue"
    assert definition.param2 == "1"


@pytest.mark.django_db
def test_definition_default_must_be_an_option(api_client, admin_user):
    api_client.force_authenticate(admin_user)

    response = api_client.post(DEFINITIONS_URL, {
        "shortname": "colour",
        "name": "Favourite colour",
        "param1": "Red\nBlue",
        "defaultdata": "Green",
    }, format="json")

    assert response.status_code == 400
    assert response.data["errorCode"] == "VALIDATION_ERROR"
    assert "defaultdata" in response.data["data"]["errors"]


@pytest.mark.django_db
def test_definition_rejects_unknown_datatype(api_client, admin_user):
    api_client.force_authenticate(admin_user)

    response = api_client.post(DEFINITIONS_URL, {
        "shortname": "size",
        "name": "Size",
        "datatype": "slider",
        "param1": "S\nM",
    }, format="json")

    assert response.status_code == 400
    assert "datatype" in response.data["data"]["errors"]


@pytest.mark.django_db
def test_partial_update_validates_against_stored_options(api_client, admin_user, make_definition):
    definition = make_definition()
    api_client.force_authenticate(admin_user)

    response = api_client.patch(f"{DEFINITIONS_URL}{definition.pk}/", {"defaultdata": "Purple"}, format="json")
    assert response.status_code == 400

    response = api_client.patch(f"{DEFINITIONS_URL}{definition.pk}/", {"defaultdata": "Blue"}, format="json")
    assert response.status_code == 200
    definition.refresh_from_db()
    assert definition.defaultdata == "Blue"


@pytest.mark.django_db
def test_regular_user_cannot_manage_definitions(api_client, user):
    api_client.force_authenticate(user)

    response = api_client.get(DEFINITIONS_URL)

    assert response.status_code == 403
    assert response.data["errorCode"] == "PERMISSION_DENIED"


@pytest.mark.django_db
def test_user_reads_own_profile(api_client, user, make_definition):
    make_definition(param2="1")
    api_client.force_authenticate(user)

    response = api_client.get(profile_url(user))

    assert response.status_code == 200
    [field] = response.data["data"]["fields"]
    assert field["inputname"] == "profile_field_colour"
    assert [option["key"] for option in field["options"]] == ["Red", "Green", "Blue"]


@pytest.mark.django_db
def test_user_saves_own_profile(api_client, user, make_definition):
    make_definition(param2="1")
    api_client.force_authenticate(user)

    response = api_client.put(profile_url(user), {
        "values": {"profile_field_colour": ["Red", "Blue"]},
    }, format="json")

    assert response.status_code == 200
    assert response.data["data"]["saved"] == {"colour": "Red, Blue"}
    assert ProfileFieldData.objects.get(user=user).data == "Red, Blue"


@pytest.mark.django_db
def test_invalid_submission_returns_validation_error(api_client, user, make_definition):
    make_definition(param2="1")
    api_client.force_authenticate(user)

    response = api_client.put(profile_url(user), {
        "values": {"profile_field_colour": ["Red", "Purple"]},
    }, format="json")

    assert response.status_code == 400
    assert response.data["errorCode"] == "VALIDATION_ERROR"
    assert response.data["data"]["errors"] == {"colour": ["Select a valid choice."]}
    assert not ProfileFieldData.objects.exists()


@pytest.mark.django_db
def test_other_users_profile_needs_permission(api_client, user, other_user, make_definition):
    make_definition()
    api_client.force_authenticate(other_user)

    assert api_client.get(profile_url(user)).status_code == 403
    response = api_client.put(profile_url(user), {"values": {"profile_field_colour": "Red"}}, format="json")
    assert response.status_code == 403


@pytest.mark.django_db
def test_manager_edits_locked_field_of_another_user(api_client, user, manager, make_definition):
    make_definition(locked=True)
    api_client.force_authenticate(manager)

    response = api_client.put(profile_url(user), {"values": {"profile_field_colour": "Green"}}, format="json")

    assert response.status_code == 200
    assert ProfileFieldData.objects.get(user=user).data == "Green"


@pytest.mark.django_db
def test_locked_field_is_frozen_for_owner(api_client, user, make_definition):
    definition = make_definition(locked=True)
    ProfileFieldData.objects.create(user=user, field=definition, data="Red")
    api_client.force_authenticate(user)

    response = api_client.get(profile_url(user))

    [field] = response.data["data"]["fields"]
    assert field["frozen"] is True
    assert field["value"] == "Red"


@pytest.mark.django_db
def test_unknown_user_returns_not_found(api_client, admin_user):
    api_client.force_authenticate(admin_user)

    response = api_client.get("/api/v1/profile-fields/users/999999/")

    assert response.status_code == 404
    assert response.data["errorCode"] == "NOT_FOUND"


@pytest.mark.django_db
def test_raw_stored_values(api_client, user, make_definition):
    definition = make_definition()
    ProfileFieldData.objects.create(user=user, field=definition, data="Blue")
    api_client.force_authenticate(user)

    response = api_client.get(f"{profile_url(user)}data/")

    assert response.status_code == 200
    assert response.data["data"][0]["shortname"] == "colour"
    assert response.data["data"][0]["data"] == "Blue"


@pytest.mark.django_db
def test_import_endpoint_reports_each_row(api_client, admin_user, user, make_definition):
    make_definition()
    api_client.force_authenticate(admin_user)

    response = api_client.post(IMPORT_URL, {"rows": [
        {"username": "alice", "profile_field_colour": "Green"},
        {"username": "ghost", "profile_field_colour": "Green"},
        {"username": "admin", "profile_field_colour": "Purple"},
    ]}, format="json")

    assert response.status_code == 200
    data = response.data["data"]
    assert (data["total"], data["succeeded"], data["failed"]) == (3, 1, 2)
    assert [result["status"] for result in data["results"]] == ["success", "failure", "failure"]
    assert ProfileFieldData.objects.get(user=user).data == "Green"


@pytest.mark.django_db
@pytest.mark.parametrize("param2", ["7", "yes"])
def test_definition_rejects_invalid_multiple_flag(api_client, admin_user, param2):
    api_client.force_authenticate(admin_user)

    response = api_client.post(DEFINITIONS_URL, {
        "shortname": "colour",
        "name": "Favourite colour",
        "param1": "Red\nBlue",
        "param2": param2,
    }, format="json")

    assert response.status_code == 400
    assert "param2" in response.data["data"]["errors"]
    assert not ProfileFieldDefinition.objects.exists()


@pytest.mark.django_db
def test_definition_accepts_default_matching_formatted_label(api_client, admin_user):
    api_client.force_authenticate(admin_user)

    response = api_client.post(DEFINITIONS_URL, {
        "shortname": "colour",
        "name": "Favourite colour",
        "param1": '<span lang="en" class="multilang">Red</span><span lang="fr" class="multilang">Rouge</span>\nBlue',
        "defaultdata": "Red",
    }, format="json")

    assert response.status_code == 201


def test_admin_offers_registered_datatypes():
    from django.contrib import admin as django_admin
    from app.platform.profilefields.admin import ProfileFieldDefinitionAdmin

    model_admin = ProfileFieldDefinitionAdmin(ProfileFieldDefinition, django_admin.site)
    formfield = model_admin.formfield_for_dbfield(ProfileFieldDefinition._meta.get_field("datatype"), None)

    assert list(formfield.choices) == [("autocomplete", "Autocomplete")]
    assert formfield.initial == "autocomplete"
