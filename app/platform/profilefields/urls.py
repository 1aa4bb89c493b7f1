from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import ProfileFieldDefinitionViewSet, ProfileFieldImportView, UserProfileFieldsViewSet

router = DefaultRouter()
router.register(r"profile-fields/definitions", ProfileFieldDefinitionViewSet, basename="profile-field-definitions")
router.register(r"profile-fields/users", UserProfileFieldsViewSet, basename="profile-field-users")

urlpatterns = [
    path("profile-fields/import/", ProfileFieldImportView.as_view(), name="profile-field-import"),
] + router.urls
