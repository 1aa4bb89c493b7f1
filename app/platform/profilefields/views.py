"""Profile field API endpoints."""
import logging
from django.contrib.auth import get_user_model
from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from app.utils.response import api_response
from app.utils.exception_handler import format_validation_error
from .exceptions import ProfileFieldValidationError
from .models import ProfileFieldDefinition, ProfileFieldData
from .serializers import (
    ProfileFieldDefinitionSerializer,
    ProfileFieldDataSerializer,
    ProfileImportSerializer,
    ProfileValuesSerializer,
)
from .services import import_profile_data, save_profile_data, serialize_profile
from .utils import has_capability

logger = logging.getLogger(__name__)

VIEW_USER_PERMISSION = "auth.view_user"


@extend_schema(tags=["Profile Fields"])
class ProfileFieldDefinitionViewSet(viewsets.ModelViewSet):
    """
    Manage profile field definitions.
    Restricted to staff users.
    """

    queryset = ProfileFieldDefinition.objects.all().order_by("sortorder", "shortname")
    serializer_class = ProfileFieldDefinitionSerializer
    permission_classes = [permissions.IsAdminUser]

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return api_response(status.HTTP_200_OK, "success", serializer.data)

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return api_response(status.HTTP_200_OK, "success", serializer.data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        definition = serializer.save()
        logger.info(f"Created profile field {definition.shortname} ({definition.datatype})")
        return api_response(status.HTTP_201_CREATED, "success", self.get_serializer(definition).data)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        definition = serializer.save()
        logger.info(f"Updated profile field {definition.shortname}")
        return api_response(status.HTTP_200_OK, "success", self.get_serializer(definition).data)

    def destroy(self, request, *args, **kwargs):
        definition = self.get_object()
        shortname = definition.shortname
        definition.delete()
        logger.info(f"Deleted profile field {shortname} and its stored values")
        return api_response(status.HTTP_200_OK, "success", {})


@extend_schema(tags=["Profile Fields"])
class UserProfileFieldsViewSet(viewsets.ViewSet):
    """
    Read and edit the profile fields of a user.

    Users may always reach their own profile. Other profiles need the
    "view user" permission to read and the "update user" permission to edit.
    """

    permission_classes = [permissions.IsAuthenticated]

    def _get_user(self, request, pk, edit=False):
        user = get_object_or_404(get_user_model(), pk=pk)
        if user.pk == request.user.pk:
            return user
        if has_capability(request.user):
            return user
        if not edit and has_capability(request.user, VIEW_USER_PERMISSION):
            return user
        raise PermissionDenied()

    @extend_schema(summary="Get the profile field form of a user")
    def retrieve(self, request, pk=None):
        user = self._get_user(request, pk)
        return api_response(status.HTTP_200_OK, "success", {
            "userId": user.pk,
            "fields": serialize_profile(user, request.user),
        })

    @extend_schema(summary="Save profile field values of a user", request=ProfileValuesSerializer)
    def update(self, request, pk=None):
        user = self._get_user(request, pk, edit=True)
        serializer = ProfileValuesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        saved = save_profile_data(user, request.user, serializer.validated_data["values"])
        return api_response(status.HTTP_200_OK, "success", {
            "userId": user.pk,
            "saved": saved,
            "fields": serialize_profile(user, request.user),
        })

    @extend_schema(summary="List raw stored profile values of a user")
    @action(detail=True, methods=["get"], url_path="data")
    def stored_values(self, request, pk=None):
        user = self._get_user(request, pk)
        records = ProfileFieldData.objects.filter(user=user).select_related("field")
        return api_response(status.HTTP_200_OK, "success", ProfileFieldDataSerializer(records, many=True).data)


@extend_schema(tags=["Profile Fields"])
class ProfileFieldImportView(APIView):
    """
    Bulk import of profile values supplied by label or key.
    Each row is applied on its own; a failing row does not stop the others.
    """

    permission_classes = [permissions.IsAdminUser]

    @extend_schema(summary="Import profile field values", request=ProfileImportSerializer)
    def post(self, request):
        serializer = ProfileImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        User = get_user_model()
        results = []
        for row in serializer.validated_data["rows"]:
            username = row["username"]
            user = User.objects.filter(**{User.USERNAME_FIELD: username}).first()
            if user is None:
                results.append({"username": username, "status": "failure", "errors": {"username": ["Unknown user."]}})
                continue
            try:
                with transaction.atomic():
                    saved = import_profile_data(user, row, actor=request.user)
            except ProfileFieldValidationError as exc:
                results.append({"username": username, "status": "failure", "errors": exc.errors,
                                "errorMessage": format_validation_error(exc.detail)})
                continue
            results.append({"username": username, "status": "success", "saved": saved})

        failed = sum(1 for result in results if result["status"] == "failure")
        logger.info(f"Profile import finished: {len(results) - failed} succeeded, {failed} failed")
        return api_response(status.HTTP_200_OK, "success", {
            "total": len(results),
            "succeeded": len(results) - failed,
            "failed": failed,
            "results": results,
        })
