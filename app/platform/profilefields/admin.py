from django import forms
from django.contrib import admin

from .base import field_type_choices
from .models import ProfileFieldDefinition, ProfileFieldData


@admin.register(ProfileFieldDefinition)
class ProfileFieldDefinitionAdmin(admin.ModelAdmin):
    list_display = ("shortname", "name", "datatype", "required", "locked", "visible", "sortorder")
    list_filter = ("datatype", "required", "locked", "visible")
    search_fields = ("shortname", "name")
    ordering = ("sortorder", "shortname")

    def formfield_for_dbfield(self, db_field, request, **kwargs):
        # Offer only the registered field types
        if db_field.name == "datatype":
            return forms.ChoiceField(
                label=db_field.verbose_name.capitalize(),
                choices=field_type_choices(),
                initial=db_field.default,
            )
        return super().formfield_for_dbfield(db_field, request, **kwargs)


@admin.register(ProfileFieldData)
class ProfileFieldDataAdmin(admin.ModelAdmin):
    list_display = ("user", "field", "data", "updated_at")
    list_filter = ("field",)
    search_fields = ("data", "field__shortname")
    raw_id_fields = ("user",)
