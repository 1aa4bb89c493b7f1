from django.apps import AppConfig


class ProfileFieldsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'app.platform.profilefields'
    label = 'profilefields'
    verbose_name = 'User Profile Fields'

    def ready(self):
        # Registers the shipped field types with the datatype registry.
        from . import autocomplete  # noqa: F401
