from django.apps import AppConfig


class ApiAuthConfig(AppConfig):
    """JWT endpoints. Labelled apart from django.contrib.auth ("auth")."""

    name = "apps.auth"
    label = "api_auth"
