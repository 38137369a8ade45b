from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'

    def ready(self):
        """Register report templates and fonts when the app is ready."""
        import layouts  # noqa: F401
        from core.printing.fonts import load_fonts

        # Missing font files are reported here, at startup, not per request
        load_fonts()
