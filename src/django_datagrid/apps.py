from django.apps import AppConfig


class DjangoDatagridConfig(AppConfig):
    name = "django_datagrid"
    verbose_name = "Data grids"

    def ready(self):
        from .registry import autodiscover

        autodiscover()
