from django.urls import path

from .views import DataGridAjaxView

app_name = "django_datagrid"

urlpatterns = [
    path("ajax/<str:grid_id>", DataGridAjaxView.as_view(), name="ajax"),
]
