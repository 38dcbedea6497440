import logging

from django.core.exceptions import ImproperlyConfigured
from django.http import Http404, HttpResponse, HttpResponseBadRequest, JsonResponse
from django.views import View
from django.views.generic import TemplateView
from django_htmx.http import trigger_client_event

from .exceptions import GridNotRegistered, InvalidGridId
from .registry import registry
from .rendering import TEMPLATES, BoundGrid

logger = logging.getLogger(__name__)


def is_htmx(request):
    return bool(getattr(request, "htmx", False))


class DataGridAjaxView(View):
    """
    Ajax endpoint shared by all grids: <namespace>/ajax/<grid_id>

    Returns {"items": [...], "nbPages": n, "currentPage": p} as JSON, plus "errors"
    when the filter form was submitted with invalid values. htmx requests receive the
    rendered table and pagination instead.
    """

    http_method_names = ["get", "post"]
    registry = registry

    def dispatch(self, request, *args, **kwargs):
        grid_id = kwargs.get("grid_id", "")
        try:
            self.definition = self.registry.get(grid_id)
        except InvalidGridId:
            logger.info("Rejected malformed grid id '%s'", grid_id)
            return HttpResponseBadRequest("Malformed grid id")
        except GridNotRegistered:
            raise Http404(f"No data grid '{grid_id}'")
        return super().dispatch(request, *args, **kwargs)

    def get(self, request, *args, **kwargs):
        return self.render_grid(request)

    def post(self, request, *args, **kwargs):
        return self.render_grid(request)

    def render_grid(self, request):
        grid = BoundGrid(self.definition, request, htmx=is_htmx(request))
        if grid.htmx:
            return self.render_htmx(grid)
        data = dict(grid.data)
        if grid.errors:
            data["errors"] = grid.errors
        return JsonResponse(data)

    def render_htmx(self, grid):
        response = HttpResponse(grid.render(TEMPLATES["results"]))
        return trigger_client_event(
            response,
            "datagrid:refreshed",
            {
                "grid": grid.id,
                "currentPage": grid.page.current_page,
                "nbPages": grid.page.page_count,
            },
        )


class DataGridMixin:
    """
    Adds an executed grid to the context of a view, for the first (non ajax) render.
    Use {% datagrid datagrid %} in the template.
    """

    grid_class = None
    context_grid_name = "datagrid"
    htmx = False

    def get_grid_class(self):
        if self.grid_class is None:
            raise ImproperlyConfigured(
                "%(cls)s is missing a grid. Define %(cls)s.grid_class or override "
                "%(cls)s.get_grid_class()." % {"cls": self.__class__.__name__}
            )
        return self.grid_class

    def get_grid_definition(self):
        return self.get_grid_class().get_definition()

    def get_grid(self):
        return BoundGrid(self.get_grid_definition(), self.request, htmx=self.htmx)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context[self.context_grid_name] = self.get_grid()
        return context


class DataGridView(DataGridMixin, TemplateView):
    title = ""
    template_name = "django_datagrid/page.html"
