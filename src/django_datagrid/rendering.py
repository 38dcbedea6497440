from collections import namedtuple

from django.template.loader import render_to_string
from django.urls import reverse
from django.utils.functional import cached_property
from django.utils.http import urlencode

from .pagination import build_pagination
from .pipeline import ASC, DESC, GridExecution
from .serializers import LinkContext, serialize
from .utils import IGNORED_PARAMS, ORDERING_FIELD, PAGE_FIELD, ordering_params

TEMPLATES = {
    "datagrid": "django_datagrid/datagrid.html",
    "filter_form": "django_datagrid/_filter_form.html",
    "table": "django_datagrid/_table.html",
    "rows": "django_datagrid/_rows.html",
    "pagination": "django_datagrid/_pagination.html",
    "results": "django_datagrid/_results.html",
}

HeaderCell = namedtuple("HeaderCell", ["title", "order_by", "direction", "sort_url"])


class BoundGrid:
    """
    A grid definition executed for one request, with everything the templates need:
    the filter form, the serialized rows, the pagination items and the urls.
    """

    def __init__(self, definition, request, cache=None, htmx=False):
        self.definition = definition
        self.request = request
        self.htmx = htmx
        self.execution = GridExecution(definition, request, cache=cache)

    @property
    def id(self):
        return self.definition.grid_id

    @property
    def form(self):
        return self.execution.form

    @property
    def state(self):
        return self.execution.state

    @property
    def errors(self):
        return self.execution.state.errors

    @cached_property
    def page(self):
        return self.execution.execute()

    @cached_property
    def data(self):
        return serialize(self.page, self.definition, LinkContext(self.request))

    @property
    def items(self):
        return self.data["items"]

    @property
    def pagination(self):
        """(PageItem, url) pairs; disabled items have no url"""
        return [
            (item, self.url_for(page=item.page) if item.page else "")
            for item in build_pagination(self.page.current_page, self.page.page_count)
        ]

    @property
    def headers(self):
        return [
            HeaderCell(
                column.title,
                column.order_by or "",
                self.direction_for(column),
                self.sort_url(column) if column.order_by else "",
            )
            for column in self.definition.columns.values()
        ]

    @property
    def colspan(self):
        return len(self.definition.columns) + 1

    @cached_property
    def ajax_url(self):
        return reverse("django_datagrid:ajax", kwargs={"grid_id": self.id})

    def query_for(self, page=None, ordering=None):
        """
        Query string reproducing the current filter values with another page or
        ordering. Used by the htmx templates where every link carries its full query.
        """
        params = []
        if self.state.applied:
            for key, values in self.execution.data.lists():
                if key in IGNORED_PARAMS or key == PAGE_FIELD:
                    continue
                if key.startswith(ORDERING_FIELD):
                    continue
                params.extend((key, value) for value in values)
        if ordering is None:
            ordering = [(c.field, c.direction) for c in self.state.ordering]
        params.append((PAGE_FIELD, page or self.page.current_page))
        params.extend(ordering_params(ordering).items())
        return urlencode(params)

    def url_for(self, page=None, ordering=None):
        return f"{self.ajax_url}?{self.query_for(page=page, ordering=ordering)}"

    def sort_url(self, column):
        direction = DESC if self.direction_for(column) == ASC else ASC
        return self.url_for(page=1, ordering=[(column.order_by, direction)])

    def direction_for(self, column):
        for clause in self.state.ordering:
            if clause.field == column.order_by:
                return clause.direction
        return ""

    def context(self, **kwargs):
        context = {"grid": self, "templates": TEMPLATES}
        context.update(kwargs)
        return context

    def render(self, template_name=None, **kwargs):
        return render_to_string(
            template_name or TEMPLATES["datagrid"],
            self.context(**kwargs),
            request=self.request,
        )
