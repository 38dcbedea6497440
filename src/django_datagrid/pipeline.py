import logging
from dataclasses import dataclass, field
from typing import Optional

from django import forms
from django.core.exceptions import FieldDoesNotExist
from django_filters.filters import Filter
from django_filters.filterset import FilterSet
from django_tables2.utils import Accessor

from .cache import ResultCache, make_key
from .definition import GridDefinition
from .pagination import page_count, page_offset
from .utils import PAGE_FIELD, parse_ordering

logger = logging.getLogger(__name__)

ASC = "asc"
DESC = "desc"
DIRECTIONS = (ASC, DESC)


class PageFilter(Filter):
    """Hidden current page field. Read by the pipeline, never applied as a predicate."""

    field_class = forms.IntegerField


@dataclass(frozen=True)
class OrderClause:
    field: str
    direction: str = ASC

    @property
    def expression(self):
        return f"-{self.field}" if self.direction == DESC else self.field


@dataclass
class FilterState:
    """Values bound from one request. Thrown away when the request completes."""

    values: dict = field(default_factory=dict)
    page: int = 1
    ordering: tuple = ()
    submitted: bool = False
    valid: bool = False
    errors: dict = field(default_factory=dict)

    @property
    def applied(self):
        return self.submitted and self.valid


@dataclass
class ResultPage:
    rows: list
    total_count: int
    current_page: int
    page_size: int

    @property
    def page_count(self):
        return page_count(self.total_count, self.page_size)

    @property
    def offset(self):
        return page_offset(self.current_page, self.page_size)

    @property
    def has_previous(self):
        return self.current_page > 1

    @property
    def has_next(self):
        return self.current_page < self.page_count


def filterset_class_for(definition: GridDefinition):
    attrs = {
        name: filter_field.make_filter()
        for name, filter_field in definition.filters.items()
    }
    attrs[PAGE_FIELD] = PageFilter(
        field_name=PAGE_FIELD,
        widget=forms.HiddenInput,
        min_value=1,
        required=False,
        initial=1,
    )
    return type(f"{definition.grid_id}FilterSet", (FilterSet,), attrs)


def request_data(request):
    return request.POST if request.method == "POST" else request.GET


def add_order_by(plan, clause: OrderClause):
    """Append a clause to the ordering already on the plan, like ORDER BY a, b"""
    existing = tuple(plan.query.order_by) if hasattr(plan, "query") else ()
    return plan.order_by(*existing, clause.expression)


def related_paths(model, columns):
    """
    select_related() paths for the named column accessors that follow foreign keys,
    e.g. "author" for "author__name".
    """
    paths = set()
    for column in columns:
        if column.is_callable:
            continue
        opts = model._meta
        path = []
        for bit in Accessor(column.accessor).bits[:-1]:
            try:
                model_field = opts.get_field(bit)
            except FieldDoesNotExist:
                break
            single = model_field.many_to_one or model_field.one_to_one
            if not single or model_field.related_model is None:
                break
            path.append(bit)
            opts = model_field.related_model._meta
        if path:
            paths.add("__".join(path))
    return sorted(paths)


class GridExecution:
    """
    Runs one grid for one request: binds the filter form, applies ordering and
    predicates, then paginates through the result cache.
    """

    def __init__(
        self, definition: GridDefinition, request, cache: Optional[ResultCache] = None
    ):
        self.definition = definition
        self.request = request
        self.cache = cache or ResultCache()
        self.data = request_data(request)
        self.filterset = None
        self.state = self.bind()
        self._page = None

    @property
    def form(self):
        return self.filterset.form

    def is_submitted(self, fields) -> bool:
        for key in self.data.keys():
            for name in fields:
                if key == name or key.startswith(f"{name}_"):
                    return True
        return False

    def bind(self) -> FilterState:
        filterset_class = filterset_class_for(self.definition)
        submitted = self.is_submitted(filterset_class.base_filters.keys())
        self.filterset = filterset_class(
            data=self.data if submitted else None,
            queryset=self.definition.get_queryset(),
            request=self.request,
        )
        self.filterset.form.auto_id = f"{self.definition.grid_id}-datagrid-filter-%s"
        state = FilterState(submitted=submitted)
        if not submitted:
            return state
        if not self.filterset.is_valid():
            state.errors = self.filterset.form.errors.get_json_data()
            logger.info(
                "Invalid filter submission for grid '%s', showing all rows: %s",
                self.definition.grid_id,
                self.filterset.form.errors.as_text(),
            )
            return state
        state.valid = True
        cleaned = self.filterset.form.cleaned_data
        state.page = cleaned.get(PAGE_FIELD) or 1
        state.values = {name: cleaned.get(name) for name in self.definition.filters}
        state.ordering = tuple(self.resolve_ordering())
        return state

    def resolve_ordering(self):
        orderable = self.definition.orderable_fields
        for field_name, direction in parse_ordering(self.data):
            direction = direction.lower()
            if direction not in DIRECTIONS:
                logger.warning(
                    "Grid '%s': ignoring ordering on '%s' with direction '%s'",
                    self.definition.grid_id,
                    field_name,
                    direction,
                )
                continue
            if field_name not in orderable:
                logger.warning(
                    "Grid '%s': ignoring ordering on '%s', not an orderable column",
                    self.definition.grid_id,
                    field_name,
                )
                continue
            yield OrderClause(field_name, direction)

    def build_plan(self):
        plan = self.filterset.queryset
        if self.state.applied:
            for clause in self.state.ordering:
                plan = add_order_by(plan, clause)
            for name, filter_field in self.definition.filters.items():
                plan = filter_field.predicate(plan, self.state.values.get(name))
        # Pages of an unordered query may overlap
        if not plan.ordered:
            plan = plan.order_by("pk")
        return plan

    def cache_key(self):
        params = self.data if self.state.applied else {}
        return make_key(
            self.definition.grid_id, params, page_size=self.definition.page_size
        )

    def execute(self) -> ResultPage:
        if self._page is None:
            self._page = self.cache.get_or_compute(self.cache_key(), self.compute)
        return self._page

    def compute(self) -> ResultPage:
        plan = self.build_plan()
        page_size = self.definition.page_size
        offset = page_offset(self.state.page, page_size)
        total_count = plan.count()
        if offset < total_count:
            # Related rows are loaded with the page so cached pages need no query
            paths = related_paths(plan.model, self.definition.columns.values())
            if paths:
                plan = plan.select_related(*paths)
            rows = list(plan[offset : offset + page_size])
        else:
            rows = []
        logger.debug(
            "Grid '%s' page %s: %s of %s rows",
            self.definition.grid_id,
            self.state.page,
            len(rows),
            total_count,
        )
        return ResultPage(
            rows=rows,
            total_count=total_count,
            current_page=self.state.page,
            page_size=page_size,
        )


def execute(
    definition: GridDefinition, request, cache: Optional[ResultCache] = None
) -> ResultPage:
    return GridExecution(definition, request, cache=cache).execute()
