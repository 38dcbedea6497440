from django.core.exceptions import ImproperlyConfigured

from .definition import DEFAULT_METHOD, DEFAULT_PAGE_SIZE, GridBuilder, GridDefinition
from .utils import get_date_format, grid_id_for


class DataGrid:
    """
    Base class for a grid. Subclass it, set the class attributes you need and declare
    filters, columns and actions in configure()::

        @register
        class BookGrid(DataGrid):
            model = Book
            page_size = 10

            def configure(self, grid):
                grid.filter("title", CharFilter, {"label": "Title"}, filter_title)
                grid.display("Title", "title", order_by="title")
                grid.action("Edit", book_edit_url)

    The definition is built once per class and reused for every request.
    """

    grid_id = None
    model = None
    queryset = None
    method = DEFAULT_METHOD
    page_size = DEFAULT_PAGE_SIZE
    date_format = None

    _definitions = {}

    @classmethod
    def get_id(cls):
        return cls.grid_id or grid_id_for(cls)

    @classmethod
    def get_definition(cls) -> GridDefinition:
        definition = DataGrid._definitions.get(cls)
        if definition is None:
            definition = cls().build_definition()
            DataGrid._definitions[cls] = definition
        return definition

    def get_queryset(self):
        if self.queryset is not None:
            return self.queryset.all()
        if self.model is not None:
            return self.model._default_manager.all()
        raise ImproperlyConfigured(
            "%(cls)s is missing a QuerySet. Define "
            "%(cls)s.model, %(cls)s.queryset, or override "
            "%(cls)s.get_queryset()." % {"cls": self.__class__.__name__}
        )

    def configure(self, grid: GridBuilder):
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement configure()"
        )

    def build_definition(self) -> GridDefinition:
        # Fail when the grid is defined, not on its first request
        self.get_queryset()
        builder = GridBuilder(
            self.get_id(), date_format=self.date_format or get_date_format()
        )
        builder.query(self.get_queryset).method(self.method).page_size(self.page_size)
        self.configure(builder)
        return builder.build()
