import logging

from django.utils.module_loading import autodiscover_modules

from .exceptions import GridNotRegistered, InvalidGridId
from .utils import is_valid_grid_id

logger = logging.getLogger(__name__)


class GridRegistry:
    """
    Maps grid ids to factories returning a GridDefinition.
    Ids that were never registered are rejected; nothing is imported from the id itself.
    """

    def __init__(self):
        self._factories = {}

    def register(self, grid_class=None, *, grid_id=None, factory=None):
        """
        Register a DataGrid subclass under its id (usable as a decorator), or an
        explicit grid_id with a factory callable returning a GridDefinition with that
        id.
        """
        if grid_class is not None:
            grid_id = grid_class.get_id()
            factory = grid_class.get_definition
        elif factory is None:
            raise TypeError(
                "register() needs a DataGrid subclass or a grid_id and a factory"
            )
        if not is_valid_grid_id(grid_id):
            raise InvalidGridId(grid_id)
        existing = self._factories.get(grid_id)
        if existing is not None and existing != factory:
            logger.warning(
                "Data grid '%s' registered twice, the last registration wins", grid_id
            )
        self._factories[grid_id] = factory
        return grid_class if grid_class is not None else factory

    def unregister(self, grid_id):
        self._factories.pop(grid_id, None)

    def get(self, grid_id):
        if not is_valid_grid_id(grid_id):
            raise InvalidGridId(grid_id)
        try:
            factory = self._factories[grid_id]
        except KeyError:
            raise GridNotRegistered(grid_id) from None
        return factory()

    def __contains__(self, grid_id):
        return grid_id in self._factories

    def __len__(self):
        return len(self._factories)

    def ids(self):
        return sorted(self._factories)


registry = GridRegistry()
register = registry.register


def autodiscover():
    """Import the datagrids module of every installed app to run its @register calls"""
    autodiscover_modules("datagrids")
