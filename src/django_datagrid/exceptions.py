class DataGridError(Exception):
    """Base class for data grid errors"""


class GridNotRegistered(DataGridError, LookupError):
    """No grid is registered under the requested id"""

    def __init__(self, grid_id):
        self.grid_id = grid_id
        super().__init__(f"No data grid registered with id '{grid_id}'")


class InvalidGridId(DataGridError, ValueError):
    """A grid id that cannot have been produced by grid_id_for()"""

    def __init__(self, grid_id):
        self.grid_id = grid_id
        super().__init__(f"Malformed data grid id '{grid_id}'")
