import pytest
from django.http import QueryDict

from django_datagrid.utils import (
    grid_id_for,
    is_valid_grid_id,
    ordering_params,
    parse_ordering,
)


def test_parse_ordering_in_index_order():
    params = QueryDict(
        "_datagrid_ordering[1][field]=pages&_datagrid_ordering[1][direction]=desc"
        "&_datagrid_ordering[0][field]=title&_datagrid_ordering[0][direction]=asc"
    )
    assert parse_ordering(params) == [("title", "asc"), ("pages", "desc")]


def test_parse_ordering_skips_incomplete_clauses():
    params = QueryDict(
        "_datagrid_ordering[0][field]=title&_datagrid_ordering[1][direction]=asc"
        "&_datagrid_ordering[2][field]=pages&_datagrid_ordering[2][direction]="
    )
    assert parse_ordering(params) == []


def test_parse_ordering_ignores_other_keys():
    params = QueryDict(
        "title=x&_datagrid_ordering=title&_datagrid_ordering[a][field]=title"
    )
    assert parse_ordering(params) == []


def test_ordering_params_round_trip():
    ordering = [("title", "asc"), ("pages", "desc")]
    params = ordering_params(ordering)
    assert params["_datagrid_ordering[0][field]"] == "title"
    assert params["_datagrid_ordering[1][direction]"] == "desc"
    assert parse_ordering(params) == ordering


@pytest.mark.parametrize(
    "grid_id, valid",
    [
        ("myapp_datagrids_BookGrid", True),
        ("books2", True),
        ("", False),
        ("myapp.BookGrid", False),
        ("book grid", False),
        ("book/grid", False),
    ],
)
def test_is_valid_grid_id(grid_id, valid):
    assert is_valid_grid_id(grid_id) is valid


def test_grid_id_for_class():
    class Grid:
        pass

    Grid.__module__ = "shop.datagrids"
    Grid.__qualname__ = "OrderGrid"
    assert grid_id_for(Grid) == "shop_datagrids_OrderGrid"
