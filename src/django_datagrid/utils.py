import re

from django.conf import settings
from django.http import QueryDict
from django.utils.http import urlencode

DEFAULT_CACHE_ALIAS = "default"
DEFAULT_CACHE_TIMEOUT = 3600
DEFAULT_CACHE_PREFIX = "datagrid"
DEFAULT_DATE_FORMAT = "d/m/Y"
DEFAULT_HTMX_URL = "https://unpkg.com/htmx.org@1.9.12/dist/htmx.min.js"

PAGE_FIELD = "_page"
ORDERING_FIELD = "_datagrid_ordering"
RESERVED_NAMES = (PAGE_FIELD, ORDERING_FIELD)
# Parameters that never change the result set
IGNORED_PARAMS = ("csrfmiddlewaretoken",)

GRID_ID_RE = re.compile(r"^[A-Za-z0-9_]+$")
ORDERING_RE = re.compile(rf"^{ORDERING_FIELD}\[(\d+)\]\[(field|direction)\]$")


def get_cache_alias():
    return getattr(settings, "DATAGRID_CACHE_ALIAS", DEFAULT_CACHE_ALIAS)


def get_cache_timeout():
    return getattr(settings, "DATAGRID_CACHE_TIMEOUT", DEFAULT_CACHE_TIMEOUT)


def get_cache_prefix():
    return getattr(settings, "DATAGRID_CACHE_PREFIX", DEFAULT_CACHE_PREFIX)


def get_force_refresh():
    """
    When True every lookup deletes the key before reading it, so each request
    recomputes its page and rewrites the entry. Off by default.
    """
    return getattr(settings, "DATAGRID_CACHE_FORCE_REFRESH", False)


def get_date_format():
    return getattr(settings, "DATAGRID_DATE_FORMAT", DEFAULT_DATE_FORMAT)


def get_htmx_url():
    return getattr(settings, "DATAGRID_HTMX_URL", DEFAULT_HTMX_URL)


def grid_id_for(cls) -> str:
    """Stable url-safe id from the fully qualified class name"""
    name = f"{cls.__module__}.{cls.__qualname__}".replace(".", "_")
    return re.sub(r"[^A-Za-z0-9_]", "", name)


def is_valid_grid_id(grid_id: str) -> bool:
    return bool(grid_id) and GRID_ID_RE.match(grid_id) is not None


def canonical_query_string(params) -> str:
    """
    Encode request parameters so that the same logical query always gives the same
    string.
    Names are sorted; the values of a repeated name keep their submitted order.
    """
    if isinstance(params, QueryDict):
        items = params.lists()
    else:
        items = (
            (key, value if isinstance(value, (list, tuple)) else [value])
            for key, value in dict(params).items()
        )
    pairs = []
    for key, values in sorted(items, key=lambda item: item[0]):
        if key in IGNORED_PARAMS:
            continue
        pairs.extend((key, value) for value in values)
    return urlencode(pairs)


def parse_ordering(params) -> list[tuple[str, str]]:
    """
    Extract (field, direction) pairs from '_datagrid_ordering[i][field]' and
    '_datagrid_ordering[i][direction]' parameters, in index order.
    Incomplete pairs are skipped.
    """
    clauses = {}
    for key in params.keys():
        match = ORDERING_RE.match(key)
        if match:
            index, part = int(match.group(1)), match.group(2)
            clauses.setdefault(index, {})[part] = params.get(key)
    return [
        (clause["field"], clause["direction"])
        for _, clause in sorted(clauses.items())
        if clause.get("field") and clause.get("direction")
    ]


def ordering_params(ordering) -> dict[str, str]:
    """Inverse of parse_ordering, used to build links and test requests"""
    params = {}
    for index, (field, direction) in enumerate(ordering):
        params[f"{ORDERING_FIELD}[{index}][field]"] = field
        params[f"{ORDERING_FIELD}[{index}][direction]"] = direction
    return params
