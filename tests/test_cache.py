from unittest.mock import MagicMock, patch

import pytest
from django.http import QueryDict
from django.test import override_settings

from django_datagrid.cache import ResultCache, make_key
from django_datagrid.utils import canonical_query_string, ordering_params


def test_canonical_query_ignores_parameter_order():
    a = QueryDict("title=x&_page=2&min_pages=3")
    b = QueryDict("min_pages=3&title=x&_page=2")
    assert canonical_query_string(a) == canonical_query_string(b)
    assert make_key("g", a) == make_key("g", b)


def test_canonical_query_keeps_order_of_repeated_values():
    a = QueryDict("tag=a&tag=b")
    b = QueryDict("tag=b&tag=a")
    assert canonical_query_string(a) != canonical_query_string(b)


def test_canonical_query_ignores_csrf_token():
    a = QueryDict("title=x&csrfmiddlewaretoken=one")
    b = QueryDict("title=x&csrfmiddlewaretoken=two")
    assert make_key("g", a) == make_key("g", b)


def test_canonical_query_accepts_plain_dicts():
    assert canonical_query_string({"b": "2", "a": ["1", "3"]}) == "a=1&a=3&b=2"


def test_keys_differ_for_every_parameter():
    base = {"title": "x", "_page": "1"}
    keys = {
        make_key("g", base),
        make_key("g", {**base, "title": "y"}),
        make_key("g", {**base, "_page": "2"}),
        make_key("g", {**base, **ordering_params([("title", "asc")])}),
        make_key("g", {**base, **ordering_params([("title", "desc")])}),
        make_key("other", base),
        make_key("g", base, page_size=10),
    }
    assert len(keys) == 7


def test_key_has_prefix():
    key = make_key("g", {})
    assert key.startswith("datagrid:g:")


@override_settings(DATAGRID_CACHE_PREFIX="mygrids")
def test_key_prefix_from_settings():
    assert make_key("g", {}).startswith("mygrids:g:")


def test_get_or_compute_reuses_value():
    cache = ResultCache()
    compute = MagicMock(return_value=[1, 2, 3])
    assert cache.get_or_compute("k", compute) == [1, 2, 3]
    assert cache.get_or_compute("k", compute) == [1, 2, 3]
    assert compute.call_count == 1


def test_falsy_values_are_cached():
    cache = ResultCache()
    compute = MagicMock(return_value=[])
    cache.get_or_compute("k", compute)
    cache.get_or_compute("k", compute)
    assert compute.call_count == 1


def test_settings_defaults():
    cache = ResultCache()
    assert cache.alias == "datagrid"
    assert cache.timeout == 3600
    assert not cache.force_refresh


def test_timeout_passed_to_backend():
    cache = ResultCache(timeout=60)
    with patch.object(cache.backend, "set") as set_:
        cache.get_or_compute("k", lambda: "value")
    set_.assert_called_once_with("k", "value", 60)


@override_settings(DATAGRID_CACHE_FORCE_REFRESH=True)
def test_force_refresh_recomputes_every_time():
    cache = ResultCache()
    compute = MagicMock(side_effect=["first", "second"])
    assert cache.get_or_compute("k", compute) == "first"
    assert cache.get_or_compute("k", compute) == "second"
    assert compute.call_count == 2
    assert cache.backend.get("k") == "second"


def test_read_error_falls_back_to_compute(caplog):
    cache = ResultCache()
    with patch.object(cache.backend, "get", side_effect=OSError("disk gone")):
        assert cache.get_or_compute("k", lambda: "fresh") == "fresh"
    assert "cache read failed" in caplog.text


def test_write_error_does_not_fail(caplog):
    cache = ResultCache()
    with patch.object(cache.backend, "set", side_effect=OSError("disk full")):
        assert cache.get_or_compute("k", lambda: "fresh") == "fresh"
    assert "cache write failed" in caplog.text


@override_settings(DATAGRID_CACHE_FORCE_REFRESH=True)
def test_delete_error_does_not_fail(caplog):
    cache = ResultCache()
    with patch.object(cache.backend, "delete", side_effect=OSError("locked")):
        assert cache.get_or_compute("k", lambda: "fresh") == "fresh"
    assert "cache delete failed" in caplog.text


def test_file_based_cache_survives_new_instances(tmp_path):
    caches = {
        "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
        "datagrid": {
            "BACKEND": "django.core.cache.backends.filebased.FileBasedCache",
            "LOCATION": str(tmp_path),
        },
    }
    with override_settings(CACHES=caches):
        compute = MagicMock(return_value={"rows": [1]})
        ResultCache().get_or_compute("k", compute)
        assert ResultCache().get_or_compute("k", compute) == {"rows": [1]}
        assert compute.call_count == 1
        assert any(tmp_path.iterdir())
