from invoice_dashboard.utils.revalidate import ViewCache, revalidate_path


def test_get_or_compute_caches_payload():
    cache = ViewCache()
    calls = []

    def compute():
        calls.append(1)
        return {"ok": True}

    assert cache.get_or_compute("/dashboard", compute) == {"ok": True}
    assert cache.get_or_compute("/dashboard", compute) == {"ok": True}
    assert len(calls) == 1


def test_none_is_not_cached():
    cache = ViewCache()
    assert cache.get_or_compute("/dashboard", lambda: None) is None
    assert "/dashboard" not in cache


def test_revalidate_drops_path_and_children_only():
    cache = ViewCache()
    for path in ("/dashboard", "/dashboard/invoices", "/dashboards", "/query"):
        cache.set(path, [])
    cache.revalidate("/dashboard")
    assert "/dashboard" not in cache
    assert "/dashboard/invoices" not in cache
    assert "/dashboards" in cache
    assert "/query" in cache


def test_revalidate_unknown_path_is_noop():
    cache = ViewCache()
    cache.set("/dashboard", 1)
    cache.revalidate("/customers")
    assert cache.get("/dashboard") == 1


def test_revalidate_path_uses_app_cache(app):
    cache = app.extensions["view_cache"]
    cache.set("/dashboard/invoices", [])
    revalidate_path("/dashboard/invoices")
    assert "/dashboard/invoices" not in cache
