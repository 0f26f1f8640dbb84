"""Smoke test to ensure top-level package import works without triggering
circular import errors. This guards against regressions in the flat API
layer (`polyclip/__init__.py`).
"""

def test_import_polyclip_smoke():
    import polyclip  # noqa: F401
    assert hasattr(polyclip, 'intersect')
    assert hasattr(polyclip, 'buffer')
    assert set(polyclip.__all__) <= set(dir(polyclip))
