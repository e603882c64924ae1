"""Shared test fixtures."""

import pytest

from elastisort.core.config import set_config
from elastisort.search.query import NestedSort, Script, TermQuery


@pytest.fixture(autouse=True)
def reset_config():
    """Restore the default configuration after every test."""
    yield
    set_config(None)


@pytest.fixture
def blue_variant_filter() -> TermQuery:
    """Fixture providing the term filter used by the nested sort examples."""
    return TermQuery("product.color", "blue")


@pytest.fixture
def offer_nested_sort() -> NestedSort:
    """Fixture providing a nested sort on blue offers."""
    return NestedSort("offer").filter(TermQuery("offer.color", "blue"))


@pytest.fixture
def factor_script() -> Script:
    """Fixture providing a parameterized sort script."""
    return Script("doc['field_name'].value * factor").param("factor", 1.1)
