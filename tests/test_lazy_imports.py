"""Tests for pagewright.__init__ — lazy public API."""

import pytest

import pagewright


@pytest.mark.parametrize("name", pagewright.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(pagewright, name)
    assert obj is not None, f"pagewright.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        pagewright.__getattr__("ThisDoesNotExist")
