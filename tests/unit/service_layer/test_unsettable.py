"""Unit tests for datamodeler.service_layer.unsettable."""

import pickle

import pytest

from datamodeler.domain.errors import ValidationError
from datamodeler.service_layer.unsettable import UNSET, resolve

# --- Tests for the UNSET singleton ---


def test_unset_is_falsy():
    """UNSET evaluates to False in boolean contexts."""
    assert not UNSET


def test_unset_repr():
    """UNSET has the expected repr string."""
    assert repr(UNSET) == "UNSET"


def test_unset_is_singleton():
    """UNSET remains identical after pickling and unpickling."""
    assert pickle.loads(pickle.dumps(UNSET)) is UNSET


# --- Tests for resolve ---


def test_resolve_unset_returns_current():
    """resolve(UNSET, ...) returns the current value."""
    assert resolve(UNSET, "Customer", clearable=False, field="name") == "Customer"


def test_resolve_none_clears_value_when_clearable():
    """resolve(None, ...) returns None when clearable=True."""
    assert resolve(None, "text", clearable=True, field="description") is None


def test_resolve_none_raises_when_not_clearable():
    """resolve(None, ...) refuses to clear a required field."""
    with pytest.raises(ValidationError, match="Invalid name None: cannot be cleared") as e:
        resolve(None, "Customer", clearable=False, field="name")
    assert e.value.field == "name"


@pytest.mark.parametrize("value", ["", 0, False, "Order"])
def test_resolve_value_replaces_current(value):
    """Any concrete value, falsy ones included, replaces the current one."""
    assert resolve(value, "Customer", clearable=False, field="name") == value
