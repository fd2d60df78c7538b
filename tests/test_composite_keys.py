from __future__ import annotations

import pytest

from rtoledger.exceptions import InvalidKeyError
from rtoledger.store.composite import (
    COMPOSITE_KEY_NAMESPACE,
    MAX_UNICODE_RUNE,
    create_composite_key,
    is_composite_key,
    partial_key_range,
    split_composite_key,
)


def test_composite_key_layout() -> None:
    key = create_composite_key("chassis~vehicleId", ["CH001", "VEH2001"])
    assert key == "\x00chassis~vehicleId\x00CH001\x00VEH2001\x00"
    assert is_composite_key(key)


def test_split_recovers_index_name_and_components() -> None:
    key = create_composite_key("registration~vehicleId", ["MH12AB0001", "VEH2001"])
    assert split_composite_key(key) == ("registration~vehicleId", ["MH12AB0001", "VEH2001"])


def test_split_keeps_empty_components() -> None:
    key = create_composite_key("registration~vehicleId", ["", "VEH2001"])
    assert split_composite_key(key) == ("registration~vehicleId", ["", "VEH2001"])


def test_primary_keys_are_not_composite() -> None:
    assert not is_composite_key("VEH2001")
    assert not is_composite_key("chassis~vehicleId")


@pytest.mark.parametrize("component", ["bad\x00value", f"bad{MAX_UNICODE_RUNE}"])
def test_reserved_characters_rejected(component: str) -> None:
    with pytest.raises(InvalidKeyError):
        create_composite_key("chassis~vehicleId", [component])


def test_empty_index_name_rejected() -> None:
    with pytest.raises(InvalidKeyError):
        create_composite_key("", ["x"])


def test_split_rejects_primary_key() -> None:
    with pytest.raises(InvalidKeyError):
        split_composite_key("VEH2001")


def test_partial_range_does_not_match_longer_values() -> None:
    start, end = partial_key_range("chassis~vehicleId", ["CH00"])
    exact = create_composite_key("chassis~vehicleId", ["CH00", "VEH1"])
    longer = create_composite_key("chassis~vehicleId", ["CH001", "VEH2"])

    assert start <= exact < end
    assert not (start <= longer < end)
    assert start.endswith(COMPOSITE_KEY_NAMESPACE)
