import pytest
from hypothesis import given, settings
import hypothesis.strategies as st

from config import REGIONS_PATH
from models import PurifyCommand, PurifyRequest
from services.event_handler import apply_purify_command, apply_purify_request
from services.region_store import RegionStore


def test_command_boost_reduces_pollution_by_fraction(store):
    region = apply_purify_command(store, PurifyCommand(region_id="R2", boost=10))
    assert region.purification_percent == pytest.approx(45)
    assert region.pollution_level == pytest.approx(54)


def test_command_default_boost(store):
    region = apply_purify_command(store, PurifyCommand(region_id="R4"))
    assert region.purification_percent == pytest.approx(38)
    assert region.pollution_level == pytest.approx(67)


def test_command_accepts_camel_case_payload(store):
    command = PurifyCommand.model_validate({"regionId": "R1", "boost": 12})
    region = apply_purify_command(store, command)
    assert region.purification_percent == pytest.approx(74)
    assert region.pollution_level == pytest.approx(48 - 9.6)


def test_command_unknown_region_changes_nothing(store):
    before = [r.model_dump() for r in store.list()]
    assert apply_purify_command(store, PurifyCommand(region_id="R9", boost=10)) is None
    assert apply_purify_command(store, PurifyCommand()) is None
    assert [r.model_dump() for r in store.list()] == before


def test_request_uses_independent_clean_amount(store):
    region = apply_purify_request(store, "R2", PurifyRequest(boost=20, clean=1))
    assert region.purification_percent == pytest.approx(55)
    assert region.pollution_level == pytest.approx(61)


def test_request_defaults(store):
    region = apply_purify_request(store, "R2")
    assert region.purification_percent == pytest.approx(43)
    assert region.pollution_level == pytest.approx(56)


def test_request_unknown_region(store):
    assert apply_purify_request(store, "missing", PurifyRequest(boost=5)) is None


def test_large_boost_is_clamped(store):
    region = apply_purify_command(store, PurifyCommand(region_id="R3", boost=1_000))
    assert region.purification_percent == 100
    assert region.pollution_level == 5


amounts = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False)


@settings(max_examples=100, deadline=None)
@given(boost=amounts, clean=amounts, use_command=st.booleans())
def test_purify_keeps_bounds_for_any_amount(boost, clean, use_command):
    store = RegionStore.from_seed(REGIONS_PATH)
    if use_command:
        region = apply_purify_command(store, PurifyCommand(region_id="R1", boost=boost))
    else:
        region = apply_purify_request(store, "R1", PurifyRequest(boost=boost, clean=clean))
    assert 0 <= region.purification_percent <= 100
    assert 5 <= region.pollution_level <= 200
