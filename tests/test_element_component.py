from types import SimpleNamespace

import pytest

import element_component
from element_component import current_receipt_id


@pytest.fixture
def fake_st(monkeypatch):
    fake = SimpleNamespace(session_state={}, query_params={})
    monkeypatch.setattr(element_component, "st", fake)
    return fake


def test_handed_over_id_is_consumed_once(fake_st):
    fake_st.session_state["selected_receipt_id"] = "r1"

    assert current_receipt_id() == "r1"
    assert "selected_receipt_id" not in fake_st.session_state
    assert fake_st.query_params["id"] == "r1"


def test_sidebar_visit_after_edit_starts_new(fake_st):
    fake_st.session_state["selected_receipt_id"] = "r1"
    current_receipt_id()

    # page opened from the sidebar: query parameters are gone
    fake_st.query_params.clear()

    assert current_receipt_id() is None


def test_query_param_survives_reruns(fake_st):
    fake_st.query_params["id"] = "r2"

    assert current_receipt_id() == "r2"
    assert current_receipt_id() == "r2"
