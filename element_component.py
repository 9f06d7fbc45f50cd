from typing import Optional

import pandas as pd
import streamlit as st

from api_client import delete_admin_receipt
from domain.models import AdminReceipt, Client

STATUS_COLORS = {
    "complete": "green",
    "incomplete": "orange",
}


def current_receipt_id() -> Optional[str]:
    """
    Receipt id from the `id` query parameter.

    An id handed over by `open_receipt` is consumed once and moved into the
    query parameter, so opening a page from the sidebar later starts clean.
    """
    selected = st.session_state.pop("selected_receipt_id", None)
    if selected:
        st.query_params["id"] = selected
        return selected
    return st.query_params.get("id")


def open_receipt(page: str, receipt_id: Optional[str]) -> None:
    st.session_state["selected_receipt_id"] = receipt_id
    st.switch_page(page)


def status_badge(status: str) -> None:
    color = STATUS_COLORS.get(status, "gray")
    st.markdown(f"Status: :{color}[**{status or 'unknown'}**]")


def client_summary(client: Client) -> None:
    df = pd.DataFrame(
        [
            ("Client", client.name),
            ("Shop", client.shop_name),
            ("Phone", client.phone_number),
            ("Address", client.address),
        ],
        columns=["Key", "Value"],
    )
    st.dataframe(df, hide_index=True)


@st.dialog("Confirm")
def confirmation_dialog_delete(receipt: AdminReceipt, state_name: str):
    st.write(f"Delete voucher **{receipt.voucher_id or receipt.id}** for **{receipt.client_name}**?")

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("Yes", type="primary", key="confirm_yes"):
            status, msg = delete_admin_receipt(receipt.id)
            st.session_state[state_name] = status

            if not status:
                st.error(msg)
            else:
                st.rerun()
    with col_no:
        if st.button("No"):
            st.rerun()
