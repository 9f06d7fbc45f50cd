import logging
import os

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from api_client import fetch_admin_receipts
from element_component import confirmation_dialog_delete, open_receipt
from services.client_service import load_clients
from utils.formatting import format_date, format_number

load_dotenv()
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

EDITOR_PAGE = "pages/1_New_Admin_Receipt.py"
DETAIL_PAGE = "pages/2_Admin_Receipt_Detail.py"

st.set_page_config(
    page_title="Admin Receipts",
    page_icon="💍"
)

st.sidebar.header("💍 Admin Receipts")

if 'receipt_delete_state' not in st.session_state:
    st.session_state['receipt_delete_state'] = False

if "clients" not in st.session_state:
    st.session_state["clients"], st.session_state["clients_warning"] = load_clients()

if st.session_state["clients_warning"]:
    st.warning(st.session_state["clients_warning"])

st.title("Admin Receipts")

if st.button("➕ New Admin Receipt", type="primary"):
    open_receipt(EDITOR_PAGE, None)

client_by_label = {
    f"{c.name} ({c.shop_name})": c.id for c in st.session_state["clients"]
}
client_label = st.selectbox(
    "Filter by client",
    client_by_label.keys(),
    index=None,
    placeholder="All clients",
)
client_id = client_by_label.get(client_label) if client_label else None

ok, msg, receipts = fetch_admin_receipts(client_id)

if not ok:
    st.error(msg)
    st.stop()

if not receipts:
    st.info("No receipts found.")
    st.stop()

df = pd.DataFrame(
    [
        {
            "Voucher": r.voucher_id or "-",
            "Client": r.client_name,
            "Status": r.status,
            "Given Total": format_number(r.given.snapshot.total if r.given and r.given.snapshot else 0),
            "Received Total": format_number(r.received.snapshot.total if r.received and r.received.snapshot else 0),
            "Created": format_date(r.created_at),
        }
        for r in receipts
    ]
)
st.dataframe(df, width='stretch', hide_index=True)

st.divider()

for receipt in receipts:
    col_label, col_view, col_edit, col_delete = st.columns([3, 1, 1, 1])
    with col_label:
        st.markdown(f"**{receipt.voucher_id or receipt.id}** · {receipt.client_name}")
    with col_view:
        if st.button("View", key=f"view_{receipt.id}"):
            open_receipt(DETAIL_PAGE, receipt.id)
    with col_edit:
        if st.button("Edit", key=f"edit_{receipt.id}"):
            open_receipt(EDITOR_PAGE, receipt.id)
    with col_delete:
        if st.button("Delete", key=f"delete_{receipt.id}"):
            st.session_state['receipt_delete_state'] = False
            confirmation_dialog_delete(receipt, "receipt_delete_state")

if st.session_state['receipt_delete_state']:
    st.success("Receipt deleted")
