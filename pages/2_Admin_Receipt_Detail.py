import logging

import pandas as pd
import streamlit as st

from api_client import fetch_admin_receipt, fetch_client
from element_component import current_receipt_id, open_receipt, status_badge
from services.calculation_service import (
    OPERATIONS,
    section_given_totals,
    section_received_totals,
    summarize_balance,
)
from services.pdf_service import (
    GIVEN_HEADER,
    RECEIVED_HEADER,
    generate_receipt_pdf,
    given_rows,
    receipt_pdf_filename,
    received_rows,
)
from utils.formatting import format_date, format_number

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Receipt Details", page_icon="🧾")
st.sidebar.header("🧾 Receipt Details")

receipt_id = current_receipt_id()
if not receipt_id:
    st.info("Pick a receipt from the Admin Receipts page.")
    st.stop()

# -----------------------------------------------------------------------------
# 1) Load receipt + client
# -----------------------------------------------------------------------------
ok, msg, receipt = fetch_admin_receipt(receipt_id)
if not ok or receipt is None:
    st.error(f"Failed to load receipt: {msg}")
    if st.button("Return to Receipts"):
        st.switch_page("Admin_Receipts.py")
    st.stop()

client = None
if receipt.client_id:
    ok_client, msg_client, client = fetch_client(receipt.client_id)
    if not ok_client:
        st.warning(f"Could not fetch client details: {msg_client}")
else:
    st.warning("Client ID not found in receipt")

# -----------------------------------------------------------------------------
# 2) Header
# -----------------------------------------------------------------------------
st.title(f"Voucher {receipt.voucher_id or receipt.id}")
st.write(f"Client: **{(client.name if client else '') or receipt.client_name}** (ID: {receipt.client_id})")
status_badge(receipt.status)

col_back, col_edit, col_pdf = st.columns(3)

with col_back:
    if st.button("⬅️ Back"):
        st.switch_page("Admin_Receipts.py")

with col_edit:
    if st.button("✏️ Edit"):
        open_receipt("pages/1_New_Admin_Receipt.py", receipt.id)

with col_pdf:
    try:
        pdf_bytes = generate_receipt_pdf(receipt, client)
    except Exception as e:
        logger.exception("Error generating PDF for receipt %s", receipt.id)
        st.error(f"Failed to generate PDF: {e}")
    else:
        st.download_button(
            "⬇️ Download PDF",
            data=pdf_bytes,
            file_name=receipt_pdf_filename(receipt, client),
            mime="application/pdf",
        )

st.divider()

# -----------------------------------------------------------------------------
# 3) Given details
# -----------------------------------------------------------------------------
st.subheader("Given Details")
st.caption(f"Date: {format_date(receipt.given.date if receipt.given else None)}")

rows = given_rows(receipt)
if rows:
    st.dataframe(pd.DataFrame(rows, columns=GIVEN_HEADER), width='stretch', hide_index=True)
    st.markdown(f"**Total:** {format_number(section_given_totals(receipt.given).total)}")
else:
    st.info("No given items recorded.")

st.divider()

# -----------------------------------------------------------------------------
# 4) Received details
# -----------------------------------------------------------------------------
st.subheader("Received Details")
st.caption(f"Date: {format_date(receipt.received.date if receipt.received else None)}")

rows = received_rows(receipt)
if rows:
    st.dataframe(pd.DataFrame(rows, columns=RECEIVED_HEADER), width='stretch', hide_index=True)
    totals = section_received_totals(receipt.received)
    st.markdown(
        f"**Total:** Ornaments {format_number(totals.total_ornaments_wt)} | "
        f"Stone {format_number(totals.total_stone_weight)} | "
        f"Subtotal {format_number(totals.total_sub_total)} | "
        f"Total {format_number(totals.total)}"
    )
else:
    st.info("No received items recorded.")

st.divider()

# -----------------------------------------------------------------------------
# 5) Balance summary
# -----------------------------------------------------------------------------
st.subheader("Balance Summary")
summary = summarize_balance(receipt, client)

col_od, col_given, col_received, col_balance = st.columns(4)
col_od.metric(
    "Client Balance",
    f"{client.balance:.2f}" if client is not None and client.balance is not None else "N/A",
)
col_given.metric("Given Total", format_number(summary.given_total))
col_received.metric("Received Total", format_number(summary.received_total))
col_balance.metric("Balance (Given - Received)", format_number(summary.difference))

manual = receipt.manual_calculations
if manual is not None:
    st.markdown("**Manual Calculation**")
    st.write(
        f"{format_number(manual.given_total)} "
        f"({OPERATIONS.get(manual.operation, manual.operation.replace('-', ' '))}) "
        f"{format_number(manual.received_total)} = **{format_number(manual.result)}**"
    )

st.caption(
    f"OD Balance {format_number(summary.opening_balance)} + "
    f"Current Balance {format_number(summary.current_balance)} = "
    f"New Balance {format_number(summary.new_balance)}"
)
