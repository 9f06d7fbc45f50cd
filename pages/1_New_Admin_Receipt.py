import streamlit as st

from element_component import client_summary, current_receipt_id
from services.calculation_service import (
    OPERATIONS,
    SUBTRACT_GIVEN_RECEIVED,
    calculate_manual_result,
    given_totals,
    parse_manual_input,
    received_totals,
)
from services.client_service import filter_clients, load_clients
from services.item_service import add_item, remove_item, update_item
from services.receipt_service import (
    GIVEN,
    RECEIVED,
    SectionSaveMachine,
    apply_computed_total,
    load_draft,
    new_draft,
    resolve_voucher_id,
    save_manual_calculation,
    save_section,
)

st.set_page_config(page_title="Admin Receipt", page_icon="💍")
st.sidebar.header("💍 Admin Receipt")

GIVEN_COLUMNS = [
    ("product_name", "Product Name"),
    ("pure_weight", "Pure Weight"),
    ("pure_percent", "Pure %"),
    ("melting", "Melting"),
]

RECEIVED_COLUMNS = [
    ("product_name", "Product Name"),
    ("final_ornaments_wt", "Final Ornaments Wt"),
    ("stone_weight", "Stone Weight"),
    ("making_charge_percent", "Making Charge %"),
]

MANUAL_INPUT_KEYS = {
    GIVEN: "manual_given_total_input",
    RECEIVED: "manual_received_total_input",
}


# -----------------------------------------------------------------------------
# Session state: one draft per receipt id ("new" while creating)
# -----------------------------------------------------------------------------

def _reset_editor(draft_key: str, receipt_id) -> None:
    for machine in st.session_state.get("save_machines", {}).values():
        machine.dispose()

    # drop widget values belonging to the previous draft
    for key in list(st.session_state.keys()):
        if key.startswith(("given_", "received_", "manual_")):
            del st.session_state[key]

    messages = []
    if receipt_id:
        draft, msg = load_draft(receipt_id)
        if draft is None:
            st.error(f"Failed to load receipt data: {msg}")
            st.stop()
    else:
        voucher_id, msg = resolve_voucher_id()
        draft = new_draft(voucher_id)
    if msg:
        messages.append(msg)

    st.session_state["draft"] = draft
    st.session_state["draft_key"] = draft_key
    st.session_state["save_machines"] = {
        GIVEN: SectionSaveMachine(),
        RECEIVED: SectionSaveMachine(),
    }
    st.session_state["saved_sections"] = set()
    st.session_state["editor_warnings"] = messages
    st.session_state[MANUAL_INPUT_KEYS[GIVEN]] = str(draft.manual_given_total)
    st.session_state[MANUAL_INPUT_KEYS[RECEIVED]] = str(draft.manual_received_total)
    if draft.operation not in OPERATIONS:
        draft.operation = SUBTRACT_GIVEN_RECEIVED
    st.session_state["manual_operation"] = draft.operation


receipt_id = current_receipt_id()
draft_key = receipt_id or "new"

if st.session_state.get("draft_key") != draft_key:
    _reset_editor(draft_key, receipt_id)

if "clients" not in st.session_state:
    st.session_state["clients"], st.session_state["clients_warning"] = load_clients()

draft = st.session_state["draft"]
machines = st.session_state["save_machines"]

for warning in st.session_state["editor_warnings"]:
    st.warning(warning)

if st.session_state.get("clients_warning"):
    st.warning(st.session_state["clients_warning"])


# -----------------------------------------------------------------------------
# Callbacks
# -----------------------------------------------------------------------------

def _section(kind):
    return draft.given if kind == GIVEN else draft.received


def _on_field_change(kind: str, item_id: str, field_name: str) -> None:
    value = st.session_state[f"{kind}_{item_id}_{field_name}"]
    update_item(_section(kind), item_id, field_name, value)


def _on_remove(kind: str, item_id: str) -> None:
    if not remove_item(_section(kind), item_id):
        st.session_state["flash_error"] = f"At least one {kind} item is required"


def _on_manual_change(kind: str) -> None:
    value = parse_manual_input(st.session_state[MANUAL_INPUT_KEYS[kind]])
    if kind == GIVEN:
        draft.manual_given_total = value
    else:
        draft.manual_received_total = value


def _on_apply_total(kind: str) -> None:
    total = apply_computed_total(draft, kind)
    st.session_state[MANUAL_INPUT_KEYS[kind]] = str(total)


if st.session_state.get("flash_error"):
    st.error(st.session_state.pop("flash_error"))


# -----------------------------------------------------------------------------
# 1) Client selection
# -----------------------------------------------------------------------------

if draft.client is None:
    st.title("Admin Receipt - Select Client")
    st.caption("Filter and select a client.")

    col_shop, col_name, col_phone = st.columns(3)
    with col_shop:
        shop_filter = st.text_input("Shop Name", placeholder="Filter by Shop Name")
    with col_name:
        name_filter = st.text_input("Client Name", placeholder="Filter by Client Name")
    with col_phone:
        phone_filter = st.text_input("Phone Number", placeholder="Filter by Phone Number")

    matches = filter_clients(st.session_state["clients"], shop_filter, name_filter, phone_filter)

    if not matches:
        st.info("No clients found matching the filters")

    for client in matches:
        col_info, col_btn = st.columns([4, 1])
        with col_info:
            st.markdown(f"**{client.name}**")
            st.caption(f"Shop: {client.shop_name} | Phone: {client.phone_number} | Address: {client.address}")
        with col_btn:
            if st.button("Select Client", key=f"select_{client.id}"):
                draft.client = client
                st.rerun()

    st.stop()


# -----------------------------------------------------------------------------
# 2) Item ledgers
# -----------------------------------------------------------------------------

st.title(f"Admin Receipt for: {draft.client.name}")
st.caption(f"Voucher ID: **{draft.voucher_id}**")

with st.expander("Client details"):
    client_summary(draft.client)


def _render_items(kind: str, columns) -> None:
    section = _section(kind)

    st.session_state.setdefault(f"{kind}_date", section.date)
    section.date = st.date_input(f"{kind.capitalize()} Date", key=f"{kind}_date")

    for idx, item in enumerate(list(section.items.values()), start=1):
        st.markdown(f"**Item {idx}**")
        cols = st.columns([3, 2, 2, 2, 1])

        for col, (field_name, label) in zip(cols, columns):
            key = f"{kind}_{item.id}_{field_name}"
            st.session_state.setdefault(key, getattr(item, field_name))
            with col:
                st.text_input(
                    label,
                    key=key,
                    on_change=_on_field_change,
                    args=(kind, item.id, field_name),
                )

        with cols[-1]:
            st.write("")
            st.button(
                "🗑️",
                key=f"{kind}_{item.id}_remove",
                on_click=_on_remove,
                args=(kind, item.id),
            )

        current = section.items.get(item.id, item)
        if kind == GIVEN:
            st.caption(f"Total: {current.total:.2f}")
        else:
            st.caption(f"SubTotal: {current.sub_total:.2f} | Total: {current.total:.2f}")

    st.button(f"➕ Add {kind.capitalize()} Item", key=f"{kind}_add", on_click=add_item, args=(section,))


def _render_save(kind: str) -> None:
    machine = machines[kind]
    label = "Saving..." if machine.is_busy else f"Save {kind.capitalize()} Items"

    if st.button(label, type="primary", disabled=machine.is_busy, key=f"{kind}_save"):
        outcome = save_section(draft, kind, machine)

        if outcome.skipped or outcome.stale:
            return

        if not outcome.ok:
            st.error(outcome.message)
            return

        st.toast(outcome.message)
        st.session_state["saved_sections"].add(kind)

        if outcome.created_id:
            # switch to edit mode without reloading the draft
            st.session_state["draft_key"] = outcome.created_id
            st.query_params["id"] = outcome.created_id

    if kind in st.session_state["saved_sections"]:
        st.button(
            "Use this total as the manual input",
            key=f"{kind}_apply_total",
            on_click=_on_apply_total,
            args=(kind,),
        )


tab_given, tab_received = st.tabs(["Given Items", "Received Items"])

with tab_given:
    st.subheader(f"Given Details (Client: {draft.client.name})")
    _render_items(GIVEN, GIVEN_COLUMNS)

    totals = given_totals(draft.given.items.values())
    col_pw, col_total = st.columns(2)
    col_pw.metric("Total Pure Weight", f"{totals.total_pure_weight:.2f}")
    col_total.metric("Total", f"{totals.total:.2f}")

    _render_save(GIVEN)

with tab_received:
    st.subheader(f"Received Details (Client: {draft.client.name})")
    _render_items(RECEIVED, RECEIVED_COLUMNS)

    totals = received_totals(draft.received.items.values())
    col_orn, col_stone, col_sub, col_total = st.columns(4)
    col_orn.metric("Total Ornaments Wt", f"{totals.total_ornaments_wt:.2f}")
    col_stone.metric("Total Stone Weight", f"{totals.total_stone_weight:.2f}")
    col_sub.metric("Total SubTotal", f"{totals.total_sub_total:.2f}")
    col_total.metric("Total", f"{totals.total:.2f}")

    _render_save(RECEIVED)


# -----------------------------------------------------------------------------
# 3) Manual calculation
# -----------------------------------------------------------------------------

st.divider()
st.subheader("Manual Calculation")

col_given, col_op, col_received = st.columns(3)

with col_given:
    st.text_input(
        "Given Total",
        key=MANUAL_INPUT_KEYS[GIVEN],
        on_change=_on_manual_change,
        args=(GIVEN,),
    )

with col_op:
    draft.operation = st.selectbox(
        "Operation",
        list(OPERATIONS.keys()),
        format_func=OPERATIONS.get,
        key="manual_operation",
    )

with col_received:
    st.text_input(
        "Received Total",
        key=MANUAL_INPUT_KEYS[RECEIVED],
        on_change=_on_manual_change,
        args=(RECEIVED,),
    )

result = calculate_manual_result(draft.manual_given_total, draft.manual_received_total, draft.operation)
st.metric("Result", f"{result:.2f}")

if st.button("Save Manual Calculation", disabled=draft.receipt_id is None):
    ok, msg = save_manual_calculation(draft)
    if ok:
        st.success(msg)
    else:
        st.error(msg)
