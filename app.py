"""
app.py
Streamlit billing portal (customer lookup + PIX screen, admin panel).
Run: streamlit run app.py   (with `python server.py` serving the API)
"""

from __future__ import annotations

import time

import pandas as pd
import streamlit as st

import utils
from api_client import ApiClient, ApiError
from config import load_settings, setup_logging
from errors import ValidationError
from models import Debtor
from view_state import AdminTab, View, ViewState

st.set_page_config(page_title="Billing Portal", layout="centered")

TAB_LABELS = {
    AdminTab.IMPORT: "Import",
    AdminTab.CLIENTS: "Clients",
    AdminTab.PIX_CONFIG: "PIX settings",
}


@st.cache_resource
def get_client() -> ApiClient:
    settings = load_settings()
    setup_logging(settings.log_level)
    return ApiClient(settings.api_base_url)


def init_state():
    if "vs" not in st.session_state:
        st.session_state.vs = ViewState(loading_seconds=load_settings().loading_seconds)
    if "phone_input" not in st.session_state:
        st.session_state.phone_input = ""


def vs() -> ViewState:
    return st.session_state.vs


def refresh_admin_list():
    try:
        vs().set_admin_debtors(get_client().list_debtors())
    except ApiError as e:
        st.error(e.message)


# ---------- Admin gate (sidebar, every screen) ----------

def admin_gate():
    with st.sidebar:
        if vs().is_admin:
            if vs().view is not View.ADMIN and st.button("⚙️ Admin panel"):
                vs().open_admin()
                st.rerun()
            return

        password = st.text_input("Admin", type="password", key="admin_password")
        if st.button("Enter"):
            try:
                get_client().admin_login(password)
                debtors = get_client().list_debtors()
            except ApiError as e:
                st.error(e.message)
                return
            vs().admin_authenticated(debtors)
            st.rerun()


# ---------- Customer screens ----------

def _reformat_phone():
    st.session_state.phone_input = utils.format_phone(st.session_state.phone_input)


def login_screen():
    st.title("📱 Billing Portal")
    st.caption("Sign in with your mobile number")

    st.text_input("Phone number", key="phone_input", placeholder="(00) 00000-0000", on_change=_reformat_phone)

    if st.button("VIEW MY BILL", type="primary", use_container_width=True):
        raw = st.session_state.phone_input
        if not utils.is_complete_phone(raw):
            vs().lookup_failed("Incomplete number")
        else:
            try:
                debtor = get_client().lookup(utils.normalize_phone(raw))
                vs().lookup_succeeded(debtor, time.monotonic())
                st.rerun()
            except ApiError as e:
                vs().lookup_failed(e.message)

    if vs().error:
        st.error(vs().error)


def loading_screen():
    with st.spinner("Loading..."):
        time.sleep(vs().remaining(time.monotonic()))
    vs().tick(time.monotonic())
    st.rerun()


def dashboard_screen():
    d = vs().debtor
    st.title("📄 Your bill")
    st.write(f"Outstanding balance for line **{utils.format_phone(d.phone)}**")
    st.subheader(d.name)

    c1, c2, c3 = st.columns(3)
    c1.metric("Amount", utils.format_money(d.value))
    c2.metric("Due date", d.due_date or "-")
    if d.discount > 0:
        c3.metric("Discount", utils.format_money(d.discount))

    st.metric("Total", utils.format_money(utils.debt_total(d.value, d.discount)))

    if st.button("⚡ GENERATE PIX", type="primary", use_container_width=True):
        vs().request_pix(time.monotonic())
        st.rerun()
    if st.button("Log out"):
        vs().logout()
        st.rerun()


def pix_screen():
    st.title("PIX payment")
    try:
        pix = get_client().get_pix_config()
    except ApiError as e:
        st.error(e.message)
        return

    if pix.qr_code:
        st.image(pix.qr_code, caption="PIX QR code", width=240)
    st.caption("PIX key (copy with the button on the right)")
    st.code(pix.key or "", language=None)

    c1, c2 = st.columns(2)
    with c1:
        if st.button("⬅️ Back"):
            vs().back_to_dashboard()
            st.rerun()
    with c2:
        if st.button("Log out"):
            vs().logout()
            st.rerun()


# ---------- Admin panel ----------

def show_notice():
    notice = vs().pop_notice()
    if notice:
        level, message = notice
        getattr(st, level)(message)


def _submit_debtors(debtors: list[Debtor], success: str) -> bool:
    try:
        get_client().replace_debtors(debtors)
    except ApiError as e:
        vs().flash("error", e.message)
        return False
    vs().flash("success", success)
    refresh_admin_list()
    return True


def _process_import_text():
    text = st.session_state.get("import_text", "")
    if not text.strip():
        return
    if _submit_debtors(utils.parse_import_text(text), "List processed."):
        st.session_state.import_text = ""
        vs().import_text = ""


def import_tab():
    st.subheader("Paste list")
    st.caption("One client per line: phone, name, value, due date, discount")
    if "import_text" not in st.session_state:
        st.session_state.import_text = vs().import_text
    vs().import_text = st.text_area(
        "Clients", key="import_text", height=180, placeholder="11999998888, Jane Doe, 89.90, 15/02, 10.00"
    )
    st.button("Process list", type="primary", on_click=_process_import_text)

    st.divider()

    st.subheader("Upload CSV")
    upload = st.file_uploader("CSV file (first line is a header)", type=["csv", "txt"])
    if upload is not None and st.button("Replace list with CSV"):
        _submit_debtors(utils.parse_csv_upload(upload.getvalue()), "List updated.")
        show_notice()

    st.divider()

    st.subheader("Add one client")
    with st.form("manual_entry", clear_on_submit=True):
        c1, c2 = st.columns(2)
        with c1:
            phone = st.text_input("Phone", key="manual_phone")
            value = st.number_input("Value", min_value=0.0, step=1.0, format="%.2f", key="manual_value")
            discount = st.number_input("Discount", min_value=0.0, step=1.0, format="%.2f", key="manual_discount")
        with c2:
            name = st.text_input("Name", key="manual_name")
            due_date = st.text_input("Due date", key="manual_due_date")
        submitted = st.form_submit_button("Save client")

    if submitted:
        entry = Debtor(utils.normalize_phone(phone), name.strip(), value, due_date.strip(), discount)
        vs().manual_entry = entry.to_dict()
        try:
            debtors = utils.append_debtor(vs().admin_debtors, entry)
        except ValidationError as e:
            st.error(e.message)
            return
        if _submit_debtors(debtors, "Client added."):
            vs().manual_entry = {}
        show_notice()


def clients_tab():
    debtors = vs().admin_debtors
    st.subheader(f"Clients ({len(debtors)})")
    if debtors:
        df = pd.DataFrame([d.to_dict() for d in debtors])
        st.dataframe(df, use_container_width=True, hide_index=True)
        st.download_button(
            "Download clients.csv",
            data=utils.debtors_to_csv_bytes(debtors),
            file_name="clients.csv",
            mime="text/csv",
        )
    else:
        st.caption("No clients registered.")

    if debtors:
        st.divider()
        c1, c2 = st.columns([2, 1])
        with c1:
            options = {f"{d.name} ({utils.format_phone(d.phone)})": d.phone for d in debtors}
            label = st.selectbox("Client", list(options.keys()))
        with c2:
            confirm = st.checkbox("Confirm delete", value=False, key="del_confirm")
            if st.button("Delete", disabled=not confirm):
                try:
                    get_client().delete_debtor(options[label])
                    vs().flash("success", "Client deleted.")
                except ApiError as e:
                    vs().flash("error", e.message)
                refresh_admin_list()
                st.rerun()

        confirm_all = st.checkbox("Confirm deleting every client", value=False, key="del_all_confirm")
        if st.button("🚨 Delete all clients", disabled=not confirm_all):
            _submit_debtors([], "All clients deleted.")
            st.rerun()

    st.divider()

    st.subheader("⚠️ Danger zone")
    st.caption("Deletes every client and every setting at once.")
    confirm_reset = st.checkbox("I understand this cannot be undone", key="reset_confirm")
    if st.button("Reset system", type="primary", disabled=not confirm_reset):
        try:
            get_client().reset()
        except ApiError as e:
            st.error(e.message)
            return
        vs().after_reset()
        st.rerun()


def pix_config_tab():
    try:
        pix = get_client().get_pix_config()
    except ApiError as e:
        st.error(e.message)
        return

    st.subheader("PIX key")
    new_key = st.text_input("Key", value=pix.key or "")
    if st.button("Save key", type="primary"):
        if not new_key.strip():
            st.warning("Enter a PIX key; an empty key is not saved.")
        else:
            try:
                get_client().update_pix_config(key=new_key.strip())
                st.success("PIX key updated.")
            except ApiError as e:
                st.error(e.message)

    st.divider()

    st.subheader("QR code image")
    if pix.qr_code:
        st.image(pix.qr_code, width=200)
    upload = st.file_uploader("Image", type=["png", "jpg", "jpeg", "gif", "webp"])
    if upload is not None and st.button("Save QR code"):
        try:
            get_client().update_pix_config(qr_code=utils.qr_to_data_uri(upload.getvalue(), upload.type))
            vs().flash("success", "QR code updated.")
            st.rerun()
        except ApiError as e:
            st.error(e.message)


def admin_screen():
    st.title("⚙️ Admin")

    show_notice()

    tabs = list(TAB_LABELS.keys())
    chosen = st.radio(
        "Section",
        tabs,
        index=tabs.index(vs().admin_tab),
        format_func=lambda t: TAB_LABELS[t],
        horizontal=True,
    )
    if chosen is not vs().admin_tab:
        vs().select_tab(chosen)

    if vs().admin_tab is AdminTab.IMPORT:
        import_tab()
    elif vs().admin_tab is AdminTab.CLIENTS:
        clients_tab()
    elif vs().admin_tab is AdminTab.PIX_CONFIG:
        pix_config_tab()

    st.divider()
    if st.button("Leave admin"):
        vs().logout()
        st.rerun()


# --------- App entry ---------

def run():
    init_state()
    admin_gate()

    view = vs().view
    if view is View.LOADING:
        loading_screen()
    elif view is View.DASHBOARD and vs().debtor is not None:
        dashboard_screen()
    elif view is View.PIX:
        pix_screen()
    elif view is View.ADMIN:
        admin_screen()
    else:
        login_screen()


if __name__ == "__main__":
    run()
