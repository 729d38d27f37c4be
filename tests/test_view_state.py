import pytest

from models import Debtor
from utils import debt_total, format_money
from view_state import AdminTab, InvalidTransition, View, ViewState

ANA = Debtor("11999998888", "Ana", 100.0, "15/02", 20.0)


def test_initial_state():
    vs = ViewState()
    assert vs.view is View.LOGIN
    assert vs.debtor is None
    assert not vs.is_admin


def test_lookup_goes_through_loading_to_dashboard():
    vs = ViewState(loading_seconds=2)
    vs.lookup_succeeded(ANA, now=100.0)
    assert vs.view is View.LOADING
    assert vs.pending is View.DASHBOARD
    assert vs.remaining(101.5) == pytest.approx(0.5)

    assert vs.tick(101.9) is False
    assert vs.view is View.LOADING

    assert vs.tick(102.0) is True
    assert vs.view is View.DASHBOARD
    assert vs.pending is None
    assert vs.remaining(200.0) == 0.0


def test_dashboard_total():
    vs = ViewState()
    vs.lookup_succeeded(ANA, now=0)
    vs.tick(10)
    assert format_money(debt_total(vs.debtor.value, vs.debtor.discount)) == "80.00"


def test_pix_round_trip():
    vs = ViewState()
    vs.lookup_succeeded(ANA, now=0)
    vs.tick(2)
    vs.request_pix(now=5)
    assert vs.view is View.LOADING
    vs.tick(7)
    assert vs.view is View.PIX
    vs.back_to_dashboard()
    assert vs.view is View.DASHBOARD


def test_lookup_failure_keeps_login():
    vs = ViewState()
    vs.lookup_failed("Number not found")
    assert vs.view is View.LOGIN
    assert vs.error == "Number not found"


def test_invalid_transitions():
    vs = ViewState()
    with pytest.raises(InvalidTransition):
        vs.request_pix(now=0)
    with pytest.raises(InvalidTransition):
        vs.back_to_dashboard()
    with pytest.raises(InvalidTransition):
        vs.open_admin()
    with pytest.raises(InvalidTransition):
        vs.select_tab(AdminTab.CLIENTS)
    vs.lookup_succeeded(ANA, now=0)
    with pytest.raises(InvalidTransition):
        vs.lookup_succeeded(ANA, now=0)


def test_logout_cancels_pending_loading():
    vs = ViewState()
    vs.lookup_succeeded(ANA, now=0)
    vs.logout()
    assert vs.view is View.LOGIN
    assert vs.debtor is None
    # The old deadline must not drag the user to the dashboard
    assert vs.tick(100) is False
    assert vs.view is View.LOGIN


def test_admin_navigation_cancels_pending_loading():
    vs = ViewState()
    vs.lookup_succeeded(ANA, now=0)
    vs.admin_authenticated([ANA])
    assert vs.view is View.ADMIN
    assert vs.tick(100) is False
    assert vs.view is View.ADMIN


def test_admin_tab_survives_leaving_and_reopening():
    vs = ViewState()
    vs.admin_authenticated([])
    vs.select_tab(AdminTab.PIX_CONFIG)
    vs.view = View.DASHBOARD
    vs.open_admin()
    assert vs.admin_tab is AdminTab.PIX_CONFIG


def test_logout_drops_admin_session_and_tab():
    vs = ViewState()
    vs.admin_authenticated([ANA])
    vs.select_tab(AdminTab.CLIENTS)
    vs.logout()
    assert not vs.is_admin
    assert vs.admin_tab is AdminTab.IMPORT
    assert vs.admin_debtors == []


def test_after_reset_returns_to_login():
    vs = ViewState()
    vs.admin_authenticated([ANA])
    vs.select_tab(AdminTab.CLIENTS)
    vs.after_reset()
    assert vs.view is View.LOGIN
    assert vs.admin_debtors == []
    assert vs.admin_tab is AdminTab.IMPORT
    assert vs.is_admin


def test_notice_is_shown_once():
    vs = ViewState()
    vs.flash("success", "Client deleted.")
    assert vs.pop_notice() == ("success", "Client deleted.")
    assert vs.pop_notice() is None


def test_logout_drops_pending_notice():
    vs = ViewState()
    vs.admin_authenticated([])
    vs.flash("error", "boom")
    vs.logout()
    assert vs.pop_notice() is None
