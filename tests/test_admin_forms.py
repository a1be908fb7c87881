"""
Tests for the create-only admin forms and the church directory.
"""

import pytest

from conftest import BackendError, make_query

from catholic_schedule.core.admin_forms import (
    AdminConsole,
    ChurchDirectory,
    ChurchForm,
    ConfessionTimeForm,
    FormState,
    MassTimeForm,
)
from catholic_schedule.core.session import AuthSession

CHURCH_VALUES = {
    "name": "St. Monica",
    "address": "116 Thorn St",
    "city": "Sewickley",
    "state": "PA",
    "zip": "15143",
    "lat": "40.5375",
    "lng": "-80.1817",
}


def test_church_insert(signed_in_session, admin_client):
    form = ChurchForm(signed_in_session, **CHURCH_VALUES)

    assert form.submit()

    admin_client.queries["churches"].insert.assert_called_once_with(
        [
            {
                "name": "St. Monica",
                "address": "116 Thorn St",
                "city": "Sewickley",
                "state": "PA",
                "zip": "15143",
                "lat": 40.5375,
                "lng": -80.1817,
            }
        ]
    )
    assert form.message == "Church added."
    assert form.state is FormState.IDLE


def test_church_fields_clear_after_success(signed_in_session):
    form = ChurchForm(signed_in_session, **CHURCH_VALUES)

    form.submit()

    assert all(getattr(form, key) == "" for key in ChurchForm.FIELDS)


@pytest.mark.parametrize("lat,lng", [("north", "-80.18"), ("40.5", ""), ("nan", "-80.18"), ("40.5", "inf")])
def test_non_numeric_coordinates_are_not_inserted(signed_in_session, admin_client, lat, lng):
    form = ChurchForm(signed_in_session, **{**CHURCH_VALUES, "lat": lat, "lng": lng})

    assert not form.submit()

    assert form.message == "Please enter valid latitude and longitude."
    admin_client.queries["churches"].insert.assert_not_called()
    assert form.name == "St. Monica"


def test_missing_required_field(signed_in_session, admin_client):
    form = ChurchForm(signed_in_session, **{**CHURCH_VALUES, "city": "  "})

    assert not form.submit()

    assert form.message == "City is required."
    admin_client.queries["churches"].insert.assert_not_called()


def test_unknown_church_field_is_rejected(signed_in_session):
    with pytest.raises(TypeError):
        ChurchForm(signed_in_session, phone="555-1234")


def test_insert_failure_keeps_fields(signed_in_session, admin_client):
    admin_client.queries["churches"] = make_query(BackendError("duplicate key value violates unique constraint"))
    form = ChurchForm(signed_in_session, **CHURCH_VALUES)

    assert not form.submit()

    assert form.message == "Add church failed: duplicate key value violates unique constraint"
    assert form.error.http_status == 502
    assert form.state is FormState.IDLE
    assert form.zip == "15143"


def test_signed_out_form_makes_no_insert(make_supabase, admin_client):
    session = AuthSession(make_supabase(), client_factory=lambda token: admin_client)
    form = MassTimeForm(session, church_id="1")

    assert not form.submit()

    assert form.message == "Please sign in first."
    assert form.error.http_status == 401
    admin_client.queries["mass_times"].insert.assert_not_called()


def test_mass_time_insert_clears_only_notes(signed_in_session, admin_client):
    form = MassTimeForm(signed_in_session, church_id="1", day_of_week=6, time="17:00", notes=" Vigil ")

    assert form.submit()

    admin_client.queries["mass_times"].insert.assert_called_once_with(
        [{"church_id": "1", "day_of_week": 6, "time": "17:00", "notes": "Vigil"}]
    )
    assert form.message == "Mass time added."
    assert (form.church_id, form.day_of_week, form.time, form.notes) == ("1", 6, "17:00", "")


def test_mass_time_defaults(signed_in_session):
    form = MassTimeForm(signed_in_session)

    assert (form.day_of_week, form.time) == (0, "09:00")


def test_mass_time_requires_a_church(signed_in_session, admin_client):
    form = MassTimeForm(signed_in_session)

    assert not form.submit()

    assert form.message == "Church is required."
    admin_client.queries["mass_times"].insert.assert_not_called()


@pytest.mark.parametrize("day", [7, -1, "someday"])
def test_mass_time_rejects_bad_day(signed_in_session, day):
    form = MassTimeForm(signed_in_session, church_id="1", day_of_week=day)

    assert not form.submit()
    assert form.error.field == "day_of_week"


def test_empty_notes_are_stored_as_null(signed_in_session, admin_client):
    MassTimeForm(signed_in_session, church_id="1", notes="   ").submit()

    row = admin_client.queries["mass_times"].insert.call_args[0][0][0]
    assert row["notes"] is None


def test_confession_time_insert(signed_in_session, admin_client):
    form = ConfessionTimeForm(signed_in_session, church_id="2", notes="Lent only")

    assert form.submit()

    admin_client.queries["confession_times"].insert.assert_called_once_with(
        [{"church_id": "2", "day_of_week": 6, "start_time": "15:00", "end_time": "16:00", "notes": "Lent only"}]
    )
    assert form.message == "Confession time added."
    assert form.notes == ""
    assert (form.start_time, form.end_time) == ("15:00", "16:00")


def test_confession_time_failure_message(signed_in_session, admin_client):
    admin_client.queries["confession_times"] = make_query(BackendError("new row violates row-level security policy"))
    form = ConfessionTimeForm(signed_in_session, church_id="2")

    assert not form.submit()

    assert form.message == "Add confession time failed: new row violates row-level security policy"


def test_directory_lists_churches_by_name(signed_in_session, admin_client):
    directory = ChurchDirectory(signed_in_session)

    assert directory.refresh()

    query = admin_client.queries["churches"]
    query.select.assert_called_once_with("id,name")
    query.order.assert_called_once_with("name")
    assert directory.options == [("1", "St. Monica"), ("2", "St. Mary")]


def test_directory_failure_message(signed_in_session, admin_client):
    admin_client.queries["churches"] = make_query(BackendError("timeout"))
    directory = ChurchDirectory(signed_in_session)

    assert not directory.refresh()
    assert directory.message == "Error loading churches: timeout"


def test_console_sign_in_loads_directory_and_defaults_church(make_supabase, admin_client):
    console = AdminConsole(AuthSession(make_supabase(), client_factory=lambda token: admin_client))

    assert console.sign_in("admin@example.org", "secret")

    assert console.directory.options[0] == ("1", "St. Monica")
    assert console.mass_form.church_id == "1"
    assert console.confession_form.church_id == "1"


def test_console_keeps_an_explicit_church_selection(make_supabase, admin_client):
    console = AdminConsole(AuthSession(make_supabase(), client_factory=lambda token: admin_client))
    console.mass_form.church_id = "2"

    console.sign_in("admin@example.org", "secret")

    assert console.mass_form.church_id == "2"


def test_added_church_refreshes_directory(make_supabase, admin_client):
    console = AdminConsole(AuthSession(make_supabase(), client_factory=lambda token: admin_client))
    console.sign_in("admin@example.org", "secret")
    for key, value in CHURCH_VALUES.items():
        setattr(console.church_form, key, value)

    assert console.church_form.submit()

    assert admin_client.queries["churches"].order.call_count == 2


def test_console_sign_out(make_supabase, admin_client):
    console = AdminConsole(AuthSession(make_supabase(), client_factory=lambda token: admin_client))
    console.sign_in("admin@example.org", "secret")

    console.sign_out()

    assert not console.session.is_authenticated
    assert console.directory.options == []
