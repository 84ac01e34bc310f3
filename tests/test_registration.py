"""Unit tests for registration validation and the submit flow."""

from datetime import date, datetime

import pytest

import utils
from registration import RegistrationFlow, validate_business_inputs


def test_valid_form_has_no_errors(valid_form):
    assert validate_business_inputs(valid_form) == {}


def test_empty_form_reports_every_field():
    errors = validate_business_inputs({})
    assert set(errors) == {
        "name",
        "start_date",
        "end_date",
        "amount_paid",
        "phone",
        "times_subscribed",
        "category",
        "subscription_type",
    }
    # no date range check without both dates
    assert "date_range" not in errors


def test_date_range_error_and_no_store_mutation(store, valid_form):
    flow = RegistrationFlow(store)
    valid_form.update(start_date="2025-06-01", end_date="2025-05-01")
    result = flow.submit(valid_form)
    assert not result.ok
    assert result.business is None
    assert "date_range" in result.errors
    assert "start_date" not in result.errors
    assert "end_date" not in result.errors
    assert len(store) == 0


def test_same_start_and_end_is_a_range_error(valid_form):
    valid_form.update(start_date="2025-05-01", end_date="2025-05-01")
    assert "date_range" in validate_business_inputs(valid_form)


@pytest.mark.parametrize("amount", ["-5", "0", "", "abc", "nan", "inf"])
def test_amount_must_be_finite_and_positive(valid_form, amount):
    valid_form["amount_paid"] = amount
    assert set(validate_business_inputs(valid_form)) == {"amount_paid"}


@pytest.mark.parametrize("times", ["0", "-1", "", "1.5", "x"])
def test_times_subscribed_must_be_positive_integer(valid_form, times):
    valid_form["times_subscribed"] = times
    assert set(validate_business_inputs(valid_form)) == {"times_subscribed"}


def test_blank_name_and_phone_rejected(valid_form):
    valid_form.update(name="   ", phone="\t")
    assert set(validate_business_inputs(valid_form)) == {"name", "phone"}


def test_unknown_enum_values_rejected(valid_form):
    valid_form.update(category="Banking", subscription_type="Weekly")
    assert set(validate_business_inputs(valid_form)) == {"category", "subscription_type"}


def test_unparseable_dates_rejected(valid_form):
    valid_form.update(start_date="2025-13-01", end_date="tomorrow")
    errors = validate_business_inputs(valid_form)
    assert set(errors) == {"start_date", "end_date"}


def test_date_objects_are_accepted(valid_form):
    valid_form.update(start_date=date(2025, 5, 1), end_date=date(2025, 6, 1))
    assert validate_business_inputs(valid_form) == {}


def test_datetime_values_are_reduced_to_dates(valid_form):
    valid_form.update(start_date=datetime(2025, 5, 1, 9, 30), end_date=date(2025, 6, 1))
    assert validate_business_inputs(valid_form) == {}

    valid_form.update(start_date=datetime(2025, 6, 1, 9), end_date=date(2025, 6, 1))
    assert set(validate_business_inputs(valid_form)) == {"date_range"}


def test_submitted_datetimes_are_stored_as_dates(store, valid_form):
    flow = RegistrationFlow(store)
    valid_form.update(start_date=datetime(2025, 5, 1, 9), end_date=datetime(2025, 6, 1, 18))
    b = flow.submit(valid_form).business
    assert type(b.start_date) is date
    assert type(b.end_date) is date
    assert utils.is_active(b, date(2025, 5, 15))


def test_submit_normalizes_payload(store, valid_form):
    flow = RegistrationFlow(store)
    result = flow.submit(valid_form)
    assert result.ok
    b = result.business
    assert b.name == "Acme"
    assert b.phone == "5551234567"
    assert b.amount_paid == pytest.approx(49.90)
    assert b.start_date == date(2025, 5, 1)
    assert b.end_date == date(2025, 6, 1)
    assert b.category == "Services"
    assert b.subscription_type == "Monthly"
    assert store.get_by_id(b.id) == b


def test_times_subscribed_is_not_stored(store, valid_form):
    flow = RegistrationFlow(store)
    valid_form["times_subscribed"] = "7"
    b = flow.submit(valid_form).business
    assert b.subscription_count == 1
    assert not hasattr(b, "times_subscribed")


def test_two_acme_submissions_get_increasing_counts(store, valid_form):
    flow = RegistrationFlow(store)
    first = flow.submit(valid_form).business
    second = flow.submit(dict(valid_form, start_date="2025-07-01", end_date="2026-07-01", amount_paid="300")).business
    assert first.subscription_count == 1
    assert second.subscription_count == 2
    assert store.list() == [first, second]


def test_buffer_resets_only_on_success(store, valid_form):
    flow = RegistrationFlow(store)
    for field_name, value in valid_form.items():
        flow.update(field_name, value)
    flow.update("amount_paid", "0")

    result = flow.submit()
    assert not result.ok
    assert flow.buffer["name"] == "  Acme  "
    assert flow.generation == 0

    flow.update("amount_paid", "10")
    result = flow.submit()
    assert result.ok
    assert flow.buffer == {}
    assert flow.generation == 1


def test_update_rejects_unknown_field(store):
    flow = RegistrationFlow(store)
    with pytest.raises(KeyError):
        flow.update("email", "a@example.com")


def test_on_complete_called_with_new_business(store, valid_form):
    flow = RegistrationFlow(store)
    completed = []
    flow.on_complete(completed.append)

    flow.submit(dict(valid_form, phone=""))
    assert completed == []

    b = flow.submit(valid_form).business
    assert completed == [b]
