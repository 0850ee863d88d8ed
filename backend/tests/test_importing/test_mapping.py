"""Unit tests for the Booking.com and Airbnb row mappers."""

import pytest

from riadops.importing.detector import Channel
from riadops.importing.mapping import (
    AirbnbMapper,
    BookingComMapper,
    first_value,
    get_mapper,
)
from riadops.importing.normalize import map_unit
from riadops.models.guest import GUEST_HEADERS

NOW = "2026-01-06T09:30:00.000Z"


class TestFirstValue:
    def test_first_non_blank_wins(self):
        row = {"A": "  ", "B": "x", "C": "y"}
        assert first_value(row, "A", "B", "C") == "x"

    def test_default(self):
        assert first_value({}, "A", default="0") == "0"


class TestBookingComMapper:
    @pytest.fixture
    def mapper(self) -> BookingComMapper:
        return get_mapper(Channel.BOOKING_COM)

    def test_reference_row(self, mapper):
        record = mapper.map_row(
            {
                "Book Number": "123",
                "Check-in": "2026-01-06",
                "Check-out": "2026-01-09",
                "Guest name(s)": "LU, LINLONG",
                "Unit type": "Double Room at The Riad",
                "Price": "156.00 EUR",
                "Duration (nights)": "3",
            },
            NOW,
        )
        assert record["booking_id"] == "123"
        assert record["first_name"] == "Linlong"
        assert record["last_name"] == "Lu"
        assert record["room"] == "Jewel Box"
        assert record["property"] == "The Riad"
        assert record["total_eur"] == "156.00"
        assert record["nights"] == "3"
        assert record["check_in"] == "2026-01-06"
        assert record["check_out"] == "2026-01-09"

    def test_bookkeeping_fields(self, mapper):
        record = mapper.map_row({"Book number": "1"}, NOW)
        assert record["source"] == "Booking.com"
        assert record["created_at"] == NOW
        assert record["updated_at"] == NOW
        assert record["status"] == "confirmed"
        assert record["children"] == "0"

    def test_every_canonical_field_present(self, mapper):
        record = mapper.map_row({"Book number": "1"}, NOW)
        assert tuple(record) == GUEST_HEADERS

    def test_remarks_and_arrival(self, mapper):
        record = mapper.map_row(
            {"Book number": "1", "Remarks": "Arrival 14:00, vegetarian breakfast"}, NOW
        )
        assert record["special_requests"] == "Arrival 14:00, vegetarian breakfast"
        assert record["arrival_time_stated"] == "14:00"

    def test_contact_fields(self, mapper):
        record = mapper.map_row(
            {"Book number": "1", "Phone number": "0033 6 12 34", "Booker country": "fr"}, NOW
        )
        assert record["phone"] == "+003361234"
        assert record["country"] == "France"

    def test_booked_by_fallback(self, mapper):
        record = mapper.map_row({"Book number": "1", "Booked by": "Jane Doe"}, NOW)
        assert (record["first_name"], record["last_name"]) == ("Jane", "Doe")

    def test_cancelled_status(self, mapper):
        record = mapper.map_row({"Book number": "1", "Status": "cancelled_by_guest"}, NOW)
        assert record["status"] == "cancelled"

    def test_multi_room(self, mapper):
        record = mapper.map_row(
            {"Book number": "1", "Unit type": "Love @ The Annex, Joy @ The Annex"}, NOW
        )
        assert record["property"] == "The Douaria"
        assert record["room"] == "Love / Joy"


class TestAirbnbMapper:
    @pytest.fixture
    def mapper(self) -> AirbnbMapper:
        return get_mapper(Channel.AIRBNB)

    def test_current_export_columns(self, mapper):
        record = mapper.map_row(
            {
                "Confirmation code": "HMX4P2",
                "Status": "Confirmed",
                "Guest name": "Anna Smith",
                "Contact": "+44 7700 900123",
                "# of adults": "2",
                "# of children": "1",
                "Start date": "2026-02-01",
                "End date": "2026-02-04",
                "# of nights": "3",
                "Listing": "Hidden Gem - Riad in the Medina",
                "Earnings": "€420.00",
            },
            NOW,
        )
        assert record["booking_id"] == "HMX4P2"
        assert record["source"] == "Airbnb"
        assert (record["first_name"], record["last_name"]) == ("Anna", "Smith")
        assert record["phone"] == "+447700900123"
        assert record["guests"] == "3"
        assert record["room"] == "Hidden Gem"
        assert record["property"] == "The Riad"
        assert record["total_eur"] == "420.00"
        assert record["nights"] == "3"

    def test_explicit_guest_count_wins(self, mapper):
        record = mapper.map_row(
            {"Confirmation code": "HM1", "# of guests": "4", "# of adults": "2"}, NOW
        )
        assert record["guests"] == "4"

    def test_no_counts_leaves_guests_blank(self, mapper):
        record = mapper.map_row({"Confirmation code": "HM1"}, NOW)
        assert record["guests"] == ""

    def test_alias_columns(self, mapper):
        record = mapper.map_row(
            {"confirmation_code": "HM2", "Guest": "Li Wei", "Check-in": "2026-03-01"}, NOW
        )
        assert record["booking_id"] == "HM2"
        assert record["first_name"] == "Li"
        assert record["check_in"] == "2026-03-01"

    def test_canceled_status(self, mapper):
        record = mapper.map_row({"Confirmation code": "HM3", "Status": "Canceled by guest"}, NOW)
        assert record["status"] == "cancelled"


class TestGetMapper:
    def test_unknown_channel(self):
        with pytest.raises(ValueError):
            get_mapper(Channel.UNKNOWN)

    def test_custom_headers(self):
        headers = GUEST_HEADERS + ("city_tax_paid",)
        record = get_mapper(Channel.AIRBNB, headers).map_row({"Confirmation code": "HM1"}, NOW)
        assert record["city_tax_paid"] == ""


class TestRoomRederivation:
    """Mapping the stored ``room`` again gives back the same room."""

    @pytest.mark.parametrize(
        "unit",
        [
            "Double Room at The Riad",
            "Love @ The Annex",
            "Love @ The Annex, Joy @ The Annex",
            "Joy @ The Annex, Bliss @ The Annex, Love @ The Annex",
            "Tresor Suite",
        ],
    )
    def test_booking_com_unit(self, unit):
        record = get_mapper(Channel.BOOKING_COM).map_row({"Book number": "1", "Unit type": unit}, NOW)
        assert map_unit(record["room"]) == map_unit(unit)
        assert map_unit(record["room"])[1] == record["room"]

    def test_airbnb_listing(self):
        listing = "Hidden Gem - Riad in the Medina"
        record = get_mapper(Channel.AIRBNB).map_row({"Confirmation code": "HM1", "Listing": listing}, NOW)
        assert map_unit(record["room"]) == (record["property"], "Hidden Gem")

    def test_joined_rooms_split_on_slash(self):
        assert map_unit("Love / Joy") == ("The Douaria", "Love / Joy")
