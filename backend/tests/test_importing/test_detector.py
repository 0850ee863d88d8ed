"""Unit tests for export source detection."""

from riadops.importing.detector import Channel, detect_source


class TestDetectSource:
    def test_booking_com_headers(self):
        headers = ["Book number", "Booked by", "Guest name(s)", "Check-in", "Check-out"]
        assert detect_source(headers) == Channel.BOOKING_COM

    def test_airbnb_headers(self):
        headers = ["Confirmation code", "Status", "Guest", "Start date", "End date", "Listing"]
        assert detect_source(headers) == Channel.AIRBNB

    def test_case_insensitive(self):
        assert detect_source(["BOOK NUMBER", "UNIT TYPE"]) == Channel.BOOKING_COM

    def test_booking_com_checked_first(self):
        # a sheet carrying markers of both channels counts as Booking.com
        assert detect_source(["Book number", "Payout"]) == Channel.BOOKING_COM

    def test_unknown(self):
        assert detect_source(["Name", "Arrival", "Departure"]) == Channel.UNKNOWN

    def test_empty(self):
        assert detect_source([]) == Channel.UNKNOWN

    def test_custom_markers(self):
        markers = ((Channel.AIRBNB, ("reservation ref",)),)
        assert detect_source(["Reservation Ref"], markers) == Channel.AIRBNB

    def test_channel_values(self):
        assert Channel.BOOKING_COM == "booking.com"
        assert Channel.AIRBNB.value == "airbnb"
