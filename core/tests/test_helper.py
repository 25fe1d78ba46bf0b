from datetime import datetime
from unittest import TestCase
from zoneinfo import ZoneInfo

from core.helper import (
    add_months,
    format_participant_names,
    generate_voucher_code,
    get_current_time_in_timezone,
)

BERLIN = ZoneInfo("Europe/Berlin")


class TestHelper(TestCase):
    def test_generate_voucher_code(self):
        codes = {generate_voucher_code() for _ in range(200)}

        for code in codes:
            self.assertRegex(code, r"^SPONK-[A-HJ-NP-Z2-9]{8}$")
        # 32^8 possible codes
        self.assertGreater(len(codes), 190)

    def test_add_months(self):
        moment = datetime(2026, 3, 15, 10, 30, tzinfo=BERLIN)

        self.assertEqual(
            add_months(moment, 12), datetime(2027, 3, 15, 10, 30, tzinfo=BERLIN)
        )
        self.assertEqual(
            add_months(moment, 10), datetime(2027, 1, 15, 10, 30, tzinfo=BERLIN)
        )

    def test_add_months_clamps_to_month_end(self):
        leap_day = datetime(2028, 2, 29, 9, 0, tzinfo=BERLIN)
        self.assertEqual(add_months(leap_day, 12), datetime(2029, 2, 28, 9, 0, tzinfo=BERLIN))

        end_of_january = datetime(2026, 1, 31, tzinfo=BERLIN)
        self.assertEqual(add_months(end_of_january, 1), datetime(2026, 2, 28, tzinfo=BERLIN))

    def test_add_months_keeps_wall_clock_across_dst(self):
        # winter time to summer time
        moment = datetime(2026, 1, 10, 12, 0, tzinfo=BERLIN)
        later = add_months(moment, 6)

        self.assertEqual(later.hour, 12)
        self.assertEqual(later.utcoffset().total_seconds(), 2 * 3600)

    def test_get_current_time_in_timezone(self):
        now = get_current_time_in_timezone("Europe/Berlin")
        self.assertEqual(now.tzinfo, BERLIN)

        fallback = get_current_time_in_timezone("Mars/Olympus_Mons")
        self.assertEqual(fallback.tzinfo, ZoneInfo("UTC"))

    def test_format_participant_names(self):
        self.assertEqual(
            format_participant_names(["Max", "", " Moritz ", "Zuviel"], 3),
            "Teilnehmer 2: Max\nTeilnehmer 3: Moritz",
        )
        self.assertIsNone(format_participant_names(["Max"], 1))
        self.assertIsNone(format_participant_names([], 4))
