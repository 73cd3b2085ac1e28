from datetime import datetime, timezone

import pytest

from src.timeclock.timeclock.common import datetime_utils
from src.timeclock.timeclock.common.datetime_utils import (
    add_days_iso,
    day_name_from_iso,
    now_in_zone,
    parse_iso_date,
    start_of_week_iso,
    time_hhmmss,
    zone,
)
from src.timeclock.timeclock.core.exceptions import ValidationError


def test_now_is_in_the_fixed_zone():
    assert now_in_zone("America/New_York").tzinfo.key == "America/New_York"


def test_today_follows_the_zone_not_the_device(monkeypatch):
    # 02:30 UTC on the 5th is still the 4th in New York
    utc_moment = datetime(2024, 3, 5, 2, 30, tzinfo=timezone.utc)
    monkeypatch.setattr(
        datetime_utils, "now_in_zone", lambda name="America/New_York": utc_moment.astimezone(zone(name))
    )
    assert datetime_utils.today_iso() == "2024-03-04"


def test_time_hhmmss():
    assert time_hhmmss(datetime(2024, 3, 4, 7, 5, 9)) == "07:05:09"


def test_unknown_zone():
    with pytest.raises(ValidationError):
        zone("Mars/Olympus_Mons")


@pytest.mark.parametrize("value", ["", "2024-13-01", "04/03/2024", None])
def test_parse_iso_date_rejects(value):
    with pytest.raises(ValidationError):
        parse_iso_date(value)


def test_day_name_and_week_helpers():
    assert day_name_from_iso("2024-03-10") == "Sun"
    assert start_of_week_iso("2024-03-10") == "2024-03-04"
    assert add_days_iso("2024-02-28", 2) == "2024-03-01"
