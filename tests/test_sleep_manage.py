from datetime import datetime, timedelta

import pytest

from kumabot.sleep_manage import (
    SleepDB,
    good_morning_text,
    good_night_text,
    is_evening,
    is_morning,
    time_duration,
)


@pytest.fixture
def db(tmp_path):
    with SleepDB(tmp_path / "manage.db") as database:
        yield database


DAY1_NIGHT = datetime(2022, 8, 1, 22, 0, 0)


def test_first_sleep_has_no_awake_time(db):
    position, awake = db.sleep(1, 100, DAY1_NIGHT)
    assert position == 1
    assert awake == timedelta(0)


def test_second_sleeper_ranks_after_first(db):
    db.sleep(1, 100, DAY1_NIGHT)
    position, _ = db.sleep(1, 200, DAY1_NIGHT + timedelta(minutes=30))
    assert position == 2


def test_repeat_sleep_reports_elapsed(db):
    later = DAY1_NIGHT + timedelta(hours=1, minutes=30)
    db.sleep(1, 100, DAY1_NIGHT)
    _, awake = db.sleep(1, 100, later)
    assert awake == later - DAY1_NIGHT


def test_groups_are_separate(db):
    first, _ = db.sleep(1, 100, DAY1_NIGHT)
    db.sleep(1, 200, DAY1_NIGHT)
    other, _ = db.sleep(2, 300, DAY1_NIGHT)
    assert other == first


def test_yesterday_not_counted_tonight(db):
    lone, _ = db.sleep(9, 1, DAY1_NIGHT + timedelta(days=1))
    db.sleep(1, 100, DAY1_NIGHT)
    position, _ = db.sleep(1, 200, DAY1_NIGHT + timedelta(days=1))
    assert position == lone


def test_daytime_sleep_counts_all_earlier(db):
    first, _ = db.sleep(1, 100, DAY1_NIGHT)
    position, _ = db.sleep(1, 200, datetime(2022, 8, 2, 12, 0, 0))
    assert position == first + 1


def test_get_up_reports_sleep_duration(db):
    slept = datetime(2022, 8, 1, 23, 0, 0)
    woke = datetime(2022, 8, 2, 7, 0, 0)
    db.sleep(1, 100, slept)
    position, duration = db.get_up(1, 100, woke)
    lone, _ = db.get_up(5, 5, woke)
    assert duration == woke - slept
    assert position == lone


def test_time_duration_truncates():
    delta = timedelta(hours=1, minutes=2, seconds=3, microseconds=999999)
    assert time_duration(delta) == (1, 2, 3)


def test_time_duration_long():
    assert time_duration(timedelta(days=1, minutes=5)) == (24, 5, 0)


@pytest.mark.parametrize("hour, expected", [(5, False), (6, True), (12, True), (13, False)])
def test_is_morning(hour, expected):
    assert is_morning(datetime(2022, 8, 1, hour)) is expected


@pytest.mark.parametrize("hour, expected", [(20, False), (21, True), (3, True), (4, False)])
def test_is_evening(hour, expected):
    assert is_evening(datetime(2022, 8, 1, hour)) is expected


def test_good_morning_text_without_duration():
    assert good_morning_text(3, timedelta(0)) == "早安成功！你是今天第3个起床的"


def test_good_morning_text_with_duration():
    text = good_morning_text(3, timedelta(hours=1, minutes=2, seconds=3))
    assert text == "早安成功！你的睡眠时长为1时2分3秒,你是今天第3个起床的"


def test_good_night_text_too_long_is_short_form():
    assert good_night_text(4, timedelta(hours=25)) == "晚安成功！你是今天第4个睡觉的"


def test_good_night_text_with_duration():
    text = good_night_text(4, timedelta(hours=2, minutes=5, seconds=9))
    assert text == "晚安成功！你的清醒时长为2时5分9秒,你是今天第4个睡觉的"