import threading
import time
from datetime import datetime, timedelta, timezone
from functools import cmp_to_key

import pytest

from chronoid.core.exceptions import (
    InvalidArgumentTypeError,
    InvalidTimestampTypeError,
    MalformedIdentifierError,
)
from chronoid.utils.snowflake import MAXIMUM_INCREMENT, Snowflake


def test_generate_and_deconstruct(snowflake):
    timestamp = int(time.time() * 1000)
    snowflake_id = snowflake.generate(
        timestamp=timestamp, worker_id=1, process_id=2, increment=42
    )
    data = snowflake.deconstruct(snowflake_id)

    assert data.id == snowflake_id
    assert data.timestamp == timestamp
    assert data.worker_id == 1
    assert data.process_id == 2
    assert data.increment == 42
    assert data.epoch == 0


@pytest.mark.parametrize(
    "worker_id, process_id, increment",
    [(0, 0, 0), (31, 31, 4095), (17, 3, 2048), (5, 30, 1)],
)
def test_fields_round_trip(worker_id, process_id, increment):
    snowflake = Snowflake(1420070400000)
    timestamp = 1768617781186
    data = snowflake.deconstruct(
        snowflake.generate(
            timestamp=timestamp,
            worker_id=worker_id,
            process_id=process_id,
            increment=increment,
        )
    )

    assert (data.timestamp, data.worker_id, data.process_id, data.increment) == (
        timestamp,
        worker_id,
        process_id,
        increment,
    )


def test_default_worker_and_process_ids(snowflake):
    data = snowflake.deconstruct(snowflake.generate())
    assert data.worker_id == 0
    assert data.process_id == 1

    data = snowflake.deconstruct(snowflake.generate(worker_id=1, process_id=2))
    assert data.worker_id == 1
    assert data.process_id == 2


def test_configured_ids_are_used_by_default(snowflake):
    snowflake.worker_id = 7
    snowflake.process_id = 9

    data = snowflake.deconstruct(snowflake.generate())
    assert data.worker_id == 7
    assert data.process_id == 9


def test_setters_truncate_to_field_width(snowflake):
    snowflake.worker_id = 33
    snowflake.process_id = 64
    snowflake.increment = 4097

    assert snowflake.worker_id == 1
    assert snowflake.process_id == 0
    assert snowflake.increment == 1


def test_auto_increment_advances_by_one(snowflake):
    first = snowflake.deconstruct(snowflake.generate(timestamp=1000))
    second = snowflake.deconstruct(snowflake.generate(timestamp=1000))

    assert second.increment == (first.increment + 1) % 4096


def test_auto_increment_wraps(snowflake):
    snowflake.increment = MAXIMUM_INCREMENT

    assert snowflake.deconstruct(snowflake.generate()).increment == 4095
    assert snowflake.deconstruct(snowflake.generate()).increment == 0


def test_explicit_increment_leaves_counter_alone(snowflake):
    snowflake.generate(increment=100)
    snowflake.generate(increment=200)

    assert snowflake.increment == 0


def test_out_of_range_fields_are_truncated(snowflake):
    assert snowflake.generate(timestamp=5000, worker_id=32, increment=0) == (
        snowflake.generate(timestamp=5000, worker_id=0, increment=0)
    )
    assert snowflake.generate(timestamp=5000, process_id=33, increment=4096) == (
        snowflake.generate(timestamp=5000, process_id=1, increment=0)
    )


def test_timestamp_from_matches_deconstruct(snowflake):
    timestamp = int(time.time() * 1000)
    snowflake_id = snowflake.generate(timestamp=timestamp)

    assert snowflake.timestamp_from(snowflake_id) == timestamp
    assert snowflake.timestamp_from(str(snowflake_id)) == (
        snowflake.deconstruct(snowflake_id).timestamp
    )


def test_datetime_timestamp(snowflake):
    date = datetime(2024, 5, 17, 12, 30, 15, 123000, tzinfo=timezone.utc)
    snowflake_id = snowflake.generate(timestamp=date)

    assert snowflake.timestamp_from(snowflake_id) == 1715949015123


def test_naive_datetime_is_utc(snowflake):
    aware = datetime(2024, 5, 17, tzinfo=timezone.utc)
    naive = datetime(2024, 5, 17)

    assert snowflake.generate(timestamp=naive, increment=0) == (
        snowflake.generate(timestamp=aware, increment=0)
    )


def test_aware_datetime_in_other_timezone(snowflake):
    paris = timezone(timedelta(hours=2))
    date = datetime(2024, 5, 17, 14, 0, tzinfo=paris)

    assert snowflake.timestamp_from(snowflake.generate(timestamp=date)) == (
        1715947200000
    )


def test_datetime_epoch():
    snowflake = Snowflake(datetime(2015, 1, 1, tzinfo=timezone.utc))

    assert snowflake.epoch == 1420070400000


def test_integral_float_timestamp(snowflake):
    assert snowflake.timestamp_from(snowflake.generate(timestamp=1500.0)) == 1500


@pytest.mark.parametrize("timestamp", ["1500", 1.5, True, object(), [1]])
def test_invalid_timestamp_type(snowflake, timestamp):
    with pytest.raises(InvalidTimestampTypeError):
        snowflake.generate(timestamp=timestamp)


def test_invalid_timestamp_is_a_type_error(snowflake):
    with pytest.raises(TypeError):
        snowflake.generate(timestamp="now")


def test_timestamp_before_epoch_is_not_rejected():
    snowflake = Snowflake(10_000)
    snowflake_id = snowflake.generate(timestamp=9_999)

    assert snowflake_id < 0
    assert snowflake.timestamp_from(snowflake_id) == 9_999


@pytest.mark.parametrize("value", ["", "abc", "-1", "12.5", "0x10", "1_000"])
def test_malformed_identifier(snowflake, value):
    with pytest.raises(MalformedIdentifierError):
        snowflake.deconstruct(value)


def test_malformed_identifier_in_timestamp_from(snowflake):
    with pytest.raises(ValueError):
        snowflake.timestamp_from("not a snowflake")


def test_identifier_with_surrounding_whitespace(snowflake):
    assert snowflake.deconstruct(" 4194304 ").timestamp == 1


@pytest.mark.parametrize("value", [1.0, None, True])
def test_invalid_identifier_type(snowflake, value):
    with pytest.raises(InvalidArgumentTypeError):
        snowflake.deconstruct(value)


def test_epoch_is_read_only(snowflake):
    with pytest.raises(AttributeError):
        snowflake.epoch = 10


def test_compare_ints():
    assert Snowflake.compare(1, 2) == -1
    assert Snowflake.compare(2, 1) == 1
    assert Snowflake.compare(2, 2) == 0


def test_compare_strings():
    assert Snowflake.compare("254360814063058944", "1056191128120082432") == -1
    assert Snowflake.compare("1056191128120082432", "254360814063058944") == 1
    assert Snowflake.compare("737141877803057244", "254360814063058944") == 1
    assert Snowflake.compare("737141877803057244", "737141877803057244") == 0


def test_compare_mixed_kinds():
    assert Snowflake.compare("254360814063058944", 737141877803057244) == -1
    assert Snowflake.compare(737141877803057244, "254360814063058944") == 1
    assert Snowflake.compare("737141877803057244", 737141877803057244) == 0


def test_compare_mixed_kinds_rejects_malformed_strings():
    with pytest.raises(MalformedIdentifierError):
        Snowflake.compare("abc", 1)


def test_compare_zero_padded_strings_uses_length():
    # documented limitation: padded strings are not valid snowflakes
    assert Snowflake.compare("0010", "9") == 1


def test_sort_with_compare():
    ids = ["737141877803057244", "1056191128120082432", "254360814063058944"]

    assert sorted(ids, key=cmp_to_key(Snowflake.compare)) == [
        "254360814063058944",
        "737141877803057244",
        "1056191128120082432",
    ]
    assert sorted(ids, key=cmp_to_key(Snowflake.compare), reverse=True) == [
        "1056191128120082432",
        "737141877803057244",
        "254360814063058944",
    ]


def test_compare_is_a_total_order_over_generated_ids(snowflake):
    a, b, c = (snowflake.generate(timestamp=t) for t in (1000, 2000, 3000))

    for x, y in ((a, b), (b, c), (a, c)):
        assert Snowflake.compare(x, y) < 0
        assert Snowflake.compare(str(x), str(y)) < 0
        assert Snowflake.compare(y, x) > 0
    for x in (a, b, c):
        assert Snowflake.compare(x, x) == 0
        assert Snowflake.compare(str(x), str(x)) == 0


def test_numeric_and_string_sort_agree(snowflake):
    ids = [snowflake.generate(timestamp=t) for t in (5, 999_999, 42, 10**12, 7)]

    numeric = sorted(ids, key=cmp_to_key(Snowflake.compare))
    textual = sorted((str(i) for i in ids), key=cmp_to_key(Snowflake.compare))

    assert [str(i) for i in numeric] == textual


def test_deconstructed_snowflake_is_frozen(snowflake):
    data = snowflake.deconstruct(snowflake.generate())

    with pytest.raises(Exception):
        data.worker_id = 3


def test_concurrent_generate_hands_out_distinct_increments(snowflake):
    results = []
    results_lock = threading.Lock()

    def generate_many():
        generated = [snowflake.generate(timestamp=1_000) for _ in range(512)]
        with results_lock:
            results.extend(generated)

    threads = [threading.Thread(target=generate_many) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    increments = {snowflake.deconstruct(snowflake_id).increment for snowflake_id in results}
    assert len(results) == 4096
    assert increments == set(range(4096))
    assert snowflake.increment == 0
