import datetime
import unittest
from unittest import mock

import pytz

from flakegen import (
    DEFAULT_EPOCH,
    MAX_SEQUENCE,
    MAX_WORKER_ID,
    TIMESTAMP_SHIFT,
    ValidationResult,
    compare,
    decode,
    encode,
    from_datetime,
    is_newer,
    parse,
    to_datetime,
    validate,
)

# One second after the default epoch
T = 1420070401000


class TestLayout(unittest.TestCase):
    def test_constants(self):
        self.assertEqual(DEFAULT_EPOCH, 1420070400000)
        self.assertEqual(MAX_WORKER_ID, 31)
        self.assertEqual(MAX_SEQUENCE, 4095)
        self.assertEqual(TIMESTAMP_SHIFT, 17)

    def test_encode_known_value(self):
        self.assertEqual(encode(T, 5, 0), 131092480)
        self.assertEqual(encode(T, 5, 1), 131092481)
        self.assertEqual(encode(DEFAULT_EPOCH, 0, 0), 0)

    def test_round_trip(self):
        cases = [
            (DEFAULT_EPOCH, 0, 0),
            (T, 5, 1),
            (T, MAX_WORKER_ID, MAX_SEQUENCE),
            (1893456000000, 17, 2048),
        ]
        for parts in cases:
            with self.subTest(parts=parts):
                self.assertEqual(decode(encode(*parts)), parts)

    def test_round_trip_custom_epoch(self):
        epoch = 1609459200000
        snowflake = encode(epoch + 12345, 3, 7, epoch=epoch)
        self.assertEqual(decode(snowflake, epoch=epoch), (epoch + 12345, 3, 7))
        # Same bits under another epoch decode to another time.
        self.assertNotEqual(decode(snowflake)[0], epoch + 12345)

    def test_decode_string(self):
        self.assertEqual(decode("131092481"), (T, 5, 1))


class TestParse(unittest.TestCase):
    def test_parse_utc(self):
        self.assertEqual(
            parse(131092481),
            {
                "id": 131092481,
                "timestamp": T,
                "human_timestamp": "Thursday, January 01 2015 00:00:01.000 UTC",
                "worker_id": 5,
                "sequence": 1,
            },
        )

    def test_parse_time_zone(self):
        parsed = parse(131092481, tz="America/New_York")
        self.assertEqual(parsed["human_timestamp"], "Wednesday, December 31 2014 19:00:01.000 EST")
        self.assertEqual(parsed["timestamp"], T)

    def test_parse_timestamp_out_of_datetime_range(self):
        parsed = parse(2**80)
        timestamp = (2**80 >> TIMESTAMP_SHIFT) + DEFAULT_EPOCH
        self.assertEqual(parsed["timestamp"], timestamp)
        self.assertEqual(parsed["human_timestamp"], f"{timestamp}ms")
        self.assertEqual(parsed["worker_id"], 0)
        self.assertEqual(parsed["sequence"], 0)


class TestValidate(unittest.TestCase):
    def test_valid(self):
        self.assertEqual(validate(131092481), (True, "Valid snowflake"))
        self.assertTrue(validate(0).valid)
        self.assertTrue(validate("131092481").valid)
        self.assertIsInstance(validate(0), ValidationResult)

    def test_rejects_non_integers(self):
        for value in (-1, -131092481, 1.0, "abc", "-5", "", None, True, [1], "9" * 5000):
            with self.subTest(value=value):
                valid, reason = validate(value)
                self.assertFalse(valid)
                self.assertEqual(reason, "Snowflake must be a non-negative integer")

    def test_never_before_epoch_for_non_negative(self):
        for snowflake in (0, 1, 1 << TIMESTAMP_SHIFT, 2**62):
            with self.subTest(snowflake=snowflake):
                self.assertGreaterEqual(decode(snowflake)[0], DEFAULT_EPOCH)
                self.assertTrue(validate(snowflake).valid)

    def test_worker_and_sequence_always_in_range(self):
        for snowflake in (0, 4095, 4096, 131203071, 2**40 - 1, 2**63 + 12345):
            with self.subTest(snowflake=snowflake):
                _, worker_id, sequence = decode(snowflake)
                self.assertTrue(0 <= worker_id <= MAX_WORKER_ID)
                self.assertTrue(0 <= sequence <= MAX_SEQUENCE)

    def test_rejects_timestamp_before_epoch(self):
        with mock.patch("flakegen.core.codec.decode", return_value=(DEFAULT_EPOCH - 1, 0, 0)):
            valid, reason = validate(1)
        self.assertFalse(valid)
        self.assertIn("before the epoch", reason)

    def test_rejects_out_of_range_worker(self):
        with mock.patch("flakegen.core.codec.decode", return_value=(T, 32, 0)):
            valid, reason = validate(1)
        self.assertFalse(valid)
        self.assertEqual(reason, "Worker ID 32 is out of range")

    def test_rejects_out_of_range_sequence(self):
        with mock.patch("flakegen.core.codec.decode", return_value=(T, 0, 4096)):
            valid, reason = validate(1)
        self.assertFalse(valid)
        self.assertEqual(reason, "Sequence 4096 is out of range")


class TestOrdering(unittest.TestCase):
    def test_same_millisecond_is_equal(self):
        first = encode(T, 1, 5)
        second = encode(T, 3, 0)
        self.assertEqual(compare(first, second), 0)
        self.assertEqual(compare(second, first), 0)
        self.assertFalse(is_newer(first, second))

    def test_follows_timestamp(self):
        older = encode(T, MAX_WORKER_ID, MAX_SEQUENCE)
        newer = encode(T + 1, 0, 0)
        self.assertEqual(compare(newer, older), 1)
        self.assertEqual(compare(older, newer), -1)
        self.assertTrue(is_newer(newer, older))
        self.assertFalse(is_newer(older, newer))

    def test_accepts_strings(self):
        self.assertEqual(compare(str(encode(T + 5, 0, 0)), encode(T, 0, 0)), 1)


class TestDatetimes(unittest.TestCase):
    def test_to_datetime(self):
        expected = datetime.datetime(2015, 1, 1, 0, 0, 1, tzinfo=datetime.timezone.utc)
        self.assertEqual(to_datetime(131092481), expected)
        self.assertEqual(to_datetime(131092481).utcoffset(), datetime.timedelta(0))

    def test_to_datetime_time_zone(self):
        when = to_datetime(131092481, tz="Asia/Tokyo")
        self.assertEqual(when.hour, 9)
        self.assertEqual(when, datetime.datetime(2015, 1, 1, 0, 0, 1, tzinfo=pytz.utc))

    def test_from_datetime(self):
        when = datetime.datetime(2015, 1, 1, 0, 0, 1, tzinfo=datetime.timezone.utc)
        self.assertEqual(from_datetime(when), 131072000)
        self.assertEqual(from_datetime(when, high=True), 131203071)
        self.assertEqual(from_datetime(when.replace(tzinfo=None)), 131072000)

    def test_from_datetime_bounds_ids(self):
        when = datetime.datetime(2020, 6, 1, 12, 30, tzinfo=datetime.timezone.utc)
        low = from_datetime(when)
        high = from_datetime(when, high=True)
        snowflake = encode(decode(low)[0], 9, 100)
        self.assertTrue(low <= snowflake <= high)
        self.assertEqual(compare(low, high), 0)


if __name__ == "__main__":
    unittest.main()
