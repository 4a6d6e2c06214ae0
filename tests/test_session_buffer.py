import numpy as np
import pytest

from swingmetrics.core.session_buffer import SessionBuffer
from swingmetrics.errors import BufferFull


def test_cursors_track_each_channel_independently() -> None:
    buf = SessionBuffer(capacity=10)
    for i in range(4):
        buf.write_accel(i * 0.05, 1.0, 2.0, 3.0)
    for _ in range(7):
        buf.write_gyro(4.0, 5.0, 6.0)

    assert buf.accel_index == 4
    assert buf.gyro_index == 7
    assert len(buf) == 7


def test_cursors_saturate_at_capacity() -> None:
    buf = SessionBuffer(capacity=3)
    accepted = 0
    for i in range(5):
        try:
            buf.write_accel(float(i), 1.0, 1.0, 1.0)
            accepted += 1
        except BufferFull:
            pass
    assert accepted == 3
    assert buf.accel_index == 3
    assert buf.gyro_index == 0


def test_writes_past_capacity_leave_rows_untouched() -> None:
    buf = SessionBuffer(capacity=2)
    buf.write_accel(0.0, 1.0, 2.0, 3.0)
    buf.write_accel(0.05, 1.0, 2.0, 3.0)
    buf.write_gyro(4.0, 5.0, 6.0)
    buf.write_gyro(4.0, 5.0, 6.0)
    before = buf.snapshot_for_export()

    for _ in range(3):
        with pytest.raises(BufferFull):
            buf.write_accel(9.0, 9.0, 9.0, 9.0)
        with pytest.raises(BufferFull) as excinfo:
            buf.write_gyro(9.0, 9.0, 9.0)
        assert excinfo.value.channel == "gyroscope"

    np.testing.assert_array_equal(buf.snapshot_for_export(), before)
    assert buf.accel_index == 2
    assert buf.gyro_index == 2


def test_snapshot_is_paced_by_gyroscope() -> None:
    buf = SessionBuffer(capacity=16)
    for i in range(5):
        buf.write_accel(i * 0.05, 1.0, 2.0, 3.0)
    buf.write_gyro(4.0, 5.0, 6.0)
    buf.write_gyro(4.0, 5.0, 6.0)

    rows = buf.snapshot_for_export()
    assert rows.shape == (2, 7)
    assert rows.dtype == np.float32
    assert buf.snapshot_for_export(pacing="accel").shape == (5, 7)


def test_rows_beyond_accel_cursor_keep_default_fields() -> None:
    buf = SessionBuffer(capacity=8)
    buf.write_accel(0.0, 1.0, 2.0, 3.0)
    for _ in range(3):
        buf.write_gyro(4.0, 5.0, 6.0)

    rows = list(buf.rows())
    assert len(rows) == 3
    assert rows[0].as_tuple() == (0.0, 1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
    assert rows[2].as_tuple() == (0.0, 0.0, 0.0, 0.0, 4.0, 5.0, 6.0)


def test_storage_grows_past_initial_allocation() -> None:
    buf = SessionBuffer(capacity=5000)
    for i in range(3000):
        buf.write_accel(float(i), float(i), 0.0, 0.0)
        buf.write_gyro(0.0, 0.0, float(i))
    rows = buf.snapshot_for_export()
    assert rows.shape == (3000, 7)
    assert rows[2999, 1] == pytest.approx(2999.0)
    assert rows[2999, 6] == pytest.approx(2999.0)


def test_reset_rewinds_cursors_and_clears_rows() -> None:
    buf = SessionBuffer(capacity=4)
    buf.write_accel(0.0, 1.0, 2.0, 3.0)
    buf.write_gyro(4.0, 5.0, 6.0)
    buf.reset()

    assert buf.accel_index == 0
    assert buf.gyro_index == 0
    buf.write_gyro(7.0, 8.0, 9.0)
    assert buf.snapshot_for_export().tolist() == [[0.0, 0.0, 0.0, 0.0, 7.0, 8.0, 9.0]]


def test_snapshot_is_a_copy() -> None:
    buf = SessionBuffer(capacity=4)
    buf.write_accel(0.0, 1.0, 2.0, 3.0)
    buf.write_gyro(4.0, 5.0, 6.0)
    snap = buf.snapshot_for_export()
    snap[0, 1] = 42.0
    assert buf.snapshot_for_export()[0, 1] == 1.0


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SessionBuffer(capacity=0)


def test_unknown_pacing_rejected() -> None:
    with pytest.raises(ValueError):
        SessionBuffer(capacity=2).snapshot_for_export(pacing="both")  # type: ignore[arg-type]
