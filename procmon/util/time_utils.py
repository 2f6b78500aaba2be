from datetime import datetime, timedelta

# Key format used inside exported documents
DATA_POINT_FORMAT = "%Y-%m-%d %H:%M:%S"

# File name format of export artifacts
EXPORT_FILE_FORMAT = "%Y_%m_%d_%H_%M_%S"

_TICK = timedelta(microseconds=1)


def format_data_point_time(timestamp: datetime) -> str:
    return timestamp.strftime(DATA_POINT_FORMAT)


def format_export_time(timestamp: datetime) -> str:
    return timestamp.strftime(EXPORT_FILE_FORMAT)


def next_frame_time(now: datetime, last: datetime | None) -> datetime:
    """
    Return a frame timestamp strictly later than the previous one.

    The wall clock can report the same instant twice (or step backwards), so
    the reading is moved one microsecond past the previous frame when needed.
    """
    if last is not None and now <= last:
        return last + _TICK
    return now
