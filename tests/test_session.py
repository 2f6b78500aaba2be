import pytest

from procmon.config.monitor_config import MonitorConfig
from procmon.consts.AttributeKind import AttributeKind
from procmon.service.attribute.memory_data_set import MemoryDataSet
from procmon.session import MonitorSession
from tests.conftest import FakeProcess, wait_until


@pytest.fixture
def session(tmp_path):
    config = MonitorConfig(
        watch_interval=0.05,
        sampling_interval=0.02,
        export_dir=str(tmp_path / "exports"),
        attributes=[AttributeKind.MEMORY],
        log_level="WARNING",
    )
    session = MonitorSession(config)
    yield session
    session.close()


def test_open_and_close_drive_the_watcher(session):
    with session:
        assert session.watcher.is_watching
    assert not session.watcher.is_watching


def test_watch_records_configured_metrics(session, fake_process):
    session.open()
    data_set = session.watch(fake_process)

    assert [type(s) for s in data_set.attribute_data_sets] == [MemoryDataSet]
    assert session.watched_pids == [fake_process.pid]
    assert wait_until(lambda: data_set.frame_count >= 2)


def test_watch_twice_reuses_data_set(session, fake_process):
    first = session.watch(fake_process)
    assert session.watch(fake_process) is first
    assert session.scheduler.callback_count(fake_process.pid) == 1


def test_unwatch(session, fake_process):
    session.watch(fake_process)

    assert session.unwatch(fake_process.pid)
    assert not session.unwatch(fake_process.pid)
    assert session.data_set(fake_process.pid) is None


def test_export_unknown_pid(session):
    assert session.export(123456) is None


def test_close_stops_recording(session):
    data_sets = [session.watch(FakeProcess(pid=pid)) for pid in (1, 2)]
    session.open()

    session.close()

    assert session.scheduler.scheduled_pids() == []
    assert not any(d.is_recording for d in data_sets)
