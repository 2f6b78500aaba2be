import json
from datetime import datetime, timedelta

import pytest

from procmon.service.attribute.cpu_data_set import CpuDataSet
from procmon.service.attribute.memory_data_set import MemoryDataSet
from procmon.service.exporter.csv_exporter import CsvExporter
from procmon.service.exporter.json_exporter import JsonExporter
from procmon.service.recording.process_data_set import ProcessDataSet
from tests.conftest import FakeProcess, FlakyDataSet, Recorder, StepClock


@pytest.fixture
def data_set(fake_process, scheduler, tmp_path):
    data_set = ProcessDataSet(fake_process, scheduler=scheduler, export_dir=tmp_path / "exports", clock=StepClock())
    data_set.add_attribute_data_set(CpuDataSet(core_count=1))
    data_set.add_attribute_data_set(MemoryDataSet())
    return data_set


class TestAttributeRegistration:

    def test_duplicate_kind_rejected(self, data_set):
        assert not data_set.add_attribute_data_set(CpuDataSet(core_count=1))
        assert len(data_set.attribute_data_sets) == 2

    def test_added_set_is_cleared(self, fake_process, scheduler):
        memory = MemoryDataSet()
        memory.record(datetime(2020, 1, 1), fake_process)

        data_set = ProcessDataSet(fake_process, scheduler=scheduler)
        assert data_set.add_attribute_data_set(memory)
        assert len(memory) == 0


class TestRecord:

    def test_exited_process_is_a_no_op(self, data_set, fake_process):
        fake_process.exited = True

        assert data_set.record()
        assert data_set.frame_count == 0

    def test_no_attribute_sets_fails(self, fake_process, scheduler):
        assert not ProcessDataSet(fake_process, scheduler=scheduler).record()

    def test_commits_frame_on_every_set(self, data_set):
        assert data_set.record()

        assert data_set.frame_count == 1
        for attribute in data_set.attribute_data_sets:
            assert attribute.timestamps() == [data_set.start_time]

    def test_failure_rolls_back_partial_frame(self, fake_process, scheduler):
        cpu = CpuDataSet(core_count=1)
        flaky = FlakyDataSet()
        data_set = ProcessDataSet(fake_process, scheduler=scheduler, clock=StepClock())
        data_set.add_attribute_data_set(cpu)
        data_set.add_attribute_data_set(flaky)

        assert data_set.record()
        before = (cpu.timestamps(), cpu.last_recorded)

        flaky.failing = True
        assert not data_set.record()

        assert (cpu.timestamps(), cpu.last_recorded) == before
        assert data_set.frame_count == 1

    def test_sampling_error_on_first_set(self, data_set, fake_process):
        fake_process.broken = True

        assert not data_set.record()
        assert data_set.frame_count == 0
        assert all(len(s) == 0 for s in data_set.attribute_data_sets)

    def test_data_recorded_event(self, data_set):
        recorder = Recorder()
        data_set.on_data_recorded.subscribe(recorder)

        data_set.record()
        data_set.record()

        assert recorder.items == data_set.compile().timestamps

    def test_frames_strictly_increase_with_a_stuck_clock(self, fake_process, scheduler):
        stuck = datetime(2024, 1, 1, 0, 0, 0)
        data_set = ProcessDataSet(fake_process, scheduler=scheduler, clock=lambda: stuck)
        data_set.add_attribute_data_set(MemoryDataSet())

        for _ in range(3):
            assert data_set.record()

        timestamps = data_set.compile().timestamps
        assert len(set(timestamps)) == 3
        assert timestamps == sorted(timestamps)

    def test_clear(self, data_set):
        data_set.record()
        data_set.clear()

        assert data_set.frame_count == 0
        assert data_set.start_time is None
        assert all(len(s) == 0 for s in data_set.attribute_data_sets)


class TestCompile:

    def test_one_frame_per_successful_record(self, data_set, fake_process):
        for i in range(5):
            fake_process.vms = 1000 + i
            assert data_set.record()

        snapshot = data_set.compile()
        assert len(snapshot) == 5
        for frame in snapshot.values():
            assert set(frame) == {"CPU usage", "Memory usage"}
        assert [v for _, v in snapshot.series("Memory usage")] == [1000, 1001, 1002, 1003, 1004]

    def test_first_cpu_value_is_zero(self, data_set, fake_process):
        data_set.record()
        first = data_set.start_time

        assert data_set.compile()[first]["CPU usage"] == 0

    def test_removed_sample_is_omitted(self, data_set):
        data_set.record()
        data_set.record()
        first, second = data_set.compile().timestamps
        memory = [s for s in data_set.attribute_data_sets if isinstance(s, MemoryDataSet)][0]
        memory.remove(first)

        snapshot = data_set.compile()
        assert set(snapshot[first]) == {"CPU usage"}
        assert set(snapshot[second]) == {"CPU usage", "Memory usage"}

    def test_snapshot_is_read_only(self, data_set):
        data_set.record()
        snapshot = data_set.compile()
        frame = snapshot[data_set.start_time]

        with pytest.raises(TypeError):
            frame["CPU usage"] = 1.0


class TestRecordingLifecycle:

    def test_start_twice(self, data_set):
        assert data_set.start_recording()
        assert not data_set.start_recording()
        assert data_set.is_recording

    def test_stop_without_start(self, data_set):
        assert not data_set.stop_recording()

    def test_stop_after_start(self, data_set):
        data_set.start_recording()

        assert data_set.stop_recording()
        assert not data_set.is_recording
        assert not data_set.stop_recording()


class TestExport:

    def test_json_export(self, fake_process, scheduler, tmp_path):
        clock = StepClock(start=datetime(2024, 1, 2, 3, 4, 5), step=timedelta(seconds=1))
        data_set = ProcessDataSet(fake_process, scheduler=scheduler, export_dir=tmp_path / "exports", clock=clock)
        data_set.add_attribute_data_set(MemoryDataSet())

        fake_process.vms = 100
        data_set.record()
        fake_process.vms = 200
        data_set.record()

        path = data_set.export(JsonExporter())

        assert path == tmp_path / "exports" / "2024_01_02_03_04_05.export.json"
        with open(path, encoding="utf-8") as f:
            assert json.load(f) == {
                "Memory usage": {
                    "2024-01-02 03:04:05": 100,
                    "2024-01-02 03:04:06": 200,
                }
            }

    def test_frames_in_same_second_are_rejected(self, fake_process, scheduler, tmp_path):
        clock = StepClock(step=timedelta(milliseconds=100))
        data_set = ProcessDataSet(fake_process, scheduler=scheduler, export_dir=tmp_path, clock=clock)
        data_set.add_attribute_data_set(MemoryDataSet())
        data_set.record()
        data_set.record()

        assert data_set.export(JsonExporter()) is None
        assert list(tmp_path.iterdir()) == []

    def test_nothing_recorded(self, data_set, tmp_path):
        assert data_set.export(JsonExporter()) is None
        assert not (tmp_path / "exports").exists()

    def test_exporter_is_reset_afterwards(self, data_set):
        exporter = JsonExporter()
        data_set.record()
        data_set.export(exporter)

        assert exporter.export() == "{}"

    def test_export_async(self, data_set):
        data_set.record()
        data_set.record()

        path = data_set.export_async(CsvExporter()).result(timeout=10)

        assert path.suffix == ".csv"
        assert path.read_text(encoding="utf-8").startswith("timestamp,")

    def test_io_error_propagates(self, fake_process, scheduler, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")
        data_set = ProcessDataSet(fake_process, scheduler=scheduler, export_dir=blocker, clock=StepClock())
        data_set.add_attribute_data_set(MemoryDataSet())
        data_set.record()

        with pytest.raises(OSError):
            data_set.export(JsonExporter())


def test_real_process(child_process, scheduler):
    from procmon.models.process_handle import PsutilProcessHandle

    handle = PsutilProcessHandle.from_pid(child_process.pid)
    data_set = ProcessDataSet(handle, scheduler=scheduler)
    data_set.add_attribute_data_set(CpuDataSet())
    data_set.add_attribute_data_set(MemoryDataSet())

    assert data_set.record()
    assert data_set.record()
    frame = data_set.compile()[data_set.start_time]
    assert frame["CPU usage"] == 0
    assert frame["Memory usage"] > 0

    child_process.kill()
    child_process.wait()

    assert handle.has_exited()
    assert data_set.record()
    assert data_set.frame_count == 2
