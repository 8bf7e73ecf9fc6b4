"""Tests for ZooRunner."""

import threading

import pytest

from zoo.config import ZooSettings
from zoo.core import Cat, EnclosureNotFoundError
from zoo.engine import ZooEngine, ZooRunner


@pytest.fixture
def engine(temp_data_dir) -> ZooEngine:
    return ZooEngine(ZooSettings(data_dir=temp_data_dir, feeding_time_scale=0))


@pytest.fixture
def runner(engine):
    zoo_runner = ZooRunner(engine)
    zoo_runner.start()
    yield zoo_runner
    zoo_runner.shutdown()


class TestRunnerLifecycle:
    def test_start_and_shutdown(self, engine):
        runner = ZooRunner(engine)
        runner.start()
        assert runner.is_running

        runner.shutdown()

        assert not runner.is_running

    def test_calls_before_start_rejected(self, engine):
        runner = ZooRunner(engine)
        with pytest.raises(RuntimeError, match="not started"):
            runner.submit(engine.start_cycle)

    def test_shutdown_without_start_is_noop(self, engine):
        ZooRunner(engine).shutdown()

    def test_shutdown_stops_cycle(self, runner, engine):
        runner.call(engine.start_cycle)
        runner.shutdown()
        assert not engine.cycle.is_running


class TestRunnerCalls:
    def test_call_sync_function(self, runner, engine):
        assert runner.call(engine.start_cycle) is True
        assert runner.call(engine.start_cycle) is False

    def test_call_coroutine_function(self, runner, engine):
        enclosure = runner.call(engine.create_enclosure, "A", capacity=2)
        assert enclosure.capacity == 2
        assert engine.get_enclosure("A") is enclosure

    def test_calls_run_on_runner_thread(self, runner):
        assert runner.call(threading.current_thread).name == "ZooRunner"

    def test_errors_propagate_to_caller(self, runner, engine):
        with pytest.raises(EnclosureNotFoundError):
            runner.call(engine.drop_food, "Nowhere")

    def test_submit_returns_future(self, runner, engine):
        future = runner.submit(engine.create_enclosure, "A", 3)
        assert future.result(timeout=5).name == "A"

    def test_call_soon(self, runner):
        done = threading.Event()
        runner.call_soon(done.set)
        assert done.wait(5)


class TestCrossThreadFeeding:
    def test_feeding_completes_on_runner_loop(self, runner, engine):
        seen = []
        engine.on_line(lambda entry: seen.append(entry.message))
        runner.call(engine.create_enclosure, "A", 3)
        runner.call(engine.register_animal, Cat(name="Muri", age=3), "A")

        runner.call(engine.drop_food, "A", "fish")
        runner.call(engine.wait_idle, timeout=5)

        assert seen[-1] == "🎉 All animals in enclosure 'A' are fed!"
        assert "  ✅ Muri finished eating" in seen
