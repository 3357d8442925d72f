from confsync.config import ScheduleType
from confsync.scheduler import ScheduledRunner


def test_runner_repeats_until_stopped():
    runs = []

    def job():
        runs.append(1)
        if len(runs) == 3:
            runner.stop()

    runner = ScheduledRunner(job, ScheduleType.FIXED_DELAY, initial_delay=0, duration=0)
    runner.run_forever()

    assert len(runs) == 3


def test_failing_job_does_not_stop_schedule():
    runs = []

    def job():
        runs.append(1)
        if len(runs) == 2:
            runner.stop()
        raise RuntimeError("feed down")

    runner = ScheduledRunner(job, ScheduleType.FIXED_RATE, initial_delay=0, duration=0)
    runner.run_forever()

    assert len(runs) == 2


def test_stop_before_initial_delay_skips_run():
    runs = []
    runner = ScheduledRunner(lambda: runs.append(1), initial_delay=60)
    runner.stop()
    runner.run_forever()
    assert runs == []


def test_background_thread_runs_job():
    runs = []
    runner = ScheduledRunner(lambda: runs.append(1), initial_delay=0, duration=3600)
    runner.start()
    runner.stop(timeout=5)
    assert len(runs) <= 1
