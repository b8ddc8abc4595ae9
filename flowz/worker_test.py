import time
import typing as tp
from unittest import TestCase

import hypothesis as hp
import pytest
from hypothesis import strategies as st

import flowz as fz

MAX_EXAMPLES = 10
T = tp.TypeVar("T")


class MyException(Exception):
    pass


def create_stage_params(
    total_workers: int = 1,
    input_queues: tp.Optional[tp.List[fz.Receiver]] = None,
    done: tp.Optional[fz.Done] = None,
) -> tp.Tuple[fz.StageParams, fz.Channel]:
    output_queue = fz.Channel()

    stage_params = fz.StageParams.create(
        input_queues=input_queues or [],
        output_queues=fz.OutputQueues([output_queue]),
        done=done,
        total_workers=total_workers,
    )

    return stage_params, output_queue


class TestWorker(TestCase):
    @hp.given(nums=st.lists(st.integers()))
    @hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
    def test_basic(self, nums):
        stage_params, output_queue = create_stage_params()

        def f(worker: fz.Worker):
            for x in nums:
                worker.send(worker.output_queue, x)

        worker = fz.Worker(process_fn=f, index=0, stage_params=stage_params)

        worker.start()

        nums_fz = list(output_queue)

        assert nums_fz == nums
        assert output_queue.closed

    def test_raises(self):
        stage_params, output_queue = create_stage_params()

        def f(worker: fz.Worker) -> None:
            raise MyException()

        worker = fz.Worker(process_fn=f, index=0, stage_params=stage_params)

        worker.start()

        with pytest.raises(MyException):
            list(output_queue)

    def test_cancelled_closes_outputs(self):
        done = fz.Done()
        stage_params, output_queue = create_stage_params(done=done)

        def f(worker: fz.Worker):
            while True:
                worker.send(worker.output_queue, 1)

        worker = fz.Worker(process_fn=f, index=0, stage_params=stage_params)
        worker.start()

        assert output_queue.get() == 1

        done.close()
        worker.process.join(1)

        assert not worker.process.is_alive()
        assert list(output_queue) == []

    def test_foreign_cancelled_closes_outputs_with_it(self):
        stage_params, output_queue = create_stage_params(done=fz.Done())

        def f(worker: fz.Worker):
            raise fz.Cancelled()

        worker = fz.Worker(process_fn=f, index=0, stage_params=stage_params)
        worker.start()

        assert not worker.cancelled

        with pytest.raises(fz.Cancelled):
            list(output_queue)

    def test_last_worker_closes(self):
        stage_params, output_queue = create_stage_params(total_workers=3)

        def f(worker: fz.Worker):
            time.sleep(0.01 * worker.index)
            worker.send(worker.output_queue, worker.index)

        workers = [
            fz.Worker(process_fn=f, index=i, stage_params=stage_params)
            for i in range(3)
        ]

        for worker in workers:
            worker.start()

        assert sorted(output_queue) == [0, 1, 2]
        assert stage_params.namespace.active_workers == 0

    def test_failed_worker_closes_shared_outputs(self):
        stage_params, output_queue = create_stage_params(total_workers=2)

        def f(worker: fz.Worker):
            if worker.index == 0:
                raise MyException()

            while True:
                worker.send(worker.output_queue, worker.index)

        workers = [
            fz.Worker(process_fn=f, index=i, stage_params=stage_params)
            for i in range(2)
        ]

        for worker in workers:
            worker.start()

        with pytest.raises(MyException):
            list(output_queue)

        for worker in workers:
            worker.process.join(1)
            assert not worker.process.is_alive()

    def test_receive(self):
        input_queue = fz.Channel(maxsize=None)

        for i in range(3):
            input_queue.put(i)

        input_queue.close()

        stage_params, output_queue = create_stage_params(
            input_queues=fz.readers(input_queue)
        )

        def f(worker: fz.Worker):
            for x in worker.receive(worker.input_queue):
                worker.send(worker.output_queue, x * 10)

        fz.Worker(process_fn=f, index=0, stage_params=stage_params).start()

        assert list(output_queue) == [0, 10, 20]


class TestStage(TestCase):
    def test_start(self):
        def f(worker: fz.Worker):
            for i in range(3):
                worker.send(worker.stage_params.output_queues[worker.index], i)

        outputs = fz.Stage(
            process_fn=f,
            workers=1,
            maxsize=3,
            total_outputs=1,
            dependencies=[],
            done=None,
        ).start()

        assert len(outputs) == 1
        assert isinstance(outputs[0], fz.Receiver)
        assert list(outputs[0]) == [0, 1, 2]

    def test_no_workers(self):
        def f(worker: fz.Worker):
            pass

        [output] = fz.Stage(
            process_fn=f,
            workers=0,
            maxsize=0,
            total_outputs=1,
            dependencies=[],
            done=None,
        ).start()

        assert list(output) == []

    def test_invalid_maxsize(self):
        def f(worker: fz.Worker):
            pass

        with pytest.raises(ValueError):
            fz.Stage(
                process_fn=f,
                workers=1,
                maxsize=-1,
                total_outputs=1,
                dependencies=[],
                done=None,
            ).start()
