import logging
import threading
import typing as tp
from dataclasses import dataclass

from . import utils
from .channel import Channel, OutputQueues, Receiver
from .done import Done
from .utils import T, Cancelled, ChannelClosedError

logger = logging.getLogger(__name__)


class ProcessFn(tp.Protocol):
    def __call__(self, worker: "Worker") -> None:
        ...


class StageParams(tp.NamedTuple):
    input_queues: tp.List[Receiver]
    output_queues: OutputQueues
    done: tp.Optional[Done]
    namespace: utils.Namespace

    @classmethod
    def create(
        cls,
        input_queues: tp.List[Receiver],
        output_queues: OutputQueues,
        done: tp.Optional[Done],
        total_workers: int,
    ) -> "StageParams":
        return cls(
            namespace=utils.Namespace(active_workers=total_workers, closed=False),
            input_queues=input_queues,
            output_queues=output_queues,
            done=done,
        )

    @property
    def closed(self) -> bool:
        return self.namespace.closed

    def worker_done(self, exception: tp.Optional[BaseException] = None):
        """
        Called once by every worker when it exits. The outputs are closed by the last worker or, on failure, by the first worker that failed.
        """
        with self.namespace:
            self.namespace.active_workers -= 1

            if self.namespace.closed:
                return

            if exception is None and self.namespace.active_workers > 0:
                return

            self.namespace.closed = True

        self.output_queues.close(exception)


@dataclass
class Worker(tp.Generic[T]):
    process_fn: ProcessFn
    index: int
    stage_params: StageParams
    name: str = "stage"
    process: tp.Optional[threading.Thread] = None

    def __call__(self):
        exception: tp.Optional[BaseException] = None

        logger.debug("%s worker %d started", self.name, self.index)

        try:
            self.process_fn(self)
        except Cancelled as e:
            # only the stage's own signal stops it quietly
            if self.cancelled:
                logger.debug("%s worker %d cancelled", self.name, self.index)
            else:
                exception = e
        except ChannelClosedError as e:
            # a sibling worker failed and closed the shared outputs
            if not self.stage_params.closed:
                exception = e
        except BaseException as e:
            logger.debug(
                "%s worker %d failed", self.name, self.index, exc_info=True
            )
            exception = e
        finally:
            self.stage_params.worker_done(exception)

        logger.debug("%s worker %d finished", self.name, self.index)

    @property
    def cancelled(self) -> bool:
        done = self.stage_params.done
        return done is not None and done.closed

    def start(self):
        [self.process] = utils.start_workers(self)

    @property
    def input_queue(self) -> Receiver:
        return self.stage_params.input_queues[0]

    @property
    def output_queue(self) -> Channel:
        return self.stage_params.output_queues[0]

    def receive(self, queue: Receiver) -> tp.Iterable:
        return queue.to_iterable(done=self.stage_params.done)

    def get(self, queue: Receiver):
        return queue.get(done=self.stage_params.done)

    def send(self, queue: Channel, x: tp.Any):
        queue.put(x, done=self.stage_params.done)


class Applicable(tp.Protocol):
    def apply(self, worker: "Worker", elem: tp.Any):
        ...


class ApplyProcess(ProcessFn, Applicable):
    def __call__(self, worker: Worker):
        for elem in worker.receive(worker.input_queue):
            self.apply(worker, elem)
