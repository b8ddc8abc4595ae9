import logging
import typing as tp
from dataclasses import dataclass

from .channel import Channel, OutputQueues, Receiver
from .done import Done
from .worker import ProcessFn, StageParams, Worker

logger = logging.getLogger(__name__)


@dataclass
class Stage:
    """
    Describes one stage of a pipeline. `start` creates the channels the stage owns, schedules its workers and hands back read-only views of its outputs.
    """

    process_fn: ProcessFn
    workers: int
    maxsize: int
    total_outputs: int
    dependencies: tp.List[Receiver]
    done: tp.Optional[Done]

    @property
    def name(self) -> str:
        return type(self.process_fn).__name__

    def start(self) -> tp.List[Receiver]:
        if self.maxsize is None or self.maxsize < 0:
            raise ValueError(f"maxsize must be >= 0, got {self.maxsize}")

        output_queues: OutputQueues = OutputQueues(
            Channel(maxsize=self.maxsize) for _ in range(self.total_outputs)
        )

        stage_params = StageParams.create(
            input_queues=self.dependencies,
            output_queues=output_queues,
            done=self.done,
            total_workers=self.workers,
        )

        logger.debug(
            "starting %s with %d worker(s) and %d output(s)",
            self.name,
            self.workers,
            self.total_outputs,
        )

        if self.workers == 0:
            output_queues.close()

        for index in range(self.workers):
            worker = Worker(
                process_fn=self.process_fn,
                index=index,
                stage_params=stage_params,
                name=self.name,
            )
            worker.start()

        return output_queues.readers()
