import typing as tp
from dataclasses import dataclass

from flowz.utils import A

from ..channel import Channel, Receiver
from ..done import DoneLike, to_done
from ..stage import Stage
from ..worker import Worker
from .to_receiver import to_receiver


@dataclass
class Merge:
    def __call__(self, worker: Worker):
        # one worker per input, all sharing the same output
        input_queue = worker.stage_params.input_queues[worker.index]

        for elem in worker.receive(input_queue):
            worker.send(worker.output_queue, elem)


def merge(
    stages: tp.List[tp.Union[Receiver[A], Channel[A], tp.Iterable[A]]],
    maxsize: int = 0,
    done: DoneLike = None,
) -> Receiver[A]:
    """
    Merges many stages into a single one by forwarding elements from each stage as they come (fan-in). The order within each input is preserved but inputs interleave arbitrarily.

    ```python
    import flowz as fz

    stage_1 = fz.generate([1, 2, 3])
    stage_2 = fz.generate([4, 5, 6, 7])

    stage_3 = fz.merge([stage_1, stage_2]) # e.g. [1, 4, 5, 2, 6, 3, 7]
    ```

    The output is closed once every input has been drained, or when `done` is closed.

    Arguments:
        stages: A list of Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        A `Receiver` over the merged elements.
    """

    done = to_done(done)
    dependencies: tp.List[Receiver[A]] = [
        to_receiver(stage, done=done) for stage in stages
    ]

    [output] = Stage(
        process_fn=Merge(),
        workers=len(dependencies),
        maxsize=maxsize,
        total_outputs=1,
        dependencies=dependencies,
        done=done,
    ).start()

    return output
