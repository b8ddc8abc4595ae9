import typing as tp
from dataclasses import dataclass

from flowz.utils import A

from ..channel import Channel, Receiver
from ..done import DoneLike, to_done
from ..stage import Stage
from ..worker import Worker
from .to_receiver import to_receiver


@dataclass
class Concat:
    def __call__(self, worker: Worker):
        for input_queue in worker.stage_params.input_queues:
            for elem in worker.receive(input_queue):
                worker.send(worker.output_queue, elem)


def concat(
    stages: tp.List[tp.Union[Receiver[A], Channel[A], tp.Iterable[A]]],
    maxsize: int = 0,
    done: DoneLike = None,
) -> Receiver[A]:
    """
    Concatenates many stages into a single one: the `k+1`-th input is only read after the `k`-th input has been fully drained.

    ```python
    import flowz as fz

    stage_1 = fz.generate([1, 2, 3])
    stage_2 = fz.generate([4, 5, 6, 7])

    fz.collect(fz.concat([stage_1, stage_2])) # [1, 2, 3, 4, 5, 6, 7]
    ```

    !!! note
        Sources further down the list stay blocked until their turn comes, give them a `maxsize` if they should make progress in the meantime.

    Arguments:
        stages: A list of Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        A `Receiver` over the concatenated elements.
    """

    done = to_done(done)
    dependencies: tp.List[Receiver[A]] = [
        to_receiver(stage, done=done) for stage in stages
    ]

    [output] = Stage(
        process_fn=Concat(),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=dependencies,
        done=done,
    ).start()

    return output
