import typing as tp
from dataclasses import dataclass

from flowz import utils as flowz_utils
from flowz.utils import A

from ..channel import Channel, Receiver
from ..done import DoneLike, to_done
from ..stage import Stage
from ..worker import ApplyProcess, Worker
from .to_receiver import to_receiver


@dataclass
class Partition(ApplyProcess):
    predicate: tp.Callable[[tp.Any], bool]

    def apply(self, worker: Worker, elem: tp.Any):
        satisfied, not_satisfied = worker.stage_params.output_queues

        if self.predicate(elem):
            worker.send(satisfied, elem)
        else:
            worker.send(not_satisfied, elem)


def partition(
    predicate: tp.Callable[[A], bool],
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[
    tp.Tuple[Receiver[A], Receiver[A]],
    flowz_utils.Partial[tp.Tuple[Receiver[A], Receiver[A]]],
]:
    """
    Splits `stage` in two: elements for which `predicate` returns `True` go to the first output, the rest to the second one.

    ```python
    import flowz as fz

    evens, odds = fz.partition(lambda x: x % 2 == 0, range(10))
    ```

    !!! note
        Both outputs have to be consumed concurrently, otherwise the stage blocks on whichever side is not being read.

    Arguments:
        predicate: A function with signature `predicate(x) -> bool`.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of each output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `(satisfied, not_satisfied)` tuple of Receivers, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: partition(predicate, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    satisfied, not_satisfied = Stage(
        process_fn=Partition(predicate),
        workers=1,
        maxsize=maxsize,
        total_outputs=2,
        dependencies=[stage],
        done=done,
    ).start()

    return satisfied, not_satisfied
