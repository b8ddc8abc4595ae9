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
class Flatten(ApplyProcess):
    def apply(self, worker: Worker, elem: tp.Any):
        # every inner element is its own cancellable send
        for x in elem:
            worker.send(worker.output_queue, x)


def flatten(
    stage: tp.Union[
        Receiver[tp.Iterable[A]],
        Channel[tp.Iterable[A]],
        tp.Iterable[tp.Iterable[A]],
        flowz_utils.Undefined,
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[A], flowz_utils.Partial[Receiver[A]]]:
    """
    Creates a stage whose input elements are sequences and emits their elements one by one. Empty sequences produce nothing.

    ```python
    import flowz as fz

    stage = fz.generate([[1, 2], [3], [], [4]])
    fz.collect(fz.flatten(stage)) # [1, 2, 3, 4]
    ```

    Arguments:
        stage: A Receiver, Channel or Iterable of iterables.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `Receiver`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: flatten(stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    [output] = Stage(
        process_fn=Flatten(),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[stage],
        done=done,
    ).start()

    return output
