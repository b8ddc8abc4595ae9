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
class FanOut(ApplyProcess):
    def apply(self, worker: Worker, elem: tp.Any):
        # the next element is only read once every output took this one
        for output_queue in worker.stage_params.output_queues:
            worker.send(output_queue, elem)


def fan_out(
    n: int,
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[tp.List[Receiver[A]], flowz_utils.Partial[tp.List[Receiver[A]]]]:
    """
    Broadcasts every element of `stage` to `n` outputs. The stage moves on to the next element only after all outputs received the current one, so it runs at the pace of the slowest consumer.

    ```python
    import threading
    import flowz as fz

    left, right = fz.fan_out(2, [1, 2, 3])

    results = {}
    thread = threading.Thread(target=lambda: results.update(left=fz.collect(left)))
    thread.start()

    results["right"] = fz.collect(right)
    thread.join()

    results # {"left": [1, 2, 3], "right": [1, 2, 3]}
    ```

    !!! note
        Every output has to be consumed concurrently, an output nobody reads blocks the whole stage.

    Arguments:
        n: The number of outputs.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of each output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a list of `n` Receivers, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: fan_out(n, stage=stage, maxsize=maxsize, done=done)
        )

    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    return Stage(
        process_fn=FanOut(),
        workers=1,
        maxsize=maxsize,
        total_outputs=n,
        dependencies=[stage],
        done=done,
    ).start()
