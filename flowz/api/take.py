import typing as tp
from dataclasses import dataclass

from flowz import utils as flowz_utils
from flowz.utils import A

from ..channel import Channel, Receiver
from ..done import DoneLike, to_done
from ..stage import Stage
from ..worker import Worker
from .to_receiver import to_receiver


@dataclass
class TakeWhile:
    f: tp.Callable[[tp.Any], bool]

    def __call__(self, worker: Worker):
        for elem in worker.receive(worker.input_queue):
            if not self.f(elem):
                return

            worker.send(worker.output_queue, elem)


@dataclass
class Take:
    n: int

    def __call__(self, worker: Worker):
        remaining = self.n

        if remaining <= 0:
            return

        for elem in worker.receive(worker.input_queue):
            worker.send(worker.output_queue, elem)
            remaining -= 1

            if remaining == 0:
                return


def take_while(
    f: tp.Callable[[A], bool],
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[A], flowz_utils.Partial[Receiver[A]]]:
    """
    Creates a stage that forwards elements until `f` returns `False` for the first time. The element that failed the predicate is not forwarded.

    ```python
    import flowz as fz

    stage = fz.take_while(lambda x: x < 3, [1, 2, 3, 4, 1])
    fz.collect(stage) # [1, 2]
    ```

    !!! note
        The stage stops reading its input once the predicate fails, whatever is left upstream is not drained. Close a `done` shared with the upstream stages or call `drop_all` on the input to release them.

    Arguments:
        f: A function with signature `f(x) -> bool`.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `Receiver`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: take_while(f, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    [output] = Stage(
        process_fn=TakeWhile(f),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[stage],
        done=done,
    ).start()

    return output


def take(
    n: int,
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[A], flowz_utils.Partial[Receiver[A]]]:
    """
    Creates a stage that forwards the first `n` elements and then closes its output. If `n <= 0` the output is closed right away.

    ```python
    import flowz as fz

    stage = fz.take(2, [1, 2, 3, 4])
    fz.collect(stage) # [1, 2]
    ```

    !!! note
        Like `take_while`, the remaining upstream elements are not drained.

    Arguments:
        n: The number of elements to forward.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `Receiver`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: take(n, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    [output] = Stage(
        process_fn=Take(n),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[stage],
        done=done,
    ).start()

    return output
