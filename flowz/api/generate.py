import typing as tp
from dataclasses import dataclass

from flowz import utils as flowz_utils
from flowz.utils import T

from ..channel import Receiver
from ..done import DoneLike, to_done
from ..stage import Stage
from ..worker import Worker


@dataclass
class Generate:
    iterable: tp.Iterable

    def __call__(self, worker: Worker):
        for x in self.iterable:
            worker.send(worker.output_queue, x)


@tp.overload
def generate(
    iterable: tp.Iterable[T], maxsize: int = 0, done: DoneLike = None
) -> Receiver[T]:
    ...


@tp.overload
def generate(
    maxsize: int = 0, done: DoneLike = None
) -> flowz_utils.Partial[Receiver[T]]:
    ...


def generate(
    iterable: tp.Union[tp.Iterable[T], flowz_utils.Undefined] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[T], flowz_utils.Partial[Receiver[T]]]:
    """
    Creates a source stage that emits the elements of `iterable` in order.

    ```python
    import flowz as fz

    stage = fz.generate([1, 2, 3])
    fz.collect(stage) # [1, 2, 3]
    ```

    The iterable is consumed lazily on the stage thread, so generators and other infinite iterables are fine as long as something downstream stops reading or `done` is closed.

    Arguments:
        iterable: The source elements.
        maxsize: Capacity of the output channel, `0` (default) means every element is handed over directly to a reader.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        A `Receiver` over the emitted elements if `iterable` is given, else a `Partial`.
    """

    if isinstance(iterable, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda iterable: generate(iterable, maxsize=maxsize, done=done)
        )

    [output] = Stage(
        process_fn=Generate(iterable),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[],
        done=to_done(done),
    ).start()

    return output


@dataclass
class Generator:
    gen: tp.Callable[[tp.Callable[[tp.Any], None]], None]

    def __call__(self, worker: Worker):
        def emit(x):
            worker.send(worker.output_queue, x)

        self.gen(emit)


def generator(
    gen: tp.Callable[[tp.Callable[[T], None]], None],
    maxsize: int = 0,
    done: DoneLike = None,
) -> Receiver[T]:
    """
    Creates a source stage from a callback style producer. `gen` is called once on the stage thread with an `emit` function and every `emit(x)` sends `x` downstream.

    ```python
    import flowz as fz

    def countdown(emit):
        for i in range(3, 0, -1):
            emit(i)

    fz.collect(fz.generator(countdown)) # [3, 2, 1]
    ```

    Once `done` is closed `emit` raises `flowz.Cancelled`, which unwinds `gen` and closes the output.

    Arguments:
        gen: A function with signature `gen(emit) -> None`.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        A `Receiver` over the emitted elements.
    """

    [output] = Stage(
        process_fn=Generator(gen),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[],
        done=to_done(done),
    ).start()

    return output
