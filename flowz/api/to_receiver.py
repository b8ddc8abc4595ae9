import typing as tp

from flowz.utils import A

from ..channel import Channel, Receiver
from ..done import Done
from .generate import generate


def to_receiver(
    obj: tp.Union[Receiver[A], Channel[A], tp.Iterable[A]],
    done: tp.Optional[Done] = None,
) -> Receiver[A]:
    """
    Returns `obj` as a `Receiver`. Plain iterables are wrapped in a `generate` stage that shares `done` with the stage consuming it, so closing `done` stops both.
    """

    if isinstance(obj, Receiver):
        return obj
    elif isinstance(obj, Channel):
        return obj.reader()
    else:
        return generate(obj, done=done)
