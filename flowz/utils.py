import threading
import typing as tp

T = tp.TypeVar("T")
A = tp.TypeVar("A")
B = tp.TypeVar("B")
C = tp.TypeVar("C")


class Cancelled(Exception):
    """
    Raised by a channel operation when its `done` signal has been closed.
    """


class EndOfStream(Exception):
    """
    Raised by `get` once a closed channel has been fully drained.
    """


class ChannelClosedError(Exception):
    pass


class Partial(tp.Generic[T]):
    def __init__(self, f):
        self.f = f

    def __or__(self, stage) -> T:
        return self.f(stage)

    def __ror__(self, stage) -> T:
        return self.f(stage)

    def __call__(self, stage) -> T:
        return self.f(stage)


class _Namespace(object):
    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)


class Namespace:
    def __init__(self, **kwargs):
        self.__dict__["_namespace"] = _Namespace(**kwargs)
        self.__dict__["_lock"] = threading.Lock()

    def __getattr__(self, key) -> tp.Any:
        if key in ("_namespace", "_lock"):
            raise AttributeError()

        return getattr(self._namespace, key)

    def __setattr__(self, key, value) -> None:
        if key in ("_namespace", "_lock"):
            raise AttributeError()

        setattr(self._namespace, key, value)

    def __enter__(self):
        self._lock.acquire()

    def __exit__(self, *args):
        self._lock.release()


class Undefined(object):
    pass


UNDEFINED = Undefined()


def start_workers(
    target: tp.Callable,
    n_workers: int = 1,
    args: tp.Tuple[tp.Any, ...] = tuple(),
    kwargs: tp.Optional[tp.Dict[tp.Any, tp.Any]] = None,
) -> tp.List[threading.Thread]:
    if kwargs is None:
        kwargs = {}

    workers = []

    for _ in range(n_workers):
        t = threading.Thread(target=target, args=args, kwargs=kwargs)
        t.daemon = True
        t.start()
        workers.append(t)

    return workers
