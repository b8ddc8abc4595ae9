"""
Cancellation signals.

A `Done` is a one-shot broadcast signal carrying no value. Every stage accepts one through its `done` argument and stops as soon as it is closed:

```python
import flowz as fz

with fz.Done() as done:
    stage = fz.generate(range(1_000_000), done=done)
    stage = fz.map(lambda x: x * 2, stage, done=done)

    first = fz.collect(fz.take(3, stage))

# leaving the block closed `done`, so the source and the map stop as well
```

Signals can be combined with `some_done` and `every_done`.
"""

import logging
import threading
import typing as tp

from . import utils

logger = logging.getLogger(__name__)

DoneLike = tp.Union["Done", tp.Sequence["Done"], None]


class Done:
    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._listeners: tp.List[threading.Condition] = []

    @property
    def closed(self) -> bool:
        return self._event.is_set()

    def close(self):
        with self._lock:
            if self._event.is_set():
                return

            self._event.set()
            listeners = list(self._listeners)

        # wake up whoever is blocked on a channel while watching this signal
        for condition in listeners:
            with condition:
                condition.notify_all()

    def wait(self, timeout: tp.Optional[float] = None) -> bool:
        return self._event.wait(timeout)

    def add_listener(self, condition: threading.Condition):
        with self._lock:
            self._listeners.append(condition)

    def remove_listener(self, condition: threading.Condition):
        with self._lock:
            self._listeners.remove(condition)

    def __enter__(self) -> "Done":
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        return f"Done(closed={self.closed})"


def some_done(*dones: Done) -> Done:
    """
    Returns a signal that is closed as soon as any of `dones` is closed.

    With no arguments the returned signal is never closed, with a single argument that same signal is returned.
    """

    if len(dones) == 0:
        return Done()

    if len(dones) == 1:
        return dones[0]

    result = Done()

    def wait_any():
        signals = _unique([*dones, result])
        condition = threading.Condition()

        with condition:
            for done in signals:
                done.add_listener(condition)

            try:
                while not any(done.closed for done in signals):
                    condition.wait()
            finally:
                for done in signals:
                    done.remove_listener(condition)

        result.close()

    utils.start_workers(wait_any)

    return result


def every_done(*dones: Done) -> Done:
    """
    Returns a signal that is closed once all of `dones` are closed.

    With no arguments the returned signal is already closed, with a single argument that same signal is returned.
    """

    if len(dones) == 0:
        result = Done()
        result.close()
        return result

    if len(dones) == 1:
        return dones[0]

    result = Done()

    def wait_all():
        for done in _unique(dones):
            if done is result:
                continue

            done.wait()

        result.close()

    utils.start_workers(wait_all)

    return result


def after(seconds: float) -> Done:
    """
    Returns a signal that closes itself after `seconds`.
    """
    result = Done()

    timer = threading.Timer(seconds, result.close)
    timer.daemon = True
    timer.start()

    return result


def drained(stage: tp.Iterable) -> Done:
    """
    Consumes `stage` on a background thread and returns a signal that is closed once it reached its end.
    """
    result = Done()

    def drain():
        try:
            for _ in stage:
                pass
        finally:
            logger.debug("drained %r", stage)
            result.close()

    utils.start_workers(drain)

    return result


def to_done(done: DoneLike) -> tp.Optional[Done]:
    if done is None:
        return None

    if isinstance(done, Done):
        return done

    return some_done(*done)


def _unique(dones: tp.Iterable[Done]) -> tp.List[Done]:
    signals = []

    for done in dones:
        if not any(done is other for other in signals):
            signals.append(done)

    return signals
