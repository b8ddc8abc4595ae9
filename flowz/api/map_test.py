import itertools
import threading
import time
import typing as tp

import hypothesis as hp
import pytest
from flaky import flaky
from hypothesis import strategies as st

import flowz as fz

MAX_EXAMPLES = 10
T = tp.TypeVar("T")


@hp.given(nums=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_map_id(nums: tp.List[int]):

    nums_py = nums

    nums_fz = fz.map(lambda x: x, nums)
    nums_fz = list(nums_fz)

    assert nums_fz == nums_py


@hp.given(nums=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_map_id_pipe(nums: tp.List[int]):

    nums_fz = nums | fz.map(lambda x: x) | list

    assert nums_fz == nums


@hp.given(nums=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_map_square(nums: tp.List[int]):

    nums_py = map(lambda x: x ** 2, nums)
    nums_py = list(nums_py)

    nums_fz = fz.map(lambda x: x ** 2, fz.generate(nums))
    nums_fz = fz.collect(nums_fz)

    assert nums_fz == nums_py


@hp.given(nums=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_map_square_buffered(nums: tp.List[int]):

    nums_py = [x ** 2 for x in nums]

    mapper = fz.map(lambda x: x ** 2, maxsize=2)
    nums_fz = fz.collect(mapper(fz.generate(nums, maxsize=2)))

    assert nums_fz == nums_py


def test_map_to_str():
    stage = fz.map(lambda x: f"{x}", fz.generate([1, 2, 3, 4]))

    assert fz.collect(stage) == ["1", "2", "3", "4"]


def test_map_cancelled():
    done = fz.Done()

    stage = fz.map(lambda x: x * 2, itertools.count(), done=done)

    assert stage.get() == 0

    done.close()

    # an already computed element is not forwarded after cancellation
    assert fz.collect(stage) == []


@flaky(max_runs=3, min_passes=1)
def test_map_cancelled_stops_iterable_source():
    active = threading.active_count()
    done = fz.Done()

    stage = fz.map(lambda x: x, range(100), done=done)

    assert stage.get() == 0

    done.close()

    assert fz.drained(stage).wait(1)

    # the source created for `range(100)` shares `done` and stops too
    deadline = time.time() + 1

    while threading.active_count() > active and time.time() < deadline:
        time.sleep(0.01)

    assert threading.active_count() <= active


class MyError(Exception):
    pass


def test_error_handling():

    error = None

    def raise_error(x):
        raise MyError()

    stage = fz.map(raise_error, range(10))

    try:
        list(stage)

    except MyError as e:
        error = e

    assert isinstance(error, MyError)


def test_error_propagates_downstream():
    def f(x):
        if x == 3:
            raise MyError()

        return x

    stage = fz.map(f, range(10))
    stage = fz.map(lambda x: x + 1, stage)

    received = []

    with pytest.raises(MyError):
        for x in stage:
            received.append(x)

    assert received == [1, 2, 3]


@hp.given(nums=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_peek(nums: tp.List[int]):
    seen = []

    nums_fz = fz.collect(fz.peek(seen.append, nums))

    assert nums_fz == nums
    assert seen == nums


def test_peek_mutates():
    class Wrap:
        def __init__(self, a):
            self.a = a

    def square(w):
        w.a = w.a * w.a

    stage = fz.peek(square, fz.generate([Wrap(1), Wrap(2), Wrap(3)]))

    assert [w.a for w in fz.collect(stage)] == [1, 4, 9]


def test_peek_pipe():
    seen = []

    result = [1, 2, 3] | fz.peek(seen.append, maxsize=1) | fz.collect

    assert result == [1, 2, 3]
    assert seen == [1, 2, 3]


def test_peek_cancelled():
    done = fz.Done()
    seen = []

    stage = fz.peek(seen.append, range(100), done=done)

    assert stage.get() == 0

    done.close()

    assert fz.drained(stage).wait(1)
    assert seen[0] == 0


def test_foreign_cancelled_is_an_error():
    other = fz.Done()
    other.close()

    channel = fz.Channel(maxsize=1)

    def read_other(x):
        # cancelled by a signal the stage does not own
        channel.get(done=other)

    stage = fz.peek(read_other, [1, 2, 3])

    with pytest.raises(fz.Cancelled):
        fz.collect(stage)
