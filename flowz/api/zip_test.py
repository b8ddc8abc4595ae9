import typing as tp

import hypothesis as hp
from hypothesis import strategies as st

import flowz as fz

MAX_EXAMPLES = 10
T = tp.TypeVar("T")


def test_zip_unequal_lengths():
    stage = fz.zip(
        lambda n, s: f"{n}{s}",
        fz.generate([1, 2, 3, 4]),
        fz.generate(["a", "b", "c"]),
    )

    assert fz.collect(stage) == ["1a", "2b", "3c"]


def test_zip_left_shorter():
    stage = fz.zip(lambda a, b: a + b, [1, 2], [10, 20, 30])

    assert fz.collect(stage) == [11, 22]


@hp.given(left=st.lists(st.integers()), right=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_zip(left: tp.List[int], right: tp.List[int]):

    nums_py = [a * b for a, b in zip(left, right)]

    nums_fz = fz.collect(fz.zip(lambda a, b: a * b, left, right, maxsize=1))

    assert nums_fz == nums_py


@hp.given(nums=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_unzip_zip(nums: tp.List[int]):

    pairs = fz.zip(lambda a, b: (a, b), nums, [-x for x in nums])
    left, right = fz.unzip(lambda pair: pair, pairs, maxsize=len(nums))

    # both sides are buffered enough to be read one after the other
    assert fz.collect(left) == nums
    assert fz.collect(right) == [-x for x in nums]


def test_unzip_concurrent_consumers():
    letters, numbers = [(1, "a"), (2, "b"), (3, "c")] | fz.unzip(
        lambda x: (x[1], x[0])
    )

    namespace = fz.Namespace(letters=None)

    def consume():
        namespace.letters = fz.collect(letters)

    [thread] = fz.start_workers(consume)
    numbers_fz = fz.collect(numbers)
    thread.join(5)

    assert namespace.letters == ["a", "b", "c"]
    assert numbers_fz == [1, 2, 3]


def test_zip_cancelled():
    done = fz.Done()

    stage = fz.zip(lambda a, b: (a, b), range(100), range(100), done=done)

    assert stage.get() == (0, 0)

    done.close()

    assert fz.drained(stage).wait(1)


def test_unzip_cancelled():
    done = fz.Done()

    left, right = fz.unzip(lambda x: (x, -x), range(100), done=done)

    assert left.get() == 0
    assert right.get() == 0

    done.close()

    assert fz.drained(left).wait(1)
    assert fz.drained(right).wait(1)
