import typing as tp

import hypothesis as hp
from hypothesis import strategies as st

import flowz as fz

MAX_EXAMPLES = 10
T = tp.TypeVar("T")


@hp.given(nums=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_merge_basic(nums: tp.List[int]):

    nums_py = list(map(lambda x: x + 1, nums))
    nums_py1 = list(map(lambda x: x ** 2, nums_py))
    nums_py2 = list(map(lambda x: -x, nums_py))
    nums_py = nums_py1 + nums_py2

    nums_fz1 = fz.map(lambda x: (x + 1) ** 2, nums)
    nums_fz2 = fz.map(lambda x: -(x + 1), nums)
    nums_fz = fz.merge([nums_fz1, nums_fz2])

    assert sorted(nums_fz) == sorted(nums_py)


@hp.given(nums=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_merge_preserves_order_within_inputs(nums: tp.List[int]):

    left = [("left", x) for x in nums]
    right = [("right", x) for x in nums]

    merged = fz.collect(fz.merge([left, right], maxsize=2))

    assert [x for x in merged if x[0] == "left"] == left
    assert [x for x in merged if x[0] == "right"] == right


@hp.given(nums=st.lists(st.integers()))
@hp.settings(max_examples=MAX_EXAMPLES, deadline=None)
def test_merge_single(nums: tp.List[int]):

    assert fz.collect(fz.merge([fz.generate(nums)])) == nums


def test_merge_empty():
    assert fz.collect(fz.merge([])) == []


def test_merge_contains_everything():
    merged = fz.collect(
        fz.merge([fz.generate([0, 1, 2, 3, 4, 5]), fz.generate([0, 6, 7, 8])])
    )

    assert sorted(merged) == [0, 0, 1, 2, 3, 4, 5, 6, 7, 8]


def test_merge_cancelled():
    done = fz.Done()

    stage = fz.merge([fz.generate([1] * 100), fz.generate([2] * 100)], done=done)

    assert stage.get() in (1, 2)

    done.close()

    assert fz.drained(stage).wait(1)
