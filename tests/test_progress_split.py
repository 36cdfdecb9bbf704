"""Tests for JobState.split() and ProgressSplit."""

from __future__ import annotations

import pytest

from core.progress_split import ProgressSplit
from model.job import JobStatus
from tests.jobs import SimpleJob


@pytest.fixture
async def state(registry):
    return await SimpleJob.get_progress(registry, "abc", create_if_missing=True)


class TestCountMode:
    @pytest.mark.parametrize("steps", [1, 2, 3, 7, 11])
    async def test_sizes_sum_to_exactly_100(self, state, steps):
        splits = state.split(steps)

        assert len(splits) == steps
        assert sum(s.size for s in splits) == 100.0
        assert [s.completes for s in splits] == [False] * (steps - 1) + [True]

    async def test_bases_accumulate(self, state):
        splits = state.split(4)
        assert [s.base for s in splits] == [0.0, 25.0, 50.0, 75.0]
        assert [s.size for s in splits] == [25.0] * 4

    async def test_at_least_one_split(self, state):
        splits = state.split(0)
        assert len(splits) == 1
        assert splits[0].size == 100.0
        assert splits[0].completes


class TestWeightedMode:
    async def test_weights_summing_to_100(self, state):
        splits = state.split([25, 50, 25])
        assert [s.size for s in splits] == pytest.approx([25, 50, 25])
        assert [s.base for s in splits] == pytest.approx([0, 25, 75])

    async def test_weights_are_rescaled(self, state):
        splits = state.split([25, 50, 50])
        assert [s.size for s in splits] == pytest.approx([20, 40, 40])
        assert splits[-1].completes and not splits[0].completes

    async def test_small_weights(self, state):
        splits = state.split([1, 1, 2])
        assert [s.size for s in splits] == pytest.approx([25, 25, 50])

    async def test_zero_weights_fall_back_to_equal(self, state):
        splits = state.split([0, 0, 0, 0])
        assert [s.size for s in splits] == pytest.approx([25] * 4)

    async def test_empty(self, state):
        assert state.split([]) == []


class TestComplete:
    async def test_intermediate_split_updates_to_its_end(self, state):
        first, second = state.split([30, 70])

        await first.complete(result="half")

        assert state.status is JobStatus.processing
        assert state.progress == pytest.approx(0.3)
        assert state.result == "half"

    async def test_last_split_completes_the_job(self, state, registry):
        *_, last = state.split(3)
        await last.complete(result="done")

        stored = await SimpleJob.get_progress(registry, "abc")
        assert stored.status is JobStatus.completed
        assert stored.progress == 1.0
        assert stored.result == "done"

    async def test_end_is_capped(self, state):
        split = ProgressSplit(state=state, base=90.0, size=20.0)
        await split.complete()
        assert state.progress == 1.0
        assert state.status is JobStatus.processing


class TestLocalProgress:
    async def test_update_maps_into_slice(self, state):
        _, second = state.split([50, 50])
        await second.update(0.5)
        assert state.progress == pytest.approx(0.75)

    async def test_update_with_steps_maps_into_slice(self, state):
        first, _ = state.split([40, 60])
        await first.update_with_steps(1, 2)
        assert state.progress == pytest.approx(0.2)

    async def test_nested_loops(self, state):
        for split, items in zip(state.split(2), ([1, 2], [3, 4, 5])):
            for i, _ in enumerate(items):
                await split.update_with_steps(i + 1, len(items))
            await split.complete()

        assert state.status is JobStatus.completed
        assert state.progress == 1.0
