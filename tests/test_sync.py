"""
Tests for the present-loop synchronizer, driven by an in-memory renderer.
"""

import pytest

from vkguide.errors import SurfaceOutOfDate
from vkguide.sync import (
    AcquireRing,
    Acquisition,
    CompletionSignal,
    FrameRenderer,
    FrameSlot,
    LoopState,
    NowSignal,
    RenderLoop,
)


class FakeSignal(CompletionSignal):
    """Resolves only when waited on, or when the test resolves it."""

    def __init__(self, index, log):
        self.index = index
        self.log = log
        self.resolved = False
        self.waits = 0

    def wait(self, timeout=None):
        self.waits += 1
        self.log.append(('wait', self.index))
        self.resolved = True

    def is_resolved(self):
        return self.resolved


class FakeRenderer(FrameRenderer):

    def __init__(self, n_images=3):
        self.n_images = n_images
        self.log = []
        self.next_index = 0
        self.acquire_results = []
        self.flush_results = []
        self.submitted = []
        self.previous_seen = []

    @property
    def image_count(self):
        return self.n_images

    def acquire_next_image(self):
        if self.acquire_results:
            result = self.acquire_results.pop(0)
            if isinstance(result, Exception):
                self.log.append(('acquire_failed', type(result).__name__))
                raise result
            index, suboptimal = result
        else:
            index, suboptimal = self.next_index, False
            self.next_index = (self.next_index + 1) % self.n_images
        self.log.append(('acquire', index))
        return Acquisition(index, suboptimal, object())

    def synchronize(self):
        return NowSignal()

    def flush_next_future(self, previous, acquisition, index):
        self.previous_seen.append(previous)
        if self.flush_results:
            result = self.flush_results.pop(0)
            if isinstance(result, Exception):
                self.submitted.append(index)
                self.log.append(('present_failed', index))
                raise result
        signal = FakeSignal(index, self.log)
        self.submitted.append(index)
        self.log.append(('submit', index))
        return signal

    def recreate_swapchain(self):
        self.log.append(('recreate',))

    def handle_window_resize(self):
        self.log.append(('resize',))


@pytest.fixture
def renderer():
    return FakeRenderer(3)


@pytest.fixture
def loop(renderer):
    return RenderLoop(renderer)


class TestFrameSlot:

    def test_empty_slot_not_in_flight(self):
        assert not FrameSlot().in_flight

    def test_resolved_signal_not_in_flight(self):
        assert not FrameSlot(NowSignal()).in_flight

    def test_unresolved_signal_in_flight(self):
        assert FrameSlot(FakeSignal(0, [])).in_flight


class TestInitialState:

    def test_one_slot_per_image(self, loop):
        assert len(loop.slots) == 3
        assert all(slot.signal is None for slot in loop.slots)

    def test_flags_clear(self, loop):
        assert loop.previous_index == 0
        assert not loop.needs_rebuild
        assert not loop.window_resized
        assert loop.state == LoopState.IDLE


class TestSteadyState:

    def test_first_cycles_never_block(self, loop, renderer):
        """With 3 empty slots the first 3 cycles don't wait; the 4th waits on slot 0."""
        for _ in range(3):
            assert loop.update()
        assert not any(entry[0] == 'wait' for entry in renderer.log)

        first_signal = loop.slots[0].signal
        assert loop.update()
        assert first_signal.waits == 1
        assert renderer.log[-3:] == [('acquire', 0), ('wait', 0), ('submit', 0)]

    def test_wait_happens_before_submit_on_reuse(self, loop, renderer):
        for _ in range(9):
            loop.update()
        submits = [i for i, entry in enumerate(renderer.log) if entry[0] == 'submit']
        for i in submits[3:]:
            assert renderer.log[i - 1] == ('wait', renderer.log[i][1])
        assert sum(1 for entry in renderer.log if entry[0] == 'wait') == 6

    def test_at_most_one_unresolved_signal_per_slot(self, loop, renderer):
        signals = []
        for _ in range(7):
            loop.update()
            signals.append(loop.slots[loop.previous_index].signal)
            for i in range(3):
                unresolved = [s for s in signals if s.index == i and not s.is_resolved()]
                assert len(unresolved) <= 1

    def test_first_submission_gets_now_signal(self, loop, renderer):
        loop.update()
        assert isinstance(renderer.previous_seen[0], NowSignal)

    def test_previous_signal_is_handed_to_renderer(self, loop, renderer):
        loop.update()
        first = loop.slots[0].signal
        loop.update()
        assert renderer.previous_seen[1] is first

    def test_bookkeeping_after_submission(self, loop):
        loop.update()
        loop.update()
        assert loop.previous_index == 1
        assert loop.slots[1].signal is not None
        assert loop.state == LoopState.PRESENTED

    def test_wait_for_slot_reports_blocking(self, loop):
        assert not loop.wait_for_slot(0)
        loop.slots[0].signal = FakeSignal(0, [])
        assert loop.wait_for_slot(0)
        assert not loop.wait_for_slot(0)


class TestOutOfDate:

    def test_acquire_out_of_date_skips_submission(self, loop, renderer):
        renderer.acquire_results = [SurfaceOutOfDate('acquire')]
        assert not loop.update()
        assert loop.needs_rebuild
        assert renderer.submitted == []

    def test_next_cycle_rebuilds_before_acquiring(self, loop, renderer):
        renderer.acquire_results = [SurfaceOutOfDate('acquire')]
        loop.update()
        renderer.log.clear()

        assert loop.update()
        assert renderer.log[0] == ('recreate',)
        assert renderer.log[1][0] == 'acquire'
        assert not loop.needs_rebuild

    def test_repeated_out_of_date_keeps_flag(self, loop, renderer):
        renderer.acquire_results = [SurfaceOutOfDate('a'), SurfaceOutOfDate('b'), SurfaceOutOfDate('c')]
        for _ in range(3):
            assert not loop.update()
            assert loop.needs_rebuild
        assert renderer.submitted == []
        assert renderer.log.count(('recreate',)) == 2

    def test_suboptimal_acquire_still_submits(self, loop, renderer):
        renderer.acquire_results = [(0, True)]
        assert loop.update()
        assert loop.needs_rebuild
        assert renderer.submitted == [0]

    def test_present_out_of_date_clears_slot(self, loop, renderer):
        loop.update()
        renderer.flush_results = [SurfaceOutOfDate('present')]
        assert not loop.update()
        assert loop.slots[1].signal is None
        assert loop.previous_index == 1
        assert loop.needs_rebuild

    def test_previous_missing_after_present_failure_uses_now_signal(self, loop, renderer):
        renderer.flush_results = [SurfaceOutOfDate('present')]
        loop.update()
        loop.needs_rebuild = False
        loop.update()
        assert isinstance(renderer.previous_seen[1], NowSignal)


class TestRebuild:

    def test_resize_is_deferred_to_next_cycle(self, loop, renderer):
        loop.update()
        loop.handle_window_resize()
        assert ('resize',) not in renderer.log
        assert loop.window_resized

        renderer.log.clear()
        loop.update()
        assert renderer.log[0] == ('resize',)
        assert not loop.window_resized

    def test_resize_during_submission_does_not_interrupt_cycle(self, loop, renderer):
        flush = renderer.flush_next_future

        def flush_with_resize(previous, acquisition, index):
            loop.handle_window_resize()
            return flush(previous, acquisition, index)

        renderer.flush_next_future = flush_with_resize
        assert loop.update()
        assert ('resize',) not in renderer.log
        assert renderer.submitted == [0]
        assert loop.slots[0].signal is not None
        assert loop.window_resized

        renderer.flush_next_future = flush
        renderer.log.clear()
        assert loop.update()
        assert renderer.log[0] == ('resize',)
        assert renderer.log[1][0] == 'acquire'

    def test_resize_takes_precedence_over_out_of_date(self, loop, renderer):
        loop.needs_rebuild = True
        loop.handle_window_resize()
        loop.update()
        assert ('resize',) in renderer.log
        assert ('recreate',) not in renderer.log
        assert not loop.needs_rebuild

    def test_rebuild_resets_slots(self, loop, renderer):
        loop.update()
        loop.update()
        renderer.n_images = 4
        renderer.next_index = 0
        loop.handle_window_resize()
        loop.rebuild()
        assert len(loop.slots) == 4
        assert all(slot.signal is None for slot in loop.slots)
        assert loop.previous_index == 0
        assert loop.state == LoopState.IDLE


class TestFatalErrors:

    def test_acquire_error_propagates(self, loop, renderer):
        renderer.acquire_results = [RuntimeError('device lost')]
        with pytest.raises(RuntimeError):
            loop.update()

    def test_flush_error_propagates(self, loop, renderer):
        renderer.flush_results = [RuntimeError('device lost')]
        with pytest.raises(RuntimeError):
            loop.update()
        assert not loop.needs_rebuild


class TestAcquireRing:

    def test_cycles_through_items(self):
        ring = AcquireRing(object, 3)
        first = [ring.next() for _ in range(3)]
        assert len(set(map(id, first))) == 3
        assert ring.next() is first[0]

    def test_abandon_replaces_item(self):
        counter = iter(range(100))
        ring = AcquireRing(lambda: next(counter), 2)
        item = ring.next()
        replacement = ring.abandon(item)
        assert replacement == 2
        assert ring.items == [2, 1]
        assert ring.retired == [0]
        assert len(ring) == 2

    def test_abandoned_item_never_handed_out_again(self):
        ring = AcquireRing(object, 2)
        abandoned = ring.next()
        ring.abandon(abandoned)
        handed_out = [ring.next() for _ in range(6)]
        assert all(item is not abandoned for item in handed_out)
