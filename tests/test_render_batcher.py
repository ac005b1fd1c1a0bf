"""
Tests for render request coalescing.
"""

import asyncio
from unittest.mock import Mock

import pytest

from src.chart.render_batcher import RenderBatcher


class FakeScheduler:
    """Collects scheduled callbacks so tests decide when the tick ends."""

    def __init__(self):
        self.callbacks = []
        self.handles = []

    def __call__(self, callback):
        self.callbacks.append(callback)
        handle = Mock()
        self.handles.append(handle)
        return handle

    def run_all(self):
        callbacks, self.callbacks = self.callbacks, []
        for callback in callbacks:
            callback()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def on_render():
    return Mock()


@pytest.fixture
def batcher(scheduler, on_render):
    b = RenderBatcher(scheduler)
    b.set_on_render(on_render)
    return b


class TestCoalescing:

    def test_many_requests_one_render(self, batcher, scheduler, on_render):
        for _ in range(5):
            batcher.request_render()

        assert len(scheduler.callbacks) == 1
        scheduler.run_all()

        on_render.assert_called_once()
        assert batcher.requests == 5
        assert batcher.renders == 1
        assert not batcher.is_pending

    def test_request_after_render_schedules_again(self, batcher, scheduler, on_render):
        batcher.request_render()
        scheduler.run_all()
        batcher.request_render()
        scheduler.run_all()
        assert on_render.call_count == 2

    def test_flush_runs_now_and_cancels_handle(self, batcher, scheduler, on_render):
        batcher.request_render()
        assert batcher.flush()

        on_render.assert_called_once()
        scheduler.handles[0].cancel.assert_called_once()
        # the stale callback is a no-op once the render ran
        scheduler.run_all()
        on_render.assert_called_once()

    def test_flush_without_request(self, batcher, on_render):
        assert not batcher.flush()
        on_render.assert_not_called()

    def test_without_loop_waits_for_flush(self, on_render):
        batcher = RenderBatcher()
        batcher.set_on_render(on_render)
        batcher.request_render()
        batcher.request_render()

        on_render.assert_not_called()
        assert batcher.is_pending
        batcher.flush()
        on_render.assert_called_once()

    def test_asyncio_loop_runs_once_per_tick(self, on_render):
        batcher = RenderBatcher()
        batcher.set_on_render(on_render)

        async def burst():
            for _ in range(10):
                batcher.request_render()
            await asyncio.sleep(0)

        asyncio.run(burst())

        assert batcher.renders == 1
        on_render.assert_called_once()


class TestTeardown:

    def test_cancel_drops_pending(self, batcher, scheduler, on_render):
        batcher.request_render()
        batcher.cancel()
        scheduler.run_all()

        on_render.assert_not_called()
        assert not batcher.is_pending

    def test_destroy_ignores_later_requests(self, batcher, scheduler, on_render):
        batcher.destroy()
        batcher.request_render()

        assert scheduler.callbacks == []
        assert batcher.requests == 0
        on_render.assert_not_called()
