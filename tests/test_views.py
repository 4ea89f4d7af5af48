"""Tests for view switching."""

import asyncio

from diskscope.views import ViewMode, ViewSwitcher


class FakeHandle:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    def __init__(self):
        self.handles = []

    def __call__(self, delay, callback):
        handle = FakeHandle(callback)
        self.handles.append(handle)
        return handle

    def fire_live(self):
        for handle in self.handles:
            if not handle.cancelled:
                handle.callback()


PROJECTORS = {mode: (lambda mode=mode: mode.value) for mode in ViewMode}


class TestViewSwitcher:
    def test_default_mode(self):
        switcher = ViewSwitcher(scheduler=FakeScheduler())
        assert switcher.mode is ViewMode.TREEMAP
        assert switcher.render(PROJECTORS) == "treemap"

    def test_switch_hides_render_until_commit(self):
        scheduler = FakeScheduler()
        switcher = ViewSwitcher(scheduler=scheduler)
        switcher.set_view_mode(ViewMode.SUNBURST)
        assert switcher.switching
        assert switcher.render(PROJECTORS) is None
        scheduler.fire_live()
        assert not switcher.switching
        assert switcher.mode is ViewMode.SUNBURST
        assert switcher.render(PROJECTORS) == "sunburst"

    def test_rapid_switches_commit_once(self):
        scheduler = FakeScheduler()
        commits = []
        switcher = ViewSwitcher(scheduler=scheduler, on_commit=commits.append)
        switcher.set_view_mode(ViewMode.SUNBURST)
        switcher.set_view_mode(ViewMode.BARCHART)
        switcher.set_view_mode(ViewMode.LIST)
        assert [handle.cancelled for handle in scheduler.handles] == [True, True, False]
        scheduler.fire_live()
        assert commits == [ViewMode.LIST]
        assert switcher.mode is ViewMode.LIST

    def test_no_projector_runs_while_switching(self):
        scheduler = FakeScheduler()
        calls = []
        projectors = {mode: (lambda mode=mode: calls.append(mode)) for mode in ViewMode}
        switcher = ViewSwitcher(scheduler=scheduler)
        switcher.set_view_mode(ViewMode.LIST)
        assert switcher.render(projectors) is None
        assert calls == []
        scheduler.fire_live()
        switcher.render(projectors)
        assert calls == [ViewMode.LIST]

    def test_same_mode_is_noop(self):
        scheduler = FakeScheduler()
        switcher = ViewSwitcher(scheduler=scheduler)
        switcher.set_view_mode(ViewMode.TREEMAP)
        assert not switcher.switching
        assert scheduler.handles == []

    def test_back_to_current_mode_while_switching(self):
        scheduler = FakeScheduler()
        switcher = ViewSwitcher(scheduler=scheduler)
        switcher.set_view_mode(ViewMode.LIST)
        switcher.set_view_mode(ViewMode.TREEMAP)
        scheduler.fire_live()
        assert switcher.mode is ViewMode.TREEMAP
        assert not switcher.switching

    def test_accepts_string_mode(self):
        scheduler = FakeScheduler()
        switcher = ViewSwitcher(scheduler=scheduler)
        switcher.set_view_mode("barchart")
        scheduler.fire_live()
        assert switcher.mode is ViewMode.BARCHART

    def test_loop_scheduler(self):
        commits = []

        async def scenario():
            switcher = ViewSwitcher(delay=0.01, on_commit=commits.append)
            switcher.set_view_mode(ViewMode.SUNBURST)
            assert switcher.render(PROJECTORS) is None
            await asyncio.sleep(0.05)
            return switcher.render(PROJECTORS)

        assert asyncio.run(scenario()) == "sunburst"
        assert commits == [ViewMode.SUNBURST]
