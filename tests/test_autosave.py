"""
Debounced autosave tests
"""
import asyncio

import pytest

from pdc_pro.client.autosave import DebouncedSaver

DELAY = 0.02


class Recorder:
    def __init__(self, slow=()):
        self.events = []
        self.writes = []
        self.slow = set(slow)

    async def __call__(self, state):
        self.events.append(('start', state))
        if state in self.slow:
            await asyncio.sleep(DELAY * 3)
        self.writes.append(state)
        self.events.append(('end', state))


async def settle(saver: DebouncedSaver):
    await asyncio.sleep(DELAY * 4)
    await saver.wait_idle()


@pytest.mark.asyncio
async def test_burst_of_edits_writes_latest_once():
    recorder = Recorder()
    saver = DebouncedSaver(recorder, delay=DELAY)

    for state in (1, 2, 3):
        saver.schedule(state)
    assert saver.pending

    await settle(saver)

    assert recorder.writes == [3]
    assert saver.saves == 1
    assert not saver.pending


@pytest.mark.asyncio
async def test_quiet_periods_produce_separate_writes():
    recorder = Recorder()
    saver = DebouncedSaver(recorder, delay=DELAY)

    saver.schedule('a')
    await settle(saver)
    saver.schedule('b')
    await settle(saver)

    assert recorder.writes == ['a', 'b']


@pytest.mark.asyncio
async def test_writes_never_overlap():
    recorder = Recorder(slow={1})
    saver = DebouncedSaver(recorder, delay=DELAY)

    saver.schedule(1)
    await asyncio.sleep(DELAY * 1.5)
    assert saver.writing
    saver.schedule(2)
    await settle(saver)
    await saver.wait_idle()

    assert recorder.events == [('start', 1), ('end', 1), ('start', 2), ('end', 2)]


@pytest.mark.asyncio
async def test_failures_are_swallowed():
    calls = []

    async def persist(state):
        calls.append(state)
        if state == 'bad':
            raise RuntimeError('network down')

    saver = DebouncedSaver(persist, delay=DELAY)

    saver.schedule('bad')
    await settle(saver)
    saver.schedule('good')
    await settle(saver)

    assert calls == ['bad', 'good']
    assert saver.failures == 1
    assert saver.saves == 1


@pytest.mark.asyncio
async def test_cancel_drops_pending_write():
    recorder = Recorder()
    saver = DebouncedSaver(recorder, delay=DELAY)

    saver.schedule(1)
    saver.cancel()
    await settle(saver)

    assert recorder.writes == []
    assert not saver.pending


@pytest.mark.asyncio
async def test_flush_writes_immediately():
    recorder = Recorder()
    saver = DebouncedSaver(recorder, delay=60)

    saver.schedule('draft')
    await saver.flush()

    assert recorder.writes == ['draft']
    assert not saver.pending
    assert not saver.writing


@pytest.mark.asyncio
async def test_spaced_edits_restart_the_quiet_period():
    loop = asyncio.get_running_loop()
    fired = []

    async def persist(state):
        fired.append((state, loop.time()))

    saver = DebouncedSaver(persist, delay=0.1)
    started = loop.time()

    saver.schedule('first')
    await asyncio.sleep(0.02)
    saver.schedule('second')
    await asyncio.sleep(0.02)
    saver.schedule('third')
    await asyncio.sleep(0.08)
    assert fired == []

    await asyncio.sleep(0.1)
    await saver.wait_idle()

    assert [state for state, _ in fired] == ['third']
    elapsed = fired[0][1] - started
    assert 0.13 <= elapsed < 0.25


@pytest.mark.asyncio
async def test_run_exclusive_orders_autosaves_after_it():
    events = []

    async def persist(state):
        events.append(('autosave', state))

    async def completion():
        events.append(('start', 'complete'))
        await asyncio.sleep(DELAY * 3)
        events.append(('end', 'complete'))
        return 'done'

    saver = DebouncedSaver(persist, delay=DELAY / 2)
    running = asyncio.create_task(saver.run_exclusive(completion))
    await asyncio.sleep(0)
    saver.schedule('edit')

    assert await running == 'done'
    await settle(saver)

    assert events == [('start', 'complete'), ('end', 'complete'), ('autosave', 'edit')]
