from __future__ import annotations

import threading
from typing import Any, Callable

from kivy.clock import Clock


def run_in_thread(
    fn: Callable[[], Any],
    on_done: Callable[[Any], None] | None = None,
    on_error: Callable[[Exception], None] | None = None,
) -> threading.Thread:
    """Run ``fn`` on a daemon thread; deliver its result or error on the Kivy main loop."""

    def _runner():
        try:
            result = fn()
        except Exception as e:  # noqa: BLE001
            if on_error:
                Clock.schedule_once(lambda *_, err=e: on_error(err), 0)
            return
        if on_done:
            Clock.schedule_once(lambda *_: on_done(result), 0)

    t = threading.Thread(target=_runner, daemon=True)
    t.start()
    return t
