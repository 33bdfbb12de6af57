from collections.abc import Callable
from datetime import datetime, timezone


StatusListener = Callable[[bool], None]


class UpstreamStatusMonitor:
    """Tracks whether the upstream places API is reachable.

    One instance lives on the application state; tests build their own.
    Listeners are told about transitions only, plus once on subscribe.
    """

    def __init__(self) -> None:
        self._listeners: list[StatusListener] = []
        self._online = True
        self._started = False
        self.last_changed: datetime | None = None

    @property
    def started(self) -> bool:
        return self._started

    @property
    def is_online(self) -> bool:
        return self._online

    def start(self, online: bool = True) -> None:
        self._online = online
        self._started = True
        self.last_changed = datetime.now(timezone.utc)

    def subscribe(self, listener: StatusListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)
        listener(self._online)

    def unsubscribe(self, listener: StatusListener) -> None:
        self._listeners = [item for item in self._listeners if item != listener]

    def report(self, online: bool) -> None:
        if not self._started:
            self.start(self._online)
        if online == self._online:
            return
        self._online = online
        self.last_changed = datetime.now(timezone.utc)
        for listener in list(self._listeners):
            listener(online)
