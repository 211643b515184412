from typing import Any, Callable

from formlet.exceptions import global_error_handler

# Global state for reactive system
_current_effect = None
_trackable = False
_batch_updates_active = False
_batch_updates_queue = []
_global_error_handler = global_error_handler


def set_global_error_handler(handler: Callable[..., None]):
    """Sets the handler receiving ``(error, description)`` for exceptions raised inside effects."""
    global _global_error_handler
    _global_error_handler = handler


def batch_updates(fn):
    """Runs ``fn`` and applies every signal write it made once it returns.

    Subscribers see the final values only, so an effect depending on two
    signals set inside the batch runs once per signal instead of once per write.
    """
    global _batch_updates_active
    prev_state = _batch_updates_active
    _batch_updates_active = True
    try:
        return fn()
    finally:
        _batch_updates_active = prev_state
        if not _batch_updates_active:
            queue_to_process = list(_batch_updates_queue)
            _batch_updates_queue.clear()
            latest = {}
            for signal, new_value in queue_to_process:
                latest[signal] = new_value
            for signal, new_value in latest.items():
                signal._set_value_internal(new_value)


class Signal:
    __slots__ = ('_subscribers', '_value', '__weakref__')

    def __init__(self, initial_value: Any):
        self._subscribers = set()
        self._value = initial_value

    def __call__(self) -> Any:
        if _trackable and _current_effect is not None:
            self._subscribers.add(_current_effect)
            _current_effect.dependencies.add(self)
        return self._value

    get = __call__

    def peek(self):
        return self._value

    def set(self, new_value: Any) -> None:
        queue_update(self, new_value)

    def _set_value_internal(self, new_value):
        if self._value == new_value:
            return
        self._value = new_value

        for subscriber in list(self._subscribers):
            try:
                subscriber.notify()
            except Exception as e:
                _global_error_handler(e, f"Error notifying subscriber: {subscriber}")


def create_signal(initial_value: Any):
    signal = Signal(initial_value)
    return signal, signal.set


def queue_update(signal, new_value):
    if _batch_updates_active:
        _batch_updates_queue.append((signal, new_value))
    else:
        signal._set_value_internal(new_value)


class Effect:
    __slots__ = ('fn', 'dependencies', 'is_running', 'disposed', 'dirty',
                 '_error_count', '_max_errors', '__weakref__')

    def __init__(self, fn: Callable[[], Any]):
        self.fn = fn
        self.dependencies: set = set()
        self.is_running = False
        self.disposed = False
        self.dirty = False
        self._error_count = 0
        self._max_errors = 5  # Maximum number of errors before stopping

    def notify(self):
        # A write made during the effect's own run is picked up by one more pass
        self.dirty = True
        if not self.is_running:
            self.run()

    def run(self):
        if self.disposed or self.is_running:
            return
        if self._error_count >= self._max_errors:
            raise RuntimeError(f"Effect has exceeded maximum error count ({self._max_errors}). Stopping execution.")

        global _current_effect, _trackable
        self.is_running = True
        prev_effect = _current_effect
        prev_trackable = _trackable

        try:
            while True:
                self.dirty = False
                self._cleanup()
                _current_effect = self
                _trackable = True
                try:
                    self.fn()
                    self._error_count = 0
                except Exception as e:
                    self._error_count += 1
                    _global_error_handler(e, "Error running effect")
                if not self.dirty or self.disposed or self._error_count >= self._max_errors:
                    break
        finally:
            _trackable = prev_trackable
            _current_effect = prev_effect
            self.is_running = False

    def _cleanup(self):
        for signal in list(self.dependencies):
            signal._subscribers.discard(self)
        self.dependencies.clear()

    def dispose(self):
        if self.disposed:
            return
        self.disposed = True
        self._cleanup()


def create_effect(fn: Callable[[], Any]) -> Effect:
    effect = Effect(fn)
    effect.run()
    return effect


def untrack(fn: Callable[[], Any]) -> Any:
    global _trackable
    if not callable(fn):
        raise TypeError(f"untrack: expected callable, got {type(fn).__name__}")
    prev_tracking = _trackable
    _trackable = False
    try:
        return fn()
    finally:
        _trackable = prev_tracking
