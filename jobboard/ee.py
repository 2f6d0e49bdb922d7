import logging

logger = logging.getLogger(__name__)


class EventEmitter:
    def __init__(self):
        self._listeners = {}

    def on(self, event, handler):
        logger.debug("on('%s') -> %s", event, handler)
        self._listeners.setdefault(event, []).append(handler)

    def off(self, event, handler):
        logger.debug("off('%s') -> %s", event, handler)
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event, *args, **kwargs):
        # Copy so a handler may unsubscribe itself while being called.
        for handler in list(self._listeners.get(event, [])):
            logger.debug("emitting '%s' -> %s", event, handler)
            handler(*args, **kwargs)

    def listener_count(self, event):
        return len(self._listeners.get(event, []))

__all__ = ["EventEmitter"]
