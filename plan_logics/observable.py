class Observable:
    """
    Minimal publish/subscribe helper.

    Subscribers are plain callables invoked synchronously, in subscription
    order, with whatever arguments notify() receives.
    """

    def __init__(self):
        self._subscribers = []

    def subscribe(self, callback):
        """Register callback; returns a function that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def notify(self, *args, **kwargs):
        for callback in list(self._subscribers):
            callback(*args, **kwargs)

    @property
    def subscriber_count(self):
        return len(self._subscribers)
