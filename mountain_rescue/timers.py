class PeriodicTimer:
    """Frame counter that fires once every `interval` frames until cancelled."""

    def __init__(self, interval):
        if interval < 1:
            raise ValueError(f"interval must be at least one frame, got {interval}")
        self.interval = interval
        self.elapsed = 0
        self.active = True

    def advance(self, frames=1):
        """Move the timer forward and return how many times it fired."""
        if not self.active:
            return 0
        self.elapsed += frames
        fired, self.elapsed = divmod(self.elapsed, self.interval)
        return fired

    def cancel(self):
        self.active = False
        self.elapsed = 0

    def __repr__(self):
        state = "active" if self.active else "cancelled"
        return f"PeriodicTimer(interval={self.interval}, elapsed={self.elapsed}, {state})"
