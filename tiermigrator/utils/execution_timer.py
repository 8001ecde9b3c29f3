from contextlib import ContextDecorator
import time


def format_elapsed(seconds: float) -> str:
    """Render a duration as HH:MM:SS; hours are not wrapped at 24."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class ExecutionTimer(ContextDecorator):
    def __enter__(self):
        self.start_time = time.monotonic()
        self.execution_time = 0.0
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.execution_time = time.monotonic() - self.start_time

