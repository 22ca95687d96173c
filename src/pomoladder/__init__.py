"""pomoladder: an escalating Pomodoro ladder timer."""

__version__ = "0.1.0"
