"""Engine for the zoo: the session facade and its threaded runner."""

from .runner import ZooRunner
from .zoo import ZooEngine

__all__ = [
    "ZooEngine",
    "ZooRunner",
]
