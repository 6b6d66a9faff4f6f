"""Test helper modules.

- fake_pages_api: In-memory pages API that records calls
- manual_timer: Timers fired explicitly by tests
"""

from .fake_pages_api import FakePagesAPI
from .manual_timer import ManualTimer, ManualTimerFactory

__all__ = [
    'FakePagesAPI',
    'ManualTimer',
    'ManualTimerFactory',
]
