"""
Tile animation lookup.

`AnimationClock` answers frames from a shared elapsed time;
`AnimationStateManager` keeps per-instance cursors instead.
"""

from .clock import AnimationClock, GlobalClock, check_sequence, current_frame
from .manager import AnimationCursor, AnimationStateManager

__all__ = [
    'AnimationClock',
    'GlobalClock',
    'check_sequence',
    'current_frame',
    'AnimationCursor',
    'AnimationStateManager',
]
