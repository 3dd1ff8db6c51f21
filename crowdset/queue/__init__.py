"""Live DJ queue"""

from crowdset.queue.live_queue import LiveQueue

__all__ = ["LiveQueue"]
