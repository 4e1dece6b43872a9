"""Frame synchronization for the present loop.

One :class:`FrameSlot` exists per swapchain image. Each slot remembers the
completion signal of the last submission that rendered into its image, and
that signal is waited on before the image's command buffer is submitted again.
The loop itself never blocks on the previous frame; the previous frame's
signal is only handed to the renderer so the new submission is ordered after
it.
"""
import enum
import logging
from abc import ABC, abstractmethod
from collections import namedtuple

from .errors import SurfaceOutOfDate

logger = logging.getLogger(__name__)


Acquisition = namedtuple('Acquisition', ['index', 'suboptimal', 'signal'])
Acquisition.__doc__ = """Result of acquiring a presentable image.

``signal`` is whatever the renderer needs to order the submission after the
acquisition (a semaphore for Vulkan); the loop never inspects it.
"""


class CompletionSignal(ABC):

    @abstractmethod
    def wait(self, timeout=None):
        """Block until the device has finished the work behind this signal."""

    @abstractmethod
    def is_resolved(self) -> bool:
        ...


class NowSignal(CompletionSignal):
    """Signal that is satisfied from the start, used before any submission."""

    def wait(self, timeout=None):
        pass

    def is_resolved(self):
        return True

    def __repr__(self):
        return 'NowSignal()'


class FrameRenderer(ABC):
    """What the render loop needs from the graphics side."""

    @property
    @abstractmethod
    def image_count(self) -> int:
        ...

    @abstractmethod
    def acquire_next_image(self) -> Acquisition:
        """Raises SurfaceOutOfDate when the swapchain must be rebuilt."""

    @abstractmethod
    def synchronize(self) -> CompletionSignal:
        ...

    @abstractmethod
    def flush_next_future(self, previous: CompletionSignal, acquisition: Acquisition, image_i: int) -> CompletionSignal:
        """Submit the command buffer for ``image_i`` after ``previous`` and the
        acquisition, present it, and return the signal of the submission.

        Raises SurfaceOutOfDate when presentation finds the swapchain out of date.
        """

    @abstractmethod
    def recreate_swapchain(self):
        ...

    @abstractmethod
    def handle_window_resize(self):
        ...


class FrameSlot:

    __slots__ = ('signal',)

    def __init__(self, signal=None):
        self.signal = signal

    @property
    def in_flight(self):
        return self.signal is not None and not self.signal.is_resolved()

    def __repr__(self):
        return f'FrameSlot(signal={self.signal!r})'


class AcquireRing:
    """Round-robin pool of the signals handed to image acquisition.

    An item whose acquisition was abandoned may still be signalled by the
    presentation engine, so :meth:`abandon` swaps in a fresh item and keeps the
    old one in ``retired`` until the swapchain that owns it is gone.
    """

    def __init__(self, factory, size):
        self.factory = factory
        self.items = [factory() for _ in range(size)]
        self.retired = []
        self.next_i = 0

    def __len__(self):
        return len(self.items)

    def next(self):
        item = self.items[self.next_i]
        self.next_i = (self.next_i + 1) % len(self.items)
        return item

    def abandon(self, item):
        i = self.items.index(item)
        self.items[i] = self.factory()
        self.retired.append(item)
        return self.items[i]


class LoopState(enum.Enum):
    IDLE = 'idle'
    REBUILDING = 'rebuilding'
    ACQUIRING = 'acquiring'
    WAITING_ON_SLOT = 'waiting_on_slot'
    SUBMITTING = 'submitting'
    PRESENTED = 'presented'


class RenderLoop:

    def __init__(self, renderer: FrameRenderer):
        self.renderer = renderer
        self.slots = [FrameSlot() for _ in range(renderer.image_count)]
        self.previous_index = 0
        self.needs_rebuild = False
        self.window_resized = False
        self.state = LoopState.IDLE

    def handle_window_resize(self):
        # picked up at the start of the next update
        self.window_resized = True

    def update(self):
        """Run one frame. Returns True if the frame was submitted and presented."""
        if self.window_resized or self.needs_rebuild:
            self.rebuild()

        acquisition = self.acquire_next_image()
        if acquisition is None:
            return False

        self.wait_for_slot(acquisition.index)
        return self.submit_and_present(acquisition.index, acquisition) is not None

    def rebuild(self):
        self.state = LoopState.REBUILDING
        if self.window_resized:
            logger.info('Window resized, rebuilding swapchain and pipeline')
            self.window_resized = False
            self.needs_rebuild = False
            self.renderer.handle_window_resize()
        else:
            logger.info('Rebuilding swapchain')
            self.needs_rebuild = False
            self.renderer.recreate_swapchain()

        # the renderer drained the device and dropped the old bundle's signals
        self.slots = [FrameSlot() for _ in range(self.renderer.image_count)]
        self.previous_index = 0
        self.state = LoopState.IDLE

    def acquire_next_image(self):
        self.state = LoopState.ACQUIRING
        try:
            acquisition = self.renderer.acquire_next_image()
        except SurfaceOutOfDate:
            logger.info('Swapchain out of date on acquire, skipping frame')
            self.needs_rebuild = True
            self.state = LoopState.IDLE
            return None

        if acquisition.suboptimal:
            logger.info('Swapchain suboptimal, rebuilding on next frame')
            self.needs_rebuild = True
        return acquisition

    def wait_for_slot(self, image_i):
        """Block until the slot's last submission is done. Returns True if it blocked."""
        self.state = LoopState.WAITING_ON_SLOT
        slot = self.slots[image_i]
        if not slot.in_flight:
            return False
        slot.signal.wait()
        return True

    def submit_and_present(self, image_i, acquisition):
        self.state = LoopState.SUBMITTING
        previous = self.slots[self.previous_index].signal
        if previous is None:
            previous = self.renderer.synchronize()

        try:
            signal = self.renderer.flush_next_future(previous, acquisition, image_i)
        except SurfaceOutOfDate:
            logger.info('Swapchain out of date on present')
            self.needs_rebuild = True
            signal = None

        self.slots[image_i].signal = signal
        self.previous_index = image_i
        self.state = LoopState.PRESENTED
        return signal
