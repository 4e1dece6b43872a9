__all__ = [
    'VkGuideError', 'SurfaceOutOfDate', 'DeviceSetupError', 'ShaderCompileError', 'PageNotFound',
    'Acquisition', 'CompletionSignal', 'NowSignal', 'FrameRenderer', 'FrameSlot', 'AcquireRing', 'LoopState', 'RenderLoop',
    'Square', 'Keys', 'KeyState', 'update_movement',
    'Vertex2d', 'Vertex3d', 'SquareModel', 'TRIANGLE',
    'select_example'
]

# the vulkan and glfw backed modules (app, device, renderer, ...) are imported
# by name so that this package loads without a Vulkan loader
from .errors import VkGuideError, SurfaceOutOfDate, DeviceSetupError, ShaderCompileError, PageNotFound
from .sync import Acquisition, CompletionSignal, NowSignal, FrameRenderer, FrameSlot, AcquireRing, LoopState, RenderLoop
from .game_objects import Square, Keys, KeyState, update_movement
from .models import Vertex2d, Vertex3d, SquareModel, TRIANGLE
from .selection import select_example
