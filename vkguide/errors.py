class VkGuideError(Exception):
    pass


class SurfaceOutOfDate(VkGuideError):
    """The surface no longer matches the swapchain; rebuild and skip the frame."""


class DeviceSetupError(VkGuideError):
    pass


class ShaderCompileError(VkGuideError):

    def __init__(self, message, stage=None, stderr=None):
        super().__init__(message)
        self.stage = stage
        self.stderr = stderr


class PageNotFound(VkGuideError):

    def __init__(self, name):
        super().__init__(f'No content for page {name!r}')
        self.name = name
