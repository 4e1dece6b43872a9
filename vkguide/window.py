import glfw
import vulkan as vk

from .errors import DeviceSetupError


class Window:

    def __init__(self, title='vkguide', size=(800, 600), resizable=True):
        if not glfw.init():
            raise DeviceSetupError('Failed to initialize glfw')
        glfw.window_hint(glfw.CLIENT_API, glfw.NO_API)
        glfw.window_hint(glfw.RESIZABLE, glfw.TRUE if resizable else glfw.FALSE)
        self.title = title
        self.resized = False
        self._glfw_window = glfw.create_window(*size, title, None, None)
        glfw.set_framebuffer_size_callback(self._glfw_window, self.framebuffer_resize_callback)
        self.key_callbacks = []
        glfw.set_key_callback(self._glfw_window, self.key_callback)

    def framebuffer_resize_callback(self, window, width, height):
        self.resized = True

    def key_callback(self, window, key, scancode, action, mods):
        for callback in self.key_callbacks:
            callback(key, action)

    def take_resized(self):
        resized, self.resized = self.resized, False
        return resized

    def required_extensions(self):
        return list(glfw.get_required_instance_extensions())

    def create_surface(self, vk_instance):
        surface = vk.ffi.new('VkSurfaceKHR *')
        glfw.create_window_surface(vk_instance, self._glfw_window, None, surface)
        return surface[0]

    def framebuffer_size(self):
        return glfw.get_framebuffer_size(self._glfw_window)

    def wait_while_minimized(self):
        w, h = self.framebuffer_size()
        while w == 0 or h == 0:
            glfw.wait_events()
            w, h = self.framebuffer_size()
        return w, h

    def should_close(self):
        return glfw.window_should_close(self._glfw_window)

    def poll_events(self):
        glfw.poll_events()

    def set_title(self, title):
        glfw.set_window_title(self._glfw_window, title)

    def destroy(self):
        glfw.destroy_window(self._glfw_window)
        glfw.terminate()
