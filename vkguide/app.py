import logging

import vulkan as vk

from .device import DEVICE_TYPES, Device
from .draw import GraphicsPipeline, RenderPass
from .renderer import Renderer
from .shaders import Shader
from .sync import RenderLoop
from .window import Window

logger = logging.getLogger(__name__)


class App:
    """Window, device and present loop for the tutorial programs.

    Subclass it, create vertex buffers and the like in ``__init__`` after
    calling ``super().__init__``, and override :meth:`draw`.
    """

    def __init__(
                self, title='vkguide', size=(800, 600), n_images=3, version=(1, 1, 0),
                device_preference=DEVICE_TYPES,
                surface_format=vk.VK_FORMAT_B8G8R8A8_UNORM, color_space=vk.VK_COLOR_SPACE_SRGB_NONLINEAR_KHR,
                validation=False, clear_color=(0.0, 0.0, 1.0, 1.0),
                vertex_shader=None, fragment_shader=None, vertex_attributes=None, push_constant_size=0,
                record_every_frame=False
            ):
        self.title = title
        self.frame_count = 0
        self.vertex_attributes = vertex_attributes or []
        self.push_constant_size = push_constant_size

        self.window = Window(title, size)
        self.device = Device(
            self.window, title=title, version=version,
            device_preference=device_preference, validation=validation
        )
        self.render_pass = RenderPass(self.device, surface_format, clear_color)
        self.shaders = [Shader(self.device, path) for path in (vertex_shader, fragment_shader) if path is not None]

        self.renderer = Renderer(
            self.device, self.window, self.render_pass, self.record,
            create_pipeline=self.create_pipeline if len(self.shaders) == 2 else None,
            n_images=n_images, surface_format=surface_format, color_space=color_space,
            record_every_frame=record_every_frame
        )
        self.render_loop = RenderLoop(self.renderer)

    @property
    def pipeline(self):
        return self.renderer.bundle.pipeline

    def create_pipeline(self, render_pass, viewport):
        vertex_shader, fragment_shader = self.shaders
        return GraphicsPipeline(
            self.device, vertex_shader, fragment_shader, render_pass, viewport,
            vertex_attributes=self.vertex_attributes, push_constant_size=self.push_constant_size
        )

    def record(self, command_buffer, image_i, bundle):
        with self.render_pass.start(command_buffer, bundle.framebuffers[image_i], bundle.extent):
            if bundle.pipeline is not None:
                bundle.pipeline.bind(command_buffer)
            self.draw(command_buffer, image_i)

    def draw(self, command_buffer, image_i):
        raise NotImplementedError()

    def main_loop(self):
        pass

    def release(self):
        """Destroy resources created by the subclass. Runs after the device is idle."""

    def run(self):
        self.renderer.record_all()
        try:
            while not self.window.should_close():
                self.window.poll_events()
                if self.window.take_resized():
                    self.render_loop.handle_window_resize()
                self.main_loop()
                if self.render_loop.update():
                    self.frame_count += 1
        finally:
            self.destroy()

    def destroy(self):
        logger.info('Shutting down after %d frames', self.frame_count)
        # nothing may be destroyed while the queue still uses it
        self.device.wait_idle()
        self.release()
        self.renderer.destroy()
        for shader in self.shaders:
            shader.destroy()
        self.render_pass.destroy()
        self.device.destroy()
        self.window.destroy()
