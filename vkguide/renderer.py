import logging

import vulkan as vk

from .errors import SurfaceOutOfDate
from .frame import NO_TIMEOUT
from .swapchain import build_bundle
from .sync import Acquisition, FrameRenderer, NowSignal

logger = logging.getLogger(__name__)


class Renderer(FrameRenderer):
    """Vulkan side of the present loop.

    Owns the current :class:`~vkguide.swapchain.SwapchainBundle` and replaces it
    wholesale on rebuild. ``record(command_buffer, image_i, bundle)`` fills one
    image's command buffer. The owner calls :meth:`record_all` once its draw
    resources exist; after that recording runs for every image after each
    rebuild, and right before each submission when ``record_every_frame`` is set.
    """

    def __init__(
                self, device, window, render_pass, record, create_pipeline=None, n_images=3,
                surface_format=vk.VK_FORMAT_B8G8R8A8_UNORM, color_space=vk.VK_COLOR_SPACE_SRGB_NONLINEAR_KHR,
                record_every_frame=False
            ):
        self.device = device
        self.window = window
        self.render_pass = render_pass
        self.record = record
        self.create_pipeline = create_pipeline
        self.n_images = n_images
        self.surface_format = surface_format
        self.color_space = color_space
        self.record_every_frame = record_every_frame
        self.bundle = None
        self.bundle = self.build()

    @property
    def image_count(self):
        return self.bundle.image_count

    def build(self, viewport=None):
        return build_bundle(
            self.device, self.window, self.render_pass,
            n_images=self.n_images,
            surface_format=self.surface_format,
            color_space=self.color_space,
            create_pipeline=self.create_pipeline,
            old_bundle=self.bundle,
            viewport=viewport
        )

    def record_all(self):
        for image_i in range(self.bundle.image_count):
            self.record_image(image_i)

    def record_image(self, image_i):
        command_buffer = self.bundle.command_buffers[image_i]
        command_buffer.reset()
        with command_buffer:
            self.record(command_buffer, image_i, self.bundle)

    def acquire_next_image(self):
        semaphore = self.bundle.next_image_available()
        try:
            image_i = vk.vkGetDeviceProcAddr(self.device._vk_device, 'vkAcquireNextImageKHR')(
                self.device._vk_device, self.bundle._vk_swapchain, NO_TIMEOUT,
                semaphore._vk_semaphore, vk.VK_NULL_HANDLE
            )
        except vk.VkErrorOutOfDateKhr as e:
            raise SurfaceOutOfDate('acquire: VkErrorOutOfDateKhr') from e
        except vk.VkSuboptimalKhr as e:
            # the image was acquired but the binding drops its index, so it is
            # abandoned; its semaphore will still be signalled and can't be reused
            self.bundle.abandon_image_available(semaphore)
            raise SurfaceOutOfDate('acquire: VkSuboptimalKhr') from e
        return Acquisition(image_i, False, semaphore)

    def synchronize(self):
        return NowSignal()

    def flush_next_future(self, previous, acquisition, image_i):
        # one queue, so submission order already puts this frame after ``previous``
        if self.record_every_frame:
            self.record_image(image_i)

        fence = self.bundle.fences[image_i]
        render_finished = self.bundle.render_finished[image_i]
        fence.reset()
        vk.vkQueueSubmit(self.device._vk_queue, 1, [vk.VkSubmitInfo(
            waitSemaphoreCount=1, pWaitSemaphores=[acquisition.signal._vk_semaphore],
            pWaitDstStageMask=[vk.VK_PIPELINE_STAGE_COLOR_ATTACHMENT_OUTPUT_BIT],
            commandBufferCount=1, pCommandBuffers=[self.bundle.command_buffers[image_i]._vk_command_buffer],
            signalSemaphoreCount=1, pSignalSemaphores=[render_finished._vk_semaphore]
        )], fence._vk_fence)

        try:
            vk.vkGetDeviceProcAddr(self.device._vk_device, 'vkQueuePresentKHR')(
                self.device._vk_present_queue, vk.VkPresentInfoKHR(
                    waitSemaphoreCount=1, pWaitSemaphores=[render_finished._vk_semaphore],
                    swapchainCount=1, pSwapchains=[self.bundle._vk_swapchain],
                    pImageIndices=[image_i]
                )
            )
        except (vk.VkErrorOutOfDateKhr, vk.VkSuboptimalKhr) as e:
            raise SurfaceOutOfDate(f'present: {e.__class__.__name__}') from e
        return fence

    def recreate_swapchain(self):
        self.replace_bundle(viewport=self.bundle.viewport)

    def handle_window_resize(self):
        self.replace_bundle()

    def replace_bundle(self, viewport=None):
        w, h = self.window.wait_while_minimized()
        logger.info('Rebuilding swapchain for framebuffer %dx%d', w, h)
        self.device.wait_idle()
        old_bundle = self.bundle
        new_bundle = self.build(viewport)
        old_bundle.destroy()
        self.bundle = new_bundle
        self.record_all()

    def destroy(self):
        if self.bundle is not None:
            self.bundle.destroy()
            self.bundle = None
