import logging

import vulkan as vk

from .command_buffer import CommandBuffer
from .frame import Fence, Semaphore
from .sync import AcquireRing

logger = logging.getLogger(__name__)

PRESENT_MODES = ['immediate', 'mailbox', 'fifo']


class SwapchainBundle:
    """Everything that has to be thrown away when the swapchain goes out of date.

    A bundle is built in one go by :func:`build_bundle` and released in one go
    by :meth:`destroy`. The renderer swaps whole bundles and never patches a
    live one.
    """

    def __init__(self, device, swapchain, images, image_views, framebuffers, extent, viewport,
                 pipeline, command_buffers, fences, render_finished, image_available, present_mode):
        self.device = device
        self._vk_swapchain = swapchain
        self.images = images
        self.image_views = image_views
        self.framebuffers = framebuffers
        self.extent = extent
        self.viewport = viewport
        self.pipeline = pipeline
        self.command_buffers = command_buffers
        self.fences = fences
        self.render_finished = render_finished
        self.image_available = image_available
        self.present_mode = present_mode

    @property
    def image_count(self):
        return len(self.images)

    def next_image_available(self):
        return self.image_available.next()

    def abandon_image_available(self, semaphore):
        """Stop using a semaphore whose acquired image will never be submitted."""
        return self.image_available.abandon(semaphore)

    def destroy(self):
        for x in self.fences + self.render_finished + self.image_available.items:
            x.destroy()
        for command_buffer in self.command_buffers:
            command_buffer.free()
        if self.pipeline is not None:
            self.pipeline.destroy()
        for framebuffer in self.framebuffers:
            vk.vkDestroyFramebuffer(self.device._vk_device, framebuffer, None)
        for view in self.image_views:
            vk.vkDestroyImageView(self.device._vk_device, view, None)
        vk.vkGetDeviceProcAddr(self.device._vk_device, 'vkDestroySwapchainKHR')(
            self.device._vk_device, self._vk_swapchain, None
        )
        # destroying the swapchain releases the abandoned images and their pending signals
        for x in self.image_available.retired:
            x.destroy()


def choose_extent(capabilities, width, height):
    if capabilities.currentExtent.width != 0xFFFFFFFF:
        return vk.VkExtent2D(width=capabilities.currentExtent.width, height=capabilities.currentExtent.height)
    return vk.VkExtent2D(
        width=max(min(width, capabilities.maxImageExtent.width), capabilities.minImageExtent.width),
        height=max(min(height, capabilities.maxImageExtent.height), capabilities.minImageExtent.height)
    )


def choose_present_mode(supported, preference=PRESENT_MODES):
    for name in preference:
        mode = getattr(vk, f'VK_PRESENT_MODE_{name.upper()}_KHR')
        if mode in supported:
            return mode
    # FIFO is the one mode every implementation has to support
    return vk.VK_PRESENT_MODE_FIFO_KHR


def choose_image_count(capabilities, n_images):
    n_images = max(n_images, capabilities.minImageCount)
    if capabilities.maxImageCount:
        n_images = min(n_images, capabilities.maxImageCount)
    return n_images


def make_viewport(extent):
    return vk.VkViewport(
        x=0.0, y=0.0, width=float(extent.width), height=float(extent.height),
        minDepth=0.0, maxDepth=1.0
    )


def build_bundle(
            device, window, render_pass, n_images=3, surface_format=vk.VK_FORMAT_B8G8R8A8_UNORM,
            color_space=vk.VK_COLOR_SPACE_SRGB_NONLINEAR_KHR, create_pipeline=None, old_bundle=None,
            viewport=None, present_modes=PRESENT_MODES, composite_alpha='opaque'
        ):
    """Create a swapchain and every object that depends on it.

    ``create_pipeline(render_pass, viewport)`` builds the viewport-dependent
    pipeline. Pass ``viewport`` to keep an existing one, otherwise it covers the
    new extent. ``old_bundle`` is handed to the driver as ``oldSwapchain`` and is
    left for the caller to destroy.
    """
    capabilities = device.surface_capabilities()
    extent = choose_extent(capabilities, *window.framebuffer_size())
    present_mode = choose_present_mode(device.surface_present_modes(), present_modes)
    min_image_count = choose_image_count(capabilities, n_images)

    if device.graphics_queue_family_i == device.present_queue_family_i:
        image_sharing_mode = vk.VK_SHARING_MODE_EXCLUSIVE
        queue_family_indices = None
    else:
        image_sharing_mode = vk.VK_SHARING_MODE_CONCURRENT
        queue_family_indices = [device.graphics_queue_family_i, device.present_queue_family_i]

    swapchain = vk.vkGetDeviceProcAddr(device._vk_device, 'vkCreateSwapchainKHR')(
        device._vk_device, vk.VkSwapchainCreateInfoKHR(
            surface=device._vk_surface,
            minImageCount=min_image_count,
            imageFormat=surface_format,
            imageColorSpace=color_space,
            imageExtent=extent,
            imageArrayLayers=1,
            imageUsage=vk.VK_IMAGE_USAGE_COLOR_ATTACHMENT_BIT,
            imageSharingMode=image_sharing_mode,
            queueFamilyIndexCount=len(queue_family_indices or []),
            pQueueFamilyIndices=queue_family_indices,
            preTransform=capabilities.currentTransform,
            compositeAlpha=getattr(vk, f'VK_COMPOSITE_ALPHA_{composite_alpha.upper()}_BIT_KHR'),
            presentMode=present_mode,
            clipped=vk.VK_TRUE,
            oldSwapchain=old_bundle._vk_swapchain if old_bundle is not None else vk.VK_NULL_HANDLE
        ), None
    )
    images = vk.vkGetDeviceProcAddr(device._vk_device, 'vkGetSwapchainImagesKHR')(device._vk_device, swapchain)

    image_views = [vk.vkCreateImageView(
        device=device._vk_device,
        pCreateInfo=vk.VkImageViewCreateInfo(
            image=image,
            viewType=vk.VK_IMAGE_VIEW_TYPE_2D,
            format=surface_format,
            subresourceRange=vk.VkImageSubresourceRange(
                aspectMask=vk.VK_IMAGE_ASPECT_COLOR_BIT,
                baseMipLevel=0, levelCount=1,
                baseArrayLayer=0, layerCount=1
            )
        ),
        pAllocator=None
    ) for image in images]

    framebuffers = [vk.vkCreateFramebuffer(
        device._vk_device, vk.VkFramebufferCreateInfo(
            renderPass=render_pass._vk_render_pass,
            attachmentCount=1,
            pAttachments=[view],
            width=extent.width,
            height=extent.height,
            layers=1
        ), None
    ) for view in image_views]

    viewport = viewport or make_viewport(extent)
    pipeline = create_pipeline(render_pass, viewport) if create_pipeline is not None else None

    bundle = SwapchainBundle(
        device, swapchain, images, image_views, framebuffers, extent, viewport, pipeline,
        command_buffers=CommandBuffer.allocate(device, len(images)),
        # signaled so the first reset-and-submit on each image doesn't need a special case
        fences=[Fence(device, signaled=True) for _ in images],
        render_finished=[Semaphore(device) for _ in images],
        image_available=AcquireRing(lambda: Semaphore(device), len(images) + 1),
        present_mode=present_mode
    )
    logger.info(
        'Created swapchain %dx%d with %d images, present mode %d',
        extent.width, extent.height, bundle.image_count, present_mode
    )
    return bundle
