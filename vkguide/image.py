import vulkan as vk

# access mask and pipeline stage that the last use in each layout implies
LAYOUT_USAGE = {
    vk.VK_IMAGE_LAYOUT_UNDEFINED: (0, vk.VK_PIPELINE_STAGE_TOP_OF_PIPE_BIT),
    vk.VK_IMAGE_LAYOUT_GENERAL: (
        vk.VK_ACCESS_SHADER_READ_BIT | vk.VK_ACCESS_SHADER_WRITE_BIT, vk.VK_PIPELINE_STAGE_COMPUTE_SHADER_BIT
    ),
    vk.VK_IMAGE_LAYOUT_TRANSFER_DST_OPTIMAL: (vk.VK_ACCESS_TRANSFER_WRITE_BIT, vk.VK_PIPELINE_STAGE_TRANSFER_BIT),
    vk.VK_IMAGE_LAYOUT_TRANSFER_SRC_OPTIMAL: (vk.VK_ACCESS_TRANSFER_READ_BIT, vk.VK_PIPELINE_STAGE_TRANSFER_BIT),
    vk.VK_IMAGE_LAYOUT_COLOR_ATTACHMENT_OPTIMAL: (
        vk.VK_ACCESS_COLOR_ATTACHMENT_WRITE_BIT, vk.VK_PIPELINE_STAGE_COLOR_ATTACHMENT_OUTPUT_BIT
    ),
    vk.VK_IMAGE_LAYOUT_SHADER_READ_ONLY_OPTIMAL: (vk.VK_ACCESS_SHADER_READ_BIT, vk.VK_PIPELINE_STAGE_FRAGMENT_SHADER_BIT),
}

COLOR_RANGE = vk.VkImageSubresourceRange(
    aspectMask=vk.VK_IMAGE_ASPECT_COLOR_BIT,
    baseMipLevel=0, levelCount=1,
    baseArrayLayer=0, layerCount=1
)


def image_usage(usage):
    """Fold names like 'storage' or ['color_attachment', 'transfer_src'] into Vulkan flags."""
    if isinstance(usage, str):
        usage = [usage]
    flags = 0
    for name in usage:
        flags |= getattr(vk, f'VK_IMAGE_USAGE_{name.upper()}_BIT')
    return flags


class Image:
    """Device-local 2D image with one view.

    ``layout`` is the layout the image will be in once the commands recorded so
    far have run; :meth:`transition_layout` records a barrier from it.
    """

    def __init__(self, device, width, height, format=vk.VK_FORMAT_R8G8B8A8_UNORM, usage=('transfer_src',)):
        self.device = device
        self.width = width
        self.height = height
        self.format = format
        self.usage = image_usage(usage)
        self.layout = vk.VK_IMAGE_LAYOUT_UNDEFINED
        self.extent = vk.VkExtent2D(width=width, height=height)

        self._vk_image = vk.vkCreateImage(
            self.device._vk_device,
            vk.VkImageCreateInfo(
                imageType=vk.VK_IMAGE_TYPE_2D,
                extent=vk.VkExtent3D(width=width, height=height, depth=1),
                mipLevels=1,
                arrayLayers=1,
                format=format,
                tiling=vk.VK_IMAGE_TILING_OPTIMAL,
                initialLayout=vk.VK_IMAGE_LAYOUT_UNDEFINED,
                usage=self.usage,
                sharingMode=vk.VK_SHARING_MODE_EXCLUSIVE,
                samples=vk.VK_SAMPLE_COUNT_1_BIT,
            ),
            None
        )
        mem_req = vk.vkGetImageMemoryRequirements(self.device._vk_device, self._vk_image)
        self._vk_memory = vk.vkAllocateMemory(
            self.device._vk_device,
            vk.VkMemoryAllocateInfo(
                allocationSize=mem_req.size,
                memoryTypeIndex=self.device.memory_type_index(
                    mem_req.memoryTypeBits, vk.VK_MEMORY_PROPERTY_DEVICE_LOCAL_BIT
                )
            ),
            None
        )
        vk.vkBindImageMemory(self.device._vk_device, self._vk_image, self._vk_memory, 0)

        self._vk_image_view = vk.vkCreateImageView(
            device=self.device._vk_device,
            pCreateInfo=vk.VkImageViewCreateInfo(
                image=self._vk_image,
                viewType=vk.VK_IMAGE_VIEW_TYPE_2D,
                format=format,
                subresourceRange=COLOR_RANGE
            ),
            pAllocator=None
        )
        self._vk_framebuffers = []

    @property
    def nbytes(self):
        # every format the tutorial uses is 4 bytes per pixel
        return self.width * self.height * 4

    def create_framebuffer(self, render_pass):
        framebuffer = vk.vkCreateFramebuffer(
            self.device._vk_device, vk.VkFramebufferCreateInfo(
                renderPass=render_pass._vk_render_pass,
                attachmentCount=1,
                pAttachments=[self._vk_image_view],
                width=self.width,
                height=self.height,
                layers=1
            ), None
        )
        self._vk_framebuffers.append(framebuffer)
        return framebuffer

    def transition_layout(self, command_buffer, new_layout):
        if new_layout == self.layout:
            return
        src_access, src_stage = LAYOUT_USAGE[self.layout]
        dst_access, dst_stage = LAYOUT_USAGE[new_layout]
        barrier = vk.VkImageMemoryBarrier(
            srcAccessMask=src_access,
            dstAccessMask=dst_access,
            oldLayout=self.layout,
            newLayout=new_layout,
            srcQueueFamilyIndex=vk.VK_QUEUE_FAMILY_IGNORED,
            dstQueueFamilyIndex=vk.VK_QUEUE_FAMILY_IGNORED,
            image=self._vk_image,
            subresourceRange=COLOR_RANGE
        )
        vk.vkCmdPipelineBarrier(
            command_buffer._vk_command_buffer,
            src_stage, dst_stage,
            0, 0, None, 0, None, 1, [barrier]
        )
        self.layout = new_layout

    def get_write_descriptor(self, vk_descriptor_set, binding, descriptor_type):
        # storage images are read and written in the GENERAL layout
        return vk.VkWriteDescriptorSet(
            dstSet=vk_descriptor_set,
            dstBinding=binding,
            dstArrayElement=0,
            descriptorType=descriptor_type,
            descriptorCount=1,
            pImageInfo=[vk.VkDescriptorImageInfo(
                imageView=self._vk_image_view,
                imageLayout=vk.VK_IMAGE_LAYOUT_GENERAL
            )]
        )

    def destroy(self):
        for framebuffer in self._vk_framebuffers:
            vk.vkDestroyFramebuffer(self.device._vk_device, framebuffer, None)
        vk.vkDestroyImageView(self.device._vk_device, self._vk_image_view, None)
        vk.vkDestroyImage(self.device._vk_device, self._vk_image, None)
        vk.vkFreeMemory(self.device._vk_device, self._vk_memory, None)
