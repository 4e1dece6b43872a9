import vulkan as vk


class CommandBuffer:

    @staticmethod
    def allocate(device, n, one_time=False):
        return [CommandBuffer(device, x, one_time=one_time) for x in vk.vkAllocateCommandBuffers(
            device._vk_device, vk.VkCommandBufferAllocateInfo(
                commandPool=device._vk_command_pool,
                level=vk.VK_COMMAND_BUFFER_LEVEL_PRIMARY,
                commandBufferCount=n
            )
        )]

    def __init__(self, device, command_buffer, one_time=False):
        self.device = device
        self.one_time = one_time
        self._vk_command_buffer = command_buffer

    def __enter__(self):
        flags = vk.VK_COMMAND_BUFFER_USAGE_ONE_TIME_SUBMIT_BIT if self.one_time else 0
        vk.vkBeginCommandBuffer(self._vk_command_buffer, vk.VkCommandBufferBeginInfo(flags=flags))
        return self

    def __exit__(self, exc_type=None, exc_value=None, traceback=None):
        vk.vkEndCommandBuffer(self._vk_command_buffer)

    def reset(self):
        vk.vkResetCommandBuffer(self._vk_command_buffer, 0)

    def copy_buffer(self, source, destination):
        size = min(source.size, destination.size)
        vk.vkCmdCopyBuffer(
            self._vk_command_buffer, source._vk_buffer, destination._vk_buffer,
            1, [vk.VkBufferCopy(srcOffset=0, dstOffset=0, size=size)]
        )

    def dispatch(self, x, y=1, z=1):
        vk.vkCmdDispatch(self._vk_command_buffer, x, y, z)

    def clear_color_image(self, image, color):
        image.transition_layout(self, vk.VK_IMAGE_LAYOUT_TRANSFER_DST_OPTIMAL)
        vk.vkCmdClearColorImage(
            self._vk_command_buffer, image._vk_image, image.layout,
            vk.VkClearColorValue(float32=list(color)),
            1, [vk.VkImageSubresourceRange(
                aspectMask=vk.VK_IMAGE_ASPECT_COLOR_BIT,
                baseMipLevel=0, levelCount=1,
                baseArrayLayer=0, layerCount=1
            )]
        )

    def copy_image_to_buffer(self, image, buffer):
        image.transition_layout(self, vk.VK_IMAGE_LAYOUT_TRANSFER_SRC_OPTIMAL)
        vk.vkCmdCopyImageToBuffer(
            self._vk_command_buffer, image._vk_image, image.layout, buffer._vk_buffer,
            1, [vk.VkBufferImageCopy(
                bufferOffset=0,
                bufferRowLength=0,
                bufferImageHeight=0,
                imageSubresource=vk.VkImageSubresourceLayers(
                    aspectMask=vk.VK_IMAGE_ASPECT_COLOR_BIT,
                    mipLevel=0, baseArrayLayer=0, layerCount=1
                ),
                imageOffset=vk.VkOffset3D(x=0, y=0, z=0),
                imageExtent=vk.VkExtent3D(width=image.width, height=image.height, depth=1)
            )]
        )

    def bind_vertex_buffer(self, buffer):
        vk.vkCmdBindVertexBuffers(self._vk_command_buffer, 0, 1, [buffer._vk_buffer], [0])

    def bind_index_buffer(self, buffer):
        vk.vkCmdBindIndexBuffer(self._vk_command_buffer, buffer._vk_buffer, 0, vk.VK_INDEX_TYPE_UINT16)

    def draw(self, vertex_count, instance_count=1):
        vk.vkCmdDraw(self._vk_command_buffer, vertex_count, instance_count, 0, 0)

    def draw_indexed(self, index_count, instance_count=1):
        vk.vkCmdDrawIndexed(self._vk_command_buffer, index_count, instance_count, 0, 0, 0)

    def push_constants(self, pipeline, data, stages=vk.VK_SHADER_STAGE_VERTEX_BIT | vk.VK_SHADER_STAGE_FRAGMENT_BIT):
        raw = data.tobytes()
        vk.vkCmdPushConstants(
            self._vk_command_buffer, pipeline._vk_pipeline_layout, stages, 0, len(raw), vk.ffi.from_buffer(raw)
        )

    def free(self):
        vk.vkFreeCommandBuffers(self.device._vk_device, self.device._vk_command_pool, 1, [self._vk_command_buffer])
