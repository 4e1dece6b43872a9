import vulkan as vk

DESCRIPTOR_TYPES = {
    'storage': vk.VK_DESCRIPTOR_TYPE_STORAGE_BUFFER,
    'uniform': vk.VK_DESCRIPTOR_TYPE_UNIFORM_BUFFER,
    'storage_image': vk.VK_DESCRIPTOR_TYPE_STORAGE_IMAGE,
}


class DescriptorSet:
    """A single descriptor set of buffer and storage image bindings, numbered in the order they are added."""

    def __init__(self, device):
        self.device = device
        self.objects = []
        self._vk_layouts = []

    def add(self, obj, kind='storage', stages=vk.VK_SHADER_STAGE_COMPUTE_BIT):
        binding = len(self.objects)
        self._vk_layouts.append(vk.VkDescriptorSetLayoutBinding(
            binding=binding,
            descriptorType=DESCRIPTOR_TYPES[kind],
            descriptorCount=1,
            stageFlags=stages,
        ))
        self.objects.append((obj, DESCRIPTOR_TYPES[kind]))

    def create(self):
        self._vk_descriptor_set_layout = vk.vkCreateDescriptorSetLayout(
            self.device._vk_device,
            vk.VkDescriptorSetLayoutCreateInfo(
                bindingCount=len(self._vk_layouts),
                pBindings=self._vk_layouts
            ),
            None
        )

        counts = {}
        for _, descriptor_type in self.objects:
            counts[descriptor_type] = counts.get(descriptor_type, 0) + 1
        pool_sizes = [vk.VkDescriptorPoolSize(type=t, descriptorCount=n) for t, n in counts.items()]
        self._vk_descriptor_pool = vk.vkCreateDescriptorPool(
            self.device._vk_device,
            vk.VkDescriptorPoolCreateInfo(
                maxSets=1,
                poolSizeCount=len(pool_sizes),
                pPoolSizes=pool_sizes
            ),
            None
        )
        self._vk_descriptor_set = vk.vkAllocateDescriptorSets(
            self.device._vk_device,
            vk.VkDescriptorSetAllocateInfo(
                descriptorPool=self._vk_descriptor_pool,
                descriptorSetCount=1,
                pSetLayouts=[self._vk_descriptor_set_layout]
            )
        )[0]
        self.update()

    def update(self):
        _vk_writes = [
            obj.get_write_descriptor(self._vk_descriptor_set, i_binding, descriptor_type)
            for i_binding, (obj, descriptor_type) in enumerate(self.objects)
        ]
        vk.vkUpdateDescriptorSets(self.device._vk_device, len(_vk_writes), _vk_writes, 0, None)

    def bind(self, command_buffer, pipeline, bind_point=vk.VK_PIPELINE_BIND_POINT_COMPUTE, first_set=0):
        vk.vkCmdBindDescriptorSets(
            command_buffer._vk_command_buffer,
            bind_point,
            pipeline._vk_pipeline_layout,
            first_set,
            1, [self._vk_descriptor_set],
            0, None
        )

    def destroy(self):
        vk.vkDestroyDescriptorPool(self.device._vk_device, self._vk_descriptor_pool, None)
        vk.vkDestroyDescriptorSetLayout(self.device._vk_device, self._vk_descriptor_set_layout, None)
