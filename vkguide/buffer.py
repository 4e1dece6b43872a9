import vulkan as vk
import numpy as np


class Buffer:
    """Host-visible buffer whose contents mirror a numpy array."""

    def __init__(self, device, data: np.ndarray, usage='vertex'):
        self.device = device
        self.dtype = data.dtype
        self.count = len(data)
        self.size = data.nbytes
        self.usage = buffer_usage(usage)
        self._vk_buffer = vk.vkCreateBuffer(
            self.device._vk_device,
            vk.VkBufferCreateInfo(
                size=self.size,
                usage=self.usage,
                sharingMode=vk.VK_SHARING_MODE_EXCLUSIVE
            ),
            None
        )
        self.memory_req = vk.vkGetBufferMemoryRequirements(self.device._vk_device, self._vk_buffer)
        self.memory_type_index = self.device.memory_type_index(
            self.memory_req.memoryTypeBits,
            vk.VK_MEMORY_PROPERTY_HOST_VISIBLE_BIT | vk.VK_MEMORY_PROPERTY_HOST_COHERENT_BIT
        )
        self._vk_memory = vk.vkAllocateMemory(
            self.device._vk_device,
            vk.VkMemoryAllocateInfo(
                allocationSize=self.memory_req.size,
                memoryTypeIndex=self.memory_type_index
            ),
            None
        )
        vk.vkBindBufferMemory(self.device._vk_device, self._vk_buffer, self._vk_memory, 0)
        self.write(data)

    def write(self, data):
        data = np.ascontiguousarray(data, dtype=self.dtype)
        mem_ptr = vk.vkMapMemory(self.device._vk_device, self._vk_memory, 0, self.size, 0)
        vk.ffi.memmove(mem_ptr, data.tobytes(), min(data.nbytes, self.size))
        vk.vkUnmapMemory(self.device._vk_device, self._vk_memory)

    def read(self, dtype=None, count=None):
        dtype = np.dtype(dtype or self.dtype)
        count = self.size // dtype.itemsize if count is None else count
        nbytes = min(count * dtype.itemsize, self.size)
        mem_ptr = vk.vkMapMemory(self.device._vk_device, self._vk_memory, 0, self.size, 0)
        data = np.frombuffer(bytes(mem_ptr[0:nbytes]), dtype=dtype).copy()
        vk.vkUnmapMemory(self.device._vk_device, self._vk_memory)
        return data

    def get_write_descriptor(self, vk_descriptor_set, binding, descriptor_type):
        return vk.VkWriteDescriptorSet(
            dstSet=vk_descriptor_set,
            dstBinding=binding,
            dstArrayElement=0,
            descriptorType=descriptor_type,
            descriptorCount=1,
            pBufferInfo=[vk.VkDescriptorBufferInfo(buffer=self._vk_buffer, offset=0, range=self.size)]
        )

    def destroy(self):
        vk.vkDestroyBuffer(self.device._vk_device, self._vk_buffer, None)
        vk.vkFreeMemory(self.device._vk_device, self._vk_memory, None)


def buffer_usage(usage):
    """Fold usage names like 'vertex' or ['storage', 'transfer_src'] into Vulkan flags."""
    if isinstance(usage, str):
        usage = [usage]
    flags = 0
    for name in usage:
        name = name.upper()
        if not name.startswith('TRANSFER'):
            name = f'{name}_BUFFER'
        flags |= getattr(vk, f'VK_BUFFER_USAGE_{name}_BIT')
    return flags
