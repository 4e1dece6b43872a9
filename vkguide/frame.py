import vulkan as vk

from .sync import CompletionSignal

NO_TIMEOUT = 0xFFFFFFFFFFFFFFFF


class Semaphore:

    def __init__(self, device):
        self.device = device
        self._vk_semaphore = vk.vkCreateSemaphore(self.device._vk_device, vk.VkSemaphoreCreateInfo(), None)

    def destroy(self):
        if self._vk_semaphore:
            vk.vkDestroySemaphore(self.device._vk_device, self._vk_semaphore, None)
            self._vk_semaphore = None


class Fence(CompletionSignal):

    def __init__(self, device, signaled=False):
        self.device = device
        flags = vk.VK_FENCE_CREATE_SIGNALED_BIT if signaled else 0
        self._vk_fence = vk.vkCreateFence(self.device._vk_device, vk.VkFenceCreateInfo(flags=flags), None)

    def wait(self, timeout=None):
        vk.vkWaitForFences(
            self.device._vk_device,
            fenceCount=1,
            pFences=[self._vk_fence],
            waitAll=vk.VK_TRUE,
            timeout=NO_TIMEOUT if timeout is None else timeout
        )

    def is_resolved(self):
        try:
            vk.vkGetFenceStatus(self.device._vk_device, self._vk_fence)
        except vk.VkNotReady:
            return False
        return True

    def reset(self):
        vk.vkResetFences(self.device._vk_device, fenceCount=1, pFences=[self._vk_fence])

    def destroy(self):
        if self._vk_fence:
            vk.vkDestroyFence(self.device._vk_device, self._vk_fence, None)
            self._vk_fence = None
