import logging

import vulkan as vk

from .errors import DeviceSetupError
from .frame import Fence

logger = logging.getLogger(__name__)
validation_logger = logging.getLogger('vkguide.validation')

DEVICE_TYPES = ['discrete_gpu', 'integrated_gpu', 'virtual_gpu', 'cpu']
VALIDATION_LAYER = 'VK_LAYER_KHRONOS_validation'


class Device:
    """Instance, physical device, logical device and queue.

    Pass a :class:`~vkguide.window.Window` to get a presentation surface and a
    queue that can present to it; leave it out for headless compute work.
    """

    def __init__(
                self, window=None, title='vkguide', version=(1, 1, 0),
                device_preference=DEVICE_TYPES, validation=False
            ):
        self.window = window
        self.title = title
        self.version = vk.VK_MAKE_VERSION(*version)
        self.device_preference = device_preference
        self.validation = validation
        self._vk_surface = None
        self._vk_debug_callback = None

        self.create_instance()
        if self.window is not None:
            self._vk_surface = self.window.create_surface(self._vk_instance)
        self.select_physical_device()
        self.find_queue_families()
        self.create_device()

    def create_instance(self):
        app_info = vk.VkApplicationInfo(
            pApplicationName=self.title,
            applicationVersion=self.version,
            pEngineName='vkguide',
            engineVersion=self.version,
            apiVersion=self.version
        )

        extensions = self.window.required_extensions() if self.window is not None else []
        layers = []
        if self.validation:
            extensions.append(vk.VK_EXT_DEBUG_REPORT_EXTENSION_NAME)
            layers.append(VALIDATION_LAYER)

        supported_extensions = [e.extensionName for e in vk.vkEnumerateInstanceExtensionProperties(None)]
        for e in extensions:
            if e not in supported_extensions:
                raise DeviceSetupError(f'Extension {e} is not supported')
        supported_layers = [l.layerName for l in vk.vkEnumerateInstanceLayerProperties()]
        for l in layers:
            if l not in supported_layers:
                raise DeviceSetupError(f'Layer {l} is not supported')
        self.enabled_layers = layers

        self._vk_instance = vk.vkCreateInstance(
            vk.VkInstanceCreateInfo(
                pApplicationInfo=app_info,
                enabledLayerCount=len(layers),
                ppEnabledLayerNames=layers,
                enabledExtensionCount=len(extensions),
                ppEnabledExtensionNames=extensions
            ), None
        )

        if self.validation:
            creation_function = vk.vkGetInstanceProcAddr(self._vk_instance, 'vkCreateDebugReportCallbackEXT')
            self._vk_debug_callback = creation_function(self._vk_instance, vk.VkDebugReportCallbackCreateInfoEXT(
                flags=vk.VK_DEBUG_REPORT_ERROR_BIT_EXT | vk.VK_DEBUG_REPORT_WARNING_BIT_EXT | vk.VK_DEBUG_REPORT_PERFORMANCE_WARNING_BIT_EXT,
                pfnCallback=debug_callback
            ), None)

    def select_physical_device(self):
        available_devices = vk.vkEnumeratePhysicalDevices(self._vk_instance)
        possible_types = {x: getattr(vk, f'VK_PHYSICAL_DEVICE_TYPE_{x.upper()}') for x in DEVICE_TYPES}
        self._vk_physical_device = None
        for device_type in self.device_preference:
            for d in available_devices:
                if vk.vkGetPhysicalDeviceProperties(d).deviceType == possible_types[device_type]:
                    self._vk_physical_device = d
                    break
            if self._vk_physical_device is not None:
                break
        if self._vk_physical_device is None:
            raise DeviceSetupError('No suitable device found')

        self.properties = vk.vkGetPhysicalDeviceProperties(self._vk_physical_device)
        logger.info('Using device %s', self.properties.deviceName)

    def find_queue_families(self):
        queue_families = vk.vkGetPhysicalDeviceQueueFamilyProperties(self._vk_physical_device)
        self.graphics_queue_family_i = None
        self.present_queue_family_i = None
        for i, q in enumerate(queue_families):
            if self.graphics_queue_family_i is None and q.queueFlags & vk.VK_QUEUE_GRAPHICS_BIT:
                self.graphics_queue_family_i = i
            if self._vk_surface is not None and self.present_queue_family_i is None and vk.vkGetInstanceProcAddr(
                        self._vk_instance, 'vkGetPhysicalDeviceSurfaceSupportKHR'
                    )(self._vk_physical_device, i, self._vk_surface):
                self.present_queue_family_i = i
        if self.graphics_queue_family_i is None:
            raise DeviceSetupError("Couldn't find a graphical queue family")
        if self._vk_surface is not None and self.present_queue_family_i is None:
            raise DeviceSetupError("Couldn't find a queue family that can present to the surface")

    def create_device(self):
        unique_queue_i = sorted({
            i for i in (self.graphics_queue_family_i, self.present_queue_family_i) if i is not None
        })
        queue_create_info = [vk.VkDeviceQueueCreateInfo(
            queueFamilyIndex=fam,
            queueCount=1,
            pQueuePriorities=[1.0]
        ) for fam in unique_queue_i]
        device_extensions = [vk.VK_KHR_SWAPCHAIN_EXTENSION_NAME] if self._vk_surface is not None else []

        self._vk_device = vk.vkCreateDevice(
            self._vk_physical_device,
            vk.VkDeviceCreateInfo(
                queueCreateInfoCount=len(queue_create_info),
                pQueueCreateInfos=queue_create_info,
                enabledExtensionCount=len(device_extensions),
                ppEnabledExtensionNames=device_extensions,
                pEnabledFeatures=vk.VkPhysicalDeviceFeatures(),
                enabledLayerCount=len(self.enabled_layers),
                ppEnabledLayerNames=self.enabled_layers
            ),
            None
        )

        self._vk_queue = vk.vkGetDeviceQueue(self._vk_device, self.graphics_queue_family_i, 0)
        if self.present_queue_family_i is not None:
            self._vk_present_queue = vk.vkGetDeviceQueue(self._vk_device, self.present_queue_family_i, 0)
        else:
            self._vk_present_queue = None
        self._vk_command_pool = vk.vkCreateCommandPool(
            self._vk_device, vk.VkCommandPoolCreateInfo(
                queueFamilyIndex=self.graphics_queue_family_i,
                flags=vk.VK_COMMAND_POOL_CREATE_RESET_COMMAND_BUFFER_BIT
            ), None
        )

    def memory_type_index(self, type_bits, properties):
        mem_props = vk.vkGetPhysicalDeviceMemoryProperties(self._vk_physical_device)
        for i in range(mem_props.memoryTypeCount):
            if (type_bits & (1 << i)) and ((mem_props.memoryTypes[i].propertyFlags & properties) == properties):
                return i
        raise DeviceSetupError(f'No memory type with properties {properties:#x}')

    def surface_capabilities(self):
        return vk.vkGetInstanceProcAddr(
            self._vk_instance, 'vkGetPhysicalDeviceSurfaceCapabilitiesKHR'
        )(self._vk_physical_device, self._vk_surface)

    def surface_present_modes(self):
        return vk.vkGetInstanceProcAddr(
            self._vk_instance, 'vkGetPhysicalDeviceSurfacePresentModesKHR'
        )(self._vk_physical_device, self._vk_surface)

    def submit_and_wait(self, command_buffer):
        """Submit one command buffer and block until the device has executed it."""
        fence = Fence(self)
        try:
            vk.vkQueueSubmit(self._vk_queue, 1, [vk.VkSubmitInfo(
                commandBufferCount=1, pCommandBuffers=[command_buffer._vk_command_buffer]
            )], fence._vk_fence)
            fence.wait()
        finally:
            fence.destroy()

    def wait_idle(self):
        vk.vkDeviceWaitIdle(self._vk_device)

    def destroy(self):
        vk.vkDestroyCommandPool(self._vk_device, self._vk_command_pool, None)
        vk.vkDestroyDevice(self._vk_device, None)
        if self._vk_surface is not None:
            vk.vkGetInstanceProcAddr(self._vk_instance, 'vkDestroySurfaceKHR')(self._vk_instance, self._vk_surface, None)
        if self._vk_debug_callback is not None:
            vk.vkGetInstanceProcAddr(self._vk_instance, 'vkDestroyDebugReportCallbackEXT')(
                self._vk_instance, self._vk_debug_callback, None
            )
        vk.vkDestroyInstance(self._vk_instance, None)


def debug_callback(*args):
    flags, message = args[0], args[6]
    if flags & vk.VK_DEBUG_REPORT_ERROR_BIT_EXT:
        level = logging.ERROR
    elif flags & (vk.VK_DEBUG_REPORT_WARNING_BIT_EXT | vk.VK_DEBUG_REPORT_PERFORMANCE_WARNING_BIT_EXT):
        level = logging.WARNING
    else:
        level = logging.DEBUG
    # args[5] is the layer prefix
    validation_logger.log(level, '%s: %s', args[5], message)
    return 0
