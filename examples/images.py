import logging
from pathlib import Path

import numpy as np
import vulkan as vk

from vkguide.buffer import Buffer
from vkguide.command_buffer import CommandBuffer
from vkguide.descriptor import DescriptorSet
from vkguide.device import Device
from vkguide.draw import ComputePipeline
from vkguide.export import save_png
from vkguide.image import Image
from vkguide.selection import select_example
from vkguide.shaders import Shader

SHADERS = Path(__file__).parent / 'shaders'
SIZE = 1024
LOCAL_SIZE = 8


def image_clear(output='image.png'):
    device = Device(title='image clear')
    image = Image(device, SIZE, SIZE, usage=['transfer_dst', 'transfer_src'])
    output_buffer = Buffer(device, np.zeros(image.nbytes, dtype=np.uint8), usage='transfer_dst')

    command_buffer, = CommandBuffer.allocate(device, 1, one_time=True)
    with command_buffer:
        command_buffer.clear_color_image(image, (0.0, 0.0, 1.0, 1.0))
        command_buffer.copy_image_to_buffer(image, output_buffer)
    device.submit_and_wait(command_buffer)

    pixels = output_buffer.read()
    assert np.all(pixels.reshape(-1, 4) == (0, 0, 255, 255))
    save_png(pixels, SIZE, SIZE, output)
    print('Everything succeeded!')

    command_buffer.free()
    output_buffer.destroy()
    image.destroy()
    device.destroy()


def mandelbrot(output='image.png'):
    device = Device(title='mandelbrot')
    image = Image(device, SIZE, SIZE, usage=['storage', 'transfer_src'])
    output_buffer = Buffer(device, np.zeros(image.nbytes, dtype=np.uint8), usage='transfer_dst')

    descriptor_set = DescriptorSet(device)
    descriptor_set.add(image, 'storage_image')
    descriptor_set.create()
    shader = Shader(device, SHADERS / 'mandelbrot.comp')
    pipeline = ComputePipeline(device, shader, [descriptor_set])

    command_buffer, = CommandBuffer.allocate(device, 1, one_time=True)
    with command_buffer:
        image.transition_layout(command_buffer, vk.VK_IMAGE_LAYOUT_GENERAL)
        pipeline.bind(command_buffer)
        command_buffer.dispatch(SIZE // LOCAL_SIZE, SIZE // LOCAL_SIZE)
        command_buffer.copy_image_to_buffer(image, output_buffer)
    device.submit_and_wait(command_buffer)

    save_png(output_buffer.read(), SIZE, SIZE, output)
    print('Everything succeeded!')

    command_buffer.free()
    pipeline.destroy()
    shader.destroy()
    descriptor_set.destroy()
    output_buffer.destroy()
    image.destroy()
    device.destroy()


EXAMPLES = {'image_clear': image_clear, 'mandelbrot': mandelbrot}


def execute(name):
    print(f"Running '{name}'")
    EXAMPLES[name]()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    select_example(list(EXAMPLES), execute)
