import argparse
import logging
from pathlib import Path

import numpy as np
import vulkan as vk

from vkguide.buffer import Buffer
from vkguide.command_buffer import CommandBuffer
from vkguide.device import Device
from vkguide.draw import GraphicsPipeline, RenderPass
from vkguide.export import save_png
from vkguide.image import Image
from vkguide.models import TRIANGLE
from vkguide.shaders import Shader
from vkguide.swapchain import make_viewport

SHADERS = Path(__file__).parent / 'shaders'
SIZE = 1024


def main(output='image.png'):
    device = Device(title='graphics pipeline')

    image = Image(device, SIZE, SIZE, usage=['color_attachment', 'transfer_src'])
    # the render pass leaves the image ready to be copied out
    render_pass = RenderPass(
        device, image.format, clear_color=(0.0, 0.0, 1.0, 1.0),
        final_layout=vk.VK_IMAGE_LAYOUT_TRANSFER_SRC_OPTIMAL
    )
    framebuffer = image.create_framebuffer(render_pass)

    vertex_shader = Shader(device, SHADERS / 'triangle.vert')
    fragment_shader = Shader(device, SHADERS / 'triangle.frag')
    pipeline = GraphicsPipeline(
        device, vertex_shader, fragment_shader, render_pass, make_viewport(image.extent),
        vertex_attributes=['vec2']
    )
    vertex_buffer = Buffer(device, TRIANGLE, usage='vertex')
    output_buffer = Buffer(device, np.zeros(image.nbytes, dtype=np.uint8), usage='transfer_dst')

    command_buffer, = CommandBuffer.allocate(device, 1, one_time=True)
    with command_buffer:
        with render_pass.start(command_buffer, framebuffer, image.extent):
            pipeline.bind(command_buffer)
            command_buffer.bind_vertex_buffer(vertex_buffer)
            command_buffer.draw(len(TRIANGLE))
        image.layout = vk.VK_IMAGE_LAYOUT_TRANSFER_SRC_OPTIMAL
        command_buffer.copy_image_to_buffer(image, output_buffer)
    device.submit_and_wait(command_buffer)

    save_png(output_buffer.read(), SIZE, SIZE, output)
    print('Everything succeeded!')

    command_buffer.free()
    output_buffer.destroy()
    vertex_buffer.destroy()
    pipeline.destroy()
    fragment_shader.destroy()
    vertex_shader.destroy()
    render_pass.destroy()
    image.destroy()
    device.destroy()


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--output', default='image.png')
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)
    main(args.output)
