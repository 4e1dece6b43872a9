import logging
from pathlib import Path

import numpy as np

from vkguide.buffer import Buffer
from vkguide.command_buffer import CommandBuffer
from vkguide.descriptor import DescriptorSet
from vkguide.device import Device
from vkguide.draw import ComputePipeline
from vkguide.shaders import Shader

SHADERS = Path(__file__).parent / 'shaders'
N = 65536
LOCAL_SIZE = 64


def main():
    device = Device(title='compute pipeline')

    data = Buffer(device, np.arange(N, dtype=np.uint32), usage='storage')
    descriptor_set = DescriptorSet(device)
    descriptor_set.add(data, 'storage')
    descriptor_set.create()

    shader = Shader(device, SHADERS / 'multiply.comp')
    pipeline = ComputePipeline(device, shader, [descriptor_set])

    command_buffer, = CommandBuffer.allocate(device, 1, one_time=True)
    with command_buffer:
        pipeline.bind(command_buffer)
        command_buffer.dispatch(N // LOCAL_SIZE)
    device.submit_and_wait(command_buffer)

    result = data.read()
    assert np.array_equal(result, np.arange(N, dtype=np.uint32) * 12)
    print('Everything succeeded!')

    command_buffer.free()
    pipeline.destroy()
    shader.destroy()
    descriptor_set.destroy()
    data.destroy()
    device.destroy()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    main()
