import logging

import numpy as np

from vkguide.buffer import Buffer
from vkguide.command_buffer import CommandBuffer
from vkguide.device import Device


def main():
    device = Device(title='buffer creation')

    source = Buffer(device, np.arange(64, dtype=np.int32), usage='transfer_src')
    destination = Buffer(device, np.zeros(64, dtype=np.int32), usage='transfer_dst')

    command_buffer, = CommandBuffer.allocate(device, 1, one_time=True)
    with command_buffer:
        command_buffer.copy_buffer(source, destination)
    device.submit_and_wait(command_buffer)

    assert np.array_equal(source.read(), destination.read())
    print('Everything succeeded!')

    command_buffer.free()
    source.destroy()
    destination.destroy()
    device.destroy()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    main()
