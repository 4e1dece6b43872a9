import argparse
import logging
from pathlib import Path

import glfw
import glm
import numpy as np

from vkguide.app import App
from vkguide.buffer import Buffer
from vkguide.game_objects import Keys, Square, update_movement
from vkguide.models import SquareModel

SHADERS = Path(__file__).parent / 'shaders'
KEY_NAMES = {glfw.KEY_A: 'a', glfw.KEY_W: 'w', glfw.KEY_S: 's', glfw.KEY_D: 'd', glfw.KEY_SPACE: 'space'}
PUSH_CONSTANTS = np.dtype([('transform', np.float32, (16,)), ('color', np.float32, (4,))])


class MovableSquareApp(App):

    def __init__(self, validation=False):
        super().__init__(
            'movable square', validation=validation, clear_color=(0.0, 0.0, 0.0, 1.0),
            vertex_shader=SHADERS / 'square.vert', fragment_shader=SHADERS / 'square.frag',
            vertex_attributes=['vec2'], push_constant_size=PUSH_CONSTANTS.itemsize,
            record_every_frame=True
        )
        print('Welcome to the movable square example!')
        print('Press WASD to move and SPACE to change color')

        self.square = Square()
        self.keys = Keys()
        self.window.key_callbacks.append(self.handle_key)
        self.vertex_buffer = Buffer(self.device, SquareModel.get_vertices(), usage='vertex')
        self.index_buffer = Buffer(self.device, SquareModel.get_indices(), usage='index')
        self.push_data = np.zeros(1, dtype=PUSH_CONSTANTS)
        self.last_time = glfw.get_time()
        self.last_count = 0

    def handle_key(self, key, action):
        name = KEY_NAMES.get(key)
        if name is None or action == glfw.REPEAT:
            return
        if action == glfw.PRESS:
            if self.keys.press(name) and name == 'space':
                self.square.change_to_random_color()
        else:
            self.keys.release(name)

    def main_loop(self):
        t = glfw.get_time()
        update_movement(self.square, self.keys, t - self.last_time)
        self.last_time = t

        x, y = self.square.position
        transform = glm.translate(glm.mat4(1.0), glm.vec3(x, y, 0.0))
        self.push_data['transform'] = np.array(transform, dtype=np.float32).reshape(16)
        self.push_data['color'] = (*self.square.color, 1.0)

    def draw(self, command_buffer, image_i):
        command_buffer.push_constants(self.pipeline, self.push_data)
        command_buffer.bind_vertex_buffer(self.vertex_buffer)
        command_buffer.bind_index_buffer(self.index_buffer)
        command_buffer.draw_indexed(self.index_buffer.count)

    def release(self):
        self.vertex_buffer.destroy()
        self.index_buffer.destroy()


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--validation', action='store_true')
    parser.add_argument('--log-level', default='info')
    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper()))
    MovableSquareApp(validation=args.validation).run()
