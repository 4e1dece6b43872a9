import argparse
import logging
from pathlib import Path

import glfw

from vkguide.app import App
from vkguide.buffer import Buffer
from vkguide.models import TRIANGLE

SHADERS = Path(__file__).parent / 'shaders'


class TriangleApp(App):

    def __init__(self, validation=False):
        super().__init__(
            'windowing', validation=validation, clear_color=(0.0, 0.0, 1.0, 1.0),
            vertex_shader=SHADERS / 'triangle.vert', fragment_shader=SHADERS / 'triangle.frag',
            vertex_attributes=['vec2']
        )
        self.vertex_buffer = Buffer(self.device, TRIANGLE, usage='vertex')
        self.last_time = glfw.get_time()
        self.last_count = 0
        self.fps_interval = 0.5

    def draw(self, command_buffer, image_i):
        command_buffer.bind_vertex_buffer(self.vertex_buffer)
        command_buffer.draw(len(TRIANGLE))

    def main_loop(self):
        t = glfw.get_time()
        if t - self.last_time > self.fps_interval:
            fps = (self.frame_count - self.last_count) / (t - self.last_time)
            self.last_count = self.frame_count
            self.last_time = t
            self.window.set_title(f'{self.title} {fps:.1f}fps')

    def release(self):
        self.vertex_buffer.destroy()


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--validation', action='store_true')
    parser.add_argument('--log-level', default='info')
    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper()))
    TriangleApp(validation=args.validation).run()
