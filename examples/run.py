import logging
import runpy
from pathlib import Path

from vkguide.selection import select_example

HERE = Path(__file__).parent
EXAMPLES = ['buffer_creation', 'compute_pipeline', 'graphics_pipeline', 'images', 'windowing', 'movable_square']


def execute(name):
    runpy.run_path(str(HERE / f'{name}.py'), run_name='__main__')


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    select_example(EXAMPLES, execute)
