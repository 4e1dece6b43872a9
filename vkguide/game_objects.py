import enum
import random


class Square:

    def __init__(self, color=(1.0, 0.0, 0.0), position=(0.0, 0.0), speed=1.3):
        self.color = list(color)
        self.position = list(position)
        self.speed = speed

    def change_to_random_color(self, rng=random):
        self.color = [rng.randrange(100) / 100 for _ in range(3)]

    def move_right(self, seconds):
        self.position[0] += seconds * self.speed

    def move_left(self, seconds):
        self.position[0] -= seconds * self.speed

    # y grows downwards in Vulkan clip space
    def move_up(self, seconds):
        self.position[1] -= seconds * self.speed

    def move_down(self, seconds):
        self.position[1] += seconds * self.speed


class KeyState(enum.Enum):
    PRESSED = 'pressed'
    RELEASED = 'released'


class Keys:
    """Pressed state of the keys the movable square listens to."""

    names = ('a', 'w', 's', 'd', 'space')

    def __init__(self):
        for name in self.names:
            setattr(self, name, KeyState.RELEASED)

    def press(self, name):
        """Mark a key as pressed. Returns True if it was released before."""
        was_released = getattr(self, name) == KeyState.RELEASED
        setattr(self, name, KeyState.PRESSED)
        return was_released

    def release(self, name):
        setattr(self, name, KeyState.RELEASED)

    def is_pressed(self, name):
        return getattr(self, name) == KeyState.PRESSED


def update_movement(square, keys, seconds):
    """Move the square for each direction whose opposite key isn't also held."""
    if keys.is_pressed('w') and not keys.is_pressed('s'):
        square.move_up(seconds)
    if keys.is_pressed('s') and not keys.is_pressed('w'):
        square.move_down(seconds)
    if keys.is_pressed('a') and not keys.is_pressed('d'):
        square.move_left(seconds)
    if keys.is_pressed('d') and not keys.is_pressed('a'):
        square.move_right(seconds)
