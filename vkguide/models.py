import numpy as np

Vertex2d = np.dtype([('position', np.float32, (2,))])
Vertex3d = np.dtype([('position', np.float32, (3,))])

# per-square uniform data (color and position) as the tutorial models define it
SquareUniform = np.dtype([
    ('color', np.float32, (3,)),
    ('_pad', np.float32),
    ('position', np.float32, (2,)),
])


def vertices(positions, dtype=Vertex2d):
    return np.array([(p,) for p in positions], dtype=dtype)


TRIANGLE = vertices([(-0.5, -0.5), (0.0, 0.5), (0.5, -0.25)])


class SquareModel:

    @staticmethod
    def get_vertices():
        return vertices([(-0.25, -0.25), (0.25, -0.25), (-0.25, 0.25), (0.25, 0.25)])

    @staticmethod
    def get_indices():
        return np.array([0, 1, 2, 1, 2, 3], dtype=np.uint16)

    @staticmethod
    def get_initial_uniform_data():
        data = np.zeros(1, dtype=SquareUniform)
        data['color'] = (0.0, 0.0, 0.0)
        data['position'] = (0.0, 0.0)
        return data
