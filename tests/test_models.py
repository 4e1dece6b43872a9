"""
Tests for the vertex layouts and models.
"""

import numpy as np

from vkguide.models import TRIANGLE, SquareModel, SquareUniform, Vertex2d, Vertex3d


class TestVertexTypes:

    def test_sizes(self):
        assert Vertex2d.itemsize == 8
        assert Vertex3d.itemsize == 12

    def test_triangle(self):
        assert TRIANGLE.dtype == Vertex2d
        np.testing.assert_allclose(TRIANGLE['position'], [[-0.5, -0.5], [0.0, 0.5], [0.5, -0.25]])


class TestSquareModel:

    def test_vertices(self):
        positions = SquareModel.get_vertices()['position']
        assert positions.shape == (4, 2)
        assert np.all(np.abs(positions) == 0.25)

    def test_indices(self):
        indices = SquareModel.get_indices()
        assert indices.dtype == np.uint16
        assert indices.tolist() == [0, 1, 2, 1, 2, 3]

    def test_initial_uniform(self):
        data = SquareModel.get_initial_uniform_data()
        assert data.dtype == SquareUniform
        assert data['color'].tolist() == [[0.0, 0.0, 0.0]]
        assert data['position'].tolist() == [[0.0, 0.0]]
