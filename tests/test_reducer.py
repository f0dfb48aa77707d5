import numpy as np
import pytest
from scipy.sparse import csr_matrix

from mdrcluster.pipeline.reducer import project_2d


class TestProject2d:
    """Test the PCA projection and its degenerate cases."""

    @pytest.mark.parametrize('n', [0, 1])
    def test_too_few_points(self, n):
        coords = project_2d(np.ones((n, 5)))
        assert coords.shape == (n, 2)
        assert np.all(coords == 0)

    def test_zero_variance(self):
        coords = project_2d(np.full((4, 3), 0.5))
        assert coords.shape == (4, 2)
        assert np.all(coords == 0)

    def test_no_dimensions(self):
        coords = project_2d(np.zeros((3, 0)))
        assert coords.shape == (3, 2)
        assert np.all(coords == 0)

    def test_points_on_a_line(self):
        coords = project_2d(np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]]))
        assert np.abs(coords[:, 0]) == pytest.approx([np.sqrt(2), 0.0, np.sqrt(2)])
        assert coords[:, 1] == pytest.approx([0.0, 0.0, 0.0], abs=1e-9)

    def test_single_dimension(self):
        coords = project_2d(np.array([[0.0], [1.0], [2.0]]))
        assert np.abs(coords[:, 0]) == pytest.approx([1.0, 0.0, 1.0])
        assert np.all(coords[:, 1] == 0)

    def test_sparse_input(self):
        dense = np.array([[1.0, 0.0, 2.0], [0.0, 3.0, 0.0], [1.0, 1.0, 1.0], [0.0, 0.0, 4.0]])
        assert project_2d(csr_matrix(dense)) == pytest.approx(project_2d(dense))

    def test_reproducible(self):
        rng = np.random.RandomState(3)
        data = rng.rand(20, 6)
        assert np.array_equal(project_2d(data), project_2d(data))
