import numpy as np
from sklearn.decomposition import PCA


def project_2d(data) -> np.ndarray:
    """Projects every row onto the first two principal components.

    Rows are either TF-IDF vectors (sparse is accepted) or rows of the dissimilarity
    matrix. Less than two rows or no variance at all result in every point at the
    origin. With fewer than two usable dimensions the missing axis is `0`.
    """
    if hasattr(data, 'toarray'):
        data = data.toarray()
    data = np.asarray(data, dtype=np.float64)

    n_samples = data.shape[0]
    coords = np.zeros((n_samples, 2), dtype=np.float64)
    if n_samples < 2 or data.ndim != 2 or data.shape[1] == 0:
        return coords

    if np.allclose(data.var(axis=0), 0.0):
        return coords

    n_components = min(2, n_samples, data.shape[1])
    # exact solver, axis signs are fixed by sklearn's svd_flip
    reducer = PCA(n_components=n_components, svd_solver='full')
    coords[:, :n_components] = reducer.fit_transform(data)
    return coords
