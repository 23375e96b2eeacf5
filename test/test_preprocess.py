# vim: fdm=indent
# author:     randspca contributors
# date:       17/10/26
# content:    Test input coercion, missing values, centering and scaling
import numpy as np
import pandas as pd
import scipy.sparse
import pytest
from anndata import AnnData
from randspca.preprocess import (
    PreprocessingState,
    as_matrix,
    drop_missing,
    center_scale,
    )


def _random_matrix(n=30, p=6, seed=0):
    rs = np.random.RandomState(seed)
    return 3.0 + 2.0 * rs.randn(n, p)


def test_as_matrix_ndarray():
    X = np.arange(12).reshape(4, 3)
    matrix, features, obs = as_matrix(X)

    assert(matrix.dtype == np.float64)
    assert(matrix.shape == (4, 3))
    assert(features is None)
    assert(obs is None)


def test_as_matrix_dataframe():
    df = pd.DataFrame(
        index=['cell1', 'cell2'],
        columns=['INS', 'GCG', 'PPY'],
        data=[[2302, 123, 0], [0, 5034, 6453]],
        )
    matrix, features, obs = as_matrix(df)

    assert(matrix.shape == (2, 3))
    assert(list(features) == ['INS', 'GCG', 'PPY'])
    assert(list(obs) == ['cell1', 'cell2'])


def test_as_matrix_anndata():
    X = _random_matrix(5, 4)
    adata = AnnData(X=X)
    adata.var_names = ['g1', 'g2', 'g3', 'g4']
    matrix, features, obs = as_matrix(adata)

    assert(np.allclose(matrix, X))
    assert(list(features) == ['g1', 'g2', 'g3', 'g4'])
    assert(len(obs) == 5)


def test_as_matrix_nullable_dtypes():
    df = pd.DataFrame({
        'INS': pd.array([1, pd.NA, 3], dtype='Int64'),
        'GCG': pd.array([0.5, 1.5, pd.NA], dtype='Float64'),
        })
    matrix = as_matrix(df)[0]

    assert(matrix.dtype == np.float64)
    assert(np.isnan(matrix[1, 0]))
    assert(np.isnan(matrix[2, 1]))
    assert(matrix[2, 0] == 3)


def test_as_matrix_complex_dataframe():
    df = pd.DataFrame({'a': [1.0, 2.0], 'b': [1 + 1j, 2 - 1j]})
    matrix = as_matrix(df)[0]

    assert(matrix.dtype == np.complex128)
    assert(matrix[1, 1] == 2 - 1j)


def test_as_matrix_sparse():
    X = scipy.sparse.random(10, 5, density=0.3, format='csr', random_state=1)
    matrix = as_matrix(X)[0]

    assert(isinstance(matrix, np.ndarray))
    assert(np.allclose(matrix, X.toarray()))


def test_as_matrix_complex():
    X = np.ones((3, 2)) + 1j * np.ones((3, 2))
    matrix = as_matrix(X)[0]

    assert(matrix.dtype == np.complex128)


def test_as_matrix_not_2d():
    with pytest.raises(ValueError):
        as_matrix(np.ones(5))


def test_drop_missing_warns():
    X = _random_matrix(10, 3)
    X[2, 1] = np.nan
    X[7, 0] = np.nan
    obs = np.array(['c{:}'.format(i) for i in range(10)])

    with pytest.warns(UserWarning):
        Xf, obsf = drop_missing(X, obs)

    assert(Xf.shape == (8, 3))
    assert('c2' not in obsf)
    assert('c7' not in obsf)
    assert(not np.isnan(Xf).any())


def test_drop_missing_nothing_to_drop():
    X = _random_matrix(10, 3)
    Xf, obsf = drop_missing(X)

    assert(Xf is X)
    assert(obsf is None)


def test_drop_missing_all_rows():
    X = np.full((3, 2), np.nan)
    with pytest.warns(UserWarning):
        with pytest.raises(ValueError):
            drop_missing(X)


def test_center_only():
    X = _random_matrix()
    X_orig = X.copy()
    Xw, state = center_scale(X, center=True, scale=False)

    assert(np.allclose(Xw.mean(axis=0), 0))
    assert(np.allclose(state.center, X_orig.mean(axis=0)))
    assert(state.scale is False)
    # input is not modified
    assert(np.array_equal(X, X_orig))


def test_center_and_scale():
    X = _random_matrix()
    Xw, state = center_scale(X, center=True, scale=True)

    assert(np.allclose(Xw.mean(axis=0), 0))
    assert(np.allclose(Xw.std(axis=0, ddof=1), 1))
    assert(np.allclose(state.scale, X.std(axis=0, ddof=1)))


def test_scale_constant_column():
    X = _random_matrix()
    X[:, 2] = 5.0
    Xw, state = center_scale(X, center=True, scale=True)

    assert(state.scale[2] == 1)
    assert(np.allclose(Xw[:, 2], 0))


def test_no_transform():
    X = _random_matrix()
    Xw, state = center_scale(X, center=False, scale=False)

    assert(state.center is False)
    assert(state.scale is False)
    assert(Xw is not X)
    assert(np.array_equal(Xw, X))


def test_state_is_readonly():
    X = _random_matrix()
    _, state = center_scale(X, center=True, scale=True)

    with pytest.raises(ValueError):
        state.center[0] = 0
    with pytest.raises(AttributeError):
        state.center = False


def test_state_apply_invert():
    X = _random_matrix()
    Xw, state = center_scale(X, center=True, scale=True)

    assert(np.allclose(state.apply(X), Xw))
    assert(np.allclose(state.invert(Xw), X))


def test_state_identity():
    X = _random_matrix()
    state = PreprocessingState(False, False)

    assert(np.array_equal(state.apply(X), X))
    assert(np.array_equal(state.invert(X), X))


def test_center_scale_complex():
    rs = np.random.RandomState(3)
    X = rs.randn(20, 4) + 1j * rs.randn(20, 4)
    Xw, state = center_scale(X, center=True, scale=True)

    assert(np.allclose(Xw.mean(axis=0), 0))
    assert(np.isrealobj(state.scale))
    assert(np.allclose((np.abs(Xw)**2).sum(axis=0) / 19, 1))
