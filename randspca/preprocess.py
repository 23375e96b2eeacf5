# vim: fdm=indent
# author:     randspca contributors
# date:       17/10/26
# content:    Input coercion, missing values, centering and scaling
__all__ = ['PreprocessingState', 'as_matrix', 'drop_missing', 'center_scale']

import warnings
from collections import namedtuple
import numpy as np
import pandas as pd
from scipy.sparse import issparse
from anndata import AnnData


# Columns with a smaller scale are left unscaled
SCALE_FLOOR = 1e-8


class PreprocessingState(namedtuple('PreprocessingState', ['center', 'scale'])):
    '''Centering and scaling applied to the working matrix

    Each field is either a vector with one entry per column, or False if that
    transform was not applied.
    '''
    __slots__ = ()

    def apply(self, X):
        '''Center and scale new data the same way as the working matrix'''
        X = np.asarray(X)
        if self.center is not False:
            X = X - self.center
        if self.scale is not False:
            X = X / self.scale
        return X

    def invert(self, X):
        '''Undo scaling, then centering'''
        X = np.asarray(X)
        if self.scale is not False:
            X = X * self.scale
        if self.center is not False:
            X = X + self.center
        return X


def as_matrix(X):
    '''Coerce the input into a dense 2D numpy array

    Args:
        X (numpy.ndarray, pandas.DataFrame, anndata.AnnData or scipy sparse
         matrix): the data. Rows are observations and columns are variables
         (features), as in AnnData. A DataFrame is read with the same
         convention, i.e. it is NOT transposed.

    Returns:
        tuple (matrix, feature_names, obs_names). The names are None for
        plain arrays. The matrix is always a fresh copy: float64, or
        complex128 for complex input.
    '''
    feature_names = None
    obs_names = None
    if isinstance(X, AnnData):
        feature_names = X.var_names.values
        obs_names = X.obs_names.values
        X = X.X
    elif isinstance(X, pd.DataFrame):
        feature_names = X.columns.values
        obs_names = X.index.values
        if any(pd.api.types.is_complex_dtype(dtype) for dtype in X.dtypes):
            dtype = np.complex128
        else:
            dtype = np.float64
        # nullable dtypes hold pd.NA, which numpy cannot cast
        X = X.to_numpy(dtype=dtype, na_value=np.nan)

    if issparse(X):
        # the solver works in memory anyway
        X = X.toarray()

    if np.iscomplexobj(X):
        matrix = np.array(X, dtype=np.complex128)
    else:
        matrix = np.array(X, dtype=np.float64)

    if matrix.ndim != 2:
        raise ValueError(
            'Input must be a 2D matrix, got {:} dimensions'.format(matrix.ndim))

    return matrix, feature_names, obs_names


def drop_missing(X, obs_names=None):
    '''Drop observations (rows) with missing values

    Returns:
        tuple (matrix, obs_names) after filtering. A warning is issued if any
        row was dropped.
    '''
    missing = np.isnan(X).any(axis=1)
    if not missing.any():
        return X, obs_names

    warnings.warn(
        'Missing values are omitted: {:} of {:} rows dropped'.format(
            missing.sum(), len(missing)))

    X = X[~missing]
    if obs_names is not None:
        obs_names = obs_names[~missing]

    if X.shape[0] == 0:
        raise ValueError('No rows left after dropping missing values')

    return X, obs_names


def center_scale(X, center=True, scale=False):
    '''Center and/or scale the columns of a matrix

    Args:
        X (2D numpy.ndarray): the matrix. It is not modified.
        center (bool): subtract the column means.
        scale (bool): divide each column by sqrt(sum(|x|^2) / (n-1)), computed
         after centering, i.e. the sample standard deviation if centered.
         Columns with a scale below 1e-8 are not scaled.

    Returns:
        tuple (working matrix, PreprocessingState).
    '''
    n = X.shape[0]
    X = np.array(X, copy=True)

    if center:
        center_ = X.mean(axis=0)
        X -= center_
        center_.setflags(write=False)
    else:
        center_ = False

    if scale:
        scale_ = np.sqrt((np.abs(X)**2).sum(axis=0) / (n - 1))
        scale_[scale_ < SCALE_FLOOR] = 1
        X /= scale_
        scale_.setflags(write=False)
    else:
        scale_ = False

    return X, PreprocessingState(center_, scale_)
