# vim: fdm=indent
# author:     randspca contributors
# date:       17/10/26
# content:    Randomized sparse PCA estimator and entry call
__all__ = ['RSPCA', 'rspca']

import logging
from numbers import Integral, Real
import numpy as np
from .exceptions import InvalidRankError
from .preprocess import as_matrix, drop_missing, center_scale
from .sketch import compress_qb
from .solver import SpectralBasis, VariableProjectionSolver
from .result import RSPCAResult


logger = logging.getLogger(__name__)


class RSPCA(object):
    '''Randomized sparse principal component analysis

    Sparse PCA looks for weight vectors (loadings) with only a few nonzero
    entries, so that each component is a combination of few variables. Given
    an n x p matrix X, it minimizes

        0.5 ||X - X B A^T||^2 + alpha ||B||_1 + 0.5 beta ||B||^2

    over sparse loadings B and orthonormal A. The scores are Z = X B and the
    data is approximately rotated back as Z A^T. The data is first compressed
    by a randomized QB decomposition, so the cost of each iteration does not
    depend on n.
    '''

    def __init__(
            self,
            k=None,
            alpha=1e-4,
            beta=1e-4,
            center=True,
            scale=False,
            max_iter=1000,
            tol=1e-5,
            oversample=20,
            power_iters=2,
            verbose=False,
            random_state=None,
            callback=None,
            ):
        '''Prepare the model

        Args:
            k (int or None): target rank, i.e. the number of components. None
             means min(n, p). Values larger than min(n, p) are reduced to
             min(n, p).

            alpha (float): sparsity controlling parameter. Higher values lead
             to sparser components. It is relative to the largest
             eigenvalue of the data.

            beta (float): amount of ridge shrinkage to improve conditioning,
             relative to the largest eigenvalue of the data.

            center (bool): shift the variables to zero mean.

            scale (bool): scale the variables to unit variance.

            max_iter (int): maximum number of iterations.

            tol (float): stopping tolerance on the relative improvement of the
             objective.

            oversample (int): oversampling of the randomized sketch. At least
             10 is recommended.

            power_iters (int): number of power iterations of the randomized
             sketch. 2 or 3 usually work well if the singular values decay
             slowly.

            verbose (bool): log progress at each iteration at INFO level on the
             'randspca.solver' logger. Nothing is shown unless the caller
             configures logging, e.g. logging.basicConfig(level=logging.INFO).

            random_state (None, int or numpy.random.RandomState): seed for the
             randomized sketch.

            callback (callable or None): called as callback(iteration,
             objective, improvement) after each iteration but the first.

        If k > min(n, p) / 4, a deterministic sparse PCA might be faster.
        '''
        self.k = k
        self.alpha = alpha
        self.beta = beta
        self.center = center
        self.scale = scale
        self.max_iter = max_iter
        self.tol = tol
        self.oversample = oversample
        self.power_iters = power_iters
        self.verbose = verbose
        self.random_state = random_state
        self.callback = callback

    def fit(self, X):
        '''Compute the sparse components

        Args:
            X (numpy.ndarray, pandas.DataFrame, anndata.AnnData or scipy
             sparse matrix): data with observations as rows and variables
             (features) as columns. Rows with missing values are dropped.

        Returns:
            self. The attribute `result_` holds the RSPCAResult.
        '''
        self.data = X

        self._check_init_arguments()
        self.prepare_matrix()
        self._check_matrix()
        self.preprocess()
        self.compress()
        self.initialize()
        self.solve()
        self.assemble()

        return self

    def fit_transform(self, X):
        '''Compute the sparse components and return the scores'''
        self.fit(X)
        return self.result_.scores

    def _check_init_arguments(self):
        k = self.k
        if k is not None:
            if not isinstance(k, Integral):
                raise InvalidRankError(
                    'Target rank must be an int, got {:}'.format(k))
            if k < 1:
                raise InvalidRankError(
                    'Target rank is not valid: {:}'.format(k))

        for name in ('alpha', 'beta'):
            value = getattr(self, name)
            if (not isinstance(value, Real)) or (value < 0):
                raise ValueError('{:} must be a float >= 0'.format(name))

        for name in ('max_iter', 'oversample', 'power_iters'):
            value = getattr(self, name)
            if (not isinstance(value, Integral)) or (value < 0):
                raise ValueError('{:} must be an int >= 0'.format(name))

        if not isinstance(self.tol, Real):
            raise ValueError('tol must be a float')

        if (self.callback is not None) and (not callable(self.callback)):
            raise ValueError('callback must be callable or None')

    def prepare_matrix(self):
        '''Convert the data into a dense matrix without missing values'''
        matrix, feature_names, obs_names = as_matrix(self.data)
        matrix, obs_names = drop_missing(matrix, obs_names)
        self.matrix = matrix
        self.feature_names = feature_names
        self.obs_names = obs_names

    def _check_matrix(self):
        n, p = self.matrix.shape
        if n < 2:
            raise ValueError(
                'At least two observations are needed, got {:}'.format(n))
        if p < 1:
            raise ValueError('The data has no variables')

        k = self.k
        if k is None:
            k = min(n, p)
        elif k > min(n, p):
            logger.debug('Reducing target rank from %d to %d', k, min(n, p))
            k = min(n, p)
        self.k_ = k

    def preprocess(self):
        '''Center and scale the columns'''
        self.matrix_work, self.preprocessing = center_scale(
            self.matrix,
            center=self.center,
            scale=self.scale,
            )

    def compress(self):
        '''Sketch the working matrix with a randomized QB decomposition'''
        n = self.matrix_work.shape[0]
        self.sketch_rank = min(self.k_ + self.oversample, n)
        _, self.sketch = compress_qb(
            self.matrix_work,
            rank=self.sketch_rank,
            oversample=0,
            power_iters=self.power_iters,
            random_state=self.random_state,
            )

    def initialize(self):
        '''SVD of the sketch, starting point of the solver'''
        self.basis = SpectralBasis.from_sketch(self.sketch, self.k_)

    def solve(self):
        '''Run the variable projection solver'''
        solver = VariableProjectionSolver(
            self.basis,
            alpha=self.alpha,
            beta=self.beta,
            max_iter=self.max_iter,
            tol=self.tol,
            verbose=self.verbose,
            callback=self.callback,
            )
        self.solver_state = solver.solve()

    def assemble(self):
        self.result_ = RSPCAResult.assemble(
            self.solver_state,
            self.matrix_work,
            self.preprocessing,
            feature_names=self.feature_names,
            )

    def transform(self, X):
        '''Project new data onto the sparse loadings

        Args:
            X: new data with the same variables as the fitted data, in any
             format accepted by fit. Missing values are not dropped.

        Returns:
            n x k array of scores.
        '''
        matrix = as_matrix(X)[0]
        if matrix.shape[1] != self.result_.loadings.shape[0]:
            raise ValueError(
                'Expected {:} variables, got {:}'.format(
                    self.result_.loadings.shape[0], matrix.shape[1]))
        return self.preprocessing.apply(matrix) @ self.result_.loadings

    def inverse_transform(self, scores):
        '''Map scores back to the data space, undoing centering and scaling'''
        approx = np.asarray(scores) @ self.result_.transform.conj().T
        return self.preprocessing.invert(approx)


def rspca(
        X,
        k=None,
        alpha=1e-4,
        beta=1e-4,
        center=True,
        scale=False,
        max_iter=1000,
        tol=1e-5,
        oversample=20,
        power_iters=2,
        verbose=False,
        random_state=None,
        callback=None,
        ):
    '''Randomized sparse PCA

    See RSPCA for the arguments.

    Returns:
        RSPCAResult.
    '''
    model = RSPCA(
        k=k,
        alpha=alpha,
        beta=beta,
        center=center,
        scale=scale,
        max_iter=max_iter,
        tol=tol,
        oversample=oversample,
        power_iters=power_iters,
        verbose=verbose,
        random_state=random_state,
        callback=callback,
        )
    return model.fit(X).result_
