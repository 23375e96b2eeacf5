# vim: fdm=indent
# author:     randspca contributors
# date:       17/10/26
# content:    Randomized QB compression of a dense matrix
__all__ = ['compress_qb']

import logging
import numpy as np
from scipy.linalg import qr
from scipy.sparse.linalg import svds
from sklearn.utils import check_random_state
from sklearn.utils.extmath import randomized_range_finder
from .exceptions import InvalidRankError


logger = logging.getLogger(__name__)


def compress_qb(X, rank, oversample=0, power_iters=2, random_state=None):
    '''Compress a matrix as X ~ Q B with Q orthonormal

    Args:
        X (2D numpy.ndarray, n x p): real or complex data matrix.
        rank (int): target rank of the sketch.
        oversample (int): additional random directions sampled on top of
         rank.
        power_iters (int): number of power (subspace) iterations, helpful if
         the singular values decay slowly. Ignored for complex input, where
         the leading singular triplets are computed by ARPACK.
        random_state (None, int or numpy.random.RandomState): seed of the
         random test matrix.

    Returns:
        tuple (Q, B). Q is n x r with orthonormal columns, B = Q^H X is r x p,
        with r = rank + oversample. If r >= min(n, p) the compression is
        exact and obtained from a QR decomposition, r is then min(n, p).
    '''
    n, p = X.shape
    if rank < 1:
        raise InvalidRankError(
            'Sketch rank must be at least 1, got {:}'.format(rank))

    size = rank + oversample
    if size >= min(n, p):
        Q, B = qr(X, mode='economic')
        return Q, B

    random_state = check_random_state(random_state)

    if np.iscomplexobj(X):
        logger.debug('Complex input: sketching via svds, power_iters ignored')
        v0 = random_state.standard_normal(min(n, p)).astype(X.dtype)
        u, s, vh = svds(X, k=size, v0=v0)
        Q = u
        B = s[:, None] * vh
    else:
        Q = randomized_range_finder(
            X,
            size=size,
            n_iter=power_iters,
            random_state=random_state,
            )
        B = Q.T @ X

    return Q, B
