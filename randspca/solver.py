# vim: fdm=indent
# author:     randspca contributors
# date:       17/10/26
# content:    Variable projection solver for sparse PCA. It alternates an
#             orthogonal Procrustes update of the transform A with a proximal
#             gradient (soft-threshold) update of the sparse loadings B.
__all__ = [
    'SpectralBasis',
    'SolverState',
    'VariableProjectionSolver',
    'soft_threshold',
    'soft_threshold_real',
    'soft_threshold_complex',
    ]

import logging
from collections import namedtuple
import numpy as np
from scipy.linalg import svd
from .exceptions import DegenerateSpectrumError


logger = logging.getLogger(__name__)


SolverState = namedtuple(
    'SolverState',
    ['A', 'B', 'singular_values', 'objective', 'n_iter', 'converged'],
    )


def soft_threshold_real(X, kappa):
    '''Soft-threshold a real array, returning a new array

    Entries above kappa are shrunk by kappa, entries at or below -kappa are
    raised by kappa, all others are set to exactly zero.
    '''
    out = np.zeros_like(X)
    high = X > kappa
    low = X <= -kappa
    out[high] = X[high] - kappa
    out[low] = X[low] + kappa
    return out


def soft_threshold_complex(X, kappa):
    '''Soft-threshold a complex array: shrink the modulus, keep the phase'''
    out = np.zeros_like(X)
    modulus = np.abs(X)
    keep = modulus > kappa
    out[keep] = X[keep] * (1 - kappa / modulus[keep])
    return out


def soft_threshold(X, kappa):
    '''Proximal operator of kappa * ||X||_1'''
    if np.iscomplexobj(X):
        return soft_threshold_complex(X, kappa)
    return soft_threshold_real(X, kappa)


class SpectralBasis(object):
    '''Leading right singular vectors and values of the sketched data

    VD2 @ V^H stands in for X^H X and VD^H for X itself (up to a rotation),
    so the solver never forms a p x p or n x p product.
    '''

    def __init__(self, V, d):
        self.V = V
        self.d = d
        self.VD = V * d
        self.VD2 = V * d**2

    @classmethod
    def from_sketch(cls, sketch, k):
        '''Initialize from the SVD of the compressed matrix

        Args:
            sketch (2D numpy.ndarray, l x p): compressed data.
            k (int): number of components.

        If the sketch has fewer than k singular values, the missing
        components are padded with zero vectors and zero singular values.
        '''
        _, d, vh = svd(sketch, full_matrices=False)
        V = vh[:k].conj().T
        d = d[:k]

        n_missing = k - len(d)
        if n_missing > 0:
            V = np.hstack([V, np.zeros((V.shape[0], n_missing), V.dtype)])
            d = np.concatenate([d, np.zeros(n_missing, d.dtype)])

        basis = cls(V, d)
        if basis.n_nonzero < k:
            logger.debug(
                'Rank deficient sketch: %d of %d singular values are zero',
                k - basis.n_nonzero, k)
        return basis

    @property
    def k(self):
        return self.V.shape[1]

    @property
    def dmax(self):
        return self.d[0]

    @property
    def n_nonzero(self):
        '''Number of singular values that are numerically nonzero'''
        tol = max(self.V.shape) * np.finfo(np.float64).eps * self.dmax
        return int((self.d > tol).sum())


class VariableProjectionSolver(object):
    '''Minimize 0.5 ||X - X B A^H||^2 + alpha ||B||_1 + 0.5 beta ||B||^2

    subject to A^H A = I, working in the reduced space of a SpectralBasis.
    '''

    def __init__(
            self,
            basis,
            alpha=1e-4,
            beta=1e-4,
            max_iter=1000,
            tol=1e-5,
            verbose=False,
            callback=None,
            ):
        '''Prepare the solver

        Args:
            basis (SpectralBasis): leading singular vectors and values of the
             data.

            alpha (float): sparsity controlling parameter, relative to the
             largest eigenvalue. Higher values lead to sparser components.

            beta (float): ridge shrinkage, relative to the largest eigenvalue.

            max_iter (int): maximum number of iterations.

            tol (float): stop when the relative improvement of the objective
             falls to or below this value.

            verbose (bool): log the objective at each iteration (INFO level).

            callback (callable or None): called as callback(iteration,
             objective, improvement) after each iteration but the first.
        '''
        self.basis = basis
        self.alpha = alpha
        self.beta = beta
        self.max_iter = max_iter
        self.tol = tol
        self.verbose = verbose
        self.callback = callback

        self._set_tuning_parameters()

        if np.iscomplexobj(basis.V):
            self._threshold = soft_threshold_complex
        else:
            self._threshold = soft_threshold_real

    def _set_tuning_parameters(self):
        dmax = self.basis.dmax
        if not dmax > 0:
            raise DegenerateSpectrumError(
                'The largest singular value of the data is zero')

        dmax2 = dmax**2
        self.alpha_scaled = self.alpha * dmax2
        self.beta_scaled = self.beta * dmax2

        # step size, inverse of the curvature bound of the smooth term
        self.nu = 1.0 / (dmax2 + self.beta_scaled)
        self.kappa = self.nu * self.alpha_scaled

    def update_transform(self, B):
        '''Orthogonal Procrustes update of A given B

        Returns:
            tuple (A, singular values of X^H X B).
        '''
        V = self.basis.V
        Z = self.basis.VD2 @ (V.conj().T @ B)
        U, s, Wh = svd(Z, full_matrices=False)
        return U @ Wh, s

    def update_loadings(self, A, B):
        '''One proximal gradient step on B given A'''
        V = self.basis.V
        grad = self.basis.VD2 @ (V.conj().T @ (A - B)) - self.beta_scaled * B
        return self._threshold(B + self.nu * grad, self.kappa)

    def objective(self, A, B):
        VDh = self.basis.VD.conj().T
        R = VDh - (VDh @ B) @ A.conj().T
        return (0.5 * np.sum(np.abs(R)**2) +
                self.alpha_scaled * np.sum(np.abs(B)) +
                0.5 * self.beta_scaled * np.sum(np.abs(B)**2))

    def _report(self, iteration, objective, improvement):
        if self.verbose:
            logger.info(
                'Iteration: %4d, Objective: %1.5e, Relative improvement %1.5e',
                iteration, objective, improvement)
        if self.callback is not None:
            self.callback(iteration, objective, improvement)

    def solve(self):
        '''Run the alternating updates until convergence or max_iter

        Returns:
            SolverState. The singular values are those of the last A update
            (of the initial B if no iteration was run).
        '''
        A = self.basis.V.copy()
        B = self.basis.V.copy()
        singular_values = None

        trace = np.empty(self.max_iter)
        improvement = np.inf
        n_iter = 0
        while (n_iter < self.max_iter) and (improvement > self.tol):
            A, singular_values = self.update_transform(B)
            B = self.update_loadings(A, B)
            trace[n_iter] = self.objective(A, B)
            n_iter += 1

            if n_iter > 1:
                previous, current = trace[n_iter - 2], trace[n_iter - 1]
                if current == 0:
                    improvement = 0.0
                else:
                    improvement = (previous - current) / current
                self._report(n_iter, current, improvement)

        if singular_values is None:
            _, singular_values = self.update_transform(B)

        return SolverState(
            A=A,
            B=B,
            singular_values=singular_values,
            objective=trace[:n_iter],
            n_iter=n_iter,
            converged=bool(improvement <= self.tol),
            )
