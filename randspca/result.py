# vim: fdm=indent
# author:     randspca contributors
# date:       17/10/26
# content:    Result of a sparse PCA run
__all__ = ['RSPCAResult']

import numpy as np
import pandas as pd


def _freeze(arr):
    arr = np.asarray(arr)
    arr.setflags(write=False)
    return arr


class RSPCAResult(object):
    '''Sparse loadings, transform, scores and explained variance

    Attributes:
        loadings (p x k array): sparse weights B.
        transform (p x k array): orthonormal A, the approximate inverse
         transform: X ~ scores @ A^H.
        scores (n x k array): principal component scores X @ B.
        eigenvalues (k array): approximate eigenvalues.
        sdev (k array): square roots of the eigenvalues.
        total_variance (float): sum of the column variances of the working
         (centered/scaled) matrix.
        center, scale: the preprocessing (vectors, or False if not applied).
        objective (array): objective value at each iteration.
        n_iter (int): number of iterations run.
        converged (bool): whether the tolerance was reached before max_iter.
    '''

    def __init__(
            self,
            loadings,
            transform,
            scores,
            eigenvalues,
            total_variance,
            preprocessing,
            objective,
            n_iter,
            converged,
            feature_names=None,
            ):
        self.loadings = _freeze(loadings)
        self.transform = _freeze(transform)
        self.scores = _freeze(scores)
        self.eigenvalues = _freeze(eigenvalues)
        self.sdev = _freeze(np.sqrt(eigenvalues))
        self.total_variance = float(total_variance)
        self.preprocessing = preprocessing
        self.objective = _freeze(objective)
        self.n_iter = n_iter
        self.converged = converged
        self.feature_names = feature_names

    @classmethod
    def assemble(cls, state, X, preprocessing, feature_names=None):
        '''Package the final solver state

        Args:
            state (SolverState): final iterate of the solver.
            X (2D numpy.ndarray): the working matrix, after centering and
             scaling.
            preprocessing (PreprocessingState): centering and scaling used.
            feature_names (array or None): column names of the input.
        '''
        n = X.shape[0]

        total_variance = np.var(X.real, axis=0, ddof=1).sum()
        if np.iscomplexobj(X):
            total_variance += np.var(X.imag, axis=0, ddof=1).sum()

        return cls(
            loadings=state.B,
            transform=state.A,
            scores=X @ state.B,
            eigenvalues=state.singular_values / (n - 1),
            total_variance=total_variance,
            preprocessing=preprocessing,
            objective=state.objective,
            n_iter=state.n_iter,
            converged=state.converged,
            feature_names=feature_names,
            )

    @property
    def center(self):
        return self.preprocessing.center

    @property
    def scale(self):
        return self.preprocessing.scale

    @property
    def k(self):
        return self.loadings.shape[1]

    @property
    def component_names(self):
        return ['PC{:}'.format(i + 1) for i in range(self.k)]

    @property
    def explained_variance_ratio(self):
        return self.eigenvalues / self.total_variance

    @property
    def cumulative_explained_variance_ratio(self):
        return np.cumsum(self.explained_variance_ratio)

    def summary(self):
        '''Explained variance table, one column per component'''
        ratio = self.explained_variance_ratio
        table = pd.DataFrame(
            [self.eigenvalues, self.sdev, ratio, np.cumsum(ratio)],
            index=[
                'Explained variance',
                'Standard deviations',
                'Proportion of variance',
                'Cumulative proportion',
                ],
            columns=self.component_names,
            )
        return table.round(3)

    def loadings_frame(self):
        '''Loadings as a DataFrame with features as rows'''
        return pd.DataFrame(
            self.loadings,
            index=self.feature_names,
            columns=self.component_names,
            )

    def reconstruct(self):
        '''Approximate the input matrix as scores @ A^H, undoing preprocessing'''
        approx = self.scores @ self.transform.conj().T
        return self.preprocessing.invert(approx)

    def __str__(self):
        loadings = pd.DataFrame(
            np.round(self.loadings, 3),
            index=self.feature_names,
            columns=self.component_names,
            )
        return '\n'.join([
            'Standard deviations:',
            str(np.round(self.sdev, 3)),
            '',
            'Eigenvalues:',
            str(np.round(self.eigenvalues, 3)),
            '',
            'Sparse loadings:',
            str(loadings),
            ])

    def __repr__(self):
        return '<RSPCAResult: k={:}, {:} features, {:} iterations>'.format(
            self.k, self.loadings.shape[0], self.n_iter)
