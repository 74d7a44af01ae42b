"""
Sparse instances and their conversion to the matrices that
classifiers consume
"""

from collections import namedtuple

import numpy as np
import scipy.sparse
from sklearn.datasets import (dump_svmlight_file,
                              load_svmlight_file)

from .vocab import ABSENT

# pylint: disable=too-few-public-methods


class SparseInstance(namedtuple('SparseInstance',
                                'id target indices values')):
    '''
    A sparse feature vector with a unique id and a target class
    index (:py:data:`wsdfeat.vocab.ABSENT` if unknown).

    Indices are strictly ascending; any index not listed has an
    implicit value of zero. Build these with `from_dict` rather than
    directly.

    Parameters
    ----------
    id: int
    target: int
    indices: tuple(int)
    values: tuple(float)
    '''
    @classmethod
    def from_dict(cls, id, target, vector):
        """
        Parameters
        ----------
        vector: dict(int, float)
            feature index to value
        """
        # pylint: disable=redefined-builtin
        indices = tuple(sorted(vector))
        values = tuple(float(vector[i]) for i in indices)
        return cls(id, target, indices, values)

    def items(self):
        "(index, value) pairs in ascending index order"
        return zip(self.indices, self.values)

    def get(self, index, default=0.0):
        "value at an index"
        for idx, value in self.items():
            if idx == index:
                return value
        return default

    def __len__(self):
        return len(self.indices)

    def __iter__(self):
        return iter(self.items())


def to_csr_matrix(instances, n_features):
    """
    Stack sparse instances into a (instance x feature) matrix

    Parameters
    ----------
    instances: [SparseInstance]
    n_features: int
        width of the matrix (size of the feature vocabulary)

    Returns
    -------
    data: scipy.sparse.csr_matrix
    """
    indptr = [0]
    indices = []
    data = []
    for inst in instances:
        indices.extend(inst.indices)
        data.extend(inst.values)
        indptr.append(len(indices))
    return scipy.sparse.csr_matrix((np.array(data, dtype=np.float64),
                                    np.array(indices, dtype=np.int64),
                                    np.array(indptr, dtype=np.int64)),
                                   shape=(len(indptr) - 1, n_features))


def targets(instances):
    """
    Target indices as a numpy array
    """
    return np.array([inst.target for inst in instances], dtype=np.int64)


def from_csr_matrix(data, target, ids=None):
    """
    Inverse of :py:func:`to_csr_matrix`

    Returns
    -------
    instances: [SparseInstance]
    """
    data = scipy.sparse.csr_matrix(data)
    data.sort_indices()
    if ids is None:
        ids = range(data.shape[0])
    res = []
    for row, (inst_id, tgt) in enumerate(zip(ids, target)):
        start, end = data.indptr[row], data.indptr[row + 1]
        vector = {int(i): float(v) for i, v in
                  zip(data.indices[start:end], data.data[start:end])
                  if v != 0}
        res.append(SparseInstance.from_dict(int(inst_id), int(tgt), vector))
    return res


def dump_svmlight(instances, n_features, filename):
    """
    Save sparse instances in svmlight/libsvm format (the instance
    ids go in the query id column)
    """
    dump_svmlight_file(to_csr_matrix(instances, n_features),
                       targets(instances),
                       filename,
                       zero_based=True,
                       query_id=np.array([i.id for i in instances]))


def load_svmlight(filename, n_features):
    """
    Read back sparse instances written by :py:func:`dump_svmlight`
    """
    # pylint: disable=unbalanced-tuple-unpacking
    data, target, ids = load_svmlight_file(filename,
                                           n_features=n_features,
                                           zero_based=True,
                                           query_id=True)
    # pylint: enable=unbalanced-tuple-unpacking
    return from_csr_matrix(data, target, ids)


def unlabelled(instances):
    """
    Instances whose target is unknown
    """
    return [i for i in instances if i.target == ABSENT]
