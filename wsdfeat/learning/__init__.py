'''
wsdfeat learners: this is mostly just bog standard learners provided
by scikit-learn, behind a small interface that speaks in sparse
instances rather than matrices

Classifiers
-----------
Following scikit conventions, a learner is an object that, once
fitted to some training data, becomes a classifier (which can be
used to make predictions). Our classifiers are trained on lists of
:py:class:`wsdfeat.table.SparseInstance` and must implement

* `classify(instance)`: return the best target index
* `score(instance)`: return a score for each target index, a
  probability distribution if the underlying learner provides
  `predict_proba`

Target indices come from the label vocabulary of the feature model
that produced the instances; use :py:class:`wsdfeat.model.SenseModel`
to get the labels back.
'''

from .local import SklearnClassifier
# pylint: disable=wildcard-import
from .interface import *
# pylint: enable=wildcard-import
