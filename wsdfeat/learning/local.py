"""
Classifiers wrapping around scikit-learn estimators
"""

import numpy as np
from sklearn.linear_model import LogisticRegression

from ..table import (targets, to_csr_matrix, unlabelled)
from .interface import Classifier

# pylint: disable=too-few-public-methods


class SklearnClassifier(Classifier):
    """
    A relatively simple way to get a classifier: just pass in an
    sklearn classifier.

    Parameters
    ----------
    learner: sklearn API-compatible classifier, optional
        defaults to logistic regression
    """
    def __init__(self, learner=None):
        if learner is None:
            learner = LogisticRegression(max_iter=1000)
        self._learner = learner
        pfunc = getattr(learner, "predict_proba", None)
        self.can_predict_proba = callable(pfunc)
        self._n_features = None

    @property
    def learner(self):
        "the underlying sklearn estimator"
        return self._learner

    def _matrix(self, instances):
        'feature matrix with the training width'
        if self._n_features is None:
            raise ValueError('Fit not yet called')
        return to_csr_matrix(instances, self._n_features)

    def train(self, instances, n_features):
        instances = list(instances)
        if not instances:
            raise ValueError('Need at least one training instance')
        if unlabelled(instances):
            raise ValueError('Training instances must all have a target')
        self._n_features = n_features
        self._learner.fit(self._matrix(instances), targets(instances))
        return self

    def classify(self, instance):
        pred = self._learner.predict(self._matrix([instance]))
        return int(pred[0])

    def classify_all(self, instances):
        """
        Best target index for each instance
        """
        instances = list(instances)
        if not instances:
            return []
        return [int(x) for x in
                self._learner.predict(self._matrix(instances))]

    def score(self, instance):
        data = self._matrix([instance])
        classes = [int(c) for c in self._learner.classes_]
        if self.can_predict_proba:
            scores = self._learner.predict_proba(data)[0]
        else:
            scores = np.ravel(self._learner.decision_function(data))
            if len(classes) == 2:
                # binary decision function: score of the second class
                scores = np.array([-scores[0], scores[0]])
        return {c: float(s) for c, s in zip(classes, scores)}

    @staticmethod
    def _best_weights(weights, top_n):
        """
        Given an array of weights, return the `top_n` most important
        ones and the associated weight

        Return
        ------
        best: [(int, float)]
            index within the input weight array, and score
        """
        best_idxes = np.argsort(weights)[-top_n:][::-1]
        best_weights = np.take(weights, best_idxes)
        return [(int(i), float(w)) for i, w in zip(best_idxes, best_weights)]

    def important_features(self, top_n):
        """
        If possible, return a dictionary mapping class indices
        to important features

        The underlying classifier must provide a `coef_` property
        (or `feature_importances_`, in which case the features are
        shared by all classes)

        Return
        ------
        feature_map: None or dict(int, [(int, float)])
            keys are target indices; features are indices into the
            feature vocabulary
        """
        model = self._learner
        classes = [int(c) for c in getattr(model, 'classes_', [])]
        if hasattr(model, 'coef_'):
            coef = np.asarray(model.coef_)
            if coef.shape[0] == 1 and len(classes) == 2:
                return {classes[0]: self._best_weights(-coef[0], top_n),
                        classes[1]: self._best_weights(coef[0], top_n)}
            return {c: self._best_weights(coef[i], top_n)
                    for i, c in enumerate(classes)}
        elif hasattr(model, 'feature_importances_'):
            best = self._best_weights(model.feature_importances_, top_n)
            return {c: best for c in classes}
        else:
            return None
