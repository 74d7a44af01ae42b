"""
Common interface(s) to wsdfeat classifiers.
"""

from abc import ABCMeta, abstractmethod


class Classifier(metaclass=ABCMeta):
    '''
    A classifier associates sparse instances with target (class)
    indices. It knows nothing of how the instances were built:
    targets are indices into the label vocabulary of whatever
    feature model produced them.

    Attributes
    ----------
    can_predict_proba: bool

        True if scores should be interpreted as probabilities
    '''
    @abstractmethod
    def train(self, instances, n_features):
        """
        Learns a classifier from training instances

        Parameters
        ----------
        instances: [SparseInstance]

            training instances, each with a known target

        n_features: int

            width of the feature vectors (size of the feature
            vocabulary)

        Returns
        -------
        self: object
        """
        raise NotImplementedError

    @abstractmethod
    def classify(self, instance):
        """
        Parameters
        ----------
        instance: SparseInstance

        Returns
        -------
        target: int
            best target index for this instance
        """
        raise NotImplementedError

    @abstractmethod
    def score(self, instance):
        """
        Parameters
        ----------
        instance: SparseInstance

        Returns
        -------
        scores: dict(int, float)
            score for each target index the classifier knows
            about (a probability distribution if
            `can_predict_proba`)
        """
        raise NotImplementedError
