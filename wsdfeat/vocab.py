"""
Feature model: stable mapping between symbolic keys and
vector indices
"""

import threading

# pylint: disable=too-few-public-methods

ABSENT = -1
"index returned for keys that a frozen vocabulary does not know"


class FrozenVocabularyError(Exception):
    """
    Attempt to add to a vocabulary after training is over
    """
    def __init__(self, msg):
        super(FrozenVocabularyError, self).__init__(msg)


class Vocabulary(object):
    """
    Bidirectional mapping from symbolic keys to indices.

    While the vocabulary is mutable, unseen keys are assigned the
    next index in the order they are first seen; indices are never
    reassigned. Once frozen (a one way transition), unseen keys map
    to :py:data:`ABSENT`.

    Allocation goes through a single writer lock; lookups on a
    frozen vocabulary do not lock at all.

    Parameters
    ----------
    keys: iterable of string, optional
        initial keys, indexed in order
    """
    def __init__(self, keys=None):
        self._indices = {}
        self._keys = []
        self._frozen = False
        self._lock = threading.Lock()
        for key in keys or []:
            self.add(key)

    @property
    def frozen(self):
        "True if the vocabulary can no longer grow"
        return self._frozen

    def freeze(self):
        """
        Prevent any further additions. There is no way back
        """
        with self._lock:
            self._frozen = True
        return self

    def get(self, key):
        """
        Index of a key, or :py:data:`ABSENT` (never allocates)
        """
        return self._indices.get(key, ABSENT)

    def add(self, key):
        """
        Index of a key, allocating one if the key is new

        Raises
        ------
        FrozenVocabularyError
            if the vocabulary is frozen and the key is new
        """
        index = self._indices.get(key)
        if index is not None:
            return index
        with self._lock:
            if self._frozen:
                oops = 'Cannot add {!r} to a frozen vocabulary'
                raise FrozenVocabularyError(oops.format(key))
            index = self._indices.get(key)
            if index is None:
                index = len(self._keys)
                self._keys.append(key)
                self._indices[key] = index
            return index

    def index_of(self, key):
        """
        Index of a key: allocated if new while training, or
        :py:data:`ABSENT` if new after freezing
        """
        if self._frozen:
            return self.get(key)
        try:
            return self.add(key)
        except FrozenVocabularyError:
            # frozen between the check and the lock
            return self.get(key)

    def key(self, index):
        "symbolic key for an index"
        return self._keys[index]

    def keys(self):
        "keys in index order"
        return list(self._keys)

    def copy(self):
        """
        Independent copy (with the same frozen status)
        """
        clone = Vocabulary(self._keys)
        if self._frozen:
            clone.freeze()
        return clone

    def __contains__(self, key):
        return key in self._indices

    def __len__(self):
        return len(self._keys)

    def __iter__(self):
        return iter(self.keys())

    def __eq__(self, other):
        return (isinstance(other, Vocabulary) and
                self._keys == other._keys and
                self._frozen == other._frozen)

    def __ne__(self, other):
        return not self == other

    def __getstate__(self):
        return {'keys': self._keys, 'frozen': self._frozen}

    def __setstate__(self, state):
        self.__init__(state['keys'])
        if state['frozen']:
            self.freeze()

    def __repr__(self):
        status = 'frozen' if self._frozen else 'open'
        return 'Vocabulary({} keys, {})'.format(len(self), status)


class FeatureModel(object):
    """
    Everything a feature pipeline learns during training: the
    feature vocabulary and the label vocabulary (mapping gold
    labels to target indices)

    Parameters
    ----------
    features: Vocabulary, optional
    labels: Vocabulary, optional
    """
    def __init__(self, features=None, labels=None):
        self.features = features if features is not None else Vocabulary()
        self.labels = labels if labels is not None else Vocabulary()

    @property
    def frozen(self):
        "True once training is over"
        return self.features.frozen and self.labels.frozen

    def freeze(self):
        "freeze both vocabularies"
        self.features.freeze()
        self.labels.freeze()
        return self

    def copy(self):
        "independent copy"
        return FeatureModel(self.features.copy(), self.labels.copy())

    def feature_index(self, key):
        "see :py:meth:`Vocabulary.index_of`"
        return self.features.index_of(key)

    def label_index(self, label):
        "see :py:meth:`Vocabulary.index_of`"
        return self.labels.index_of(label)

    def label(self, index):
        "label string for a target index"
        return self.labels.key(index)

    def __eq__(self, other):
        return (isinstance(other, FeatureModel) and
                self.features == other.features and
                self.labels == other.labels)

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return 'FeatureModel(features={!r}, labels={!r})'.format(
            self.features, self.labels)
