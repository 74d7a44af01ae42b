"""
Feature extractors: mapping tokens (or whole contexts) to
symbolic feature values
"""

from abc import ABCMeta, abstractmethod
from enum import Enum
import itertools

from .tree import feature_key

# pylint: disable=too-few-public-methods

KEY_DELIM = '&'
"joins the ids of combined extractors"

CONCAT_DELIM = '|'
"joins the values of combined extractors"

RESERVED_CHARS = ',()?&[]=|'
"characters with a meaning in extractor ids and feature keys"


class ExtractorKind(Enum):
    '''
    What an extractor is applied to
    '''
    token = 1
    context = 2


def is_absent(value):
    """
    True if a value should be treated as a missing feature
    (None, empty string, empty list)
    """
    if value is None:
        return True
    if isinstance(value, (str, list, tuple)) and not value:
        return True
    return False


def _lookup_keys(keys, name):
    """
    Normalised lookup keys (a single key counts as a list of one).
    Keys must be non-empty strings without any of the characters
    in `RESERVED_CHARS`, otherwise different key lists could end
    up with the same id.
    """
    if not isinstance(keys, (list, tuple)):
        keys = [keys]
    keys = [feature_key(k) for k in keys]
    if not keys:
        raise ValueError('{} needs at least one key'.format(name))
    for key in keys:
        if not isinstance(key, str) or not key:
            raise ValueError('{}: bad key {!r}'.format(name, key))
        if any(c in RESERVED_CHARS for c in key):
            oops = '{}: key {!r} may not contain any of {!r}'
            raise ValueError(oops.format(name, key, RESERVED_CHARS))
    return keys


class FeatureExtractor(metaclass=ABCMeta):
    """
    Maps a token (or a context, see `kind`) to zero or more string
    values.

    Attributes
    ----------
    id: string
        stable identifier derived from the configuration; the same
        configuration always gives the same id, and different
        configurations give different ids
    kind: ExtractorKind
    """
    kind = ExtractorKind.token

    @property
    @abstractmethod
    def id(self):
        "stable identifier (part of the feature keys)"
        raise NotImplementedError

    @abstractmethod
    def extract(self, target):
        """
        Parameters
        ----------
        target: Token or Context (depending on `kind`)

        Returns
        -------
        values: [string]
            empty if the feature is absent
        """
        raise NotImplementedError

    @abstractmethod
    def to_config(self):
        """
        Plain dictionary describing this extractor
        (see :py:mod:`wsdfeat.config`)
        """
        raise NotImplementedError

    def __call__(self, target):
        return self.extract(target)

    def __eq__(self, other):
        return (type(self) is type(other) and
                self.to_config() == other.to_config())

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, self.id)


class LookupFeatureExtractor(FeatureExtractor):
    """
    Value of the first of the given keys that is present on the
    token.

    Keys are tried in the order given (the first listed key wins). If
    none of them is present we defer to the fallback extractor, if
    any.

    Parameters
    ----------
    keys: string or FeatureType, or list thereof
    fallback: FeatureExtractor, optional
    """
    def __init__(self, keys, fallback=None):
        self.keys = _lookup_keys(keys, 'LookupFeatureExtractor')
        if fallback is not None and fallback.kind != ExtractorKind.token:
            raise ValueError('A lookup can only fall back to a token '
                             'extractor (got {})'.format(fallback.id))
        self.fallback = fallback
        self._id = 'Lookup({})'.format(','.join(self.keys))
        if fallback is not None:
            self._id += '?' + fallback.id

    @property
    def id(self):
        return self._id

    def extract(self, target):
        for key in self.keys:
            value = target.feature(key)
            if not is_absent(value):
                return [str(value)]
        if self.fallback is not None:
            return self.fallback.extract(target)
        return []

    def to_config(self):
        config = {'type': 'lookup', 'keys': list(self.keys)}
        if self.fallback is not None:
            config['fallback'] = self.fallback.to_config()
        return config


class StringListLookupFeature(FeatureExtractor):
    """
    Elements of the list valued annotations under the given keys,
    each one a separate feature value (in key order, then list order)

    Parameters
    ----------
    keys: string or FeatureType, or list thereof
    """
    def __init__(self, keys):
        self.keys = _lookup_keys(keys, 'StringListLookupFeature')
        self._id = 'ListLookup({})'.format(','.join(self.keys))

    @property
    def id(self):
        return self._id

    def extract(self, target):
        results = []
        for key in self.keys:
            values = target.feature(key)
            if is_absent(values):
                continue
            if isinstance(values, str):
                values = [values]
            results.extend(str(v) for v in values if not is_absent(v))
        return results

    def to_config(self):
        return {'type': 'list_lookup', 'keys': list(self.keys)}


class ConcatenatingFeatureExtractor(FeatureExtractor):
    """
    Joins the values of several extractors into a single value
    (eg. `NN|nsubj` for a POS and a dependency lookup).

    The order of the extractors matters. If one of them produces
    nothing, no value is produced; if some produce several values,
    we take every combination (in order).

    Parameters
    ----------
    extractors: [FeatureExtractor]
        token extractors
    """
    def __init__(self, extractors):
        self.extractors = list(extractors)
        if not self.extractors:
            raise ValueError('ConcatenatingFeatureExtractor needs at '
                             'least one extractor')
        for ext in self.extractors:
            if ext.kind != ExtractorKind.token:
                raise ValueError('Can only concatenate token extractors '
                                 '(got {})'.format(ext.id))
        self._id = KEY_DELIM.join(e.id for e in self.extractors)

    @property
    def id(self):
        return self._id

    def extract(self, target):
        parts = []
        for ext in self.extractors:
            values = ext.extract(target)
            if not values:
                return []
            parts.append(values)
        return [CONCAT_DELIM.join(combo)
                for combo in itertools.product(*parts)]

    def to_config(self):
        return {'type': 'concat',
                'extractors': [e.to_config() for e in self.extractors]}


class JoinedContextExtractor(FeatureExtractor):
    """
    Applies a token extractor to each token of a context and joins
    the results (in token order) into one value, for instance the
    sequence of dependency labels on a root path.

    Tokens for which the inner extractor produces nothing are left
    out; only the first value of each token is used.
    """
    kind = ExtractorKind.context

    def __init__(self, extractor):
        if extractor.kind != ExtractorKind.token:
            raise ValueError('JoinedContextExtractor wraps token '
                             'extractors (got {})'.format(extractor.id))
        self.extractor = extractor
        self._id = 'Joined({})'.format(extractor.id)

    @property
    def id(self):
        return self._id

    def extract(self, target):
        parts = []
        for token in target.tokens:
            values = self.extractor.extract(token)
            if values:
                parts.append(values[0])
        if not parts:
            return []
        return [CONCAT_DELIM.join(parts)]

    def to_config(self):
        return {'type': 'joined',
                'extractor': self.extractor.to_config()}
