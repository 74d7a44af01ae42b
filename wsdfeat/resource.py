"""
Lexical resources (word clusters, synonym lists, ...) read from
tab separated files, and annotators that attach them to tokens.

A resource file has one entry per line: a key followed by any
number of values ::

    run<TAB>run.v.01<TAB>scat.v.01
    dog<TAB>dog.n.01

Annotating happens upstream of feature extraction: the annotator
adds a list valued feature to each token, which a
:py:class:`wsdfeat.extractor.StringListLookupFeature` can then pick
up.
"""

import codecs
import logging

from .tree import (FeatureType, feature_key)

# pylint: disable=too-few-public-methods


class ResourceError(Exception):
    """
    A resource file we could not read
    """
    def __init__(self, msg):
        super(ResourceError, self).__init__(msg)


def _identity(value):
    'default key/value function'
    return value


class TsvResource(object):
    """
    Read-only multimap from keys to lists of values

    Parameters
    ----------
    entries: dict(string, [string])
    key_function: string -> string
        applied to keys on lookup (and on loading)
    """
    def __init__(self, entries, key_function=_identity):
        self._entries = {k: tuple(v) for k, v in entries.items()}
        self.key_function = key_function

    @classmethod
    def read(cls, lines, key_function=_identity, value_function=_identity):
        """
        Build a resource from lines of text; values for repeated
        keys are accumulated in order
        """
        entries = {}
        for lnum, line in enumerate(lines, 1):
            line = line.strip()
            if not line:
                continue
            fields = line.split('\t')
            try:
                key = key_function(fields[0])
                values = [value_function(f) for f in fields[1:]]
            except (TypeError, ValueError) as oops:
                raise ResourceError('Error on resource line {}: '
                                    '{}'.format(lnum, oops))
            entries.setdefault(key, []).extend(values)
        return cls(entries, key_function=key_function)

    @classmethod
    def load(cls, filename, key_function=_identity,
             value_function=_identity):
        """
        Read a resource from a tab separated file

        Raises
        ------
        ResourceError
        """
        try:
            with codecs.open(filename, 'r', 'utf-8') as stream:
                resource = cls.read(stream,
                                    key_function=key_function,
                                    value_function=value_function)
        except (IOError, UnicodeDecodeError) as oops:
            raise ResourceError('Error reading resource {}: '
                                '{}'.format(filename, oops))
        logging.info('read %d entries from %s', len(resource), filename)
        return resource

    def lookup(self, key):
        """
        Values for a key (empty if unknown)
        """
        return list(self._entries.get(self.key_function(key), ()))

    def __contains__(self, key):
        return self.key_function(key) in self._entries

    def __len__(self):
        return len(self._entries)


class ResourceAnnotator(object):
    """
    Adds the values a resource has for each token as a list
    valued feature

    Parameters
    ----------
    resource: TsvResource
    feature: string or FeatureType
        feature under which the values are stored
    key_feature: string or FeatureType
        token feature used as the lookup key
    """
    def __init__(self, resource, feature, key_feature=FeatureType.Lemma):
        self.resource = resource
        self.feature = feature_key(feature)
        self.key_feature = feature_key(key_feature)

    def annotate(self, tree):
        """
        Annotate every token in the tree that has an entry in the
        resource. Returns the number of tokens annotated
        """
        count = 0
        for token in tree:
            key = token.feature(self.key_feature)
            if key is None:
                continue
            values = self.resource.lookup(key)
            if values:
                token.add_feature(self.feature, values)
                count += 1
        return count

    def __call__(self, tree):
        return self.annotate(tree)
