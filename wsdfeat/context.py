"""
Context factories: selecting groups of tokens relative to the
focus of an instance
"""

from abc import ABCMeta, abstractmethod
from collections import namedtuple

from .tree import (FeatureType, MalformedTreeError)

# pylint: disable=too-few-public-methods


class Context(namedtuple('Context', 'identifier tokens')):
    """
    An ordered group of tokens, named after the way it was
    derived (eg. `PATH` or `OFFSET[-1,1]`)

    Contexts are computed per instance and thrown away after
    feature extraction
    """
    pass


class ContextFactory(metaclass=ABCMeta):
    """
    Selects zero or more contexts from a focus instance.

    The contexts are returned in an order that only depends on
    the input instance.
    """
    @abstractmethod
    def contexts(self, instance):
        """
        Parameters
        ----------
        instance: FocusInstance

        Returns
        -------
        contexts: [Context]
        """
        raise NotImplementedError

    @abstractmethod
    def identifiers(self):
        """
        Every context identifier this factory could ever emit.

        Feature pipelines use this to detect feature key collisions
        before any extraction happens

        Returns
        -------
        identifiers: [string]
        """
        raise NotImplementedError

    @abstractmethod
    def to_config(self):
        """
        Plain dictionary describing this factory
        (see :py:mod:`wsdfeat.config`)
        """
        raise NotImplementedError

    def __call__(self, instance):
        return self.contexts(instance)

    def __eq__(self, other):
        return (type(self) is type(other) and
                self.to_config() == other.to_config())

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(repr(self))

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, self.identifiers())


class OffsetContextFactory(ContextFactory):
    """
    Tokens found at fixed offsets from the focus token.

    Parameters
    ----------
    offsets: [int]
        offsets relative to the focus (duplicates are ignored,
        offsets are used in ascending order)
    concatenate: bool
        if True, emit a single context with the tokens at all
        offsets, otherwise one context per offset

    Notes
    -----
    Offsets that fall outside the sequence are skipped. In separate
    mode they emit no context; in concatenated mode the context just
    has fewer tokens (and is not emitted at all if none are left).
    """
    KEY = 'OFFSET'

    def __init__(self, offsets, concatenate=False):
        if not isinstance(offsets, (list, tuple)):
            offsets = [offsets]
        for offset in offsets:
            if not isinstance(offset, int) or isinstance(offset, bool):
                raise ValueError('Offsets must be integers '
                                 '(got {!r})'.format(offset))
        self.offsets = sorted(set(offsets))
        self.concatenate = concatenate
        if not self.offsets:
            raise ValueError('OffsetContextFactory needs at least '
                             'one offset')

    @classmethod
    def _identifier(cls, offsets):
        'KEY[o1,o2,...]'
        return '{}[{}]'.format(cls.KEY, ','.join(str(o) for o in offsets))

    def identifiers(self):
        if self.concatenate:
            return [self._identifier(self.offsets)]
        else:
            return [self._identifier([o]) for o in self.offsets]

    def contexts(self, instance):
        tree = instance.tree
        found = []
        for offset in self.offsets:
            index = instance.focus + offset
            if 0 <= index < len(tree):
                found.append((offset, tree[index]))
        if self.concatenate:
            if not found:
                return []
            return [Context(self._identifier(self.offsets),
                            [tok for _, tok in found])]
        else:
            return [Context(self._identifier([offset]), [tok])
                    for offset, tok in found]

    def to_config(self):
        return {'type': 'offset',
                'offsets': list(self.offsets),
                'concatenate': self.concatenate}


class RootPathContextFactory(ContextFactory):
    """
    The path from the focus token up to the root of its
    dependency tree (both ends included)
    """
    KEY = 'PATH'

    def identifiers(self):
        return [self.KEY]

    def contexts(self, instance):
        return [Context(self.KEY, root_path(instance.tree, instance.focus))]

    def to_config(self):
        return {'type': 'root_path'}


def root_path(tree, index):
    """
    Tokens on the head chain from the token at `index` to the root.

    Raises
    ------
    MalformedTreeError
        if the head chain loops or is longer than the tree
    """
    path = [tree[index]]
    seen = set([index])
    while not tree.is_root(index):
        index = tree.head_index(index)
        if index in seen or len(path) >= len(tree):
            oops = 'Root path from token {} does not terminate'
            raise MalformedTreeError(oops.format(path[0].index))
        seen.add(index)
        path.append(tree[index])
    return path


class DepChildrenContextFactory(ContextFactory):
    """
    Dependents of the focus token, optionally filtered on their
    dependency relation

    Parameters
    ----------
    include: [string], optional
        if set, only keep children with one of these relations
    exclude: [string], optional
        drop children with any of these relations
    """
    KEY = 'CHILDREN'

    def __init__(self, include=None, exclude=None):
        for rel in list(include or []) + list(exclude or []):
            if not isinstance(rel, str) or not rel or rel.startswith('-') \
                    or any(c in ',[]' for c in rel):
                raise ValueError('Bad dependency relation for '
                                 'children filter: {!r}'.format(rel))
        self.include = sorted(set(include)) if include else None
        self.exclude = sorted(set(exclude)) if exclude else None

    def _wanted(self, token):
        'relation filter'
        rel = token.feature(FeatureType.Dep)
        if self.include is not None and rel not in self.include:
            return False
        if self.exclude is not None and rel in self.exclude:
            return False
        return True

    def identifiers(self):
        if self.include is None and self.exclude is None:
            return [self.KEY]
        parts = list(self.include or [])
        parts.extend('-' + x for x in self.exclude or [])
        return ['{}[{}]'.format(self.KEY, ','.join(parts))]

    def contexts(self, instance):
        children = [c for c in instance.tree.children(instance.focus)
                    if self._wanted(c)]
        if not children:
            return []
        return [Context(self.identifiers()[0], children)]

    def to_config(self):
        config = {'type': 'children'}
        if self.include is not None:
            config['include'] = list(self.include)
        if self.exclude is not None:
            config['exclude'] = list(self.exclude)
        return config


class FocusContextFactory(ContextFactory):
    """
    Just the focus token
    """
    KEY = 'FOCUS'

    def identifiers(self):
        return [self.KEY]

    def contexts(self, instance):
        return [Context(self.KEY, [instance.token])]

    def to_config(self):
        return {'type': 'focus'}
