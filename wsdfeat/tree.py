"""
Annotated tokens and dependency trees
"""

from collections import namedtuple
from enum import Enum

# pylint: disable=too-few-public-methods


class MalformedTreeError(Exception):
    """
    A dependency tree that does not respect the structural
    invariants (single root, no cycles, heads in range)
    """
    def __init__(self, msg):
        super(MalformedTreeError, self).__init__(msg)


class FeatureType(Enum):
    '''
    Well-known token annotations. Tokens also accept arbitrary
    string keys for derived or gold annotations
    '''
    Id = 1
    Text = 2
    Lemma = 3
    Pos = 4
    Dep = 5
    Head = 6
    Predicate = 7
    Sense = 8
    Gold = 9
    Cluster = 10
    Synset = 11
    Morph = 12


def feature_key(key):
    """
    Normalise a feature key: a :py:class:`FeatureType` stands for
    its name, anything else is used as is
    """
    if isinstance(key, FeatureType):
        return key.name
    return key


class Token(object):
    """
    A single token within a sequence.

    Parameters
    ----------
    index: int
        position of the token within its sequence (fixed for the
        lifetime of the token)
    features: dict(string, object), optional
        initial annotations
    """
    __slots__ = ('_index', '_features')

    def __init__(self, index, features=None):
        self._index = index
        self._features = {}
        for key, value in (features or {}).items():
            self.add_feature(key, value)

    @property
    def index(self):
        "position within the sequence"
        return self._index

    @property
    def features(self):
        "copy of the annotations on this token"
        return dict(self._features)

    def feature(self, key):
        """
        Value for the given key, or None if the token does not
        carry that annotation
        """
        return self._features.get(feature_key(key))

    def add_feature(self, key, value):
        """
        Add or overwrite an annotation (annotations are never
        removed)
        """
        self._features[feature_key(key)] = value

    def __repr__(self):
        text = self.feature(FeatureType.Text)
        return "Token({}, {!r})".format(self._index, text)


class DepTree(object):
    """
    An ordered sequence of tokens organised as a rooted tree.

    The tree is stored as an arena: each token is addressed by its
    index and `heads[i]` gives the index of the head of token `i`
    (None for the root). Children lists are derived once here; the
    structure cannot be changed afterwards.

    Parameters
    ----------
    tokens: [Token]
        tokens whose indices must match their position
    heads: [int or None]
        head index for each token

    Raises
    ------
    MalformedTreeError
        if there is not exactly one root, a head is out of
        range, or the head relation contains a cycle
    """
    def __init__(self, tokens, heads):
        tokens = list(tokens)
        heads = list(heads)
        if len(tokens) != len(heads):
            oops = ('Got {} tokens but {} heads')
            raise MalformedTreeError(oops.format(len(tokens), len(heads)))
        for i, token in enumerate(tokens):
            if token.index != i:
                oops = 'Token at position {} has index {}'
                raise MalformedTreeError(oops.format(i, token.index))
        self._tokens = tokens
        self._heads = heads
        self._children = [[] for _ in tokens]
        roots = []
        for i, head in enumerate(heads):
            if head is None:
                roots.append(i)
            elif head < 0 or head >= len(tokens) or head == i:
                oops = 'Token {} has an invalid head: {}'
                raise MalformedTreeError(oops.format(i, head))
            else:
                self._children[head].append(i)
        if len(roots) != 1:
            oops = 'A dependency tree needs exactly one root (got {})'
            raise MalformedTreeError(oops.format(roots))
        self._root = roots[0]
        self._check_acyclic()

    def _check_acyclic(self):
        "every token must reach the root"
        reaches_root = set([self._root])
        for start in range(len(self._tokens)):
            seen = []
            node = start
            while node not in reaches_root:
                if node in seen:
                    oops = 'Cycle in dependency tree through token {}'
                    raise MalformedTreeError(oops.format(node))
                seen.append(node)
                node = self._heads[node]
            reaches_root.update(seen)

    @classmethod
    def from_sentence(cls, text, feature=FeatureType.Text):
        """
        Chain tree over the whitespace separated words of `text`
        (each word headed by the previous one)
        """
        words = text.split()
        tokens = [Token(i, {feature: w}) for i, w in enumerate(words)]
        heads = [None] + list(range(len(words) - 1))
        return cls(tokens, heads)

    @property
    def tokens(self):
        "tokens in sequence order"
        return list(self._tokens)

    @property
    def root(self):
        "the root token"
        return self._tokens[self._root]

    def head(self, index):
        """
        Head token of the token at this index, or None for the root
        """
        head = self._heads[index]
        return None if head is None else self._tokens[head]

    def head_index(self, index):
        "index of the head, or None for the root"
        return self._heads[index]

    def children(self, index):
        """
        Dependents of the token at this index in sequence order
        """
        return [self._tokens[i] for i in self._children[index]]

    def is_root(self, index):
        "True if the token at this index is the root"
        return self._heads[index] is None

    def __getitem__(self, index):
        return self._tokens[index]

    def __len__(self):
        return len(self._tokens)

    def __iter__(self):
        return iter(self._tokens)

    def __repr__(self):
        words = [str(t.feature(FeatureType.Text)) for t in self._tokens]
        return "DepTree({})".format(" ".join(words))


class FocusInstance(namedtuple('FocusInstance', 'id tree focus label')):
    """
    Unit of classification: a tree with one designated focus token

    Parameters
    ----------
    id: int
        unique identifier for this instance
    tree: DepTree
    focus: int
        index of the focus token in the tree
    label: string or None
        gold label (eg. a sense), if known
    """
    def __new__(cls, id, tree, focus, label=None):
        # pylint: disable=redefined-builtin
        if focus < 0 or focus >= len(tree):
            oops = 'Focus index {} is outside the tree (size {})'
            raise MalformedTreeError(oops.format(focus, len(tree)))
        return super(FocusInstance, cls).__new__(cls, id, tree, focus, label)

    @property
    def token(self):
        "the focus token"
        return self.tree[self.focus]
