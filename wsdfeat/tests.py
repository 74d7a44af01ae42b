"""
wsdfeat tests
"""

# pylint: disable=too-few-public-methods, no-self-use

import codecs
import io
import json
import os
from os import path as fp
import shutil
import tempfile
import unittest

from joblib import (Parallel, delayed)
import numpy as np

from .config import (DEFAULT_FEATURES,
                     context_from_config,
                     extractor_from_config,
                     load_pipeline_config,
                     pipeline_from_config,
                     save_pipeline_config)
from .context import (DepChildrenContextFactory,
                      FocusContextFactory,
                      OffsetContextFactory,
                      RootPathContextFactory,
                      root_path)
from .extractor import (CONCAT_DELIM,
                        ConcatenatingFeatureExtractor,
                        FeatureExtractor,
                        JoinedContextExtractor,
                        LookupFeatureExtractor,
                        StringListLookupFeature)
from .io import (ArtifactFormatError,
                 Torpor,
                 feature_model_to_dict,
                 load_feature_model,
                 save_feature_model)
from .pipeline import (FeaturePipeline,
                       PipelineConfigurationError,
                       symbolic_feature)
from .resource import (ResourceAnnotator, ResourceError, TsvResource)
from .table import (SparseInstance,
                    dump_svmlight,
                    from_csr_matrix,
                    load_svmlight,
                    to_csr_matrix)
from .tree import (DepTree,
                   FeatureType,
                   FocusInstance,
                   MalformedTreeError,
                   Token)
from .vocab import (ABSENT,
                    FeatureModel,
                    FrozenVocabularyError,
                    Vocabulary)


def mk_instance(text, focus, inst_id=0, label=None):
    """
    Focus instance over a chain tree of the words in `text`
    """
    return FocusInstance(inst_id, DepTree.from_sentence(text), focus, label)


def mk_token(index=0, **features):
    'token with the given features'
    return Token(index, features)


def indices(tokens):
    'token indices'
    return [t.index for t in tokens]


class BoomExtractor(FeatureExtractor):
    """
    Text lookup that blows up on the word 'boom'
    """
    @property
    def id(self):
        return 'Boom'

    def extract(self, target):
        text = target.feature(FeatureType.Text)
        if text == 'boom':
            raise RuntimeError('boom')
        return [text]

    def to_config(self):
        return {'type': 'boom'}


class TreeTest(unittest.TestCase):
    '''
    tokens and dependency trees
    '''
    def test_token_features(self):
        'feature types and strings are the same keys'
        tok = Token(3)
        self.assertEqual(3, tok.index)
        self.assertIsNone(tok.feature(FeatureType.Lemma))
        tok.add_feature(FeatureType.Lemma, 'cat')
        self.assertEqual('cat', tok.feature('Lemma'))
        tok.add_feature('Lemma', 'dog')
        self.assertEqual('dog', tok.feature(FeatureType.Lemma))
        self.assertEqual({'Lemma': 'dog'}, tok.features)

    def test_structure(self):
        'heads and children agree'
        tokens = [Token(i) for i in range(4)]
        tree = DepTree(tokens, [1, None, 1, 2])
        self.assertEqual(1, tree.root.index)
        self.assertTrue(tree.is_root(1))
        self.assertEqual([0, 2], indices(tree.children(1)))
        self.assertEqual([3], indices(tree.children(2)))
        self.assertEqual([], indices(tree.children(3)))
        self.assertEqual(2, tree.head(3).index)
        self.assertIsNone(tree.head(1))
        for tok in tree:
            for child in tree.children(tok.index):
                self.assertEqual(tok.index, tree.head_index(child.index))

    def test_malformed(self):
        'bad trees are rejected at construction'
        tokens = [Token(i) for i in range(3)]
        self.assertRaises(MalformedTreeError, DepTree, tokens,
                          [None, None, 0])
        self.assertRaises(MalformedTreeError, DepTree, tokens,
                          [0, 1, 2])
        self.assertRaises(MalformedTreeError, DepTree, tokens,
                          [None, 2, 1])
        self.assertRaises(MalformedTreeError, DepTree, tokens,
                          [None, 1, 0])
        self.assertRaises(MalformedTreeError, DepTree, tokens,
                          [None, 0, 7])
        self.assertRaises(MalformedTreeError, DepTree, tokens,
                          [None, 0])
        self.assertRaises(MalformedTreeError, DepTree,
                          [Token(1), Token(0)], [None, 0])

    def test_focus_bounds(self):
        'focus must be in the tree'
        tree = DepTree.from_sentence('a b c')
        self.assertRaises(MalformedTreeError, FocusInstance, 0, tree, 3)
        inst = FocusInstance(0, tree, 2)
        self.assertEqual('c', inst.token.feature(FeatureType.Text))
        self.assertIsNone(inst.label)


class ContextTest(unittest.TestCase):
    '''
    context factories
    '''
    instance = mk_instance('0 1 2 3 4 5 6', 3)

    def test_focus_offset(self):
        'offset 0 is the focus'
        contexts = OffsetContextFactory(0).contexts(self.instance)
        self.assertEqual(1, len(contexts))
        self.assertEqual('OFFSET[0]', contexts[0].identifier)
        self.assertEqual([3], indices(contexts[0].tokens))

    def test_separate(self):
        'one context per offset'
        contexts = OffsetContextFactory([1, -1]).contexts(self.instance)
        self.assertEqual(['OFFSET[-1]', 'OFFSET[1]'],
                         [c.identifier for c in contexts])
        self.assertEqual([[2], [4]], [indices(c.tokens) for c in contexts])

    def test_concatenated(self):
        'one context, tokens in ascending offset order'
        factory = OffsetContextFactory([1, -1], concatenate=True)
        contexts = factory.contexts(self.instance)
        self.assertEqual(1, len(contexts))
        self.assertEqual('OFFSET[-1,1]', contexts[0].identifier)
        self.assertEqual([2, 4], indices(contexts[0].tokens))

    def test_out_of_bounds(self):
        'offsets outside the sentence are skipped'
        self.assertEqual([], OffsetContextFactory(-100)(self.instance))
        self.assertEqual([], OffsetContextFactory(
            -100, concatenate=True)(self.instance))
        contexts = OffsetContextFactory([-100, 1, 4])(self.instance)
        self.assertEqual(['OFFSET[1]'], [c.identifier for c in contexts])
        factory = OffsetContextFactory([-4, -3, 3, 4], concatenate=True)
        contexts = factory(self.instance)
        self.assertEqual(1, len(contexts))
        self.assertEqual('OFFSET[-4,-3,3,4]', contexts[0].identifier)
        self.assertEqual([0, 6], indices(contexts[0].tokens))

    def test_identifiers(self):
        'identifiers are known before extraction'
        self.assertEqual(['OFFSET[-1]', 'OFFSET[1]'],
                         OffsetContextFactory([1, -1, 1]).identifiers())
        self.assertEqual(['OFFSET[-1,1]'],
                         OffsetContextFactory([1, -1],
                                              concatenate=True).identifiers())
        self.assertEqual(['PATH'], RootPathContextFactory().identifiers())

    def test_bad_factories(self):
        'misconfigured factories fail on construction'
        for offsets in [[-1.0], [1, '2'], [True], 0.5]:
            self.assertRaises(ValueError, OffsetContextFactory, offsets)
        self.assertRaises(ValueError, OffsetContextFactory, [])
        # these would give 'CHILDREN[-x]' both ways
        self.assertRaises(ValueError, DepChildrenContextFactory,
                          include=['-x'])
        for rel in ['a,b', 'x]', '', 3]:
            self.assertRaises(ValueError, DepChildrenContextFactory,
                              exclude=[rel])

    def test_root_path(self):
        'the path goes from the focus up to the root'
        inst = mk_instance('a b c d', 3)
        contexts = RootPathContextFactory().contexts(inst)
        self.assertEqual(1, len(contexts))
        self.assertEqual('PATH', contexts[0].identifier)
        self.assertEqual([3, 2, 1, 0], indices(contexts[0].tokens))
        root = mk_instance('a b c d', 0)
        self.assertEqual([0], indices(RootPathContextFactory()(root)[0].tokens))

    def test_root_path_cycle(self):
        'a looping head chain fails instead of hanging'
        class LoopyTree(object):
            'two tokens heading each other'
            tokens = [Token(0), Token(1)]

            def __len__(self):
                return 2

            def __getitem__(self, index):
                return self.tokens[index]

            def is_root(self, _):
                'nobody is'
                return False

            def head_index(self, index):
                'the other one'
                return 1 - index

        self.assertRaises(MalformedTreeError, root_path, LoopyTree(), 0)

    def test_children(self):
        'dependents of the focus, filtered on relation'
        tokens = [Token(0, {'Dep': 'nsubj'}),
                  Token(1, {'Dep': 'root'}),
                  Token(2, {'Dep': 'dobj'}),
                  Token(3, {'Dep': 'punct'})]
        inst = FocusInstance(0, DepTree(tokens, [1, None, 1, 1]), 1)
        contexts = DepChildrenContextFactory()(inst)
        self.assertEqual(['CHILDREN'], [c.identifier for c in contexts])
        self.assertEqual([0, 2, 3], indices(contexts[0].tokens))
        factory = DepChildrenContextFactory(exclude=['punct'])
        contexts = factory(inst)
        self.assertEqual(['CHILDREN[-punct]'], [c.identifier for c in contexts])
        self.assertEqual([0, 2], indices(contexts[0].tokens))
        factory = DepChildrenContextFactory(include=['dobj'])
        self.assertEqual([2], indices(factory(inst)[0].tokens))
        leaf = FocusInstance(1, inst.tree, 2)
        self.assertEqual([], DepChildrenContextFactory()(leaf))

    def test_focus(self):
        'just the focus'
        contexts = FocusContextFactory()(self.instance)
        self.assertEqual([('FOCUS', [3])],
                         [(c.identifier, indices(c.tokens)) for c in contexts])


class ExtractorTest(unittest.TestCase):
    '''
    feature extractors
    '''
    def test_lookup(self):
        'plain lookup'
        ext = LookupFeatureExtractor(FeatureType.Text)
        self.assertEqual(['cat'], ext.extract(mk_token(Text='cat')))
        self.assertEqual([], ext.extract(mk_token(Lemma='cat')))

    def test_fallback(self):
        'falls back on the second extractor'
        ext = LookupFeatureExtractor([FeatureType.Text],
                                     LookupFeatureExtractor(FeatureType.Lemma))
        self.assertEqual(['cat'], ext.extract(mk_token(Lemma='cat')))
        self.assertEqual(['cats'],
                         ext.extract(mk_token(Text='cats', Lemma='cat')))

    def test_multiple(self):
        'the first key present wins'
        ext = LookupFeatureExtractor(['Text', 'Lemma', 'Pos'])
        self.assertEqual(['cat'], ext.extract(mk_token(Lemma='cat', Pos='NN')))

    def test_empty_is_absent(self):
        'empty values are not features'
        ext = LookupFeatureExtractor(['Text', 'Lemma'])
        self.assertEqual(['cat'], ext.extract(mk_token(Text='', Lemma='cat')))
        self.assertEqual([], ext.extract(mk_token(Text='', Lemma=[])))

    def test_ids(self):
        'same configuration, same id'
        self.assertEqual('Lookup(Text)',
                         LookupFeatureExtractor(FeatureType.Text).id)
        self.assertEqual(LookupFeatureExtractor(['Text']).id,
                         LookupFeatureExtractor(FeatureType.Text).id)
        with_fallback = LookupFeatureExtractor(
            'Text', LookupFeatureExtractor('Lemma'))
        self.assertNotEqual(LookupFeatureExtractor('Text').id,
                            with_fallback.id)
        self.assertNotEqual(LookupFeatureExtractor(['Text', 'Lemma']).id,
                            LookupFeatureExtractor(['Lemma', 'Text']).id)
        self.assertNotEqual(LookupFeatureExtractor('Synset').id,
                            StringListLookupFeature('Synset').id)
        self.assertEqual(LookupFeatureExtractor('Text'),
                         LookupFeatureExtractor(FeatureType.Text))
        self.assertEqual('Lookup(a,b)',
                         LookupFeatureExtractor(['a', 'b']).id)
        for key in ['a,b', 'a)', 'a?b', 'a&b', 'x[0]', 'a=b', 'a|b', '']:
            self.assertRaises(ValueError, LookupFeatureExtractor, [key])
            self.assertRaises(ValueError, StringListLookupFeature, [key])

    def test_fallback_kind(self):
        'a lookup falls back on tokens, not contexts'
        joined = JoinedContextExtractor(LookupFeatureExtractor('Dep'))
        self.assertRaises(ValueError, LookupFeatureExtractor, 'Text',
                          joined)

    def test_concatenate(self):
        'values are joined in extractor order'
        ext = ConcatenatingFeatureExtractor(
            [LookupFeatureExtractor(FeatureType.Pos),
             LookupFeatureExtractor(FeatureType.Dep)])
        tok = mk_token(Pos='NN', Dep='nsubj')
        self.assertEqual(['NN{}nsubj'.format(CONCAT_DELIM)], ext.extract(tok))
        rev = ConcatenatingFeatureExtractor(
            [LookupFeatureExtractor(FeatureType.Dep),
             LookupFeatureExtractor(FeatureType.Pos)])
        self.assertEqual(['nsubj{}NN'.format(CONCAT_DELIM)], rev.extract(tok))
        self.assertNotEqual(ext.id, rev.id)
        self.assertEqual([], ext.extract(mk_token(Pos='NN')))

    def test_concatenate_lists(self):
        'multi-valued parts give every combination'
        ext = ConcatenatingFeatureExtractor(
            [LookupFeatureExtractor('Pos'), StringListLookupFeature('Synset')])
        tok = mk_token(Pos='VB', Synset=['run.v.01', 'run.v.02'])
        self.assertEqual(['VB|run.v.01', 'VB|run.v.02'], ext.extract(tok))

    def test_string_list(self):
        'every element is a separate value, in key order'
        ext = StringListLookupFeature(['Cluster', 'Synset'])
        tok = mk_token(Synset=['a', 'b'], Cluster=['c'])
        self.assertEqual(['c', 'a', 'b'], ext.extract(tok))
        self.assertEqual([], ext.extract(mk_token(Synset=[])))
        self.assertEqual([], ext.extract(mk_token()))

    def test_joined(self):
        'joins token values over a whole context'
        tokens = [Token(0, {'Dep': 'root'}),
                  Token(1, {'Dep': 'dobj'}),
                  Token(2, {'Dep': 'amod'})]
        inst = FocusInstance(0, DepTree(tokens, [None, 0, 1]), 2)
        context = RootPathContextFactory()(inst)[0]
        ext = JoinedContextExtractor(LookupFeatureExtractor('Dep'))
        self.assertEqual(['amod|dobj|root'], ext.extract(context))
        self.assertEqual('Joined(Lookup(Dep))', ext.id)
        self.assertRaises(ValueError, JoinedContextExtractor, ext)


class VocabularyTest(unittest.TestCase):
    '''
    feature models
    '''
    def test_first_seen_order(self):
        'indices follow first-seen order'
        vocab = Vocabulary()
        self.assertEqual(0, vocab.index_of('b'))
        self.assertEqual(1, vocab.index_of('a'))
        self.assertEqual(0, vocab.index_of('b'))
        self.assertEqual(['b', 'a'], vocab.keys())
        self.assertEqual('a', vocab.key(1))
        self.assertEqual(ABSENT, vocab.get('c'))
        self.assertEqual(2, len(vocab))

    def test_freeze(self):
        'frozen vocabularies do not grow'
        vocab = Vocabulary(['x', 'y'])
        vocab.freeze()
        self.assertTrue(vocab.frozen)
        self.assertEqual(1, vocab.index_of('y'))
        self.assertEqual(ABSENT, vocab.index_of('z'))
        self.assertNotIn('z', vocab)
        self.assertRaises(FrozenVocabularyError, vocab.add, 'z')
        self.assertEqual(0, vocab.add('x'))
        self.assertEqual(2, len(vocab))

    def test_copy(self):
        'copies are independent'
        vocab = Vocabulary(['x'])
        clone = vocab.copy()
        clone.add('y')
        self.assertEqual(1, len(vocab))
        self.assertEqual(['x', 'y'], clone.keys())


class IoTest(unittest.TestCase):
    '''
    saving and loading feature models
    '''
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def _write(self, blob):
        'dump some json'
        filename = fp.join(self.tmp_dir, 'model.json')
        with codecs.open(filename, 'w', 'utf-8') as stream:
            if isinstance(blob, str):
                stream.write(blob)
            else:
                json.dump(blob, stream)
        return filename

    def test_round_trip(self):
        'indices survive freezing and saving'
        model = FeatureModel()
        keys = ['Lookup(Text)OFFSET[0]=3', u'Lookup(Text)PATH=caf\xe9',
                'a\tb', 'a\nb']
        before = [model.feature_index(k) for k in keys]
        model.label_index('sense.01')
        model.freeze()
        self.assertEqual(before, [model.feature_index(k) for k in keys])
        filename = fp.join(self.tmp_dir, 'model.json')
        save_feature_model(model, filename)
        model2 = load_feature_model(filename)
        self.assertEqual(model, model2)
        self.assertTrue(model2.frozen)
        self.assertEqual(before, [model2.feature_index(k) for k in keys])
        self.assertEqual(ABSENT, model2.feature_index('unseen'))

    def test_corrupt(self):
        'bad artifacts are rejected on load'
        good = feature_model_to_dict(FeatureModel(Vocabulary(['a', 'b'])))
        self.assertEqual(['a', 'b'],
                         load_feature_model(self._write(good)).features.keys())
        self.assertRaises(ArtifactFormatError, load_feature_model,
                          self._write('{"format": '))
        self.assertRaises(ArtifactFormatError, load_feature_model,
                          self._write([1, 2, 3]))
        for field, value in [('format', 'something.else'),
                             ('version', 99),
                             ('version', True),
                             ('version', '1'),
                             ('version', 1.0),
                             ('frozen', None),
                             ('features', {'a': 0}),
                             ('features', ['a', 'a']),
                             ('labels', [1])]:
            blob = dict(good)
            blob[field] = value
            self.assertRaises(ArtifactFormatError, load_feature_model,
                              self._write(blob))

    def test_torpor(self):
        'slow steps are announced and timed'
        out = io.StringIO()
        with Torpor('Counting sheep', stream=out) as step:
            pass
        self.assertTrue(out.getvalue().startswith('Counting sheep... done ['))
        self.assertGreaterEqual(step.elapsed, 0)
        out = io.StringIO()
        with self.assertRaises(KeyError):
            with Torpor('Counting goats', stream=out):
                raise KeyError('goat')
        self.assertEqual('Counting goats... ERROR! (KeyError)\n',
                         out.getvalue())
        out = io.StringIO()
        with Torpor('Counting quietly', quiet=True, stream=out) as step:
            pass
        self.assertEqual('', out.getvalue())
        self.assertIsNotNone(step.elapsed)


class PipelineTest(unittest.TestCase):
    '''
    feature pipelines
    '''
    text_lookup = LookupFeatureExtractor(FeatureType.Text)
    corpus = [mk_instance('the cat sat on the mat', 2, 10, 'sit'),
              mk_instance('a dog ran to the park', 2, 11, 'move'),
              mk_instance('the cat ran on the mat', 2, 12, 'move'),
              mk_instance('a dog sat in a park', 2, 13, 'sit')]

    def mk_pipeline(self, **kwargs):
        'pipeline with a few different bindings'
        return FeaturePipeline(
            [(OffsetContextFactory([-1, 1]), self.text_lookup),
             (OffsetContextFactory([-2, -1, 1, 2], concatenate=True),
              self.text_lookup),
             (RootPathContextFactory(),
              JoinedContextExtractor(self.text_lookup))],
            **kwargs)

    def test_end_to_end(self):
        'single binding, single feature'
        pipeline = FeaturePipeline([(OffsetContextFactory(0),
                                     self.text_lookup)])
        inst = mk_instance('0 1 2 3 4 5 6', 3)
        self.assertEqual([('Lookup(Text)OFFSET[0]', '3')],
                         pipeline.extract(inst))
        [sparse] = pipeline.train([inst])
        key = symbolic_feature('Lookup(Text)OFFSET[0]', '3')
        index = pipeline.model.features.get(key)
        self.assertNotEqual(ABSENT, index)
        self.assertEqual([(index, 1.0)], list(sparse.items()))
        self.assertEqual(0, sparse.id)
        self.assertEqual(ABSENT, sparse.target)

    def test_bag_of_words(self):
        'token extractors fire on every token of a context'
        pipeline = self.mk_pipeline()
        feats = pipeline.extract(self.corpus[0])
        window = [v for k, v in feats
                  if k == 'Lookup(Text)OFFSET[-2,-1,1,2]']
        self.assertEqual(['the', 'cat', 'on', 'the'], window)
        path = [v for k, v in feats if k == 'Joined(Lookup(Text))PATH']
        self.assertEqual(['sat|cat|the'], path)

    def test_determinism(self):
        'same corpus, same model, same instances'
        pipe1 = self.mk_pipeline()
        pipe2 = self.mk_pipeline()
        res1 = pipe1.train(self.corpus)
        res2 = pipe2.train(self.corpus)
        self.assertEqual(pipe1.model, pipe2.model)
        self.assertEqual(res1, res2)
        self.assertEqual([0, 1, 2, 3], [x.id for x in res1])
        self.assertEqual([0, 1, 1, 0], [x.target for x in res1])
        self.assertEqual(['sit', 'move'], pipe1.model.labels.keys())
        self.assertTrue(pipe1.model.frozen)

    def test_parallel_training(self):
        'parallel extraction does not change the outcome'
        pipe1 = self.mk_pipeline()
        pipe2 = self.mk_pipeline(n_jobs=2, backend='threading')
        self.assertEqual(pipe1.train(self.corpus), pipe2.train(self.corpus))
        self.assertEqual(pipe1.model, pipe2.model)

    def test_process(self):
        'inference never grows the model'
        pipeline = self.mk_pipeline()
        training = pipeline.train(self.corpus)
        size = len(pipeline.model.features)
        self.assertEqual(training[0].indices,
                         pipeline.process(self.corpus[0]).indices)
        novel = mk_instance('the zebra sat on the mat', 2, 99, 'unheard')
        sparse = pipeline.process(novel)
        self.assertEqual(size, len(pipeline.model.features))
        self.assertEqual(99, sparse.id)
        self.assertEqual(ABSENT, sparse.target)
        known = pipeline.model.features.get(
            symbolic_feature('Lookup(Text)OFFSET[1]', 'on'))
        self.assertIn(known, sparse.indices)
        for index in sparse.indices:
            self.assertLess(index, size)
        self.assertEqual(list(sorted(sparse.indices)), list(sparse.indices))

    def test_process_untrained(self):
        'processing before training does not allocate'
        pipeline = self.mk_pipeline()
        sparse = pipeline.process(self.corpus[0])
        self.assertEqual(0, len(sparse))
        self.assertEqual(0, len(pipeline.model.features))
        self.assertFalse(pipeline.model.frozen)

    def test_concurrent_process(self):
        'frozen pipelines can be shared between threads'
        pipeline = self.mk_pipeline()
        pipeline.train(self.corpus)
        expected = [pipeline.process(x) for x in self.corpus * 5]
        got = Parallel(n_jobs=4, backend='threading')(
            delayed(pipeline.process)(x) for x in self.corpus * 5)
        self.assertEqual(expected, got)
        self.assertEqual(expected[:4], pipeline.process_all(self.corpus))

    def test_train_twice(self):
        'a trained model is frozen for good'
        pipeline = self.mk_pipeline()
        pipeline.train(self.corpus)
        self.assertRaises(FrozenVocabularyError, pipeline.train, self.corpus)

    def test_failed_training(self):
        'a failure leaves the model untouched'
        pipeline = FeaturePipeline([(OffsetContextFactory([-1, 0, 1]),
                                     BoomExtractor())])
        corpus = self.corpus + [mk_instance('it went boom', 1)]
        self.assertRaises(RuntimeError, pipeline.train, corpus)
        self.assertFalse(pipeline.model.frozen)
        self.assertEqual(0, len(pipeline.model.features))
        pipeline.train(self.corpus)
        self.assertTrue(pipeline.model.frozen)

    def test_collisions(self):
        'colliding bindings are rejected up front'
        self.assertRaises(PipelineConfigurationError, FeaturePipeline,
                          [(OffsetContextFactory(0), self.text_lookup),
                           (OffsetContextFactory(0), self.text_lookup)])
        self.assertRaises(PipelineConfigurationError, FeaturePipeline,
                          [(OffsetContextFactory([0, 1]), self.text_lookup),
                           (OffsetContextFactory(1), self.text_lookup)])
        self.assertRaises(PipelineConfigurationError, FeaturePipeline,
                          [(OffsetContextFactory(0),
                            LookupFeatureExtractor('Text')),
                           (OffsetContextFactory(0),
                            LookupFeatureExtractor(FeatureType.Text))])
        # different extractors or contexts are fine
        pipeline = FeaturePipeline(
            [(OffsetContextFactory([0, 1]), self.text_lookup),
             (OffsetContextFactory([0, 1], concatenate=True),
              self.text_lookup),
             (OffsetContextFactory([0, 1]), LookupFeatureExtractor('Lemma'))])
        self.assertEqual(5, len(pipeline.keys()))

    def test_bad_bindings(self):
        'bindings must be (factory, extractor) pairs'
        self.assertRaises(PipelineConfigurationError, FeaturePipeline, [])
        self.assertRaises(PipelineConfigurationError, FeaturePipeline,
                          [(self.text_lookup, OffsetContextFactory(0))])
        self.assertRaises(PipelineConfigurationError, FeaturePipeline,
                          [(OffsetContextFactory(0),)])


class TableTest(unittest.TestCase):
    '''
    sparse instances
    '''
    instances = [SparseInstance.from_dict(0, 1, {5: 1, 2: 1}),
                 SparseInstance.from_dict(1, 0, {0: 2.5}),
                 SparseInstance.from_dict(2, 1, {1: 1, 4: 1, 5: 1})]

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_sparse_instance(self):
        'ascending order, implicit zeros'
        inst = self.instances[0]
        self.assertEqual([(2, 1.0), (5, 1.0)], list(inst.items()))
        self.assertEqual(1.0, inst.get(5))
        self.assertEqual(0.0, inst.get(3))
        self.assertEqual(2, len(inst))

    def test_matrix(self):
        'conversion to and from csr matrices'
        data = to_csr_matrix(self.instances, 6)
        self.assertEqual((3, 6), data.shape)
        self.assertEqual([[0, 0, 1, 0, 0, 1],
                          [2.5, 0, 0, 0, 0, 0],
                          [0, 1, 0, 0, 1, 1]],
                         data.toarray().tolist())
        back = from_csr_matrix(data, np.array([1, 0, 1]))
        self.assertEqual(self.instances, back)

    def test_svmlight(self):
        'svmlight files'
        filename = fp.join(self.tmp_dir, 'feats.svmlight')
        dump_svmlight(self.instances, 6, filename)
        self.assertTrue(os.path.exists(filename))
        self.assertEqual(self.instances, load_svmlight(filename, 6))


class ConfigTest(unittest.TestCase):
    '''
    declarative pipeline configuration
    '''
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_round_trip(self):
        'configurations rebuild the same objects'
        pipeline = pipeline_from_config(DEFAULT_FEATURES)
        config = pipeline.to_config()
        self.assertEqual(config, pipeline_from_config(config).to_config())
        self.assertEqual(pipeline.keys(), pipeline_from_config(config).keys())
        for binding in pipeline.bindings:
            self.assertEqual(binding.factory,
                             context_from_config(binding.factory.to_config()))
            self.assertEqual(binding.extractor,
                             extractor_from_config(
                                 binding.extractor.to_config()))

    def test_default_features(self):
        'the default configuration runs'
        tokens = [Token(0, {'Text': 'He', 'Lemma': 'he', 'Pos': 'PRP',
                            'Dep': 'nsubj'}),
                  Token(1, {'Text': 'ran', 'Lemma': 'run', 'Pos': 'VBD',
                            'Dep': 'root', 'Synset': ['run.v.01']}),
                  Token(2, {'Text': 'home', 'Lemma': 'home', 'Pos': 'NN',
                            'Dep': 'advmod'}),
                  Token(3, {'Text': '.', 'Lemma': '.', 'Pos': '.',
                            'Dep': 'punct'})]
        inst = FocusInstance(0, DepTree(tokens, [1, None, 1, 1]), 1, 'run.01')
        pipeline = pipeline_from_config(DEFAULT_FEATURES)
        feats = dict(pipeline.extract(inst))
        self.assertEqual('run', feats['Lookup(Lemma)?Lookup(Text)FOCUS'])
        self.assertEqual('VBD|root', feats['Lookup(Pos)&Lookup(Dep)FOCUS'])
        self.assertEqual('run.v.01', feats['ListLookup(Cluster,Synset)FOCUS'])
        self.assertEqual('root', feats['Joined(Lookup(Dep))PATH'])
        [sparse] = pipeline.train([inst])
        self.assertEqual(len(pipeline.extract(inst)), len(sparse))

    def test_files(self):
        'configurations go through JSON files'
        filename = fp.join(self.tmp_dir, 'features.json')
        save_pipeline_config(DEFAULT_FEATURES, filename)
        self.assertEqual(DEFAULT_FEATURES, load_pipeline_config(filename))
        with codecs.open(filename, 'w', 'utf-8') as stream:
            stream.write('[{')
        self.assertRaises(PipelineConfigurationError,
                          load_pipeline_config, filename)
        with open(filename, 'wb') as stream:
            stream.write(b'[\xff\xfe]')
        self.assertRaises(PipelineConfigurationError,
                          load_pipeline_config, filename)

    def test_bad_config(self):
        'unknown or incomplete entries are configuration errors'
        lookup = {'type': 'lookup', 'keys': ['Text']}
        bad = [{'context': {'type': 'nowhere'}, 'extractor': lookup},
               {'context': {'type': 'offset'}, 'extractor': lookup},
               {'context': {'type': 'offset', 'offsets': []},
                'extractor': lookup},
               {'context': {'type': 'focus'}, 'extractor': {'keys': []}},
               {'context': {'type': 'focus'},
                'extractor': {'type': 'concat', 'extractors': []}},
               {'context': {'type': 'offset', 'offsets': [-1.0]},
                'extractor': lookup},
               {'context': {'type': 'offset', 'offsets': [True]},
                'extractor': lookup},
               {'context': {'type': 'children', 'exclude': ['a,b']},
                'extractor': lookup},
               {'context': {'type': 'focus'},
                'extractor': {'type': 'lookup', 'keys': ['a,b']}},
               {'context': {'type': 'focus'},
                'extractor': {'type': 'lookup', 'keys': ['Text'],
                              'fallback': {'type': 'joined',
                                           'extractor': lookup}}},
               {'context': {'type': 'focus'}},
               'focus']
        for entry in bad:
            self.assertRaises(PipelineConfigurationError,
                              pipeline_from_config, [entry])
        self.assertRaises(PipelineConfigurationError,
                          pipeline_from_config, {'context': 'focus'})


class ResourceTest(unittest.TestCase):
    '''
    lexical resources
    '''
    lines = ['run\trun.v.01\trun.v.02',
             '',
             'Run\trun.v.03',
             'dog\tdog.n.01']

    def test_read(self):
        'keys accumulate values in order'
        res = TsvResource.read(self.lines, key_function=lambda x: x.lower())
        self.assertEqual(['run.v.01', 'run.v.02', 'run.v.03'],
                         res.lookup('RUN'))
        self.assertEqual([], res.lookup('cat'))
        self.assertIn('Dog', res)
        self.assertEqual(2, len(res))

    def test_annotate(self):
        'annotations feed string list lookups'
        res = TsvResource.read(self.lines)
        tree = DepTree([Token(0, {'Lemma': 'dog'}),
                        Token(1, {'Lemma': 'run'}),
                        Token(2, {'Lemma': 'home'}),
                        Token(3)],
                       [1, None, 1, 1])
        annotator = ResourceAnnotator(res, FeatureType.Synset)
        self.assertEqual(2, annotator(tree))
        ext = StringListLookupFeature(FeatureType.Synset)
        self.assertEqual(['run.v.01', 'run.v.02'], ext.extract(tree[1]))
        self.assertEqual([], ext.extract(tree[2]))

    def test_missing_file(self):
        'unreadable resources'
        self.assertRaises(ResourceError, TsvResource.load,
                          '/nonexistent/resource.tsv')
        self.assertRaises(ResourceError, TsvResource.read,
                          ['x\t1\ty'], value_function=int)
