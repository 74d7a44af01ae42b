"""
wsdfeat.learning tests (and the model bundle built on top)
"""

# pylint: disable=too-few-public-methods

import shutil
import tempfile
import unittest

from sklearn.svm import LinearSVC

from wsdfeat.context import OffsetContextFactory
from wsdfeat.extractor import LookupFeatureExtractor
from wsdfeat.model import SenseModel
from wsdfeat.pipeline import FeaturePipeline
from wsdfeat.report import (discriminating_features,
                            show_discriminating_features)
from wsdfeat.table import SparseInstance
from wsdfeat.tree import (DepTree, FeatureType, FocusInstance)
from wsdfeat.vocab import ABSENT

from .local import SklearnClassifier

TRAINING = [('they run the company', 'manage'),
            ('we run the business', 'manage'),
            ('i run the company', 'manage'),
            ('you run the firm', 'manage'),
            ('they run the marathon', 'move'),
            ('we run the race', 'move'),
            ('i run the race', 'move'),
            ('you run the marathon', 'move')]


def mk_corpus(pairs, start=0):
    'focus instances on the verb (second word)'
    return [FocusInstance(start + i, DepTree.from_sentence(text), 1, label)
            for i, (text, label) in enumerate(pairs)]


def mk_pipeline():
    'the two words after the verb, as a bag'
    return FeaturePipeline(
        [(OffsetContextFactory([1, 2], concatenate=True),
          LookupFeatureExtractor(FeatureType.Text))])


class ClassifierTest(unittest.TestCase):
    '''
    the sklearn wrapper on its own
    '''
    instances = [SparseInstance.from_dict(0, 0, {0: 1, 1: 1}),
                 SparseInstance.from_dict(1, 0, {0: 1}),
                 SparseInstance.from_dict(2, 1, {2: 1, 3: 1}),
                 SparseInstance.from_dict(3, 1, {3: 1})]

    def test_probabilities(self):
        'logistic regression gives a distribution'
        clf = SklearnClassifier().train(self.instances, 4)
        self.assertTrue(clf.can_predict_proba)
        self.assertEqual(0, clf.classify(self.instances[1]))
        self.assertEqual(1, clf.classify(self.instances[3]))
        scores = clf.score(self.instances[0])
        self.assertEqual([0, 1], sorted(scores))
        self.assertAlmostEqual(1.0, sum(scores.values()))
        self.assertGreater(scores[0], scores[1])
        self.assertEqual([0, 0, 1, 1], clf.classify_all(self.instances))

    def test_decision_function(self):
        'learners without probabilities still give scores'
        clf = SklearnClassifier(LinearSVC()).train(self.instances, 4)
        self.assertFalse(clf.can_predict_proba)
        scores = clf.score(self.instances[2])
        self.assertEqual([0, 1], sorted(scores))
        self.assertGreater(scores[1], scores[0])

    def test_important_features(self):
        'features with the biggest weights for each class'
        clf = SklearnClassifier().train(self.instances, 4)
        best = clf.important_features(1)
        self.assertEqual([0, 1], sorted(best))
        self.assertEqual(0, best[0][0][0])
        self.assertEqual(3, best[1][0][0])

    def test_bad_input(self):
        'refuse to work blind'
        clf = SklearnClassifier()
        self.assertRaises(ValueError, clf.classify, self.instances[0])
        self.assertRaises(ValueError, clf.train, [], 4)
        unknown = SparseInstance.from_dict(9, ABSENT, {0: 1})
        self.assertRaises(ValueError, clf.train,
                          self.instances + [unknown], 4)


class SenseModelTest(unittest.TestCase):
    '''
    pipeline and classifier together
    '''
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.model = SenseModel(mk_pipeline()).train(mk_corpus(TRAINING))

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_predict(self):
        'predictions come back as labels'
        test = mk_corpus([('he run the company', 'manage'),
                          ('she run the race', 'move')], start=100)
        self.assertEqual('manage', self.model.predict(test[0]))
        self.assertEqual('move', self.model.predict(test[1]))
        self.assertEqual(['manage', 'move'], self.model.predict_all(test))
        scores = self.model.predict_scores(test[0])
        self.assertEqual(['manage', 'move'], sorted(scores))
        self.assertGreater(scores['manage'], scores['move'])

    def test_unseen(self):
        'nothing the model has seen before'
        [inst] = mk_corpus([('xx yy zz ww', None)])
        self.assertIn(self.model.predict(inst), ['manage', 'move'])

    def test_unlabelled_training(self):
        'training needs labels'
        model = SenseModel(mk_pipeline())
        self.assertRaises(ValueError, model.train,
                          mk_corpus([('they run the race', None)]))
        self.assertFalse(model.feature_model.frozen)

    def test_save_load(self):
        'saved models predict the same way'
        self.model.save(self.tmp_dir)
        model2 = SenseModel.load(self.tmp_dir)
        self.assertEqual(self.model.feature_model, model2.feature_model)
        self.assertTrue(model2.feature_model.frozen)
        self.assertEqual(self.model.pipeline.keys(), model2.pipeline.keys())
        test = mk_corpus(TRAINING + [('he run the zoo', None)], start=50)
        self.assertEqual(self.model.predict_all(test),
                         model2.predict_all(test))

    def test_report(self):
        'discriminating features are named'
        listing = discriminating_features(self.model.classifier,
                                          self.model.feature_model, 2)
        self.assertEqual(['manage', 'move'], [lbl for lbl, _ in listing])
        for _, feats in listing:
            self.assertEqual(2, len(feats))
            for feat, _ in feats:
                self.assertIn(feat, self.model.feature_model.features)
        table = show_discriminating_features(listing)
        self.assertIn('manage', table)
        self.assertIn('Lookup(Text)OFFSET[1,2]=', table)
