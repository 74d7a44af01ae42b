"""
A feature pipeline and a classifier, trained, saved and loaded
together, with predictions given as labels rather than indices
"""

import logging
import os
from os import path as fp

import joblib

from .config import (load_pipeline_config,
                     pipeline_from_config,
                     save_pipeline_config)
from .io import (Torpor, load_feature_model, save_feature_model)
from .learning import SklearnClassifier

# pylint: disable=too-few-public-methods

PIPELINE_FILE = 'pipeline.json'
FEATURE_MODEL_FILE = 'feature-model.json'
CLASSIFIER_FILE = 'classifier.joblib'


class SenseModel(object):
    """
    Classifies focus instances (eg. picks the sense of a verb)

    Parameters
    ----------
    pipeline: FeaturePipeline
    classifier: Classifier, optional
        defaults to an sklearn logistic regression
    quiet: bool
        suppress progress messages
    """
    def __init__(self, pipeline, classifier=None, quiet=True):
        self.pipeline = pipeline
        self.classifier = (classifier if classifier is not None
                           else SklearnClassifier())
        self.quiet = quiet

    @property
    def feature_model(self):
        "the pipeline's feature model"
        return self.pipeline.model

    def train(self, instances):
        """
        Train the pipeline and then the classifier on labelled
        focus instances

        Returns
        -------
        self: object
        """
        instances = list(instances)
        missing = [i.id for i in instances if i.label is None]
        if missing:
            oops = 'Training instances without a label: {}'
            raise ValueError(oops.format(missing[:10]))
        with Torpor("Extracting features", quiet=self.quiet) as step:
            sparse = self.pipeline.train(instances)
        logging.info('feature extraction took %.2f s', step.elapsed)
        with Torpor("Training classifier", quiet=self.quiet) as step:
            self.classifier.train(sparse, len(self.feature_model.features))
        logging.info('classifier training took %.2f s', step.elapsed)
        return self

    def predict(self, instance):
        """
        Best label for an instance
        """
        target = self.classifier.classify(self.pipeline.process(instance))
        return self.feature_model.label(target)

    def predict_all(self, instances):
        """
        Best label for each instance
        """
        return [self.feature_model.label(self.classifier.classify(x))
                for x in self.pipeline.process_all(instances)]

    def predict_scores(self, instance):
        """
        Score for each label

        Returns
        -------
        scores: dict(string, float)
        """
        scores = self.classifier.score(self.pipeline.process(instance))
        return {self.feature_model.label(t): s for t, s in scores.items()}

    def save(self, dirname):
        """
        Write the pipeline configuration, the feature model and the
        classifier to a directory (created if need be)
        """
        if not fp.isdir(dirname):
            os.makedirs(dirname)
        with Torpor("Saving model to {}".format(dirname), quiet=self.quiet):
            save_pipeline_config(self.pipeline.to_config(),
                                 fp.join(dirname, PIPELINE_FILE))
            save_feature_model(self.feature_model,
                               fp.join(dirname, FEATURE_MODEL_FILE))
            joblib.dump(self.classifier, fp.join(dirname, CLASSIFIER_FILE))

    @classmethod
    def load(cls, dirname, n_jobs=1, quiet=True):
        """
        Read back a model written by `save`

        The feature model is checked before anything else is
        loaded.

        Raises
        ------
        ArtifactFormatError
            if the feature model cannot be read
        PipelineConfigurationError
            if the pipeline configuration is invalid
        """
        with Torpor("Loading model from {}".format(dirname), quiet=quiet):
            feature_model = load_feature_model(fp.join(dirname,
                                                       FEATURE_MODEL_FILE))
            config = load_pipeline_config(fp.join(dirname, PIPELINE_FILE))
            pipeline = pipeline_from_config(config,
                                            model=feature_model,
                                            n_jobs=n_jobs)
            classifier = joblib.load(fp.join(dirname, CLASSIFIER_FILE))
        logging.info('loaded model with %d features and %d labels',
                     len(feature_model.features), len(feature_model.labels))
        return cls(pipeline, classifier, quiet=quiet)
