"""
Feature pipelines: from focus instances to sparse instances
"""

from collections import namedtuple
import logging

from joblib import (Parallel, delayed)

from .context import ContextFactory
from .extractor import (ExtractorKind, FeatureExtractor)
from .table import SparseInstance
from .util import concat_l
from .vocab import (ABSENT, FeatureModel, FrozenVocabularyError)

# pylint: disable=too-few-public-methods

VALUE_DELIM = '='
"separates a feature key from its value in the vocabulary"

FEATURE_VALUE = 1.0
"vector value for any feature that fires"


class PipelineConfigurationError(Exception):
    """
    A feature pipeline that cannot work as configured (eg.
    two bindings that would produce the same feature keys)
    """
    def __init__(self, msg):
        super(PipelineConfigurationError, self).__init__(msg)


class FeatureBinding(namedtuple('FeatureBinding', 'factory extractor')):
    """
    A context factory together with the extractor to run on the
    contexts it produces
    """
    def keys(self):
        """
        Every feature key (extractor id followed by context
        identifier) this binding can produce
        """
        return [self.extractor.id + ident
                for ident in self.factory.identifiers()]

    def extract(self, instance):
        """
        Symbolic features for an instance

        Returns
        -------
        features: [(string, string)]
            (feature key, value) pairs
        """
        res = []
        for context in self.factory.contexts(instance):
            key = self.extractor.id + context.identifier
            if self.extractor.kind == ExtractorKind.context:
                values = self.extractor.extract(context)
            else:
                values = concat_l(self.extractor.extract(tok)
                                  for tok in context.tokens)
            res.extend((key, value) for value in values)
        return res


def symbolic_feature(key, value):
    """
    The string actually indexed by the vocabulary
    """
    return key + VALUE_DELIM + value


def _extract(bindings, instance):
    'symbolic features for one instance (for parallel jobs)'
    return concat_l(b.extract(instance) for b in bindings)


class FeaturePipeline(object):
    """
    Runs a fixed, ordered list of (context factory, extractor)
    bindings on focus instances and encodes the results against a
    feature model.

    Use `train` on the training data (which fills in and then
    freezes the model), then `process` on new instances. The
    latter never modifies the model, so it can safely be used from
    several threads at once.

    Parameters
    ----------
    bindings: [FeatureBinding or (ContextFactory, FeatureExtractor)]
    model: FeatureModel, optional
        a model from a previous training run, if any
    n_jobs: int
        number of parallel jobs for batch extraction (see joblib)
    backend: string, optional
        joblib backend for those jobs (eg. "threading")

    Raises
    ------
    PipelineConfigurationError
        if the bindings are malformed or if two of them would
        produce the same feature key
    """
    def __init__(self, bindings, model=None, n_jobs=1, backend=None):
        try:
            self.bindings = [FeatureBinding(*b) for b in bindings]
        except TypeError as oops:
            raise PipelineConfigurationError(
                'Bindings must be (factory, extractor) pairs: {}'.format(oops))
        self.model = model if model is not None else FeatureModel()
        self.n_jobs = n_jobs
        self.backend = backend
        self._validate_bindings()

    def _validate_bindings(self):
        "fail early on any misconfiguration"
        if not self.bindings:
            raise PipelineConfigurationError('A feature pipeline needs '
                                             'at least one binding')
        seen = {}
        for i, binding in enumerate(self.bindings):
            if not isinstance(binding.factory, ContextFactory):
                oops = 'Binding {} has no context factory: {!r}'
                raise PipelineConfigurationError(
                    oops.format(i, binding.factory))
            if not isinstance(binding.extractor, FeatureExtractor):
                oops = 'Binding {} has no feature extractor: {!r}'
                raise PipelineConfigurationError(
                    oops.format(i, binding.extractor))
            for key in binding.keys():
                if key in seen:
                    oops = ('Feature key {!r} is produced by both '
                            'binding {} and binding {}')
                    raise PipelineConfigurationError(
                        oops.format(key, seen[key], i))
                seen[key] = i

    def keys(self):
        "every feature key this pipeline can produce, in order"
        return concat_l(b.keys() for b in self.bindings)

    def extract(self, instance):
        """
        Symbolic features for an instance, in binding order

        Returns
        -------
        features: [(string, string)]
            (feature key, value) pairs
        """
        return _extract(self.bindings, instance)

    def _extract_all(self, instances):
        "symbolic features for each instance, in input order"
        if self.n_jobs == 1:
            return [self.extract(i) for i in instances]
        jobs = (delayed(_extract)(self.bindings, i) for i in instances)
        return Parallel(n_jobs=self.n_jobs, backend=self.backend)(jobs)

    @staticmethod
    def _encode(model, inst_id, label, features, lookup):
        """
        Sparse instance from symbolic features, resolving keys
        with `lookup` (a function on the model's vocabulary)
        """
        vector = {}
        for key, value in features:
            index = lookup(model.features, symbolic_feature(key, value))
            if index != ABSENT:
                vector[index] = FEATURE_VALUE
        if label is None:
            target = ABSENT
        else:
            target = lookup(model.labels, label)
        return SparseInstance.from_dict(inst_id, target, vector)

    def process(self, instance):
        """
        Encode a single instance for inference.

        The model is never modified: features (or labels) it does
        not know are left out silently.

        Returns
        -------
        instance: SparseInstance
            with the same id as the input
        """
        features = self.extract(instance)
        return self._encode(self.model, instance.id, instance.label,
                            features, lambda v, k: v.get(k))

    def process_all(self, instances):
        """
        Encode several instances for inference (in parallel if the
        pipeline has more than one job)

        Returns
        -------
        instances: [SparseInstance]
        """
        instances = list(instances)
        res = []
        for inst, features in zip(instances, self._extract_all(instances)):
            res.append(self._encode(self.model, inst.id, inst.label,
                                    features, lambda v, k: v.get(k)))
        return res

    def train(self, instances):
        """
        Extract features from training instances, growing and then
        freezing the feature model.

        Extraction may run in parallel; indices are then allocated
        in a single pass over the instances in input order, so the
        same training data always gives the same model. The model is
        only replaced once everything has succeeded.

        Returns
        -------
        instances: [SparseInstance]
            one per input (same order), with ids 0, 1, ...

        Raises
        ------
        FrozenVocabularyError
            if the model has already been trained
        """
        if self.model.frozen:
            raise FrozenVocabularyError('This feature pipeline has '
                                        'already been trained')
        instances = list(instances)
        logging.info('training: extracting features from %d instances',
                     len(instances))
        extracted = self._extract_all(instances)
        model = self.model.copy()
        res = []
        for i, (inst, features) in enumerate(zip(instances, extracted)):
            logging.debug('training on [%s]', inst.id)
            res.append(self._encode(model, i, inst.label, features,
                                    lambda v, k: v.index_of(k)))
        model.freeze()
        self.model = model
        logging.info('training: %d features, %d labels',
                     len(model.features), len(model.labels))
        return res

    def to_config(self):
        """
        Plain list describing the bindings
        (see :py:mod:`wsdfeat.config`)
        """
        return [{'context': b.factory.to_config(),
                 'extractor': b.extractor.to_config()}
                for b in self.bindings]
