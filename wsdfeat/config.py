"""
Configuring feature pipelines from plain data (eg. JSON files)

A pipeline configuration is a list of bindings, each a dictionary
with a `context` and an `extractor` entry, for example ::

    [{"context": {"type": "offset", "offsets": [-1, 1]},
      "extractor": {"type": "lookup", "keys": ["Lemma"]}}]
"""

import codecs
import json

from .context import (DepChildrenContextFactory,
                      FocusContextFactory,
                      OffsetContextFactory,
                      RootPathContextFactory)
from .extractor import (ConcatenatingFeatureExtractor,
                        JoinedContextExtractor,
                        LookupFeatureExtractor,
                        StringListLookupFeature)
from .pipeline import (FeaturePipeline,
                       PipelineConfigurationError)
from .tree import FeatureType
from .util import ConfigEnum

# pylint: disable=too-few-public-methods


class ContextType(ConfigEnum):
    '''
    Context factories that can be named in a configuration
    '''
    offset = 1
    root_path = 2
    children = 3
    focus = 4


class ExtractorType(ConfigEnum):
    '''
    Feature extractors that can be named in a configuration
    '''
    lookup = 1
    list_lookup = 2
    concat = 3
    joined = 4


def _get_type(enum_cls, config):
    'variant named in a configuration entry'
    if not isinstance(config, dict) or 'type' not in config:
        oops = 'Expected a dictionary with a "type" entry, got {!r}'
        raise PipelineConfigurationError(oops.format(config))
    try:
        return enum_cls.from_string(config['type'])
    except ValueError as oops:
        raise PipelineConfigurationError(str(oops))


def _get_field(config, field, default=None, required=False):
    'look up a field, complaining if it is required and missing'
    if field not in config:
        if required:
            oops = 'Missing "{}" in {!r}'
            raise PipelineConfigurationError(oops.format(field, config))
        return default
    return config[field]


def context_from_config(config):
    """
    Build a context factory from its configuration
    (inverse of `to_config`)

    Raises
    ------
    PipelineConfigurationError
    """
    ctype = _get_type(ContextType, config)
    try:
        if ctype == ContextType.offset:
            return OffsetContextFactory(
                _get_field(config, 'offsets', required=True),
                concatenate=_get_field(config, 'concatenate', False))
        elif ctype == ContextType.root_path:
            return RootPathContextFactory()
        elif ctype == ContextType.children:
            return DepChildrenContextFactory(
                include=_get_field(config, 'include'),
                exclude=_get_field(config, 'exclude'))
        else:
            return FocusContextFactory()
    except (TypeError, ValueError) as oops:
        raise PipelineConfigurationError(
            'Bad context configuration {!r}: {}'.format(config, oops))


def extractor_from_config(config):
    """
    Build a feature extractor from its configuration
    (inverse of `to_config`)

    Raises
    ------
    PipelineConfigurationError
    """
    etype = _get_type(ExtractorType, config)
    try:
        if etype == ExtractorType.lookup:
            fallback = _get_field(config, 'fallback')
            if fallback is not None:
                fallback = extractor_from_config(fallback)
            return LookupFeatureExtractor(
                _get_field(config, 'keys', required=True),
                fallback=fallback)
        elif etype == ExtractorType.list_lookup:
            return StringListLookupFeature(
                _get_field(config, 'keys', required=True))
        elif etype == ExtractorType.concat:
            return ConcatenatingFeatureExtractor(
                [extractor_from_config(x) for x in
                 _get_field(config, 'extractors', required=True)])
        else:
            return JoinedContextExtractor(
                extractor_from_config(
                    _get_field(config, 'extractor', required=True)))
    except (TypeError, ValueError) as oops:
        raise PipelineConfigurationError(
            'Bad extractor configuration {!r}: {}'.format(config, oops))


def bindings_from_config(config):
    """
    (context factory, extractor) pairs from a configuration list
    """
    if not isinstance(config, list):
        oops = 'A pipeline configuration is a list of bindings, got {!r}'
        raise PipelineConfigurationError(oops.format(config))
    bindings = []
    for entry in config:
        if not isinstance(entry, dict):
            oops = 'Expected a binding dictionary, got {!r}'
            raise PipelineConfigurationError(oops.format(entry))
        bindings.append(
            (context_from_config(_get_field(entry, 'context',
                                            required=True)),
             extractor_from_config(_get_field(entry, 'extractor',
                                              required=True))))
    return bindings


def pipeline_from_config(config, model=None, n_jobs=1):
    """
    Build a feature pipeline from a configuration list

    Raises
    ------
    PipelineConfigurationError
    """
    return FeaturePipeline(bindings_from_config(config),
                           model=model,
                           n_jobs=n_jobs)


def load_pipeline_config(filename):
    """
    Read a pipeline configuration from a JSON file
    """
    try:
        with codecs.open(filename, 'r', 'utf-8') as stream:
            return json.load(stream)
    except ValueError as oops:
        raise PipelineConfigurationError(
            'Could not read pipeline configuration {}: {}'.format(filename,
                                                                  oops))


def save_pipeline_config(config, filename):
    """
    Write a pipeline configuration to a JSON file
    """
    with codecs.open(filename, 'w', 'utf-8') as stream:
        json.dump(config, stream, indent=2, ensure_ascii=False)


def _lookup(*keys):
    'lookup config on feature types'
    return {'type': 'lookup', 'keys': [k.name for k in keys]}


DEFAULT_FEATURES = [
    # bag of words around the focus
    {'context': {'type': 'offset', 'offsets': [-2, -1, 1, 2],
                 'concatenate': True},
     'extractor': _lookup(FeatureType.Lemma, FeatureType.Text)},
    # positional words and tags
    {'context': {'type': 'offset', 'offsets': [-1, 1]},
     'extractor': _lookup(FeatureType.Text)},
    {'context': {'type': 'offset', 'offsets': [-1, 1]},
     'extractor': _lookup(FeatureType.Pos)},
    # the focus itself
    {'context': {'type': 'focus'},
     'extractor': {'type': 'lookup',
                   'keys': [FeatureType.Lemma.name],
                   'fallback': _lookup(FeatureType.Text)}},
    {'context': {'type': 'focus'},
     'extractor': {'type': 'concat',
                   'extractors': [_lookup(FeatureType.Pos),
                                  _lookup(FeatureType.Dep)]}},
    {'context': {'type': 'focus'},
     'extractor': {'type': 'list_lookup',
                   'keys': [FeatureType.Cluster.name,
                            FeatureType.Synset.name]}},
    # syntax
    {'context': {'type': 'root_path'},
     'extractor': {'type': 'joined', 'extractor': _lookup(FeatureType.Dep)}},
    {'context': {'type': 'children', 'exclude': ['punct']},
     'extractor': {'type': 'concat',
                   'extractors': [_lookup(FeatureType.Dep),
                                  _lookup(FeatureType.Lemma)]}},
]
"a reasonable starting point for verb sense disambiguation"
