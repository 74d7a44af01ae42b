"""
Saving and loading feature models
"""

import codecs
import json
import sys
import time

from .vocab import (FeatureModel, Vocabulary)

# pylint: disable=too-few-public-methods

ARTIFACT_FORMAT = 'wsdfeat.feature-model'
ARTIFACT_VERSION = 1


class ArtifactFormatError(Exception):
    """
    A saved feature model that we cannot (or should not) load
    """
    def __init__(self, msg):
        super(ArtifactFormatError, self).__init__(msg)

# ---------------------------------------------------------------------
# feedback
# ---------------------------------------------------------------------


class Torpor(object):
    """
    Context manager announcing a slow step of model building on
    stderr, eg. ::

        Training classifier... done [1200 ms]

    or `Training classifier... ERROR! (ValueError)` if the step
    fails. Errors are announced, never swallowed.

    Parameters
    ----------
    msg: string
    quiet: bool
        say nothing (the step is still timed)
    stream: file, optional
        where to write (stderr by default)

    Attributes
    ----------
    elapsed: float
        seconds spent in the step, once it is over
    """
    def __init__(self, msg, quiet=False, stream=None):
        self.msg = msg
        self.quiet = quiet
        self.stream = stream
        self.elapsed = None
        self._start = None

    def _say(self, text, end='\n'):
        if self.quiet:
            return
        stream = self.stream if self.stream is not None else sys.stderr
        stream.write(text + end)
        stream.flush()

    def __enter__(self):
        self._start = time.time()
        self._say(self.msg + '...', end=' ')
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.elapsed = time.time() - self._start
        if exc_type is None:
            self._say('done [{:.0f} ms]'.format(1000 * self.elapsed))
        else:
            self._say('ERROR! ({})'.format(exc_type.__name__))
        return False


# ---------------------------------------------------------------------
# feature models
# ---------------------------------------------------------------------


def feature_model_to_dict(model):
    """
    JSON-ready representation of a feature model
    """
    return {'format': ARTIFACT_FORMAT,
            'version': ARTIFACT_VERSION,
            'frozen': model.frozen,
            'features': model.features.keys(),
            'labels': model.labels.keys()}


def _read_keys(blob, field):
    'read and check a list of vocabulary keys'
    keys = blob.get(field)
    if not isinstance(keys, list):
        oops = 'Feature model artifact has no {} list'
        raise ArtifactFormatError(oops.format(field))
    bad = [k for k in keys if not isinstance(k, str)]
    if bad:
        oops = 'Feature model artifact has non-string {}: {}'
        raise ArtifactFormatError(oops.format(field, bad[:5]))
    if len(set(keys)) != len(keys):
        oops = 'Feature model artifact has duplicate {}'
        raise ArtifactFormatError(oops.format(field))
    return keys


def feature_model_from_dict(blob):
    """
    Inverse of :py:func:`feature_model_to_dict`

    Raises
    ------
    ArtifactFormatError
    """
    if not isinstance(blob, dict) or blob.get('format') != ARTIFACT_FORMAT:
        raise ArtifactFormatError('Not a feature model artifact')
    version = blob.get('version')
    if not isinstance(version, int) or isinstance(version, bool) \
            or version != ARTIFACT_VERSION:
        oops = ('Unsupported feature model version {} '
                '(this is version {})')
        raise ArtifactFormatError(oops.format(version, ARTIFACT_VERSION))
    frozen = blob.get('frozen')
    if not isinstance(frozen, bool):
        raise ArtifactFormatError('Feature model artifact has no '
                                  'frozen status')
    model = FeatureModel(Vocabulary(_read_keys(blob, 'features')),
                         Vocabulary(_read_keys(blob, 'labels')))
    if frozen:
        model.freeze()
    return model


def save_feature_model(model, filename):
    """
    Write a feature model to a file
    """
    with codecs.open(filename, 'w', 'utf-8') as stream:
        json.dump(feature_model_to_dict(model), stream,
                  ensure_ascii=False, indent=1)


def load_feature_model(filename):
    """
    Read a feature model back from a file

    Raises
    ------
    ArtifactFormatError
        if the file is not a (supported) feature model
    """
    try:
        with codecs.open(filename, 'r', 'utf-8') as stream:
            blob = json.load(stream)
    except (ValueError, UnicodeDecodeError) as oops:
        raise ArtifactFormatError('Could not decode feature model '
                                  '{}: {}'.format(filename, oops))
    return feature_model_from_dict(blob)
