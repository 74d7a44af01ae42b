"""
Reports on trained models
"""

from tabulate import tabulate

from .util import truncate

MAX_FEATURE_WIDTH = 60
"symbolic features longer than this are truncated in reports"


def discriminating_features(classifier, model, top_n):
    """return the most discriminating features (and their weights)
    for each label in the classifier; or None if the classifier does
    not support this sort of query

    See :py:func:`show_discriminating_features`

    Parameters
    ----------
    classifier: SklearnClassifier
    model: FeatureModel
        feature model the classifier was trained against
    top_n: int
        number of features to return per label

    Returns
    -------
    listing: [(string, [(string, float)])] or None
    """
    if not hasattr(classifier, 'important_features'):
        return None
    per_label = classifier.important_features(top_n)
    if per_label is None:
        return None
    rows = []
    for lnum in sorted(per_label):
        feats = [(model.features.key(f), w) for f, w in per_label[lnum]]
        rows.append((model.label(lnum), feats))
    return rows


def show_discriminating_features(listing):
    """Build a table of discriminating features per label.

    Given a list of discriminating features for each label,
    return a string containing a hopefully friendly 2D table
    visualisation.

    Parameters
    ----------
    listing: list of (string, list of (string, float))
        List of (label, features) pairs; the features are themselves a
        list of (feature, weight) pairs.
    """
    rows = []
    for label, feats in listing:
        feats = [(truncate(f, MAX_FEATURE_WIDTH), w) for f, w in feats]
        if not feats:
            rows.append([label, '', ''])
            continue
        rows.append([label] + list(feats[0]))
        rows.extend([''] + list(x) for x in feats[1:])
    return tabulate(rows, headers=['label', 'feature', 'weight'])
