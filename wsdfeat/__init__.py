'''
wsdfeat turns annotated, dependency parsed sentences into sparse
feature vectors for word sense (or any other focus token)
classification. The API provides

    * a small token/dependency tree model (the output of your parser
      goes in here)
    * context factories and feature extractors that can be combined
      into feature pipelines
    * a feature model mapping symbolic features to vector indices,
      trained once and then frozen
    * a thin layer around scikit-learn classifiers, so that
      predictions come back as labels
'''

from .context import (Context,
                      ContextFactory,
                      DepChildrenContextFactory,
                      FocusContextFactory,
                      OffsetContextFactory,
                      RootPathContextFactory)
from .extractor import (ConcatenatingFeatureExtractor,
                        FeatureExtractor,
                        JoinedContextExtractor,
                        LookupFeatureExtractor,
                        StringListLookupFeature)
from .io import ArtifactFormatError
from .pipeline import (FeatureBinding,
                       FeaturePipeline,
                       PipelineConfigurationError)
from .table import SparseInstance
from .tree import (DepTree,
                   FeatureType,
                   FocusInstance,
                   MalformedTreeError,
                   Token)
from .vocab import (ABSENT,
                    FeatureModel,
                    FrozenVocabularyError,
                    Vocabulary)
