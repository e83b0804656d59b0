import logging

from funcfeatures.errors import (
    FeatureError,
    InvalidArgumentError,
    TamperedRuntimeError,
    SegmentationError,
    UnmatchedDelimiterError,
    NoParameterListError,
    IndeterminateProbeError,
    LogicInconsistencyError,
    )
from funcfeatures.core.tracker import tracker
from funcfeatures.features import get_features, Classifier, FeatureRecord


logging.getLogger(__name__).addHandler(logging.NullHandler())

tracker.install()
