"""Enumerations and default settings shared across the forest implementation."""

from enum import IntEnum


class TreeType(IntEnum):
    """Kind of tree grown in a forest."""

    CLASSIFICATION = 1
    REGRESSION = 3
    SURVIVAL = 5
    PROBABILITY = 9


class MemoryMode(IntEnum):
    """Storage precision used for the input data."""

    DOUBLE = 0
    FLOAT = 1
    CHAR = 2


class ImportanceMode(IntEnum):
    """Variable importance measure."""

    NONE = 0
    GINI = 1
    PERM_BREIMAN = 2
    PERM_RAW = 3
    PERM_LIAW = 4
    GINI_CORRECTED = 5
    PERM_CASEWISE = 6


class SplitRule(IntEnum):
    """Rule used to choose split points."""

    LOGRANK = 1
    AUC = 2
    AUC_IGNORE_TIES = 3
    MAXSTAT = 4
    EXTRATREES = 5
    BETA = 6
    HELLINGER = 7


class PredictionType(IntEnum):
    """What a prediction returns."""

    RESPONSE = 1
    TERMINALNODES = 2


MAX_MEM_MODE = MemoryMode.CHAR
MAX_IMP_MODE = ImportanceMode.PERM_CASEWISE

DEFAULT_NUM_TREE = 500
DEFAULT_NUM_THREADS = 0
DEFAULT_IMPORTANCE_MODE = ImportanceMode.NONE
DEFAULT_SPLITRULE = SplitRule.LOGRANK
DEFAULT_PREDICTIONTYPE = PredictionType.RESPONSE
DEFAULT_NUM_RANDOM_SPLITS = 1
DEFAULT_MAXDEPTH = 0
DEFAULT_ALPHA = 0.5
DEFAULT_MINPROP = 0.1
DEFAULT_SAMPLE_FRACTION_REPLACE = 1.0
DEFAULT_SAMPLE_FRACTION_NOREPLACE = 0.632

# Seconds between progress messages.
STATUS_INTERVAL = 30

# Four 2-bit genotypes are packed per byte, most significant pair first.
SNP_MASK = (192, 48, 12, 3)
SNP_OFFSET = (6, 4, 2, 0)