"""Consistency checks on parsed command line settings, and help and version texts."""

from __future__ import annotations

import struct

from .constants import ImportanceMode, SplitRule, TreeType
from .options import ArgumentError, Arguments

VERSION = "0.12.4"

_SIZE = struct.Struct("<Q")
_TREE_TYPE = struct.Struct("<i")


def _read_tree_type(filename: str) -> TreeType | int:
    """Tree type stored in a saved forest file."""
    message = f"Could not read from input file: {filename}."
    try:
        handle = open(filename, "rb")
    except OSError as err:
        raise OSError(message) from err
    with handle:
        handle.seek(_SIZE.size)
        raw_length = handle.read(_SIZE.size)
        if len(raw_length) != _SIZE.size:
            raise OSError(message)
        (length,) = _SIZE.unpack(raw_length)
        handle.seek(4 * _SIZE.size + length)
        raw_type = handle.read(_TREE_TYPE.size)
        if len(raw_type) != _TREE_TYPE.size:
            raise OSError(message)
    (value,) = _TREE_TYPE.unpack(raw_type)
    try:
        return TreeType(value)
    except ValueError:
        return value


def check_arguments(args: Arguments) -> None:
    """Check required settings and their combinations, adjusting args where needed.

    In prediction mode the tree type is read from the forest file. When
    regularization is used, parallel execution is switched off with a warning.
    Raises ArgumentError for invalid combinations and OSError for an
    unreadable forest file.
    """
    if not args.file:
        raise ArgumentError("Please specify an input filename with '--file'. See '--help' for details.")
    if not args.predict and not args.depvarname:
        raise ArgumentError(
            "Please specify a dependent variable name with '--depvarname'. See '--help' for details.")

    if not args.predict and args.treetype == TreeType.SURVIVAL and not args.statusvarname:
        raise ArgumentError(
            "Please specify a status variable name with '--statusvarname'. See '--help' for details.")
    if args.treetype != TreeType.SURVIVAL and args.statusvarname:
        raise ArgumentError(
            "Option '--statusvarname' only applicable for survival forest. See '--help' for details.")

    if (args.treetype == TreeType.SURVIVAL and args.splitrule == SplitRule.MAXSTAT
            and args.impmeasure == ImportanceMode.GINI):
        raise ArgumentError(
            "Node impurity variable importance not supported for survival forests with MAXSTAT "
            "splitrule. See '--help' for details.")

    if args.treetype != TreeType.CLASSIFICATION and args.probability:
        raise ArgumentError("Probability estimation is only applicable to classification forests.")

    if args.predict:
        args.treetype = _read_tree_type(args.predict)

    if not args.predict and args.predall:
        raise ArgumentError("Option '--predall' only available in prediction mode.")

    if args.alwayssplitvars and args.splitweights:
        raise ArgumentError("Please use only one option of splitweights and alwayssplitvars.")

    treetype = args.treetype
    rule = args.splitrule
    if ((rule in (SplitRule.AUC, SplitRule.AUC_IGNORE_TIES) and treetype != TreeType.SURVIVAL)
            or (rule == SplitRule.MAXSTAT
                and treetype not in (TreeType.SURVIVAL, TreeType.REGRESSION))
            or (rule == SplitRule.BETA and treetype != TreeType.REGRESSION)
            or (rule == SplitRule.HELLINGER
                and treetype not in (TreeType.CLASSIFICATION, TreeType.PROBABILITY))):
        raise ArgumentError("Illegal splitrule selected. See '--help' for details.")

    if args.holdout and not args.caseweights:
        raise ArgumentError("Case weights required to use holdout mode.")

    if (treetype == TreeType.SURVIVAL and args.catvars
            and rule not in (SplitRule.LOGRANK, SplitRule.EXTRATREES)):
        raise ArgumentError("Unordered splitting in survival trees only available for LOGRANK splitrule.")

    if rule == SplitRule.EXTRATREES and args.catvars and args.savemem:
        raise ArgumentError("savemem option not possible in extraTrees mode with unordered predictors.")

    if args.splitweights and args.impmeasure == ImportanceMode.GINI_CORRECTED:
        raise ArgumentError(
            "Corrected impurity importance not supported in combination with splitweights.")

    if args.regcoef:
        for coefficient in args.regcoef:
            if coefficient > 1:
                raise ArgumentError("The regularization coefficients cannot be greater than 1.")
            if coefficient <= 0:
                raise ArgumentError("The regularization coefficients must be positive.")
        if args.nthreads != 1:
            print("Warning: Paralellization deactivated (regularization used).")
            args.nthreads = 1


_OPTION_LINES = (
    "--help                        Print this help.",
    "--version                     Print version and citation information.",
    "--verbose                     Turn on verbose mode.",
    "--file FILE                   Filename of input data. Only numerical values are supported.",
    "--treetype TYPE               Set tree type to:",
    "                              TYPE = 1: Classification.",
    "                              TYPE = 3: Regression.",
    "                              TYPE = 5: Survival.",
    "                              (Default: 1)",
    "--probability                 Grow a Classification forest with probability estimation for the classes.",
    "                              Use in combination with --treetype 1.",
    "--depvarname NAME             Name of dependent variable. For survival trees this is the time variable.",
    "--statusvarname NAME          Name of status variable, only applicable for survival trees.",
    "                              Coding is 1 for event and 0 for censored.",
    "--ntree N                     Set number of trees to N.",
    "                              (Default: 500)",
    "--mtry N                      Number of variables to possibly split at in each node.",
    "                              (Default: sqrt(p) with p = number of independent variables)",
    "--targetpartitionsize N       Set minimal node size to N.",
    "                              For Classification and Regression growing is stopped if a node reaches a size smaller than N.",
    "                              For Survival growing is stopped if one child would reach a size smaller than N.",
    "                              This means nodes with size smaller N can occur for Classification and Regression.",
    "                              (Default: 1 for Classification, 5 for Regression, and 3 for Survival)",
    "--maxdepth N                  Set maximal tree depth to N.",
    "                              Set to 0 for unlimited depth. A value of 1 corresponds to tree stumps (1 split).",
    "--catvars V1,V2,..            Comma separated list of names of (unordered) categorical variables. ",
    "                              Categorical variables must contain only positive integer values.",
    "--write                       Save forest to file <outprefix>.forest.",
    "--predict FILE                Load forest from FILE and predict with new data. The new data is expected in the exact same ",
    "                              shape as the training data. If the outcome of your new dataset is unknown, add a dummy column.",
    "--predall                     Return a matrix with individual predictions for each tree instead of aggregated ",
    "                              predictions for all trees (classification and regression only).",
    "--predictiontype TYPE         Set type of prediction to:",
    "                              TYPE = 1: Return predicted classes or values.",
    "                              TYPE = 2: Return terminal node IDs per tree for new observations.",
    "                              (Default: 1)",
    "--impmeasure TYPE             Set importance mode to:",
    "                              TYPE = 0: none.",
    "                              TYPE = 1: Node impurity: Gini for Classification, variance for Regression, sum of test statistic for Survival.",
    "                              TYPE = 2: Permutation importance, scaled by standard errors.",
    "                              TYPE = 3: Permutation importance, no scaling.",
    "                              TYPE = 5: Corrected node impurity: Bias-corrected version of node impurity importance.",
    "                              TYPE = 6: Local (casewise) permutation importance.",
    "                              (Default: 0)",
    "--noreplace                   Sample without replacement.",
    "--fraction X                  Fraction of observations to sample. Default is 1 for sampling with replacement ",
    "                              and 0.632 for sampling without replacement.",
    "--splitrule RULE              Splitting rule:",
    "                              RULE = 1: Gini for Classification, variance for Regression, logrank for Survival.",
    "                              RULE = 2: AUC for Survival, not available for Classification and Regression.",
    "                              RULE = 3: AUC (ignore ties) for Survival, not available for Classification and Regression.",
    "                              RULE = 4: MAXSTAT for Survival and Regression, not available for Classification.",
    "                              RULE = 5: ExtraTrees for all tree types.",
    "                              RULE = 6: BETA for regression, only for (0,1) bounded outcomes.",
    "                              RULE = 7: Hellinger for Classification, not available for Regression and Survival.",
    "                              (Default: 1)",
    "--randomsplits N              Number of random splits to consider for each splitting variable (ExtraTrees splitrule only).",
    "--alpha VAL                   Significance threshold to allow splitting (MAXSTAT splitrule only).",
    "--minprop VAL                 Lower quantile of covariate distribtuion to be considered for splitting (MAXSTAT splitrule only).",
    "--caseweights FILE            Filename of case weights file.",
    "--holdout                     Hold-out mode. Hold-out all samples with case weight 0 and use these for variable ",
    "                              importance and prediction error.",
    "--splitweights FILE           Filename of split select weights file.",
    "--alwayssplitvars V1,V2,..    Comma separated list of variable names to be always considered for splitting.",
    "--regcoef r1,r2,..            Comma separated list of regularization coefficients (one for all variables or one for each variable).",
    "--usedepth                    Use node depth for regularization.",
    "--skipoob                     Skip computation of OOB error.",
    "--nthreads N                  Set number of parallel threads to N.",
    "                              (Default: Number of CPUs available)",
    "--seed SEED                   Set random seed to SEED.",
    "                              (Default: No seed)",
    "--outprefix PREFIX            Prefix for output files.",
    "--memmode MODE                Set memory mode to:",
    "                              MODE = 0: double.",
    "                              MODE = 1: float.",
    "                              MODE = 2: char.",
    "                              (Default: 0)",
    "--savemem                     Use memory saving (but slower) splitting mode.",
)


def help_text(program: str) -> str:
    """Usage and option summary for the command line program."""
    lines = ["Usage: ", f"    {program} [options]", "", "Options:"]
    lines.extend(f"    {line}" for line in _OPTION_LINES)
    lines.extend(["", "See README file for details and examples."])
    return "\n".join(lines) + "\n"


def version_text() -> str:
    """Version information for the command line program."""
    return f"rangerforest version: {VERSION}\n"