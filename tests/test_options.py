import pytest

from rangerforest.constants import (
    ImportanceMode,
    MemoryMode,
    PredictionType,
    SplitRule,
    TreeType,
)
from rangerforest.options import ArgumentError, Arguments, parse_arguments


def test_defaults_when_no_arguments():
    args = parse_arguments([])
    assert args == Arguments()
    assert args.outprefix == "ranger_out"
    assert args.ntree == 500
    assert args.treetype == TreeType.CLASSIFICATION
    assert args.replace is True


def test_long_options_with_separate_values():
    args = parse_arguments(["--file", "data.dat", "--depvarname", "y", "--ntree", "20",
                            "--mtry", "3", "--seed", "7"])
    assert args.file == "data.dat"
    assert args.depvarname == "y"
    assert args.ntree == 20
    assert args.mtry == 3
    assert args.seed == 7


def test_long_options_with_equals():
    args = parse_arguments(["--file=data.dat", "--alpha=0.25"])
    assert args.file == "data.dat"
    assert args.alpha == 0.25


def test_short_options_attached_and_separate():
    args = parse_arguments(["-t10", "-m", "2", "-fdata.csv"])
    assert args.ntree == 10
    assert args.mtry == 2
    assert args.file == "data.csv"


def test_clustered_flags():
    args = parse_arguments(["-vwuH"])
    assert args.verbose is True
    assert args.write is True
    assert args.replace is False
    assert args.holdout is True


def test_cluster_ending_in_option_with_argument():
    args = parse_arguments(["-vt", "15"])
    assert args.verbose is True
    assert args.ntree == 15


def test_long_option_abbreviation():
    args = parse_arguments(["--prob", "--verb", "--noreplace"])
    assert args.probability is True
    assert args.verbose is True
    assert args.replace is False


def test_ambiguous_abbreviation_is_unrecognized():
    args = parse_arguments(["--pred", "x"])
    assert args.unrecognized == ["--pred"]
    assert args.predict == ""
    assert args.extra_arguments == ["x"]


def test_exact_name_wins_over_longer_option():
    args = parse_arguments(["--predict", "forest.forest"])
    assert args.predict == "forest.forest"
    assert args.predictiontype == PredictionType.RESPONSE


def test_comma_separated_lists():
    args = parse_arguments(["--catvars", "a,b,c", "--alwayssplitvars", "x", "--regcoef", "0.5,1"])
    assert args.catvars == ["a", "b", "c"]
    assert args.alwayssplitvars == ["x"]
    assert args.regcoef == [0.5, 1.0]


def test_enumerated_options():
    args = parse_arguments(["--memmode", "1", "--impmeasure", "5", "--splitrule", "4",
                            "--treetype", "5", "--predictiontype", "2"])
    assert args.memmode == MemoryMode.FLOAT
    assert args.impmeasure == ImportanceMode.GINI_CORRECTED
    assert args.splitrule == SplitRule.MAXSTAT
    assert args.treetype == TreeType.SURVIVAL
    assert args.predictiontype == PredictionType.TERMINALNODES


def test_integer_prefix_is_used():
    args = parse_arguments(["--ntree", "12abc"])
    assert args.ntree == 12


def test_zero_allowed_for_seed_and_maxdepth():
    args = parse_arguments(["--seed", "0", "--maxdepth", "0"])
    assert args.seed == 0
    assert args.maxdepth == 0


@pytest.mark.parametrize(
    ("argv", "message"),
    [
        (["--ntree", "0"],
         "Illegal argument for option 'ntree'. Please give a positive integer. See '--help' for details."),
        (["--mtry", "abc"],
         "Illegal argument for option 'mtry'. Please give a positive integer. See '--help' for details."),
        (["--seed", "-1"],
         "Illegal argument for option 'seed'. Please give a positive integer. See '--help' for details."),
        (["--fraction", "1.5"],
         "Illegal argument for option 'fraction'. Please give a value in (0,1]. See '--help' for details."),
        (["--fraction", "0"],
         "Illegal argument for option 'fraction'. Please give a value in (0,1]. See '--help' for details."),
        (["--alpha", "2"],
         "Illegal argument for option 'alpha'. Please give a value between 0 and 1. See '--help' for details."),
        (["--minprop", "0.6"],
         "Illegal argument for option 'minprop'. Please give a value between 0 and 0.5. "
         "See '--help' for details."),
        (["--memmode", "3"],
         "Illegal argument for option 'memmode'. Please give a positive integer. See '--help' for details."),
        (["--impmeasure", "7"],
         "Illegal argument for option 'impmeasure'. Please give a positive integer. See '--help' for details."),
        (["--splitrule", "8"], "Illegal splitrule selected. See '--help' for details."),
        (["--predictiontype", "3"], "Illegal prediction type selected. See '--help' for details."),
        (["--treetype", "2"],
         "Illegal argument for option 'treetype'. Please give a positive integer. See '--help' for details."),
        (["--nthreads", "0"],
         "Illegal argument for option 'nthreads'. Please give a positive integer. See '--help' for details."),
    ],
)
def test_invalid_values_raise(argv, message):
    with pytest.raises(ArgumentError) as info:
        parse_arguments(argv)
    assert str(info.value) == message


def test_help_stops_parsing():
    args = parse_arguments(["--ntree", "5", "--help", "--ntree", "0"])
    assert args.show_help is True
    assert args.ntree == 5


def test_version_stops_parsing():
    args = parse_arguments(["-Z", "--mtry", "bad"])
    assert args.show_version is True
    assert args.mtry == 0


def test_non_options_are_collected():
    args = parse_arguments(["first", "--verbose", "second", "-", "--", "--write"])
    assert args.extra_arguments == ["first", "second", "-", "--write"]
    assert args.verbose is True
    assert args.write is False


def test_unknown_options_are_ignored():
    args = parse_arguments(["--bogus", "-q", "--verbose"])
    assert args.unrecognized == ["--bogus", "-q"]
    assert args.verbose is True


def test_missing_required_argument_is_unrecognized():
    args = parse_arguments(["--file"])
    assert args.unrecognized == ["--file"]
    assert args.file == ""


def test_value_given_to_flag_is_unrecognized():
    args = parse_arguments(["--verbose=yes"])
    assert args.unrecognized == ["--verbose=yes"]
    assert args.verbose is False


def test_option_argument_may_start_with_dash():
    args = parse_arguments(["--outprefix", "-out"])
    assert args.outprefix == "-out"


def test_list_options_accumulate():
    args = parse_arguments(["-c", "a", "-c", "b,c"])
    assert args.catvars == ["a", "b", "c"]