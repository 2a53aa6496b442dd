import pytest

from sctypes.tokens import TokType


def test_operator_range_bounds():
    assert TokType.ASSN.is_oper()
    assert TokType.RBRACK.is_oper()
    assert not TokType.ENUM.is_oper()
    assert not TokType.FEOF.is_oper()


def test_literals_are_data():
    for tok in (TokType.INT, TokType.FLT, TokType.CHAR, TokType.STR):
        assert tok.is_literal()
        assert tok.is_data()


def test_identifier_is_data_not_literal():
    assert TokType.IDEN.is_data()
    assert not TokType.IDEN.is_literal()


@pytest.mark.parametrize("tok", [TokType.LET, TokType.FN, TokType.STRUCT, TokType.ADD])
def test_keywords_and_operators_not_data(tok):
    assert not tok.is_data()


def test_type_keywords_are_data():
    assert TokType.I32.is_data()
    assert TokType.F64.is_data()
    assert TokType.NIL.is_data()


@pytest.mark.parametrize(
    "tok",
    [
        TokType.ASSN,
        TokType.ADD_ASSN,
        TokType.SUB_ASSN,
        TokType.MUL_ASSN,
        TokType.DIV_ASSN,
        TokType.MOD_ASSN,
        TokType.BAND_ASSN,
        TokType.BOR_ASSN,
        TokType.BNOT_ASSN,
        TokType.BXOR_ASSN,
        TokType.LSHIFT_ASSN,
        TokType.RSHIFT_ASSN,
    ],
)
def test_assignment_operators_are_assign(tok):
    assert tok.is_assign()


@pytest.mark.parametrize(
    "tok", [TokType.ADD, TokType.EQ, TokType.LSHIFT, TokType.IDEN, TokType.XINC]
)
def test_other_tokens_are_not_assign(tok):
    assert not tok.is_assign()


@pytest.mark.parametrize(
    "tok", [TokType.EQ, TokType.LT, TokType.GT, TokType.LE, TokType.GE, TokType.NE]
)
def test_comparisons_are_operators(tok):
    assert tok.is_comparison()
    assert tok.is_oper()


@pytest.mark.parametrize("tok", [TokType.ADD, TokType.LAND, TokType.ASSN, TokType.IDEN])
def test_non_comparisons(tok):
    assert not tok.is_comparison()


def test_unary_pre_and_post_disjoint():
    assert TokType.XINC.is_unary_post()
    assert TokType.XDEC.is_unary_post()
    assert not TokType.XINC.is_unary_pre()
    assert not TokType.XDEC.is_unary_pre()
    assert TokType.INCX.is_unary_pre()
    assert TokType.DECX.is_unary_pre()
    assert not TokType.INCX.is_unary_post()
    assert not TokType.DECX.is_unary_post()
    assert TokType.UAND.is_unary_pre()
    assert TokType.LNOT.is_unary_pre()
    assert not TokType.ADD.is_unary_pre()


def test_validity():
    assert not TokType.FEOF.is_valid()
    assert not TokType.INVALID.is_valid()
    assert TokType.IDEN.is_valid()


def test_member_order():
    assert TokType(0) is TokType.INT
    assert TokType(0).is_literal()
    assert TokType(TokType.FEOF + 1) is TokType.INVALID
    assert not TokType(TokType.FEOF + 1).is_valid()
    assert TokType(TokType.PRE_VA + 1) is TokType.POST_VA
    assert TokType(TokType.POST_VA + 1) is TokType.DOT
    assert TokType(TokType.POST_VA + 1).is_oper()