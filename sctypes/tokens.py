"""Lexical token kinds and their classification."""

from __future__ import annotations

from enum import IntEnum, auto


class TokType(IntEnum):
    """Kind of a lexical token; the order of members is significant."""

    INT = 0
    FLT = auto()
    CHAR = auto()
    STR = auto()
    IDEN = auto()

    # keywords
    LET = auto()
    FN = auto()
    IF = auto()
    ELIF = auto()
    ELSE = auto()
    FOR = auto()
    IN = auto()
    WHILE = auto()
    RETURN = auto()
    CONTINUE = auto()
    BREAK = auto()
    VOID = auto()
    TRUE = auto()
    FALSE = auto()
    NIL = auto()
    ANY = auto()
    TYPE = auto()
    I1 = auto()
    I8 = auto()
    I16 = auto()
    I32 = auto()
    I64 = auto()
    U8 = auto()
    U16 = auto()
    U32 = auto()
    U64 = auto()
    F32 = auto()
    F64 = auto()
    OR = auto()
    STATIC = auto()
    CONST = auto()
    VOLATILE = auto()
    DEFER = auto()
    EXTERN = auto()
    COMPTIME = auto()
    GLOBAL = auto()
    INLINE = auto()
    STRUCT = auto()
    ENUM = auto()

    # operators
    ASSN = auto()
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    MOD = auto()
    ADD_ASSN = auto()
    SUB_ASSN = auto()
    MUL_ASSN = auto()
    DIV_ASSN = auto()
    MOD_ASSN = auto()
    XINC = auto()
    INCX = auto()
    XDEC = auto()
    DECX = auto()
    UADD = auto()
    USUB = auto()
    UAND = auto()
    UMUL = auto()
    LAND = auto()
    LOR = auto()
    LNOT = auto()
    EQ = auto()
    LT = auto()
    GT = auto()
    LE = auto()
    GE = auto()
    NE = auto()
    BAND = auto()
    BOR = auto()
    BNOT = auto()
    BXOR = auto()
    BAND_ASSN = auto()
    BOR_ASSN = auto()
    BNOT_ASSN = auto()
    BXOR_ASSN = auto()
    LSHIFT = auto()
    RSHIFT = auto()
    LSHIFT_ASSN = auto()
    RSHIFT_ASSN = auto()
    SUBS = auto()
    FNCALL = auto()
    STCALL = auto()
    PRE_VA = auto()
    POST_VA = auto()

    # separators
    DOT = auto()
    QUEST = auto()
    COL = auto()
    COMMA = auto()
    AT = auto()
    SPC = auto()
    TAB = auto()
    NEWL = auto()
    COLS = auto()
    ARROW = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACK = auto()
    RBRACK = auto()

    FEOF = auto()
    INVALID = auto()

    def is_data(self) -> bool:
        """True for literals, identifiers and type/value keywords."""
        return self in _DATA

    def is_literal(self) -> bool:
        """True for integer, float, char and string literals."""
        return self in _LITERALS

    def is_oper(self) -> bool:
        """True for operators and separators."""
        return TokType.ASSN <= self <= TokType.RBRACK

    def is_unary_pre(self) -> bool:
        """True for prefix unary operators."""
        return self in _UNARY_PRE

    def is_unary_post(self) -> bool:
        """True for postfix increment and decrement."""
        return self in (TokType.XINC, TokType.XDEC)

    def is_comparison(self) -> bool:
        """True for comparison operators."""
        return self in _COMPARISONS

    def is_assign(self) -> bool:
        """True for plain and compound assignment."""
        return self in _ASSIGNS

    def is_valid(self) -> bool:
        """False for the end-of-file and invalid markers."""
        return self not in (TokType.INVALID, TokType.FEOF)


_LITERALS = frozenset({TokType.INT, TokType.FLT, TokType.CHAR, TokType.STR})

_DATA = _LITERALS | frozenset(
    {
        TokType.IDEN,
        TokType.VOID,
        TokType.TRUE,
        TokType.FALSE,
        TokType.NIL,
        TokType.ANY,
        TokType.TYPE,
        TokType.I1,
        TokType.I8,
        TokType.I16,
        TokType.I32,
        TokType.I64,
        TokType.U8,
        TokType.U16,
        TokType.U32,
        TokType.U64,
        TokType.F32,
        TokType.F64,
    }
)

_UNARY_PRE = frozenset(
    {
        TokType.UADD,
        TokType.USUB,
        TokType.UAND,
        TokType.UMUL,
        TokType.INCX,
        TokType.DECX,
        TokType.LNOT,
        TokType.BNOT,
    }
)

_COMPARISONS = frozenset(
    {TokType.EQ, TokType.LT, TokType.GT, TokType.LE, TokType.GE, TokType.NE}
)

_ASSIGNS = frozenset(
    {
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
    }
)