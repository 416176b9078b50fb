"""
오류 및 검증 실패 유형
======================

**합성(synthesis) 오류** — 예외로 발생하며 합성을 즉시 중단한다:
  - AssignmentError: 할당 시점에 값을 알 수 없거나 잘못된 셀에 할당
  - NotEnoughRowsAvailable: 테이블(2^k 행)이 영역/공개 입력을 담기에 작음
  - ColumnNotInPermutation: enable_equality 없이 복사 제약을 건 열
  - ConfigurationError: 고정된 제약 시스템 수정, 빈 게이트 등

**검증 실패(failure)** — 예외가 아니라 MockProver.verify()가 돌려주는 기록:
  - UnsatisfiedConstraint: 게이트 다항식이 어떤 행에서 0이 아님
  - CellNotAssigned: 셀렉터가 켜진 행에서 게이트가 할당되지 않은 셀을 질의
  - PublicInputMismatch: 공개 입력에 묶인 셀의 값이 공개 입력과 다름
  - PermutationMismatch: 복사 제약으로 묶인 두 advice 셀의 값이 다름

실패를 국소적으로 복구하거나 기본값으로 대체하지 않는다.
MockProver.assert_satisfied()는 실패가 하나라도 있으면 VerificationError를 던진다.
"""

from factor_zk.field import format_fr


class SynthesisError(Exception):
    """제약 시스템 구성 또는 witness 합성 중 발생한 오류."""


class AssignmentError(SynthesisError):
    pass


class NotEnoughRowsAvailable(SynthesisError):
    pass


class ColumnNotInPermutation(SynthesisError):
    pass


class ConfigurationError(SynthesisError):
    pass


class VerificationError(Exception):
    """MockProver.assert_satisfied()가 던지는 예외.

    속성:
        failures: 검증 실패 기록 리스트
    """

    def __init__(self, failures):
        self.failures = list(failures)
        lines = [f"{len(self.failures)}개의 제약이 만족되지 않았습니다:"]
        lines += [f"  - {failure}" for failure in self.failures]
        super().__init__("\n".join(lines))


# ─────────────────────────────────────────────────────────────────────
# 검증 실패 기록
# ─────────────────────────────────────────────────────────────────────

class VerifyFailure:
    """검증 실패 기록의 기본 클래스. kind로 종류를 구분한다."""
    kind = None

    def _fields(self):
        return vars(self)

    def __eq__(self, other):
        return type(self) is type(other) and self._fields() == other._fields()

    def __repr__(self):
        return str(self)


class UnsatisfiedConstraint(VerifyFailure):
    """게이트의 한 제약이 행 row에서 0이 아닌 값으로 평가됨.

    속성:
        gate: 게이트 이름
        constraint: 제약 이름 (이름이 없으면 인덱스 문자열)
        row: 전역 행 번호
        cell_values: (셀 설명, FR 값) 리스트
    """
    kind = "UnsatisfiedConstraint"

    def __init__(self, gate, constraint, row, cell_values):
        self.gate = gate
        self.constraint = constraint
        self.row = row
        self.cell_values = cell_values

    def _fields(self):
        return (self.gate, self.constraint, self.row)

    def __str__(self):
        cells = ", ".join(f"{name} = {format_fr(value)}" for name, value in self.cell_values)
        return (
            f"{self.kind}: 게이트 '{self.gate}'의 제약 '{self.constraint}'가 "
            f"행 {self.row}에서 만족되지 않음 [{cells}]"
        )


class CellNotAssigned(VerifyFailure):
    kind = "CellNotAssigned"

    def __init__(self, gate, column, row):
        self.gate = gate
        self.column = column
        self.row = row

    def __str__(self):
        return (
            f"{self.kind}: 게이트 '{self.gate}'가 할당되지 않은 셀 "
            f"{self.column}[{self.row}]을 질의함"
        )


class PublicInputMismatch(VerifyFailure):
    """공개 입력에 묶인 advice 셀이 공개 입력 값과 다름.

    속성:
        column: instance 열
        index: 공개 입력 인덱스 (instance 열의 행)
        expected: 외부에서 주어진 공개 값
        actual: 묶인 셀에 할당된 값
    """
    kind = "PublicInputMismatch"

    def __init__(self, column, index, expected, actual):
        self.column = column
        self.index = index
        self.expected = expected
        self.actual = actual

    def _fields(self):
        return (self.column, self.index, int(self.expected), int(self.actual))

    def __str__(self):
        return (
            f"{self.kind}: {self.column}[{self.index}] 공개 값 "
            f"{format_fr(self.expected)} ≠ 셀 값 {format_fr(self.actual)}"
        )


class PermutationMismatch(VerifyFailure):
    kind = "PermutationMismatch"

    def __init__(self, left, right, left_value, right_value):
        self.left = left
        self.right = right
        self.left_value = left_value
        self.right_value = right_value

    def _fields(self):
        return (self.left, self.right, int(self.left_value), int(self.right_value))

    def __str__(self):
        return (
            f"{self.kind}: {self.left} = {format_fr(self.left_value)} ≠ "
            f"{self.right} = {format_fr(self.right_value)}"
        )
