"""
MockProver — 제약 만족 검사기
==============================

실제 증명(다항식 커밋먼트, Fiat-Shamir)을 만들지 않고, 채워진 테이블이
제약 시스템을 만족하는지 직접 검사한다. 실제 증명이 검증되는 경우와
MockProver.verify()가 빈 리스트를 돌려주는 경우는 정확히 일치한다.

**테이블**:
  n = 2^k 행. 열마다 행별 값을 저장한다.
  | 종류     | 초기값          | 채우는 쪽                  |
  |----------|-----------------|----------------------------|
  | advice   | 미할당(None)    | synthesize (Region)        |
  | instance | 공개 입력, 0 패딩 | MockProver.run 인자        |
  | selector | 꺼짐(0)         | Region.enable_selector     |

**검사 항목**:
  1. 모든 게이트의 모든 다항식이 모든 행에서 0 → UnsatisfiedConstraint
     (회전은 n을 법으로 순환한다)
  2. 셀렉터가 켜진 행에서 게이트가 질의한 advice 셀이 할당됨 → CellNotAssigned
  3. 공개 입력 바인딩: advice 셀 == instance 값 → PublicInputMismatch
  4. advice 셀 사이 복사 제약 → PermutationMismatch

사용 예시:
    >>> prover = MockProver.run(4, circuit, [[FR(143)]])
    >>> prover.verify()            # [] 이면 만족
    >>> prover.assert_satisfied()  # 실패가 있으면 VerificationError
"""

import logging

from factor_zk.constraint_system import ADVICE, ConstraintSystem
from factor_zk.errors import (
    AssignmentError,
    CellNotAssigned,
    ColumnNotInPermutation,
    ConfigurationError,
    NotEnoughRowsAvailable,
    PermutationMismatch,
    PublicInputMismatch,
    UnsatisfiedConstraint,
    VerificationError,
)
from factor_zk.field import FR, to_fr
from factor_zk.layouter import SimpleLayouter

logger = logging.getLogger(__name__)


class MockProver:
    """2^k 행 테이블을 소유하고 제약 만족 여부를 검사한다.

    속성:
        k: 테이블 크기 지수
        n: 행 수 (2^k)
        cs: 고정된 ConstraintSystem
        advice: advice[열][행] = FR 또는 None
        instance: instance[열][행] = FR
        selectors: selectors[셀렉터][행] = bool
        copies: (Cell, Cell) 복사 제약 리스트
        instance_bindings: (Cell, instance 열, 행) 리스트
    """

    def __init__(self, k, cs, instance):
        self.k = k
        self.n = 1 << k
        self.cs = cs

        if len(instance) != cs.num_instance_columns:
            raise ConfigurationError(
                f"instance 열 수가 맞지 않습니다: 기대 {cs.num_instance_columns}, 입력 {len(instance)}"
            )
        self.instance = []
        for values in instance:
            if len(values) > self.n:
                raise NotEnoughRowsAvailable(
                    f"공개 입력 {len(values)}개가 {self.n}행 테이블에 들어가지 않습니다 (k={k})"
                )
            column = [to_fr(v) for v in values]
            column += [FR(0)] * (self.n - len(column))
            self.instance.append(column)

        self.advice = [[None] * self.n for _ in range(cs.num_advice_columns)]
        self.selectors = [[False] * self.n for _ in range(cs.num_selectors)]
        self.copies = []
        self.instance_bindings = []

    # ── 설정 ──

    @staticmethod
    def configure(circuit):
        """circuit의 제약 시스템을 구성하고 고정한다.

        반환된 (cs, config)는 읽기 전용이므로 여러 run에서 공유할 수 있다.

        Returns:
            tuple: (ConstraintSystem, config)
        """
        cs = ConstraintSystem()
        config = circuit.configure(cs)
        cs.freeze(type(circuit))
        return cs, config

    @classmethod
    def run(cls, k, circuit, instance, configured=None):
        """circuit을 합성해 테이블을 채운 MockProver를 반환한다.

        Args:
            k: 테이블 크기 지수 (행 수 2^k)
            circuit: Circuit 인스턴스
            instance: instance 열별 공개 입력 리스트의 리스트
            configured: MockProver.configure()의 결과 (없으면 새로 구성)

        Raises:
            ConfigurationError: configured가 다른 회로 클래스에서 만들어졌을 때
            SynthesisError: 합성 중 오류 (할당 실패, 행 부족 등)
        """
        cs, config = configured or cls.configure(circuit)
        if cs.owner is not None and cs.owner is not type(circuit):
            raise ConfigurationError(
                f"{cs.owner.__name__}로 구성된 제약 시스템을 {type(circuit).__name__}에 쓸 수 없습니다"
            )
        prover = cls(k, cs, instance)
        circuit.synthesize(config, SimpleLayouter(prover))
        return prover

    # ── 할당 백엔드 (Region/SimpleLayouter가 호출) ──

    def _check_row(self, row):
        if not 0 <= row < self.n:
            raise NotEnoughRowsAvailable(f"행 {row}이 테이블 범위(0..{self.n - 1})를 벗어났습니다 (k={self.k})")

    def _check_equality(self, column):
        if column not in self.cs.equality_columns:
            raise ColumnNotInPermutation(f"enable_equality가 호출되지 않은 열입니다: {column!r}")

    def assign_advice(self, name, column, row, value):
        if column.column_type != ADVICE:
            raise AssignmentError(f"셀 '{name}': advice 열이 아닙니다: {column!r}")
        self._check_row(row)
        self.advice[column.index][row] = value

    def enable_selector(self, name, selector, row):
        self._check_row(row)
        self.selectors[selector.index][row] = True

    def copy(self, left, right):
        self._check_equality(left.column)
        self._check_equality(right.column)
        self.copies.append((left, right))

    def constrain_instance(self, cell, column, row):
        self._check_equality(cell.column)
        self._check_equality(column)
        self._check_row(row)
        self.instance_bindings.append((cell, column, row))

    # ── 질의 (Expression.evaluate가 호출) ──

    def query_advice(self, column, row):
        value = self.advice[column.index][row % self.n]
        return FR(0) if value is None else value

    def query_instance(self, column, row):
        return self.instance[column.index][row % self.n]

    def query_selector(self, selector, row):
        return FR(1) if self.selectors[selector.index][row % self.n] else FR(0)

    # ── 검사 ──

    def _cell_values(self, gate, row):
        return [
            (f"{column!r}@{rotation.offset}", self.advice[column.index][(row + rotation.offset) % self.n])
            for column, rotation in gate.queried_advice()
        ]

    def _check_gates(self):
        failures = []
        for gate in self.cs.gates:
            selectors = gate.queried_selectors()
            queried = gate.queried_advice()
            for row in range(self.n):
                if any(self.selectors[s.index][row] for s in selectors):
                    for column, rotation in queried:
                        r = (row + rotation.offset) % self.n
                        if self.advice[column.index][r] is None:
                            failures.append(CellNotAssigned(gate.name, column, r))
                for name, _ in gate.check(self, row):
                    failures.append(UnsatisfiedConstraint(gate.name, name, row, self._cell_values(gate, row)))
        return failures

    def _check_copies(self):
        failures = []
        for left, right in self.copies:
            left_value = self.query_advice(left.column, left.row)
            right_value = self.query_advice(right.column, right.row)
            if left_value != right_value:
                failures.append(PermutationMismatch(left, right, left_value, right_value))
        for cell, column, row in self.instance_bindings:
            actual = self.query_advice(cell.column, cell.row)
            expected = self.query_instance(column, row)
            if actual != expected:
                failures.append(PublicInputMismatch(column, row, expected, actual))
        return failures

    def verify(self):
        """모든 검사를 수행하고 실패 기록 리스트를 반환한다. 빈 리스트면 만족."""
        failures = self._check_gates() + self._check_copies()
        logger.debug("MockProver(k=%d): 실패 %d건", self.k, len(failures))
        return failures

    def is_satisfied(self):
        return not self.verify()

    def assert_satisfied(self):
        """실패가 하나라도 있으면 VerificationError를 던진다."""
        failures = self.verify()
        if failures:
            raise VerificationError(failures)
