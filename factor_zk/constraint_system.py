"""
제약 시스템 (Constraint System)
================================

PLONKish 산술화의 "설계도": 어떤 열이 있고, 어떤 게이트가 어떤 열을
어떤 행 오프셋에서 묶는지를 등록한다. witness 값은 전혀 담지 않는다.

**열(column) 종류**:
  | 종류     | 값의 주인        | 검증자에게 공개 |
  |----------|------------------|-----------------|
  | advice   | prover (witness) | 아니오          |
  | instance | 외부 입력        | 예              |

  셀렉터(selector)는 행마다 게이트를 켜고 끄는 0/1 열이다.

**게이트**:
  이름이 붙은 다항식 리스트. 모든 행에서 각 다항식이 0으로 평가되어야 한다.
  보통 셀렉터를 곱해 두어 셀렉터가 꺼진 행에서는 자동으로 0이 된다.

    s · (l · r - m) = 0

**복사(equality) 제약**:
  enable_equality로 표시된 열의 셀끼리만 복사 제약을 걸 수 있다.
  공개 입력 바인딩도 advice 셀과 instance 셀 사이의 복사 제약이다.

**단계 분리**:
  configure가 끝나면 freeze()로 봉인한다. 봉인된 시스템은 읽기 전용이며
  여러 witness 합성 인스턴스가 공유할 수 있다.

사용 예시:
    >>> meta = ConstraintSystem()
    >>> a, b = meta.advice_column(), meta.advice_column()
    >>> s = meta.selector()
    >>> meta.create_gate("square", lambda vc: [
    ...     vc.query_selector(s) * (vc.query_advice(a) * vc.query_advice(a) - vc.query_advice(b))
    ... ])
"""

import logging

from factor_zk.errors import ConfigurationError
from factor_zk.expression import (
    AdviceQuery,
    Expression,
    InstanceQuery,
    Rotation,
    SelectorQuery,
)

logger = logging.getLogger(__name__)


ADVICE = "advice"
INSTANCE = "instance"


class Column:
    """제약 시스템의 열.

    속성:
        index: 같은 종류 안에서의 열 번호
        column_type: ADVICE 또는 INSTANCE
    """

    def __init__(self, index, column_type):
        self.index = index
        self.column_type = column_type

    def __eq__(self, other):
        return (
            isinstance(other, Column)
            and self.index == other.index
            and self.column_type == other.column_type
        )

    def __hash__(self):
        return hash((self.index, self.column_type))

    def __repr__(self):
        return f"Column({self.column_type}, {self.index})"


class Selector:

    def __init__(self, index):
        self.index = index

    def __eq__(self, other):
        return isinstance(other, Selector) and self.index == other.index

    def __hash__(self):
        return hash(("selector", self.index))

    def __repr__(self):
        return f"Selector({self.index})"


class Gate:
    """이름이 붙은 게이트: 모든 행에서 0이 되어야 하는 다항식 리스트.

    속성:
        name: 게이트 이름
        constraint_names: 각 다항식의 이름 (없으면 인덱스 문자열)
        polynomials: Expression 리스트
    """

    def __init__(self, name, constraint_names, polynomials):
        self.name = name
        self.constraint_names = constraint_names
        self.polynomials = polynomials

    def degree(self):
        return max(poly.degree() for poly in self.polynomials)

    def queried_selectors(self):
        selectors = []
        for poly in self.polynomials:
            for selector in poly.queried_selectors():
                if selector not in selectors:
                    selectors.append(selector)
        return selectors

    def queried_advice(self):
        cells = []
        for poly in self.polynomials:
            for cell in poly.queried_advice():
                if cell not in cells:
                    cells.append(cell)
        return cells

    def check(self, table, row):
        """행 row에서 0이 아닌 제약의 (이름, 다항식) 리스트를 반환한다."""
        return [
            (name, poly)
            for name, poly in zip(self.constraint_names, self.polynomials)
            if poly.evaluate(table, row) != 0
        ]

    def __repr__(self):
        return f"Gate({self.name!r}, {self.polynomials!r})"


class VirtualCells:
    """create_gate 콜백에 전달되는 질의 도우미.

    게이트 안에서 열/셀렉터를 질의해 Expression 잎 노드를 만든다.
    """

    def __init__(self, meta):
        self.meta = meta

    def query_advice(self, column, rotation=None):
        if column.column_type != ADVICE:
            raise ConfigurationError(f"advice 열이 아닙니다: {column!r}")
        return AdviceQuery(column, rotation or Rotation.cur())

    def query_instance(self, column, rotation=None):
        if column.column_type != INSTANCE:
            raise ConfigurationError(f"instance 열이 아닙니다: {column!r}")
        return InstanceQuery(column, rotation or Rotation.cur())

    def query_selector(self, selector):
        return SelectorQuery(selector)


class ConstraintSystem:
    """열, 셀렉터, 게이트, 복사 가능 열을 등록하는 제약 시스템.

    속성:
        num_advice_columns: advice 열 수
        num_instance_columns: instance 열 수
        num_selectors: 셀렉터 수
        gates: Gate 리스트
        equality_columns: enable_equality가 호출된 열 리스트
        owner: freeze 시 기록된 회로 클래스 (없으면 None)
    """

    def __init__(self):
        self.num_advice_columns = 0
        self.num_instance_columns = 0
        self.num_selectors = 0
        self.gates = []
        self.equality_columns = []
        self.frozen = False
        self.owner = None

    def _check_mutable(self):
        if self.frozen:
            raise ConfigurationError("고정된 제약 시스템은 수정할 수 없습니다")

    def advice_column(self):
        """새 advice(witness) 열을 할당한다."""
        self._check_mutable()
        column = Column(self.num_advice_columns, ADVICE)
        self.num_advice_columns += 1
        return column

    def instance_column(self):
        """새 instance(공개 입력) 열을 할당한다."""
        self._check_mutable()
        column = Column(self.num_instance_columns, INSTANCE)
        self.num_instance_columns += 1
        return column

    def selector(self):
        self._check_mutable()
        selector = Selector(self.num_selectors)
        self.num_selectors += 1
        return selector

    def enable_equality(self, column):
        """column의 셀에 복사 제약을 걸 수 있게 표시한다."""
        self._check_mutable()
        if column not in self.equality_columns:
            self.equality_columns.append(column)

    def create_gate(self, name, constraints):
        """게이트를 등록한다.

        Args:
            name: 게이트 이름
            constraints: VirtualCells를 받아 Expression 리스트 또는
                         (이름, Expression) 튜플 리스트를 반환하는 콜백

        Returns:
            Gate: 등록된 게이트

        Raises:
            ConfigurationError: 제약이 없거나 Expression이 아닌 항목이 있을 때
        """
        self._check_mutable()
        polys = constraints(VirtualCells(self))
        if not polys:
            raise ConfigurationError(f"게이트 '{name}'에 제약이 없습니다")

        constraint_names = []
        polynomials = []
        for i, item in enumerate(polys):
            if isinstance(item, tuple):
                constraint_name, poly = item
            else:
                constraint_name, poly = str(i), item
            if not isinstance(poly, Expression):
                raise ConfigurationError(
                    f"게이트 '{name}'의 제약 {constraint_name}이 Expression이 아닙니다: {poly!r}"
                )
            constraint_names.append(constraint_name)
            polynomials.append(poly)

        gate = Gate(name, constraint_names, polynomials)
        self.gates.append(gate)
        logger.debug("게이트 등록: %s (제약 %d개, 차수 %d)", name, len(polynomials), gate.degree())
        return gate

    def degree(self):
        """등록된 게이트 중 최대 차수. 게이트가 없으면 1."""
        return max([1] + [gate.degree() for gate in self.gates])

    def freeze(self, owner=None):
        """configure 단계를 끝내고 시스템을 읽기 전용으로 만든다.

        Args:
            owner: 이 시스템을 구성한 회로 클래스 (공유 시 검사용)
        """
        self.frozen = True
        self.owner = owner
        return self
