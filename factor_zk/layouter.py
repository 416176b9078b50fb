"""
영역(Region) 배치와 witness 할당
=================================

configure 단계에서 만든 열에 실제 값을 채우는 인터페이스.

**Value**:
  할당할 값이 알려져 있는지(known) 모르는지(unknown)를 함께 들고 다닌다.
  without_witnesses()로 만든 회로는 모든 값이 unknown이며, unknown 값을
  실제로 셀에 쓰려 하면 AssignmentError가 발생한다.

**Region**:
  이름이 붙은 연속된 행 블록. 오프셋 0부터 셀을 채우고 셀렉터를 켠다.
  영역 안의 오프셋은 배치 시점에 전역 행 번호로 바뀐다.

**SimpleLayouter**:
  영역을 빈 행에 차례로 쌓는 가장 단순한 배치기.
  region(name)은 컨텍스트 매니저로, with 블록이 끝나면 영역이 확정되고
  다음 영역은 그 아래 행부터 시작한다.

    with layouter.region("factor row") as region:
        region.enable_selector("mul", selector, 0)
        cell = region.assign_advice("lhs", lhs_column, 0, Value.known(11))
    layouter.constrain_instance(cell.cell, instance, 0)
"""

import logging
from contextlib import contextmanager

from factor_zk.errors import AssignmentError
from factor_zk.field import to_fr, format_fr

logger = logging.getLogger(__name__)


class Value:
    """알려졌을 수도, 아닐 수도 있는 필드 값.

    예시:
        >>> Value.known(11) * Value.known(13)   # Value(143)
        >>> Value.known(11) * Value.unknown()   # Value(unknown)
    """

    def __init__(self, inner=None):
        self.inner = inner

    @staticmethod
    def known(value):
        if isinstance(value, Value):
            return value
        return Value(to_fr(value))

    @staticmethod
    def unknown():
        return Value(None)

    def is_known(self):
        return self.inner is not None

    def map(self, fn):
        if self.inner is None:
            return Value.unknown()
        return Value.known(fn(self.inner))

    def _zip(self, other, fn):
        other = other if isinstance(other, Value) else Value.known(other)
        if self.inner is None or other.inner is None:
            return Value.unknown()
        return Value(fn(self.inner, other.inner))

    def __add__(self, other):
        return self._zip(other, lambda a, b: a + b)

    def __sub__(self, other):
        return self._zip(other, lambda a, b: a - b)

    def __mul__(self, other):
        return self._zip(other, lambda a, b: a * b)

    def __neg__(self):
        return self.map(lambda a: -a)

    def assign(self):
        """셀에 쓸 FR 값을 반환한다.

        Raises:
            AssignmentError: 값이 unknown일 때
        """
        if self.inner is None:
            raise AssignmentError("할당 시점에 값을 알 수 없습니다 (unknown)")
        return self.inner

    def __repr__(self):
        if self.inner is None:
            return "Value(unknown)"
        return f"Value({format_fr(self.inner)})"


class Cell:
    """배치가 끝난 셀의 위치.

    속성:
        region: 영역 이름
        column: 열
        row: 전역 행 번호
    """

    def __init__(self, region, column, row):
        self.region = region
        self.column = column
        self.row = row

    def __eq__(self, other):
        return isinstance(other, Cell) and (self.column, self.row) == (other.column, other.row)

    def __hash__(self):
        return hash((self.column, self.row))

    def __repr__(self):
        return f"{self.column!r}[{self.row}] (영역 '{self.region}')"


class AssignedCell:
    """값이 할당된 셀. 다른 영역이나 공개 입력에 복사 제약을 걸 때 사용한다."""

    def __init__(self, value, cell):
        self.value = value
        self.cell = cell

    def __repr__(self):
        return f"AssignedCell({self.value!r}, {self.cell!r})"


def _resolve(value):
    if callable(value):
        value = value()
    if isinstance(value, Value):
        return value
    if value is None:
        return Value.unknown()
    return Value.known(value)


class Region:
    """배치기가 열어 준 영역. 오프셋은 영역 시작 행 기준이다."""

    def __init__(self, name, backend, start):
        self.name = name
        self.backend = backend
        self.start = start
        self.rows = 0

    def _row(self, offset):
        if offset < 0:
            raise AssignmentError(f"영역 '{self.name}'의 오프셋은 음수일 수 없습니다: {offset}")
        self.rows = max(self.rows, offset + 1)
        return self.start + offset

    def assign_advice(self, name, column, offset, value):
        """advice 셀에 값을 할당한다.

        Args:
            name: 셀 이름 (디버깅용)
            column: advice 열
            offset: 영역 내 행 오프셋
            value: Value, FR, 정수 또는 이를 반환하는 콜백

        Returns:
            AssignedCell

        Raises:
            AssignmentError: 값이 unknown이거나 advice 열이 아닐 때
        """
        value = _resolve(value)
        row = self._row(offset)
        try:
            fr_value = value.assign()
        except AssignmentError as e:
            raise AssignmentError(f"영역 '{self.name}'의 셀 '{name}': {e}") from e
        self.backend.assign_advice(name, column, row, fr_value)
        return AssignedCell(value, Cell(self.name, column, row))

    def enable_selector(self, name, selector, offset):
        self.backend.enable_selector(name, selector, self._row(offset))

    def constrain_equal(self, left, right):
        """두 셀이 같은 값을 갖도록 복사 제약을 건다."""
        self.backend.copy(left, right)


class SimpleLayouter:
    """영역을 빈 행에 순서대로 쌓는 배치기.

    속성:
        backend: 테이블 저장소 (MockProver)
        next_row: 다음 영역이 시작할 행
    """

    def __init__(self, backend):
        self.backend = backend
        self.next_row = 0
        self._namespace = []

    def _qualified(self, name):
        return "/".join(self._namespace + [name])

    @contextmanager
    def namespace(self, name):
        self._namespace.append(name)
        try:
            yield self
        finally:
            self._namespace.pop()

    @contextmanager
    def region(self, name):
        """영역을 열고, with 블록이 정상 종료되면 확정한다.

        영역은 다음 빈 행에서 시작한다. 블록 안에서 예외가 나면
        영역은 확정되지 않고 예외가 그대로 전파된다.
        """
        region = Region(self._qualified(name), self.backend, self.next_row)
        yield region
        self.next_row = region.start + region.rows
        logger.debug("영역 배치: '%s' 행 %d..%d", region.name, region.start, self.next_row)

    def constrain_instance(self, cell, column, row):
        """cell이 instance 열 column의 row번째 값과 같도록 묶는다."""
        self.backend.constrain_instance(cell, column, row)
