"""
게이트 다항식 표현식 (Expression AST)
======================================

게이트는 열(column)에 대한 질의(query)로 만든 다항식의 리스트이다.
이 모듈은 그 다항식을 트리로 표현한다.

**잎(leaf) 노드**:
  - Constant: 상수 c ∈ FR
  - SelectorQuery: 현재 행의 셀렉터 값 (0 또는 1)
  - AdviceQuery: advice 열의 (현재 행 + 회전) 값
  - InstanceQuery: instance 열의 (현재 행 + 회전) 값

**내부 노드**:
  - Negated: -e
  - Sum: e₁ + e₂
  - Product: e₁ · e₂

**차수(degree)**:
  질의 하나는 차수 1, 상수는 0. 곱은 차수의 합, 합은 최댓값.
  예: s·(l·r - m) 의 차수는 3.

사용 예시:
    >>> s = SelectorQuery(selector)
    >>> l = AdviceQuery(lhs, Rotation.cur())
    >>> expr = s * (l - 1)
    >>> expr.degree()   # 2
"""

from factor_zk.field import FR, to_fr, format_fr


class Rotation:
    """현재 행 기준의 상대 행 오프셋."""

    def __init__(self, offset=0):
        self.offset = offset

    @staticmethod
    def cur():
        return Rotation(0)

    @staticmethod
    def next():
        return Rotation(1)

    @staticmethod
    def prev():
        return Rotation(-1)

    def __eq__(self, other):
        return isinstance(other, Rotation) and self.offset == other.offset

    def __hash__(self):
        return hash(self.offset)

    def __repr__(self):
        return f"Rotation({self.offset})"


def _lift(value):
    if isinstance(value, Expression):
        return value
    return Constant(value)


class Expression:
    """게이트 다항식의 기본 클래스.

    파이썬 연산자(+, -, *, 단항 -)로 조합한다. 정수와 FR은
    자동으로 Constant로 변환된다.
    """

    def __add__(self, other):
        return Sum(self, _lift(other))

    def __radd__(self, other):
        return Sum(_lift(other), self)

    def __sub__(self, other):
        return Sum(self, Negated(_lift(other)))

    def __rsub__(self, other):
        return Sum(_lift(other), Negated(self))

    def __mul__(self, other):
        return Product(self, _lift(other))

    def __rmul__(self, other):
        return Product(_lift(other), self)

    def __neg__(self):
        return Negated(self)

    def degree(self):
        raise NotImplementedError

    def evaluate(self, table, row):
        """행 row에서 표현식을 평가한다.

        Args:
            table: query_advice(column, row), query_instance(column, row),
                   query_selector(selector, row) 메서드를 가진 객체
            row: 평가할 행 (회전은 table 쪽에서 처리)

        Returns:
            FR: 평가값
        """
        raise NotImplementedError

    def queried_advice(self):
        """이 표현식이 질의하는 (advice 열, 회전) 리스트."""
        return []

    def queried_selectors(self):
        """이 표현식이 질의하는 셀렉터 리스트."""
        return []


class Constant(Expression):

    def __init__(self, value):
        self.value = to_fr(value)

    def degree(self):
        return 0

    def evaluate(self, table, row):
        return self.value

    def __repr__(self):
        return format_fr(self.value)


class SelectorQuery(Expression):

    def __init__(self, selector):
        self.selector = selector

    def degree(self):
        return 1

    def evaluate(self, table, row):
        return table.query_selector(self.selector, row)

    def queried_selectors(self):
        return [self.selector]

    def __repr__(self):
        return f"S{self.selector.index}"


class AdviceQuery(Expression):

    def __init__(self, column, rotation):
        self.column = column
        self.rotation = rotation

    def degree(self):
        return 1

    def evaluate(self, table, row):
        return table.query_advice(self.column, row + self.rotation.offset)

    def queried_advice(self):
        return [(self.column, self.rotation)]

    def __repr__(self):
        return f"A{self.column.index}@{self.rotation.offset}"


class InstanceQuery(Expression):

    def __init__(self, column, rotation):
        self.column = column
        self.rotation = rotation

    def degree(self):
        return 1

    def evaluate(self, table, row):
        return table.query_instance(self.column, row + self.rotation.offset)

    def __repr__(self):
        return f"I{self.column.index}@{self.rotation.offset}"


class Negated(Expression):

    def __init__(self, inner):
        self.inner = inner

    def degree(self):
        return self.inner.degree()

    def evaluate(self, table, row):
        return -self.inner.evaluate(table, row)

    def queried_advice(self):
        return self.inner.queried_advice()

    def queried_selectors(self):
        return self.inner.queried_selectors()

    def __repr__(self):
        return f"-{self.inner!r}"


class _Binary(Expression):

    def __init__(self, left, right):
        self.left = left
        self.right = right

    def queried_advice(self):
        return self.left.queried_advice() + self.right.queried_advice()

    def queried_selectors(self):
        return self.left.queried_selectors() + self.right.queried_selectors()


class Sum(_Binary):

    def degree(self):
        return max(self.left.degree(), self.right.degree())

    def evaluate(self, table, row):
        return self.left.evaluate(table, row) + self.right.evaluate(table, row)

    def __repr__(self):
        if isinstance(self.right, Negated):
            return f"({self.left!r} - {self.right.inner!r})"
        return f"({self.left!r} + {self.right!r})"


class Product(_Binary):

    def degree(self):
        return self.left.degree() + self.right.degree()

    def evaluate(self, table, row):
        left = self.left.evaluate(table, row)
        # 셀렉터가 꺼진 행에서는 나머지 항을 평가하지 않는다
        if left == FR(0):
            return left
        return left * self.right.evaluate(table, row)

    def __repr__(self):
        return f"{self.left!r} * {self.right!r}"
