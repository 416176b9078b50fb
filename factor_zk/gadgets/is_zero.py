"""
IsZero 가젯 (ZeroTest)
======================

필드 표현식 e에 대해 "e가 0인가"를 나타내는 불리언 표현식 z를 만든다.

**보조 witness**:
  inv = e⁻¹  (e ≠ 0)
  inv = 0    (e = 0)

**파생 불리언**:
  z = 1 - e · inv

  z는 독립된 witness가 아니라 표현식이다. 따라서 z ∈ {0, 1}을 강제하는
  별도의 불리언 제약이 필요 없다.

**제약** (q_enable = 1인 행에서):
  1. e · inv = 1 - z      ← z의 정의로 항상 성립
  2. e · z = 0            ← 게이트 "is_zero"로 등록

  | e     | inv    | z = 1 - e·inv | e·z |
  |-------|--------|---------------|-----|
  | ≠ 0   | e⁻¹    | 0             | 0 ✓ |
  | ≠ 0   | 그 외  | ≠ 0           | ≠ 0 ✗ (제약 2 위반) |
  | 0     | 임의   | 1             | 0 ✓ |

  e ≠ 0이면 제약 2 때문에 z = 0, 즉 inv = e⁻¹이어야 한다.
  e = 0이면 z = 1이 되고, 정규 선택으로 inv = 0을 할당한다.

**할당 불일치**:
  잘못된 inv를 할당해도 가젯은 예외를 던지지 않는다.
  불일치는 MockProver 검증에서 UnsatisfiedConstraint로 드러난다.

사용 예시:
    >>> config = IsZeroChip.configure(
    ...     meta,
    ...     lambda vc: vc.query_selector(s),
    ...     lambda vc: vc.query_advice(lhs) - 1,
    ...     meta.advice_column(),
    ... )
    >>> config.expr()                    # 1 - (lhs - 1)·inv
    >>> IsZeroChip(config).assign(region, 0, Value.known(lhs - 1))
"""

from factor_zk.constraint_system import VirtualCells
from factor_zk.field import invert_or_zero
from factor_zk.layouter import Value


class IsZeroConfig:
    """IsZero 가젯의 구성.

    속성:
        value_inv: 보조 witness inv를 담는 advice 열
        is_zero_expr: z = 1 - e·inv 표현식
    """

    def __init__(self, value_inv, is_zero_expr):
        self.value_inv = value_inv
        self.is_zero_expr = is_zero_expr

    def expr(self):
        """e = 0이면 1, 아니면 0으로 평가되는 표현식."""
        return self.is_zero_expr


class IsZeroChip:

    def __init__(self, config):
        self.config = config

    @staticmethod
    def configure(meta, q_enable, value, value_inv):
        """IsZero 게이트를 등록한다.

        Args:
            meta: ConstraintSystem
            q_enable: VirtualCells -> 셀렉터 표현식 콜백
            value: VirtualCells -> 검사 대상 표현식 e 콜백
            value_inv: inv 전용 advice 열

        Returns:
            IsZeroConfig
        """
        cells = VirtualCells(meta)
        e = value(cells)
        inv = cells.query_advice(value_inv)
        is_zero_expr = 1 - e * inv

        meta.create_gate("is_zero", lambda vc: [
            ("e * z == 0", q_enable(vc) * e * is_zero_expr),
        ])

        return IsZeroConfig(value_inv, is_zero_expr)

    def assign(self, region, offset, value):
        """e의 값으로부터 inv = invert_or_zero(e)를 계산해 할당한다.

        Args:
            region: Region
            offset: 영역 내 행 오프셋
            value: e의 값 (Value, FR 또는 정수)

        Returns:
            AssignedCell: inv 셀
        """
        value = value if isinstance(value, Value) else Value.known(value)
        inv = value.map(invert_or_zero)
        return region.assign_advice("value inv", self.config.value_inv, offset, inv)
