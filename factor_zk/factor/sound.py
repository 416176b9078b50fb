"""
인수분해 관계 — 건전한(sound) 버전
===================================

under_constrained.py의 회로에 "어느 인수도 1이 아니다"라는 조건을 더한다.

**테이블 배치** (행 0 하나만 사용):
  | lhs | rhs | product | lhs_inv     | rhs_inv     | instance | s |
  |-----|-----|---------|-------------|-------------|----------|---|
  | 11  | 13  | 143     | (11 - 1)⁻¹  | (13 - 1)⁻¹  | 143      | 1 |

**게이트 "mul & not one"**:
  s · (lhs · rhs - product)       = 0
  s · IsZero(lhs - 1).expr()      = 0    ← lhs = 1 거부
  s · IsZero(rhs - 1).expr()      = 0    ← rhs = 1 거부

  IsZero(e).expr() = 1 - e · inv 가 0이려면 e · inv = 1,
  즉 e ≠ 0 (lhs ≠ 1)이어야 한다.

**보장**:
  lhs ≠ 1, rhs ≠ 1, lhs · rhs = product 일 때만 검증된다.
  거부되는 것은 1을 인수로 쓰는 쌍뿐이다. 공개 값이 1이어도
  (1, 1)은 거부되지만, 필드 위의 역원 쌍 2 · 2⁻¹ = 1 은 통과한다.
  정수 범위 검사는 하지 않는다.
"""

from factor_zk.factor.under_constrained import FactorChip, FactorCircuit, FactorConfig
from factor_zk.gadgets.is_zero import IsZeroChip


class SoundFactorConfig(FactorConfig):
    """FactorConfig에 두 IsZero 구성을 더한 것.

    속성:
        lhs_equals_one: IsZero(lhs - 1) 구성
        rhs_equals_one: IsZero(rhs - 1) 구성
    """

    def __init__(self, lhs, rhs, product, instance, selector, lhs_equals_one, rhs_equals_one):
        super().__init__(lhs, rhs, product, instance, selector)
        self.lhs_equals_one = lhs_equals_one
        self.rhs_equals_one = rhs_equals_one


class SoundFactorChip(FactorChip):

    @classmethod
    def configure(cls, meta):
        columns = cls.configure_columns(meta)
        lhs, rhs, _, _, selector = columns

        lhs_equals_one = IsZeroChip.configure(
            meta,
            lambda vc: vc.query_selector(selector),
            lambda vc: vc.query_advice(lhs) - 1,
            meta.advice_column(),
        )
        rhs_equals_one = IsZeroChip.configure(
            meta,
            lambda vc: vc.query_selector(selector),
            lambda vc: vc.query_advice(rhs) - 1,
            meta.advice_column(),
        )

        def constraints(vc):
            s = vc.query_selector(selector)
            return [
                cls.mul_constraint(vc, columns),
                ("lhs != 1", s * lhs_equals_one.expr()),
                ("rhs != 1", s * rhs_equals_one.expr()),
            ]

        meta.create_gate("mul & not one", constraints)
        return SoundFactorConfig(*columns, lhs_equals_one, rhs_equals_one)

    def assign_extra(self, region, offset, lhs, rhs):
        """lhs - 1, rhs - 1에 대한 inverse-or-zero witness를 할당한다."""
        IsZeroChip(self.config.lhs_equals_one).assign(region, offset, lhs - 1)
        IsZeroChip(self.config.rhs_equals_one).assign(region, offset, rhs - 1)


class SoundFactorCircuit(FactorCircuit):
    """lhs · rhs = 공개 값, lhs ≠ 1, rhs ≠ 1 을 증명하는 회로.

    예시:
        >>> circuit = SoundFactorCircuit(FR(1), FR(143))
        >>> MockProver.run(4, circuit, [[FR(143)]]).is_satisfied()   # False
    """
    chip_class = SoundFactorChip
