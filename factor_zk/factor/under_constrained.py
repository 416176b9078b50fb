"""
인수분해 관계 — 제약 부족(under-constrained) 버전
=================================================

"prover는 곱이 공개 값과 같은 두 수 lhs, rhs를 안다"를 표현하는 회로.

**테이블 배치** (행 0 하나만 사용):
  | lhs | rhs | product | instance | s |
  |-----|-----|---------|----------|---|
  | 11  | 13  | 143     | 143      | 1 |

**게이트 "mul"**:
  s · (lhs · rhs - product) = 0

**공개 입력 바인딩**:
  product 셀 == instance[0]

**알려진 결함**:
  자명한 인수분해 lhs = 1, rhs = product를 막는 제약이 없다.
  "비자명한 인수분해를 안다"를 증명해야 할 회로가
  lhs = 1, rhs = 143도 받아들인다. 수정본은 sound.py를 볼 것.
"""

from factor_zk.circuit import Circuit
from factor_zk.layouter import Value


class FactorConfig:
    """인수분해 회로의 열 구성.

    속성:
        lhs, rhs, product: advice 열
        instance: 공개 입력 열
        selector: 곱셈 게이트 셀렉터
    """

    def __init__(self, lhs, rhs, product, instance, selector):
        self.lhs = lhs
        self.rhs = rhs
        self.product = product
        self.instance = instance
        self.selector = selector


class FactorChip:
    """FactorConfig의 열에 한 행을 채우고 곱을 공개 입력에 묶는 칩."""

    def __init__(self, config):
        self.config = config

    @staticmethod
    def configure_columns(meta):
        """lhs, rhs, product, instance 열과 셀렉터를 할당한다."""
        lhs = meta.advice_column()
        rhs = meta.advice_column()
        product = meta.advice_column()
        instance = meta.instance_column()
        selector = meta.selector()

        meta.enable_equality(product)
        meta.enable_equality(instance)
        return lhs, rhs, product, instance, selector

    @staticmethod
    def mul_constraint(vc, config_columns):
        lhs, rhs, product, _, selector = config_columns
        s = vc.query_selector(selector)
        l = vc.query_advice(lhs)
        r = vc.query_advice(rhs)
        m = vc.query_advice(product)
        return ("lhs * rhs == product", s * (l * r - m))

    @classmethod
    def configure(cls, meta):
        columns = cls.configure_columns(meta)
        meta.create_gate("mul", lambda vc: [cls.mul_constraint(vc, columns)])
        return FactorConfig(*columns)

    def assign_extra(self, region, offset, lhs, rhs):
        """곱셈 외의 보조 witness를 할당한다. 이 버전에는 없다."""

    def assign_row(self, layouter, lhs, rhs):
        """행 0에 lhs, rhs, product = lhs·rhs를 할당하고 셀렉터를 켠다.

        Args:
            layouter: SimpleLayouter
            lhs, rhs: Value, FR 또는 정수

        Returns:
            AssignedCell: product 셀 (공개 입력 바인딩용)
        """
        lhs = lhs if isinstance(lhs, Value) else Value.known(lhs)
        rhs = rhs if isinstance(rhs, Value) else Value.known(rhs)
        config = self.config

        with layouter.region("factor row") as region:
            region.enable_selector("mul", config.selector, 0)
            lhs_cell = region.assign_advice("lhs", config.lhs, 0, lhs)
            rhs_cell = region.assign_advice("rhs", config.rhs, 0, rhs)
            product_cell = region.assign_advice(
                "product", config.product, 0, lambda: lhs_cell.value * rhs_cell.value
            )
            self.assign_extra(region, 0, lhs, rhs)
        return product_cell

    def expose_public(self, layouter, cell, row):
        """cell을 instance 열의 row번째 공개 값에 묶는다."""
        layouter.constrain_instance(cell.cell, self.config.instance, row)


class FactorCircuit(Circuit):
    """lhs · rhs = 공개 값 을 증명하는 회로 (제약 부족 버전).

    예시:
        >>> circuit = FactorCircuit(FR(1), FR(143))
        >>> MockProver.run(4, circuit, [[FR(143)]]).verify()   # [] — 결함
    """
    chip_class = FactorChip

    def __init__(self, lhs=None, rhs=None):
        self.lhs = Value.unknown() if lhs is None else Value.known(lhs)
        self.rhs = Value.unknown() if rhs is None else Value.known(rhs)

    def without_witnesses(self):
        return type(self)()

    @classmethod
    def configure(cls, meta):
        return cls.chip_class.configure(meta)

    def synthesize(self, config, layouter):
        chip = self.chip_class(config)
        with layouter.namespace("circuit assign"):
            product_cell = chip.assign_row(layouter, self.lhs, self.rhs)
        with layouter.namespace("expose"):
            chip.expose_public(layouter, product_cell, 0)
