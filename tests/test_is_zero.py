"""
IsZero 가젯 테스트.

  - expr() 평가: e = 0 → 1, e ≠ 0 → 0
  - 게이트 구성: 차수, 제약 이름
  - 회로 안에서의 동작: 올바른 출력, 위조된 출력/역원 거부
"""
import pytest

from factor_zk.field import FR, CURVE_ORDER, invert_or_zero
from factor_zk.circuit import Circuit
from factor_zk.constraint_system import ConstraintSystem
from factor_zk.gadgets.is_zero import IsZeroChip, IsZeroConfig
from factor_zk.layouter import Value
from factor_zk.mock_prover import MockProver


class IsZeroCircuit(Circuit):
    """out = IsZero(value) 를 검사하는 회로.

    inv를 직접 지정하면 가젯의 정규 할당 대신 그 값을 쓴다.
    """

    def __init__(self, value=None, out=None, inv=None):
        self.value = value
        self.out = out
        self.inv = inv

    def without_witnesses(self):
        return IsZeroCircuit()

    @staticmethod
    def configure(meta):
        value = meta.advice_column()
        out = meta.advice_column()
        selector = meta.selector()
        is_zero = IsZeroChip.configure(
            meta,
            lambda vc: vc.query_selector(selector),
            lambda vc: vc.query_advice(value),
            meta.advice_column(),
        )
        meta.create_gate("output", lambda vc: [
            vc.query_selector(selector) * (vc.query_advice(out) - is_zero.expr()),
        ])
        return value, out, selector, is_zero

    def synthesize(self, config, layouter):
        value, out, selector, is_zero = config
        chip = IsZeroChip(is_zero)
        with layouter.region("is zero") as region:
            region.enable_selector("is zero", selector, 0)
            region.assign_advice("value", value, 0, self.value)
            region.assign_advice("out", out, 0, self.out)
            if self.inv is None:
                chip.assign(region, 0, self.value)
            else:
                region.assign_advice("value inv", is_zero.value_inv, 0, self.inv)


def _failed_gates(circuit):
    return [f.gate for f in MockProver.run(3, circuit, []).verify()]


class TestIsZeroExpression:
    @pytest.fixture
    def gadget(self):
        meta = ConstraintSystem()
        value = meta.advice_column()
        selector = meta.selector()
        config = IsZeroChip.configure(
            meta,
            lambda vc: vc.query_selector(selector),
            lambda vc: vc.query_advice(value),
            meta.advice_column(),
        )
        return meta, value, selector, config

    @pytest.mark.parametrize("e", [1, 2, 11, 142, CURVE_ORDER - 1])
    def test_nonzero_is_zero_expr_is_zero(self, gadget, table_stub, e):
        _, value, _, config = gadget
        table = table_stub(advice={(value, 0): FR(e), (config.value_inv, 0): invert_or_zero(FR(e))})
        assert config.expr().evaluate(table, 0) == FR(0)

    def test_zero_is_zero_expr_is_one(self, gadget, table_stub):
        _, value, _, config = gadget
        table = table_stub(advice={(value, 0): FR(0), (config.value_inv, 0): invert_or_zero(FR(0))})
        assert config.expr().evaluate(table, 0) == FR(1)

    def test_gate_registration(self, gadget):
        meta, _, _, config = gadget
        assert isinstance(config, IsZeroConfig)
        assert [g.name for g in meta.gates] == ["is_zero"]
        assert meta.gates[0].constraint_names == ["e * z == 0"]
        # s · e · (1 - e · inv)
        assert meta.gates[0].degree() == 4
        assert config.expr().degree() == 2

    def test_assign_computes_inverse(self, gadget):
        _, _, _, config = gadget
        assigned = []

        class Region:
            def assign_advice(self, name, column, offset, value):
                assigned.append((name, column, offset, value))
                return value

        IsZeroChip(config).assign(Region(), 0, FR(4))
        IsZeroChip(config).assign(Region(), 1, Value.known(0))
        IsZeroChip(config).assign(Region(), 2, Value.unknown())
        assert assigned[0][3].assign() * FR(4) == FR(1)
        assert assigned[1][3].assign() == FR(0)
        assert not assigned[2][3].is_known()
        assert all(column == config.value_inv for _, column, _, _ in assigned)


class TestIsZeroCircuit:
    @pytest.mark.parametrize("value, out", [(0, 1), (5, 0), (CURVE_ORDER - 1, 0)])
    def test_honest_assignment(self, value, out):
        assert _failed_gates(IsZeroCircuit(value, out)) == []

    def test_wrong_output_for_nonzero(self):
        assert _failed_gates(IsZeroCircuit(5, 1)) == ["output"]

    def test_wrong_output_for_zero(self):
        assert _failed_gates(IsZeroCircuit(0, 0)) == ["output"]

    def test_forged_inverse_rejected(self):
        # inv = 0 이면 z = 1 이 되어 e · z ≠ 0
        assert _failed_gates(IsZeroCircuit(5, 1, inv=0)) == ["is_zero"]
        # 틀린 역원이면 z ∉ {0, 1}
        assert sorted(_failed_gates(IsZeroCircuit(5, 0, inv=2))) == ["is_zero", "output"]

    def test_inverse_is_free_when_value_is_zero(self):
        # e = 0 이면 z = 1 이 inv와 무관하게 정해진다
        assert _failed_gates(IsZeroCircuit(0, 1, inv=7)) == []

    def test_unknown_value_cannot_be_assigned(self):
        from factor_zk.errors import AssignmentError
        with pytest.raises(AssignmentError):
            MockProver.run(3, IsZeroCircuit().without_witnesses(), [])
