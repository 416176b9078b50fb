"""
인수분해 관계 테스트: FactorCircuit (제약 부족), SoundFactorCircuit (건전)

시나리오 (공개 값 143 = 11 · 13):
  | 회로   | lhs | rhs | 공개 | 결과                        |
  |--------|-----|-----|------|-----------------------------|
  | sound  | 11  | 13  | 143  | 통과                        |
  | sound  | 1   | 143 | 143  | 거부                        |
  | under  | 11  | 13  | 143  | 통과                        |
  | under  | 1   | 143 | 143  | 통과 (자명한 인수분해 결함) |
  | sound  | 11  | 13  | 999  | 거부 (공개 입력 불일치)     |
"""
import random
import pytest

from factor_zk.field import FR, CURVE_ORDER
from factor_zk.factor import DEFAULT_K, check_factor
from factor_zk.factor.sound import SoundFactorChip, SoundFactorCircuit, SoundFactorConfig
from factor_zk.factor.under_constrained import FactorChip, FactorCircuit, FactorConfig
from factor_zk.mock_prover import MockProver
from factor_zk.errors import AssignmentError, ConfigurationError, PublicInputMismatch, UnsatisfiedConstraint


K = DEFAULT_K


def _run(circuit_class, lhs, rhs, public, configured=None):
    prover = MockProver.run(K, circuit_class(FR(lhs), FR(rhs)), [[FR(public)]], configured=configured)
    return prover.verify()


# ─────────────────────────────────────────────────────────────────────
# 구체적 시나리오
# ─────────────────────────────────────────────────────────────────────

class TestScenarios:
    def test_sound_honest_prover(self):
        MockProver.run(K, SoundFactorCircuit(FR(11), FR(13)), [[FR(143)]]).assert_satisfied()

    def test_sound_rejects_trivial_factorization(self):
        failures = _run(SoundFactorCircuit, 1, 143, 143)
        assert failures == [UnsatisfiedConstraint("mul & not one", "lhs != 1", 0, [])]

    def test_under_constrained_honest_prover(self):
        MockProver.run(K, FactorCircuit(FR(11), FR(13)), [[FR(143)]]).assert_satisfied()

    def test_under_constrained_accepts_trivial_factorization(self):
        # 알려진 결함: lhs = 1 을 막는 제약이 없다
        MockProver.run(K, FactorCircuit(FR(1), FR(143)), [[FR(143)]]).assert_satisfied()

    def test_sound_public_mismatch(self):
        failures = _run(SoundFactorCircuit, 11, 13, 999)
        assert len(failures) == 1
        assert isinstance(failures[0], PublicInputMismatch)
        assert failures[0].expected == FR(999)
        assert failures[0].actual == FR(143)


# ─────────────────────────────────────────────────────────────────────
# 성질 (표본 값에 대해)
# ─────────────────────────────────────────────────────────────────────

SAMPLE_VALUES = [0, 2, 3, 11, 13, 143, CURVE_ORDER - 1, CURVE_ORDER - 2]


def _random_values(count, seed=12345):
    rng = random.Random(seed)
    return [rng.randrange(2, CURVE_ORDER) for _ in range(count)]


class TestSoundness:
    @pytest.mark.parametrize("other", SAMPLE_VALUES + [1])
    def test_lhs_one_always_rejected(self, sound_configured, other):
        failures = _run(SoundFactorCircuit, 1, other, other, sound_configured)
        assert "lhs != 1" in [f.constraint for f in failures if isinstance(f, UnsatisfiedConstraint)]

    @pytest.mark.parametrize("other", SAMPLE_VALUES + [1])
    def test_rhs_one_always_rejected(self, sound_configured, other):
        failures = _run(SoundFactorCircuit, other, 1, other, sound_configured)
        assert "rhs != 1" in [f.constraint for f in failures if isinstance(f, UnsatisfiedConstraint)]

    @pytest.mark.parametrize("public", [0, 1, 143, 999])
    def test_rejected_regardless_of_public(self, sound_configured, public):
        assert _run(SoundFactorCircuit, 1, 143, public, sound_configured) != []

    def test_target_one_with_unit_factors_rejected(self, sound_configured):
        assert _run(SoundFactorCircuit, 1, 1, 1, sound_configured) != []

    def test_forged_product_rejected(self, sound_configured):
        _, config = sound_configured
        prover = MockProver.run(K, SoundFactorCircuit(FR(11), FR(13)), [[FR(143)]], configured=sound_configured)
        prover.advice[config.product.index][0] = FR(144)
        kinds = sorted(f.kind for f in prover.verify())
        assert kinds == ["PublicInputMismatch", "UnsatisfiedConstraint"]


class TestCompleteness:
    @pytest.mark.parametrize("lhs", SAMPLE_VALUES)
    @pytest.mark.parametrize("rhs", [0, 2, 13, CURVE_ORDER - 1])
    def test_sample_pairs(self, sound_configured, lhs, rhs):
        public = FR(lhs) * FR(rhs)
        assert _run(SoundFactorCircuit, lhs, rhs, int(public), sound_configured) == []

    def test_random_pairs(self, sound_configured):
        values = _random_values(10)
        for lhs, rhs in zip(values[::2], values[1::2]):
            public = FR(lhs) * FR(rhs)
            assert _run(SoundFactorCircuit, lhs, rhs, int(public), sound_configured) == []

    def test_inverse_pair_for_target_one(self, sound_configured):
        # 1의 정수 인수분해는 자명하지만, 필드 위에서는 2 · 2⁻¹ = 1 이 통과한다
        two_inv = FR(1) / FR(2)
        assert _run(SoundFactorCircuit, 2, int(two_inv), 1, sound_configured) == []


class TestPublicBinding:
    @pytest.mark.parametrize("circuit_class", [FactorCircuit, SoundFactorCircuit])
    @pytest.mark.parametrize("delta", [1, -1, 856])
    def test_changed_public_value_fails(self, circuit_class, delta):
        failures = _run(circuit_class, 11, 13, 143 + delta)
        assert [f.kind for f in failures] == ["PublicInputMismatch"]

    @pytest.mark.parametrize("circuit_class", [FactorCircuit, SoundFactorCircuit])
    def test_product_bound_to_instance_row_zero(self, circuit_class):
        prover = MockProver.run(K, circuit_class(FR(11), FR(13)), [[FR(143)]])
        assert len(prover.instance_bindings) == 1
        cell, column, row = prover.instance_bindings[0]
        assert row == 0
        assert cell.row == 0
        assert "expose" not in cell.region
        assert cell.region == "circuit assign/factor row"


# ─────────────────────────────────────────────────────────────────────
# 구성 (configure)
# ─────────────────────────────────────────────────────────────────────

class TestConfigure:
    def test_under_constrained_layout(self, under_configured):
        cs, config = under_configured
        assert isinstance(config, FactorConfig)
        assert cs.num_advice_columns == 3
        assert cs.num_instance_columns == 1
        assert cs.num_selectors == 1
        assert [g.name for g in cs.gates] == ["mul"]
        assert cs.gates[0].constraint_names == ["lhs * rhs == product"]
        assert cs.equality_columns == [config.product, config.instance]
        assert cs.degree() == 3

    def test_sound_layout(self, sound_configured):
        cs, config = sound_configured
        assert isinstance(config, SoundFactorConfig)
        # lhs, rhs, product + 역원 열 2개
        assert cs.num_advice_columns == 5
        assert config.lhs_equals_one.value_inv != config.rhs_equals_one.value_inv
        assert [g.name for g in cs.gates] == ["is_zero", "is_zero", "mul & not one"]
        assert cs.gates[-1].constraint_names == ["lhs * rhs == product", "lhs != 1", "rhs != 1"]
        assert cs.degree() == 4

    def test_configuration_is_frozen(self, sound_configured):
        cs, _ = sound_configured
        assert cs.frozen

    def test_chip_classes(self):
        assert FactorCircuit.chip_class is FactorChip
        assert SoundFactorCircuit.chip_class is SoundFactorChip

    def test_configuration_records_circuit_class(self, sound_configured, under_configured):
        assert sound_configured[0].owner is SoundFactorCircuit
        assert under_configured[0].owner is FactorCircuit

    @pytest.mark.parametrize("circuit_class, other", [
        (SoundFactorCircuit, "under"),
        (FactorCircuit, "sound"),
    ])
    def test_configuration_from_other_circuit_rejected(self, sound_configured, under_configured, circuit_class, other):
        configured = under_configured if other == "under" else sound_configured
        with pytest.raises(ConfigurationError, match="구성된 제약 시스템"):
            MockProver.run(K, circuit_class(FR(11), FR(13)), [[FR(143)]], configured=configured)


# ─────────────────────────────────────────────────────────────────────
# witness 할당
# ─────────────────────────────────────────────────────────────────────

class TestAssignRow:
    def test_sound_row_contents(self, sound_configured):
        _, config = sound_configured
        prover = MockProver.run(K, SoundFactorCircuit(FR(11), FR(13)), [[FR(143)]], configured=sound_configured)
        row = {
            "lhs": prover.advice[config.lhs.index][0],
            "rhs": prover.advice[config.rhs.index][0],
            "product": prover.advice[config.product.index][0],
            "lhs_inv": prover.advice[config.lhs_equals_one.value_inv.index][0],
            "rhs_inv": prover.advice[config.rhs_equals_one.value_inv.index][0],
        }
        assert row["lhs"] == FR(11)
        assert row["rhs"] == FR(13)
        assert row["product"] == FR(143)
        assert row["lhs_inv"] * FR(10) == FR(1)
        assert row["rhs_inv"] * FR(12) == FR(1)
        assert prover.selectors[config.selector.index] == [True] + [False] * (prover.n - 1)

    def test_trivial_factor_inverse_is_zero(self, sound_configured):
        _, config = sound_configured
        prover = MockProver.run(K, SoundFactorCircuit(FR(1), FR(143)), [[FR(143)]], configured=sound_configured)
        assert prover.advice[config.lhs_equals_one.value_inv.index][0] == FR(0)

    def test_only_row_zero_used(self, under_configured):
        prover = MockProver.run(K, FactorCircuit(FR(11), FR(13)), [[FR(143)]], configured=under_configured)
        for column in prover.advice:
            assert all(v is None for v in column[1:])

    @pytest.mark.parametrize("circuit_class", [FactorCircuit, SoundFactorCircuit])
    def test_without_witnesses_aborts(self, circuit_class):
        circuit = circuit_class(FR(11), FR(13)).without_witnesses()
        with pytest.raises(AssignmentError):
            MockProver.run(K, circuit, [[FR(143)]])

    def test_int_inputs_accepted(self):
        MockProver.run(K, SoundFactorCircuit(11, 13), [[143]]).assert_satisfied()


# ─────────────────────────────────────────────────────────────────────
# check_factor
# ─────────────────────────────────────────────────────────────────────

class TestCheckFactor:
    def test_sound_default(self):
        assert check_factor(11, 13, 143) == []
        assert check_factor(1, 143, 143) != []

    def test_under_constrained(self):
        assert check_factor(1, 143, 143, sound=False) == []

    def test_public_mismatch(self):
        assert [f.kind for f in check_factor(11, 13, 999)] == ["PublicInputMismatch"]
