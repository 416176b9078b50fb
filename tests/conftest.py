import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from factor_zk.field import FR
from factor_zk.factor.sound import SoundFactorCircuit
from factor_zk.factor.under_constrained import FactorCircuit
from factor_zk.mock_prover import MockProver


class TableStub:
    """Expression.evaluate용 최소 테이블: {(열, 행): 값} 딕셔너리 기반."""

    def __init__(self, advice=None, instance=None, selectors=None):
        self.advice = advice or {}
        self.instance = instance or {}
        self.selectors = selectors or {}

    def query_advice(self, column, row):
        return self.advice.get((column, row), FR(0))

    def query_instance(self, column, row):
        return self.instance.get((column, row), FR(0))

    def query_selector(self, selector, row):
        return FR(1) if self.selectors.get((selector, row)) else FR(0)


@pytest.fixture
def table_stub():
    return TableStub


@pytest.fixture(scope="module")
def sound_configured():
    """SoundFactorCircuit의 고정된 (cs, config) — 여러 run에서 공유."""
    return MockProver.configure(SoundFactorCircuit())


@pytest.fixture(scope="module")
def under_configured():
    return MockProver.configure(FactorCircuit())
