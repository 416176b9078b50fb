"""
인수분해 관계
==============

두 가지 회로를 제공한다.

  | 회로                | 제약                                   | lhs=1, rhs=143 |
  |---------------------|----------------------------------------|----------------|
  | FactorCircuit       | lhs · rhs = product                    | 통과 (결함)    |
  | SoundFactorCircuit  | lhs · rhs = product, lhs ≠ 1, rhs ≠ 1  | 거부           |

두 회로 모두 product 셀을 공개 입력 instance[0]에 묶는다.

사용 예시:
    >>> from factor_zk.factor import check_factor
    >>> check_factor(11, 13, 143)          # []
    >>> check_factor(1, 143, 143)          # [UnsatisfiedConstraint(...)]
"""

from factor_zk.factor.sound import SoundFactorCircuit
from factor_zk.factor.under_constrained import FactorCircuit
from factor_zk.mock_prover import MockProver


# 테이블 크기 지수: 2^4 = 16행 (한 행만 사용)
DEFAULT_K = 4


def check_factor(lhs, rhs, public, sound=True, k=DEFAULT_K):
    """(lhs, rhs)와 공개 값 public에 대해 회로를 검사한다.

    Args:
        lhs, rhs: 인수 (정수 또는 FR)
        public: 공개 곱 값 (정수 또는 FR)
        sound: True면 SoundFactorCircuit, False면 FactorCircuit
        k: 테이블 크기 지수

    Returns:
        list: 검증 실패 기록. 빈 리스트면 관계가 성립한다.
    """
    circuit_class = SoundFactorCircuit if sound else FactorCircuit
    prover = MockProver.run(k, circuit_class(lhs, rhs), [[public]])
    return prover.verify()
