"""
기반 모듈: 유한체(Finite Field) FR
===================================

관계(relation) 전체에서 사용되는 스칼라 필드와 보조 연산을 정의한다.

**유한체 FR**:
  bn128(BN254) 타원곡선의 스칼라 필드. 모든 게이트 다항식의 평가,
  witness 할당, 공개 입력이 이 필드 위의 원소이다.
  - 위수(order) p ≈ 2^254, 소수체(prime field)
  - 오버플로 없음: 모든 연산은 p를 법으로 닫혀 있다

**역원-또는-영(inverse-or-zero)**:
  IsZero 가젯의 보조 witness. e ≠ 0이면 e⁻¹, e = 0이면 0.
  페르마 소정리 e^(p-2)로 계산하면 분기 없이 두 경우가 모두 처리된다.

사용 예시:
    >>> from factor_zk.field import FR, invert_or_zero
    >>> FR(11) * FR(13)          # FR(143)
    >>> invert_or_zero(FR(0))    # FR(0)
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    예시:
        >>> x = FR(3)
        >>> x * x           # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
        >>> FR(-1)          # p - 1
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order


def to_fr(value):
    """정수 또는 FR을 FR로 변환한다.

    Raises:
        TypeError: 정수/FR이 아닌 값 (bool 포함)
    """
    if isinstance(value, FR):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"FR로 변환할 수 없는 값입니다: {value!r}")
    return FR(value)


def invert_or_zero(value):
    """e ≠ 0이면 e⁻¹, e = 0이면 0을 반환한다.

    e^(p-2)는 e ≠ 0일 때 역원이고 e = 0일 때 0이므로
    IsZero 제약 e·inv = 1 - z 와 같은 식으로 두 경우를 모두 만족시킨다.

    예시:
        >>> invert_or_zero(FR(2)) * FR(2)   # FR(1)
        >>> invert_or_zero(FR(0))           # FR(0)
    """
    return to_fr(value) ** (CURVE_ORDER - 2)


def format_fr(value):
    """양수/음수 표현 중 짧은 쪽으로 FR 원소를 문자열화한다.

    실패 메시지에서 p - 1 대신 -1 처럼 읽기 쉬운 값을 보여주기 위해 사용한다.

    예시:
        >>> format_fr(FR(143))   # '143'
        >>> format_fr(FR(-1))    # '-1'
    """
    if value is None:
        return "unassigned"
    v = int(to_fr(value))
    neg = (CURVE_ORDER - v) % CURVE_ORDER
    if len(str(neg)) + 1 < len(str(v)):
        return f"-{neg}"
    return str(v)
