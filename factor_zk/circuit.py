"""
회로(Circuit) 프로토콜
======================

회로는 두 단계로 나뉜다.

  1. configure(meta): 열, 셀렉터, 게이트를 등록하고 config를 반환한다.
     witness 값과 무관하며 한 번만 실행된다.
  2. synthesize(config, layouter): 인스턴스마다 실행되어 영역을 열고
     witness를 채운 뒤 공개 입력에 셀을 묶는다.

without_witnesses()는 같은 구조에 값만 unknown인 회로를 돌려준다.
"""


class Circuit:
    """회로 기본 클래스. 서브클래스가 configure와 synthesize를 구현한다."""

    @staticmethod
    def configure(meta):
        """제약 시스템 meta에 열과 게이트를 등록하고 config를 반환한다."""
        raise NotImplementedError("서브클래스에서 configure를 구현하세요")

    def synthesize(self, config, layouter):
        """config의 열에 witness를 할당한다."""
        raise NotImplementedError("서브클래스에서 synthesize를 구현하세요")

    def without_witnesses(self):
        raise NotImplementedError("서브클래스에서 without_witnesses를 구현하세요")
