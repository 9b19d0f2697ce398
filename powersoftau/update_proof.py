"""
업데이트 증명 (UpdateProof)
============================

기여 한 번의 결과물. 두 가지를 보일 수 있게 한다:
  - 기여자가 공개키 (s·G1, s·G2)에 대응하는 비밀 s를 알고 있다 (지식 증명)
  - 그 s로 이전 SRS를 새 SRS로 옮겼다

  UpdateProof = {
      public_key:    PublicKey (s·G1, s·G2)
      resulting_srs: 이 기여가 만든 새 SRS
  }

세레모니 트랜스크립트에서의 위치와 함께 감사(audit)의 단위가 된다.
"""


class UpdateProof:
    """기여 한 번에 대한 공개 증명 (불변).

    속성:
        public_key: PublicKey
        resulting_srs: SRS
    """

    __slots__ = ("public_key", "resulting_srs")

    def __init__(self, public_key, resulting_srs):
        object.__setattr__(self, "public_key", public_key)
        object.__setattr__(self, "resulting_srs", resulting_srs)

    def __setattr__(self, name, value):
        raise AttributeError("UpdateProof는 변경할 수 없습니다")

    @property
    def new_accumulated_point(self):
        """갱신된 τ·G1 (새 SRS의 1차 원소)."""
        return self.resulting_srs.g1_elements[1]

    def __eq__(self, other):
        if not isinstance(other, UpdateProof):
            return NotImplemented
        return (
            self.public_key == other.public_key
            and self.resulting_srs == other.resulting_srs
        )

    __hash__ = None

    def __repr__(self):
        return f"UpdateProof({self.public_key!r}, {self.resulting_srs!r})"
