# どこで: `src/propview/core/raw_value.py`。
# 何を: 保存型のまま復号した値を表す RawValue（kind + payload の閉じた直和型）を定義する。
# なぜ: decode/transform/no-data/convert の各段が同じ値表現を受け渡し、型ごとの分岐を kind に集約するため。

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Integral, Real
from typing import Any, Sequence

import numpy as np

from .value_type import ComponentType


class RawKind(Enum):
    """RawValue の variant。"""

    ABSENT = "absent"
    BOOLEAN = "boolean"
    SCALAR = "scalar"
    STRING = "string"
    VECTOR = "vector"


def _component_value(component: ComponentType, value: Any) -> int | float:
    """成分値を component の Python 表現（int/float）へ正規化して返す。"""

    if isinstance(value, (bool, np.bool_)):
        raise TypeError(f"数値成分に bool は使用できません: {value!r}")
    if component.is_integer:
        if not isinstance(value, Integral):
            raise TypeError(f"{component.value} の成分は整数である必要があります: got={value!r}")
        v = int(value)
        lo, hi = component.int_range
        if not lo <= v <= hi:
            raise ValueError(f"{component.value} の範囲外です: got={v}")
        return v
    if component.is_float:
        if not isinstance(value, Real):
            raise TypeError(f"{component.value} の成分は数値である必要があります: got={value!r}")
        f = float(value)
        if component is ComponentType.FLOAT32 and math.isfinite(f):
            # float32 は保存精度へ丸めた値を保持する（no-data 比較を厳密一致にするため）。
            with np.errstate(over="ignore"):
                f = float(np.float32(f))
        return f
    raise TypeError(f"数値成分として使えない componentType です: {component.value}")


@dataclass(frozen=True, slots=True)
class RawValue:
    """保存型のまま取り出したプロパティ値。

    Notes
    -----
    - SCALAR の payload は int または float。
    - VECTOR の payload は 2..4 成分の tuple。
    - component は SCALAR/VECTOR のときだけ NONE 以外を取る。
    """

    kind: RawKind
    payload: Any = None
    component: ComponentType = ComponentType.NONE

    def __post_init__(self) -> None:
        kind = self.kind
        if not isinstance(kind, RawKind):
            raise TypeError(f"kind は RawKind である必要があります: got={kind!r}")

        if kind in (RawKind.SCALAR, RawKind.VECTOR):
            if self.component is ComponentType.NONE:
                raise ValueError(f"{kind.value} には componentType が必要です")
        elif self.component is not ComponentType.NONE:
            raise ValueError(f"{kind.value} は componentType を持ちません")

        if kind is RawKind.ABSENT:
            if self.payload is not None:
                raise ValueError("absent は payload を持ちません")
            return
        if kind is RawKind.BOOLEAN:
            if not isinstance(self.payload, (bool, np.bool_)):
                raise TypeError(f"boolean の payload は bool である必要があります: got={self.payload!r}")
            object.__setattr__(self, "payload", bool(self.payload))
            return
        if kind is RawKind.STRING:
            if not isinstance(self.payload, str):
                raise TypeError(f"string の payload は str である必要があります: got={self.payload!r}")
            return
        if kind is RawKind.SCALAR:
            object.__setattr__(self, "payload", _component_value(self.component, self.payload))
            return

        try:
            seq = list(self.payload)
        except TypeError:
            raise TypeError(f"vector の payload は列である必要があります: got={self.payload!r}") from None
        if not 2 <= len(seq) <= 4:
            raise ValueError(f"vector の成分数は 2..4 である必要があります: got={len(seq)}")
        object.__setattr__(
            self,
            "payload",
            tuple(_component_value(self.component, v) for v in seq),
        )

    @classmethod
    def absent(cls) -> RawValue:
        return _ABSENT

    @classmethod
    def boolean(cls, value: bool) -> RawValue:
        return cls(RawKind.BOOLEAN, value)

    @classmethod
    def scalar(cls, component: ComponentType, value: int | float) -> RawValue:
        return cls(RawKind.SCALAR, value, component)

    @classmethod
    def string(cls, value: str) -> RawValue:
        return cls(RawKind.STRING, value)

    @classmethod
    def vector(cls, component: ComponentType, values: Sequence[int | float]) -> RawValue:
        return cls(RawKind.VECTOR, tuple(values), component)

    @property
    def is_absent(self) -> bool:
        return self.kind is RawKind.ABSENT

    @property
    def is_numeric(self) -> bool:
        """SCALAR または VECTOR なら True。"""

        return self.kind in (RawKind.SCALAR, RawKind.VECTOR)

    @property
    def components(self) -> tuple[int | float, ...]:
        """数値成分を tuple で返す（SCALAR は 1 要素、非数値は空）。"""

        if self.kind is RawKind.SCALAR:
            return (self.payload,)
        if self.kind is RawKind.VECTOR:
            return self.payload
        return ()


_ABSENT = RawValue(RawKind.ABSENT)


__all__ = ["RawKind", "RawValue"]
