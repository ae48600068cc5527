# どこで: `src/propview/core/property.py`。
# 何を: PropertyTableProperty（feature index から型付きの値を取り出すアクセサ）を定義する。
# なぜ: decode → no-data 解決 → transform → 型変換の流れを、出力型ごとに重複させず 1 本の経路で提供するため。

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from .convert import ConversionOptions, TargetType, convert
from .decode import PropertyBuffers, buffers_problem, fetch, is_feature_index
from .descriptor import PropertyDescriptor, descriptor_problem
from .nodata import resolve
from .raw_value import RawValue
from .runtime_config import conversion_options
from .transform import apply_transform
from .value_type import INVALID_VALUE_TYPE, ValueType

_logger = logging.getLogger(__name__)


class PropertyStatus(Enum):
    """プロパティの状態。アクセサ構築時に一度だけ決まる。"""

    VALID = "valid"
    EMPTY_PROPERTY_WITH_DEFAULT = "empty_property_with_default"
    ERROR_INVALID_PROPERTY = "error_invalid_property"
    ERROR_INVALID_PROPERTY_DATA = "error_invalid_property_data"


def property_status(
    descriptor: PropertyDescriptor,
    buffers: PropertyBuffers | None,
) -> tuple[PropertyStatus, str | None]:
    """descriptor と buffers から (status, 理由) を返す。VALID の理由は None。"""

    problem = descriptor_problem(descriptor)
    if problem is not None:
        return PropertyStatus.ERROR_INVALID_PROPERTY, problem
    if buffers is None:
        if not descriptor.default_value.is_absent:
            return PropertyStatus.EMPTY_PROPERTY_WITH_DEFAULT, None
        return PropertyStatus.ERROR_INVALID_PROPERTY, "値バッファも default も存在しません"
    problem = buffers_problem(descriptor, buffers)
    if problem is not None:
        return PropertyStatus.ERROR_INVALID_PROPERTY_DATA, problem
    return PropertyStatus.VALID, None


class PropertyTableProperty:
    """EXT_structural_metadata のプロパティテーブルの 1 プロパティ。

    各 `get_*` は例外を送出しない。feature index が範囲外、status が不正、
    変換できない値などの場合は、呼び出し側が渡した既定値を返す。

    数値プロパティでは、生値が noData と一致すればプロパティ既定値（無ければ
    呼び出し側の既定値）を使い、そうでなければ正規化・scale・offset を適用してから
    出力型へ変換する。
    """

    def __init__(
        self,
        descriptor: PropertyDescriptor,
        buffers: PropertyBuffers | None = None,
        *,
        options: ConversionOptions | None = None,
    ) -> None:
        if not isinstance(descriptor, PropertyDescriptor):
            raise TypeError(f"descriptor は PropertyDescriptor である必要があります: got={descriptor!r}")
        if buffers is not None and not isinstance(buffers, PropertyBuffers):
            raise TypeError(f"buffers は PropertyBuffers である必要があります: got={buffers!r}")

        self._descriptor = descriptor
        self._buffers = buffers
        self._options = options if options is not None else conversion_options()

        status, reason = property_status(descriptor, buffers)
        self._status = status
        if reason is not None:
            _logger.warning(
                "プロパティを利用できません（全 feature で既定値を返します）: status=%s reason=%s",
                status.value,
                reason,
            )

    @classmethod
    def invalid(cls, *, options: ConversionOptions | None = None) -> PropertyTableProperty:
        """glTF に存在しないプロパティを表すアクセサを返す。"""

        prop = cls.__new__(cls)
        prop._descriptor = PropertyDescriptor(INVALID_VALUE_TYPE)
        prop._buffers = None
        prop._options = options if options is not None else conversion_options()
        prop._status = PropertyStatus.ERROR_INVALID_PROPERTY
        return prop

    def __repr__(self) -> str:
        vt = self.value_type
        return (
            f"PropertyTableProperty(status={self._status.value}, type={vt.type.value}, "
            f"componentType={vt.component_type.value}, size={self.size})"
        )

    # --- 定義の参照 ---

    @property
    def status(self) -> PropertyStatus:
        return self._status

    @property
    def descriptor(self) -> PropertyDescriptor:
        return self._descriptor

    @property
    def value_type(self) -> ValueType:
        return self._descriptor.value_type

    @property
    def size(self) -> int:
        """feature 数。"""

        return self._descriptor.size

    @property
    def array_size(self) -> int:
        """固定長配列の要素数。配列でなければ 0。"""

        return self._descriptor.array_size

    @property
    def is_normalized(self) -> bool:
        return self._descriptor.is_normalized

    @property
    def offset(self) -> RawValue:
        return self._descriptor.offset

    @property
    def scale(self) -> RawValue:
        return self._descriptor.scale

    @property
    def min(self) -> RawValue:
        """正規化・offset・scale 適用後の成分ごとの最小値。未定義なら absent。"""

        return self._descriptor.min

    @property
    def max(self) -> RawValue:
        """正規化・offset・scale 適用後の成分ごとの最大値。未定義なら absent。"""

        return self._descriptor.max

    @property
    def no_data(self) -> RawValue:
        """変換前の生値と比較される番兵値。未定義なら absent。"""

        return self._descriptor.no_data

    @property
    def default_value(self) -> RawValue:
        return self._descriptor.default_value

    # --- 値の取得 ---

    def get_raw(self, feature_index: int) -> RawValue:
        """正規化・offset・scale・noData 処理を行わない保存型の値を返す。"""

        if self._status is not PropertyStatus.VALID:
            return RawValue.absent()
        return fetch(self._descriptor, self._buffers, feature_index)

    def _resolved(self, feature_index: int) -> RawValue:
        descriptor = self._descriptor
        if not is_feature_index(feature_index, descriptor.size):
            return RawValue.absent()
        if self._status is PropertyStatus.EMPTY_PROPERTY_WITH_DEFAULT:
            return apply_transform(descriptor, descriptor.default_value)
        if self._status is not PropertyStatus.VALID:
            return RawValue.absent()
        return resolve(descriptor, fetch(descriptor, self._buffers, feature_index))

    def get(self, target: TargetType, feature_index: int, default: Any = None) -> Any:
        """feature_index の値を target 型で返す。default が None なら型ごとのゼロ値を使う。"""

        if default is None:
            default = target.zero_default
        return convert(self._resolved(feature_index), target, default, options=self._options)

    def get_boolean(self, feature_index: int, default: bool = False) -> bool:
        """bool として取得する。

        bool はそのまま、数値は 0 なら False・それ以外は True。文字列は
        "0"/"false"/"no" を False、"1"/"true"/"yes" を True とみなす（大文字小文字は無視）。
        """

        return self.get(TargetType.BOOLEAN, feature_index, default)

    def get_sbyte(self, feature_index: int, default: int = 0) -> int:
        """符号付き 8bit 整数として取得する（-128..127、浮動小数は 0 方向へ切り捨て）。"""

        return self.get(TargetType.INT8, feature_index, default)

    def get_byte(self, feature_index: int, default: int = 0) -> int:
        """符号無し 8bit 整数として取得する（0..255）。"""

        return self.get(TargetType.UINT8, feature_index, default)

    def get_int16(self, feature_index: int, default: int = 0) -> int:
        return self.get(TargetType.INT16, feature_index, default)

    def get_uint16(self, feature_index: int, default: int = 0) -> int:
        return self.get(TargetType.UINT16, feature_index, default)

    def get_int32(self, feature_index: int, default: int = 0) -> int:
        return self.get(TargetType.INT32, feature_index, default)

    def get_uint32(self, feature_index: int, default: int = 0) -> int:
        return self.get(TargetType.UINT32, feature_index, default)

    def get_int64(self, feature_index: int, default: int = 0) -> int:
        return self.get(TargetType.INT64, feature_index, default)

    def get_uint64(self, feature_index: int, default: int = 0) -> int:
        return self.get(TargetType.UINT64, feature_index, default)

    def get_float(self, feature_index: int, default: float = 0.0) -> float:
        """単精度として取得する。float32 の範囲外の値は default。"""

        return self.get(TargetType.FLOAT32, feature_index, default)

    def get_double(self, feature_index: int, default: float = 0.0) -> float:
        return self.get(TargetType.FLOAT64, feature_index, default)

    def get_int2(
        self, feature_index: int, default: tuple[int, int] = (0, 0)
    ) -> tuple[int, int]:
        """int2 として取得する。

        Notes
        -----
        - 2〜4 成分ベクトルは先頭 2 成分を使う。1 成分でも int32 に収まらなければ default。
        - スカラーは両成分へ複製、bool は (1, 1) / (0, 0)。
        - 文字列は "(X, Y)" または "int2(X, Y)"。
        """

        return self.get(TargetType.INT2, feature_index, default)

    def get_uint2(
        self, feature_index: int, default: tuple[int, int] = (0, 0)
    ) -> tuple[int, int]:
        return self.get(TargetType.UINT2, feature_index, default)

    def get_float2(
        self, feature_index: int, default: tuple[float, float] = (0.0, 0.0)
    ) -> tuple[float, float]:
        return self.get(TargetType.FLOAT2, feature_index, default)

    def get_double2(
        self, feature_index: int, default: tuple[float, float] = (0.0, 0.0)
    ) -> tuple[float, float]:
        return self.get(TargetType.DOUBLE2, feature_index, default)

    def get_string(self, feature_index: int, default: str = "") -> str:
        """文字列として取得する。

        文字列はそのまま、bool は "true"/"false"、数値は 10 進表記
        （float の桁数は config の strings.float_precision に従う）。
        """

        return self.get(TargetType.STRING, feature_index, default)


__all__ = ["PropertyStatus", "PropertyTableProperty", "property_status"]
