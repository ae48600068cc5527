# どこで: `src/propview/core/__init__.py`。
# 何を: 値の復号・変換バックエンドの公開エイリアスをまとめる。
# なぜ: 上位層から最小インポートで使えるようにするため。

from .value_type import ComponentType, MetadataType, ValueType, INVALID_VALUE_TYPE
from .raw_value import RawKind, RawValue
from .descriptor import PropertyDescriptor, descriptor_problem, transformed_component
from .descriptor_spec import descriptor_from_spec, raw_value_from_python, value_type_from_spec
from .decode import PropertyBuffers, fetch, buffers_problem
from .transform import apply_transform
from .nodata import resolve, is_no_data
from .parsing import parse_number, parse_vector2
from .convert import ConversionOptions, TargetType, convert
from .pack import pack_property_values
from .property import PropertyStatus, PropertyTableProperty, property_status
from .runtime_config import conversion_options, runtime_config, set_config_path

__all__ = [
    "ComponentType",
    "MetadataType",
    "ValueType",
    "INVALID_VALUE_TYPE",
    "RawKind",
    "RawValue",
    "PropertyDescriptor",
    "descriptor_problem",
    "transformed_component",
    "descriptor_from_spec",
    "raw_value_from_python",
    "value_type_from_spec",
    "PropertyBuffers",
    "fetch",
    "buffers_problem",
    "apply_transform",
    "resolve",
    "is_no_data",
    "parse_number",
    "parse_vector2",
    "ConversionOptions",
    "TargetType",
    "convert",
    "pack_property_values",
    "PropertyStatus",
    "PropertyTableProperty",
    "property_status",
    "conversion_options",
    "runtime_config",
    "set_config_path",
]
