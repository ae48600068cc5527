# どこで: `src/propview/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: ベクトル文字列の prefix 検査や float の文字列化桁数を、コードを変えずに利用側で切り替えられるようにするため。

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from .convert import VECTOR_PREFIX_MODES, ConversionOptions

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """propview の実行時設定。"""

    config_path: Path | None
    vector_prefix: str
    float_precision: int | None


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".propview" / "config.yaml",
        home / ".config" / "propview" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """section 単位で浅くマージする（override 側の section 内キーが勝つ）。"""

    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            merged = dict(out[key])
            merged.update(value)
            out[key] = merged
        else:
            out[key] = value
    return out


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("propview")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="propview/resource/default_config.yaml")


def _as_vector_prefix(value: Any) -> str:
    text = str(value).strip().lower()
    if text not in VECTOR_PREFIX_MODES:
        raise RuntimeError(
            f"parsing.vector_prefix は {VECTOR_PREFIX_MODES} のいずれかである必要があります: got={value!r}"
        )
    return text


def _as_precision(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise RuntimeError(
            f"strings.float_precision は null か 0 以上の整数である必要があります: got={value!r}"
        )
    return int(value)


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.propview/config.yaml` / `~/.config/propview/config.yaml`
    3) `set_config_path()` で指定したパス
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    parsing = _as_mapping(payload.get("parsing"), key="parsing")
    if "vector_prefix" not in parsing:
        raise RuntimeError(
            "parsing.vector_prefix が未設定です（同梱 default_config.yaml を確認してください）"
        )
    vector_prefix = _as_vector_prefix(parsing.get("vector_prefix"))

    strings = _as_mapping(payload.get("strings"), key="strings")
    float_precision = _as_precision(strings.get("float_precision"))

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        vector_prefix=vector_prefix,
        float_precision=float_precision,
    )
    _logger.debug(
        "runtime config を読み込みました: path=%s vector_prefix=%s float_precision=%s",
        cfg.config_path,
        cfg.vector_prefix,
        cfg.float_precision,
    )
    _CONFIG_CACHE = cfg
    return cfg


def conversion_options() -> ConversionOptions:
    """実行時設定から ConversionOptions を組み立てて返す。"""

    cfg = runtime_config()
    return ConversionOptions(
        vector_prefix=cfg.vector_prefix,
        float_precision=cfg.float_precision,
    )


__all__ = ["RuntimeConfig", "conversion_options", "runtime_config", "set_config_path"]
