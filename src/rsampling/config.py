import time
from dataclasses import dataclass
from pathlib import Path

import yaml

VERSION = "0.2.0"
DEFAULT_SAMPLE_SIZE = 16
INTERRUPT_POLICIES = ("peek", "exit")


def default_seed() -> int:
    return time.time_ns() % 1_000_000_000


@dataclass(frozen=True)
class SampleConfig:
    sample_size: int = DEFAULT_SAMPLE_SIZE
    seed: int | None = None
    on_interrupt: str = "peek"
    strip: bool = True


def _require_mapping(data: object, config_path: Path) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config at '{config_path}' must be a YAML mapping.")
    return data


def _optional_int(data: dict, key: str, config_path: Path) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"Config key '{key}' in '{config_path}' must be an integer.")
    return value


def _optional_bool(data: dict, key: str, config_path: Path) -> bool | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"Config key '{key}' in '{config_path}' must be a boolean.")
    return value


def _optional_str(data: dict, key: str, config_path: Path) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config key '{key}' in '{config_path}' must be a non-empty string.")
    return value.strip().lower()


def validate_sample_size(sample_size: int) -> int:
    if isinstance(sample_size, bool) or not isinstance(sample_size, int):
        raise ValueError("Sample size must be an integer.")
    if sample_size <= 0:
        raise ValueError(f"Sample size must be a positive integer, got {sample_size}.")
    return sample_size


def validate_interrupt_policy(policy: str) -> str:
    policy_norm = policy.lower().strip()
    if policy_norm not in INTERRUPT_POLICIES:
        raise ValueError(
            f"Interrupt policy must be one of {'|'.join(INTERRUPT_POLICIES)}, got '{policy}'."
        )
    return policy_norm


def load_config(config_path: Path) -> SampleConfig:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    data = _require_mapping(raw, config_path)
    unknown = sorted(set(data) - {"sample_size", "seed", "on_interrupt", "strip"})
    if unknown:
        raise ValueError(f"Unknown config keys in '{config_path}': {', '.join(unknown)}.")

    sample_size = _optional_int(data, "sample_size", config_path)
    if sample_size is not None and sample_size <= 0:
        raise ValueError(f"Config key 'sample_size' in '{config_path}' must be > 0.")

    on_interrupt = _optional_str(data, "on_interrupt", config_path)
    if on_interrupt is not None and on_interrupt not in INTERRUPT_POLICIES:
        raise ValueError(
            f"Config key 'on_interrupt' in '{config_path}' must be one of "
            f"{'|'.join(INTERRUPT_POLICIES)}."
        )

    strip = _optional_bool(data, "strip", config_path)

    return SampleConfig(
        sample_size=DEFAULT_SAMPLE_SIZE if sample_size is None else sample_size,
        seed=_optional_int(data, "seed", config_path),
        on_interrupt="peek" if on_interrupt is None else on_interrupt,
        strip=True if strip is None else strip,
    )


def resolve_config(
    config_path: Path | None = None,
    sample_size: int | None = None,
    seed: int | None = None,
    on_interrupt: str | None = None,
    strip: bool | None = None,
) -> SampleConfig:
    """Merge an optional YAML file with explicit overrides; always returns a concrete seed."""
    base = load_config(config_path) if config_path is not None else SampleConfig()

    resolved_size = validate_sample_size(base.sample_size if sample_size is None else sample_size)
    resolved_policy = validate_interrupt_policy(
        base.on_interrupt if on_interrupt is None else on_interrupt
    )
    resolved_seed = seed if seed is not None else base.seed
    if resolved_seed is None:
        resolved_seed = default_seed()

    return SampleConfig(
        sample_size=resolved_size,
        seed=resolved_seed,
        on_interrupt=resolved_policy,
        strip=base.strip if strip is None else strip,
    )
