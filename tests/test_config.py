from __future__ import annotations

from pathlib import Path

import pytest

from rsampling.config import (
    DEFAULT_SAMPLE_SIZE,
    SampleConfig,
    default_seed,
    load_config,
    resolve_config,
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "sample.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_reads_all_keys(tmp_path: Path) -> None:
    path = _write(tmp_path, "sample_size: 4\nseed: 99\non_interrupt: EXIT\nstrip: false\n")
    assert load_config(path) == SampleConfig(
        sample_size=4, seed=99, on_interrupt="exit", strip=False
    )


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path, ""))
    assert cfg.sample_size == DEFAULT_SAMPLE_SIZE
    assert cfg.seed is None
    assert cfg.on_interrupt == "peek"
    assert cfg.strip is True


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    ("text", "match"),
    [
        ("- 1\n- 2\n", "YAML mapping"),
        ("sample_size: 0\n", "sample_size"),
        ("sample_size: ten\n", "sample_size"),
        ("sample_size: true\n", "sample_size"),
        ("seed: 1.5\n", "seed"),
        ("on_interrupt: restart\n", "on_interrupt"),
        ("strip: yes please\n", "strip"),
        ("sample_szie: 3\n", "Unknown config keys"),
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, text: str, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        load_config(_write(tmp_path, text))


def test_resolve_config_overrides_file(tmp_path: Path) -> None:
    path = _write(tmp_path, "sample_size: 4\nseed: 99\nstrip: false\n")
    cfg = resolve_config(config_path=path, sample_size=2, on_interrupt="exit")
    assert cfg == SampleConfig(sample_size=2, seed=99, on_interrupt="exit", strip=False)


def test_resolve_config_fills_in_seed() -> None:
    cfg = resolve_config()
    assert cfg.sample_size == DEFAULT_SAMPLE_SIZE
    assert isinstance(cfg.seed, int)


@pytest.mark.parametrize("size", [0, -3])
def test_resolve_config_rejects_non_positive_size(size: int) -> None:
    with pytest.raises(ValueError, match="positive"):
        resolve_config(sample_size=size)


def test_resolve_config_rejects_unknown_policy() -> None:
    with pytest.raises(ValueError, match="peek|exit"):
        resolve_config(on_interrupt="later")


def test_default_seed_is_sub_second() -> None:
    seed = default_seed()
    assert 0 <= seed < 1_000_000_000
