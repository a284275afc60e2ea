from __future__ import annotations

from pathlib import Path

import pytest

from verifier.config import (
    VerifierConfig,
    load_verifier_config,
    load_verifier_config_from_env,
)
from verifier.engine import Verifier
from verifier.errors import ConfigError, InvalidSecretKeyError


def test_defaults() -> None:
    cfg = VerifierConfig(secret="k").validate()
    assert cfg.digest == "sha256"
    assert cfg.signature_algorithm == "hmac"
    assert cfg.max_data_bytes == 4096


def test_repr_hides_secret() -> None:
    cfg = VerifierConfig(secret="top-secret-value")
    assert "top-secret-value" not in repr(cfg)
    assert "top-secret-value" not in repr(Verifier(cfg))


def test_from_env() -> None:
    cfg = load_verifier_config_from_env(
        {
            "VERIFIER_SECRET": "s3",
            "VERIFIER_DIGEST": "blake2b",
            "VERIFIER_SIGNATURE_ALGO": "ed25519",
            "VERIFIER_MAX_DATA_BYTES": "128",
        }
    )
    assert cfg == VerifierConfig(secret="s3", digest="blake2b", signature_algorithm="ed25519", max_data_bytes=128)


def test_from_process_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VERIFIER_SECRET", "from-env")
    assert load_verifier_config().secret == "from-env"


def test_missing_secret_fails_closed() -> None:
    with pytest.raises(InvalidSecretKeyError) as e:
        load_verifier_config_from_env({})
    assert e.value.code == "SECRET_INVALID"
    assert isinstance(e.value, ConfigError)


def test_verifier_rejects_empty_secret() -> None:
    with pytest.raises(InvalidSecretKeyError):
        Verifier(VerifierConfig(secret=""))


@pytest.mark.parametrize(
    "over",
    [
        {"digest": "md5"},
        {"signature_algorithm": "rsa"},
        {"max_data_bytes": 0},
    ],
)
def test_invalid_values(over) -> None:
    with pytest.raises(ConfigError):
        VerifierConfig(secret="k", **over).validate()


def test_non_integer_max_bytes_in_env() -> None:
    with pytest.raises(ConfigError):
        load_verifier_config_from_env({"VERIFIER_SECRET": "k", "VERIFIER_MAX_DATA_BYTES": "lots"})


def test_yaml_file_with_env_overlay(tmp_path: Path) -> None:
    p = tmp_path / "verifier.yml"
    p.write_text(
        "verifier:\n"
        "  secret: from-file\n"
        "  digest: sha512\n"
        "  max_data_bytes: 64\n",
        encoding="utf-8",
    )
    cfg = load_verifier_config(p, env={})
    assert (cfg.secret, cfg.digest, cfg.max_data_bytes) == ("from-file", "sha512", 64)

    cfg = load_verifier_config(p, env={"VERIFIER_SECRET": "from-env"})
    assert cfg.secret == "from-env"
    assert cfg.digest == "sha512"


def test_yaml_path_from_env(tmp_path: Path) -> None:
    p = tmp_path / "flat.yml"
    p.write_text("secret: flat\nsignature_algorithm: ed25519\n", encoding="utf-8")
    cfg = load_verifier_config(env={"VERIFIER_CONFIG_PATH": str(p)})
    assert cfg.secret == "flat"
    assert cfg.signature_algorithm == "ed25519"


def test_missing_yaml_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_verifier_config(tmp_path / "nope.yml", env={"VERIFIER_SECRET": "k"})


def test_yaml_must_be_mapping(tmp_path: Path) -> None:
    p = tmp_path / "list.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_verifier_config(p, env={})


def test_yaml_syntax_error_is_config_error(tmp_path: Path) -> None:
    p = tmp_path / "broken.yml"
    p.write_text("verifier: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_verifier_config(p, env={"VERIFIER_SECRET": "k"})
    assert "not valid YAML" in e.value.detail


def test_config_path_that_is_a_directory(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as e:
        load_verifier_config(tmp_path, env={"VERIFIER_SECRET": "k"})
    assert "unreadable" in e.value.detail
