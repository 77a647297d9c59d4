"""Tests for loading the CLI configuration."""

from pathlib import Path

import pytest
import yaml

from multisig_core.cli.config import AppConfig, KeyManager

from .test_utils import make_key


class TestAppConfig:
    def write_config(self, directory: Path, data: dict) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "multisig.yml"
        path.write_text(yaml.safe_dump(data))
        return path

    def test_paths_resolve_against_config_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_dir = tmp_path / "wallet"
        identity = KeyManager.generate(config_dir / "keys", "signer1")
        hex_party = make_key("hex-party").payload.hex()
        path = self.write_config(
            config_dir,
            {
                "ledger": {"path": "state/ledger.json"},
                "multisig": {
                    "threshold": 1,
                    "parties": ["keys/signer1.vkey", hex_party],
                },
                "wallet": {"signing_key_path": "keys/signer1.skey"},
            },
        )

        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)
        config = AppConfig.from_yaml(path)

        assert config.ledger.path == str(config_dir / "state" / "ledger.json")
        assert config.multisig.parties == [
            str(config_dir / "keys" / "signer1.vkey"),
            hex_party,
        ]
        assert config.wallet.signing_key_path == str(
            config_dir / "keys" / "signer1.skey"
        )
        assert config.multisig.signer_keys() == [identity, make_key("hex-party")]
        assert KeyManager.load_from_config(config.wallet)[1] == identity

    def test_absolute_paths_are_kept(self, tmp_path: Path) -> None:
        key_path = str(tmp_path / "keys" / "signer1.vkey")
        ledger_path = str(tmp_path / "ledger.json")
        path = self.write_config(
            tmp_path / "config",
            {
                "ledger": {"path": ledger_path},
                "multisig": {"threshold": 1, "parties": [key_path]},
            },
        )

        config = AppConfig.from_yaml(path)

        assert config.ledger.path == ledger_path
        assert config.multisig.parties == [key_path]
        assert config.wallet.signing_key_path is None

    def test_env_values_are_resolved(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MULTISIG_TEST_SEED", "vault")
        path = self.write_config(
            tmp_path,
            {"multisig": {"threshold": 2, "seed": "$MULTISIG_TEST_SEED"}},
        )

        config = AppConfig.from_yaml(path)

        assert config.multisig.seed_bytes == b"vault"
        assert config.multisig.threshold == 2
