"""
Shared fixtures for deployer tests
"""

import copy
import os
import pytest

from deployer.config import DEFAULTS


ENV_VARS = [
    'DEPLOY_PROJECT_DIR',
    'DEPLOY_CRATE_NAME',
    'DEPLOY_ACCOUNT',
    'CARGO_BIN',
    'NEAR_BIN',
    'NEAR_ENV',
    'RUSTFLAGS'
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell and .env out of the tests"""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr('deployer.config.load_dotenv', lambda *args, **kwargs: False)


@pytest.fixture
def project_dir(tmp_path):
    """Contract crate with a previously built artifact"""
    (tmp_path / "Cargo.toml").write_text(
        '[package]\n'
        'name = "test-contract"\n'
        'version = "0.1.0"\n'
        '\n'
        '[lib]\n'
        'crate-type = ["cdylib"]\n'
    )

    release_dir = tmp_path / "target" / "wasm32-unknown-unknown" / "release"
    release_dir.mkdir(parents=True)
    (release_dir / "test_contract.wasm").write_bytes(b'\x00asm\x01\x00\x00\x00')

    return tmp_path


@pytest.fixture
def config(project_dir):
    """Deployment config pointing at the test crate"""
    cfg = copy.deepcopy(DEFAULTS)
    cfg['project_dir'] = str(project_dir)
    cfg['targets'] = {
        'contractspace': 'contractspace.testnet',
        'oscarcontract': 'oscarcontract.testnet',
        'beer333': 'beer333.testnet'
    }
    return cfg


@pytest.fixture
def artifact(project_dir):
    return os.path.join(
        str(project_dir), 'target', 'wasm32-unknown-unknown', 'release', 'test_contract.wasm'
    )
