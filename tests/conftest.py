import os

import pytest

from nekolink.core.models import WireGuardParams

WARP_CONF = """\
[Interface]
PrivateKey = yAnz5TF+lXXJte14tji3zlMNq+hd2rYUIgJBgB3fBmk=
Address = 172.16.0.2/32
Address = 2606:4700:110:8a36:df92:102a:9602:fa18/128
DNS = 1.1.1.1
MTU = 1280

[Peer]
PublicKey = bmXOC+F1FxEMF9dyiK2H5/1SUtzH0JuVo51h2wPfgyo=
AllowedIPs = 0.0.0.0/0
AllowedIPs = ::/0
Endpoint = engage.cloudflareclient.com:2408
"""


@pytest.fixture
def warp_conf_text() -> str:
    return WARP_CONF


@pytest.fixture
def warp_conf_file(tmp_path):
    path = tmp_path / "wg-config.conf"
    path.write_text(WARP_CONF, encoding="utf-8")
    return path


@pytest.fixture
def params() -> WireGuardParams:
    return WireGuardParams(
        private_key="PRIV",
        public_key="PUB",
        addresses=["172.16.0.2/32", "2606:4700:110:8a36:df92:102a:9602:fa18/128"],
        mtu="1280",
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep NEKOLINK_* variables and stray env files out of every test."""
    for key in list(os.environ):
        if key.startswith("NEKOLINK_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
