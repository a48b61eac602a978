"""
Pytest configuration and fixtures
"""

import pytest

PAYER_ADDRESS = "0x1111111111111111111111111111111111111111"
MERCHANT_ADDRESS = "0x2222222222222222222222222222222222222222"
USDC_BASE_SEPOLIA = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"
WETH_BASE_SEPOLIA = "0x4200000000000000000000000000000000000006"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def mock_evm_private_key():
    """Mock EVM private key for tests"""
    return "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"


def _requirements(authorization_type=None, asset=USDC_BASE_SEPOLIA, **extra):
    from x402_exec.types import PaymentRequirements

    extra_fields = dict(extra)
    if authorization_type is not None:
        extra_fields["authorizationType"] = authorization_type

    return PaymentRequirements(
        scheme="exact",
        network="base-sepolia",
        maxAmountRequired="1000000",
        resource="https://api.example.com/resource",
        description="Test resource",
        mimeType="application/json",
        payTo=MERCHANT_ADDRESS,
        maxTimeoutSeconds=300,
        asset=asset,
        extra=extra_fields or None,
    )


@pytest.fixture
def eip3009_requirements():
    """USDC on base-sepolia, default authorization type"""
    return _requirements(name="USDC", version="2")


@pytest.fixture
def permit_requirements():
    return _requirements(authorization_type="permit")


@pytest.fixture
def permit2_requirements():
    return _requirements(authorization_type="permit2", asset=WETH_BASE_SEPOLIA)
