"""
Tests for NetworkConfig
"""

import pytest

from x402_exec.config import NetworkConfig
from x402_exec.exceptions import UnsupportedNetworkError


def test_evm_chain_ids():
    assert NetworkConfig.get_chain_id("base-sepolia") == 84532
    assert NetworkConfig.get_chain_id("base") == 8453
    assert NetworkConfig.get_chain_id("sepolia-optimism") == 11155420
    assert NetworkConfig.get_chain_id("polygon-amoy") == 80002


def test_svm_chain_ids():
    assert NetworkConfig.get_chain_id("solana") == 101
    assert NetworkConfig.get_chain_id("solana-devnet") == 103


def test_unknown_network():
    with pytest.raises(UnsupportedNetworkError):
        NetworkConfig.get_chain_id("tron:nile")


def test_reverse_lookup():
    assert NetworkConfig.get_network_by_chain_id(43113) == "avalanche-fuji"
    with pytest.raises(UnsupportedNetworkError):
        NetworkConfig.get_network_by_chain_id(999999)


def test_network_family():
    assert NetworkConfig.get_network_family("iotex") == "evm"
    assert NetworkConfig.get_network_family("solana-devnet") == "svm"
    assert NetworkConfig.is_evm_network("sei-testnet")
    assert not NetworkConfig.is_evm_network("solana")
    with pytest.raises(UnsupportedNetworkError):
        NetworkConfig.get_network_family("unknown")


def test_permit2_constants():
    assert NetworkConfig.PERMIT2_ADDRESS == "0x000000000022D473030F116dDEE9F6B43aC78BA3"
    assert NetworkConfig.MAX_PERMIT2_AMOUNT == 2**160 - 1


def test_rpc_url_default():
    assert NetworkConfig.get_rpc_url("base-sepolia") == "https://sepolia.base.org"
    assert NetworkConfig.get_rpc_url("peaq") is None


def test_rpc_url_env_override(monkeypatch):
    monkeypatch.setenv("X402_EXEC_RPC_URL_BASE_SEPOLIA", "http://localhost:8545")
    assert NetworkConfig.get_rpc_url("base-sepolia") == "http://localhost:8545"
