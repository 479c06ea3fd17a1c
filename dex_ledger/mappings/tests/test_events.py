"""
Tests for decoded event normalisation.
"""

import pytest
from dataclasses import FrozenInstanceError

from dex_ledger.mappings.events import EventContext, PoolCreatedEvent, normalize_hash


class TestEventNormalisation:

    def test_hash_from_bytes(self):
        assert normalize_hash(bytes.fromhex("ab" * 32)) == "0x" + "ab" * 32

    def test_hash_from_mixed_case_string(self):
        assert normalize_hash("0x" + "AB" * 32) == "0x" + "ab" * 32

    def test_context_lower_cases_addresses(self):
        context = EventContext(
            address="0x8AD599C3A0FF1DE082011EFDDC58F1908EB6E6D8",
            transaction_hash=bytes(32),
            log_index=3,
            block_number=1,
            timestamp=2,
            transaction_from="0xABCDEF0000000000000000000000000000000000",
        )

        assert context.address == "0x8ad599c3a0ff1de082011efddc58f1908eb6e6d8"
        assert context.transaction_from == "0xabcdef0000000000000000000000000000000000"
        assert context.transaction_hash == "0x" + "00" * 32

    def test_events_are_frozen(self, driver, addresses):
        event = PoolCreatedEvent(
            context=driver.context(addresses.factory),
            token0=addresses.usdc.upper().replace("0X", "0x"),
            token1=addresses.weth,
            fee=500,
            tick_spacing=10,
            pool=addresses.usdc_weth_pool,
        )

        assert event.token0 == addresses.usdc
        with pytest.raises(FrozenInstanceError):
            event.fee = 3000
