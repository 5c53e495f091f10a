"""Tests for receipt polling and confirmation depth."""

from unittest.mock import Mock

import pytest
from hexbytes import HexBytes
from web3.exceptions import TransactionNotFound

from contract_helper import ContractHelper
from contract_helper.batchers.errors import ReceiptPendingError, TransactionReceiptError
from contract_helper.batchers.types import CallDescriptor
from contract_helper.config.settings import HelperConfig
from contract_helper.transactions.receipts import ReceiptChecker

TX_HASH = "0x" + "ab" * 32


def _receipt(status=1, block_number=100):
    return {
        "status": status,
        "blockNumber": block_number,
        "transactionHash": HexBytes(TX_HASH),
    }


def _checker(web3, attempts=10):
    return ReceiptChecker(web3, attempts=attempts, delay=0, final_confirmations=5)


class TestCheckResult:
    """Waiting for receipts at different depths."""

    @pytest.mark.asyncio
    async def test_fast_check_does_not_report_block(self, web3):
        web3.eth.get_transaction_receipt.return_value = _receipt()

        summary = await _checker(web3).fast_check_result(TX_HASH)

        assert summary.tx_id == TX_HASH
        assert summary.block_number is None

    @pytest.mark.asyncio
    async def test_final_check_reports_block(self, web3):
        web3.eth.block_numbers = [104]
        web3.eth.get_transaction_receipt.return_value = _receipt()

        summary = await _checker(web3).final_check_result(HexBytes(TX_HASH))

        assert summary.tx_id == TX_HASH
        assert summary.block_number == 100

    @pytest.mark.asyncio
    async def test_default_depth_is_final(self, web3):
        web3.eth.block_numbers = [110]
        web3.eth.get_transaction_receipt.return_value = _receipt()

        summary = await _checker(web3).check_result(TX_HASH)

        assert summary.block_number == 100

    @pytest.mark.asyncio
    async def test_missing_receipt_is_polled_again(self, web3):
        web3.eth.get_transaction_receipt.side_effect = [
            TransactionNotFound("not found"),
            None,
            _receipt(),
        ]

        summary = await _checker(web3).fast_check_result(TX_HASH)

        assert summary.tx_id == TX_HASH
        assert web3.eth.get_transaction_receipt.await_count == 3

    @pytest.mark.asyncio
    async def test_waits_for_confirmation_depth(self, web3):
        web3.eth.block_numbers = [100, 101, 102]
        web3.eth.get_transaction_receipt.return_value = _receipt()

        summary = await _checker(web3).check_result(TX_HASH, 3)

        assert summary.block_number is None
        assert web3.eth.get_transaction_receipt.await_count == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_attempts(self, web3):
        with pytest.raises(ReceiptPendingError):
            await _checker(web3, attempts=3).fast_check_result(TX_HASH)

        assert web3.eth.get_transaction_receipt.await_count == 3


class TestRevertedTransaction:
    """Receipts with a failed status."""

    @pytest.mark.asyncio
    async def test_revert_is_not_retried(self, web3):
        web3.eth.get_transaction_receipt.return_value = _receipt(status=0)

        with pytest.raises(TransactionReceiptError) as exc_info:
            await _checker(web3).fast_check_result(TX_HASH)

        assert exc_info.value.tx_id == TX_HASH
        assert exc_info.value.block_number is None
        assert web3.eth.get_transaction_receipt.await_count == 1

    @pytest.mark.asyncio
    async def test_final_revert_carries_block_number(self, web3):
        web3.eth.block_numbers = [120]
        web3.eth.get_transaction_receipt.return_value = _receipt(status=0, block_number=115)

        with pytest.raises(TransactionReceiptError) as exc_info:
            await _checker(web3).final_check_result(TX_HASH)

        assert exc_info.value.block_number == 115


class TestSendAndCheckResult:

    @pytest.mark.asyncio
    async def test_sends_then_waits(self, web3):
        web3.eth.get_transaction_receipt.return_value = _receipt()
        helper = ContractHelper(
            web3,
            config=HelperConfig(RECEIPT_POLL_DELAY_MS=0, SIMULATE_BEFORE_SEND=False),
            executor=Mock(),
        )
        signer = Mock(return_value=TX_HASH)
        descriptor = CallDescriptor(
            "0x1111111111111111111111111111111111111111",
            "transfer(address,uint256)",
            ["0x6666666666666666666666666666666666666666", 1],
        )

        summary = await helper.send_and_check_result(
            "0x5555555555555555555555555555555555555555", signer, descriptor, confirmations=1
        )

        assert summary.tx_id == TX_HASH
        signer.assert_called_once()
        web3.eth.get_transaction_receipt.assert_awaited_with(TX_HASH)
