import asyncio
import uuid
from decimal import Decimal

import structlog

logger = structlog.get_logger(__name__)


class PaymentService:
    @staticmethod
    async def process_payment(amount: Decimal, delay_seconds: float) -> str:
        # No gateway: simulate the processing time and hand back a reference
        await asyncio.sleep(delay_seconds)
        transaction_id = str(uuid.uuid4())
        logger.info("payment_simulated", amount=str(amount), transaction_id=transaction_id)
        return transaction_id
