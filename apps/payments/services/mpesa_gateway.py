"""
M-Pesa C2B API client (Vodacom / Movitel).
"""
from dataclasses import dataclass, field
from typing import Dict, Optional
import logging
import re
import time

import certifi
import requests

from .mpesa_config import ProviderCredentials

logger = logging.getLogger(__name__)

SUCCESS_RESPONSE_CODE = 'INS-0'
MOCK_TRANSACTION_PREFIX = 'MOCK_TXN_'
MOZAMBIQUE_COUNTRY_CODE = '258'
MOZAMBIQUE_MOBILE_PREFIXES = ('84', '85', '86', '87')


def format_phone_number(phone: str) -> str:
    """Normalize a Mozambican mobile number to 258XXXXXXXXX"""
    digits = re.sub(r'\D', '', phone or '')
    if digits.startswith(MOZAMBIQUE_COUNTRY_CODE):
        return digits
    if digits.startswith(MOZAMBIQUE_MOBILE_PREFIXES) or len(digits) == 9:
        return MOZAMBIQUE_COUNTRY_CODE + digits
    return digits


def current_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class GatewayResult:
    success: bool
    transaction_id: str = ''
    conversation_id: str = ''
    response_code: str = ''
    response_description: str = ''
    error: Optional[str] = None
    raw: Dict = field(default_factory=dict)

    def as_metadata(self) -> Dict:
        return {
            'success': self.success,
            'transactionId': self.transaction_id,
            'conversationId': self.conversation_id,
            'responseCode': self.response_code,
            'responseDescription': self.response_description,
        }


class MpesaGateway:
    """Sends C2B single stage payment requests; sandbox providers get a synthetic answer"""

    C2B_PATH = 'c2bpayment/singleStage/'

    def __init__(self, timeout: int = 30):
        self.timeout = timeout
        self.verify_ssl = certifi.where()

    def c2b_payment(self, credentials: ProviderCredentials, *, amount, phone: str,
                    transaction_reference: str, conversation_id: str, description: str) -> GatewayResult:
        payload = {
            'input_ServiceProviderCode': credentials.service_provider_code,
            'input_CustomerMSISDN': phone,
            'input_Amount': str(amount),
            'input_TransactionReference': transaction_reference,
            'input_ThirdPartyConversationID': conversation_id,
            'input_PurchasedItemsDesc': description,
        }

        if not credentials.is_live:
            logger.info(f"M-Pesa sandbox ({credentials.name}): mocking payment {transaction_reference}")
            return GatewayResult(
                success=True,
                transaction_id=f"{MOCK_TRANSACTION_PREFIX}{current_millis()}",
                conversation_id=conversation_id,
                response_code=SUCCESS_RESPONSE_CODE,
                response_description='Payment processed successfully (SANDBOX)',
            )

        url = f"{credentials.base_url.rstrip('/')}/{self.C2B_PATH}"
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f"Bearer {credentials.api_key}",
            'Origin': '*',
        }

        try:
            response = requests.post(url, json=payload, headers=headers, timeout=self.timeout, verify=self.verify_ssl)
        except requests.RequestException as e:
            logger.error(f"M-Pesa request to {credentials.name} failed: {e}")
            return GatewayResult(success=False, error=str(e) or 'Network error')

        try:
            data = response.json()
        except ValueError:
            data = {}

        description_text = data.get('output_ResponseDesc', '')
        if not response.ok:
            logger.warning(f"M-Pesa {credentials.name} rejected {transaction_reference}: "
                           f"HTTP {response.status_code} {description_text}")
            return GatewayResult(
                success=False,
                response_code=data.get('output_ResponseCode', ''),
                response_description=description_text,
                error=description_text or 'API call failed',
                raw=data,
            )

        return GatewayResult(
            success=True,
            transaction_id=data.get('output_TransactionID', ''),
            conversation_id=data.get('output_ConversationID', conversation_id),
            response_code=data.get('output_ResponseCode', ''),
            response_description=description_text,
            raw=data,
        )
