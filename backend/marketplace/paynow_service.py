from paynow import Paynow
from django.conf import settings
import logging

from pricing.fees import calculate_platform_fee

logger = logging.getLogger(__name__)

PAID_STATUSES = ('paid', 'awaiting delivery', 'delivered')


class PaynowService:
    """
    Escrow payments for matches. The requester pays reward + platform fee up
    front; the traveler is paid out when delivery is confirmed (or auto-released).
    """
    def __init__(self, client=None):
        self.paynow = client or Paynow(
            settings.PAYNOW_INTEGRATION_ID,
            settings.PAYNOW_INTEGRATION_KEY,
            settings.PAYNOW_RETURN_URL,
            settings.PAYNOW_RESULT_URL,
        )

    def escrow_amount(self, match, is_premium=False):
        reward = float(match.reward_amount)
        return reward, calculate_platform_fee(reward, is_premium)

    def initiate_escrow(self, match, email, is_premium=False):
        """
        Create a new escrow payment in Paynow
        """
        reward, platform_fee = self.escrow_amount(match, is_premium)
        payment = self.paynow.create_payment(f'Match #{match.id}', email)
        payment.add('Delivery reward (held in escrow)', reward)
        if platform_fee > 0:
            payment.add('Platform fee', platform_fee)

        try:
            response = self.paynow.send(payment)
        except Exception as e:
            logger.error("Paynow exception for match %s: %s", match.id, e)
            return {'success': False, 'error': str(e)}

        if response.success:
            return {
                'success': True,
                'poll_url': response.poll_url,
                'redirect_url': response.redirect_url,
                'amount': round(reward + platform_fee, 2),
                'platform_fee': platform_fee,
            }
        logger.warning("Paynow rejected escrow for match %s: %s", match.id, getattr(response, 'error', None))
        return {'success': False, 'error': getattr(response, 'error', None) or "Paynow error"}

    def check_status(self, poll_url):
        """
        Check the status of a transaction
        """
        try:
            status = self.paynow.check_transaction_status(poll_url)
        except Exception as e:
            logger.error("Paynow status check failed for %s: %s", poll_url, e)
            return {'success': False, 'error': str(e)}

        paid = str(status.status).lower() in PAID_STATUSES
        return {'success': True, 'status': status.status, 'paid': paid}
