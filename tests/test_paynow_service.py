import requests

from marketplace.paynow_service import PaynowService

POLL_URL = "https://www.paynow.co.zw/Interface/CheckPayment/?guid=abc"


class FakeStatus:
    def __init__(self, status):
        self.status = status


class FakePaynow:
    def __init__(self, status=None, error=None):
        self._status = status
        self._error = error
        self.polled = []

    def check_transaction_status(self, poll_url):
        self.polled.append(poll_url)
        if self._error:
            raise self._error
        return FakeStatus(self._status)


def test_paid_status():
    client = FakePaynow(status="Paid")
    result = PaynowService(client=client).check_status(POLL_URL)

    assert result == {'success': True, 'status': "Paid", 'paid': True}
    assert client.polled == [POLL_URL]


def test_pending_status_is_not_paid():
    result = PaynowService(client=FakePaynow(status="Sent")).check_status(POLL_URL)
    assert result['success']
    assert not result['paid']


def test_paynow_failure_is_logged_not_raised(caplog):
    client = FakePaynow(error=requests.ConnectionError("paynow down"))

    result = PaynowService(client=client).check_status(POLL_URL)

    assert result == {'success': False, 'error': "paynow down"}
    assert "status check failed" in caplog.text
