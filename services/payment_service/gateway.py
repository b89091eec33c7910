from shared.config.settings import PAYMENT_REDIRECT_BASE


class PaystackStub:
    """
    Stand-in for the Paystack transaction API. The real gateway is not
    called; the front end is handed a redirect URL that carries the reference.
    """

    def __init__(self, redirect_base: str = PAYMENT_REDIRECT_BASE):
        self.redirect_base = redirect_base

    def authorization_url(self, reference: str, reinitialized: bool = False) -> str:
        kind = "reinit" if reinitialized else "mock"
        return f"{self.redirect_base}-{kind}-{reference}"


gateway = PaystackStub()
