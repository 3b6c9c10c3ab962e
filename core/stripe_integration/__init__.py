"""
Stripe Integration Package
==========================

Payment-to-enrollment reconciliation on top of Stripe hosted Checkout.

Flow
----
1. CheckoutInitiator (services.py) creates a Checkout Session and one
   `pending` PaymentRecord per purchased item.
2. Stripe redirects the customer to the frontend success page with the
   session id; the page calls `/api/payments/success/` (reconciliation.py)
   which runs the PaymentVerifier once.
3. PaymentVerifier confirms `paid` with Stripe, completes the ledger rows,
   marks registration fees as paid and enrolls purchased courses.
4. The `checkout.session.completed` webhook (signals.py, via dj-stripe)
   runs the same reconciliation in case the redirect never happens.

Known gaps
----------
- A Checkout Session whose ledger rows fail to insert is left orphaned
  (logged, not cancelled).
- Abandoned sessions keep their rows `pending`; there is no expiry job.

Structure
---------
- apps.py            → App configuration (`StripeIntegrationConfig`)
- exceptions.py      → PaymentError hierarchy (status code per error)
- gateway.py         → Stripe SDK adapter
- models.py          → PaymentRecord ledger
- services.py        → CheckoutInitiator / PaymentVerifier
- reconciliation.py  → success page state machine
- views.py / urls.py → `/api/payments/` endpoints
- signals.py         → webhook handlers (Event post-processing)
"""
