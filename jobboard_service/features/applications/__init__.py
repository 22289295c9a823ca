"""Job applications: candidates apply and withdraw, recruiters review."""
