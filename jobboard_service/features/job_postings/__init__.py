"""Job postings feature: recruiter management and the public job board."""
